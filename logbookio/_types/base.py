#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Plumbing for pandas subclasses that carry extra attributes around.

pandas builds new objects for nearly every operation; `_constructor` keeps
them our type and `__finalize__` copies whatever is named in `_metadata`.

"""
from pandas import DataFrame, Series


__all__ = ('DataFrameSubclass', 'SeriesSubclass',  # using * import elsewhere
           'series_property')


class _KeepsMetadata:
    _metadata = []

    @property
    def _constructor(self):
        return type(self)

    def __finalize__(self, other, method=None, **kwargs):
        for attr in self._metadata:
            object.__setattr__(self, attr, getattr(other, attr, None))
        return self


class DataFrameSubclass(_KeepsMetadata, DataFrame):
    pass


class SeriesSubclass(_KeepsMetadata, Series):
    pass


class series_property:
    """Like `property`, but the value comes back as a plain Series named
    after the getter (so unit conversions don't pose as special columns).
    """
    def __init__(self, fget):
        self.fget = fget
        self.__doc__ = fget.__doc__

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return Series(self.fget(obj), name=self.fget.__name__)
