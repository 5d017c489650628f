#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Avoid repeating documentation. A bit hacky but it will do.

Decorating a function with one of the functions below gives it that
function's docstring.

"""
import inspect


def _lend_doc(func):
    lender = inspect.stack()[1][3]
    func.__doc__ = globals()[lender].__doc__
    return func


def gen_records(func):
    """Generator function for iterating over the workouts on a drive.

    "Records" are dictionary objects representing a single workout; i.e. a
    row in a tabular representation. Note this can be passed to the
    `from_records` constructor method of `pandas.DataFrame`s.

    The whole logbook is decoded before the first record is yielded, so a
    damaged logbook raises `DecodeError` without producing any records.
    """
    return _lend_doc(func)


def gen_frame_records(func):
    """Generator function for iterating over the splits (or intervals) of a
    single workout, as records.

    Power is None where it can't be worked out, e.g. for a zero distance.
    """
    return _lend_doc(func)
