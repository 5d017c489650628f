#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from pandas import Series

from logbookio import tools
from logbookio._types.base import SeriesSubclass, series_property


REGISTRY = {}    # grows at import-time via the below metaclass


class SpecialRegistrar(type):
    def __init__(cls, name, bases, namespace):
        if not name.startswith('_') and name != 'SpecialColumn':
            REGISTRY[cls.colname] = cls
        super().__init__(name, bases, namespace)


class SpecialColumn(SeriesSubclass, metaclass=SpecialRegistrar):
    _metadata = ['colname', 'base_unit']

    def __init__(self, data, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        self.name = self.__class__.colname     # use *class* attribute


# ----------------------------------------------------------
# NOTE: subclasses should follow the structure...
#   + classmethods (i.e. alternative constructors; private!)
#   + general methods
#   + properties
# ----------------------------------------------------------


class Distance(SpecialColumn):
    colname = 'dist'
    base_unit = 'm'

    @series_property
    def km(self):
        """ metres --> kilometres """
        return self / 1000

    @series_property
    def miles(self):
        """ metres --> miles """
        return self / 1000 * 0.621371


class _Duration(SpecialColumn):
    base_unit = 'timedelta'

    @series_property
    def seconds(self):
        """ timedelta --> whole seconds """
        return self.dt.total_seconds() // 1


class WorkTime(_Duration):
    colname = 'work_time'


class RestTime(_Duration):
    colname = 'rest_time'


class HeartRate(SpecialColumn):
    colname = 'hr'
    base_unit = 'bpm'


class StrokeRate(SpecialColumn):
    colname = 'spm'
    base_unit = 'strokes/min'


class Pace(_Duration):
    """Average time per 500 m split."""
    colname = 'pace'


class Power(SpecialColumn):
    colname = 'pwr'
    base_unit = 'watts'

    def to_cal_hr(self, weight_kg=None):
        """Calories per hour; weight corrected if `weight_kg` is given."""
        if weight_kg is None:
            cal_hr = tools.cal_hr(self.values)
        else:
            cal_hr = tools.cal_hr_weight_corrected(self.values, weight_kg)
        return Series(cal_hr, index=self.index, name='cal_hr')
