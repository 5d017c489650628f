#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from functools import wraps

import numpy as np
from pandas import Series, Timedelta, to_timedelta

from logbookio import tools
from logbookio._util import exceptions
from logbookio._types.base import DataFrameSubclass
from logbookio._types import columns as special_columns


def new_column_sugar(needs: tuple, name=None):
    """Decorator for certain methods of LogbookData that create new columns
    using the special column types.

    Parameters
    ----------
    needs : tuple
        A tuple of column names.
    name : str, optional
        The name for the returned Series object. If this is the name of a
        special column, that type is returned instead.

    Returns
    -------
    Series
        Suitable for joining to the existing data.

    Raises
    ------
    RequiredColumnError
        If a column specified in `needs` is not present.
    """
    def real_decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            for need in needs:
                if need not in self:
                    raise exceptions.RequiredColumnError(need)

            # Fine, so construct the new Series.
            out = func(self, *args, **kwargs)
            if name in special_columns.REGISTRY:
                return special_columns.REGISTRY[name](out, index=self.index)
            return Series(out, index=self.index, name=name)
        return wrapper
    return real_decorator


class LogbookData(DataFrameSubclass):
    """A logbook as a table: one row per workout, oldest first.

    Metrics are vectorised, so a zero distance gives ``inf``/``NaN`` here
    where the `Workout` methods would raise.
    """
    _metadata = ['user_name', 'user_id']

    def __getitem__(self, key):
        """Create the illusion of Series subclasses in the DataFrame."""
        item = super().__getitem__(key)
        if isinstance(key, str) and key in special_columns.REGISTRY:
            return special_columns.REGISTRY[key](item)
        return item

    @new_column_sugar(needs=('dist', 'work_time'), name='pwr')
    def watts(self):
        with np.errstate(divide='ignore', invalid='ignore'):
            pace = tools.pace_sec_per_metre(self._work_seconds(),
                                            self['dist'].values.astype(float))
            return tools.watts(pace)

    def cal_hr(self, weight_kg=None):
        """Calories per hour; weight corrected if `weight_kg` is given."""
        return self.watts().to_cal_hr(weight_kg)

    @new_column_sugar(needs=('dist', 'work_time'), name='pace')
    def pace(self):
        millis = (self['work_time'] // Timedelta(milliseconds=1)).values
        return to_timedelta(
            tools.split_pace_ms(millis, self['dist'].values), unit='ms')

    # Lifetime totals
    # ---------------
    def lifetime_meters(self):
        return int(self._try_get('dist').sum())

    def lifetime_kwh(self):
        secs = self._work_seconds()
        with np.errstate(invalid='ignore'):
            return float(np.nansum(tools.energy_kwh(self.watts().values, secs)))

    def lifetime_kcal(self):
        secs = self._work_seconds()
        with np.errstate(invalid='ignore'):
            return float(np.nansum(
                tools.energy_kcal(self.cal_hr().values, secs)))

    @property
    def first_workout(self):
        return self._try_get('datetime').iloc[0] if len(self) else None

    @property
    def last_workout(self):
        return self._try_get('datetime').iloc[-1] if len(self) else None

    # Private methods
    # ---------------
    def _finish_up(self, *, user=None):
        """A pseudo-init method, used internally."""
        # Keep timedelta dtypes even when a column is empty or all None.
        for key in ('work_time', 'rest_time'):
            if key in self:
                self[key] = to_timedelta(self[key])

        self.index = np.arange(1, len(self) + 1)
        self.index.name = 'workout'
        self.user_id, self.user_name = user if user else (None, None)

    def _work_seconds(self):
        """Whole seconds of work, as the monitor counts them."""
        return self._try_get('work_time').seconds.values

    def _try_get(self, key):
        """Try and get a required column from the data."""
        try:
            return self[key]
        except KeyError as e:
            raise exceptions.RequiredColumnError(key) from e
