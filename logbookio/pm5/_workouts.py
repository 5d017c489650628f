#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The normalised form of a decoded workout, independent of how it was stored
on the drive.

`Workout` and `WorkoutFrame` are immutable value types: they are built once
by the decoder and never touched again.

"""
from collections import namedtuple
from datetime import timedelta
from enum import IntEnum

from logbookio import tools


SECOND = timedelta(seconds=1)


class WorkoutType(IntEnum):
    FREE_ROW = 0x01
    SINGLE_DISTANCE = 0x03
    SINGLE_TIME = 0x05
    TIME_INTERVAL = 0x06
    DISTANCE_INTERVAL = 0x07
    VARIABLE_INTERVAL = 0x08
    SINGLE_CALORIE = 0x0A

    @property
    def display_name(self):
        return DISPLAY_NAMES[self]

    @property
    def is_interval(self):
        return self in (WorkoutType.TIME_INTERVAL,
                        WorkoutType.DISTANCE_INTERVAL,
                        WorkoutType.VARIABLE_INTERVAL)

    @property
    def is_distance_based(self):
        return self in (WorkoutType.FREE_ROW, WorkoutType.SINGLE_DISTANCE)

    def __str__(self):
        return self.display_name


DISPLAY_NAMES = {   # as shown on the monitor
    WorkoutType.FREE_ROW: 'Free Row',
    WorkoutType.SINGLE_DISTANCE: 'Distance',
    WorkoutType.SINGLE_TIME: 'Time',
    WorkoutType.TIME_INTERVAL: 'Time Interval',
    WorkoutType.DISTANCE_INTERVAL: 'Distance Interval',
    WorkoutType.VARIABLE_INTERVAL: 'Variable Interval',
    WorkoutType.SINGLE_CALORIE: 'Calories',
}


def format_duration(duration):
    """Render a duration like the monitor does.

    ``H:MM:SS.d`` beyond an hour, ``M:SS.d`` otherwise, where ``d`` is
    tenths of a second (truncated).

        >>> format_duration(timedelta(minutes=7, seconds=3.45))
        '7:03.4'
        >>> format_duration(timedelta(hours=1, seconds=61))
        '1:01:01.0'
    """
    secs = duration // SECOND
    tenths = duration.microseconds // 100000
    if secs > 3600:
        return '{}:{:02}:{:02}.{}'.format(
            secs // 3600, (secs // 60) % 60, secs % 60, tenths)
    else:
        return '{}:{:02}.{}'.format(secs // 60, secs % 60, tenths)


class _Effort:
    """Metrics shared by whole workouts and their frames.

    Subclasses say where their distance and work duration live through
    the `_metres` and `_work` properties.
    """
    __slots__ = ()

    def pace_seconds_per_distance(self):
        """Average sec/m over whole seconds of work.

        Raises ZeroDivisionError for a zero distance.
        """
        return tools.pace_sec_per_metre(self._work // SECOND, self._metres)

    def watts(self):
        return tools.watts(self.pace_seconds_per_distance())

    def cal_hr(self):
        return tools.cal_hr(self.watts())

    def cal_hr_weight_corrected(self, weight):
        """Calories per hour for a rower of `weight` kilograms."""
        return tools.cal_hr_weight_corrected(self.watts(), weight)

    def pace(self):
        """Average time per 500 m split."""
        millis = self._work // timedelta(milliseconds=1)
        return timedelta(
            milliseconds=int(tools.split_pace_ms(millis, self._metres)))

    def energy_kwh(self):
        return tools.energy_kwh(self.watts(), self._work // SECOND)

    def energy_kcal(self):
        return tools.energy_kcal(self.cal_hr(), self._work // SECOND)

    def work_duration_string(self):
        return format_duration(self._work)

    def rest_duration_string(self):
        if self._rest is None:
            return ''
        return format_duration(self._rest)

    def pace_string(self):
        return format_duration(self.pace())


class WorkoutFrame(_Effort, namedtuple('WorkoutFrame', (
        'distance', 'work_duration', 'rest_duration', 'spm',
        'work_heart_rate', 'rest_heart_rate'))):
    """One split (single workouts) or interval (interval workouts).

    Heart rates are None when no belt was worn.
    """
    __slots__ = ()

    @property
    def _metres(self):
        return self.distance

    @property
    def _work(self):
        return self.work_duration

    @property
    def _rest(self):
        return self.rest_duration


class Workout(_Effort, namedtuple('Workout', (
        'workout_type', 'serial_number', 'datetime', 'user_id', 'record_id',
        'total_distance', 'total_work_duration', 'total_rest_duration',
        'spm', 'frames'))):
    """A decoded workout.

    Attributes
    ----------
    workout_type : WorkoutType
    serial_number : int
        Serial number of the monitor that recorded the workout.
    datetime : datetime.datetime
        Naive local time, as set on the monitor.
    user_id, record_id : int
    total_distance : int
        Metres.
    total_work_duration : datetime.timedelta
    total_rest_duration : datetime.timedelta or None
        Only set for interval workouts.
    spm : int or None
        Only set for single workouts.
    frames : tuple of WorkoutFrame
        Splits for single workouts, intervals for interval workouts.
    """
    __slots__ = ()

    @property
    def _metres(self):
        return self.total_distance

    @property
    def _work(self):
        return self.total_work_duration

    @property
    def _rest(self):
        return self.total_rest_duration

    def heart_rate(self):
        """Mean working heart rate, or None unless every frame has one."""
        if not self.frames:
            return None

        rates = [frame.work_heart_rate for frame in self.frames]
        if any(rate is None for rate in rates):
            return None

        return sum(rates) // len(rates)
