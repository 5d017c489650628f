#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Translate the `_protocol` module functionality to be consistent with
this package's API.

"""
import pytz
from pandas import DataFrame

from logbookio.pm5._drive import Drive, USER_STATIC
from logbookio._types import LogbookData
from logbookio._util import drydoc


COLUMNS = ('datetime', 'type', 'serial', 'user_id', 'record_id', 'dist',
           'work_time', 'rest_time', 'spm', 'hr', 'splits')

FRAME_COLUMNS = ('dist', 'work_time', 'rest_time', 'spm', 'hr', 'pwr', 'pace')


def format_workout(workout, timezone=None):
    dt = workout.datetime
    if timezone is not None:
        dt = timezone.localize(dt)   # the monitor keeps local wall time

    return {
        'datetime': dt,
        'type': workout.workout_type.display_name,
        'serial': workout.serial_number,
        'user_id': workout.user_id,
        'record_id': workout.record_id,
        'dist': workout.total_distance,
        'work_time': workout.total_work_duration,
        'rest_time': workout.total_rest_duration,
        'spm': workout.spm,
        'hr': workout.heart_rate(),
        'splits': len(workout.frames),
    }


def _watts_or_none(effort):
    try:
        return effort.watts()
    except ZeroDivisionError:   # no distance, or under a second of work
        return None


def format_frame(frame):
    return {
        'dist': frame.distance,
        'work_time': frame.work_duration,
        'rest_time': frame.rest_duration,
        'spm': frame.spm,
        'hr': frame.work_heart_rate,
        'pwr': _watts_or_none(frame),
        'pace': frame.pace(),
    }


@drydoc.gen_records
def gen_records(drive_path, *, tz_str=None):
    timezone = pytz.timezone(tz_str) if tz_str is not None else None
    for workout in Drive(drive_path).workouts():
        yield format_workout(workout, timezone)


@drydoc.gen_frame_records
def gen_frame_records(workout):
    for frame in workout.frames:
        yield format_frame(frame)


def read_frames(workout):
    frames = DataFrame.from_records(gen_frame_records(workout),
                                    columns=FRAME_COLUMNS)
    frames.index = range(1, len(frames) + 1)
    frames.index.name = 'split'
    return frames


def read_and_format(drive_path, *, tz_str=None):
    data = LogbookData.from_records(gen_records(drive_path, tz_str=tz_str),
                                    columns=COLUMNS)

    drive = Drive(drive_path)
    user = None
    if drive.exists(USER_STATIC):
        user = drive.user()

    data._finish_up(user=user)

    return data
