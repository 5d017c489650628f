#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
General tools that complement the API.

Everything here works equally on plain numbers and on numpy arrays (or
pandas Series), so the same formulas back both the per-workout methods
and the column methods of `LogbookData`.

"""
import numpy as np


SPLIT_METRES = 500        # the monitor displays pace per 500 m
WATTS_FACTOR = 2.8        # P = 2.8 / pace**3, pace in sec/m
KCAL_PER_WATT = 3.44
KCAL_BASELINE = 300.0     # kcal/h burnt by the "standard" 175 lb rower
LB_PER_KG = 2.2046
KCAL_PER_LB = 1.714


def pace_sec_per_metre(seconds, metres):
    """Average pace over a distance.

    Note that with plain numbers a zero distance raises ZeroDivisionError;
    callers are expected to guard against it.
    """
    return seconds / metres


def watts(pace):
    """Concept2 power from pace.

    Examples
    --------
        >>> round(watts(0.24), 1)
        202.5
    """
    return WATTS_FACTOR / pace**3


def cal_hr(power):
    """Calories burnt per hour for a given power."""
    return power * KCAL_PER_WATT + KCAL_BASELINE


def cal_hr_weight_corrected(power, weight_kg):
    """Calories per hour, replacing the baseline with the rower's weight."""
    return power * KCAL_PER_WATT + KCAL_PER_LB * LB_PER_KG * weight_kg


def split_pace_ms(millis, metres):
    """Average milliseconds per 500 m split.

    The distance is counted in whole splits and never less than one, so
    short pieces report their whole duration.

        >>> int(split_pace_ms(480000, 2000))
        120000
    """
    splits = np.maximum(np.floor_divide(metres, SPLIT_METRES), 1)
    return np.floor_divide(millis, splits)


def energy_kwh(power, seconds):
    """Mechanical work (kWh) done at a constant power."""
    return power * seconds / 3600000


def energy_kcal(calories_per_hour, seconds):
    return calories_per_hour * seconds / 3600
