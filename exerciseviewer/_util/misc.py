#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
General utilities to be used internally.

"""
from math import isnan

import pytz

from exerciseviewer._util.exceptions import ExerciseFileNotFoundError


TZ_UTC = pytz.timezone('UTC')


def load_file(file_path):
    """Slurp a whole file; the handle is closed before we return."""
    try:
        with open(file_path, 'rb') as reader:
            return reader.read()
    except FileNotFoundError as e:
        raise ExerciseFileNotFoundError(file_path) from e


def round_int(value, default=0):
    """Round to the nearest int, with `default` for None/NaN."""
    if value is None or isnan(value):
        return default
    return int(round(value))


def to_civil_time(utc_time, tz_str=None):
    """Naive UTC datetime --> naive wall-clock time in `tz_str`.

    Without a zone name the time is left in UTC.
    """
    timezone = pytz.timezone(tz_str) if tz_str is not None else TZ_UTC
    aware = TZ_UTC.localize(utc_time).astimezone(timezone)
    return aware.replace(tzinfo=None)
