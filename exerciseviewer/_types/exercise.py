#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The normalised exercise record produced by every decoder.

Optional blocks (speed, altitude, ...) are ``None`` when the device did not
record them. Per-sample fields that a device did not record are ``None``
too; "unknown" aggregate values inside a present block are zeros.

"""
from enum import Enum

from exerciseviewer._util.exceptions import CorruptFileError


class ExerciseFileType(Enum):
    POLAR_HSR = 'hsr'
    POLAR_HRM = 'hrm'
    POLAR_SRD = 'srd'
    POLAR_F6RAW = 'frd'
    GARMIN_TCX = 'tcx'
    GARMIN_FIT = 'fit'


class Record:
    """Slotted value object.

    Records compare equal slot by slot and iterate as (name, value) pairs,
    which makes ``dict(record)`` a handy way of looking at one.
    """
    __slots__ = tuple()

    def __iter__(self):
        for name in self.__slots__:
            yield name, getattr(self, name)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name)
                   for name in self.__slots__)

    def __repr__(self):
        fields = ', '.join('%s=%r' % pair for pair in self)
        return '%s(%s)' % (type(self).__name__, fields)


class Position(Record):
    __slots__ = ('latitude', 'longitude')

    def __init__(self, latitude, longitude):
        self.latitude, self.longitude = latitude, longitude


class RecordingMode(Record):
    __slots__ = ('heart_rate', 'speed', 'cadence', 'altitude', 'power',
                 'location', 'temperature', 'interval_training',
                 'bike_number')

    def __init__(self, *, heart_rate=False, speed=False, cadence=False,
                 altitude=False, power=False, location=False,
                 temperature=False, interval_training=False, bike_number=0):
        self.heart_rate = heart_rate
        self.speed = speed
        self.cadence = cadence
        self.altitude = altitude
        self.power = power
        self.location = location
        self.temperature = temperature
        self.interval_training = interval_training
        self.bike_number = bike_number


class HeartRateLimit(Record):
    __slots__ = ('lower_heart_rate', 'upper_heart_rate', 'absolute_range',
                 'time_below', 'time_within', 'time_above')

    def __init__(self, lower_heart_rate, upper_heart_rate, *,
                 absolute_range=True, time_below=0, time_within=0,
                 time_above=0):
        self.lower_heart_rate = lower_heart_rate
        self.upper_heart_rate = upper_heart_rate
        self.absolute_range = absolute_range
        self.time_below = time_below      # seconds
        self.time_within = time_within
        self.time_above = time_above


# Exercise summary blocks
# -----------------------
class ExerciseSpeed(Record):
    __slots__ = ('distance', 'speed_avg', 'speed_max', 'bike_counter')

    def __init__(self, distance=0, speed_avg=0.0, speed_max=0.0,
                 bike_counter=None):
        self.distance = distance        # m
        self.speed_avg = speed_avg      # km/h
        self.speed_max = speed_max
        self.bike_counter = bike_counter


class ExerciseAltitude(Record):
    __slots__ = ('altitude_min', 'altitude_avg', 'altitude_max', 'ascent')

    def __init__(self, altitude_min=0, altitude_avg=0, altitude_max=0,
                 ascent=0):
        self.altitude_min = altitude_min
        self.altitude_avg = altitude_avg
        self.altitude_max = altitude_max
        self.ascent = ascent


class ExerciseCadence(Record):
    __slots__ = ('cadence_avg', 'cadence_max')

    def __init__(self, cadence_avg=0, cadence_max=0):
        self.cadence_avg, self.cadence_max = cadence_avg, cadence_max


class ExerciseTemperature(Record):
    __slots__ = ('temperature_min', 'temperature_avg', 'temperature_max')

    def __init__(self, temperature_min=0, temperature_avg=0,
                 temperature_max=0):
        self.temperature_min = temperature_min
        self.temperature_avg = temperature_avg
        self.temperature_max = temperature_max


class ExercisePower(Record):
    __slots__ = ('power_avg', 'power_max', 'power_normalized')

    def __init__(self, power_avg=0, power_max=0, power_normalized=0):
        self.power_avg = power_avg
        self.power_max = power_max
        self.power_normalized = power_normalized


# Laps
# ----
class LapSpeed(Record):
    __slots__ = ('distance', 'speed_avg', 'speed_end')

    def __init__(self, distance=0, speed_avg=0.0, speed_end=0.0):
        self.distance = distance        # m, from the exercise start
        self.speed_avg = speed_avg      # km/h, this lap only
        self.speed_end = speed_end      # km/h, at the split


class LapAltitude(Record):
    __slots__ = ('altitude', 'ascent')

    def __init__(self, altitude=0, ascent=0):
        self.altitude, self.ascent = altitude, ascent


class LapTemperature(Record):
    __slots__ = ('temperature',)

    def __init__(self, temperature=0):
        self.temperature = temperature


class Lap(Record):
    __slots__ = ('time_split', 'heart_rate_avg', 'heart_rate_max',
                 'heart_rate_split', 'speed', 'altitude', 'temperature',
                 'position_split', 'note')

    def __init__(self, time_split, *, heart_rate_avg=None,
                 heart_rate_max=None, heart_rate_split=None, speed=None,
                 altitude=None, temperature=None, position_split=None,
                 note=None):
        self.time_split = time_split    # 1/10 s from the exercise start
        self.heart_rate_avg = heart_rate_avg
        self.heart_rate_max = heart_rate_max
        self.heart_rate_split = heart_rate_split
        self.speed = speed
        self.altitude = altitude
        self.temperature = temperature
        self.position_split = position_split
        self.note = note


# Samples
# -------
class ExerciseSample(Record):
    __slots__ = ('timestamp', 'heart_rate', 'distance', 'speed', 'altitude',
                 'cadence', 'temperature', 'power', 'position')

    def __init__(self, timestamp, *, heart_rate=None, distance=None,
                 speed=None, altitude=None, cadence=None, temperature=None,
                 power=None, position=None):
        self.timestamp = timestamp      # ms from the exercise start
        self.heart_rate = heart_rate
        self.distance = distance
        self.speed = speed
        self.altitude = altitude
        self.cadence = cadence
        self.temperature = temperature
        self.power = power
        self.position = position


class Exercise(Record):
    __slots__ = ('file_type', 'device_name', 'date_time', 'duration',
                 'recording_interval', 'recording_mode', 'heart_rate_avg',
                 'heart_rate_max', 'energy', 'energy_total',
                 'sum_exercise_time', 'sum_ride_time', 'odometer',
                 'speed', 'altitude', 'cadence', 'temperature', 'power',
                 'heart_rate_limits', 'lap_list', 'sample_list',
                 'user_id', 'exercise_type', 'sport', 'note')

    def __init__(self, file_type):
        self.file_type = file_type
        self.device_name = None
        self.date_time = None
        self.duration = 0               # 1/10 s
        self.recording_interval = None  # s
        self.recording_mode = RecordingMode()
        self.heart_rate_avg = 0
        self.heart_rate_max = 0
        self.energy = 0                 # kcal
        self.energy_total = 0
        self.sum_exercise_time = 0      # minutes
        self.sum_ride_time = 0
        self.odometer = 0               # km
        self.speed = None
        self.altitude = None
        self.cadence = None
        self.temperature = None
        self.power = None
        self.heart_rate_limits = []
        self.lap_list = []
        self.sample_list = []
        self.user_id = None
        self.exercise_type = None
        self.sport = None
        self.note = None


def has_any(samples, name):
    """Did any sample record a value for `name`?"""
    return any(getattr(sample, name) is not None for sample in samples)


def finish(exercise):
    """Check the record's invariants and set its recording mode flags.

    Every decoder passes its record through here just before handing it
    over. The bike number and interval training flags are left alone as
    only the device can tell us those.

    Raises
    ------
    CorruptFileError
        For negative durations, inverted zones or unordered samples.
    """
    if exercise.duration is None or exercise.duration < 0:
        raise CorruptFileError('negative exercise duration')

    for limit in exercise.heart_rate_limits:
        if limit.lower_heart_rate > limit.upper_heart_rate:
            raise CorruptFileError(
                'inverted heart rate zone (%d > %d)'
                % (limit.lower_heart_rate, limit.upper_heart_rate))

    samples = exercise.sample_list
    timestamps = [sample.timestamp for sample in samples]
    if any(later < earlier for earlier, later
           in zip(timestamps[:-1], timestamps[1:])):
        raise CorruptFileError('samples are not ordered by time')

    mode = exercise.recording_mode
    mode.heart_rate = bool(exercise.heart_rate_avg or
                           exercise.heart_rate_max or
                           has_any(samples, 'heart_rate'))
    mode.speed = exercise.speed is not None
    mode.altitude = exercise.altitude is not None
    mode.cadence = exercise.cadence is not None
    mode.temperature = exercise.temperature is not None
    mode.power = exercise.power is not None
    mode.location = has_any(samples, 'position')

    return exercise
