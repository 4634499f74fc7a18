#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from exerciseviewer._types import Exercise, ExerciseFileType
from exerciseviewer._types.exercise import finish
from exerciseviewer._util import drydoc, polar
from exerciseviewer._util.bytestream import ByteStream
from exerciseviewer._util.misc import load_file


# Absolute offsets into the frame
OFFSET_USER = 0x02
OFFSET_START = 0x04
OFFSET_DURATION = 0x0A
OFFSET_HEART_RATE = 0x0E
OFFSET_ZONES = 0x12
OFFSET_ENERGY_TOTAL = 0x36
OFFSET_EXERCISE_TIME = 0x3A
OFFSET_RIDE_TIME = 0x3D     # F6 only from here on
OFFSET_ODOMETER = 0x40

ZONE_COUNT = 4


class F6Frame:
    """The fixed-layout memory dump of a Polar F6/F11/FA20 unit.

    F11 frames stop after the cumulative exercise time; everything past the
    end of the frame reads as zero.
    """
    __slots__ = ('frame_length', 'user_id', 'exercise_type', 'start',
                 'duration', 'hr_avg', 'hr_max', 'energy', 'zones',
                 'energy_total', 'exercise_time', 'ride_time', 'odometer')

    def __init__(self, stream):
        stream.seek(0)
        self.frame_length, self.user_id, self.exercise_type = (
            stream.unpack('<H2B'))

        stream.seek(OFFSET_START)
        self.start = polar.read_datetime(stream)
        self.duration = polar.read_duration(stream)

        stream.seek(OFFSET_HEART_RATE)
        self.hr_avg, self.hr_max, self.energy = stream.unpack('<2BH')

        stream.seek(OFFSET_ZONES)
        self.zones = polar.read_zones(stream, ZONE_COUNT)

        self.energy_total = polar.read_or_zero(
            stream, OFFSET_ENERGY_TOTAL, 4, lambda s: s.read_u32())
        self.exercise_time = polar.read_or_zero(
            stream, OFFSET_EXERCISE_TIME, 3, polar.read_hours_minutes)
        self.ride_time = polar.read_or_zero(
            stream, OFFSET_RIDE_TIME, 3, polar.read_hours_minutes)
        self.odometer = polar.read_or_zero(
            stream, OFFSET_ODOMETER, 4, lambda s: s.read_u32())


def format_exercise(frame):
    exercise = Exercise(ExerciseFileType.POLAR_F6RAW)
    exercise.user_id = frame.user_id
    exercise.exercise_type = frame.exercise_type
    exercise.date_time = frame.start
    exercise.duration = frame.duration
    exercise.recording_interval = 0   # no samples are recorded
    exercise.heart_rate_avg = frame.hr_avg
    exercise.heart_rate_max = frame.hr_max
    exercise.energy = frame.energy
    exercise.energy_total = frame.energy_total
    exercise.sum_exercise_time = frame.exercise_time
    exercise.sum_ride_time = frame.ride_time
    exercise.odometer = frame.odometer
    exercise.heart_rate_limits = frame.zones
    return finish(exercise)


@drydoc.decode
def decode(data, **ignored):
    return format_exercise(F6Frame(ByteStream(data)))


@drydoc.read
def read_and_format(file_path, **options):
    return decode(load_file(file_path), **options)
