#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from exerciseviewer._types import (
    ActivityData, Exercise, ExerciseAltitude, ExerciseCadence,
    ExerciseFileType, ExercisePower, ExerciseSample, ExerciseSpeed, Lap,
    LapAltitude, LapSpeed)
from exerciseviewer._types.exercise import finish
from exerciseviewer._util import drydoc, polar
from exerciseviewer._util.bytestream import ByteStream
from exerciseviewer._util.exceptions import BadHeaderError, TruncatedInputError
from exerciseviewer._util.misc import load_file, round_int


HEADER_SIZE = 0x60
ZONE_COUNT = 3

RECORDING_INTERVALS = (1, 2, 5, 15, 60)   # seconds

# Recording mode bits
MODE_ALTITUDE = 0x01
MODE_SPEED = 0x02
MODE_CADENCE = 0x04
MODE_POWER = 0x08
MODE_INTERVAL = 0x10
MODE_BIKE_SHIFT = 5
MODE_BIKE_MASK = 0x03


class SRDMode:
    __slots__ = ('altitude', 'speed', 'cadence', 'power', 'interval',
                 'bike_number')

    def __init__(self, flags):
        self.altitude = bool(flags & MODE_ALTITUDE)
        self.speed = bool(flags & MODE_SPEED)
        self.cadence = bool(flags & MODE_CADENCE)
        self.power = bool(flags & MODE_POWER)
        self.interval = bool(flags & MODE_INTERVAL)
        self.bike_number = (flags >> MODE_BIKE_SHIFT) & MODE_BIKE_MASK


class SRDHeader:
    __slots__ = ('file_size', 'user_id', 'exercise_type', 'start', 'duration',
                 'hr_avg', 'hr_max', 'recording_interval', 'mode',
                 'lap_count', 'sample_count', 'energy', 'energy_total',
                 'exercise_time', 'ride_time', 'odometer', 'distance',
                 'speed_avg', 'speed_max', 'cadence_avg', 'cadence_max',
                 'altitude_min', 'altitude_avg', 'altitude_max', 'ascent',
                 'power_avg', 'power_max', 'zones')

    def __init__(self, stream):
        self.file_size, self.user_id, self.exercise_type = (
            stream.unpack('<H2B'))
        if self.file_size > len(stream):
            raise TruncatedInputError(
                'file says %d bytes, only %d there'
                % (self.file_size, len(stream)))

        self.start = polar.read_datetime(stream)
        self.duration = polar.read_duration(stream)

        (self.hr_avg, self.hr_max, self.recording_interval, mode,
         self.lap_count, self.sample_count, self.energy,
         self.energy_total) = stream.unpack('<5BxHHI')

        if self.recording_interval not in RECORDING_INTERVALS:
            raise BadHeaderError(
                'invalid recording interval (%d)' % self.recording_interval)
        self.mode = SRDMode(mode)

        self.exercise_time = polar.read_hours_minutes(stream)
        self.ride_time = polar.read_hours_minutes(stream)

        (self.odometer, self.distance, speed_avg, speed_max,
         self.cadence_avg, self.cadence_max) = stream.unpack('<2I2H2B')
        self.speed_avg = polar.speed(speed_avg)
        self.speed_max = polar.speed(speed_max)

        self.altitude_min, self.altitude_avg, self.altitude_max = (
            polar.altitude(word) for word in stream.unpack('<3H'))
        self.ascent, self.power_avg, self.power_max = stream.unpack('<3H')

        self.zones = polar.read_zones(stream, ZONE_COUNT)
        stream.seek(HEADER_SIZE)


class SRDLap:
    __slots__ = ('split', 'hr_split', 'hr_avg', 'hr_max', 'altitude',
                 'ascent', 'distance', 'speed')

    def __init__(self, stream, mode):
        self.split = polar.read_duration(stream)
        self.hr_split, self.hr_avg, self.hr_max = stream.unpack('<3B')
        self.altitude = self.ascent = self.distance = self.speed = None

        if mode.altitude:
            word, self.ascent = stream.unpack('<2H')
            self.altitude = polar.altitude(word)
        if mode.speed:
            self.distance, speed = stream.unpack('<IH')
            self.speed = polar.speed(speed)


class SRDSample:
    __slots__ = ('hr', 'altitude', 'speed', 'cadence', 'power')

    def __init__(self, stream, mode):
        self.hr = stream.read_u8()
        self.altitude = self.speed = self.cadence = self.power = None

        if mode.altitude:
            self.altitude = polar.altitude(stream.read_u16())
        if mode.speed:
            self.speed = polar.speed(stream.read_u16())
        if mode.cadence:
            self.cadence = stream.read_u8()
        if mode.power:
            self.power = stream.read_u16()


def make_samples(raw_samples, interval):
    samples = []
    metres = 0.0
    for i, raw in enumerate(raw_samples):
        distance = None
        if raw.speed is not None:
            # Distance covered since the previous sample at this speed.
            if i:
                metres += raw.speed / 3.6 * interval
            distance = round_int(metres)
        samples.append(ExerciseSample(
            i * interval * 1000, heart_rate=raw.hr, distance=distance,
            speed=raw.speed, altitude=raw.altitude, cadence=raw.cadence,
            power=raw.power))
    return samples


def make_laps(raw_laps, mode):
    laps = []
    previous = [None] + raw_laps[:-1]
    for before, raw in zip(previous, raw_laps):
        lap = Lap(raw.split, heart_rate_avg=raw.hr_avg,
                  heart_rate_max=raw.hr_max, heart_rate_split=raw.hr_split)

        if mode.altitude:
            lap.altitude = LapAltitude(raw.altitude, raw.ascent)

        if mode.speed:
            start_time = before.split if before else 0
            start_distance = before.distance if before else 0
            seconds = (raw.split - start_time) / 10
            lap_speed = 0.0
            if seconds > 0:
                lap_speed = (raw.distance - start_distance) / seconds * 3.6
            lap.speed = LapSpeed(raw.distance, lap_speed, raw.speed)

        laps.append(lap)
    return laps


def format_exercise(header, raw_laps, raw_samples):
    mode = header.mode
    exercise = Exercise(ExerciseFileType.POLAR_SRD)
    exercise.user_id = header.user_id
    exercise.exercise_type = header.exercise_type
    exercise.date_time = header.start
    exercise.duration = header.duration
    exercise.recording_interval = header.recording_interval
    exercise.heart_rate_avg = header.hr_avg
    exercise.heart_rate_max = header.hr_max
    exercise.energy = header.energy
    exercise.energy_total = header.energy_total
    exercise.sum_exercise_time = header.exercise_time
    exercise.sum_ride_time = header.ride_time
    exercise.odometer = header.odometer
    exercise.heart_rate_limits = header.zones

    exercise.recording_mode.interval_training = mode.interval
    exercise.recording_mode.bike_number = mode.bike_number

    if mode.speed:
        exercise.speed = ExerciseSpeed(header.distance, header.speed_avg,
                                       header.speed_max)
    if mode.altitude:
        exercise.altitude = ExerciseAltitude(
            header.altitude_min, header.altitude_avg, header.altitude_max,
            header.ascent)
    if mode.cadence:
        exercise.cadence = ExerciseCadence(header.cadence_avg,
                                           header.cadence_max)

    exercise.sample_list = make_samples(raw_samples,
                                        header.recording_interval)
    exercise.lap_list = make_laps(raw_laps, mode)

    if mode.power:
        normalised = 0
        if exercise.sample_list:
            normalised = round_int(
                ActivityData.from_exercise(exercise).normpwr())
        exercise.power = ExercisePower(header.power_avg, header.power_max,
                                       normalised)

    return finish(exercise)


@drydoc.decode
def decode(data, **ignored):
    stream = ByteStream(data)
    header = SRDHeader(stream)
    raw_laps = [SRDLap(stream, header.mode)
                for _ in range(header.lap_count)]
    raw_samples = [SRDSample(stream, header.mode)
                   for _ in range(header.sample_count)]
    return format_exercise(header, raw_laps, raw_samples)


@drydoc.read
def read_and_format(file_path, **options):
    return decode(load_file(file_path), **options)
