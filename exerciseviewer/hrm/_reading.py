#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from datetime import datetime, timedelta
import logging
import re

from exerciseviewer._types import (
    ActivityData, Exercise, ExerciseAltitude, ExerciseCadence,
    ExerciseFileType, ExercisePower, ExerciseSample, ExerciseSpeed,
    ExerciseTemperature, HeartRateLimit, Lap, LapAltitude, LapSpeed,
    LapTemperature)
from exerciseviewer._types.exercise import finish
from exerciseviewer._util import drydoc
from exerciseviewer._util.exceptions import BadMagicError, CorruptFileError
from exerciseviewer._util.misc import load_file, round_int
from exerciseviewer.tools import mps_to_kph


log = logging.getLogger(__name__)

SECTION = re.compile(r'^\[(?P<name>[^\]]+)\]$')

HRM_SECTIONS = ('Params', 'Note', 'IntTimes', 'IntNotes', 'HRData', 'Trip')

RR_INTERVAL = 238       # Interval value flagging R-R data
ROWS_PER_LAP = 5
ZONE_COUNT = 3
TRIP_ROWS = 8
TRIP_SPEED_SCALE = 128

MILE = 1.609344         # km
FOOT = 0.3048           # m

MONITORS = {
    1: 'Polar Sport Tester / Vantage XL',
    2: 'Polar Vantage NV (VNV)',
    3: 'Polar Accurex Plus',
    4: 'Polar XTrainer Plus',
    6: 'Polar S520',
    7: 'Polar Coach',
    8: 'Polar S210',
    9: 'Polar S410',
    10: 'Polar S510',
    11: 'Polar S610 / S610i',
    12: 'Polar S710 / S710i / S720i',
    13: 'Polar S810 / S810i',
    15: 'Polar E600',
    20: 'Polar AXN500',
    21: 'Polar AXN700',
    22: 'Polar S625X / S725X',
    23: 'Polar S725',
    33: 'Polar CS400',
    34: 'Polar CS600X',
    35: 'Polar CS600',
    36: 'Polar RS400',
    37: 'Polar RS800',
    38: 'Polar RS800X',
}


# Low-level value parsing
# -----------------------
def number(text, cast=int):
    try:
        return cast(text)
    except ValueError as e:
        raise CorruptFileError('malformed number %r' % text) from e


def numbers(line):
    return [number(value) for value in line.split()]


def column(values, i, default=0):
    return values[i] if i < len(values) else default


def parse_time(text):
    """'hh:mm:ss.t' --> tenths of a second."""
    try:
        hours, minutes, seconds = text.split(':')
        total = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    except ValueError as e:
        raise CorruptFileError('malformed time %r' % text) from e
    return round_int(total * 10)


def parse_date(text):
    try:
        return datetime.strptime(text, '%Y%m%d')
    except ValueError as e:
        raise CorruptFileError('malformed date %r' % text) from e


def read_sections(data, fmt='hrm'):
    """Split the file into {section name: [non-blank lines]}.

    The first section has to be [Params]; anything else means we are not
    looking at a Polar text file.
    """
    text = data.decode('latin-1')   # notes may carry 8-bit characters
    sections = {}
    current = None

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        match = SECTION.match(line)
        if match:
            current = match.group('name')
            if not sections and current != 'Params':
                raise BadMagicError(fmt)
            sections.setdefault(current, [])
        elif current is None:
            raise BadMagicError(fmt)
        else:
            sections[current].append(line)

    if not sections:
        raise BadMagicError(fmt)
    return sections


def parse_params(lines):
    params = {}
    for line in lines:
        key, sep, value = line.partition('=')
        if sep:
            params[key.strip()] = value.strip()
    return params


class SMode:
    """Which [HRData] columns are recorded, and in which units."""
    __slots__ = ('speed', 'cadence', 'altitude', 'power', 'power_balance',
                 'pedalling_index', 'cycling', 'us_units', 'air_pressure')

    def __init__(self, digits):
        digits = digits.ljust(len(self.__slots__), '0')
        if set(digits) - set('01'):
            raise CorruptFileError('malformed SMode %r' % digits)
        for name, digit in zip(self.__slots__, digits):
            setattr(self, name, digit == '1')

    @classmethod
    def from_params(cls, params):
        if 'SMode' in params:
            return cls(params['SMode'])
        return cls.from_legacy_mode(params.get('Mode', '000'))

    @classmethod
    def from_legacy_mode(cls, mode):
        """Old monitors write a three digit `Mode`: cadence/altitude
        (0/1, 3 for neither), cycling data and US units."""
        mode = mode.ljust(3, '0')
        if mode[0] not in '013' or set(mode[1:]) - set('01'):
            raise CorruptFileError('malformed Mode %r' % mode)

        cycling = mode[1] == '1'
        smode = cls('')
        smode.speed = smode.cycling = cycling
        smode.cadence = cycling and mode[0] == '0'
        smode.altitude = mode[0] == '1'
        smode.us_units = mode[2] == '1'
        return smode

    def columns(self):
        names = ['heart_rate']
        for name in ('speed', 'cadence', 'altitude', 'power'):
            if getattr(self, name):
                names.append(name)
        if self.power_balance or self.pedalling_index:
            names.append('balance')
        if self.air_pressure:
            names.append('air_pressure')
        return names


class Units:
    """Metric conversions for files written in US units."""
    __slots__ = ('us',)

    def __init__(self, us):
        self.us = us

    def speed(self, value):         # km/h
        return value * MILE if self.us else value

    def distance(self, value):      # km
        return value * MILE if self.us else value

    def altitude(self, value):      # m
        return round_int(value * FOOT) if self.us else value

    def temperature(self, value):   # C
        return (value - 32) * 5 / 9 if self.us else value


# Sections
# --------
def param_zones(params):
    zones = []
    for i in range(1, ZONE_COUNT + 1):
        upper = number(params.get('Upper%d' % i, '0'))
        lower = number(params.get('Lower%d' % i, '0'))
        if upper:
            zones.append(HeartRateLimit(lower, upper))
    return zones


def lap_notes(lines):
    notes = {}
    for line in lines:
        parts = line.split(None, 1)
        if len(parts) == 2:
            notes[number(parts[0])] = parts[1]
    return notes


def trip_values(lines):
    values = [number(line.split()[0]) for line in lines[:TRIP_ROWS]]
    return values + [0] * (TRIP_ROWS - len(values))


def make_samples(rows, smode, units, interval):
    samples = []

    if interval == RR_INTERVAL:
        elapsed = 0   # ms
        for row in rows:
            rr = numbers(row)[0]
            heart_rate = round_int(60000 / rr) if rr > 0 else None
            samples.append(ExerciseSample(elapsed, heart_rate=heart_rate))
            elapsed += rr
        return samples

    names = smode.columns()
    metres = 0.0
    for i, row in enumerate(rows):
        values = dict(zip(names, numbers(row)))

        speed = values.get('speed')
        distance = None
        if speed is not None:
            speed = units.speed(speed / 10)
            if i:
                metres += speed / 3.6 * interval
            distance = round_int(metres)

        altitude = values.get('altitude')
        samples.append(ExerciseSample(
            i * interval * 1000,
            heart_rate=values.get('heart_rate'),
            distance=distance,
            speed=speed,
            altitude=None if altitude is None else units.altitude(altitude),
            cadence=values.get('cadence'),
            power=values.get('power')))

    return samples


def make_laps(lines, smode, units, notes):
    if len(lines) % ROWS_PER_LAP:
        raise CorruptFileError('incomplete lap in [IntTimes]')

    laps = []
    last_split, last_distance = 0, 0
    for i in range(0, len(lines), ROWS_PER_LAP):
        first, *rows = lines[i:i + ROWS_PER_LAP]
        split_time, *heart_rates = first.split()
        split = parse_time(split_time)
        heart_rates = [number(value) for value in heart_rates]
        second, third, fourth = (numbers(row) for row in rows[:3])

        lap = Lap(split,
                  heart_rate_split=column(heart_rates, 0),
                  heart_rate_avg=column(heart_rates, 2),
                  heart_rate_max=column(heart_rates, 3),
                  note=notes.get(len(laps) + 1))

        if smode.speed:
            distance = round_int(
                units.distance(column(third, 4) / 10) * 1000)
            seconds = (split - last_split) / 10
            speed_avg = 0.0
            if seconds > 0:
                speed_avg = (distance - last_distance) / seconds * 3.6
            lap.speed = LapSpeed(distance, speed_avg,
                                 units.speed(column(second, 3) / 10))
            last_distance = distance

        if smode.altitude:
            lap.altitude = LapAltitude(units.altitude(column(second, 5)),
                                       units.altitude(column(third, 3)))
            # the temperature sensor sits next to the altimeter
            lap.temperature = LapTemperature(
                units.temperature(column(fourth, 3) / 10))

        last_split = split
        laps.append(lap)

    return laps


def lap_temperatures(laps):
    """Exercise temperature range from the lap readings, if there are any."""
    readings = [lap.temperature.temperature for lap in laps
                if lap.temperature is not None]
    if not readings:
        return None
    return ExerciseTemperature(min(readings), sum(readings) / len(readings),
                               max(readings))


def summarise(exercise, smode, units, trip):
    """Aggregates from [Trip] where the file has it, else from samples."""
    activity = ActivityData.from_exercise(exercise)

    heart_rates = activity.extremes('hr')
    if heart_rates is not None:
        exercise.heart_rate_avg = round_int(heart_rates[1])
        exercise.heart_rate_max = round_int(heart_rates[2])

    if smode.speed:
        if trip is not None:
            exercise.speed = ExerciseSpeed(
                round_int(units.distance(trip[0] / 10) * 1000),
                units.speed(trip[5] / TRIP_SPEED_SCALE),
                units.speed(trip[6] / TRIP_SPEED_SCALE))
        else:
            speeds = activity.extremes('speed')    # m/s
            distances = activity.extremes('dist')
            exercise.speed = ExerciseSpeed(
                round_int(distances[2]) if distances else 0,
                mps_to_kph(speeds[1]) if speeds else 0.0,
                mps_to_kph(speeds[2]) if speeds else 0.0)

    if smode.altitude:
        altitudes = activity.extremes('alt') or (0, 0, 0)
        low, mean, high = (round_int(value) for value in altitudes)
        ascent = round_int(activity.ascent()) if 'alt' in activity else 0
        if trip is not None:
            mean, high = units.altitude(trip[3]), units.altitude(trip[4])
            ascent = units.altitude(trip[1])
        exercise.altitude = ExerciseAltitude(low, mean, high, ascent)

    if smode.cadence:
        cadences = activity.extremes('cad') or (0, 0, 0)
        exercise.cadence = ExerciseCadence(round_int(cadences[1]),
                                           round_int(cadences[2]))

    if smode.power:
        powers = activity.extremes('pwr')
        if powers is None:
            exercise.power = ExercisePower()
        else:
            exercise.power = ExercisePower(round_int(powers[1]),
                                           round_int(powers[2]),
                                           round_int(activity.normpwr()))

    if trip is not None:
        exercise.odometer = round_int(units.distance(trip[7]))


def build_exercise(sections, file_type, *, extra_sections=()):
    """Everything the HRM sections say; the caller finishes the record."""
    for name in sections:
        if name not in HRM_SECTIONS and name not in extra_sections:
            log.debug('skipping section [%s]', name)

    params = parse_params(sections['Params'])
    smode = SMode.from_params(params)
    units = Units(smode.us_units)

    exercise = Exercise(file_type)
    exercise.device_name = MONITORS.get(number(params.get('Monitor', '0')))

    date = parse_date(params['Date']) if 'Date' in params else None
    if date is not None:
        start = parse_time(params.get('StartTime', '0:0:0'))
        exercise.date_time = date + timedelta(seconds=start // 10)
    exercise.duration = parse_time(params.get('Length', '0:0:0'))

    interval = number(params.get('Interval', '0'))
    exercise.recording_interval = (
        None if interval == RR_INTERVAL else interval)
    exercise.heart_rate_limits = param_zones(params)

    note = '\n'.join(sections.get('Note', []))
    exercise.note = note or None

    exercise.sample_list = make_samples(sections.get('HRData', []), smode,
                                        units, interval)
    trip = (trip_values(sections['Trip']) if sections.get('Trip')
            else None)
    summarise(exercise, smode, units, trip)

    exercise.lap_list = make_laps(sections.get('IntTimes', []), smode, units,
                                  lap_notes(sections.get('IntNotes', [])))
    exercise.temperature = lap_temperatures(exercise.lap_list)
    return exercise


@drydoc.decode
def decode(data, **ignored):
    sections = read_sections(data)
    return finish(build_exercise(sections, ExerciseFileType.POLAR_HRM))


@drydoc.read
def read_and_format(file_path, **options):
    return decode(load_file(file_path), **options)
