#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Translate the `_protocol` message stream into an `Exercise` record.

"""
from bisect import bisect_right
from datetime import datetime, timedelta
import logging

from exerciseviewer.fit import _profile as profile
from exerciseviewer.fit._protocol import gen_fit_messages, DataMessage
from exerciseviewer._types import (
    ActivityData, Exercise, ExerciseAltitude, ExerciseCadence,
    ExerciseFileType, ExercisePower, ExerciseSample, ExerciseSpeed,
    ExerciseTemperature, Lap, LapAltitude, LapSpeed, LapTemperature, Position,
    fill_track_distances)
from exerciseviewer._types.exercise import finish, has_any
from exerciseviewer._util import drydoc
from exerciseviewer._util.exceptions import NotAnExerciseError
from exerciseviewer._util.misc import load_file, round_int, to_civil_time
from exerciseviewer.tools import mps_to_kph, semicircles_to_degrees


log = logging.getLogger(__name__)

DATETIME_1990 = datetime(year=1989, month=12, day=31)   # UTC

TIMESTAMP = profile.TIMESTAMP_FIELD

# Field definition numbers, see Profile.xlsx
# ------------------------------------------
FILE_ID_MANUFACTURER = 1
FILE_ID_PRODUCT = 2

DEVICE_INFO_PRODUCT_NAME = 27

ACTIVITY_LOCAL_TIMESTAMP = 5

SESSION_FIELDS = {
    'start_time': 2,
    'sport': 5,
    'total_timer_time': 8,      # ms
    'total_distance': 9,        # cm
    'total_calories': 11,
    'avg_speed': 14,            # mm/s
    'max_speed': 15,
    'avg_heart_rate': 16,
    'max_heart_rate': 17,
    'avg_cadence': 18,
    'max_cadence': 19,
    'avg_power': 20,
    'max_power': 21,
    'total_ascent': 22,         # m
    'normalized_power': 34,
    'avg_altitude': 49,         # 1/5 m, offset 500
    'max_altitude': 50,
    'avg_temperature': 57,      # C
    'max_temperature': 58,
    'min_altitude': 71,
    'enhanced_avg_speed': 124,
    'enhanced_max_speed': 125,
    'enhanced_avg_altitude': 126,
    'enhanced_min_altitude': 127,
    'enhanced_max_altitude': 128,
    'min_temperature': 150,
}

LAP_FIELDS = {
    'end_position_lat': 5,
    'end_position_long': 6,
    'total_elapsed_time': 7,
    'total_distance': 9,
    'avg_speed': 13,
    'avg_heart_rate': 15,
    'max_heart_rate': 16,
    'total_ascent': 21,
    'enhanced_avg_speed': 110,
}

RECORD_FIELDS = {
    'position_lat': 0,
    'position_long': 1,
    'altitude': 2,
    'heart_rate': 3,
    'cadence': 4,
    'distance': 5,
    'speed': 6,
    'power': 7,
    'temperature': 13,
    'enhanced_speed': 73,
    'enhanced_altitude': 78,
}


def named(message, field_nums):
    """{field name: value} for the known, valid fields of a message."""
    return {name: message.get(num) for name, num in field_nums.items()
            if num in message}


def first_of(values, *names):
    for name in names:
        value = values.get(name)
        if value is not None:
            return value
    return None


# Unit conversions
# ----------------
def speed_kph(raw):       # mm/s
    return None if raw is None else mps_to_kph(raw / 1000)


def altitude_m(raw):      # 1/5 m with a 500 m offset
    return None if raw is None else raw / 5 - 500


def position(lat, lon):
    if lat is None or lon is None:
        return None
    return Position(semicircles_to_degrees(lat), semicircles_to_degrees(lon))


def fit_datetime(timestamp):
    return DATETIME_1990 + timedelta(seconds=timestamp)


def device_name(file_id, device_infos):
    """Friendly device name from the file_id message."""
    if file_id is not None:
        manufacturer = file_id.get(FILE_ID_MANUFACTURER)
        product = file_id.get(FILE_ID_PRODUCT)
        if manufacturer is not None:
            try:
                maker = profile.MANUFACTURERS[manufacturer]
            except KeyError:
                log.warning('unknown FIT manufacturer %d', manufacturer)
                maker = 'manufacturer %d' % manufacturer

            maker = maker[0].upper() + maker[1:]
            if product is None:
                return maker

            product_name = None
            if manufacturer in profile.GARMIN_NUMBERING:
                product_name = profile.GARMIN_PRODUCTS.get(product)
            return '%s %s' % (maker, product_name or product)

    for device_info in device_infos:
        product_name = device_info.get(DEVICE_INFO_PRODUCT_NAME)
        if product_name:
            return product_name
    return None


class FitMessages:
    """The messages of one file that matter to us, sorted by type."""
    __slots__ = ('file_id', 'session', 'activity', 'laps', 'records',
                 'device_infos')

    def __init__(self, messages):
        self.file_id = self.session = self.activity = None
        self.laps, self.records, self.device_infos = [], [], []

        for message in messages:
            if not isinstance(message, DataMessage):
                continue
            num = message.global_mesg_num
            if num == profile.MESG_RECORD:
                self.records.append(message)
            elif num == profile.MESG_LAP:
                self.laps.append(message)
            elif num == profile.MESG_SESSION:
                if self.session is None:   # multisport: first one wins
                    self.session = message
            elif num == profile.MESG_FILE_ID:
                if self.file_id is None:
                    self.file_id = message
            elif num == profile.MESG_ACTIVITY:
                self.activity = message
            elif num == profile.MESG_DEVICE_INFO:
                self.device_infos.append(message)
            # events and everything else are of no further interest


def start_datetime(start_time, activity, tz_str):
    """Civil start time, as the device would have shown it."""
    utc = fit_datetime(start_time)

    if activity is not None:
        local = activity.get(ACTIVITY_LOCAL_TIMESTAMP)
        timestamp = activity.get(TIMESTAMP)
        if local is not None and timestamp is not None:
            return utc + timedelta(seconds=local - timestamp)

    return to_civil_time(utc, tz_str)


def make_samples(records, start_time):
    samples = []
    for record in records:
        timestamp = record.get(TIMESTAMP)
        if timestamp is None:
            log.debug('skipping a record without timestamp')
            continue

        values = named(record, RECORD_FIELDS)
        distance = values.get('distance')
        samples.append(ExerciseSample(
            (timestamp - start_time) * 1000,
            heart_rate=values.get('heart_rate'),
            distance=None if distance is None else round_int(distance / 100),
            speed=speed_kph(first_of(values, 'enhanced_speed', 'speed')),
            altitude=round_int(
                altitude_m(first_of(values, 'enhanced_altitude', 'altitude')),
                default=None),
            cadence=values.get('cadence'),
            temperature=values.get('temperature'),
            power=values.get('power'),
            position=position(values.get('position_lat'),
                              values.get('position_long'))))

    samples.sort(key=lambda sample: sample.timestamp)   # stable
    fill_track_distances(samples)
    return samples


def sample_at(samples, timestamps, timestamp):
    """The last sample at or before `timestamp` (ms), if any."""
    i = bisect_right(timestamps, timestamp)
    return samples[i - 1] if i else None


def make_laps(exercise, laps, start_time):
    samples = exercise.sample_list
    timestamps = [sample.timestamp for sample in samples]

    elapsed = 0        # ms
    distance = 0       # cm
    lap_list = []

    for lap in laps:
        values = named(lap, LAP_FIELDS)
        elapsed += values.get('total_elapsed_time', 0)
        distance += values.get('total_distance', 0)

        end_time = lap.get(TIMESTAMP)
        split = None
        if end_time is not None:
            split = sample_at(samples, timestamps,
                              (end_time - start_time) * 1000)

        new_lap = Lap(round_int(elapsed / 100),
                      heart_rate_avg=values.get('avg_heart_rate'),
                      heart_rate_max=values.get('max_heart_rate'),
                      heart_rate_split=split.heart_rate if split else None)

        if exercise.speed is not None:
            new_lap.speed = LapSpeed(
                distance=round_int(distance / 100),
                speed_avg=speed_kph(first_of(
                    values, 'enhanced_avg_speed', 'avg_speed')) or 0.0,
                speed_end=(split.speed or 0.0) if split else 0.0)

        if exercise.altitude is not None:
            new_lap.altitude = LapAltitude(
                altitude=(split.altitude or 0) if split else 0,
                ascent=values.get('total_ascent', 0))

        if exercise.temperature is not None:
            new_lap.temperature = LapTemperature(
                (split.temperature or 0) if split else 0)

        new_lap.position_split = position(values.get('end_position_lat'),
                                          values.get('end_position_long'))
        if new_lap.position_split is None and split is not None:
            new_lap.position_split = split.position

        lap_list.append(new_lap)

    return lap_list


def summarise(exercise, session):
    """Fill in the exercise blocks from the session, or the samples where
    the session has nothing to say."""
    samples = exercise.sample_list
    activity = ActivityData.from_samples(samples)

    exercise.heart_rate_avg = session.get('avg_heart_rate', 0)
    exercise.heart_rate_max = session.get('max_heart_rate', 0)
    exercise.energy = session.get('total_calories', 0)

    avg_speed = first_of(session, 'enhanced_avg_speed', 'avg_speed')
    max_speed = first_of(session, 'enhanced_max_speed', 'max_speed')
    if (avg_speed is not None or 'total_distance' in session or
            has_any(samples, 'speed') or has_any(samples, 'distance')):
        speeds = activity.extremes('speed')   # m/s
        distances = activity.extremes('dist')
        if 'total_distance' in session:
            distance = session['total_distance'] / 100
        else:
            distance = distances[2] if distances else 0
        if avg_speed is None and speeds is not None:
            avg_speed = speeds[1] * 1000
        if max_speed is None and speeds is not None:
            max_speed = speeds[2] * 1000
        exercise.speed = ExerciseSpeed(
            distance=round_int(distance),
            speed_avg=speed_kph(avg_speed) or 0.0,
            speed_max=speed_kph(max_speed) or 0.0)

    altitudes = activity.extremes('alt')
    session_altitudes = [altitude_m(first_of(session, 'enhanced_' + key, key))
                         for key in ('min_altitude', 'avg_altitude',
                                     'max_altitude')]
    if altitudes is not None or any(a is not None for a in session_altitudes):
        merged = [s if s is not None else (a if altitudes else None)
                  for s, a in zip(session_altitudes, altitudes or (0,) * 3)]
        exercise.altitude = ExerciseAltitude(
            *(round_int(value) for value in merged),
            ascent=session.get('total_ascent', 0))

    # Running cadence arrives per sample on some watches, but only a
    # session figure makes a cadence summary.
    if 'avg_cadence' in session or 'max_cadence' in session:
        exercise.cadence = ExerciseCadence(session.get('avg_cadence', 0),
                                           session.get('max_cadence', 0))

    temperatures = activity.extremes('temp')
    session_temperatures = [session.get(key) for key in (
        'min_temperature', 'avg_temperature', 'max_temperature')]
    if (temperatures is not None or
            any(t is not None for t in session_temperatures)):
        merged = [s if s is not None else (t if temperatures else None)
                  for s, t in zip(session_temperatures,
                                  temperatures or (0,) * 3)]
        exercise.temperature = ExerciseTemperature(
            *(round_int(value) for value in merged))

    powers = activity.extremes('pwr')
    if powers is not None or 'avg_power' in session:
        normalised = session.get('normalized_power')
        if normalised is None and powers is not None:
            normalised = activity.normpwr()
        exercise.power = ExercisePower(
            round_int(first_of(session, 'avg_power') or
                      (powers[1] if powers else None)),
            round_int(first_of(session, 'max_power') or
                      (powers[2] if powers else None)),
            round_int(normalised))


def format_exercise(fit_messages, *, tz_str=None):
    if fit_messages.session is None:
        raise NotAnExerciseError('no session message in this fit file')

    session = named(fit_messages.session, SESSION_FIELDS)
    start_time = session.get('start_time')
    if start_time is None:
        # Fall back to the first record, then the session timestamp.
        start_time = next(
            (r.get(TIMESTAMP) for r in fit_messages.records
             if TIMESTAMP in r), fit_messages.session.get(TIMESTAMP))
        if start_time is None:
            raise NotAnExerciseError('session without a start time')

    exercise = Exercise(ExerciseFileType.GARMIN_FIT)
    exercise.device_name = device_name(fit_messages.file_id,
                                       fit_messages.device_infos)
    exercise.date_time = start_datetime(start_time, fit_messages.activity,
                                        tz_str)
    exercise.duration = round_int(session.get('total_timer_time', 0) / 100)
    exercise.sport = profile.SPORTS.get(session.get('sport'))
    exercise.recording_interval = None   # fit is variable rate

    exercise.sample_list = make_samples(fit_messages.records, start_time)
    summarise(exercise, session)
    exercise.lap_list = make_laps(exercise, fit_messages.laps, start_time)

    return finish(exercise)


@drydoc.decode
def decode(data, *, tz_str=None, strict_crc=False, **ignored):
    messages = FitMessages(gen_fit_messages(data, strict_crc=strict_crc))
    return format_exercise(messages, tz_str=tz_str)


@drydoc.read
def read_and_format(file_path, **options):
    return decode(load_file(file_path), **options)


def gen_records(data, *, strict_crc=False):
    """Iterate over the data messages of a fit file as
    (message name, {field number: value}) pairs."""
    for message in gen_fit_messages(data, strict_crc=strict_crc):
        if isinstance(message, DataMessage):
            yield message.name, {num: value for num, (_, value)
                                 in message.fields.items()}
