#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import io
import logging
from xml.etree.ElementTree import ParseError

from pandas import to_datetime

from exerciseviewer._types import (
    ActivityData, Exercise, ExerciseAltitude, ExerciseCadence,
    ExerciseFileType, ExercisePower, ExerciseSample, ExerciseSpeed, Lap,
    LapAltitude, LapSpeed, Position, fill_track_distances)
from exerciseviewer._types.exercise import finish, has_any
from exerciseviewer._util import drydoc
from exerciseviewer._util.exceptions import (
    BadMagicError, CorruptFileError, NotAnExerciseError)
from exerciseviewer._util.misc import load_file, round_int, to_civil_time
from exerciseviewer._util.xml_reading import (
    children, find_text, gen_nodes, recursive_text_extract, sans_ns)
from exerciseviewer.tools import mps_to_kph


log = logging.getLogger(__name__)

# Trackpoint leaf tag --> (sample field, type). `Value` only ever turns up
# inside HeartRateBpm, `Speed` and `Watts` are TPX extensions.
TRACKPOINT_FIELDS = {
    'AltitudeMeters': ('altitude', float),
    'DistanceMeters': ('distance', float),
    'Value': ('heart_rate', int),
    'Cadence': ('cadence', int),
    'Speed': ('speed', float),      # m/s
    'Watts': ('power', int),
    'LatitudeDegrees': ('latitude', float),
    'LongitudeDegrees': ('longitude', float),
}


def number(text, cast=float):
    if text is None:
        return None
    try:
        return cast(float(text)) if cast is int else cast(text)
    except ValueError as e:
        raise CorruptFileError('malformed number %r' % text) from e


def parse_utc(text):
    """ISO 8601 time (Garmin stores UTC) --> naive UTC datetime."""
    try:
        return to_datetime(text, utc=True).tz_convert(None).to_pydatetime()
    except ValueError as e:
        raise CorruptFileError('malformed time %r' % text) from e


def first_activity(source):
    nodes = gen_nodes(source, ('Activity',), with_root=True)

    try:
        root = next(nodes)
    except ParseError as e:
        raise BadMagicError('tcx') from e
    if sans_ns(root.tag) != 'TrainingCenterDatabase':
        raise BadMagicError('tcx')

    try:
        activity = next(nodes, None)
    except ParseError as e:
        raise CorruptFileError('malformed xml: %s' % e) from e
    if activity is None:
        raise NotAnExerciseError('no Activity in this tcx file')
    return activity


class TcxLap:
    __slots__ = ('seconds', 'distance', 'speed_max', 'calories', 'hr_avg',
                 'hr_max', 'cadence', 'trackpoints')

    def __init__(self, node):
        self.seconds = number(find_text(node, 'TotalTimeSeconds')) or 0.0
        self.distance = number(find_text(node, 'DistanceMeters'))
        self.speed_max = number(find_text(node, 'MaximumSpeed'))  # m/s
        self.calories = number(find_text(node, 'Calories'), int) or 0
        self.hr_avg = number(
            find_text(node, 'AverageHeartRateBpm', 'Value'), int)
        self.hr_max = number(
            find_text(node, 'MaximumHeartRateBpm', 'Value'), int)
        self.cadence = number(find_text(node, 'Cadence'), int)
        self.trackpoints = [trkpt for track in children(node, 'Track')
                            for trkpt in children(track, 'Trackpoint')]


def make_sample(trackpoint, start):
    """One sample, or None for a trackpoint without a time."""
    leaves = recursive_text_extract(trackpoint)
    if 'Time' not in leaves:
        log.debug('skipping a trackpoint without time')
        return None

    values = {field: number(leaves.get(tag), cast)
              for tag, (field, cast) in TRACKPOINT_FIELDS.items()}
    lat, lon = values.pop('latitude'), values.pop('longitude')
    speed = values.pop('speed')
    offset = parse_utc(leaves['Time']) - start

    return ExerciseSample(
        round_int(offset.total_seconds() * 1000),
        heart_rate=values['heart_rate'],
        distance=round_int(values['distance'], default=None),
        speed=None if speed is None else mps_to_kph(speed),
        altitude=round_int(values['altitude'], default=None),
        cadence=values['cadence'],
        power=values['power'],
        position=(None if lat is None or lon is None
                  else Position(lat, lon)))


def ascent_of(samples):
    """Climbing (metres) over the samples, 0 without altitudes."""
    activity = ActivityData.from_samples(samples)
    return round_int(activity.ascent()) if 'alt' in activity else 0


def make_laps(tcx_laps, lap_samples, speed, altitude):
    laps = []
    seconds, metres = 0.0, 0.0
    so_far = []
    for tcx_lap, samples in zip(tcx_laps, lap_samples):
        so_far += samples
        seconds += tcx_lap.seconds
        metres += tcx_lap.distance or 0.0
        split = samples[-1] if samples else None

        lap = Lap(round_int(seconds * 10),
                  heart_rate_avg=tcx_lap.hr_avg,
                  heart_rate_max=tcx_lap.hr_max,
                  heart_rate_split=split.heart_rate if split else None,
                  position_split=split.position if split else None)

        if speed:
            lap_speed = 0.0
            if tcx_lap.seconds > 0:
                lap_speed = mps_to_kph((tcx_lap.distance or 0.0) /
                                       tcx_lap.seconds)
            lap.speed = LapSpeed(round_int(metres), lap_speed,
                                 (split.speed or 0.0) if split else 0.0)

        if altitude:
            lap.altitude = LapAltitude(
                (split.altitude or 0) if split else 0, ascent_of(so_far))

        laps.append(lap)
    return laps


def weighted_mean(pairs):
    """Mean of the (value, weight) pairs with a value."""
    pairs = [(value, weight) for value, weight in pairs if value is not None]
    total = sum(weight for _, weight in pairs)
    if not total:
        return None
    return sum(value * weight for value, weight in pairs) / total


def summarise(exercise, tcx_laps):
    samples = exercise.sample_list
    activity = ActivityData.from_exercise(exercise)
    seconds = sum(lap.seconds for lap in tcx_laps)

    exercise.duration = round_int(seconds * 10)
    exercise.energy = sum(lap.calories for lap in tcx_laps)

    heart_rates = activity.extremes('hr')
    hr_avg = weighted_mean((lap.hr_avg, lap.seconds) for lap in tcx_laps)
    hr_maxes = [lap.hr_max for lap in tcx_laps if lap.hr_max is not None]
    if hr_avg is None and heart_rates is not None:
        hr_avg = heart_rates[1]
    exercise.heart_rate_avg = round_int(hr_avg)
    if hr_maxes:
        exercise.heart_rate_max = max(hr_maxes)
    elif heart_rates is not None:
        exercise.heart_rate_max = round_int(heart_rates[2])

    distances = [lap.distance for lap in tcx_laps if lap.distance is not None]
    if distances or has_any(samples, 'speed') or has_any(samples, 'distance'):
        distance = sum(distances)
        if not distances:
            recorded = activity.extremes('dist')
            distance = recorded[2] if recorded else 0
        speeds = activity.extremes('speed')    # m/s
        speed_maxes = [lap.speed_max for lap in tcx_laps
                       if lap.speed_max is not None]
        speed_max = 0.0
        if speed_maxes:
            speed_max = max(speed_maxes)
        elif speeds is not None:
            speed_max = speeds[2]
        exercise.speed = ExerciseSpeed(
            round_int(distance),
            mps_to_kph(distance / seconds) if seconds else 0.0,
            mps_to_kph(speed_max))

    altitudes = activity.extremes('alt')
    if altitudes is not None:
        exercise.altitude = ExerciseAltitude(
            *(round_int(value) for value in altitudes),
            ascent=round_int(activity.ascent()))

    cadences = activity.extremes('cad')
    lap_cadence = weighted_mean((lap.cadence, lap.seconds)
                                for lap in tcx_laps)
    if cadences is not None:
        exercise.cadence = ExerciseCadence(round_int(cadences[1]),
                                           round_int(cadences[2]))
    elif lap_cadence is not None:
        exercise.cadence = ExerciseCadence(
            round_int(lap_cadence),
            max(lap.cadence for lap in tcx_laps if lap.cadence is not None))

    powers = activity.extremes('pwr')
    if powers is not None:
        exercise.power = ExercisePower(round_int(powers[1]),
                                       round_int(powers[2]),
                                       round_int(activity.normpwr()))


def format_exercise(activity, *, tz_str=None):
    tcx_laps = [TcxLap(node) for node in children(activity, 'Lap')]

    start_text = find_text(activity, 'Id')
    if start_text is None and tcx_laps:
        start_text = children(activity, 'Lap')[0].get('StartTime')
    if start_text is None:
        raise NotAnExerciseError('tcx activity without a start time')
    start = parse_utc(start_text)

    exercise = Exercise(ExerciseFileType.GARMIN_TCX)
    exercise.sport = activity.get('Sport')
    exercise.device_name = find_text(activity, 'Creator', 'Name')
    exercise.date_time = to_civil_time(start, tz_str)
    exercise.recording_interval = None

    lap_samples = [
        [sample for sample in (make_sample(trkpt, start)
                               for trkpt in lap.trackpoints)
         if sample is not None]
        for lap in tcx_laps]
    samples = [sample for lap in lap_samples for sample in lap]
    samples.sort(key=lambda sample: sample.timestamp)   # stable
    fill_track_distances(samples)
    exercise.sample_list = samples

    summarise(exercise, tcx_laps)
    exercise.lap_list = make_laps(tcx_laps, lap_samples,
                                  exercise.speed is not None,
                                  exercise.altitude is not None)

    return finish(exercise)


@drydoc.decode
def decode(data, *, tz_str=None, **ignored):
    activity = first_activity(io.BytesIO(data))
    return format_exercise(activity, tz_str=tz_str)


@drydoc.read
def read_and_format(file_path, **options):
    return decode(load_file(file_path), **options)
