#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from exerciseviewer._types import ExerciseFileType, HeartRateLimit
from exerciseviewer._types.exercise import finish
from exerciseviewer._util import drydoc
from exerciseviewer._util.misc import load_file
from exerciseviewer.hrm._reading import (
    build_exercise, column, number, numbers, parse_params, read_sections)


HSR_SECTIONS = ('Summary', 'HRZones', 'Summary-123')

# [Summary] key --> Exercise attribute
SUMMARY_KEYS = {
    'AvgHR': 'heart_rate_avg',
    'MaxHR': 'heart_rate_max',
    'Energy': 'energy',
    'EnergyTotal': 'energy_total',
    'SumExerciseTime': 'sum_exercise_time',
    'SumRideTime': 'sum_ride_time',
    'Odometer': 'odometer',
}


def apply_summary(exercise, lines):
    summary = parse_params(lines)
    for key, attr in SUMMARY_KEYS.items():
        if key in summary:
            setattr(exercise, attr, number(summary[key]))


def read_zones(lines):
    zones = []
    for line in lines:
        values = numbers(line)
        zones.append(HeartRateLimit(column(values, 0), column(values, 1),
                                    absolute_range=not column(values, 2)))
    return zones


def apply_zone_times(zones, lines):
    """Rows are matched to zones in order; surplus rows are ignored."""
    for zone, line in zip(zones, lines):
        zone.time_below, zone.time_within, zone.time_above = (
            column(numbers(line), i) for i in range(3))


def format_exercise(sections):
    exercise = build_exercise(sections, ExerciseFileType.POLAR_HSR,
                              extra_sections=HSR_SECTIONS)

    apply_summary(exercise, sections.get('Summary', []))
    if sections.get('HRZones'):
        exercise.heart_rate_limits = read_zones(sections['HRZones'])
    apply_zone_times(exercise.heart_rate_limits,
                     sections.get('Summary-123', []))

    return finish(exercise)


@drydoc.decode
def decode(data, **ignored):
    return format_exercise(read_sections(data, fmt='hsr'))


@drydoc.read
def read_and_format(file_path, **options):
    return decode(load_file(file_path), **options)
