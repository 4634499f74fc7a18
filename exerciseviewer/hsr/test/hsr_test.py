#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import pytest

import exerciseviewer
from exerciseviewer import hsr
from exerciseviewer._types import ExerciseFileType, HeartRateLimit
from exerciseviewer._util.exceptions import BadMagicError, CorruptFileError


HSR = '''[Params]
Version=106
Monitor=22
SMode=000000000
Date=20090301
StartTime=17:05:00.0
Length=01:02:03.4
Interval=5
Upper1=150
Lower1=130

[Summary]
AvgHR=142
MaxHR=171
Energy=812
EnergyTotal=99876
SumExerciseTime=7260
SumRideTime=3000
Odometer=2500

[HRZones]
120\t140\t0
140\t160\t0
80\t90\t1

[Summary-123]
600\t2400\t723
1800\t1500\t423
3000\t600\t123

[HRData]
130
140
'''


# setup
exercise = hsr.decode(HSR.encode('latin-1'))


def test_summary_overrides():
    assert exercise.file_type is ExerciseFileType.POLAR_HSR
    assert exercise.device_name == 'Polar S625X / S725X'
    assert exercise.duration == 37234
    assert exercise.heart_rate_avg == 142     # not the sample mean
    assert exercise.heart_rate_max == 171
    assert exercise.energy == 812
    assert exercise.energy_total == 99876
    assert exercise.sum_exercise_time == 7260
    assert exercise.sum_ride_time == 3000
    assert exercise.odometer == 2500


def test_zones():
    assert exercise.heart_rate_limits == [
        HeartRateLimit(120, 140, time_below=600, time_within=2400,
                       time_above=723),
        HeartRateLimit(140, 160, time_below=1800, time_within=1500,
                       time_above=423),
        HeartRateLimit(80, 90, absolute_range=False, time_below=3000,
                       time_within=600, time_above=123),
    ]


def test_without_summary():
    plain = HSR.split('[Summary]')[0] + '[HRData]\n130\n140\n'
    exercise = hsr.decode(plain.encode('latin-1'))
    assert exercise.heart_rate_avg == 135
    assert exercise.heart_rate_limits == [HeartRateLimit(130, 150)]


def test_dispatch():
    assert exerciseviewer.parse_bytes(HSR.encode('latin-1'), 'hsr') == exercise


def test_bad_files():
    with pytest.raises(BadMagicError) as e:
        hsr.decode(b'[Summary]\nAvgHR=140\n')
    assert 'an hsr file' in str(e.value)

    with pytest.raises(CorruptFileError):
        hsr.decode(HSR.replace('AvgHR=142', 'AvgHR=high').encode('latin-1'))

    with pytest.raises(CorruptFileError):   # inverted zone
        hsr.decode(HSR.replace('120\t140\t0', '150\t140\t0').encode('latin-1'))
