#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Check ``exerciseviewer.srd`` against a hand-made S710 exercise.

"""
from datetime import datetime
import struct

import pytest

import exerciseviewer
from exerciseviewer import srd
from exerciseviewer._types import ExerciseFileType
from exerciseviewer._util.exceptions import BadHeaderError, TruncatedInputError


MODE = 0x0F | (1 << 5)   # altitude, speed, cadence, power; bike 1

LAPS = [
    # BCD split, hr split/avg/max, altitude, ascent, distance, speed
    (bytes([0x00, 0x00, 0x10, 0x00]), 150, 145, 155, 0x8005, 20, 100, 576),
    (bytes([0x00, 0x00, 0x20, 0x00]), 160, 155, 165, 120, 105, 150, 288),
]

SAMPLES = [
    # hr, altitude, speed, cadence, power
    (140, 100, 576, 80, 200),
    (150, 0x8005, 576, 85, 200),
    (160, 110, 576, 90, 200),
    (170, 120, 576, 95, 200),
]


def srd_file(*, interval=5, size=None):
    body = b''
    for split, *values in LAPS:
        body += split + struct.pack('<3B2HIH', *values)
    for values in SAMPLES:
        body += struct.pack('<BHHBH', *values)

    if size is None:
        size = 0x60 + len(body)

    header = struct.pack('<H2B', size, 2, 1)
    header += bytes([0x15, 0x30, 0x09, 0x12, 0x05, 0x07])  # 2007-05-12 09:30:15
    header += bytes([0x00, 0x00, 0x20, 0x00])              # 00:00:20.0
    header += struct.pack('<5BxHHI', 140, 170, interval, MODE, len(LAPS),
                          len(SAMPLES), 500, 12345)
    header += struct.pack('<HB', 10, 30) + struct.pack('<HB', 5, 15)
    header += struct.pack('<2I2H2B', 4321, 150, 288, 576, 85, 100)
    header += struct.pack('<3H', 0x8005, 50, 100)
    header += struct.pack('<3H', 105, 200, 250)
    for lower, upper in ((120, 140), (140, 160), (160, 180)):
        header += struct.pack('<3B3H', lower, upper, 0, 10, 20, 30)
    header = header.ljust(0x60, b'\x00')

    return header + body


# setup
exercise = srd.decode(srd_file())


def test_summary():
    assert exercise.file_type is ExerciseFileType.POLAR_SRD
    assert exercise.date_time == datetime(2007, 5, 12, 9, 30, 15)
    assert exercise.duration == 200
    assert exercise.recording_interval == 5
    assert exercise.heart_rate_avg == 140
    assert exercise.heart_rate_max == 170
    assert exercise.energy == 500 and exercise.energy_total == 12345
    assert exercise.sum_exercise_time == 630
    assert exercise.sum_ride_time == 315
    assert exercise.odometer == 4321
    assert len(exercise.heart_rate_limits) == 3


def test_recording_mode():
    mode = exercise.recording_mode
    assert mode.heart_rate and mode.speed and mode.altitude
    assert mode.cadence and mode.power
    assert not (mode.temperature or mode.location or mode.interval_training)
    assert mode.bike_number == 1


def test_blocks():
    assert exercise.speed.distance == 150
    assert exercise.speed.speed_avg == pytest.approx(18.0)
    assert exercise.speed.speed_max == pytest.approx(36.0)

    altitude = exercise.altitude
    assert (altitude.altitude_min, altitude.altitude_avg,
            altitude.altitude_max, altitude.ascent) == (-5, 50, 100, 105)

    assert (exercise.cadence.cadence_avg, exercise.cadence.cadence_max) == (
        85, 100)

    power = exercise.power
    assert (power.power_avg, power.power_max) == (200, 250)
    assert power.power_normalized == 200   # too short to smooth: the mean


def test_samples():
    samples = exercise.sample_list
    assert [s.timestamp for s in samples] == [0, 5000, 10000, 15000]
    assert [s.heart_rate for s in samples] == [140, 150, 160, 170]
    assert [s.altitude for s in samples] == [100, -5, 110, 120]
    assert [s.distance for s in samples] == [0, 50, 100, 150]
    assert samples[0].speed == pytest.approx(36.0)
    assert samples[3].cadence == 95 and samples[3].power == 200
    assert all(s.position is None for s in samples)


def test_laps():
    first, second = exercise.lap_list
    assert (first.time_split, second.time_split) == (100, 200)
    assert (first.heart_rate_split, first.heart_rate_avg,
            first.heart_rate_max) == (150, 145, 155)
    assert first.altitude.altitude == -5 and second.altitude.ascent == 105

    assert first.speed.distance == 100 and second.speed.distance == 150
    assert first.speed.speed_avg == pytest.approx(36.0)
    assert second.speed.speed_avg == pytest.approx(18.0)
    assert second.speed.speed_end == pytest.approx(18.0)


def test_bad_files():
    with pytest.raises(BadHeaderError):
        srd.decode(srd_file(interval=3))

    with pytest.raises(TruncatedInputError):
        srd.decode(srd_file(size=1000))

    with pytest.raises(TruncatedInputError):
        srd.decode(srd_file()[:-1])


def test_sr2_suffix():
    assert exerciseviewer.parse_bytes(srd_file(), 'ride.SR2') == exercise
