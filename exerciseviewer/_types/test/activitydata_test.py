#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from datetime import datetime

import numpy as np
import pytest

from exerciseviewer._types import (
    ActivityData, ExerciseSample, Position, fill_track_distances)
from exerciseviewer._types import special_columns
from exerciseviewer._util.exceptions import RequiredColumnError


START = datetime(2015, 3, 24, 15, 19, 6)

SAMPLES = [
    ExerciseSample(i * 1000, heart_rate=120 + i, speed=36.0, power=250,
                   altitude=100 + (i % 3), distance=10 * i,
                   position=Position(52.7596, -1.2168 + i / 1e4))
    for i in range(60)
]

# setup
data = ActivityData.from_samples(SAMPLES, start=START)


def test_columns():
    assert set(data.columns) == {'alt', 'dist', 'hr', 'lat', 'lon', 'pwr',
                                 'speed'}
    assert isinstance(data['hr'], special_columns.HeartRate)
    assert data.start == START
    assert data.time[-1].total_seconds() == 59


def test_units():
    assert np.allclose(data['speed'].values, 10.0)      # m/s
    assert np.allclose(np.degrees(data['lat'].radians.values), 52.7596)


def test_extremes():
    low, mean, high = data.extremes('hr')
    assert (low, high) == (120, 179)
    assert mean == pytest.approx(149.5)
    assert data.extremes('cad') is None


def test_ascent():
    assert data.ascent() == 40   # 0, 1, 2, 0, 1, 2, ...


def test_normpwr():
    assert data.normpwr() == pytest.approx(250)


def test_haversine():
    steps = data.haversine()
    assert steps[0] == 0
    assert np.allclose(steps[1:], 6.7, atol=0.1)


def test_required_columns():
    empty = ActivityData.from_samples([ExerciseSample(0, heart_rate=100)])
    with pytest.raises(RequiredColumnError):
        empty.normpwr()


def test_track_distances():
    track = [ExerciseSample(i * 1000, position=Position(52.7595 + i / 1e4,
                                                        -1.2168))
             for i in range(3)]
    track.append(ExerciseSample(3000, heart_rate=120))   # no fix
    fill_track_distances(track)
    assert [s.distance for s in track] == [0, 11, 22, None]

    recorded = [ExerciseSample(0, distance=5, position=Position(52.0, 1.0)),
                ExerciseSample(1000, position=Position(52.1, 1.0))]
    fill_track_distances(recorded)
    assert [s.distance for s in recorded] == [5, None]
