#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A tabular view of an exercise's samples.

Decoders lean on this to derive the aggregates a file format does not store
(averages, extremes, ascent, normalised power), and callers can use it for
their own analysis.

"""
from math import isnan

import numpy as np
from pandas import TimedeltaIndex, to_timedelta

from exerciseviewer import tools
from exerciseviewer._util import exceptions
from exerciseviewer._util.misc import round_int
from exerciseviewer._types import DataFrameSubclass, special_columns


SAMPLE_FIELDS = ('heart_rate', 'distance', 'speed', 'altitude', 'cadence',
                 'temperature', 'power')

COLUMN_SPEC = {
    'altitude': special_columns.Altitude,
    'cadence': special_columns.Cadence,
    'distance': special_columns.Distance,
    'heart_rate': special_columns.HeartRate,
    'latitude': special_columns.Latitude,
    'longitude': special_columns.Longitude,
    'power': special_columns.Power,
    'speed': special_columns.Speed._from_kph,
    'temperature': special_columns.Temperature,
}


def format_sample(sample):
    record = {name: getattr(sample, name) for name in SAMPLE_FIELDS}
    position = sample.position
    record['latitude'] = position.latitude if position else None
    record['longitude'] = position.longitude if position else None
    record['timestamp'] = sample.timestamp
    return record


def fill_track_distances(samples):
    """Give positioned samples a cumulative great-circle distance (metres)
    when none of the samples recorded a distance of their own."""
    if any(sample.distance is not None for sample in samples):
        return
    tracked = [sample for sample in samples if sample.position is not None]
    if len(tracked) < 2:
        return

    steps = ActivityData.from_samples(tracked).haversine()
    for sample, metres in zip(tracked, np.cumsum(steps)):
        sample.distance = round_int(metres)


class ActivityData(DataFrameSubclass):
    _metadata = ['start']

    @classmethod
    def from_samples(cls, samples, *, start=None):
        columns = SAMPLE_FIELDS + ('latitude', 'longitude', 'timestamp')
        data = cls.from_records([format_sample(s) for s in samples],
                                columns=columns)
        data = data.astype('float64')   # None --> NaN

        timestamps = data.pop('timestamp')  # ms
        data._finish_up(column_spec=COLUMN_SPEC, start=start,
                        timeoffsets=timestamps / 1000)
        return data

    @classmethod
    def from_exercise(cls, exercise):
        return cls.from_samples(exercise.sample_list,
                                start=exercise.date_time)

    def __getitem__(self, key):
        """Create the illusion of Series subclasses in the DataFrame."""
        item = super().__getitem__(key)
        try:
            return special_columns.REGISTRY[key](item)
        except (KeyError, TypeError):
            return item

    @property
    def time(self):   # makes accessing the index more readable
        if isinstance(self.index, TimedeltaIndex):
            return self.index
        else:
            # because recursion problems with super().__getattr__()
            raise AttributeError('index is not TimedeltaIndex')

    def extremes(self, column):
        """(min, mean, max) of a column, or None if it wasn't recorded."""
        if column not in self:
            return None
        values = self[column].dropna()
        if values.empty:
            return None
        return values.min(), values.mean(), values.max()

    def ascent(self):
        """Total climbing from the altitude column (metres)."""
        return self._try_get('alt').ascent.sum()

    def normpwr(self):
        """Training Peaks 'Normalised Power' (NP) metric.

        Falls back to the plain mean for rides shorter than the window.
        """
        window = 30
        smooth_pwr = self._get_resampled('pwr').rolling(window).mean()
        normalised = np.mean(smooth_pwr**4)**0.25
        if isnan(normalised):
            return self._try_get('pwr').mean()
        return normalised

    def haversine(self, **kwargs):
        lon, lat = (self._try_get(ax).radians.values for ax in ('lon', 'lat'))
        return tools.haversine(lon, lat, **kwargs)

    # Private methods
    # ---------------
    def _finish_up(self, *, column_spec, start=None, timeoffsets=None):
        """A pseudo-init method, used internally."""
        for old_key, column_cls in column_spec.items():
            try:
                old_column = self.pop(old_key)  # no default
            except KeyError:
                continue

            new = column_cls(old_column)
            self[new.colname] = new

        self.start = start
        if timeoffsets is not None:
            self.index = TimedeltaIndex(to_timedelta(timeoffsets, unit='s'),
                                        name='time')

        # No point hanging on to completely empty columns!
        self.dropna(axis=1, how='all', inplace=True)

    def _get_resampled(self, column, samplingfreq=1):
        rule = '%ds' % samplingfreq
        return self._try_get(column).resample(rule).mean()  # missing --> NaNs

    def _try_get(self, key):
        """Try and get a required column from the data."""
        try:
            return self[key]
        except KeyError as e:
            raise exceptions.RequiredColumnError(key) from e
