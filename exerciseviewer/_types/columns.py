#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import numpy as np

from exerciseviewer._types.base import SeriesSubclass, series_property


REGISTRY = {}    # grows at import-time via the below metaclass


class SpecialRegistrar(type):
    def __init__(cls, name, bases, namespace):
        if name != 'SpecialColumn':
            REGISTRY[cls.colname] = cls
        super().__init__(name, bases, namespace)


class SpecialColumn(SeriesSubclass, metaclass=SpecialRegistrar):
    _metadata = ['colname', 'base_unit']

    def __init__(self, data, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        self._name = self.__class__.colname     # use *class* attribute


# ----------------------------------------------------------
# NOTE: subclasses should follow the structure...
#   + classmethods (i.e. alternative constructors; private!)
#   + general methods
#   + properties
# ----------------------------------------------------------


class Altitude(SpecialColumn):
    colname = 'alt'
    base_unit = 'm'

    @property
    def ascent(self):
        deltas = self.diff()
        cls = type(self)
        return cls(np.where(deltas > 0, deltas, 0))


class Cadence(SpecialColumn):
    colname = 'cad'
    base_unit = 'rpm'


class Distance(SpecialColumn):
    colname = 'dist'
    base_unit = 'm'


class HeartRate(SpecialColumn):
    colname = 'hr'
    base_unit = 'bpm'


class LonLat(SpecialColumn):
    colname = 'lonlat'
    base_unit = 'degrees'

    @series_property
    def radians(self):
        """ degrees --> radians """
        return np.radians(self)


class Longitude(LonLat):
    colname = 'lon'


class Latitude(LonLat):
    colname = 'lat'


class Power(SpecialColumn):
    colname = 'pwr'
    base_unit = 'watts'


class Speed(SpecialColumn):
    colname = 'speed'
    base_unit = 'm/s'

    @classmethod
    def _from_kph(cls, data, *args, **kwargs):
        return cls(data / 60**2 * 1000, *args, **kwargs)


class Temperature(SpecialColumn):
    colname = 'temp'
    base_unit = 'degrees_C'
