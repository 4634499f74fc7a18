#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from pandas import DataFrame, Series


__all__ = ('DataFrameSubclass', 'SeriesSubclass',  # using * import elsewhere
           'series_property')


class DataFrameSubclass(DataFrame):
    _metadata = []

    @property
    def _constructor(self):
        return self.__class__

    def __finalize__(self, other, method=None, **kwargs):
        """Propagate metadata from other to self."""
        for name in self._metadata:
            object.__setattr__(self, name, getattr(other, name, None))
        return self


class SeriesSubclass(Series):
    _metadata = []

    @property
    def _constructor(self):
        return self.__class__

    def __finalize__(self, other, method=None, **kwargs):
        """Propagate metadata from other to self."""
        for name in self._metadata:
            object.__setattr__(self, name, getattr(other, name, None))
        return self


class series_property:
    """A simple descriptor that emulates property, but returns a Series."""
    def __init__(self, fget):
        self.fget = fget
        self.__doc__ = fget.__doc__

    def __get__(self, obj, objtype=None):
        return Series(self.fget(obj))
