#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
General tools that complement the API.

"""
import numpy as np


EARTH_RADIUS = 6371e3   # metres


def haversine(lon, lat, *, fill=0):
    """Great-circle distances between two points on a sphere.

    Parameters
    ----------
    lon, lat: numpy arrays or lists
        Positional coordinates in *radians*.
    fill: scalar
        An appropriate missing value for the start.

    Returns
    -------
    numpy array
        Distance(s) between adjacent points in metres.

    Examples
    --------
        >>> dist = haversine(np.radians([-77.037852, -77.043934]),
        ...                  np.radians([38.898556, 38.897147]))
        >>> '{:.1f} metres'.format(dist[-1])  # ignoring the leading zero
        '549.2 metres'

    References
    ----------
    https://rosettacode.org/wiki/Haversine_formula#Python
    http://www.movable-type.co.uk/scripts/latlong.html
    """
    lon, lat = np.asarray(lon), np.asarray(lat)   # check
    dlon, dlat = np.diff(lon), np.diff(lat)

    a = (np.sin(dlat / 2)**2
         + np.cos(lat[:-1])
         * np.cos(lat[1:])
         * np.sin(dlon / 2)**2)

    c = 2 * np.arcsin(np.sqrt(a)) * EARTH_RADIUS

    return np.concatenate(([fill], c))


def semicircles_to_degrees(semicircles):
    """Positional data conversion for *.fit files.

    2**31 semicircles make 180 degrees.
    """
    return semicircles * (180 / 2**31)


def mps_to_kph(value):
    """ metres/second --> kilometres/hour """
    return value * 3.6
