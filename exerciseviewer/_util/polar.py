#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Building blocks shared by the Polar raw frame formats (frd, srd).

Polar units store times as packed BCD, speeds in 1/16 km/h and altitudes as
sign/magnitude words; the helpers here turn those into plain numbers.

"""
from datetime import datetime

from exerciseviewer._types import HeartRateLimit
from exerciseviewer._util.exceptions import CorruptFileError


ZONE_SLAB_FMT = '<3B3H'     # lower, upper, flags, below, within, above
ZONE_SLAB_SIZE = 9
ZONE_FLAG_PERCENT = 0x01

SPEED_SCALE = 16            # 1/16 km/h


def bcd(byte):
    """Two decimal digits packed into one byte."""
    high, low = byte >> 4, byte & 0x0F
    if high > 9 or low > 9:
        raise CorruptFileError('invalid BCD value 0x%02X' % byte)
    return high * 10 + low


def read_datetime(stream):
    """BCD seconds, minutes, hours, day, month, year (since 2000)."""
    second, minute, hour, day, month, year = (
        bcd(b) for b in stream.read_bytes(6))
    try:
        return datetime(2000 + year, month, day, hour, minute, second)
    except ValueError as e:
        raise CorruptFileError('invalid start time: %s' % e) from e


def read_duration(stream):
    """BCD hours, minutes, seconds, tenths --> tenths of a second."""
    hours, minutes, seconds, tenths = (bcd(b) for b in stream.read_bytes(4))
    return ((hours * 60 + minutes) * 60 + seconds) * 10 + tenths


def read_zone(stream):
    lower, upper, flags, below, within, above = stream.unpack(ZONE_SLAB_FMT)
    return HeartRateLimit(lower, upper,
                          absolute_range=not flags & ZONE_FLAG_PERCENT,
                          time_below=below, time_within=within,
                          time_above=above)


def read_zones(stream, count):
    """Up to `count` zone slabs; slabs cut off by the end of file are
    left out."""
    zones = []
    for _ in range(count):
        if stream.remaining() < ZONE_SLAB_SIZE:
            break
        zones.append(read_zone(stream))
    return zones


def read_hours_minutes(stream):
    """u16 hours + u8 minutes --> minutes."""
    hours, minutes = stream.unpack('<HB')
    return hours * 60 + minutes


def read_or_zero(stream, offset, size, read):
    """Call `read(stream)` at `offset`, or give 0 if the file has no
    room for the `size` bytes it needs (older units write shorter
    frames)."""
    if offset + size > len(stream):
        return 0
    stream.seek(offset)
    return read(stream)


def altitude(word):
    """Sign/magnitude altitude word --> signed metres."""
    magnitude = word & 0x7FFF
    return -magnitude if word & 0x8000 else magnitude


def speed(word):
    """1/16 km/h --> km/h."""
    return word / SPEED_SCALE
