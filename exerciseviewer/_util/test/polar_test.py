#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from datetime import datetime
import struct

import pytest

from exerciseviewer._util import polar
from exerciseviewer._util.bytestream import ByteStream
from exerciseviewer._util.exceptions import CorruptFileError


def test_bcd():
    assert polar.bcd(0x59) == 59
    assert polar.bcd(0x00) == 0
    with pytest.raises(CorruptFileError):
        polar.bcd(0x5A)


def test_datetime_and_duration():
    stream = ByteStream(bytes([0x48, 0x27, 0x19, 0x01, 0x09, 0x08,
                               0x01, 0x02, 0x03, 0x04]))
    assert polar.read_datetime(stream) == datetime(2008, 9, 1, 19, 27, 48)
    assert polar.read_duration(stream) == ((1 * 60 + 2) * 60 + 3) * 10 + 4

    with pytest.raises(CorruptFileError):   # 31st of February
        polar.read_datetime(ByteStream(bytes([0, 0, 0, 0x31, 0x02, 0x08])))


def test_altitude_sign_magnitude():
    assert polar.altitude(0x0123) == 0x123
    assert polar.altitude(0x8000 | 17) == -17
    assert polar.altitude(0x8000) == 0


def test_speed():
    assert polar.speed(16 * 25) == 25.0
    assert polar.speed(8) == 0.5


def test_zones():
    stream = ByteStream(struct.pack('<3B3H', 120, 140, 0, 1, 2, 3) +
                        struct.pack('<3B3H', 60, 70, 1, 4, 5, 6) + b'\x00')
    first, second = polar.read_zones(stream, 4)
    assert first.absolute_range and not second.absolute_range
    assert (second.time_below, second.time_within, second.time_above) == (
        4, 5, 6)


def test_read_or_zero():
    stream = ByteStream(struct.pack('<HI', 1, 99))
    assert polar.read_or_zero(stream, 2, 4, lambda s: s.read_u32()) == 99
    assert polar.read_or_zero(stream, 4, 4, lambda s: s.read_u32()) == 0
