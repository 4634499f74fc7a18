#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Build small fit files byte by byte and check what comes out the other end.

"""
from datetime import datetime
import logging
import struct

import pytest

from exerciseviewer import fit
from exerciseviewer.fit import _protocol as protocol
from exerciseviewer._types import ExerciseFileType, Position
from exerciseviewer._util.bytestream import ByteStream
from exerciseviewer._util.exceptions import (
    BadCRCError, BadHeaderError, BadMagicError, ExerciseFileNotFoundError,
    MissingDefinitionError, NotAnExerciseError, TruncatedInputError,
    UnknownBaseTypeError)


# Base types: (identifier, struct format)
ENUM = (0x00, 'B')
SINT8 = (0x01, 'b')
UINT8 = (0x02, 'B')
UINT16 = (0x84, 'H')
SINT32 = (0x85, 'i')
UINT32 = (0x86, 'I')

START = datetime(2010, 7, 4, 4, 7, 36)   # UTC
T0 = int((START - datetime(1989, 12, 31)).total_seconds())

LAT, LON = 629145600, -14680064   # semicircles


class FitBuilder:
    """Writes the messages of a fit file, then wraps them up."""

    def __init__(self):
        self.messages = bytearray()
        self.formats = {}

    def define(self, local, mesg_num, fields, *, dev_sizes=()):
        header = 0x40 | local | (0x20 if dev_sizes else 0)
        self.messages += bytes([header])
        self.messages += struct.pack('<BBHB', 0, 0, mesg_num, len(fields))
        fmt = '<'
        for def_num, (base_type, char) in fields:
            size = struct.calcsize(char)
            self.messages += struct.pack('<3B', def_num, size, base_type)
            fmt += char
        if dev_sizes:
            self.messages += struct.pack('<B', len(dev_sizes))
            for i, size in enumerate(dev_sizes):
                self.messages += struct.pack('<3B', i, size, 0)
        self.formats[local] = (fmt, sum(dev_sizes))
        return self

    def data(self, local, *values, time_offset=None):
        if time_offset is None:
            header = local
        else:
            header = 0x80 | (local << 5) | time_offset
        fmt, dev_size = self.formats[local]
        self.messages += bytes([header]) + struct.pack(fmt, *values)
        self.messages += b'\xAA' * dev_size
        return self

    def build(self, *, protocol_version=0x10, header_size=14,
              bad_crc=False, magic=b'.FIT', data_size=None):
        if data_size is None:
            data_size = len(self.messages)
        header = struct.pack('<2BHI4s', header_size, protocol_version, 2093,
                             data_size, magic)
        if header_size == 14:
            header += struct.pack('<H', protocol.calc_crc(header))
        content = header + bytes(self.messages)
        crc = protocol.calc_crc(content)
        if bad_crc:
            crc ^= 0xFFFF
        return content + struct.pack('<H', crc)


RECORD_FIELDS = [(253, UINT32), (0, SINT32), (1, SINT32), (2, UINT16),
                 (3, UINT8), (4, UINT8), (5, UINT32), (6, UINT16),
                 (13, SINT8)]
LAP_FIELDS = [(253, UINT32), (7, UINT32), (9, UINT32), (15, UINT8),
              (16, UINT8), (21, UINT16)]
SESSION_FIELDS = [(253, UINT32), (2, UINT32), (5, ENUM), (8, UINT32),
                  (9, UINT32), (11, UINT16), (14, UINT16), (15, UINT16),
                  (16, UINT8), (17, UINT8), (18, UINT8), (19, UINT8),
                  (22, UINT16)]


def cycling_file(*, activity=True, **build_options):
    builder = FitBuilder()
    builder.define(0, 0, [(0, ENUM), (1, UINT16), (2, UINT16)])
    builder.data(0, 4, 1, 1036)    # activity file, garmin, edge 500

    builder.define(1, 20, RECORD_FIELDS)
    builder.data(1, T0, LAT, LON, 3000, 120, 80, 0, 5000, 20)
    builder.data(1, T0 + 1, LAT, LON, 3005, 125, 82, 500, 5500, 21)
    builder.data(1, T0 + 2, 0x7FFFFFFF, 0x7FFFFFFF, 3010, 130, 84, 1000,
                 6000, 22)

    builder.define(2, 19, LAP_FIELDS)
    builder.data(2, T0 + 1, 1000, 500, 120, 125, 1)
    builder.data(2, T0 + 2, 1000, 500, 127, 130, 0xFFFF)

    builder.define(3, 18, SESSION_FIELDS)
    builder.data(3, T0 + 2, T0, 2, 2000, 1000, 1567, 5000, 6000,
                 121, 180, 84, 119, 3)

    if activity:   # local time is two hours ahead of UTC
        builder.define(0, 34, [(253, UINT32), (5, UINT32)])
        builder.data(0, T0 + 2, T0 + 2 + 7200)

    return builder.build(**build_options)


# setup
exercise = fit.decode(cycling_file())


def test_summary():
    assert exercise.file_type is ExerciseFileType.GARMIN_FIT
    assert exercise.device_name == 'Garmin EDGE500'
    assert exercise.date_time == datetime(2010, 7, 4, 6, 7, 36)
    assert exercise.duration == 20
    assert exercise.recording_interval is None
    assert exercise.sport == 'cycling'
    assert exercise.heart_rate_avg == 121
    assert exercise.heart_rate_max == 180
    assert exercise.energy == 1567


def test_blocks():
    assert exercise.speed.distance == 10
    assert exercise.speed.speed_avg == pytest.approx(18.0)
    assert exercise.speed.speed_max == pytest.approx(21.6)

    altitude = exercise.altitude
    assert (altitude.altitude_min, altitude.altitude_avg,
            altitude.altitude_max, altitude.ascent) == (100, 101, 102, 3)

    assert exercise.cadence.cadence_avg == 84
    assert exercise.cadence.cadence_max == 119

    temperature = exercise.temperature
    assert (temperature.temperature_min, temperature.temperature_avg,
            temperature.temperature_max) == (20, 21, 22)

    assert exercise.power is None


def test_recording_mode():
    mode = exercise.recording_mode
    assert mode.heart_rate and mode.speed and mode.altitude
    assert mode.cadence and mode.temperature and mode.location
    assert not mode.power


def test_samples():
    samples = exercise.sample_list
    assert [s.timestamp for s in samples] == [0, 1000, 2000]
    assert [s.heart_rate for s in samples] == [120, 125, 130]
    assert [s.altitude for s in samples] == [100, 101, 102]
    assert [s.distance for s in samples] == [0, 5, 10]
    assert samples[1].speed == pytest.approx(19.8)
    assert samples[0].cadence == 80
    assert samples[2].temperature == 22


def test_semicircles():
    position = exercise.sample_list[0].position
    assert position == Position(52.734375, -1.23046875)
    assert exercise.sample_list[2].position is None   # invalid values


def test_laps():
    first, second = exercise.lap_list
    assert (first.time_split, second.time_split) == (10, 20)
    assert first.heart_rate_avg == 120 and first.heart_rate_max == 125
    assert first.heart_rate_split == 125
    assert first.speed.distance == 5 and second.speed.distance == 10
    assert first.speed.speed_end == pytest.approx(19.8)
    assert first.altitude.altitude == 101 and first.altitude.ascent == 1
    assert second.altitude.ascent == 0
    assert first.temperature.temperature == 21
    assert first.position_split == Position(52.734375, -1.23046875)


def test_determinism():
    assert fit.decode(cycling_file()) == fit.decode(cycling_file())


def test_timezone_fallback():
    data = cycling_file(activity=False)
    assert fit.decode(data).date_time == START
    berlin = fit.decode(data, tz_str='Europe/Berlin')
    assert berlin.date_time == datetime(2010, 7, 4, 6, 7, 36)


def test_compressed_timestamps():
    fitfile = protocol.FitFile(ByteStream(b''))
    fitfile.last_timestamp = 0x1000001E
    assert fitfile.expand_timestamp(0x1F) == 0x1000001F
    assert fitfile.expand_timestamp(0x02) == 0x10000022   # rolled over

    builder = FitBuilder()
    builder.define(0, 20, [(253, UINT32), (3, UINT8)])
    builder.define(1, 20, [(3, UINT8)])
    builder.data(0, 0x1000001E, 100)
    builder.data(1, 101, time_offset=0x1F)
    builder.data(1, 102, time_offset=0x02)

    records = [fields for _, fields in fit.gen_records(builder.build())]
    assert [r[253] for r in records] == [0x1000001E, 0x1000001F, 0x10000022]
    assert [r[3] for r in records] == [100, 101, 102]


def test_developer_fields():
    builder = FitBuilder()
    builder.define(0, 20, [(253, UINT32), (3, UINT8)], dev_sizes=(2, 1))
    builder.data(0, T0, 140)
    builder.data(0, T0 + 1, 141)

    data = builder.build(protocol_version=0x20)
    records = [fields for _, fields in fit.gen_records(data)]
    assert [r[3] for r in records] == [140, 141]


def test_crc_tolerance(caplog):
    data = cycling_file(bad_crc=True)
    with caplog.at_level(logging.WARNING):
        tolerated = fit.decode(data)
    assert tolerated == exercise
    assert 'CRC mismatch' in caplog.text

    with pytest.raises(BadCRCError):
        fit.decode(data, strict_crc=True)


def test_short_header():
    assert fit.decode(cycling_file(header_size=12)) == exercise


def test_settings_only():
    builder = FitBuilder()
    builder.define(0, 0, [(0, ENUM), (1, UINT16), (2, UINT16)])
    builder.data(0, 2, 1, 1036)    # settings file
    builder.define(1, 2, [(0, UINT32)])
    builder.data(1, 12345)

    with pytest.raises(NotAnExerciseError):
        fit.decode(builder.build())


def test_broken_files():
    with pytest.raises(BadMagicError):
        fit.decode(cycling_file(magic=b'.FIX'))

    with pytest.raises(BadHeaderError):
        fit.decode(cycling_file(protocol_version=0x30))

    with pytest.raises(TruncatedInputError):
        fit.decode(cycling_file()[:-10])

    builder = FitBuilder()
    builder.formats[5] = ('<B', 0)
    builder.data(5, 1)
    with pytest.raises(MissingDefinitionError):
        fit.decode(builder.build())

    builder = FitBuilder()
    builder.define(0, 20, [(3, (0x1F, 'B'))])
    with pytest.raises(UnknownBaseTypeError):
        fit.decode(builder.build())


def test_message_past_data_size():
    full = len(cycling_file()) - 16   # minus header and file CRC
    data = cycling_file(data_size=full - 2)
    with pytest.raises(TruncatedInputError):
        fit.decode(data)
    with pytest.raises(TruncatedInputError):
        list(fit.gen_records(data))


def test_missing_file(tmpdir):
    with pytest.raises(ExerciseFileNotFoundError):
        fit.read(str(tmpdir.join('missing-file.fit')))
