#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A cursor over an in-memory byte buffer.

Every binary decoder in this package reads through a `ByteStream`, so
running off the end of a file always surfaces as `TruncatedInputError`.

"""
from struct import Struct, calcsize, unpack_from

from exerciseviewer._util.exceptions import TruncatedInputError


# Pre-compiled structs keyed by (format character, big endian?)
_SCALARS = {(char, big): Struct(('>' if big else '<') + char)
            for char in 'bBhHiIqQfd' for big in (False, True)}


class ByteStream:
    """File-like reading from an immutable buffer.

    Attributes
    ----------
    data : bytes
        The whole file.
    """
    __slots__ = ('data', '_pos')

    def __init__(self, data):
        self.data = bytes(data)
        self._pos = 0

    def __len__(self):
        return len(self.data)

    # Cursor handling
    # ---------------
    def position(self):
        return self._pos

    def remaining(self):
        return len(self.data) - self._pos

    def at_end(self):
        return self._pos >= len(self.data)

    def seek(self, offset):
        if not 0 <= offset <= len(self.data):
            raise TruncatedInputError(
                'cannot seek to %d in %d bytes' % (offset, len(self.data)))
        self._pos = offset

    def skip(self, size):
        self._require(size)
        self._pos += size

    def _require(self, size):
        if size < 0 or self._pos + size > len(self.data):
            raise TruncatedInputError(
                'wanted %d bytes at offset %d, only %d left'
                % (size, self._pos, self.remaining()))

    # Reading
    # -------
    def read_bytes(self, size):
        self._require(size)
        start, self._pos = self._pos, self._pos + size
        return self.data[start:self._pos]

    def unpack(self, fmt):
        """Read a `struct` format at the cursor, returning a tuple."""
        size = calcsize(fmt)
        self._require(size)
        values = unpack_from(fmt, self.data, self._pos)
        self._pos += size
        return values

    def peek_u8(self):
        self._require(1)
        return self.data[self._pos]

    def _scalar(self, char, big_endian):
        fmt = _SCALARS[char, big_endian]
        self._require(fmt.size)
        value, = fmt.unpack_from(self.data, self._pos)
        self._pos += fmt.size
        return value

    def read_u8(self, big_endian=False):
        return self._scalar('B', big_endian)

    def read_i8(self, big_endian=False):
        return self._scalar('b', big_endian)

    def read_u16(self, big_endian=False):
        return self._scalar('H', big_endian)

    def read_i16(self, big_endian=False):
        return self._scalar('h', big_endian)

    def read_u32(self, big_endian=False):
        return self._scalar('I', big_endian)

    def read_i32(self, big_endian=False):
        return self._scalar('i', big_endian)

    def read_u64(self, big_endian=False):
        return self._scalar('Q', big_endian)

    def read_i64(self, big_endian=False):
        return self._scalar('q', big_endian)

    def read_f32(self, big_endian=False):
        return self._scalar('f', big_endian)

    def read_f64(self, big_endian=False):
        return self._scalar('d', big_endian)
