#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Implement the Flexible and Interoperable data Transfer (FIT) protocol.

The engine knows nothing about what messages *mean*: it turns the bytes of a
file into a stream of definition and data messages, data messages carrying
raw (unscaled) field values keyed by field definition number. Making sense of
them is the job of `_reading`.

"""
import logging

from exerciseviewer.fit._profile import (
    BASE_TYPE_BYTE, BASE_TYPES, GLOBAL_MESG_NUMS, TIMESTAMP_FIELD)
from exerciseviewer._util.bytestream import ByteStream
from exerciseviewer._util.exceptions import (
    BadCRCError, BadHeaderError, BadMagicError, CorruptFileError,
    MissingDefinitionError, TruncatedInputError, UnknownBaseTypeError)


log = logging.getLogger(__name__)

CRC_TABLE = (
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
)

SUPPORTED_PROTOCOL_MAJOR = 2


class FitFile:
    """A file-like object specific to *.fit files.

    Attributes
    ----------
    stream : ByteStream
        The whole file, in memory.
    data_end : int
        Offset of the file CRC, i.e. where the messages stop. Set when the
        file header is read.
    last_timestamp : int or None
        Rolling timestamp (FIT seconds) used to expand compressed timestamp
        headers.
    local_messages : dict
        Definition messages by local message type.
    profile_version, protocol_version : float
        File version information taken from the file header.
    """
    def __init__(self, stream):
        """Initialise a new FitFile instance.

        Parameters
        ----------
        stream : ByteStream
            File content.
        """
        self.stream = stream
        self.data_end = 0
        self.last_timestamp = None
        self.local_messages = {}   # i.e. definition messages, by number

    @property
    def bytes_left(self):
        return self.data_end - self.stream.position()

    def skip_bytes(self, size):
        self.stream.skip(size)

    def set_version_info(self, version_info):
        """Decode version info the same way the FIT SDK does.

        Version info is a list containing a byte and a short unpacked from the
        file header.
        """
        prot, prof = version_info
        self.protocol_version = float(
            '{:.0f}.{:.0f}'.format(prot >> 4, prot & ((1 << 4) - 1)))
        self.profile_version = float(
            '{:.0f}.{:.0f}'.format(prof // 100, prof % 100))

    def expand_timestamp(self, time_offset):
        """Rolling timestamp for a compressed timestamp header."""
        if self.last_timestamp is None:
            raise CorruptFileError(
                'compressed timestamp before any reference time')
        last = self.last_timestamp
        timestamp = (last & ~0x1F) + time_offset
        if time_offset < (last & 0x1F):
            timestamp += 0x20   # the 5 bit offset rolled over
        self.last_timestamp = timestamp
        return timestamp


class FitMessageHeader:
    """From the FIT SDK release 20.03.00

    The record header is a one byte bit field. There are actually two types of
    record header: normal header and compressed timestamp header. The header
    type is indicated in the most significant bit (msb) of the record header.
    The normal header identifies whether the record is a definition or data
    message, and identifies the local message type. A compressed timestamp
    header is a special compressed header that may also be used with some
    local data messages to allow a compressed time format.
    """
    __slots__ = ('_message_cls', 'local_message_type', 'time_offset',
                 'developer_data')

    def message_cls(self, fitfile):
        return self._message_cls(self, fitfile)   # partial'd, kinda


class NormalHeader(FitMessageHeader):
    """From the FIT SDK release 20.03.00

    Normal Header Bit Field Description
    -----------------------------------

    =====  =============  ========================
    Bit        Value      Description
    =====  =============  ========================
      7          0        Normal header
      6        0 or 1     Message type:
                            1: definition message
                            0: data message
      5     0 (default)   Message type specific
                          (developer data flag of
                          protocol 2.0 definitions)
      4          0        Reserved
     0-3        0-15      Local message type
    =====  =============  ========================
    """
    __slots__ = tuple()

    def __init__(self, header_byte):
        self._message_cls = (
            DefinitionMessage if bool(header_byte & 0x40) else DataMessage)
        # `local_message_type` is the key (int) for the definition
        # associated with this message
        self.local_message_type = header_byte & 0xF    # bits 0-3
        self.time_offset = None
        self.developer_data = bool(header_byte & 0x20)


class CompressedTimestampHeader(FitMessageHeader):
    """From the FIT SDK release 20.03.00

    Compressed Timestamp Header Description
    ---------------------------------------

    The compressed timestamp header is a special form of record header that
    allows some timestamp information to be placed within the record header,
    rather than within the record content. In applicable use cases, this
    allows data to be recorded without the need of a 4 byte timestamp in every
    data record.

    =====  =============  ========================
    Bit        Value      Description
    =====  =============  ========================
      7          1        Compressed timestamp
     5-6        0-3       Local message type
     0-4        0-31      Time offset (seconds)
    =====  =============  ========================

    NOTE: this type of record header is used for a *data message only*.
    """
    __slots__ = tuple()

    def __init__(self, header_byte):
        self._message_cls = DataMessage
        self.local_message_type = (header_byte >> 5) & 0x3   # bits 5-6
        self.time_offset = header_byte & 0x1F                # bits 0-4
        self.developer_data = False


class DefinitionMessage:
    """From the FIT SDK release 20.03.00

    The definition message is used to create an association between the local
    message type contained in the record header, and a Global Message Number
    that relates to the global FIT message.


    Definition Message Contents
    ---------------------------

    ======  =======================  =============  ===========================
    Byte    Description                 Length      Value
    (bytes)
    ======  =======================  =============  ===========================
      0     Reserved                       1         0
      1     Architecture                   1         0 or 1
                                                       0: little endian
                                                       1: big endian
     2-3    Global message number          2         Unique to each message
      4     Fields                         1         Number of fields in the
                                                     data message
      5     Field definition(s)            3         See table below
     ...                              (per field)
     ...    Developer fields               1         Only if the developer
                                                     data flag is set
     ...    Developer field def(s)         3         Field number, size and
                                      (per field)    developer data index
    ======  =======================  =============  ===========================

    """
    __slots__ = ('header', 'global_mesg_num', 'name', 'endian',
                 'field_defs', 'dev_field_sizes')

    def __init__(self, header, fitfile):
        self.header = header

        __, big_endian = fitfile.stream.unpack('<2B')   # ignore reserved
        self.endian = endian = '>' if big_endian else '<'

        self.global_mesg_num, field_count = fitfile.stream.unpack(endian+'HB')
        self.name = GLOBAL_MESG_NUMS.get(self.global_mesg_num, 'unknown')

        self.field_defs = [FieldDefinition(fitfile, endian)
                           for _ in range(field_count)]

        # Developer fields aren't decoded, we only need their sizes.
        self.dev_field_sizes = []
        if header.developer_data:
            dev_count = fitfile.stream.read_u8()
            for _ in range(dev_count):
                __, size, __ = fitfile.stream.unpack('<3B')
                self.dev_field_sizes.append(size)

        # Save this local message.
        fitfile.local_messages[header.local_message_type] = self


class DataMessage:
    """The useful part of a *.fit file.

    The header identifies an associated definition message. We pull the
    field definitions from that message and use them to parse data from
    the fitfile.

    Attributes
    ----------
    global_mesg_num : int
    name : str
        Profile name of the message ('record', 'lap', ...).
    fields : dict
        Field definition number --> (base type name, value). Fields holding
        the invalid value of their base type are left out.
    """
    __slots__ = ('header', 'global_mesg_num', 'name', 'fields')

    def __init__(self, header, fitfile):
        self.header = header

        def_message = fitfile.local_messages.get(header.local_message_type)
        if def_message is None:
            raise MissingDefinitionError(header.local_message_type)

        self.global_mesg_num = def_message.global_mesg_num
        self.name = def_message.name

        fields = {}
        for field_def in def_message.field_defs:
            value = field_def.read(fitfile)
            if value is not None:   # invalid values are dropped
                fields[field_def.def_num] = (field_def.base_type.name, value)

        for size in def_message.dev_field_sizes:
            fitfile.skip_bytes(size)

        if header.time_offset is not None:
            timestamp = fitfile.expand_timestamp(header.time_offset)
            fields[TIMESTAMP_FIELD] = ('uint32', timestamp)
        elif TIMESTAMP_FIELD in fields:
            fitfile.last_timestamp = fields[TIMESTAMP_FIELD][1]

        self.fields = fields

    def __contains__(self, def_num):
        return def_num in self.fields

    def get(self, def_num, default=None):
        """Value of a field, or `default` if it's missing/invalid."""
        try:
            return self.fields[def_num][1]
        except KeyError:
            return default


class FieldDefinition:
    """From the FIT SDK release 20.03.00

    Field Definition Contents
    -------------------------

    ======  =================  ===============================================
     Byte    Name               Description
    ======  =================  ===============================================
      0     Field definition   Defined in the gloabl FIT profile for the
            number             specified FIT message.
      1     Size               Size (in bytes) of the specified FIT message's
                               field.
      2     Base type          Base type of the specified FIT message's field.
    ======  =================  ===============================================

    """
    __slots__ = ('def_num', 'size', 'base_type', 'endian')

    def __init__(self, fitfile, endian):
        # NOTE: reading single bytes, so no need to apply endianness here.
        self.def_num, self.size, base_type_num = fitfile.stream.unpack('<3B')
        self.base_type = lookup_base_type(base_type_num)
        self.endian = endian   # for reference

        # Sizes that don't fit the base type are kept as raw bytes.
        if self.size % self.base_type.size:
            self.base_type = BASE_TYPE_BYTE

    @property
    def n_values(self):
        return self.size // self.base_type.size

    @property
    def fmt(self):
        """Format for struct.unpacking."""
        if self.base_type.is_string:
            return '%ds' % self.size
        return '{0.endian}{0.n_values}{0.base_type.fmt}'.format(self)

    def read(self, fitfile):
        """Parse data for this field definition from the fitfile.

        Returns a single value, a tuple for array fields (invalid elements
        are None) or None if the whole field is invalid.
        """
        if self.size == 0:
            return None

        values = fitfile.stream.unpack(self.fmt)
        parse = self.base_type.parse

        if len(values) == 1:
            return parse(values[0])    # checks validity

        parsed = tuple(parse(value) for value in values)
        if all(value is None for value in parsed):
            return None
        return parsed


def lookup_base_type(base_type_num):
    try:
        return BASE_TYPES[base_type_num]
    except KeyError:
        pass
    # Some old files don't set the endian ability bit.
    type_num = base_type_num & 0x1F
    for base_type in BASE_TYPES.values():
        if base_type.type_num == type_num:
            return base_type
    raise UnknownBaseTypeError(base_type_num)


def calc_crc(data, crc=0):
    """FIT CRC-16 (nibble-wise table lookup)."""
    for byte in data:
        # compute checksum of lower four bits of byte
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[byte & 0xF]
        # now compute checksum of upper four bits of byte
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[(byte >> 4) & 0xF]
    return crc


def check_crc(expected, data, *, strict, what='file'):
    computed = calc_crc(data)
    if computed == expected:
        return True
    if strict:
        raise BadCRCError(expected, computed)
    log.warning('%s CRC mismatch (file says 0x%04X, data gives 0x%04X); '
                'carrying on', what, expected, computed)
    return False


def read_file_header(fitfile, *, strict_crc=False):
    """Read the *.fit file header, modifying `fitfile` in place.

    Attributes set on `fitfile`:
        + version info (protocol_version and profile_version)
        + data_end

    The stream is also advanced to the start of the first message header.
    """
    stream = fitfile.stream
    header_data = stream.read_bytes(12)

    if header_data[8:12] != b'.FIT':
        raise BadMagicError('fit')

    # Larger fields are explicitly little endian from SDK.
    stream.seek(0)
    header_size, *version_info, data_size = stream.unpack('<2BHI4x')
    fitfile.set_version_info(version_info)

    if header_size < 12:
        raise BadHeaderError('irregular file header size (%d)' % header_size)
    if int(fitfile.protocol_version) > SUPPORTED_PROTOCOL_MAJOR:
        raise BadHeaderError(
            'unsupported protocol version %s' % fitfile.protocol_version)

    extra_header = header_size - 12
    if extra_header:
        if extra_header < 2:
            raise BadHeaderError('irregular file header size')

        header_crc = stream.read_u16()
        if header_crc:   # zero means "not computed"
            check_crc(header_crc, header_data,
                      strict=strict_crc, what='header')
        stream.skip(extra_header - 2)

    fitfile.data_end = header_size + data_size
    if fitfile.data_end + 2 > len(stream):
        raise TruncatedInputError(
            'header announces %d data bytes, file holds %d'
            % (data_size, len(stream) - header_size - 2))


def read_fit_message(fitfile):
    """Parse a message (header + contents)."""
    header_byte = fitfile.stream.read_u8()
    # A value of 0 in bit 7 indicates that this is a normal header.
    header_cls = (CompressedTimestampHeader if (header_byte & 0x80) else
                  NormalHeader)
    header = header_cls(header_byte)

    message = header.message_cls(fitfile)

    return message


def gen_fit_messages(data, *, strict_crc=False):
    """Generator function for iterating over *.fit file messages.

    Parameters
    ----------
    data : bytes
        Content of an ANT/Garmin fit file.
    strict_crc : bool, optional
        Raise `BadCRCError` on a checksum mismatch instead of logging it.
        The check happens once every message has been read.

    Yields
    ------
    DefinitionMessage or DataMessage
        Parsed messages from `data`.
    """
    fitfile = FitFile(ByteStream(data))
    read_file_header(fitfile, strict_crc=strict_crc)   # inplace changes

    while fitfile.bytes_left > 0:
        yield read_fit_message(fitfile)

    if fitfile.bytes_left < 0:
        raise TruncatedInputError(
            'last message runs %d byte(s) past the declared data size'
            % -fitfile.bytes_left)

    stream = fitfile.stream
    stream.seek(fitfile.data_end)
    file_crc = stream.read_u16()
    check_crc(file_crc, stream.data[:fitfile.data_end], strict=strict_crc)
