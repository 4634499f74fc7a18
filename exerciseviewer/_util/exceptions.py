#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions for this package.

Callers tell failures apart by class only; the messages are for humans.

"""


class ExerciseViewerError(Exception):
    """Base exception."""
    _default_message = ''

    def __init__(self, message=None):
        super().__init__(message if message else self._default_message)


class ExerciseFileNotFoundError(ExerciseViewerError, FileNotFoundError):
    def __init__(self, file_path):
        super().__init__('no such exercise file: %r' % (file_path,))
        self.file_path = file_path


class UnsupportedFormatError(ExerciseViewerError):
    def __init__(self, suffix):
        super().__init__('%r is not a supported file type' % (suffix,))
        self.suffix = suffix


class TruncatedInputError(ExerciseViewerError):
    _default_message = 'unexpected end of input'


class BadMagicError(ExerciseViewerError):
    def __init__(self, fmt):
        determiner = 'an' if fmt[0] in ('aeiou' + 'hs') else 'a'  # grammar
        message = "this doesn't look like %s %s file!" % (determiner, fmt)
        super().__init__(message)


class BadHeaderError(ExerciseViewerError):
    _default_message = 'irregular file header'


class BadCRCError(ExerciseViewerError):
    def __init__(self, expected, computed):
        super().__init__('CRC mismatch (file says 0x%04X, data gives 0x%04X)'
                         % (expected, computed))
        self.expected, self.computed = expected, computed


# Structural violations of the FIT protocol
# -----------------------------------------
class UnknownBaseTypeError(ExerciseViewerError):
    def __init__(self, base_type_num):
        super().__init__('unknown FIT base type (0x%02X)' % base_type_num)
        self.base_type_num = base_type_num


class MissingDefinitionError(ExerciseViewerError):
    def __init__(self, local_message_type):
        super().__init__('invalid local message type (%d)' %
                         local_message_type)
        self.local_message_type = local_message_type


# Semantic problems
# -----------------
class NotAnExerciseError(ExerciseViewerError):
    _default_message = 'file contains no exercise data'


class CorruptFileError(ExerciseViewerError):
    _default_message = 'file content is inconsistent'


class RequiredColumnError(ExerciseViewerError):
    def __init__(self, column):
        super().__init__('{!r} column not found'.format(column))
