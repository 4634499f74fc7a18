#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from importlib import import_module
import logging
from os.path import splitext

from exerciseviewer._util.exceptions import UnsupportedFormatError


log = logging.getLogger(__name__)

# File suffix --> decoder subpackage
FORMATS = {
    'fit': 'fit',
    'srd': 'srd',
    'sr2': 'srd',
    'frd': 'frd',
    'hrm': 'hrm',
    'hsr': 'hsr',
    'tcx': 'tcx',
}

MODULE_CACHE = {}


def suffix_of(file_path):
    """Extension without the period, lowercased ('' if there is none)."""
    return splitext(str(file_path))[-1][1:].lower()


def decoder_for(suffix):
    """Import (once) the decoder subpackage handling `suffix`."""
    suffix = suffix.lower().lstrip('.')
    try:
        name = FORMATS[suffix]
    except KeyError:
        raise UnsupportedFormatError(suffix) from None

    module = MODULE_CACHE.get(name, None)
    if module is None:
        module = MODULE_CACHE[name] = import_module('exerciseviewer.' + name)
    log.debug('decoding %s data with %s', suffix, module.__name__)
    return module


def parse(file_path, **options):
    """Dispatch a file decoder based on file extension.

    Parameters
    ----------
    file_path : str or path-like
        Path to the file to be read.
    **options
        Keyword-only decoder options, passed on as they are:

        tz_str : str, optional
            pytz zone name for turning UTC start times into civil time
            (fit, tcx).
        strict_crc : bool, optional
            Make a fit checksum mismatch fatal. Default False.

    Returns
    -------
    Exercise

    Raises
    ------
    UnsupportedFormatError
        If the file type (based on the extension) is not supported.
    ExerciseFileNotFoundError
        If `file_path` does not exist.
    """
    return decoder_for(suffix_of(file_path)).read(file_path, **options)


def parse_bytes(data, suffix_hint, **options):
    """As `parse`, for file content already in memory.

    `suffix_hint` is a file name or a bare suffix such as ``'fit'``.
    """
    suffix = suffix_of(suffix_hint) or suffix_hint
    return decoder_for(suffix).decode(data, **options)
