#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Avoid repeating documentation. A bit hacky but it will do.

"""
import inspect


def read(func):
    """Decode an exercise file into an `Exercise` record.

    Parameters
    ----------
    file_path : str
        Path to the file. It is read into memory in one go and closed
        before decoding starts.
    **options
        Keyword-only decoder options (``tz_str``, ``strict_crc``); those a
        format has no use for are ignored.

    Returns
    -------
    Exercise

    Raises
    ------
    ExerciseFileNotFoundError
        If `file_path` does not exist.
    ExerciseViewerError
        Some subclass thereof, if the content can't be decoded.
    """
    this_func = inspect.stack()[0][3]
    this_doc = globals().get(this_func).__doc__
    func.__doc__ = this_doc
    return func


def decode(func):
    """Decode an in-memory exercise file into an `Exercise` record.

    Parameters
    ----------
    data : bytes
        The complete file content.
    **options
        Keyword-only decoder options (``tz_str``, ``strict_crc``); those a
        format has no use for are ignored.

    Returns
    -------
    Exercise

    Raises
    ------
    ExerciseViewerError
        Some subclass thereof, if the content can't be decoded.
    """
    this_func = inspect.stack()[0][3]
    this_doc = globals().get(this_func).__doc__
    func.__doc__ = this_doc
    return func
