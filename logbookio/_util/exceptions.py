#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions for this package.

"""


class LogbookIOError(Exception):
    """Base exception."""
    _default_message = ''

    def __init__(self, message=None):
        super().__init__(message if message else self._default_message)


class InvalidFileError(LogbookIOError):
    def __init__(self, fmt):
        determiner = 'an' if fmt[0] in 'aeiou' else 'a'  # grammar
        message = "this doesn't look like %s %s!" % (determiner, fmt)
        super().__init__(message)


class RequiredColumnError(LogbookIOError):
    def __init__(self, column, cls=None):
        if cls is None:
            message = '{!r} column not found'.format(column)
        else:
            message = '{!r} column should be of type {!s}'.format(column, cls)
        super().__init__(message)


# Exceptions specific to the pm5 subpackage
# -----------------------------------------
class DecodeError(LogbookIOError):
    """Anything that stops a logbook from being decoded."""
    _default_message = 'Error encountered during parsing.'


class StreamError(DecodeError):
    """The underlying file object failed to read or seek.

    Always raised ``from`` the original ``OSError``.
    """
    def __init__(self, cause):
        message = 'Error encountered during parsing:\n%s' % cause
        super().__init__(message)


class TruncatedRecordError(DecodeError):
    def __init__(self, what, wanted, got):
        message = '%s needs %d bytes but only %d were read' % (
            what, wanted, got)
        super().__init__(message)
        self.wanted, self.got = wanted, got


class MalformedRecordError(DecodeError):
    pass


class UnsupportedVariantError(DecodeError, NotImplementedError):
    """The record is well formed, but its byte layout is not known yet.

    This is *not* a sign of corrupt data.
    """
    def __init__(self, workout_type, detail=None):
        message = 'decoding %s workouts is not supported yet' % workout_type
        if detail:
            message += ' (%s)' % detail
        super().__init__(message)
        self.workout_type = workout_type
