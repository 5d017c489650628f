#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Implement the PM5 logbook format.

The monitor keeps its logbook in two files. ``LogDataAccessTbl.bin`` is an
index ("access table") of fixed-size entries, one per workout, each of which
points at a byte offset in ``LogDataStorage.bin`` where the full workout
("storage record") lives. Neither is documented; everything here was worked
out from drives written by real monitors.

Index integers are little endian, except for the entry timestamp. Storage
record integers are all big endian. Runs of bytes whose meaning is unknown
are kept as opaque ``bytes`` so that nothing is silently defaulted.

TODO:
-----
    + interval workout layouts (fixed and variable)
    + split layouts of single time and single calorie workouts

"""
from collections import namedtuple
import logging
from datetime import datetime, timedelta
from enum import Enum
from struct import Struct, calcsize, unpack

from logbookio.pm5._workouts import Workout, WorkoutFrame, WorkoutType
from logbookio._util.exceptions import (
    MalformedRecordError, StreamError, TruncatedRecordError,
    UnsupportedVariantError)


ENTRY_VALID = 0xF0
ENTRY_END = 0xFF
ENTRY_END_ALT = 0x70   # only ever seen at the very end of a table
ENTRY_MAGICS = (ENTRY_VALID, ENTRY_END, ENTRY_END_ALT)

TENTH = timedelta(milliseconds=100)   # durations are stored in 0.1 s

logger = logging.getLogger(__name__)


def read_exact(stream, size, what):
    """Read exactly `size` bytes, or fail saying what we were reading."""
    try:
        raw = stream.read(size)
    except OSError as e:
        raise StreamError(e) from e

    if len(raw) != size:
        raise TruncatedRecordError(what, size, len(raw))
    return raw


def decode_timestamp(value):
    """Decode the packed 32-bit timestamp of a storage record.

    ======  =====  ============================
     Bits   Width  Field
    ======  =====  ============================
    31-25     7    Year (offset from 2000)
    20-24     5    Day of month
    16-19     4    Month
     8-15     8    Hour
     0-6      7    Minute
    ======  =====  ============================

    Values are not range checked before building the date, so nonsense
    (e.g. month zero) raises MalformedRecordError rather than wrapping.
    """
    year = 2000 + ((value >> 25) & 0b1111111)
    day = (value >> 20) & 0b11111
    month = (value >> 16) & 0b1111
    hour = (value >> 8) & 0b11111111
    minute = value & 0b1111111

    try:
        return datetime(year, month, day, hour, minute)
    except ValueError as e:
        raise MalformedRecordError(
            'invalid timestamp 0x%08X: %s' % (value, e)) from e


class IndexEntry:
    """One entry of the access table.

    =======  ======  ======================  =============================
    Offset   Length  Field                   Notes
    =======  ======  ======================  =============================
       0       1     magic                   0xF0 valid, 0xFF/0x70 end
       1       1     workout_type            see `WorkoutType`
       2       2     interval_rest_time      little endian
       4       2     workout_name
       6       2     unknown_1
       8       2     timestamp               *big* endian
      10       2     unknown_2
      12       2     num_splits              little endian
      14       2     duration_or_distance    little endian
      16       2     record_offset           into LogDataStorage.bin
      18       6     unknown_3
      24       2     record_size             little endian
      26       2     index                   little endian
      28       4     unknown_4
    =======  ======  ======================  =============================

    Only `magic`, `workout_type` and `record_offset` are used when reading a
    logbook; `record_size` is informational and does not bound the read.
    """
    __slots__ = ('magic', 'workout_type', 'interval_rest_time',
                 'workout_name', 'unknown_1', 'timestamp', 'unknown_2',
                 'num_splits', 'duration_or_distance', 'record_offset',
                 'unknown_3', 'record_size', 'index', 'unknown_4')

    # The timestamp breaks the endianness, hence three chunks.
    LAYOUT = (
        (Struct('<BBH2s2s'), __slots__[:5]),
        (Struct('>H'), __slots__[5:6]),
        (Struct('<2sHHH6sHH4s'), __slots__[6:]),
    )
    SIZE = 32

    def __init__(self, **fields):
        for name in self.__slots__:
            setattr(self, name, fields[name])

    @classmethod
    def read(cls, stream):
        return cls.unpack(read_exact(stream, cls.SIZE, 'access table entry'))

    @classmethod
    def unpack(cls, raw):
        fields, offset = {}, 0
        for layout, names in cls.LAYOUT:
            fields.update(zip(names, layout.unpack_from(raw, offset)))
            offset += layout.size

        entry = cls(**fields)
        if entry.magic not in ENTRY_MAGICS:
            raise MalformedRecordError(
                'unrecognised access table entry (magic 0x%02X)' % entry.magic)
        return entry

    def pack(self):
        """The inverse of `unpack`."""
        return b''.join(
            layout.pack(*(getattr(self, name) for name in names))
            for layout, names in self.LAYOUT)

    @property
    def is_terminator(self):
        return self.magic in (ENTRY_END, ENTRY_END_ALT)

    def __eq__(self, other):
        if not isinstance(other, IndexEntry):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name)
                   for name in self.__slots__)

    def __repr__(self):
        return '<IndexEntry magic=0x%02X type=0x%02X offset=%d size=%d>' % (
            self.magic, self.workout_type, self.record_offset,
            self.record_size)


def gen_access_table(stream):
    """Generator function for iterating over valid access table entries.

    Stops at (and drops) the first end-of-table entry. Running out of data
    before that is an error, as is an entry with an unknown magic byte.
    """
    while True:
        entry = IndexEntry.read(stream)
        if entry.is_terminator:
            return
        yield entry


def read_access_table(stream):
    """All valid entries of an access table, in stream (i.e. date) order."""
    return list(gen_access_table(stream))


# Storage records
# ---------------
class Variant(Enum):
    SINGLE = 'single'
    FIXED_INTERVAL = 'fixed interval'
    VARIABLE_INTERVAL = 'variable interval'


VARIANTS = {
    WorkoutType.FREE_ROW: Variant.SINGLE,
    WorkoutType.SINGLE_DISTANCE: Variant.SINGLE,
    WorkoutType.SINGLE_TIME: Variant.SINGLE,
    WorkoutType.SINGLE_CALORIE: Variant.SINGLE,
    WorkoutType.TIME_INTERVAL: Variant.FIXED_INTERVAL,
    WorkoutType.DISTANCE_INTERVAL: Variant.FIXED_INTERVAL,
    WorkoutType.VARIABLE_INTERVAL: Variant.VARIABLE_INTERVAL,
}


class StorageRecord(namedtuple('StorageRecord', ('variant', 'entry'))):
    """A decoded storage record, tagged with its `Variant`."""
    __slots__ = ()

    def to_workout(self):
        return self.entry.to_workout()


class SingleFrame:
    """A split of a single workout.

    =======  ======  ======================  =============================
    Offset   Length  Field                   Notes
    =======  ======  ======================  =============================
       0       2     duration_or_distance    0.1 s or metres, by type
       2       1     heart_rate              0 means no belt
       3       1     spm
       4      28     unknown                 heart min/max/mean in here?
    =======  ======  ======================  =============================
    """
    __slots__ = ('duration_or_distance', 'heart_rate', 'spm', 'unknown')

    fmt = '>HBB28s'

    def __init__(self, stream):
        raw = read_exact(stream, calcsize(self.fmt), 'single workout split')
        values = unpack(self.fmt, raw)
        for name, value in zip(self.__slots__, values):
            setattr(self, name, value)

    def to_workout_frame(self, distance):
        """Normalise a split of a distance-based workout, whose splits all
        cover the configured split size."""
        return WorkoutFrame(
            distance=distance,
            work_duration=self.duration_or_distance * TENTH,
            rest_duration=None,
            spm=self.spm,
            work_heart_rate=self.heart_rate or None,
            rest_heart_rate=None)


class SingleEntry:
    """Storage record of a single (continuous) workout.

    Follows the two header bytes (magic, workout type):

    =======  ======  ======================  =============================
    Offset   Length  Field                   Notes
    =======  ======  ======================  =============================
       2       2     unknown_1
       4       4     serial_number
       8       4     timestamp               see `decode_timestamp`
      12       2     user_id
      14       4     unknown_2
      18       1     record_id
      19       3     magic_2
      22       2     total_duration          0.1 s
      24       4     total_distance          metres
      28       1     spm
      29       1     split_info
      30       2     split_size
      32      18     unknown_3
    =======  ======  ======================  =============================

    The splits follow straight after.
    """
    __slots__ = ('magic', 'workout_type', 'unknown_1', 'serial_number',
                 'timestamp', 'user_id', 'unknown_2', 'record_id', 'magic_2',
                 'total_duration', 'total_distance', 'spm', 'split_info',
                 'split_size', 'unknown_3', 'frames')

    fmt = '>2sLLH4sB3sHLBBH18s'

    def __init__(self, stream, magic, workout_type):
        self.magic, self.workout_type = magic, workout_type

        raw = read_exact(stream, calcsize(self.fmt), 'single workout record')
        values = unpack(self.fmt, raw)
        for name, value in zip(self.__slots__[2:], values):
            setattr(self, name, value)

        self.frames = [SingleFrame(stream)
                       for _ in range(self.frame_count())]

    def frame_count(self):
        """Number of splits stored after the record."""
        if not self.workout_type.is_distance_based:
            raise UnsupportedVariantError(
                self.workout_type, 'split layout unknown')

        if self.split_size == 0:
            raise MalformedRecordError(
                'split size of zero in a %s workout' % self.workout_type)

        count, remainder = divmod(self.total_distance, self.split_size)
        return count + (1 if remainder else 0)   # a short last split

    def to_workout(self):
        frames = tuple(frame.to_workout_frame(self.split_size)
                       for frame in self.frames)
        return Workout(
            workout_type=self.workout_type,
            serial_number=self.serial_number,
            datetime=decode_timestamp(self.timestamp),
            user_id=self.user_id,
            record_id=self.record_id,
            total_distance=self.total_distance,
            total_work_duration=self.total_duration * TENTH,
            total_rest_duration=None,
            spm=self.spm,
            frames=frames)


def read_single(stream, magic, workout_type):
    return SingleEntry(stream, magic, workout_type)


def read_fixed_interval(stream, magic, workout_type):
    raise UnsupportedVariantError(workout_type, 'record layout unknown')


def read_variable_interval(stream, magic, workout_type):
    raise UnsupportedVariantError(workout_type, 'record layout unknown')


READERS = {
    Variant.SINGLE: read_single,
    Variant.FIXED_INTERVAL: read_fixed_interval,
    Variant.VARIABLE_INTERVAL: read_variable_interval,
}


def read_storage_record(stream):
    """Read a storage record from the current position of `stream`.

    The stream is left just after the last byte of the record (including
    any splits).

    Returns
    -------
    StorageRecord

    Raises
    ------
    MalformedRecordError
        If the workout type byte is not recognised.
    UnsupportedVariantError
        If the workout type is known but its layout is not.
    """
    magic, tag = unpack('>2B', read_exact(stream, 2, 'storage record header'))

    try:
        workout_type = WorkoutType(tag)
    except ValueError:
        raise MalformedRecordError(
            'unrecognised workout type 0x%02X' % tag) from None

    variant = VARIANTS[workout_type]
    entry = READERS[variant](stream, magic, workout_type)
    return StorageRecord(variant, entry)


def read_workouts(index_stream, payload_stream):
    """Read a whole logbook.

    Parameters
    ----------
    index_stream, payload_stream : binary file objects
        The access table, positioned at its first entry, and the (seekable)
        storage file it points into.

    Returns
    -------
    list of Workout
        One per access table entry, in table order (oldest first).

    Raises
    ------
    DecodeError
        If any entry can't be read. Nothing is returned in that case; a
        logbook is read whole or not at all.
    """
    entries = read_access_table(index_stream)
    logger.debug('access table lists %d workouts', len(entries))

    workouts = []
    for number, entry in enumerate(entries, 1):
        logger.debug('workout %d: %r', number, entry)
        try:
            payload_stream.seek(entry.record_offset)
        except OSError as e:
            raise StreamError(e) from e

        record = read_storage_record(payload_stream)
        workouts.append(record.to_workout())

    return workouts
