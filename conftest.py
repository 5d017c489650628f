"""Builders for raw PM5 logbook bytes, shared by the test modules."""
import os
import struct
from types import SimpleNamespace

import pytest


STORAGE_MAGIC = 0x95   # not checked by the decoder
TERMINATOR = b'\xff' * 32


def pack_timestamp(year, month, day, hour, minute):
    return ((year - 2000) << 25 | day << 20 | month << 16 | hour << 8
            | minute)


def pack_entry(offset, workout_type=0x03, magic=0xF0, size=0, index=0,
               timestamp=0, reserved=b'\x00' * 14):
    return (struct.pack('<BBH2s2s', magic, workout_type, 0, b'\x00\x00',
                        reserved[0:2])
            + struct.pack('>H', timestamp)
            + struct.pack('<2sHHH6sHH4s', reserved[2:4], 0, 0, offset,
                          reserved[4:10], size, index, reserved[10:14]))


def pack_split(tenths, heart_rate=0, spm=24):
    return struct.pack('>HBB28s', tenths, heart_rate, spm, b'\x00' * 28)


def pack_single(distance, tenths, splits=(), workout_type=0x03,
                split_size=500, timestamp=None, spm=24, serial=430123456,
                user_id=1, record_id=7):
    if timestamp is None:
        timestamp = pack_timestamp(2024, 6, 15, 14, 30)
    return (struct.pack('>2B', STORAGE_MAGIC, workout_type)
            + struct.pack('>2sLLH4sB3sHLBBH18s', b'\x00\x00', serial,
                          timestamp, user_id, b'\x00' * 4, record_id,
                          b'\x00' * 3, tenths, distance, spm, 0, split_size,
                          b'\x00' * 18)
            + b''.join(pack_split(*split) for split in splits))


def build_logbook(records, offsets=None, terminator=TERMINATOR):
    """Index and storage bytes for a list of (workout_type, record bytes)."""
    index, storage = [], b''
    for i, (workout_type, record) in enumerate(records):
        offset = len(storage) if offsets is None else offsets[i]
        index.append(pack_entry(offset, workout_type, size=len(record),
                                index=i))
        storage += record
    return b''.join(index) + terminator, storage


def two_workouts():
    """A 2000 m piece followed by a 2100 m free row without a belt."""
    distance_piece = pack_single(
        2000, 4800, workout_type=0x03, spm=28,
        splits=[(1200, 150, 28), (1190, 155, 29),
                (1210, 160, 28), (1200, 158, 27)])
    free_row = pack_single(
        2100, 5400, workout_type=0x01, spm=22, record_id=8,
        timestamp=pack_timestamp(2024, 6, 16, 7, 5),
        splits=[(1250, 0, 22)] * 4 + [(300, 0, 22)])
    return [(0x03, distance_piece), (0x01, free_row)]


def write_drive(root, records=None, user_name=b'flummi', user_id=0x0102,
                firmwares=()):
    logbook = os.path.join(str(root), 'Concept2', 'Logbook')
    os.makedirs(logbook)

    index, storage = build_logbook(two_workouts() if records is None
                                   else records)
    with open(os.path.join(logbook, 'LogDataAccessTbl.bin'), 'wb') as f:
        f.write(index)
    with open(os.path.join(logbook, 'LogDataStorage.bin'), 'wb') as f:
        f.write(storage)

    if user_name is not None:
        user_static = bytearray(0x3A)
        user_static[0:2] = b'\x91\x00'
        user_static[2:2 + len(user_name)] = user_name
        user_static[0x2A:0x2C] = struct.pack('>H', user_id)
        with open(os.path.join(logbook, 'UserStatic.bin'), 'wb') as f:
            f.write(bytes(user_static))

    if firmwares:
        firmware = os.path.join(str(root), 'Concept2', 'Firmware')
        os.makedirs(firmware)
        for name in firmwares:
            open(os.path.join(firmware, name), 'wb').close()

    return str(root)


@pytest.fixture
def pm5_bytes():
    return SimpleNamespace(timestamp=pack_timestamp, entry=pack_entry,
                           split=pack_split, single=pack_single,
                           logbook=build_logbook, two_workouts=two_workouts,
                           terminator=TERMINATOR)


@pytest.fixture
def drive(tmp_path):
    """A mounted drive holding `two_workouts`."""
    return write_drive(tmp_path, firmwares=('pm5v1.7z', 'pm5v2.7z', '.hidden.7z',
                                            'notes.txt'))


@pytest.fixture
def drive_factory(tmp_path):
    counter = iter(range(1000))

    def make(**kwargs):
        root = tmp_path / ('drive%d' % next(counter))
        root.mkdir()
        return write_drive(root, **kwargs)
    return make
