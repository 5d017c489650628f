#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Find the logbook files on a mounted PM5 USB drive.

The decoder only ever sees open binary files; this module is the one place
that knows how the monitor lays out its drive.

"""
from contextlib import contextmanager
import logging
import os
from struct import unpack

from logbookio.pm5._protocol import read_exact, read_workouts
from logbookio._util.exceptions import InvalidFileError, StreamError


logger = logging.getLogger(__name__)

ROOT_DIR = 'Concept2'
LOGBOOK_DIR = 'Concept2/Logbook'
FIRMWARE_DIR = 'Concept2/Firmware'

ACCESS_TABLE = LOGBOOK_DIR + '/LogDataAccessTbl.bin'
STORAGE = LOGBOOK_DIR + '/LogDataStorage.bin'
USER_STATIC = LOGBOOK_DIR + '/UserStatic.bin'

USER_NAME_OFFSET, USER_NAME_LEN = 0x02, 6
USER_ID_OFFSET = 0x2A

FIRMWARE_EXT = '.7z'


class Drive:
    """A PM5 drive mounted at `root`.

    Parameters
    ----------
    root : str
        Mount point of the drive (the directory holding ``Concept2``).

    Raises
    ------
    InvalidFileError
        If `root` doesn't hold a ``Concept2`` directory.
    """
    def __init__(self, root):
        self.root = root
        if not os.path.isdir(self.path(ROOT_DIR)):
            raise InvalidFileError('PM5 drive')

    def path(self, logical_path):
        """Translate a drive path (always '/' separated) to a local one."""
        return os.path.join(self.root, *logical_path.split('/'))

    def exists(self, logical_path):
        return os.path.isfile(self.path(logical_path))

    @contextmanager
    def open_file(self, logical_path, mode='rb'):
        try:
            reader = open(self.path(logical_path), mode)
        except FileNotFoundError:
            raise InvalidFileError('logbook file') from None
        except OSError as e:   # permissions, a directory in the way
            raise StreamError(e) from e

        try:
            yield reader
        finally:
            reader.close()

    def workouts(self):
        """All workouts in the logbook, oldest first."""
        with self.open_file(ACCESS_TABLE) as index, \
                self.open_file(STORAGE) as payload:
            workouts = read_workouts(index, payload)

        logger.info('read %d workouts from %s', len(workouts), self.root)
        return workouts

    def user(self):
        """(user id, user name) the drive was set up for."""
        with self.open_file(USER_STATIC) as reader:
            try:
                reader.seek(USER_NAME_OFFSET)
                name = read_exact(reader, USER_NAME_LEN, 'user name')
                reader.seek(USER_ID_OFFSET)
                user_id, = unpack('>H', read_exact(reader, 2, 'user id'))
            except OSError as e:
                raise StreamError(e) from e

        return user_id, name.decode('utf-8', 'replace').rstrip('\x00')

    def firmwares(self):
        """Names of the firmware archives waiting on the drive."""
        try:
            names = os.listdir(self.path(FIRMWARE_DIR))
        except FileNotFoundError:
            return []

        return sorted(name for name in names
                      if not name.startswith('.')
                      and name.endswith(FIRMWARE_EXT))
