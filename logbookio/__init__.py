__version__ = '0.1.0'

from logbookio.pm5 import read
