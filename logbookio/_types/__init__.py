from logbookio._types.base import *
from logbookio._types import columns as special_columns
from logbookio._types.logbookdata import LogbookData, new_column_sugar
