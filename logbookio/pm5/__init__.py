"""
Decode the logbook a Concept2 PM5 performance monitor writes to its USB drive.

The format is undocumented. The layouts in `_protocol` were reverse
engineered from drives written by real monitors, and only single (one
continuous piece) distance and free row workouts are fully understood so far.
Anything else raises `UnsupportedVariantError` rather than being guessed at.

The decoder itself works on plain binary file objects (`read_workouts`);
`Drive` finds those files on a mounted drive, and `read` gives the whole
logbook as a `LogbookData` table.

"""
from logbookio.pm5._reading import read_and_format as read
from logbookio.pm5._reading import gen_records, gen_frame_records, read_frames
from logbookio.pm5._protocol import (
    IndexEntry, SingleEntry, SingleFrame, StorageRecord, Variant,
    decode_timestamp, gen_access_table, read_access_table,
    read_storage_record, read_workouts)
from logbookio.pm5._workouts import (
    Workout, WorkoutFrame, WorkoutType, format_duration)
from logbookio.pm5._drive import Drive
