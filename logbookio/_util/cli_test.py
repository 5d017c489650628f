#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import os

import pandas as pd
import pytest

from logbookio._util import cli


def run(capsys, *argv):
    status = cli.parse(list(argv))
    out, err = capsys.readouterr()
    return status, out, err


def test_info(capsys, drive):
    status, out, err = run(capsys, 'info', drive)

    assert status == 0
    assert err == ''
    lines = out.splitlines()
    assert 'User Name:'.ljust(cli.LABEL_WIDTH) + 'flummi' in lines
    assert 'User ID:'.ljust(cli.LABEL_WIDTH) + '258' in lines
    assert 'Workouts:'.ljust(cli.LABEL_WIDTH) + '2' in lines
    assert 'Lifetime Meters:'.ljust(cli.LABEL_WIDTH) + '4100' in lines
    assert 'First Workout:'.ljust(cli.LABEL_WIDTH) + '2024-06-15 14:30' in lines
    assert 'Installed Firmwares:'.ljust(cli.LABEL_WIDTH) + '- pm5v1.7z' in lines
    assert ' ' * cli.LABEL_WIDTH + '- pm5v2.7z' in lines


def test_list_workouts(capsys, drive):
    status, out, __ = run(capsys, 'list-workouts', drive)

    assert status == 0
    header, rule, first, second = out.splitlines()
    assert header.split()[:3] == ['#', 'Date', 'Type']
    assert set(rule) == {'='}
    assert first.split() == ['1', '2024-06-15', '14:30', 'Distance', '2000',
                             '8:00.0', '28', '2:00.0', '155', '203', '997']
    assert second.split()[:6] == ['2', '2024-06-16', '07:05', 'Free', 'Row',
                                  '2100']


def test_list_latest_workouts(capsys, drive):
    __, out, __ = run(capsys, 'list-workouts', drive, '-n', '1')
    rows = out.splitlines()[2:]
    assert len(rows) == 1
    assert rows[0].split()[0] == '2'


def test_show_workout(capsys, drive):
    status, out, __ = run(capsys, 'show-workout', drive, '-w', '1')

    assert status == 0
    lines = out.splitlines()
    assert 'Workout:'.ljust(cli.LABEL_WIDTH) + '#1' in lines
    assert 'Distance:'.ljust(cli.LABEL_WIDTH) + '2000 m' in lines
    assert 'Pace:'.ljust(cli.LABEL_WIDTH) + '2:00.0 /500m' in lines
    assert 'Heart Rate:'.ljust(cli.LABEL_WIDTH) + '155' in lines
    assert 'kcal/h:'.ljust(cli.LABEL_WIDTH) + '997' in lines
    assert not any(line.startswith('Rest Time:') for line in lines)

    splits = lines[lines.index('Splits:'.ljust(cli.LABEL_WIDTH)) + 2:]
    assert len(splits) == 4
    assert all(line.startswith('    ') for line in splits)
    assert splits[1].split()[:4] == ['2', '500', '1:59.0', '1:59.0']


def test_show_latest_workout_by_default(capsys, drive):
    __, out, __ = run(capsys, 'show-workout', drive)
    assert 'Workout:'.ljust(cli.LABEL_WIDTH) + '#2' in out.splitlines()
    assert 'Heart Rate:'.ljust(cli.LABEL_WIDTH) in out.splitlines()


def test_show_workout_weight_corrected(capsys, drive):
    __, out, __ = run(capsys, 'show-workout', drive, '-w', '1',
                      '--weight', '80')
    assert 'kcal/h:'.ljust(cli.LABEL_WIDTH) + '999' in out.splitlines()


def test_show_missing_workout(capsys, drive):
    status, out, err = run(capsys, 'show-workout', drive, '-w', '5')
    assert status == 1
    assert err.strip() == 'error: no workout #5 (there are 2)'


def test_export_to_stdout(capsys, drive):
    status, out, __ = run(capsys, 'export', drive)

    assert status == 0
    header, *rows = out.splitlines()
    assert header.startswith('workout,datetime,type,')
    assert len(rows) == 2
    assert rows[1].endswith(',NA,5')     # no heart rate, 5 splits


def test_export_to_file(capsys, drive, tmp_path):
    output = str(tmp_path / 'logbook.csv')
    status, out, __ = run(capsys, 'export', drive, '--output', output)

    assert status == 0
    assert out == ''
    exported = pd.read_csv(output, index_col='workout')
    assert list(exported['dist']) == [2000, 2100]
    assert list(exported['record_id']) == [7, 8]


def test_export_workout_splits(capsys, drive):
    __, out, __ = run(capsys, 'export', drive, '-w', '1')
    header, *rows = out.splitlines()
    assert header == 'split,dist,work_time,rest_time,spm,hr,pwr,pace'
    assert len(rows) == 4


def test_export_unknown_timezone(capsys, drive):
    status, __, err = run(capsys, 'export', drive, '--tz', 'Nowhere/Special')
    assert status == 1
    assert 'unknown timezone' in err


def test_not_a_drive(capsys, tmp_path):
    status, __, err = run(capsys, 'info', str(tmp_path))
    assert status == 1
    assert "this doesn't look like a PM5 drive!" in err


def test_drive_from_environment(capsys, drive, monkeypatch):
    monkeypatch.setenv(cli.DRIVE_ENV, drive)
    status, out, __ = run(capsys, 'list-workouts')
    assert status == 0
    assert len(out.splitlines()) == 4


def test_no_drive(capsys, monkeypatch):
    monkeypatch.delenv(cli.DRIVE_ENV, raising=False)
    with pytest.raises(SystemExit) as e:
        cli.parse(['info'])
    assert e.value.code == 2


def test_unreadable_logbook_file(capsys, drive):
    storage = os.path.join(drive, 'Concept2', 'Logbook', 'LogDataStorage.bin')
    os.remove(storage)
    os.mkdir(storage)

    status, out, err = run(capsys, 'list-workouts', drive)

    assert status == 1
    assert err.startswith('error: Error encountered during parsing:')


def test_export_splits_with_timezone(capsys, drive):
    status, out, err = run(capsys, 'export', drive, '-w', '1',
                           '--tz', 'Europe/Berlin')
    assert status == 1
    assert out == ''
    assert '--tz only applies to the whole logbook' in err


@pytest.fixture
def zero_distance_drive(drive_factory, pm5_bytes):
    return drive_factory(
        records=[(0x01, pm5_bytes.single(0, 5, workout_type=0x01))])


def test_zero_distance_workout(capsys, zero_distance_drive):
    status, out, __ = run(capsys, 'list-workouts', zero_distance_drive)
    assert status == 0
    assert out.splitlines()[2].split() == [
        '1', '2024-06-15', '14:30', 'Free', 'Row', '0', '0:00.5', '24',
        '0:00.5', 'nan', 'nan']

    status, out, __ = run(capsys, 'show-workout', zero_distance_drive)
    assert status == 0
    lines = out.splitlines()
    assert 'Watts:'.ljust(cli.LABEL_WIDTH) + 'nan' in lines
    assert 'kcal/h:'.ljust(cli.LABEL_WIDTH) + 'nan' in lines
    assert 'Splits:'.ljust(cli.LABEL_WIDTH) not in lines

    status, out, __ = run(capsys, 'info', zero_distance_drive)
    assert status == 0
    assert 'Lifetime Meters:'.ljust(cli.LABEL_WIDTH) + '0' in out.splitlines()

    status, out, __ = run(capsys, 'export', zero_distance_drive, '-w', '1')
    assert status == 0
    assert out.splitlines() == [
        'split,dist,work_time,rest_time,spm,hr,pwr,pace']
