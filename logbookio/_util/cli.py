#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
parse is installed as an executable console_script with this package.

"""
from argparse import ArgumentParser
from functools import partial
import logging
import os
import sys

import pytz

from logbookio import pm5
from logbookio._util.console import decorate, indented_stdout, printd
from logbookio._util.exceptions import LogbookIOError


logger = logging.getLogger(__name__)

DRIVE_ENV = 'LOGBOOK_DRIVE'   # fallback when no drive is given
DATE_FMT = '%Y-%m-%d %H:%M'
LABEL_WIDTH = 24

WORKOUT_HEADER = ('#', 'Date', 'Type', 'Dist.', 'Work Time', 'Rest Time',
                  'SPM', 'Pace', 'HR', 'W', 'kcal/h')
WORKOUT_HEADER_FMT = '{:>3} {:16} {:17} {:5} {:9} {:9} {:>3} {:>6} {:>3} {:>3} {:>6}'
WORKOUT_ROW_FMT = '{:>3} {:16} {:17} {:>5} {:>9} {:>9} {:>3} {:>6} {:>3} {:>3.0f} {:>6.0f}'

SPLIT_HEADER = ('#', 'Dist.', 'Time', 'Pace', 'SPM', 'HR', 'W')
SPLIT_HEADER_FMT = '{:>3} {:>5} {:>9} {:>6} {:>3} {:>3} {:>3}'
SPLIT_ROW_FMT = '{:>3} {:>5} {:>9} {:>6} {:>3} {:>3} {:>3.0f}'


class CommandError(LogbookIOError):
    pass


def label(text):
    return decorate('{:<{}}'.format(text, LABEL_WIDTH), 'bold', 'green')


def nan_if_undefined(metric, *args):
    """Zero distances (or durations) make the power formulas blow up."""
    try:
        return metric(*args)
    except ZeroDivisionError:
        return float('nan')


def blank_if_none(value):
    return '' if value is None else str(value)


def select_workout(workouts, number):
    """1-indexed, like the listing. The latest by default."""
    if not workouts:
        raise CommandError('there are no workouts on this drive')
    if number is None:
        return len(workouts), workouts[-1]
    if not 1 <= number <= len(workouts):
        raise CommandError('no workout #%d (there are %d)' % (
            number, len(workouts)))
    return number, workouts[number - 1]


# Commands
# --------
def cmd_info(args):
    data = pm5.read(args.drive)
    firmwares = pm5.Drive(args.drive).firmwares()

    print(label('User Name:') + blank_if_none(data.user_name))
    print(label('User ID:') + blank_if_none(data.user_id))
    print(label('Workouts:') + str(len(data)))
    print(label('Lifetime Meters:') + str(data.lifetime_meters()))
    print(label('Lifetime kWh:') + '{:.3f}'.format(data.lifetime_kwh()))
    print(label('Lifetime kcal:') + '{:.0f}'.format(data.lifetime_kcal()))

    if len(data):
        print(label('First Workout:') + data.first_workout.strftime(DATE_FMT))
        print(label('Last Workout:') + data.last_workout.strftime(DATE_FMT))

    if not firmwares:
        print(label('Installed Firmwares:') + 'none')
    for i, firmware in enumerate(firmwares):
        print(label('Installed Firmwares:' if i == 0 else '') + '- ' + firmware)


def cmd_list_workouts(args):
    workouts = pm5.Drive(args.drive).workouts()

    printd(WORKOUT_HEADER_FMT.format(*WORKOUT_HEADER), 'bold', 'green')
    printd('=' * 90, 'grey')

    first = 0 if args.last is None else max(len(workouts) - args.last, 0)
    for number, workout in enumerate(workouts[first:], first + 1):
        print(WORKOUT_ROW_FMT.format(
            number,
            workout.datetime.strftime(DATE_FMT),
            workout.workout_type.display_name,
            workout.total_distance,
            workout.work_duration_string(),
            workout.rest_duration_string(),
            blank_if_none(workout.spm),
            workout.pace_string(),
            blank_if_none(workout.heart_rate()),
            nan_if_undefined(workout.watts),
            nan_if_undefined(workout.cal_hr)))


def cmd_show_workout(args):
    workouts = pm5.Drive(args.drive).workouts()
    number, workout = select_workout(workouts, args.workout)

    print(label('Workout:') + '#%d' % number)
    print(label('Date:') + workout.datetime.strftime(DATE_FMT))
    print(label('Type:') + workout.workout_type.display_name)
    print(label('Distance:') + '%d m' % workout.total_distance)
    print(label('Work Time:') + workout.work_duration_string())
    if workout.total_rest_duration is not None:
        print(label('Rest Time:') + workout.rest_duration_string())
    print(label('Pace:') + workout.pace_string() + ' /500m')
    print(label('SPM:') + blank_if_none(workout.spm))
    print(label('Heart Rate:') + blank_if_none(workout.heart_rate()))
    print(label('Watts:') + '{:.0f}'.format(nan_if_undefined(workout.watts)))
    if args.weight is None:
        cal_hr = nan_if_undefined(workout.cal_hr)
    else:
        cal_hr = nan_if_undefined(workout.cal_hr_weight_corrected, args.weight)
    print(label('kcal/h:') + '{:.0f}'.format(cal_hr))

    if not workout.frames:
        return

    print()
    print(label('Splits:'))
    with indented_stdout(4):
        printd(SPLIT_HEADER_FMT.format(*SPLIT_HEADER), 'bold', 'green')
        for i, frame in enumerate(workout.frames, 1):
            print(SPLIT_ROW_FMT.format(
                i,
                frame.distance,
                frame.work_duration_string(),
                frame.pace_string(),
                frame.spm,
                blank_if_none(frame.work_heart_rate),
                nan_if_undefined(frame.watts)))


def cmd_export(args):
    if args.workout is None:
        try:
            data = pm5.read(args.drive, tz_str=args.tz)
        except pytz.UnknownTimeZoneError:
            raise CommandError('unknown timezone %r' % args.tz) from None
    else:
        if args.tz is not None:
            raise CommandError('--tz only applies to the whole logbook; '
                               'splits have no dates')
        workouts = pm5.Drive(args.drive).workouts()
        __, workout = select_workout(workouts, args.workout)
        data = pm5.read_frames(workout)

    write = partial(data.to_csv, na_rep='NA', encoding='utf-8')
    if args.output is None:
        csv = write()
        print(csv, end='')
    else:
        write(args.output)


def build_parser():
    parser = ArgumentParser(
        description='read the workout logbook off a Concept2 PM5 USB drive')
    parser.add_argument('-v', '--verbose',
                        action='store_true',
                        help='log what is being decoded')

    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    def add_command(name, func, help):
        command = commands.add_parser(name, help=help, description=help)
        command.add_argument('drive',
                             type=str,
                             nargs='?',
                             default=os.environ.get(DRIVE_ENV),
                             help='mount point of the drive; defaults to $%s'
                                  % DRIVE_ENV)
        command.set_defaults(func=func)
        return command

    add_command('info', cmd_info,
                'show general information about the drive')

    list_workouts = add_command('list-workouts', cmd_list_workouts,
                                'list the workouts stored on the drive')
    list_workouts.add_argument('-n', '--last',
                               type=int,
                               metavar='num',
                               default=None,
                               help='only show the <num> latest workouts')

    show_workout = add_command('show-workout', cmd_show_workout,
                               'show a workout split by split')
    show_workout.add_argument('-w', '--workout',
                              type=int,
                              metavar='num',
                              default=None,
                              help='number from list-workouts; '
                                   'the latest by default')
    show_workout.add_argument('--weight',
                              type=float,
                              metavar='kg',
                              default=None,
                              help='correct calories for body weight')

    export = add_command('export', cmd_export,
                         'write the logbook (or one workout) as csv')
    export.add_argument('-w', '--workout',
                        type=int,
                        metavar='num',
                        default=None,
                        help='export the splits of this workout instead')
    export.add_argument('--output',
                        type=str,
                        metavar='filename',
                        default=None,
                        help='optional; file to write to')
    export.add_argument('--tz',
                        type=str,
                        default=None,
                        help='optional; timezone the monitor clock is set to '
                             '(whole logbook only)')

    return parser


def parse(argv=None):

    # Argument handling
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s:%(name)s: %(message)s')

    if args.drive is None:
        parser.error('no drive given and $%s is not set' % DRIVE_ENV)

    # Script begins
    try:
        args.func(args)
    except LogbookIOError as e:
        logger.debug('%s failed', args.command, exc_info=True)
        print(decorate('error:', 'bold', 'fail'), e, file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(parse())
