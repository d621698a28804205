import argparse
import dataclasses
import logging
import os
import sys
import time

import schedule

from shcw import __version__, dates
from shcw.client import BASE_URL, DEFAULT_TIMEOUT
from shcw.config import ACTIONS, Settings
from shcw.errors import ConfigError, ShcwError
from shcw.holiday import JsonCalendar
from shcw.models import GPSCoords
from shcw.workflow import run

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def _gps(value):
    try:
        return GPSCoords.parse(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='shcw',
        description="Clock in/out and approve shift applications for today. "
                    "The password is read from one line of standard input.")
    parser.add_argument('--username', required=True, help="login name")
    parser.add_argument('--gps', type=_gps, required=True,
                        help="gps position for clock-in and clock-out, e.g. 121.4737,31.2304 (lng,lat)")
    parser.add_argument('--address', default='', help="name for the gps position")
    parser.add_argument('--action', choices=ACTIONS,
                        help="only clock in or only clock out; by default whichever is missing")
    parser.add_argument('--holidays', default='holidays.json', help="path to the holidays json file")
    parser.add_argument('--log', default='cw.log', help="path to the log file, empty to disable")
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT, help="http timeout in seconds")
    parser.add_argument('--base-url', default=BASE_URL, help=argparse.SUPPRESS)
    parser.add_argument('--reconcile', action='store_true',
                        help="re-read the roster after clocking and log the server-side times")
    parser.add_argument('--daemon', action='store_true',
                        help="stay running and clock in/out every day at --clockin-at/--clockout-at")
    parser.add_argument('--clockin-at', default='08:50', help="daily clock-in time (HH:MM) in daemon mode")
    parser.add_argument('--clockout-at', default='18:05', help="daily clock-out time (HH:MM) in daemon mode")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def setup_logging(log_path):
    handlers = [logging.StreamHandler()]
    if log_path:
        handlers.append(logging.FileHandler(log_path, mode='a', encoding='utf-8'))
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, handlers=handlers)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def add_log_file(log_path):
    """Append the root log to ``log_path`` as well, once per path"""
    if not log_path:
        return
    root = logging.getLogger()
    target = os.path.abspath(log_path)
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return
    handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def read_password(stream=None):
    stream = stream or sys.stdin
    line = stream.readline()
    if not line:
        raise ConfigError("no password on standard input")
    return line.rstrip('\r\n')


def run_once(settings, password, calendar):
    """Run one pass, logging instead of raising. Returns the exit code"""
    try:
        run(settings, password, calendar=calendar)
    except ShcwError as e:
        logging.error(f"Run failed: {e}")
        return 1
    return 0


def build_scheduler(settings, password, calendar, clockin_at, clockout_at):
    """Register the daily clock-in and clock-out runs in the local time zone"""
    scheduler = schedule.Scheduler()
    zone = dates.LOCAL_TZ.zone
    scheduler.every().day.at(clockin_at, zone).do(
        run_once, dataclasses.replace(settings, action='clockin'), password, calendar)
    scheduler.every().day.at(clockout_at, zone).do(
        run_once, dataclasses.replace(settings, action='clockout'), password, calendar)
    return scheduler


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log)

    settings = Settings(
        username=args.username,
        gps=args.gps,
        address=args.address,
        holidays=args.holidays,
        log=args.log,
        timeout=args.timeout,
        base_url=args.base_url,
        action=args.action,
        reconcile=args.reconcile
    )
    try:
        password = read_password()
        calendar = JsonCalendar(settings.holidays)
    except ConfigError as e:
        logging.error(str(e))
        return 1

    if not args.daemon:
        return run_once(settings, password, calendar)

    try:
        scheduler = build_scheduler(settings, password, calendar, args.clockin_at, args.clockout_at)
    except schedule.ScheduleValueError as e:
        logging.error(f"Invalid schedule: {e}")
        return 1
    logging.info(f"Scheduled clock-in at {args.clockin_at} and clock-out at {args.clockout_at}")
    while True:
        scheduler.run_pending()
        time.sleep(30)


if __name__ == '__main__':
    sys.exit(main())
