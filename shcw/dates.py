import re
from dataclasses import dataclass
from datetime import datetime

import pytz

from shcw.errors import FormatError

# The service returns Shanghai wall-clock times without a zone indicator
LOCAL_TZ = pytz.timezone('Asia/Shanghai')

DATE_FORMAT = '%Y-%m-%d'
DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'
MONTH_DAY_FORMAT = '%m-%d'

_DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}')
_DATETIME_RE = re.compile(r'\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}')
_MONTH_DAY_RE = re.compile(r'\d{2}-\d{2}')


def localize(naive):
    return LOCAL_TZ.localize(naive)


def now_local():
    """Current instant in the service time zone"""
    return datetime.now(LOCAL_TZ)


def midnight(dt):
    """Truncate an instant to local midnight of its calendar day"""
    if dt.tzinfo is not None:
        dt = dt.astimezone(LOCAL_TZ)
    return localize(datetime(dt.year, dt.month, dt.day))


def today():
    return midnight(now_local())


def _encode(dt, fmt):
    if dt is None:
        return ''
    return dt.strftime(fmt)


def _decode(value, pattern, fmt):
    if value is None or value == '':
        return None
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise FormatError(f"invalid value {value!r}, expected {fmt}")
    try:
        return localize(datetime.strptime(value, fmt))
    except ValueError as e:
        raise FormatError(f"invalid value {value!r}: {e}") from e


def encode_date(dt):
    return _encode(dt, DATE_FORMAT)


def decode_date(value):
    return _decode(value, _DATE_RE, DATE_FORMAT)


def encode_datetime(dt):
    return _encode(dt, DATETIME_FORMAT)


def decode_datetime(value):
    return _decode(value, _DATETIME_RE, DATETIME_FORMAT)


@dataclass(frozen=True)
class MonthDay:
    """A date without a year, as used by the holiday ranges"""

    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    def with_year(self, year):
        """Project onto ``year`` keeping month, day and time of day"""
        try:
            naive = datetime(year, self.month, self.day, self.hour, self.minute, self.second)
        except ValueError as e:
            raise FormatError(f"{self} does not exist in {year}") from e
        return localize(naive)

    def __str__(self):
        return f"{self.month:02d}-{self.day:02d}"


def encode_month_day(md):
    if md is None:
        return ''
    return str(md)


def decode_month_day(value):
    if value is None or value == '':
        return None
    if not isinstance(value, str) or not _MONTH_DAY_RE.fullmatch(value):
        raise FormatError(f"invalid value {value!r}, expected {MONTH_DAY_FORMAT}")
    # parse against a leap year so 02-29 is accepted
    try:
        parsed = datetime.strptime(f"2000-{value}", DATE_FORMAT)
    except ValueError as e:
        raise FormatError(f"invalid value {value!r}: {e}") from e
    return MonthDay(parsed.month, parsed.day)
