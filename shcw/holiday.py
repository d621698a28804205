import json
import logging
from datetime import timedelta

from shcw import dates
from shcw.errors import ConfigError, FormatError


class JsonCalendar:
    """Holidays loaded from a json file of yearly date ranges

    The file looks like::

        [{"year": 2024, "dates": [{"begin": "02-10", "end": "02-17"}]}]

    Both ends of a range are inclusive.
    """

    def __init__(self, path):
        self.path = path
        self.holidays = {}
        self.load()

    def load(self):
        try:
            with open(self.path, 'r') as f:
                table = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"failed to load holidays from {self.path}: {e}") from e

        for entry in table:
            try:
                year = int(entry['year'])
                ranges = entry.get('dates') or []
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"invalid holiday entry {entry!r}") from e

            days = set()
            for rng in ranges:
                try:
                    begin = dates.decode_month_day(rng['begin'])
                    end = dates.decode_month_day(rng['end'])
                    if begin is None or end is None:
                        raise FormatError("empty range boundary")
                    day = begin.with_year(year)
                    last = end.with_year(year)
                except (KeyError, TypeError, FormatError) as e:
                    raise ConfigError(f"year {year}: invalid range {rng!r}: {e}") from e
                if day > last:
                    raise ConfigError(f"year {year}, range {begin}-{end}")
                while day <= last:
                    days.add(day)
                    day = dates.midnight(day + timedelta(days=1))
            self.holidays[year] = days
        logging.debug(f"Loaded holidays for years {sorted(self.holidays)}")

    def is_holiday(self, day):
        """Tell whether ``day`` (local midnight) is a holiday"""
        days = self.holidays.get(day.year)
        if days is None:
            raise ConfigError(f"no holiday records for year {day.year}")
        return dates.midnight(day) in days
