import json
import os
from datetime import datetime

import pytest

from shcw import dates
from shcw.errors import ConfigError
from shcw.holiday import JsonCalendar


def write_table(tmp_path, table):
    path = tmp_path / 'holidays.json'
    path.write_text(json.dumps(table))
    return str(path)


def day(y, m, d):
    return dates.localize(datetime(y, m, d))


@pytest.fixture
def calendar(tmp_path):
    return JsonCalendar(write_table(tmp_path, [
        {'year': 2023, 'dates': [{'begin': '01-01', 'end': '01-02'}, {'begin': '09-29', 'end': '10-06'}]},
        {'year': 2024, 'dates': []},
    ]))


@pytest.mark.parametrize("date, expected", [
    (day(2023, 1, 1), True),
    (day(2023, 1, 2), True),
    (day(2023, 1, 3), False),
    (day(2023, 9, 29), True),
    (day(2023, 10, 6), True),
    (day(2023, 10, 7), False),
    (day(2024, 1, 1), False),
])
def test_is_holiday(calendar, date, expected):
    assert calendar.is_holiday(date) is expected


def test_missing_year_is_an_error(calendar):
    with pytest.raises(ConfigError, match='2025'):
        calendar.is_holiday(day(2025, 1, 1))


def test_reversed_range(tmp_path):
    path = write_table(tmp_path, [{'year': 2023, 'dates': [{'begin': '10-06', 'end': '09-29'}]}])
    with pytest.raises(ConfigError):
        JsonCalendar(path)


def test_bad_month_day(tmp_path):
    path = write_table(tmp_path, [{'year': 2023, 'dates': [{'begin': '02-29', 'end': '03-01'}]}])
    with pytest.raises(ConfigError):
        JsonCalendar(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        JsonCalendar(str(tmp_path / 'nope.json'))


def test_example_table_loads():
    calendar = JsonCalendar(os.path.join(os.path.dirname(__file__), '..', 'holidays.example.json'))
    assert calendar.is_holiday(day(2025, 1, 28))
    assert not calendar.is_holiday(day(2025, 3, 3))
