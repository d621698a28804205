from datetime import datetime

import pytest

from shcw import dates
from shcw.errors import FormatError


@pytest.mark.parametrize("decode, encode, value", [
    (dates.decode_date, dates.encode_date, "2024-03-13"),
    (dates.decode_date, dates.encode_date, "2024-02-29"),
    (dates.decode_datetime, dates.encode_datetime, "2024-03-13 08:51:07"),
    (dates.decode_month_day, dates.encode_month_day, "10-01"),
    (dates.decode_month_day, dates.encode_month_day, "02-29"),
])
def test_round_trip(decode, encode, value):
    assert encode(decode(value)) == value


@pytest.mark.parametrize("decode", [dates.decode_date, dates.decode_datetime, dates.decode_month_day])
def test_empty_decodes_to_unset(decode):
    assert decode("") is None


@pytest.mark.parametrize("encode", [dates.encode_date, dates.encode_datetime, dates.encode_month_day])
def test_unset_encodes_to_empty(encode):
    assert encode(None) == ""


@pytest.mark.parametrize("decode, value", [
    (dates.decode_date, "2024-03-13 08:00:00"),
    (dates.decode_date, "2024-3-13"),
    (dates.decode_date, "2024-13-01"),
    (dates.decode_datetime, "2024-03-13"),
    (dates.decode_month_day, "2024-10-01"),
    (dates.decode_month_day, "02-30"),
    (dates.decode_date, 20240313),
])
def test_malformed_values_raise(decode, value):
    with pytest.raises(FormatError):
        decode(value)


def test_decoded_instants_are_local():
    dt = dates.decode_datetime("2024-03-13 08:51:07")
    assert dt.tzinfo is not None
    assert dt.utcoffset().total_seconds() == 8 * 3600
    assert (dt.hour, dt.minute, dt.second) == (8, 51, 7)


def test_date_decodes_to_midnight():
    day = dates.decode_date("2024-03-13")
    assert day == dates.localize(datetime(2024, 3, 13))
    assert dates.midnight(dates.decode_datetime("2024-03-13 17:30:00")) == day


def test_month_day_with_year():
    md = dates.decode_month_day("10-01")
    assert md.with_year(2024) == dates.localize(datetime(2024, 10, 1))

    leap = dates.decode_month_day("02-29")
    assert leap.with_year(2024).day == 29
    with pytest.raises(FormatError):
        leap.with_year(2023)


def test_month_day_keeps_time_of_day():
    md = dates.MonthDay(5, 1, hour=9, minute=30)
    assert md.with_year(2025) == dates.localize(datetime(2025, 5, 1, 9, 30))


def test_today_is_midnight():
    day = dates.today()
    assert (day.hour, day.minute, day.second, day.microsecond) == (0, 0, 0, 0)
    assert day.tzinfo.zone == 'Asia/Shanghai'


def test_month_day_is_a_value():
    md = dates.MonthDay(10, 1, hour=9)
    assert md == dates.MonthDay(10, 1, hour=9)
    assert md != dates.MonthDay(10, 1)
    assert len({md, dates.MonthDay(10, 1, hour=9), dates.MonthDay(10, 1)}) == 2
    assert 'hour=9' in repr(md)
    assert str(md) == "10-01"
    with pytest.raises(AttributeError):
        md.month = 11
