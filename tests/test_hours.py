import pytest

from sitterpay.core import SitterPayValueError
from sitterpay.costing.rates import ShiftRules
from sitterpay.scheduling.hours import (
    NONE_SPECIFIED_LABEL,
    HourOption,
    allowed_hours,
    clock_hour,
    display_hour,
    hour_options,
    parse_hour,
)


def test_allowed_hours_wraps_past_midnight():
    assert allowed_hours(ShiftRules()) == list(range(17, 29))


def test_allowed_hours_same_day_window():
    rules = ShiftRules(earliest_start_time=8, latest_end_time=12)
    assert allowed_hours(rules) == [8, 9, 10, 11, 12]


@pytest.mark.parametrize(
    "value,label",
    [(0, "12 AM"), (24, "12 AM"), (3, "3 AM"), (27, "3 AM"), (12, "12 PM"), (17, "5 PM"), (23, "11 PM")],
)
def test_display_hour(value, label):
    assert display_hour(value) == label


def test_clock_hour():
    assert clock_hour(28) == 4
    assert clock_hour(17) == 17


def test_hour_options_bedtime_has_none_entry():
    options = hour_options(ShiftRules(), include_none=True)
    assert options[0] == HourOption(NONE_SPECIFIED_LABEL, None)
    assert options[1] == HourOption("5 PM", 17)
    assert options[-1] == HourOption("4 AM", 4)
    assert len(options) == 13


def test_hour_options_without_none():
    options = hour_options(ShiftRules())
    assert [option.value for option in options] == [17, 18, 19, 20, 21, 22, 23, 0, 1, 2, 3, 4]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("21", 21),
        ("0", 0),
        ("9pm", 21),
        ("9 PM", 21),
        ("12 AM", 0),
        ("12pm", 12),
        ("3 a.m.", 3),
        (" 6pm ", 18),
    ],
)
def test_parse_hour(text, expected):
    assert parse_hour(text) == expected


@pytest.mark.parametrize("text", ["24", "13pm", "0am", "noon", "", "9:30pm"])
def test_parse_hour_rejects(text):
    with pytest.raises(SitterPayValueError):
        parse_hour(text)
