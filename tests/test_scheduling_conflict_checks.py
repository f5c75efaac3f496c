import itertools

import pytest

from models import BlockedTimeCell
from scheduling_conflict_checks import (
    conflicts_with_any,
    conflicts_with_blocked,
    find_conflicts,
    format_days,
    format_time,
    has_time_conflict,
    meeting_interval,
    occupies_cell,
    time_to_minutes,
)


@pytest.mark.parametrize("text, expected", [
    ("09:05", 545),
    ("9:05", 545),
    ("0905", 545),
    ("905", 545),
    ("23:59", 1439),
    ("24:00", None),
    ("10:75", None),
    ("ab:cd", None),
    ("10", None),
    ("", None),
    (None, None),
])
def test_time_to_minutes(text, expected):
    assert time_to_minutes(text) == expected


def test_touching_endpoints_do_not_conflict(make_section):
    first = make_section("a", "MW", "09:00", "10:00")
    second = make_section("b", "W", "10:00", "10:50")
    assert not has_time_conflict(first, second)


def test_one_minute_overlap_conflicts(make_section):
    first = make_section("a", "MW", "09:00", "10:01")
    second = make_section("b", "W", "10:00", "10:50")
    assert has_time_conflict(first, second)


def test_same_time_on_different_days_does_not_conflict(make_section):
    assert not has_time_conflict(
        make_section("a", "MWF", "10:00", "10:50"),
        make_section("b", "TR", "10:00", "10:50"),
    )


def test_sections_without_meeting_time_never_conflict(make_section):
    anytime = make_section("a", None, None, None)
    no_end = make_section("b", "MW", "10:00", None)
    garbled = make_section("c", "MW", "ten", "eleven")
    regular = make_section("d", "MW", "10:00", "10:50")

    for section in (anytime, no_end, garbled):
        assert meeting_interval(section) is None
        assert not has_time_conflict(section, regular)
        assert not has_time_conflict(regular, section)


def test_conflict_is_symmetric(make_section):
    sections = [
        make_section("a", "MWF", "08:00", "08:50"),
        make_section("b", "MW", "08:30", "09:45"),
        make_section("c", "TR", "08:00", "09:15"),
        make_section("d", "F", "08:50", "09:40"),
        make_section("e", "R", "09:00", "10:15"),
        make_section("f", None, None, None),
    ]
    for a, b in itertools.product(sections, repeat=2):
        assert has_time_conflict(a, b) == has_time_conflict(b, a)


def test_conflicts_with_any(make_section):
    chosen = [
        make_section("a", "MWF", "08:00", "08:50"),
        make_section("b", "TR", "11:00", "12:15"),
    ]
    assert conflicts_with_any(make_section("c", "R", "12:00", "12:50"), chosen)
    assert not conflicts_with_any(make_section("d", "R", "12:15", "13:05"), chosen)
    assert not conflicts_with_any(make_section("e", "R", "12:00", "12:50"), [])


def test_blocked_cell_inside_class_conflicts(make_section):
    section = make_section("a", "TR", "09:00", "09:50")
    assert conflicts_with_blocked(section, [BlockedTimeCell("T", 9, 0)])
    assert conflicts_with_blocked(section, [BlockedTimeCell("R", 9, 45)])


def test_blocked_cell_at_end_minute_or_other_day_is_free(make_section):
    section = make_section("a", "TR", "09:00", "10:00")
    assert not conflicts_with_blocked(section, [BlockedTimeCell("T", 10, 0)])
    assert not conflicts_with_blocked(section, [BlockedTimeCell("W", 9, 15)])
    assert not conflicts_with_blocked(section, [BlockedTimeCell("T", 8, 45)])
    assert not conflicts_with_blocked(section, [])


def test_blocked_check_ignores_unscheduled_sections(make_section):
    assert not conflicts_with_blocked(make_section("a", None, None, None), [BlockedTimeCell("M", 9, 0)])


def test_find_conflicts_lists_every_overlapping_pair(make_section):
    sections = [
        make_section("a", "MW", "10:00", "10:50"),
        make_section("b", "M", "10:30", "11:20"),
        make_section("c", "W", "10:45", "11:00"),
        make_section("d", "F", "10:00", "10:50"),
    ]
    assert find_conflicts(sections) == [("a", "b"), ("a", "c")]


def test_occupies_cell(make_section):
    sections = [make_section("a", "MW", "10:00", "10:50")]
    assert occupies_cell(sections, BlockedTimeCell("W", 10, 45))
    assert not occupies_cell(sections, BlockedTimeCell("W", 11, 0))
    assert not occupies_cell(sections, BlockedTimeCell("T", 10, 15))


@pytest.mark.parametrize("text, expected", [
    ("13:00", "1:00 PM"),
    ("1305", "1:05 PM"),
    ("12:30", "12:30 PM"),
    ("00:15", "12:15 AM"),
    ("09:30", "9:30 AM"),
    (None, "TBA"),
    ("ARR", "ARR"),
])
def test_format_time(text, expected):
    assert format_time(text) == expected


def test_format_days():
    assert format_days("MWF") == "Mon, Wed, Fri"
    assert format_days("TR") == "Tue, Thu"
    assert format_days(None) == "TBA"
    assert format_days("") == "TBA"
