import numpy as np
import pytest

from models import ScheduleSection
from scoring_algorithm import (
    calculate_daily_gaps,
    calculate_metadata,
    count_distinct_start_times,
    rank_schedules,
    score_schedule,
)


@pytest.fixture
def flat(make_section, make_course):
    def _flat(section_id, days, start, end, enrolled=5, capacity=20):
        section = make_section(section_id, days, start, end, enrolled=enrolled, capacity=capacity)
        return ScheduleSection.from_section(section, make_course("COMS", section_id, [section]))
    return _flat


def test_gaps_are_real_minutes_per_weekday(flat):
    sections = [
        flat("a", "MW", "09:00", "09:50"),
        flat("b", "M", "11:00", "11:50"),
        flat("c", "W", "10:00", "10:50"),
    ]
    # Monday 09:50 -> 11:00 is 70 minutes, Wednesday 09:50 -> 10:00 is 10
    assert calculate_daily_gaps(sections) == 80


def test_gap_across_the_hour_is_not_hhmm_arithmetic(flat):
    sections = [flat("a", "T", "09:50", "10:40"), flat("b", "T", "11:10", "12:00")]
    assert calculate_daily_gaps(sections) == 30


def test_overlapping_classes_never_give_negative_gap(flat):
    sections = [flat("a", "M", "09:00", "10:30"), flat("b", "M", "10:00", "10:50")]
    assert calculate_daily_gaps(sections) == 0


def test_sections_without_times_are_ignored_by_gaps(flat):
    sections = [flat("a", "M", "09:00", "09:50"), flat("b", None, None, None)]
    assert calculate_daily_gaps(sections) == 0
    assert count_distinct_start_times(sections) == 1


def test_start_times_written_differently_count_once(flat):
    sections = [
        flat("a", "M", "9:00", "9:50"),
        flat("b", "W", "09:00", "09:50"),
        flat("c", "F", "0900", "0950"),
        flat("d", "T", "11:00", "11:50"),
    ]
    assert count_distinct_start_times(sections) == 2


def test_metadata(flat):
    sections = [
        flat("a", "MW", "10:00", "10:50", enrolled=10, capacity=20),
        flat("b", "TR", "08:00", "09:15", enrolled=15, capacity=20),
        flat("c", "M", "13:10", "14:00", enrolled=20, capacity=20),
    ]
    metadata = calculate_metadata(sections)

    assert metadata.earliest_start == "08:00"
    assert metadata.latest_end == "14:00"
    assert metadata.total_gap_minutes == 140
    assert metadata.average_seats_available == pytest.approx(5.0)


def test_metadata_for_unscheduled_sections(flat):
    metadata = calculate_metadata([flat("a", None, None, None)])
    assert metadata.earliest_start is None
    assert metadata.latest_end is None
    assert metadata.total_gap_minutes == 0


def test_score_formula_with_bounded_random_term(flat, rng):
    sections = [
        flat("a", "MW", "09:00", "09:50"),
        flat("b", "MW", "11:00", "11:50"),
    ]
    # 2 courses, 140 gap minutes (70 Mon + 70 Wed), 2 distinct start times
    base = 100 * 2 - 0.5 * 140 + 10 * (10 - 2)
    for _ in range(20):
        score = score_schedule(sections, rng)
        assert base <= score < base + 5


def test_score_is_reproducible_with_seeded_generator(flat):
    sections = [flat("a", "MW", "09:00", "09:50")]
    first = score_schedule(sections, np.random.default_rng(7))
    second = score_schedule(sections, np.random.default_rng(7))
    assert first == second


def test_more_than_ten_start_times_makes_compactness_negative(flat, rng):
    sections = [flat(f"s{i}", "F", f"{7 + i:02d}:00", f"{7 + i:02d}:30") for i in range(12)]
    gaps = 11 * 30
    base = 100 * 12 - 0.5 * gaps + 10 * (10 - 12)
    score = score_schedule(sections, rng)
    assert base <= score < base + 5


def test_rank_prefers_more_courses(flat, rng):
    one = [flat("a", "M", "09:00", "09:50")]
    two = [flat("a", "M", "09:00", "09:50"), flat("b", "T", "09:00", "09:50")]
    ranked = rank_schedules([one, two], rng)
    assert ranked[0]["sections"] is two
    assert ranked[0]["score"] >= ranked[1]["score"]
