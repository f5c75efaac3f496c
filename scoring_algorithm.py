# This module scores finished schedule combinations so the generator can rank them.

# Each combination gets a desirability score: more courses is better, idle time
# between classes costs points, fewer distinct start times earns a compactness
# bonus, and a small random term breaks ties so equal schedules don't always
# come back in the same order.

from typing import List, Optional, Sequence

import numpy as np

from models import WEEKDAYS, ScheduleMetadata, ScheduleSection
from scheduling_conflict_checks import meeting_interval, time_to_minutes

COURSE_WEIGHT = 100
GAP_PENALTY_PER_MINUTE = 0.5
COMPACTNESS_WEIGHT = 10
# Soft cap on distinct start times; more than this makes the bonus negative
COMPACTNESS_BASELINE = 10
RANDOM_TIEBREAK_MAX = 5


def calculate_daily_gaps(sections: Sequence[ScheduleSection]) -> int:
    """Total idle minutes between consecutive classes, summed over every weekday"""
    intervals = [meeting_interval(s) for s in sections]
    intervals = [i for i in intervals if i is not None]

    total_gap_minutes = 0
    for day in WEEKDAYS:
        day_times = sorted((start, end) for days, start, end in intervals if day in days)
        for i in range(1, len(day_times)):
            gap = day_times[i][0] - day_times[i - 1][1]
            # Overlapping classes mean bad upstream data; never count a negative gap
            if gap > 0:
                total_gap_minutes += gap
    return total_gap_minutes


def count_distinct_start_times(sections: Sequence[ScheduleSection]) -> int:
    # "9:00" and "09:00" are the same start
    starts = {time_to_minutes(s.start_time) for s in sections if s.start_time}
    starts.discard(None)
    return len(starts)


def _earliest(times: List[str]) -> Optional[str]:
    timed = [t for t in times if time_to_minutes(t) is not None]
    return min(timed, key=time_to_minutes) if timed else None


def _latest(times: List[str]) -> Optional[str]:
    timed = [t for t in times if time_to_minutes(t) is not None]
    return max(timed, key=time_to_minutes) if timed else None


def average_seats_available(sections: Sequence[ScheduleSection]) -> float:
    seats = [s.seats_available for s in sections if s.seats_available is not None]
    if not seats:
        return 0
    return round(float(np.mean(seats)), 1)


def calculate_metadata(sections: Sequence[ScheduleSection]) -> ScheduleMetadata:
    return ScheduleMetadata(
        earliest_start=_earliest([s.start_time for s in sections if s.start_time]),
        latest_end=_latest([s.end_time for s in sections if s.end_time]),
        total_gap_minutes=calculate_daily_gaps(sections),
        average_seats_available=average_seats_available(sections),
    )


def score_schedule(sections: Sequence[ScheduleSection], rng: Optional[np.random.Generator] = None) -> float:
    """
    Score a finished combination - higher is better.

    score = 100 * courses - 0.5 * gap minutes + 10 * (10 - distinct start times) + U(0, 5)
    """
    if rng is None:
        rng = np.random.default_rng()

    score = COURSE_WEIGHT * len(sections)
    score -= GAP_PENALTY_PER_MINUTE * calculate_daily_gaps(sections)
    score += COMPACTNESS_WEIGHT * (COMPACTNESS_BASELINE - count_distinct_start_times(sections))
    score += rng.uniform(0, RANDOM_TIEBREAK_MAX)
    return float(score)


def rank_schedules(combinations: List[List[ScheduleSection]], rng: Optional[np.random.Generator] = None) -> List[dict]:
    """Score every combination and sort best first"""
    if rng is None:
        rng = np.random.default_rng()
    scored = [{"sections": combo, "score": score_schedule(combo, rng)} for combo in combinations]
    return sorted(scored, key=lambda item: item["score"], reverse=True)
