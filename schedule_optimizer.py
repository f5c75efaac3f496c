"""
Schedule Optimizer - Finds conflict-free section combinations for a course pool and ranks them
"""
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config import DEFAULT_MAX_SCHEDULE_OPTIONS, MAX_SCHEDULE_COMBINATIONS
from models import (
    BlockedTimeCell,
    Course,
    FeasibilityResult,
    GeneratedScheduleOption,
    PoolEntry,
    ScheduleSection,
    Section,
    parse_credits,
)
from scheduling_conflict_checks import (
    conflicts_with_any,
    conflicts_with_blocked,
    format_days,
    format_time,
    is_schedulable,
)
from scoring_algorithm import calculate_metadata, rank_schedules

NO_SCHEDULES_MESSAGE = "No valid schedules found. Try removing some courses or adjusting blocked times."
EMPTY_POOL_MESSAGE = "Add at least one course to the pool"

SCHEDULE_COLORS = [
    "#ef4444",
    "#3b82f6",
    "#22c55e",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#f97316",
    "#14b8a6",
    "#6366f1",
]


class SearchBudget:
    """
    Counter of recursive expansions shared by every branch of one generation call.
    Once `limit` is reached no further branches are explored.
    """

    def __init__(self, limit: int = MAX_SCHEDULE_COMBINATIONS):
        self.limit = limit
        self.count = 0

    @property
    def exhausted(self) -> bool:
        return self.count >= self.limit

    def spend(self) -> None:
        self.count += 1


def get_valid_sections(course: Course) -> List[Section]:
    """Sections that can be scheduled: not full and with a parseable weekly meeting time"""
    return [s for s in course.sections if not s.is_full and is_schedulable(s)]


def _check_pool(pool: Iterable[PoolEntry]) -> List[PoolEntry]:
    entries = list(pool)
    for entry in entries:
        if entry is None or entry.course is None:
            raise ValueError("Pool entry is missing its course")
    return entries


def generate_combinations(
    entries: Sequence[PoolEntry],
    blocked_times: Sequence[BlockedTimeCell],
    current: List[ScheduleSection],
    budget: SearchBudget,
    allow_skip: bool = False,
) -> List[List[ScheduleSection]]:
    """
    Backtracking search picking at most one section per course.

    Every complete path through `entries` extends `current` into one combination.
    With `allow_skip` each course may also be left out entirely (optional courses).
    Branches that conflict with the partial schedule or a blocked cell are pruned.
    """
    if budget.exhausted:
        return []

    # Base case - all courses processed
    if not entries:
        return [current]

    course = entries[0].course
    remaining = entries[1:]
    results: List[List[ScheduleSection]] = []

    for section in get_valid_sections(course):
        candidate = ScheduleSection.from_section(section, course)

        if conflicts_with_any(candidate, current):
            continue
        if conflicts_with_blocked(candidate, blocked_times):
            continue

        budget.spend()
        results.extend(generate_combinations(remaining, blocked_times, current + [candidate], budget, allow_skip))

        if budget.exhausted:
            return results

    if allow_skip:
        budget.spend()
        results.extend(generate_combinations(remaining, blocked_times, current, budget, allow_skip))

    return results


def enumerate_schedules(
    pool: Sequence[PoolEntry],
    blocked_times: Sequence[BlockedTimeCell],
    budget: Optional[SearchBudget] = None,
) -> List[List[ScheduleSection]]:
    """
    Two-phase search: first every conflict-free way to schedule all required courses,
    then each of those extended with any subset of the optional courses.
    Returns [] if the required courses cannot be scheduled together.
    """
    entries = _check_pool(pool)
    if budget is None:
        budget = SearchBudget()

    required = [e for e in entries if e.is_required]
    optional = [e for e in entries if not e.is_required]

    if not required and not optional:
        return []

    if not required:
        # Only optional courses - leaving every course out is not a schedule
        return [combo for combo in generate_combinations(optional, blocked_times, [], budget, allow_skip=True) if combo]

    required_combinations = generate_combinations(required, blocked_times, [], budget)
    if not required_combinations:
        return []

    if not optional:
        return required_combinations

    all_schedules: List[List[ScheduleSection]] = []
    for index, base in enumerate(required_combinations):
        extended = generate_combinations(optional, blocked_times, base, budget, allow_skip=True)
        # The budget can run out before the optional search reaches any leaf
        all_schedules.extend(extended if extended else [base])
        if budget.exhausted:
            # Required combinations already found stay in the result without extension
            all_schedules.extend(required_combinations[index + 1:])
            break
    return all_schedules


def _dedup_key(sections: Sequence[ScheduleSection]) -> str:
    return ",".join(sorted(s.id for s in sections))


def generate_schedules(
    pool: Sequence[PoolEntry],
    blocked_times: Sequence[BlockedTimeCell],
    max_options: int = DEFAULT_MAX_SCHEDULE_OPTIONS,
    rng: Optional[np.random.Generator] = None,
    max_combinations: int = MAX_SCHEDULE_COMBINATIONS,
) -> List[GeneratedScheduleOption]:
    """
    Find up to `max_options` distinct schedule options for the pool, best first.

    An empty list means nothing could be scheduled (no courses, or the required
    courses cannot be taken together); it is never an error.
    """
    budget = SearchBudget(max_combinations)
    combinations = enumerate_schedules(pool, blocked_times, budget)
    if not combinations:
        return []

    options: List[GeneratedScheduleOption] = []
    seen = set()

    for scored in rank_schedules(combinations, rng):
        if len(options) >= max_options:
            break
        sections = scored["sections"]
        key = _dedup_key(sections)
        if key in seen:
            continue
        seen.add(key)

        options.append(GeneratedScheduleOption(
            id=f"option-{len(options) + 1}",
            sections=list(sections),
            total_credits=sum(parse_credits(s.credits) for s in sections),
            score=scored["score"],
            metadata=calculate_metadata(sections),
        ))

    return options


def can_generate_schedules(pool: Sequence[PoolEntry], blocked_times: Sequence[BlockedTimeCell]) -> FeasibilityResult:
    """
    Quick per-course check of the required courses before running the full search.
    Passing it does not guarantee the required courses fit together.
    """
    for entry in _check_pool(pool):
        if not entry.is_required:
            continue
        course = entry.course
        valid_sections = get_valid_sections(course)

        if not valid_sections:
            return FeasibilityResult(False, f"{course.code} has no available sections")

        if all(conflicts_with_blocked(s, blocked_times) for s in valid_sections):
            return FeasibilityResult(False, f"All sections of {course.code} conflict with your blocked times")

    return FeasibilityResult(True)


def plan_schedules(
    pool: Sequence[PoolEntry],
    blocked_times: Sequence[BlockedTimeCell],
    max_options: int = DEFAULT_MAX_SCHEDULE_OPTIONS,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[List[GeneratedScheduleOption], Optional[str]]:
    """
    Run the pre-check and the generator together.
    Returns (options, error); error explains why options is empty.
    """
    if not pool:
        return [], EMPTY_POOL_MESSAGE

    check = can_generate_schedules(pool, blocked_times)
    if not check.valid:
        return [], check.error or "Cannot generate schedules"

    options = generate_schedules(pool, blocked_times, max_options, rng=rng)
    if not options:
        return [], NO_SCHEDULES_MESSAGE
    return options, None


def get_schedule_color(index: int) -> str:
    return SCHEDULE_COLORS[index % len(SCHEDULE_COLORS)]


def format_schedule_result(option: GeneratedScheduleOption) -> dict:
    """
    Format a generated option for API response.
    """
    result = option.to_dict()
    for index, (formatted, section) in enumerate(zip(result["sections"], option.sections)):
        formatted["displayDays"] = format_days(section.meeting_days)
        formatted["displayTime"] = f"{format_time(section.start_time)} - {format_time(section.end_time)}"
        formatted["color"] = get_schedule_color(index)
    return result
