# Scheduling conflict checks: weekly meeting-pattern overlap between sections,
# and between a section and the user's blocked quarter-hour cells.

from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from models import BlockedTimeCell, Weekday, parse_days

# (weekdays, start minute, end minute)
MeetingInterval = Tuple[FrozenSet, int, int]


def time_to_minutes(timestr: Optional[str]) -> Optional[int]:
    """Expects 'HH:MM' or bare 'HHMM'. Returns minutes since midnight, or None if unparseable."""
    if not timestr:
        return None
    timestr = str(timestr).strip()
    try:
        if ":" in timestr:
            h, m = map(int, timestr.split(":"))
        elif timestr.isdigit() and len(timestr) in (3, 4):
            h, m = int(timestr[:-2]), int(timestr[-2:])
        else:
            return None
    except ValueError:
        return None
    if not (0 <= h <= 23 and 0 <= m <= 59):
        return None
    return h * 60 + m


def meeting_interval(section) -> Optional[MeetingInterval]:
    """
    Return the weekdays and [start, end) minutes a section occupies each week,
    or None when it has no fixed meeting time.
    """
    days = parse_days(getattr(section, "meeting_days", None))
    if not days:
        return None
    start = time_to_minutes(getattr(section, "start_time", None))
    end = time_to_minutes(getattr(section, "end_time", None))
    if start is None or end is None:
        return None
    return days, start, end


def is_schedulable(section) -> bool:
    return meeting_interval(section) is not None


def intervals_overlap(a: MeetingInterval, b: MeetingInterval) -> bool:
    days1, s1, e1 = a
    days2, s2, e2 = b
    # First, days must overlap
    if not days1 & days2:
        return False
    # Touching endpoints are not a conflict
    return s1 < e2 and s2 < e1


def has_time_conflict(section1, section2) -> bool:
    """Check whether two sections meet at the same time on at least one shared weekday"""
    a = meeting_interval(section1)
    b = meeting_interval(section2)
    if a is None or b is None:
        return False
    return intervals_overlap(a, b)


def conflicts_with_any(candidate, chosen: Iterable) -> bool:
    """True if the candidate conflicts with any already-chosen section"""
    interval = meeting_interval(candidate)
    if interval is None:
        return False
    for other in chosen:
        other_interval = meeting_interval(other)
        if other_interval is not None and intervals_overlap(interval, other_interval):
            return True
    return False


def cell_in_interval(cell: BlockedTimeCell, interval: MeetingInterval) -> bool:
    days, start, end = interval
    if cell.day not in days:
        return False
    return start <= cell.minutes < end


def conflicts_with_blocked(candidate, blocked_cells: Sequence[BlockedTimeCell]) -> bool:
    """
    True if any blocked quarter-hour on one of the candidate's meeting days falls
    inside [start, end) of the candidate. A cell at the exact end minute is free.
    """
    if not blocked_cells:
        return False
    interval = meeting_interval(candidate)
    if interval is None:
        return False
    return any(cell_in_interval(cell, interval) for cell in blocked_cells)


def occupies_cell(sections: Iterable, cell: BlockedTimeCell) -> bool:
    """Whether any of the sections meets during the given quarter-hour"""
    for section in sections:
        interval = meeting_interval(section)
        if interval is not None and cell_in_interval(cell, interval):
            return True
    return False


def find_conflicts(sections: Sequence) -> List[Tuple[str, str]]:
    """Return the id pairs of every two sections in the list that overlap"""
    intervals = [meeting_interval(s) for s in sections]
    pairs = []
    for i in range(len(sections)):
        if intervals[i] is None:
            continue
        for j in range(i + 1, len(sections)):
            if intervals[j] is not None and intervals_overlap(intervals[i], intervals[j]):
                pairs.append((sections[i].id, sections[j].id))
    return pairs


def format_time(timestr: Optional[str]) -> str:
    """Format '13:00' or '1300' as '1:00 PM'"""
    if not timestr:
        return "TBA"
    minutes = time_to_minutes(timestr)
    if minutes is None:
        return timestr
    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours - 12 if hours > 12 else (12 if hours == 0 else hours)
    return f"{display_hours}:{mins:02d} {period}"


def format_days(days: Optional[str]) -> str:
    """Format 'MWF' as 'Mon, Wed, Fri'"""
    labels = []
    for ch in str(days or "").upper():
        if ch in Weekday.__members__ and Weekday(ch).label not in labels:
            labels.append(Weekday(ch).label)
    return ", ".join(labels) if labels else "TBA"
