"""
Models - Courses, sections, pool entries, blocked times and generated schedule options
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class Weekday(Enum):
    """Weekdays a section can meet on, keyed by their single-character registrar code"""
    M = "M"
    T = "T"
    W = "W"
    R = "R"
    F = "F"

    @property
    def label(self) -> str:
        return _DAY_LABELS[self]


_DAY_LABELS = {
    Weekday.M: "Mon",
    Weekday.T: "Tue",
    Weekday.W: "Wed",
    Weekday.R: "Thu",
    Weekday.F: "Fri",
}

# Display order, also used when walking a week day by day
WEEKDAYS = (Weekday.M, Weekday.T, Weekday.W, Weekday.R, Weekday.F)

VALID_BLOCK_MINUTES = (0, 15, 30, 45)


def parse_days(days: Optional[str]) -> FrozenSet[Weekday]:
    """
    Turn a meeting-days string like "MWF" or "T R" into a set of weekdays.
    Characters outside the weekday alphabet (spaces, S/U) are ignored.
    """
    if not days:
        return frozenset()
    return frozenset(Weekday(ch) for ch in str(days).upper() if ch in Weekday.__members__)


def parse_credits(credits: Optional[str]) -> int:
    """Parse a credits string ("3", "3-4", "1 to 4") by taking the first number, 0 if none"""
    if not credits:
        return 0
    match = re.search(r"(\d+)", str(credits))
    return int(match.group(1)) if match else 0


def _opt_str(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class Section:
    id: str
    crn: str
    section_number: str
    instructor: Optional[str] = None
    meeting_days: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    enrollment_max: int = 0
    enrollment_current: int = 0
    waitlist_max: int = 0
    waitlist_current: int = 0
    term: Optional[str] = None
    term_code: Optional[str] = None
    class_type: Optional[str] = None
    delivery_mode: Optional[str] = None

    @property
    def is_full(self) -> bool:
        return self.enrollment_current >= self.enrollment_max

    @property
    def seats_available(self) -> int:
        return max(0, self.enrollment_max - self.enrollment_current)

    @property
    def has_waitlist(self) -> bool:
        return self.waitlist_max > 0

    @classmethod
    def from_dict(cls, data: Dict) -> "Section":
        """Build a section from the camelCase record shape used by the catalog API"""
        crn = str(data.get("crn") or "")
        return cls(
            id=str(data.get("id") or crn),
            crn=crn,
            section_number=str(data.get("sectionNumber") or ""),
            instructor=_opt_str(data.get("instructor")),
            meeting_days=_opt_str(data.get("meetingDays")),
            start_time=_opt_str(data.get("startTime")),
            end_time=_opt_str(data.get("endTime")),
            location=_opt_str(data.get("location")),
            enrollment_max=int(data.get("enrollmentMax") or 0),
            enrollment_current=int(data.get("enrollmentCurrent") or 0),
            waitlist_max=int(data.get("waitlistMax") or 0),
            waitlist_current=int(data.get("waitlistCurrent") or 0),
            term=_opt_str(data.get("term")),
            term_code=_opt_str(data.get("termCode")),
            class_type=_opt_str(data.get("classType")),
            delivery_mode=_opt_str(data.get("deliveryMode")),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "crn": self.crn,
            "sectionNumber": self.section_number,
            "term": self.term,
            "termCode": self.term_code,
            "instructor": self.instructor,
            "meetingDays": self.meeting_days,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location,
            "enrollmentMax": self.enrollment_max,
            "enrollmentCurrent": self.enrollment_current,
            "waitlistMax": self.waitlist_max,
            "waitlistCurrent": self.waitlist_current,
            "classType": self.class_type,
            "deliveryMode": self.delivery_mode,
            "seatsAvailable": self.seats_available,
            "isFull": self.is_full,
            "hasWaitlist": self.has_waitlist,
        }


@dataclass
class Course:
    id: str
    subject: str
    course_number: str
    title: str = ""
    credits: Optional[str] = None
    description: Optional[str] = None
    prerequisites: Optional[str] = None
    sections: List[Section] = field(default_factory=list)

    @property
    def code(self) -> str:
        """Registrar-visible code, e.g. "COMS 227" """
        return f"{self.subject} {self.course_number}"

    @classmethod
    def from_dict(cls, data: Dict) -> "Course":
        subject = str(data.get("subject") or "").strip()
        course_number = str(data.get("courseNumber") or "").strip()
        return cls(
            id=str(data.get("id") or f"{subject}-{course_number}"),
            subject=subject,
            course_number=course_number,
            title=str(data.get("title") or ""),
            credits=_opt_str(data.get("credits")),
            description=_opt_str(data.get("description")),
            prerequisites=_opt_str(data.get("prerequisites")),
            sections=[Section.from_dict(s) for s in data.get("sections") or []],
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "courseNumber": self.course_number,
            "title": self.title,
            "description": self.description,
            "credits": self.credits,
            "prerequisites": self.prerequisites,
            "sections": [s.to_dict() for s in self.sections],
        }


@dataclass
class PoolEntry:
    """A course in the generator pool; required courses appear in every generated option"""
    course: Course
    is_required: bool = False

    @classmethod
    def from_dict(cls, data: Dict) -> "PoolEntry":
        course = data.get("course")
        if not course:
            raise ValueError("Pool entry is missing its course")
        return cls(course=Course.from_dict(course), is_required=bool(data.get("isRequired", False)))

    def to_dict(self) -> Dict:
        return {"course": self.course.to_dict(), "isRequired": self.is_required}


@dataclass(frozen=True)
class BlockedTimeCell:
    """One unavailable quarter-hour in the weekly grid"""
    day: Weekday
    hour: int
    minute: int = 0

    def __post_init__(self):
        if not isinstance(self.day, Weekday):
            # Accept the single-character code as well
            try:
                object.__setattr__(self, "day", Weekday(str(self.day).upper()))
            except ValueError:
                raise ValueError(f"Invalid blocked day: {self.day!r}")
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Invalid blocked hour: {self.hour}")
        if self.minute not in VALID_BLOCK_MINUTES:
            raise ValueError(f"Blocked minute must be one of {VALID_BLOCK_MINUTES}, got {self.minute}")

    @property
    def minutes(self) -> int:
        """Minutes since midnight"""
        return self.hour * 60 + self.minute

    @classmethod
    def from_dict(cls, data: Dict) -> "BlockedTimeCell":
        return cls(day=data["day"], hour=int(data["hour"]), minute=int(data.get("minute", 0)))

    def to_dict(self) -> Dict:
        return {"day": self.day.value, "hour": self.hour, "minute": self.minute}


@dataclass(frozen=True)
class ScheduleSection:
    """A chosen section flattened together with its course for display"""
    id: str
    course_id: str
    subject: str
    course_number: str
    title: str
    section_number: str
    crn: str
    instructor: Optional[str]
    meeting_days: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    location: Optional[str]
    credits: Optional[str]
    seats_available: Optional[int] = None

    @classmethod
    def from_section(cls, section: Section, course: Course) -> "ScheduleSection":
        return cls(
            id=section.id,
            course_id=course.id,
            subject=course.subject,
            course_number=course.course_number,
            title=course.title,
            section_number=section.section_number,
            crn=section.crn,
            instructor=section.instructor,
            meeting_days=section.meeting_days,
            start_time=section.start_time,
            end_time=section.end_time,
            location=section.location,
            credits=course.credits,
            seats_available=section.seats_available,
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "courseId": self.course_id,
            "subject": self.subject,
            "courseNumber": self.course_number,
            "title": self.title,
            "sectionNumber": self.section_number,
            "crn": self.crn,
            "instructor": self.instructor,
            "meetingDays": self.meeting_days,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location,
            "credits": self.credits,
        }


@dataclass(frozen=True)
class ScheduleMetadata:
    earliest_start: Optional[str] = None
    latest_end: Optional[str] = None
    total_gap_minutes: int = 0
    average_seats_available: float = 0

    def to_dict(self) -> Dict:
        return {
            "earliestStart": self.earliest_start,
            "latestEnd": self.latest_end,
            "totalGapMinutes": self.total_gap_minutes,
            "averageSeatsAvailable": self.average_seats_available,
        }


@dataclass(frozen=True)
class GeneratedScheduleOption:
    id: str
    sections: List[ScheduleSection]
    total_credits: int
    score: float
    metadata: ScheduleMetadata

    @property
    def section_ids(self) -> List[str]:
        return [s.id for s in self.sections]

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "sections": [s.to_dict() for s in self.sections],
            "totalCredits": self.total_credits,
            "score": self.score,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class FeasibilityResult:
    valid: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        result = {"valid": self.valid}
        if self.error:
            result["error"] = self.error
        return result
