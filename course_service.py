"""
Course Service - Loads course records for the generator and manages the course pool and blocked times
"""
import json
import re
import warnings
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
import requests

from config import CACHE_DIR, CATALOG_API_KEY, CATALOG_API_URL, MAX_POOL_SIZE, REQUEST_TIMEOUT
from models import BlockedTimeCell, Course, PoolEntry, Section
from scheduling_conflict_checks import occupies_cell

HEADERS = {
    'accept': 'application/json',
    'x-api-key': CATALOG_API_KEY
} if CATALOG_API_KEY else {'accept': 'application/json'}

# Columns of the registrar section export, one row per section
SECTION_FIELDS = (
    "crn", "sectionNumber", "instructor", "meetingDays", "startTime", "endTime", "location",
    "enrollmentMax", "enrollmentCurrent", "waitlistMax", "waitlistCurrent",
    "term", "termCode", "classType", "deliveryMode",
)


def course_from_record(record: Dict) -> Optional[Course]:
    """Parse one catalog record, or None (with a warning) if it is malformed"""
    try:
        if not record.get("subject") or not record.get("courseNumber"):
            raise ValueError("missing subject or courseNumber")
        return Course.from_dict(record)
    except (AttributeError, TypeError, ValueError) as e:
        warnings.warn(f"Skipping malformed course record: {e}")
        return None


def courses_from_records(records: Iterable[Dict]) -> List[Course]:
    courses = []
    for record in records:
        course = course_from_record(record)
        if course is not None:
            courses.append(course)
    return courses


def _records_from_payload(payload) -> List[Dict]:
    # The catalog API wraps results in {"courses": [...]}; cached files may be bare lists
    if isinstance(payload, dict):
        return payload.get("courses", [])
    if isinstance(payload, list):
        return payload
    return []


def load_courses_from_json(path) -> List[Course]:
    """Load courses from a catalog JSON file"""
    with open(path, 'r') as f:
        return courses_from_records(_records_from_payload(json.load(f)))


def get_cache_path(term_code: str, subject: Optional[str] = None, query: Optional[str] = None) -> Path:
    """Get the cache file path for a catalog query"""
    parts = [term_code, subject or "all"]
    if query:
        parts.append(re.sub(r'\W+', '_', query.strip().lower()))
    return Path(CACHE_DIR) / f"{'-'.join(parts)}.json"


def fetch_course_catalog(term_code: str, subject: Optional[str] = None, query: Optional[str] = None) -> List[Course]:
    """Fetch courses with their sections from the catalog API"""
    if not CATALOG_API_URL:
        print("Warning: CATALOG_API_URL is not set; no courses fetched")
        return []

    params = {"term": term_code}
    if subject:
        params["subject"] = subject
    if query:
        params["q"] = query

    try:
        response = requests.get(CATALOG_API_URL, params=params, headers=HEADERS, timeout=REQUEST_TIMEOUT)
        if response.status_code != 200:
            print(f"Error fetching catalog for {term_code}: HTTP {response.status_code}")
            return []
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        print(f"Error fetching catalog for {term_code}: {e}")
        return []

    records = _records_from_payload(payload)
    # Cache the result
    cache_path = get_cache_path(term_code, subject, query)
    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        with open(cache_path, 'w') as f:
            json.dump(records, f, indent=2)
    except OSError as e:
        print(f"Warning: could not write catalog cache {cache_path}: {e}")

    return courses_from_records(records)


def get_course_catalog(term_code: str, subject: Optional[str] = None, query: Optional[str] = None,
                       use_cache: bool = True) -> List[Course]:
    """Get catalog courses, using the cache if available"""
    if use_cache:
        cache_path = get_cache_path(term_code, subject, query)
        if cache_path.exists():
            try:
                return load_courses_from_json(cache_path)
            except (OSError, ValueError) as e:
                print(f"Warning: ignoring unreadable cache {cache_path}: {e}")

    return fetch_course_catalog(term_code, subject, query)


def load_courses_from_csv(path) -> List[Course]:
    """
    Load a registrar section export (one row per section) and group the rows into courses.
    Rows without a CRN are skipped.
    """
    df = pd.read_csv(path, dtype=str).fillna("")
    for column in ("subject", "courseNumber", "crn"):
        if column not in df.columns:
            raise ValueError(f"Section export is missing the '{column}' column")
    df = df[df["crn"].str.strip() != ""]

    courses = []
    for (subject, course_number), rows in df.groupby(["subject", "courseNumber"], sort=False):
        first = rows.iloc[0]
        sections = []
        for _, row in rows.iterrows():
            record = {col: row[col] for col in SECTION_FIELDS if col in row.index}
            try:
                sections.append(Section.from_dict(record))
            except ValueError as e:
                warnings.warn(f"Skipping section {row['crn']} of {subject} {course_number}: {e}")
        courses.append(Course(
            id=f"{subject.strip()}-{course_number.strip()}",
            subject=subject.strip(),
            course_number=course_number.strip(),
            title=first.get("courseTitle", ""),
            credits=first.get("credits") or None,
            sections=sections,
        ))
    return courses


class PoolFullError(ValueError):
    pass


class CoursePool:
    """Ordered pool of courses for the generator; starred (required) courses must be in every option"""

    def __init__(self, max_size: int = MAX_POOL_SIZE):
        self.max_size = max_size
        self._entries: List[PoolEntry] = []

    @property
    def entries(self) -> List[PoolEntry]:
        return list(self._entries)

    @property
    def required_count(self) -> int:
        return sum(1 for e in self._entries if e.is_required)

    @property
    def optional_count(self) -> int:
        return len(self._entries) - self.required_count

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, course_id: str) -> bool:
        return any(e.course.id == course_id for e in self._entries)

    def add(self, course: Course, is_required: bool = False) -> bool:
        """Add a course; returns False if it is already in the pool"""
        if course.id in self:
            return False
        if len(self._entries) >= self.max_size:
            raise PoolFullError(f"Maximum {self.max_size} courses allowed in pool")
        self._entries.append(PoolEntry(course, is_required))
        return True

    def remove(self, course_id: str) -> None:
        self._entries = [e for e in self._entries if e.course.id != course_id]

    def toggle_required(self, course_id: str) -> None:
        for entry in self._entries:
            if entry.course.id == course_id:
                entry.is_required = not entry.is_required

    def clear(self) -> None:
        self._entries = []


class BlockedTimeMask:
    """The user's weekly unavailable quarter-hours"""

    def __init__(self, cells: Iterable[BlockedTimeCell] = ()):
        self._cells = set(cells)

    @property
    def cells(self) -> List[BlockedTimeCell]:
        return sorted(self._cells, key=lambda c: ("MTWRF".index(c.day.value), c.minutes))

    def is_blocked(self, cell: BlockedTimeCell) -> bool:
        return cell in self._cells

    def toggle(self, cell: BlockedTimeCell, scheduled_sections: Iterable = ()) -> bool:
        """
        Block or unblock a cell. A cell with a class already scheduled in it
        can't be blocked; returns False when the toggle was refused.
        """
        if occupies_cell(scheduled_sections, cell):
            return False
        if cell in self._cells:
            self._cells.remove(cell)
        else:
            self._cells.add(cell)
        return True

    def clear(self) -> None:
        self._cells.clear()

    @property
    def blocked_minutes(self) -> int:
        return len(self._cells) * 15

    def summary(self) -> str:
        hours, minutes = divmod(self.blocked_minutes, 60)
        return f"Blocked: {hours}h {minutes}m"
