import numpy as np
import pytest

from models import Course, PoolEntry, Section


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_section():
    def _make(section_id, days, start, end, enrolled=5, capacity=20, instructor="Staff"):
        return Section(
            id=section_id,
            crn=f"CRN{section_id}",
            section_number=section_id[-1],
            instructor=instructor,
            meeting_days=days,
            start_time=start,
            end_time=end,
            location="Carver 0101",
            enrollment_max=capacity,
            enrollment_current=enrolled,
        )
    return _make


@pytest.fixture
def make_course():
    def _make(subject, number, sections, credits="3"):
        return Course(
            id=f"{subject}-{number}",
            subject=subject,
            course_number=number,
            title=f"{subject} {number} Title",
            credits=credits,
            sections=list(sections),
        )
    return _make


@pytest.fixture
def coms_227(make_section, make_course):
    return make_course("COMS", "227", [
        make_section("coms227-1", "MW", "10:00", "10:50", enrolled=20, capacity=20),
        make_section("coms227-2", "TR", "09:00", "09:50", enrolled=5, capacity=20),
    ], credits="4")


@pytest.fixture
def wide_pool(make_section, make_course):
    """Three required courses, four sections each, none of which overlap"""
    pool = []
    for i, subject in enumerate(["MATH", "PHYS", "ENGL"]):
        sections = []
        for j in range(4):
            hour = 8 + i * 4 + j
            sections.append(make_section(f"{subject}-{j}", "M", f"{hour:02d}:00", f"{hour:02d}:50"))
        pool.append(PoolEntry(make_course(subject, "101", sections), is_required=True))
    return pool
