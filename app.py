from flask import Flask, jsonify, request
from models import BlockedTimeCell, PoolEntry, ScheduleSection
from schedule_optimizer import can_generate_schedules, format_schedule_result, plan_schedules
from scheduling_conflict_checks import find_conflicts
from config import CATALOG_API_URL, DEFAULT_MAX_SCHEDULE_OPTIONS
from course_service import BlockedTimeMask, CoursePool, get_course_catalog

app = Flask(__name__)

# Check for catalog source
if not CATALOG_API_URL:
    print("WARNING: CATALOG_API_URL environment variable not set. Course lookups will return nothing.")


def parse_pool(data):
    pool = data.get("pool", [])
    if not isinstance(pool, list):
        raise ValueError("pool must be a list")
    # The pool caps its size and ignores a course listed twice
    course_pool = CoursePool()
    for entry in pool:
        parsed = PoolEntry.from_dict(entry)
        course_pool.add(parsed.course, parsed.is_required)
    return course_pool.entries


def parse_blocked_times(data):
    blocked = data.get("blockedTimes", [])
    if not isinstance(blocked, list):
        raise ValueError("blockedTimes must be a list")
    return BlockedTimeMask(BlockedTimeCell.from_dict(cell) for cell in blocked).cells


def parse_schedule_section(data):
    return ScheduleSection(
        id=str(data["id"]),
        course_id=str(data.get("courseId", "")),
        subject=data.get("subject", ""),
        course_number=data.get("courseNumber", ""),
        title=data.get("title", ""),
        section_number=data.get("sectionNumber", ""),
        crn=str(data.get("crn", "")),
        instructor=data.get("instructor"),
        meeting_days=data.get("meetingDays"),
        start_time=data.get("startTime"),
        end_time=data.get("endTime"),
        location=data.get("location"),
        credits=data.get("credits"),
    )


@app.route("/api/courses")
def api_courses():
    """Get catalog courses with their sections for a term"""
    term = request.args.get("term", "").strip()
    if not term:
        return jsonify({"success": False, "error": "term is required"}), 400
    subject = request.args.get("subject", "").strip() or None
    query = request.args.get("q", "").strip() or None

    try:
        courses = get_course_catalog(term, subject, query)
        return jsonify({"success": True, "courses": [c.to_dict() for c in courses]})
    except Exception as e:
        import traceback
        traceback.print_exc()
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/schedules/generate", methods=["POST"])
def api_generate_schedules():
    """Generate ranked schedule options for a course pool"""
    data = request.get_json(silent=True) or {}
    try:
        pool = parse_pool(data)
        blocked_times = parse_blocked_times(data)
        max_options = int(data.get("maxOptions", DEFAULT_MAX_SCHEDULE_OPTIONS))
        if max_options < 1:
            raise ValueError("maxOptions must be at least 1")
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        return jsonify({"success": False, "error": f"Invalid request: {e}"}), 400

    try:
        options, error = plan_schedules(pool, blocked_times, max_options)
        if error:
            return jsonify({"success": False, "error": error, "schedules": []})
        return jsonify({"success": True, "schedules": [format_schedule_result(o) for o in options]})
    except Exception as e:
        import traceback
        traceback.print_exc()
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/schedules/validate", methods=["POST"])
def api_validate_pool():
    """Quick check that every required course has an open, unblocked section"""
    data = request.get_json(silent=True) or {}
    try:
        pool = parse_pool(data)
        blocked_times = parse_blocked_times(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        return jsonify({"valid": False, "error": f"Invalid request: {e}"}), 400

    return jsonify(can_generate_schedules(pool, blocked_times).to_dict())


@app.route("/api/schedules/conflicts", methods=["POST"])
def api_schedule_conflicts():
    """List pairs of sections in a hand-built schedule that overlap"""
    data = request.get_json(silent=True) or {}
    try:
        sections = [parse_schedule_section(s) for s in data.get("sections", [])]
    except (KeyError, TypeError, AttributeError) as e:
        return jsonify({"success": False, "error": f"Invalid request: {e}"}), 400

    conflicts = find_conflicts(sections)
    return jsonify({"success": True, "conflicts": [list(pair) for pair in conflicts]})


@app.route("/api/blocked-times/toggle", methods=["POST"])
def api_toggle_blocked_time():
    """Block or unblock one quarter-hour; cells under a scheduled class can't be blocked"""
    data = request.get_json(silent=True) or {}
    try:
        mask = BlockedTimeMask(parse_blocked_times(data))
        cell = BlockedTimeCell.from_dict(data["cell"])
        sections = [parse_schedule_section(s) for s in data.get("sections", [])]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        return jsonify({"success": False, "error": f"Invalid request: {e}"}), 400

    toggled = mask.toggle(cell, sections)
    return jsonify({
        "success": True,
        "toggled": toggled,
        "blockedTimes": [c.to_dict() for c in mask.cells],
        "summary": mask.summary(),
    })


if __name__ == "__main__":
    app.run(debug=True, port=5000)
