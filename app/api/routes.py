"""
API routes for the job calendar: month view, day detail, availability
checks, booking and rescheduling.
"""
from flask import current_app, jsonify, request
from app.api import api_bp
from app.api.helpers import parse_duration, parse_horizon, proposal_from_payload
from app.datetime_utils import parse_flag, parse_month, parse_ymd, today_in
from app.models import Job, db
from app.scheduling.service import (
    SchedulingConflictError,
    check_job_availability,
    create_job,
    get_day_detail,
    get_month_view,
    reschedule_job,
)
from app.logging_config import get_logger

logger = get_logger(__name__)


def _default_horizon():
    return current_app.config.get("SCHEDULING_HORIZON_DAYS", 365)


def _json_object():
    """Request body as a dict (empty when missing), or None if it is not a JSON object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


@api_bp.route("/jobs", methods=["GET"])
def get_jobs():
    """Return all jobs from the database, earliest start first."""
    try:
        jobs = Job.query.order_by(Job.start_date.asc(), Job.id.asc()).all()
        return jsonify({
            "jobs": [job.to_dict() for job in jobs],
            "total_count": len(jobs)
        }), 200
    except Exception as e:
        logger.error("Error in /api/jobs", error=str(e), exc_info=True)
        return jsonify({'error': str(e)}), 500


@api_bp.route("/jobs", methods=["POST"])
def create_job_route():
    """
    Book a new job; the end date is derived from the duration and weekend policy.

    Body: {title, start_date, duration_days, include_weekends, status?,
           client_name?, site_address?, force?}
    Returns 201 with the job, or 409 with conflicts and a suggested start.
    """
    data = _json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        start_date = parse_ymd(data.get("start_date"))
        if start_date is None:
            return jsonify({"error": "start_date is required"}), 400
        duration_days = parse_duration(data.get("duration_days"))
        include_weekends = parse_flag(data.get("include_weekends"))
        force = parse_flag(data.get("force"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    title = str(data.get("title") or "").strip()
    if not title:
        return jsonify({"error": "title is required"}), 400

    try:
        job = create_job(
            title,
            start_date,
            duration_days,
            include_weekends,
            status=data.get("status"),
            force=force,
            horizon_days=_default_horizon(),
            client_name=data.get("client_name"),
            site_address=data.get("site_address"),
        )
        return jsonify({"job": job.to_dict()}), 201
    except SchedulingConflictError as e:
        body = e.result.to_dict()
        body["error"] = "Requested dates conflict with existing jobs"
        return jsonify(body), 409
    except Exception as e:
        db.session.rollback()
        logger.error("Error creating job", error=str(e), exc_info=True)
        return jsonify({"error": "Failed to create job", "details": str(e)}), 500


@api_bp.route("/calendar", methods=["GET"])
def get_calendar():
    """
    Return render instructions for one month.

    Query params:
        month: YYYY-MM (required)
        today: YYYY-MM-DD (optional, defaults to today in `tz` or server time)
        tz: IANA timezone used for the default `today`
        selected: YYYY-MM-DD (optional)
        start, days, include_weekends: optional proposal to highlight
        block_starts: mark days with jobs as blocked while placing a proposal
    """
    args = request.args
    try:
        month = parse_month(args.get("month"))
        today = parse_ymd(args.get("today")) or today_in(args.get("tz"))
        selected = parse_ymd(args.get("selected"))
        proposed = proposal_from_payload(args, start_field="start", required=False)
        block_starts = parse_flag(args.get("block_starts"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        view = get_month_view(
            month,
            today=today,
            selected=selected,
            proposed=proposed,
            block_starts=block_starts,
        )
        return jsonify(view.to_dict()), 200
    except Exception as e:
        logger.error("Error building calendar", month=str(month), error=str(e), exc_info=True)
        return jsonify({"error": "Failed to build calendar", "details": str(e)}), 500


@api_bp.route("/calendar/day/<day>", methods=["GET"])
def get_calendar_day(day):
    """Return the jobs worked on one day."""
    try:
        parsed = parse_ymd(day)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        spans = get_day_detail(parsed)
        return jsonify({
            "date": parsed.isoformat(),
            "jobs": [span.to_dict() for span in spans],
            "job_count": len(spans)
        }), 200
    except Exception as e:
        logger.error("Error getting day detail", day=day, error=str(e), exc_info=True)
        return jsonify({"error": "Failed to get day detail", "details": str(e)}), 500


@api_bp.route("/availability", methods=["POST"])
def check_availability_route():
    """
    Check whether a proposed booking is free and suggest the next free start.

    Body: {start, duration_days, include_weekends, horizon_days?, exclude_job_id?}
    """
    data = _json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        proposed = proposal_from_payload(data)
        horizon = parse_horizon(data.get("horizon_days"), _default_horizon())
        exclude_job_id = data.get("exclude_job_id")
        if exclude_job_id is not None:
            exclude_job_id = int(exclude_job_id)
    except (TypeError, ValueError) as e:
        return jsonify({"error": str(e)}), 400

    try:
        result = check_job_availability(proposed, horizon, exclude_job_id=exclude_job_id)
        body = result.to_dict()
        body["start"] = proposed.start_day.isoformat()
        body["end"] = proposed.end_day.isoformat()
        return jsonify(body), 200
    except Exception as e:
        logger.error("Error checking availability", error=str(e), exc_info=True)
        return jsonify({"error": "Failed to check availability", "details": str(e)}), 500


@api_bp.route("/jobs/<int:job_id>/reschedule", methods=["POST"])
def reschedule_job_route(job_id):
    """
    Move a job, recomputing its end date from the duration and weekend policy.

    Body: {start_date, duration_days, include_weekends, force?}
    Returns 409 with conflicts and a suggested start when the new span is taken.
    """
    data = _json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        start_date = parse_ymd(data.get("start_date"))
        if start_date is None:
            return jsonify({"error": "start_date is required"}), 400
        duration_days = parse_duration(data.get("duration_days"))
        include_weekends = parse_flag(data.get("include_weekends"))
        force = parse_flag(data.get("force"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({"error": "Job not found"}), 404

    try:
        job = reschedule_job(
            job,
            start_date,
            duration_days,
            include_weekends,
            force=force,
            horizon_days=_default_horizon(),
        )
        return jsonify({"job": job.to_dict()}), 200
    except SchedulingConflictError as e:
        body = e.result.to_dict()
        body["error"] = "Requested dates conflict with existing jobs"
        return jsonify(body), 409
    except Exception as e:
        db.session.rollback()
        logger.error("Error rescheduling job", job_id=job_id, error=str(e), exc_info=True)
        return jsonify({"error": "Failed to reschedule job", "details": str(e)}), 500
