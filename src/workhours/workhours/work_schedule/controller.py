from __future__ import annotations

import csv
import io
import json
import logging
from functools import wraps

from flask import Flask, jsonify, request, send_file, session
from werkzeug.exceptions import HTTPException

from ..common.datetime_utils import isoformat_ms, now_utc
from ..common.validators import optional_positive_int, require_non_empty, require_positive_int
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import (
    AmbiguousJobSelectionError,
    AuthorizationError,
    DomainError,
    ErrorKind,
    EventNotFoundError,
    ScheduleNotFoundError,
    ValidationError,
    WorkHoursError,
)
from ..tokens.qr import render_qr_data_url, render_qr_png

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.TOKEN_MALFORMED: 400,
    ErrorKind.TOKEN_EXPIRED: 400,
    ErrorKind.NOT_ASSIGNED: 403,
    ErrorKind.SESSION_ALREADY_ACTIVE: 409,
    ErrorKind.NO_ACTIVE_SESSION: 409,
    ErrorKind.AMBIGUOUS_JOB_SELECTION: 409,
    ErrorKind.INVALID_INTERVAL: 422,
}


def _error(status: int, error: str, message: str, **extra):
    body = {"success": False, "error": error, "message": message}
    body.update(extra)
    return jsonify(body), status


def register(app: Flask, container: Container) -> None:
    svc = container.work_schedule_service

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return _error(401, "Unauthenticated", "Please log in to continue")
            return view(*args, **kwargs)

        return wrapper

    def _owned_event(event_id: int):
        if session.get("role") != Role.ORGANIZER.value:
            raise AuthorizationError("Only organizers can do this")

        event = svc.get_event(event_id)
        if not svc.is_organizer(event, int(session["user_id"])):
            raise AuthorizationError("You do not organize this event")
        return event

    def organizer_required(view):
        """Only the organizer who owns ``event_id`` may call the view."""

        @wraps(view)
        def wrapper(event_id: int, *args, **kwargs):
            if "user_id" not in session:
                return _error(401, "Unauthenticated", "Please log in to continue")
            return view(_owned_event(event_id), *args, **kwargs)

        return wrapper

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, AmbiguousJobSelectionError):
            return _error(
                _STATUS_BY_KIND[e.kind], e.kind.value, e.message, jobs=[j.to_dict() for j in e.jobs]
            )
        if isinstance(e, WorkHoursError):
            return _error(_STATUS_BY_KIND.get(e.kind, 400), e.kind.value, e.message)
        if isinstance(e, EventNotFoundError):
            return _error(404, "EventNotFound", "Event not found")
        if isinstance(e, ScheduleNotFoundError):
            return _error(404, "ScheduleNotFound", "Work schedule not found")
        if isinstance(e, AuthorizationError):
            return _error(403, "Forbidden", str(e))
        if isinstance(e, ValidationError):
            return _error(400, "ValidationError", str(e))
        return _error(400, "DomainError", str(e))

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unexpected error on %s %s", request.method, request.path)
        return _error(500, "InternalError", "Internal error while tracking work hours")

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _qr_token(data: dict) -> str:
        value = data.get("qrToken")
        if isinstance(value, dict):
            # Scanner apps may forward the decoded QR payload as an object.
            value = json.dumps(value)
        if not isinstance(value, str):
            raise ValidationError("qrToken is required")
        return require_non_empty(value, "qrToken")

    def _event_dict(event) -> dict:
        return {
            "eventId": event.event_id,
            "title": event.title,
            "dateStart": isoformat_ms(event.start_time),
            "dateEnd": isoformat_ms(event.end_time),
        }

    @app.route("/work-schedule", methods=["POST"], endpoint="work_schedule_create")
    @login_required
    def work_schedule_create():
        data = _json_body()
        event = _owned_event(require_positive_int(data.get("eventId"), "eventId"))

        schedule, token, notified = svc.create_schedule(event=event, weekly_data=data.get("weeklySchedule"))
        wire = token.to_wire()
        return (
            jsonify(
                {
                    "message": "Work schedule created successfully",
                    "schedule": schedule.to_dict(),
                    "qrCode": render_qr_data_url(wire),
                    "qrToken": wire,
                    "expiryTime": isoformat_ms(token.expires_at),
                    "workersNotified": notified,
                }
            ),
            201,
        )

    @app.route("/work-schedule/<int:event_id>", methods=["GET"], endpoint="work_schedule_get")
    @login_required
    def work_schedule_get(event_id: int):
        schedule = svc.schedule_for(event_id=event_id, user_id=int(session["user_id"]))
        body = schedule.to_dict()
        body["event"] = _event_dict(svc.get_event(event_id))
        return jsonify({"schedule": body})

    @app.route("/work-schedule/<int:event_id>", methods=["PUT"], endpoint="work_schedule_update")
    @organizer_required
    def work_schedule_update(event):
        data = _json_body()
        schedule = svc.update_schedule(event=event, weekly_data=data.get("weeklySchedule"))
        return jsonify({"message": "Work schedule updated successfully", "schedule": schedule.to_dict()})

    @app.route("/work-schedule/<int:event_id>/qr", methods=["GET"], endpoint="work_qr")
    @login_required
    def work_qr(event_id: int):
        view = svc.qr_for(event_id=event_id, user_id=int(session["user_id"]))
        wire = view.token.to_wire()
        return jsonify(
            {
                "qrCode": render_qr_data_url(wire),
                "qrToken": wire,
                "expiryTime": isoformat_ms(view.token.expires_at),
                "event": _event_dict(view.event),
                "jobs": [j.to_dict() for j in view.jobs],
            }
        )

    @app.route("/work-schedule/<int:event_id>/qr.png", methods=["GET"], endpoint="work_qr_image")
    @login_required
    def work_qr_image(event_id: int):
        view = svc.qr_for(event_id=event_id, user_id=int(session["user_id"]))
        buf = io.BytesIO(render_qr_png(view.token.to_wire()))
        return send_file(buf, mimetype="image/png")

    @app.route("/work-schedule/<int:event_id>/send-qr", methods=["POST"], endpoint="work_send_qr")
    @organizer_required
    def work_send_qr(event):
        token, notified = svc.send_qr(event=event)
        return jsonify(
            {
                "message": "Work QR code sent successfully",
                "workersNotified": notified,
                "expiryTime": isoformat_ms(token.expires_at),
                "qrCode": render_qr_data_url(token.to_wire()),
            }
        )

    @app.route("/work-schedule/check-in", methods=["POST"], endpoint="work_check_in")
    @login_required
    def work_check_in():
        now = now_utc()
        data = _json_body()
        qr_token = _qr_token(data)
        job_id = optional_positive_int(data.get("jobId"), "jobId")

        work_session = svc.check_in(qr_token=qr_token, worker_id=int(session["user_id"]), job_id=job_id, now=now)
        return jsonify(
            {
                "success": True,
                "message": "Checked in successfully",
                "session": work_session.to_dict(),
                "checkInTime": isoformat_ms(work_session.check_in_time),
            }
        )

    @app.route("/work-schedule/check-out", methods=["POST"], endpoint="work_check_out")
    @login_required
    def work_check_out():
        now = now_utc()
        data = _json_body()
        qr_token = _qr_token(data)
        job_id = optional_positive_int(data.get("jobId"), "jobId")

        work_session = svc.check_out(qr_token=qr_token, worker_id=int(session["user_id"]), job_id=job_id, now=now)
        body = work_session.to_dict()
        return jsonify(
            {
                "success": True,
                "message": "Checked out successfully",
                "session": body,
                "totalHours": body["totalHours"],
                "earnings": body["earnings"],
            }
        )

    @app.route("/work-schedule/<int:event_id>/sessions", methods=["GET"], endpoint="work_sessions")
    @login_required
    def work_sessions(event_id: int):
        summary = svc.worker_sessions(event_id=event_id, worker_id=int(session["user_id"]))
        return jsonify({"sessions": [s.to_dict() for s in summary.sessions], "summary": summary.totals.to_dict()})

    @app.route("/work-schedule/me/active", methods=["GET"], endpoint="work_active_sessions")
    @login_required
    def work_active_sessions():
        rows = svc.active_sessions(worker_id=int(session["user_id"]))
        return jsonify({"sessions": [s.to_dict() for s in rows]})

    @app.route("/work-schedule/<int:event_id>/summary", methods=["GET"], endpoint="work_summary")
    @organizer_required
    def work_summary(event):
        return jsonify(svc.event_summary(event=event).to_dict())

    @app.route("/work-schedule/<int:event_id>/summary.csv", methods=["GET"], endpoint="work_summary_csv")
    @organizer_required
    def work_summary_csv(event):
        rows = svc.export_rows(svc.event_summary(event=event))

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=[
                "event_id",
                "worker_id",
                "job_id",
                "session_id",
                "status",
                "check_in",
                "check_out",
                "total_hours",
                "earnings",
            ],
        )
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        filename = f"work_hours_event_{event.event_id}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
