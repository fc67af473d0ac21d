from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request, session

from ..common.datetime_utils import now_local
from ..common.validators import require_int
from ..container import Container
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .clock import week_number as current_week_number


def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _flag(value: Optional[str], default: bool = True) -> bool:
    if value is None or value == "":
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _optional_int(value: Any, field_name: str, **bounds) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name, **bounds)


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service
    settings = container.settings_service
    reports = container.report_service

    def is_admin() -> bool:
        return session.get("role") == Role.ADMIN.value

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not is_admin():
                raise AuthorizationError("Admin access required")
            return view(*args, **kwargs)

        return wrapper

    def week_from(value: Any) -> int:
        week = _optional_int(value, "weekNumber", minimum=1)
        if week is None:
            config, _ = settings.get_config()
            week = current_week_number(config, now_local())
        return week

    def check_in(data: Dict[str, Any]):
        record = attendance.check_in(
            student_id=data.get("studentId"),
            student_name=data.get("studentName"),
            student_email=data.get("studentEmail"),
            verification_code=data.get("verificationCode"),
        )
        message = "Checked in" if record.status is AttendanceStatus.PRESENT else "Checked in late"
        return jsonify({"success": True, "message": message, "record": record.to_dict()})

    @app.get("/api/attendance/status", endpoint="attendance_status")
    def attendance_status():
        if request.args.get("action") == "debug-status":
            if not is_admin():
                raise AuthorizationError("Admin access required")
            return jsonify({"success": True, **attendance.status(include_code=True)})
        return jsonify({"success": True, **attendance.status()})

    @app.post("/api/attendance/check-in", endpoint="attendance_check_in")
    def attendance_check_in():
        return check_in(_payload())

    @app.post("/api/attendance", endpoint="attendance_actions")
    def attendance_actions():
        """Admin actions discriminated by `action`; without one the body is a check-in."""

        data = _payload()
        action = data.get("action")
        if not action:
            return check_in(data)
        if not is_admin():
            raise AuthorizationError("Admin access required")

        if action == "toggle-debug":
            debug_mode = settings.set_debug_mode(data.get("enabled"))
            return jsonify({"success": True, "debugMode": debug_mode})

        if action == "update-config":
            config = settings.update_config(data.get("config") or {})
            return jsonify({"success": True, "config": config.to_dict()})

        if action == "generate-code":
            current = settings.generate_code()
            return jsonify(
                {
                    "success": True,
                    "code": current.verification_code,
                    "codeEnabled": current.code_enabled,
                    "codeCreatedAt": current.code_created_at.isoformat() if current.code_created_at else None,
                }
            )

        if action == "toggle-code":
            current = settings.set_code_enabled(data.get("enabled"))
            return jsonify(
                {
                    "success": True,
                    "codeEnabled": current.code_enabled,
                    "code": current.verification_code if current.code_enabled else None,
                }
            )

        if action == "clear-code":
            settings.clear_code()
            return jsonify({"success": True})

        raise ValidationError(f"Unknown action: {action}")

    @app.post("/api/attendance/initialize-session", endpoint="attendance_initialize_session")
    @admin_required
    def attendance_initialize_session():
        data = _payload()
        summary = container.initializer.initialize(
            session_time=str(data.get("sessionTime") or ""),
            week_number=week_from(data.get("weekNumber")),
            session_number=_optional_int(data.get("sessionNumber"), "sessionNumber", minimum=1, maximum=2),
            session_duration=_optional_int(data.get("sessionDuration"), "sessionDuration", minimum=1),
        )
        return jsonify({"success": True, **summary.to_dict()})

    @app.get("/api/attendance/initialize-session", endpoint="attendance_session_stats")
    @admin_required
    def attendance_session_stats():
        stats = reports.session_stats(
            session_time=request.args.get("sessionTime", ""),
            week_number=week_from(request.args.get("weekNumber")),
            session_number=_optional_int(request.args.get("sessionNumber"), "sessionNumber", minimum=1, maximum=2),
        )
        return jsonify({"success": True, **stats})

    @app.post("/api/attendance/mark-absent", endpoint="attendance_mark_absent")
    @admin_required
    def attendance_mark_absent():
        data = _payload()
        summary = container.sweeper.sweep(
            session_time=str(data.get("sessionTime") or ""),
            week_number=week_from(data.get("weekNumber")),
            mark_as=str(data.get("markAs") or "absent"),
            session_number=_optional_int(data.get("sessionNumber"), "sessionNumber", minimum=1, maximum=2),
        )
        return jsonify({"success": True, **summary.to_dict()})

    @app.get("/api/attendance/records", endpoint="attendance_records")
    @admin_required
    def attendance_records():
        week = week_from(request.args.get("weekNumber"))
        include_all = _flag(request.args.get("includeAll"))
        session_time = request.args.get("sessionTime")
        if session_time:
            body = reports.session_records(
                session_time=session_time,
                week_number=week,
                include_all=include_all,
                session_number=_optional_int(request.args.get("sessionNumber"), "sessionNumber", minimum=1, maximum=2),
            )
        else:
            body = reports.week_summary(week_number=week, include_all=include_all)
        return jsonify({"success": True, **body})

    @app.get("/api/attendance/records.csv", endpoint="attendance_records_csv")
    @admin_required
    def attendance_records_csv():
        week = week_from(request.args.get("weekNumber"))
        content = reports.export_csv(week_number=week)
        return Response(
            content.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_week_{week}.csv"},
        )

    @app.post("/api/attendance/record", endpoint="attendance_record_create")
    @admin_required
    def attendance_record_create():
        record = attendance.create_record(_payload())
        return jsonify({"success": True, "record": record.to_dict()}), 201

    @app.patch("/api/attendance/record", endpoint="attendance_record_update")
    @admin_required
    def attendance_record_update():
        data = _payload()
        record_key = data.get("recordId") or data.get("uniqueKey")
        if not record_key:
            raise ValidationError("recordId is required")
        record, created = attendance.set_status(
            str(record_key),
            data.get("status"),
            notes=data.get("notes"),
            student_name=data.get("studentName"),
            student_email=data.get("studentEmail"),
        )
        return jsonify({"success": True, "created": created, "record": record.to_dict()})

    @app.get("/api/admin/diagnostic-attendance", endpoint="attendance_diagnostics")
    @admin_required
    def attendance_diagnostics():
        limit = _optional_int(request.args.get("limit"), "limit", minimum=1, maximum=5000) or 500
        return jsonify({"success": True, **reports.diagnostics(limit=limit)})
