from __future__ import annotations

import io
from functools import wraps

import qrcode
from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import now_local
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError


def register(app: Flask, container: Container) -> None:
    settings = container.settings_service

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if session.get("role") != Role.ADMIN.value:
                raise AuthorizationError("Admin access required")
            return view(*args, **kwargs)

        return wrapper

    @app.get("/api/attendance/config", endpoint="attendance_config")
    def attendance_config():
        config, source = settings.get_config()
        return jsonify({"success": True, "config": config.to_dict(), "source": source})

    @app.post("/api/attendance/config", endpoint="attendance_config_update")
    @admin_required
    def attendance_config_update():
        data = request.get_json(silent=True) or {}
        payload = data.get("config") if isinstance(data.get("config"), dict) else data
        config = settings.update_config(payload)
        return jsonify({"success": True, "config": config.to_dict(), "source": "database"})

    @app.get("/api/attendance/code.png", endpoint="attendance_code_qr")
    @admin_required
    def attendance_code_qr():
        """Live verification code as a QR image, for projecting in the room."""

        now = now_local()
        current = settings.load(now=now)
        if not current.has_live_code(now, settings.code_ttl_minutes):
            raise NotFoundError("No live verification code")

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(current.verification_code)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
