from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import to_iso
from ..common.web import admin_required, current_role, guard_required, login_required, month_args
from ..container import Container
from ..core.constants import SHIFT_TIMES
from .model import Absence


def absence_to_json(a: Absence) -> dict:
    return {
        "id": a.absence_id,
        "schedule_id": a.schedule_id,
        "guard_id": a.guard_id,
        "guard_name": a.guard_name,
        "month": a.month,
        "year": a.year,
        "date_key": a.date_key,
        "shift": a.shift.value,
        "time": SHIFT_TIMES[a.shift],
        "reason": a.reason,
        "reported_at": to_iso(a.reported_at),
        "reported_by": a.reported_by,
        "coverage_status": a.coverage_status.value,
        "covered_by": a.covered_by,
        "covered_by_name": a.covered_by_name,
        "covered_at": to_iso(a.covered_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/absences", methods=["POST"], endpoint="report_absence")
    @login_required
    def report_absence():
        data = request.get_json(silent=True) or request.form
        absence = container.absence_service.report_absence(
            current_role=current_role(),
            reporter_id=session["user_id"],
            schedule_id=data.get("schedule_id", ""),
            date_key=data.get("date_key", ""),
            shift=data.get("shift", ""),
            reason=data.get("reason", ""),
        )
        return jsonify({"success": True, "absence": absence_to_json(absence)}), 201

    @app.route("/coverage", methods=["GET"], endpoint="coverage_requests")
    @guard_required
    def coverage_requests():
        open_requests = container.absence_service.list_open_for(session["user_id"])
        return jsonify({"success": True, "absences": [absence_to_json(a) for a in open_requests]})

    @app.route("/coverage/<absence_id>/accept", methods=["POST"], endpoint="accept_coverage")
    @guard_required
    def accept_coverage(absence_id: str):
        absence = container.absence_service.accept_coverage(absence_id=absence_id, claiming_guard_id=session["user_id"])
        return jsonify({"success": True, "absence": absence_to_json(absence)})

    @app.route("/admin/absences", methods=["GET"], endpoint="admin_absences")
    @admin_required
    def admin_absences():
        month, year = month_args(request.args)
        absences = container.absence_service.list_for_month(month, year)
        return jsonify({"success": True, "absences": [absence_to_json(a) for a in absences]})
