from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import to_iso
from ..common.web import admin_required, current_role, guard_required, month_args
from ..container import Container
from ..core.enums import ShiftId
from ..core.exceptions import ConflictError
from .model import Schedule


def schedule_to_json(s: Schedule) -> dict:
    return {
        "id": s.schedule_id,
        "guard_id": s.guard_id,
        "guard_name": s.guard_name,
        "month": s.month,
        "year": s.year,
        "shifts": {k: v.value for k, v in sorted(s.shifts.items())},
        "status": s.status.value,
        "submitted_at": to_iso(s.submitted_at),
        "approved_at": to_iso(s.approved_at),
        "approved_by": s.approved_by,
    }


def register(app: Flask, container: Container) -> None:
    def _load_selection(month: int, year: int, *, reset: bool) -> dict[str, ShiftId]:
        # The in-progress selection lives in the session, one month at a time.
        stored = session.get("selection")
        if not reset and stored and stored.get("month") == month and stored.get("year") == year:
            return {k: ShiftId(v) for k, v in stored["shifts"].items()}

        existing = container.schedule_service.find_for_guard(guard_id=session["user_id"], month=month, year=year)
        selection = dict(existing.shifts) if existing else {}
        _store_selection(month, year, selection)
        return selection

    def _store_selection(month: int, year: int, selection: dict[str, ShiftId]) -> None:
        session["selection"] = {
            "month": month,
            "year": year,
            "shifts": {k: ShiftId(v).value for k, v in selection.items()},
        }

    def _grid(month: int, year: int, selection: dict[str, ShiftId]) -> dict:
        return {
            "success": True,
            "month": month,
            "year": year,
            "selection": {k: v.value for k, v in sorted(selection.items())},
            "days": container.slot_service.availability_grid(
                guard_id=session["user_id"], month=month, year=year, selection=selection
            ),
        }

    @app.route("/availability", methods=["GET"], endpoint="availability")
    @guard_required
    def availability():
        month, year = month_args(request.args)
        reset = request.args.get("reset", "1") not in {"0", "false"}
        return jsonify(_grid(month, year, _load_selection(month, year, reset=reset)))

    @app.route("/availability/toggle", methods=["POST"], endpoint="availability_toggle")
    @guard_required
    def availability_toggle():
        data = request.get_json(silent=True) or {}
        month, year = month_args(data)
        date_key = data.get("date_key", "")
        shift = data.get("shift", "")

        selection = _load_selection(month, year, reset=False)
        already_selected = selection.get(date_key) == shift
        if not already_selected and not container.slot_service.is_selectable(
            guard_id=session["user_id"], date_key=date_key, shift=shift, month=month, year=year
        ):
            raise ConflictError("This shift is already full")

        selection = container.slot_service.toggle_selection(selection, date_key, shift, month=month, year=year)
        _store_selection(month, year, selection)
        return jsonify(_grid(month, year, selection))

    @app.route("/availability/submit", methods=["POST"], endpoint="availability_submit")
    @guard_required
    def availability_submit():
        data = request.get_json(silent=True) or {}
        month, year = month_args(data)
        schedule = container.schedule_service.submit(
            guard_id=session["user_id"],
            guard_name=session.get("name", ""),
            month=month,
            year=year,
            selections=_load_selection(month, year, reset=False),
        )
        return jsonify({"success": True, "schedule": schedule_to_json(schedule)}), 201

    @app.route("/schedules/mine", methods=["GET"], endpoint="my_schedules")
    @guard_required
    def my_schedules():
        schedules = container.schedule_service.list_approved_for_guard(session["user_id"])
        return jsonify({"success": True, "schedules": [schedule_to_json(s) for s in schedules]})

    @app.route("/dashboard", methods=["GET"], endpoint="guard_dashboard")
    @guard_required
    def guard_dashboard():
        today = date.today()
        summary = container.schedule_service.guard_summary(
            guard_id=session["user_id"], month=today.month - 1, year=today.year
        )
        summary["open_coverages"] = container.absence_service.count_open()
        return jsonify({"success": True, "name": session.get("name"), **summary})

    @app.route("/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        return jsonify(
            {
                "success": True,
                "active_guards": container.guard_service.count_active(),
                "pending_schedules": len(container.schedule_service.list_pending()),
                "open_coverages": container.absence_service.count_open(),
            }
        )

    @app.route("/admin/schedules/pending", methods=["GET"], endpoint="admin_schedules_pending")
    @admin_required
    def admin_schedules_pending():
        pending = container.schedule_service.list_pending()
        return jsonify({"success": True, "schedules": [schedule_to_json(s) for s in pending]})

    @app.route("/admin/schedules/<schedule_id>/approve", methods=["POST"], endpoint="admin_schedules_approve")
    @admin_required
    def admin_schedules_approve(schedule_id: str):
        schedule = container.schedule_service.approve(
            current_role=current_role(),
            schedule_id=schedule_id,
            approver_id=session["user_id"],
        )
        return jsonify({"success": True, "schedule": schedule_to_json(schedule)})

    @app.route("/admin/schedules/approve-all", methods=["POST"], endpoint="admin_schedules_approve_all")
    @admin_required
    def admin_schedules_approve_all():
        data = request.get_json(silent=True) or {}
        month, year = month_args(data)
        count = container.schedule_service.approve_all_pending(
            current_role=current_role(),
            month=month,
            year=year,
            approver_id=session["user_id"],
        )
        return jsonify({"success": True, "approved": count})

    @app.route("/admin/schedules/<schedule_id>/reject", methods=["POST"], endpoint="admin_schedules_reject")
    @admin_required
    def admin_schedules_reject(schedule_id: str):
        container.schedule_service.reject(current_role=current_role(), schedule_id=schedule_id)
        return jsonify({"success": True})

    @app.route("/admin/roster", methods=["GET"], endpoint="admin_roster")
    @admin_required
    def admin_roster():
        month, year = month_args(request.args)
        return jsonify(
            {"success": True, "month": month, "year": year, "days": container.slot_service.month_roster(month, year)}
        )
