from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import to_iso
from ..common.web import admin_required, current_role, guard_required
from ..container import Container
from .model import Guard


def guard_to_json(g: Guard) -> dict:
    return {
        "id": g.guard_id,
        "name": g.name,
        "username": g.username,
        "phone": g.phone,
        "email": g.email,
        "active": g.active,
        "created_at": to_iso(g.created_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = user.user_id
        session["username"] = user.username
        session["name"] = user.name
        session["role"] = user.role.value
        return jsonify({"success": True, "user": {"id": user.user_id, "name": user.name, "role": user.role.value}})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/account/password", methods=["POST"], endpoint="change_password")
    @guard_required
    def change_password():
        data = request.get_json(silent=True) or request.form
        container.auth_service.change_password(
            guard_id=session["user_id"],
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
            confirm_password=data.get("confirm_password", ""),
        )
        return jsonify({"success": True})

    @app.route("/admin/guards", methods=["GET"], endpoint="admin_guards")
    @admin_required
    def admin_guards():
        return jsonify({"success": True, "guards": [guard_to_json(g) for g in container.guard_service.list_guards()]})

    @app.route("/admin/guards", methods=["POST"], endpoint="admin_guards_register")
    @admin_required
    def admin_guards_register():
        data = request.get_json(silent=True) or request.form
        registered = container.guard_service.register(
            current_role=current_role(),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "guard": guard_to_json(registered.guard),
                    "credentials": {"username": registered.guard.username, "password": registered.password},
                }
            ),
            201,
        )

    @app.route("/admin/guards/<guard_id>/active", methods=["POST"], endpoint="admin_guards_active")
    @admin_required
    def admin_guards_active(guard_id: str):
        data = request.get_json(silent=True) or {}
        guard = container.guard_service.set_active(
            current_role=current_role(),
            guard_id=guard_id,
            active=bool(data.get("active", True)),
        )
        return jsonify({"success": True, "guard": guard_to_json(guard)})

    @app.route("/admin/guards/<guard_id>/delete", methods=["POST"], endpoint="admin_guards_delete")
    @admin_required
    def admin_guards_delete(guard_id: str):
        container.guard_service.delete_guard(current_role=current_role(), guard_id=guard_id)
        return jsonify({"success": True})
