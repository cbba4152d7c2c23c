from __future__ import annotations

import logging
from dataclasses import asdict

from flask import Flask, g, jsonify, request, session

from ..common.web import admin_required, login_required
from ..container import Container
from ..users.model import User

logger = logging.getLogger(__name__)


def _user_json(u: User) -> dict:
    return {
        "username": u.username,
        "name": u.name,
        "role": u.role.value,
        "assigned_class": u.assigned_class,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["username"] = s_user.username
        return jsonify({"success": True, "user": {**asdict(s_user), "role": s_user.role.value}})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": _user_json(g.actor)})

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        users = container.user_service.list_users(g.actor)
        return jsonify({"success": True, "users": [_user_json(u) for u in users]})

    @app.route("/api/admin/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        data = request.get_json(silent=True) or {}
        user = container.user_service.create_user(
            g.actor,
            username=data.get("username", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            role=data.get("role", "teacher"),
            assigned_class=data.get("assigned_class"),
        )
        return jsonify({"success": True, "user": _user_json(user)}), 201

    @app.route("/api/admin/users/<username>", methods=["PUT"], endpoint="edit_user")
    @admin_required
    def edit_user(username: str):
        data = request.get_json(silent=True) or {}
        user = container.user_service.edit_user(
            g.actor,
            username,
            password=data.get("password", ""),
            name=data.get("name", ""),
            role=data.get("role", "teacher"),
            assigned_class=data.get("assigned_class"),
        )
        return jsonify({"success": True, "user": _user_json(user)})

    @app.route("/api/admin/users/<username>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(username: str):
        container.user_service.delete_user(g.actor, username)
        return jsonify({"success": True})

    @app.route("/api/school", methods=["GET"], endpoint="school_config")
    def school_config():
        cfg = container.school_service.get_config()
        return jsonify({"success": True, "school": {"name": cfg.name, "logo": cfg.logo}})

    @app.route("/api/admin/school", methods=["PUT"], endpoint="update_school_config")
    @admin_required
    def update_school_config():
        data = request.get_json(silent=True) or {}
        cfg = container.school_service.update_config(g.actor, name=data.get("name", ""), logo=data.get("logo"))
        return jsonify({"success": True, "school": {"name": cfg.name, "logo": cfg.logo}})
