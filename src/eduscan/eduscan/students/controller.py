from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.web import login_required
from ..container import Container
from .model import Student


def _student_json(s: Student, *, with_photo: bool = True) -> dict:
    out = {
        "id": s.id,
        "name": s.name,
        "roll_number": s.roll_number,
        "class_section": s.class_section,
        "registered_at": s.registered_at,
    }
    if with_photo:
        out["photo_url"] = s.photo_url
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="students")
    @login_required
    def students():
        with_photo = request.args.get("photos", "1") != "0"
        groups = container.student_service.list_grouped_by_class(g.actor)
        return jsonify(
            {
                "success": True,
                "classes": {
                    cls: [_student_json(s, with_photo=with_photo) for s in items] for cls, items in groups.items()
                },
            }
        )

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @login_required
    def add_student():
        data = request.get_json(silent=True) or {}
        student = container.student_service.register(
            g.actor,
            name=data.get("name", ""),
            roll_number=data.get("roll_number", ""),
            class_section=data.get("class_section"),
            photo_url=data.get("photo_url", ""),
        )
        return jsonify({"success": True, "student": _student_json(student, with_photo=False)}), 201

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="edit_student")
    @login_required
    def edit_student(student_id: str):
        data = request.get_json(silent=True) or {}
        student = container.student_service.edit(
            g.actor,
            student_id,
            name=data.get("name", ""),
            roll_number=data.get("roll_number", ""),
            class_section=data.get("class_section"),
            photo_url=data.get("photo_url", ""),
        )
        return jsonify({"success": True, "student": _student_json(student, with_photo=False)})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: str):
        container.student_service.delete(g.actor, student_id)
        return jsonify({"success": True})
