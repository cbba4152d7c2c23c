"""Helpers shared by the Flask controllers."""
from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AnalysisError,
    AuthenticationError,
    AuthorizationError,
    CameraError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def install_actor_loader(app: Flask, auth_service) -> None:
    """Resolve the session username into a fresh User on every request."""

    @app.before_request
    def _load_actor():
        username = session.get("username")
        g.actor = auth_service.load_actor(username) if username else None
        if username and g.actor is None:
            # Account was deleted while logged in.
            session.clear()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if g.get("actor") is None:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = g.get("actor")
        if actor is None:
            return json_error("Please log in to continue", 401)
        if not actor.is_admin:
            return json_error("Access denied. Admin privileges required.", 403)
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AuthenticationError)
    def _authentication(e):
        return json_error(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e):
        return json_error(str(e), 403)

    @app.errorhandler(ValidationError)
    def _validation(e):
        return json_error(str(e), 400)

    @app.errorhandler(CameraError)
    def _camera(e):
        return json_error(f"Error accessing camera: {e}", 503)

    @app.errorhandler(AnalysisError)
    def _analysis(e):
        return json_error(str(e), 502)

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500)
