from __future__ import annotations

from typing import Optional

from flask import Flask, g, jsonify

from ..common.web import login_required
from ..container import Container
from .orchestrator import ScanReport


def _report_json(report: Optional[ScanReport]) -> Optional[dict]:
    if report is None:
        return None
    out = {"outcome": report.outcome.value, "message": report.message, "verdict": None, "event": None}
    if report.verdict is not None:
        v = report.verdict
        out["verdict"] = {
            "match_id": v.match_id,
            "confidence": v.confidence,
            "is_real_person": v.is_real_person,
            "emotion": v.emotion or "N/A",
            "description": v.description,
        }
    if report.event is not None:
        e = report.event
        out["event"] = {
            "id": e.id,
            "student_id": e.student_id,
            "student_name": e.student_name,
            "date": e.date,
            "timestamp": e.timestamp,
            "status": e.status.value,
            "confidence": e.confidence,
        }
    return out


def register(app: Flask, container: Container) -> None:
    scanner = container.scanner

    def _status_json() -> dict:
        status = scanner.status(g.actor)
        return {
            "success": True,
            "state": status.state.value,
            "auto_mode": status.auto_mode,
            "auto_owner": status.auto_owner,
            "last_report": _report_json(status.last_report),
            "logs": [{"time": entry.time, "message": entry.message} for entry in status.logs],
        }

    @app.route("/api/scanner", methods=["GET"], endpoint="scanner_status")
    @login_required
    def scanner_status():
        return jsonify(_status_json())

    @app.route("/api/scanner/start", methods=["POST"], endpoint="scanner_start")
    @login_required
    def scanner_start():
        scanner.start()
        return jsonify(_status_json())

    @app.route("/api/scanner/stop", methods=["POST"], endpoint="scanner_stop")
    @login_required
    def scanner_stop():
        scanner.stop(g.actor)
        return jsonify(_status_json())

    @app.route("/api/scanner/auto", methods=["POST"], endpoint="scanner_auto")
    @login_required
    def scanner_auto():
        scanner.toggle_auto(g.actor)
        return jsonify(_status_json())

    @app.route("/api/scanner/scan", methods=["POST"], endpoint="scanner_scan")
    @login_required
    def scanner_scan():
        report = scanner.scan(g.actor)
        return jsonify({"success": True, "report": _report_json(report), "state": scanner.state.value})
