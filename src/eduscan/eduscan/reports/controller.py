from __future__ import annotations

from dataclasses import asdict

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import json_error, login_required
from ..container import Container


def _parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM; defaults to the current month."""
    if not value:
        today = now_local().date()
        return today.year, today.month
    year_s, _, month_s = value.partition("-")
    year, month = int(year_s), int(month_s)
    if not 1 <= month <= 12:
        raise ValueError(value)
    return year, month


def register(app: Flask, container: Container) -> None:
    def _csv_response(data: bytes, filename: str):
        return app.response_class(
            data,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        stats = container.report_service.dashboard(g.actor)
        return jsonify({"success": True, "stats": asdict(stats)})

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="monthly_report")
    @login_required
    def monthly_report():
        try:
            year, month = _parse_month(request.args.get("month", ""))
        except ValueError:
            return json_error("Month must be YYYY-MM", 400)
        rows = container.report_service.monthly_summary(
            g.actor, year=year, month=month, search=request.args.get("search", "")
        )
        return jsonify({"success": True, "month": f"{year:04d}-{month:02d}", "rows": rows})

    @app.route("/api/reports/monthly.csv", methods=["GET"], endpoint="monthly_report_csv")
    @login_required
    def monthly_report_csv():
        try:
            year, month = _parse_month(request.args.get("month", ""))
        except ValueError:
            return json_error("Month must be YYYY-MM", 400)
        data = container.report_service.monthly_summary_csv(
            g.actor, year=year, month=month, search=request.args.get("search", "")
        )
        return _csv_response(data, f"attendance-monthly-{year:04d}-{month:02d}.csv")

    @app.route("/api/reports/daily", methods=["GET"], endpoint="daily_report")
    @login_required
    def daily_report():
        on = request.args.get("date") or None
        if on:
            try:
                parse_iso_date(on)
            except ValueError:
                return json_error("Date must be YYYY-MM-DD", 400)
        return jsonify({"success": True, "rows": container.report_service.daily_log(g.actor, on=on)})

    @app.route("/api/reports/daily.csv", methods=["GET"], endpoint="daily_report_csv")
    @login_required
    def daily_report_csv():
        on = request.args.get("date") or None
        if on:
            try:
                parse_iso_date(on)
            except ValueError:
                return json_error("Date must be YYYY-MM-DD", 400)
        data = container.report_service.daily_log_csv(g.actor, on=on)
        return _csv_response(data, f"attendance-daily-{on or 'all'}.csv")
