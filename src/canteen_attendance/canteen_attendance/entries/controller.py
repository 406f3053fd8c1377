from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import today_local
from ..common.validators import optional_iso_date, require_iso_date
from ..common.web import current_caller, error_response, fail, login_required, ok
from ..container import Container
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container, *, url_prefix: str = "/api/v1/canteen") -> None:
    @app.route(f"{url_prefix}/entries/today", methods=["GET"], endpoint="canteen_entries_today")
    @login_required
    def canteen_entries_today():
        try:
            date_arg = request.args.get("date")
            day = optional_iso_date(date_arg) or today_local(container.tz)
            result = container.entry_service.list_entries(
                current_caller(),
                day=day,
                location=(request.args.get("location") or "").strip() or None,
            )
            message = "Entries retrieved successfully" if date_arg else "Today's entries retrieved successfully"
            return ok(message, result)
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/entries/<int:entry_id>/approve", methods=["PUT"], endpoint="canteen_entry_approve")
    @login_required
    def canteen_entry_approve(entry_id: int):
        data = request.get_json(silent=True) or {}
        if not data.get("status"):
            return fail("Invalid status. Must be 'PENDING' or 'APPROVED'", 400)
        try:
            entry = container.entry_service.approve(entry_id, data["status"], caller=current_caller())
            return ok("Entry status updated successfully", entry)
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/report", methods=["GET"], endpoint="canteen_report")
    @login_required
    def canteen_report():
        try:
            from_s = request.args.get("fromDate")
            if not from_s:
                return fail("From date is required", 400)
            report = container.report_service.build_site_report(
                current_caller(),
                from_date=require_iso_date(from_s, "fromDate"),
                to_date=optional_iso_date(request.args.get("toDate"), "toDate"),
            )
            return ok("Canteen report retrieved successfully", report.as_dict())
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/report/monthly", methods=["GET"], endpoint="canteen_report_monthly")
    @login_required
    def canteen_report_monthly():
        month_s = (request.args.get("month") or "0").strip()
        if not month_s.lstrip("-").isdigit():
            return fail("Month parameter must be 0 or a positive integer", 400)
        try:
            report = container.report_service.build_monthly_report(current_caller(), months=int(month_s))
            return ok("Monthly report retrieved successfully", report)
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/sync", methods=["POST"], endpoint="canteen_sync")
    @login_required
    def canteen_sync():
        caller = current_caller()
        if not caller.is_elevated:
            return error_response(AuthorizationError("Only administrators can trigger a sync"))
        try:
            data = request.get_json(silent=True) or {}
            day = optional_iso_date(data.get("date")) or today_local(container.tz)
            report = container.sync_service.run(day)
            return ok("Sync completed", report.as_dict())
        except Exception as e:
            return error_response(e)
