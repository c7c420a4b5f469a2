from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.pagination import Pagination
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_PAGE_SIZE, DEFAULT_RECENT_LIMIT, MAX_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import attendance_to_dict
from .repository import AttendanceFilters

logger = logging.getLogger(__name__)


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _pagination_from_args(args) -> Optional[Pagination]:
    if "page" not in args and "pageSize" not in args:
        return None
    page = require_positive_int(args.get("page", 1), "page")
    page_size = require_positive_int(args.get("pageSize", DEFAULT_PAGE_SIZE), "pageSize")
    return Pagination(page=page, page_size=min(page_size, MAX_PAGE_SIZE))


def _filters_from_args(args) -> AttendanceFilters:
    day = None
    if args.get("date"):
        try:
            day = parse_iso_date(args["date"])
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD") from None

    status = None
    if args.get("status"):
        try:
            status = AttendanceStatus(args["status"])
        except ValueError:
            raise ValidationError("status must be 'success' or 'failed'") from None

    return AttendanceFilters(
        branch_id=args.get("branchId") or None,
        member_id=args.get("memberId") or None,
        date=day,
        status=status,
    )


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    def list_attendance():
        try:
            result = service.get_attendance(_filters_from_args(request.args), _pagination_from_args(request.args))
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Get attendance failed")
            return _error("Failed to fetch attendance records", 500)
        return jsonify({"success": True, "data": result.to_dict(attendance_to_dict)})

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_check_in")
    def check_in():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return _error("Invalid request body", 400)

        try:
            member_id = require_non_empty(body.get("memberId"), "memberId")
            branch_id = require_non_empty(body.get("branchId"), "branchId")
            method = require_non_empty(body.get("method"), "method")
        except ValidationError:
            return _error("memberId, branchId, and method are required", 400)

        device_id = body.get("deviceId") or None
        try:
            result = service.check_in(member_id, branch_id, method, device_id)
        except Exception:
            logger.exception("Check-in failed for member %s", member_id)
            return _error("Failed to record attendance", 500)

        if not result.success:
            return jsonify(result.to_dict()), 403
        return jsonify(result.to_dict()), 201

    @app.route("/api/branches/<branch_id>/attendance/live", methods=["GET"], endpoint="api_attendance_live")
    def live_count(branch_id: str):
        try:
            count = service.get_live_count(branch_id)
        except Exception:
            logger.exception("Live count failed for branch %s", branch_id)
            return _error("Failed to count live check-ins", 500)
        return jsonify({"success": True, "data": {"branchId": branch_id, "count": count}})

    @app.route("/api/branches/<branch_id>/attendance/recent", methods=["GET"], endpoint="api_attendance_recent")
    def recent(branch_id: str):
        try:
            limit = require_positive_int(request.args.get("limit", DEFAULT_RECENT_LIMIT), "limit")
            records = service.get_recent_check_ins(branch_id, min(limit, MAX_PAGE_SIZE))
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Recent check-ins failed for branch %s", branch_id)
            return _error("Failed to fetch recent check-ins", 500)
        return jsonify({"success": True, "data": [attendance_to_dict(r) for r in records]})
