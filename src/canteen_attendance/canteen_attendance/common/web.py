from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DeviceError, NotFoundError, StorageError, ValidationError
from ..directory.model import Caller

logger = logging.getLogger(__name__)


def ok(message: str, data: Any = None, status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def error_response(e: Exception):
    """Translate a service exception into the JSON error shape."""
    if isinstance(e, ValidationError):
        return fail(str(e), 400)
    if isinstance(e, AuthorizationError):
        return fail(str(e), 403)
    if isinstance(e, NotFoundError):
        return fail(str(e), 404)
    if isinstance(e, DeviceError):
        return fail(f"Access-control server error: {e}", 502)
    if isinstance(e, StorageError):
        logger.error("Storage failure: %s", e)
        return fail("Database error", 500)
    logger.exception("Unhandled error")
    return fail("Internal server error", 500)


def _caller_from_session() -> Optional[Caller]:
    if "user_id" not in session or not session.get("role"):
        return None
    try:
        role = Role.parse(session.get("role"))
    except ValueError:
        return None
    plant_id = session.get("plant_id")
    return Caller(
        user_id=int(session["user_id"]),
        role=role,
        plant_id=int(plant_id) if plant_id not in (None, "") else None,
    )


def login_required(view):
    """Session is populated by the auth layer: user_id, role, plant_id."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        caller = _caller_from_session()
        if caller is None:
            return fail("Authentication required", 401)
        g.caller = caller
        return view(*args, **kwargs)

    return wrapper


def current_caller() -> Caller:
    return g.caller
