"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.context import CurrentUser, Identity
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    IntegrityError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (UnauthenticatedError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (IntegrityError, 409),
    (StoreUnavailableError, 503),
)


class FlaskSessionIdentity(Identity):
    """Reads the signed-in user that the auth provider put into the Flask session."""

    def current_user(self) -> Optional[CurrentUser]:
        user_id = session.get("user_id")
        if not user_id:
            return None
        return CurrentUser(id=str(user_id), display_name=str(session.get("name") or ""))


def require_user(identity: Identity) -> CurrentUser:
    user = identity.current_user()
    if user is None:
        raise UnauthenticatedError("Sign in to continue")
    return user


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("body", "must be a JSON object")
    return data


def error_status(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = error_status(e)
        if status >= 500:
            logger.error("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
        return (
            jsonify(
                {
                    "success": False,
                    "error": type(e).__name__,
                    "message": str(e),
                    "field": getattr(e, "field", None),
                }
            ),
            status,
        )
