"""Centralized JSON error handling for the API.

Every error leaves the application in the same envelope::

    {"success": false, "resource": {"message": "...", "request_id": "..."}}

Validation failures add an ``errors`` mapping inside ``resource``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from myroutine.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def _as_envelope(*, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Build the failure envelope returned to clients.

    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details merged into ``resource``.
    :returns: Envelope dictionary.
    :rtype: dict
    """
    resource: dict[str, Any] = {"message": message}
    if details:
        resource.update(details)
    resource["request_id"] = ensure_request_id()
    return {"success": False, "resource": resource}


def _envelope_response(envelope: dict[str, Any], status: int) -> tuple[Response, int]:
    return jsonify(envelope), status


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier used in logs. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload (e.g., validation messages) included in the
        response ``resource``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_envelope(self) -> dict[str, Any]:
        """
        Serialize error metadata into the failure envelope.

        :returns: Envelope dictionary.
        :rtype: dict
        """
        return _as_envelope(message=self.message, details=self.details or None)


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409 for uniqueness/constraint collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401 for every session or credential rejection."""

    def __init__(self, message: str = "Invalid authorization") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class BadGateway(APIError):
    """502 when an outbound collaborator (image store, email) fails."""

    def __init__(self, message: str = "External service unavailable") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_GATEWAY, code="bad_gateway")


class InternalError(APIError):
    """500 for persistence failures surfaced by the service layer."""

    def __init__(
        self,
        message: str = "Something went wrong. Try again later",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            details=details,
        )


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees the failure envelope for all handled errors.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s",
            err.code,
            err.status_code,
            err.message,
            exc_info=err.status_code >= 500,
        )
        return _envelope_response(err.to_envelope(), err.status_code)

    from myroutine.services._shared.base import BaseService
    from myroutine.services._shared.errors import ServiceError

    translator = BaseService()

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = translator.translate_exceptions(err)
        if not isinstance(translated, APIError):  # pragma: no cover - exhaustive mapping
            raise err
        return handle_api_error(translated)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s detail=%s", status, message)
        return _envelope_response(_as_envelope(message=message), status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        envelope = _as_envelope(
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("ValidationError: fields=%s", sorted(_error_fields(err.messages)))
        return _envelope_response(envelope, HTTPStatus.BAD_REQUEST)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("IntegrityError", exc_info=True)
        return _envelope_response(_as_envelope(message="Resource conflict"), HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError", exc_info=True)
        return _envelope_response(
            _as_envelope(message="Service temporarily unavailable"),
            HTTPStatus.SERVICE_UNAVAILABLE,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception", exc_info=True)
        return _envelope_response(
            _as_envelope(message="Unexpected error"),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )


def _error_fields(messages: Any) -> list[str]:
    if isinstance(messages, dict):
        return [str(key) for key in messages]
    return []
