# incident_hub/core/errors.py
"""
Error kinds surfaced to the UI.

Every kind maps to an HTTP status and a `retry` hint. None of them are
retried server side; the client shows the message with a retry action.
"""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class IncidentHubError(Exception):
    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retry = True

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.kind, "detail": self.detail, "retry": self.retry}
        body.update(self.extra)
        return body


class AuthRequired(IncidentHubError):
    kind = "auth_required"
    status_code = status.HTTP_401_UNAUTHORIZED


class ProfileMissing(IncidentHubError):
    kind = "profile_missing"
    status_code = status.HTTP_404_NOT_FOUND


class ProfileMismatch(IncidentHubError):
    kind = "profile_mismatch"
    status_code = status.HTTP_403_FORBIDDEN


class LocationUnavailable(IncidentHubError):
    kind = "location_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, detail: str, cause: str):
        super().__init__(detail, cause=cause)
        self.cause = cause


class FetchFailed(IncidentHubError):
    kind = "fetch_failed"
    status_code = status.HTTP_502_BAD_GATEWAY


class UploadFailed(IncidentHubError):
    kind = "upload_failed"
    status_code = status.HTTP_502_BAD_GATEWAY


class ValidationFailed(IncidentHubError):
    kind = "validation_failed"
    status_code = 422
    retry = False

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail, field=field)
        self.field = field


class Conflict(IncidentHubError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    retry = False


class NotFound(IncidentHubError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    retry = False


async def incident_hub_error_handler(request: Request, exc: IncidentHubError):
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IncidentHubError, incident_hub_error_handler)


def store_errors(message: str):
    """
    Convert document store failures inside an async service call into
    `FetchFailed` carrying a user facing message.
    """

    def decorator(func):
        @wraps(func)
        async def wrapped(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as exc:
                logger.error("%s: %s", func.__qualname__, exc)
                raise FetchFailed(message) from exc

        return wrapped

    return decorator
