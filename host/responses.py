"""Response classes and error payloads shared by routes and middleware."""

import json
from typing import Optional

from fastapi import status
from fastapi.responses import Response

from common.constants import JSON_CONTENT_TYPE
from host.exceptions import (
    AuthenticationRequiredError,
    EntryConflictError,
    EntryExistsError,
    EntryNotFoundError,
    IsADirectoryConflictError,
    PathOutsideRootError,
    ReadOnlyHostError,
    RootUnavailableError,
)


class UTF8JSONResponse(Response):
    """JSON response with the content type clients of the share expect."""
    media_type = JSON_CONTENT_TYPE

    def render(self, content) -> bytes:
        return json.dumps(content, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


# Most specific classes first.
ERROR_STATUS = [
    (PathOutsideRootError, status.HTTP_400_BAD_REQUEST, "INVALID_PATH"),
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED"),
    (ReadOnlyHostError, status.HTTP_403_FORBIDDEN, "READ_ONLY"),
    (EntryNotFoundError, status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    (EntryExistsError, status.HTTP_409_CONFLICT, "ALREADY_EXISTS"),
    (IsADirectoryConflictError, status.HTTP_409_CONFLICT, "IS_A_DIRECTORY"),
    (EntryConflictError, status.HTTP_409_CONFLICT, "CONFLICT"),
    (RootUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "ROOT_UNAVAILABLE"),
]

INTERNAL_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")


def error_status(exc: Exception) -> tuple:
    """
    Map an exception to its HTTP status and error code.

    Returns:
        Tuple of (status_code, code); unknown errors map to 500
    """
    for exc_type, status_code, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code, code
    return INTERNAL_ERROR


def error_response(exc: Exception, request_id: Optional[str] = None) -> UTF8JSONResponse:
    """
    Build the JSON error response for an exception.

    Unknown errors get a generic detail so no filesystem location leaks.
    """
    status_code, code = error_status(exc)
    detail = str(exc) if (status_code, code) != INTERNAL_ERROR else "Internal server error"

    headers = {}
    if isinstance(exc, AuthenticationRequiredError):
        headers["WWW-Authenticate"] = f"Basic realm={exc.realm}"
    if request_id:
        headers["X-Request-ID"] = request_id

    return UTF8JSONResponse(
        {"detail": detail, "code": code},
        status_code=status_code,
        headers=headers,
    )
