"""Exception handling for Litestar applications using litestar-signing.

This module renders :class:`~litestar_signing.exceptions.SigningError` and its
subclasses as JSON responses carrying the error's status code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litestar import Response

if TYPE_CHECKING:  # pragma: no cover
    from litestar import Request

    from litestar_signing.exceptions import SigningError

__all__ = ["signing_error_handler", "signing_error_payload"]


def signing_error_payload(exc: SigningError) -> dict[str, Any]:
    """Build the JSON body describing a signing error.

    Args:
        exc: The error to describe.

    Returns:
        A dict with the error code, message and status code, plus the list of
        individual errors for scenario validation failures.
    """
    content: dict[str, Any] = {
        "error": exc.code,
        "message": str(exc),
        "status_code": exc.status_code,
    }
    errors = getattr(exc, "errors", None)
    if errors:
        content["errors"] = list(errors)
    return content


def signing_error_handler(
    _request: Request,
    exc: SigningError,
) -> Response:
    """Exception handler for SigningError.

    Args:
        _request: The Litestar request object.
        exc: The SigningError exception.

    Returns:
        JSON response whose status code is the error category's.
    """
    return Response(
        content=signing_error_payload(exc),
        status_code=exc.status_code,
        media_type="application/json",
    )
