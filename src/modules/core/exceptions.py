"""Cross-module exceptions and the DRF exception handler.

Every API error is rendered with the same envelope::

    {"type": "validation_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class PersistenceUnavailable(Exception):
    """The storage backend is unreachable or timed out.

    Transient: the caller may retry the whole operation.
    """


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def error_response(
    error_type: str,
    errors: List[Dict[str, Any]],
    status_code: int,
) -> Response:
    """Build a response using the standard error envelope."""
    return Response({"type": error_type, "errors": errors}, status=status_code)


def field_errors(messages: Dict[str, List[str]], code: str = "invalid") -> List[Dict[str, Any]]:
    """Flatten a ``{field: [messages]}`` map into envelope entries."""
    return [
        {"code": code, "detail": str(detail), "attr": attr}
        for attr, details in messages.items()
        for detail in details
    ]


def _flatten(data: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        entries: List[Dict[str, Any]] = []
        for key, value in data.items():
            child = key if attr is None else f"{attr}.{key}"
            if key in ("non_field_errors", "detail"):
                child = attr
            entries.extend(_flatten(value, child))
        return entries
    if isinstance(data, list):
        entries = []
        for index, value in enumerate(data):
            if isinstance(value, (dict, list)):
                child = str(index) if attr is None else f"{attr}.{index}"
                entries.extend(_flatten(value, child))
            else:
                entries.extend(_flatten(value, attr))
        return entries
    code = getattr(data, "code", "error")
    return [{"code": code, "detail": str(data), "attr": attr}]


def standard_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Wrap DRF's handler so every error shares the standard envelope."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        error_type = "validation_error"
    elif response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        error_type = "server_error"
    else:
        error_type = "client_error"

    response.data = {"type": error_type, "errors": _flatten(exc.detail)}
    logger.info(
        "api.error",
        status_code=response.status_code,
        error_type=error_type,
    )
    return response


def pydantic_errors(exc: Any) -> List[Dict[str, Any]]:
    """Convert a pydantic ``ValidationError`` into envelope entries.

    ``attr`` is the dotted location of the offending field, e.g.
    ``items.0.quantity``.
    """
    return [
        {
            "code": error.get("type", "invalid"),
            "detail": error.get("msg", ""),
            "attr": ".".join(str(part) for part in error.get("loc", ())) or None,
        }
        for error in exc.errors(include_url=False)
    ]
