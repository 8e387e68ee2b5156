"""Standardized API response helpers.

Every endpoint returns the same envelope:
    {"success": true, "data": ..., "message": ...}
    {"success": false, "error": "..."}

Optional keys are omitted rather than sent as null. Use success_response()
in route handlers; error_response() is used by the exception handlers in
app.main.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    **extra: Any,
) -> dict:
    """Wrap a payload in the success envelope.

    Args:
        data: Serializable payload (pydantic models are encoded).
        message: Short human-readable note.
        extra: Additional top-level keys such as ``total`` or ``meta``.

    Returns:
        {"success": True, "data": data, "message": message, **extra}
    """
    body: dict = {"success": True}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if message is not None:
        body["message"] = message
    body.update(jsonable_encoder(extra))
    return body


def error_response(
    status_code: int,
    error: str,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build the failure envelope as a JSONResponse."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )
