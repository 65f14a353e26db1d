"""Response envelope helpers.

Success: ``{"success": true, "data": ..., "message": ...}``
Failure: ``{"success": false, "error": "..."}``
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from labor_portal.services.utils import to_jsonable


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": to_jsonable(data)}
    if message is not None:
        body["message"] = message
    return body


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})
