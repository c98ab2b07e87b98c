"""
Response envelope shared by every route and exception handler.

  {"success": true,  "data": ...,                        "requestId": "..."}
  {"success": false, "error": {"code": ..., "message": ...}, "requestId": "..."}
"""

import uuid
from typing import Any

from fastapi import Request
from starlette.responses import JSONResponse


def request_id(request: Request) -> str:
    # Set by the request-id middleware; absent only if a handler runs outside it
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def ok(request: Request, data: Any) -> dict[str, Any]:
    return {"success": True, "data": data, "requestId": request_id(request)}


def error(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message},
            "requestId": request_id(request),
        },
    )
