"""cristin_shared.http_utils — API Gateway response helpers with CORS.

Success bodies are ``application/json``; failures are RFC 7807 problem
bodies sent as ``application/problem+json``.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

APPLICATION_JSON = "application/json"
APPLICATION_PROBLEM_JSON = "application/problem+json"


def _cors_headers(allowed_origin: str) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Accept, Content-Type",
    }


def _response(status_code: int, body: Any, allowed_origin: str, content_type: str = APPLICATION_JSON) -> Dict[str, Any]:
    """Build an API Gateway proxy response."""
    return {
        "statusCode": status_code,
        "headers": {**_cors_headers(allowed_origin), "Content-Type": content_type},
        "body": json.dumps(body, ensure_ascii=False),
    }


def _default_code(status_code: int) -> str:
    if status_code == 400:
        return "INVALID_INPUT"
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 502:
        return "UPSTREAM_ERROR"
    return "INTERNAL_ERROR"


def _problem(status_code: int, message: str, allowed_origin: str, code: Optional[str] = None) -> Dict[str, Any]:
    """Build a problem+json error response.

    Args:
        status_code: HTTP status code.
        message: Human-readable reason, shown to the client as ``detail``.
        allowed_origin: Access-Control-Allow-Origin value.
        code: Machine-readable error code; derived from the status if omitted.
    """
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = "Error"
    body = {
        "type": "about:blank",
        "title": title,
        "status": status_code,
        "detail": message,
        "code": code or _default_code(status_code),
    }
    return _response(status_code, body, allowed_origin, content_type=APPLICATION_PROBLEM_JSON)


def _preflight(allowed_origin: str) -> Dict[str, Any]:
    return {"statusCode": 204, "headers": _cors_headers(allowed_origin), "body": ""}


def _path_method(event: Dict[str, Any]) -> Tuple[str, str]:
    """Extract HTTP method and path from an API Gateway v1 or v2 event."""
    rc = event.get("requestContext")
    rc = rc if isinstance(rc, dict) else {}
    http = rc.get("http")
    http = http if isinstance(http, dict) else {}
    method = str(http.get("method") or event.get("httpMethod") or "GET").upper()
    path = str(http.get("path") or event.get("rawPath") or event.get("path") or "/")
    return method, path
