"""
Access log for API requests.

Every request gets an ``X-Request-ID`` (taken from the client or generated)
which is echoed on the response and bound to every loguru record emitted
while the request is handled.
"""

import json
import time
import uuid
from typing import Any, Callable, Iterable, Optional

from fastapi import FastAPI, Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware


REQUEST_ID_HEADER = "X-Request-ID"
REDACTED = "[REDACTED]"

SECRET_HEADERS = frozenset({"authorization", "cookie"})
SECRET_FIELDS = frozenset({"password", "access_token"})

# Still tagged with a request id, just not logged
QUIET_PATHS = frozenset({"/health"})

MAX_LOGGED_BODY = 10_000


def redact(data: Any, fields: Iterable[str] = SECRET_FIELDS) -> Any:
    """Replace the values of credential fields, at any depth, with ``[REDACTED]``."""
    fields = frozenset(fields)
    if isinstance(data, dict):
        return {
            key: REDACTED if key.lower() in fields else redact(value, fields)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [redact(item, fields) for item in data]
    return data


def redact_headers(headers) -> dict:
    return {
        key: REDACTED if key.lower() in SECRET_HEADERS else value
        for key, value in headers.items()
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per request: method, path, status and duration.

    4xx answers log at WARNING and 5xx at ERROR. With ``log_body`` set, the
    redacted headers and JSON body are logged at DEBUG before the request
    runs. Multipart bodies (image uploads) are never read here.
    """

    def __init__(self, app: FastAPI, log_body: bool = False):
        super().__init__(app)
        self.log_body = log_body

    async def _json_body(self, request: Request) -> Optional[Any]:
        if "application/json" not in request.headers.get("content-type", ""):
            return None

        body = await request.body()
        if len(body) > MAX_LOGGED_BODY:
            return f"<{len(body)} bytes>"
        try:
            return redact(json.loads(body))
        except ValueError:
            return "<invalid json>"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        path = request.url.path

        with logger.contextualize(request_id=request_id):
            if path in QUIET_PATHS:
                response = await call_next(request)
                response.headers[REQUEST_ID_HEADER] = request_id
                return response

            if self.log_body:
                logger.debug(
                    f"{request.method} {path} headers={redact_headers(request.headers)} "
                    f"body={await self._json_body(request)}"
                )

            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)

            if response.status_code >= 500:
                level = "ERROR"
            elif response.status_code >= 400:
                level = "WARNING"
            else:
                level = "INFO"
            logger.log(
                level,
                f"{request.method} {path} -> {response.status_code} ({duration_ms}ms)",
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_logging(app: FastAPI, log_body: bool = False) -> None:
    """Install the access log middleware."""
    app.add_middleware(RequestLoggingMiddleware, log_body=log_body)
