"""Request tracing middleware.

Every response carries an ``X-Request-ID`` (the caller's, when it sent a
usable one). Each request is logged once with its timing and an
anonymized client address.
"""

import hashlib
import logging
import re
import time
import uuid

from fastapi import Request, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9\-]{8,64}$")

# Polling endpoints hit every few seconds by the dashboard; logged at DEBUG
_QUIET_PATHS = {"/api/health", "/api/timeline", "/api/events"}


def _client_fingerprint(request: Request) -> str:
    host = request.client.host if request.client else None
    if not host:
        return "unknown"
    return hashlib.sha256(host.encode()).hexdigest()[:12]


def _request_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(supplied):
        return supplied
    return uuid.uuid4().hex


async def request_logging_middleware(request: Request, call_next):
    """Tag the response with a request id and log method, path, status and latency."""
    request_id = _request_id(request)
    started = time.perf_counter()

    response: Response = await call_next(request)

    response.headers[REQUEST_ID_HEADER] = request_id
    duration_ms = (time.perf_counter() - started) * 1000
    level = logging.DEBUG if request.url.path in _QUIET_PATHS else logging.INFO
    logger.log(
        level,
        "%s %s -> %d in %.1fms (request_id=%s client=%s)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        request_id,
        _client_fingerprint(request),
    )
    return response
