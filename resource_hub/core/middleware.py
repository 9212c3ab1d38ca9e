"""
Request hooks for tracking outgoing resource API calls.

Provides:
- Request ID generation and propagation (X-Request-ID)
- Request timing
- Structured logging context
"""

import time
import uuid
import logging
from typing import Dict, List, Callable

import httpx

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    """Generate a request ID in the same shape the API uses."""
    return f"req_{uuid.uuid4().hex[:16]}"


async def attach_request_context(request: httpx.Request) -> None:
    """Stamp a request ID and start time on every outgoing request."""
    if "X-Request-ID" not in request.headers:
        request.headers["X-Request-ID"] = new_request_id()
    request.extensions["start_time"] = time.perf_counter()


async def log_response(response: httpx.Response) -> None:
    """Log method, path, status and elapsed time for a completed request."""
    request = response.request
    request_id = request.headers.get("X-Request-ID", "-")
    start_time = request.extensions.get("start_time")
    process_time = (time.perf_counter() - start_time) * 1000 if start_time else 0.0

    logger.info(
        f"[{request_id}] {request.method} {request.url.path} "
        f"- {response.status_code} ({process_time:.2f}ms)"
    )


def request_event_hooks() -> Dict[str, List[Callable]]:
    """Event hooks for an httpx.AsyncClient."""
    return {
        "request": [attach_request_context],
        "response": [log_response],
    }


def get_request_id(response: httpx.Response) -> str:
    """Get the request ID a response belongs to."""
    return response.request.headers.get("X-Request-ID") or new_request_id()
