"""
Failure classification.

WHAT: Map any raised failure to exactly one DomainError
WHY: No raw transport exception may cross the pipeline boundary
HOW: Inspect httpx status errors first, then transport errors, then message text
"""

import asyncio
import re
from typing import Any, Optional

import httpx
from websockets.exceptions import WebSocketException

from ..utils.exceptions import DomainError

_NOT_FOUND_RE = re.compile(r"not found", re.IGNORECASE)
_TIMEOUT_RE = re.compile(r"timeout|timed out", re.IGNORECASE)
_NETWORK_RE = re.compile(r"network|connection", re.IGNORECASE)


def map_error(err: BaseException) -> DomainError:
    """
    Classify a failure into the error taxonomy.

    Args:
        err: Any exception raised while performing a request

    Returns:
        The corresponding DomainError (the same object if already one)
    """
    if isinstance(err, DomainError):
        return err

    if isinstance(err, httpx.HTTPStatusError):
        return _map_status_error(err)

    # TimeoutException is a TransportError and TimeoutError an OSError, check them first
    if isinstance(err, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return DomainError.timeout(str(err) or "Request timed out")

    if isinstance(err, (httpx.TransportError, WebSocketException, OSError)):
        return DomainError.network_failure(str(err) or type(err).__name__)

    message = str(err)
    if _TIMEOUT_RE.search(message):
        return DomainError.timeout(message)
    if _NETWORK_RE.search(message):
        return DomainError.network_failure(message)

    return DomainError.client_unexpected(message or type(err).__name__,
                                         details={"exception": type(err).__name__})


def _map_status_error(err: httpx.HTTPStatusError) -> DomainError:
    response = err.response
    status = response.status_code
    data = _response_body(response)
    server_message = _server_message(data)

    if status in (401, 403):
        return DomainError.auth_failure(server_message or str(err), status=status, details=data)

    if status == 404 or (server_message and _NOT_FOUND_RE.search(server_message)):
        resource = guess_resource(data, server_message)
        return DomainError.resource_not_found(resource, status=status, details=data)

    if status == 429:
        return DomainError.rate_limited(
            server_message or "Rate limit exceeded",
            retry_after=parse_retry_after(response.headers.get("retry-after")),
            details=data,
        )

    if status in (502, 504):
        return DomainError.service_unavailable(server_message or "Embedder service unavailable",
                                               status=status, details=data)

    if status == 400:
        return DomainError.validation_failure(server_message or "Bad Request", details=data)

    return DomainError.unknown_server_error(
        server_message or str(err) or "Unknown server error",
        status,
        details={"responseData": data},
    )


def _response_body(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        text = response.text
        return {"error": text} if text else {}
    return data if isinstance(data, dict) else {"data": data}


def _server_message(data: dict) -> Optional[str]:
    for key in ("error", "message"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def guess_resource(data: dict, message: Optional[str]) -> str:
    """
    Best-effort guess of which resource was missing.

    Prefers a structured `resource` field from the server, then falls back
    to keyword matching on the message text.
    """
    structured = data.get("resource")
    if isinstance(structured, str) and structured:
        return structured

    lower = (message or "").lower()
    if "workspace" in lower:
        return "workspace"
    if "document" in lower:
        return "document"
    if "agent" in lower:
        return "agent"
    return "resource"


def parse_retry_after(value: Any) -> Optional[float]:
    """Parse a Retry-After header given in seconds; dates are ignored."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None
