"""
Request pipeline.

WHAT: Execute one logical API operation against the versioned REST prefix
WHY: Every resource call gets the same timeout, validation, error mapping and retry
HOW: httpx.AsyncClient per client; each attempt validates against a ResponseContract,
     failures go through map_error, attempts are governed by with_retry
"""

from typing import Any, AsyncIterator, Dict, Optional, TypeVar

import httpx

from .error_mapper import map_error
from .retry import with_retry
from ..core.config import ClientConfig
from ..models.contracts import ResponseContract
from ..utils.exceptions import DomainError
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class HttpClient:
    """Shared transport for all resource modules of one client."""

    def __init__(self, config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Create the pooled httpx client.

        Args:
            config: Client configuration (base URL, credential, timeout, retries)
            transport: Optional httpx transport (tests, custom proxies)
        """
        self.config = config
        self.max_retries = config.retries

        event_hooks = {}
        if config.debug:
            event_hooks = {"request": [_log_request], "response": [_log_response]}

        self.client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Accept": "application/json",
            },
            event_hooks=event_hooks,
            transport=transport,
        )
        logger.debug(f"HTTP client ready (base: {config.api_base_url}, retries: {self.max_retries})")

    def retries_for(self, method: str, idempotent: Optional[bool]) -> int:
        """Read-only calls retry; mutations run once unless marked idempotent."""
        if idempotent is None:
            idempotent = method.upper() in IDEMPOTENT_METHODS
        return self.max_retries if idempotent else 0

    async def request(
        self,
        method: str,
        path: str,
        contract: ResponseContract[T],
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Any = None,
        idempotent: Optional[bool] = None,
    ) -> T:
        """
        Perform one operation and return the contract's canonical value.

        Args:
            method: HTTP method
            path: Path relative to /api/v1
            contract: Response contract the payload must satisfy
            json: JSON body
            params: Query parameters
            data: Form fields (multipart uploads)
            files: Files for multipart uploads
            idempotent: Override retry eligibility (default: GET-like methods only)

        Returns:
            Validated, canonicalized result

        Raises:
            DomainError: For any transport, HTTP or validation failure
        """
        method = method.upper()
        description = f"{method} {path}"

        async def attempt() -> T:
            try:
                response = await self.client.request(
                    method,
                    path,
                    json=json,
                    params=params,
                    data=data,
                    files=files,
                )
                response.raise_for_status()
                return contract.parse(decode_body(response))
            except DomainError:
                raise
            except Exception as e:
                raise map_error(e) from e

        return await with_retry(
            attempt,
            self.retries_for(method, idempotent),
            min_delay=self.config.retry_min_delay,
            max_delay=self.config.retry_max_delay,
            description=description,
        )

    async def stream_lines(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> AsyncIterator[str]:
        """
        Open a streaming request and yield its body line by line.

        Raises:
            DomainError: Mapped failure when opening or reading the stream
        """
        try:
            async with self.client.stream(
                method.upper(),
                path,
                params=params,
                json=json,
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.is_error:
                    await response.aread()
                response.raise_for_status()
                async for line in response.aiter_lines():
                    yield line
        except DomainError:
            raise
        except Exception as e:
            raise map_error(e) from e

    async def aclose(self) -> None:
        """Close pooled connections."""
        await self.client.aclose()


def decode_body(response: httpx.Response) -> Any:
    """JSON payload of `response`; None when empty, text when not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


async def _log_request(request: httpx.Request) -> None:
    logger.debug(f"→ {request.method} {request.url}")


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(f"← {response.status_code} {request.method} {request.url}")
