"""
AnythingLLM client facade.

WHAT: Entry point wiring config, request pipeline, resource modules and WebSocket
WHY: Callers hold one object per server/credential pair
HOW: Build an HttpClient from ClientConfig, hand it to each endpoint module
"""

from typing import Any, Optional

import httpx

from .core.config import ClientConfig, Settings, get_settings
from .endpoints import AgentEndpoints, ChatEndpoints, DocumentEndpoints, WorkspaceEndpoints
from .models.contracts import ResponseContract
from .models.schemas import AuthStatus
from .transport.http import HttpClient
from .transport.websocket import WebSocketConnection, websocket_url
from .utils.logger import enable_debug_logging, get_logger, setup_logging

logger = get_logger(__name__)

AUTH_STATUS = ResponseContract(AuthStatus)


class AnythingLLMClient:
    """
    Async client for one AnythingLLM server.

    Usage:
        async with AnythingLLMClient(base_url="http://localhost:3001", api_key="...") as client:
            workspaces = await client.workspaces.list()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **options: Any,
    ):
        """
        Args:
            config: Complete configuration; alternatively pass its fields as keywords
            transport: Optional httpx transport
            **options: ClientConfig fields (base_url, api_key, timeout_ms, retries, debug, ...)
        """
        if config is None:
            config = ClientConfig(**options)
        elif options:
            config = ClientConfig(**{**config.model_dump(), **options})
        self.config = config

        if config.debug:
            enable_debug_logging()

        self.http = HttpClient(config, transport=transport)
        self.workspaces = WorkspaceEndpoints(self.http)
        self.documents = DocumentEndpoints(self.http)
        self.chat = ChatEndpoints(self.http)
        self.agents = AgentEndpoints(self.http)

        logger.info(f"AnythingLLM client initialized (base: {config.base_url}, retries: {config.retries})")

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None, *, configure_logging: bool = False,
                 **overrides: Any) -> "AnythingLLMClient":
        """
        Build a client from ANYTHINGLLM_* environment variables / .env.

        With `configure_logging`, LOG_LEVEL and LOG_FILE are applied to the
        package logger first.
        """
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)
        return cls(settings.to_client_config(), **overrides)

    async def verify_auth(self) -> AuthStatus:
        """
        Check the credential.

        Raises:
            DomainError: AuthFailure (not recoverable) for a rejected key
        """
        return await self.http.request("GET", "/auth", AUTH_STATUS)

    def connect_websocket(self, workspace_slug: str, **options: Any) -> WebSocketConnection:
        """
        Create the event connection for `workspace_slug` (not yet started).

        Call `start()` from a running loop, or use `async with`.
        """
        options.setdefault("max_reconnects", self.config.ws_max_reconnects)
        options.setdefault("base_delay", self.config.ws_base_delay)
        return WebSocketConnection(
            websocket_url(self.config.base_url, workspace_slug),
            self.config.api_key,
            **options,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "AnythingLLMClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
