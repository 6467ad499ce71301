"""HTTP transport for the remote match service.

This module provides the MatchTransport interface, with one coroutine per
server capability, and HttpMatchTransport, its httpx implementation.
Transports carry no business logic: no retries, no caching, and exactly
one request per call. Every failure surfaces as a TransportError.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from battle_arena.config import ClientConfig, validate_client_config
from battle_arena.schemas.messages import (
    Card,
    CardCatalog,
    DeployRequest,
    MatchSnapshot,
    MatchStart,
    Player,
)
from battle_arena.utils.errors import TransportError
from battle_arena.utils.telemetry import get_logger, transport_timer

ModelT = TypeVar("ModelT", bound=BaseModel)


class MatchTransport(ABC):
    """Abstract interface to the remote match service."""

    @abstractmethod
    async def seed(self) -> None:
        """Ask the server to seed its catalog data."""

    @abstractmethod
    async def create_player(self, username: str) -> Player:
        """Create a player identity."""

    @abstractmethod
    async def list_cards(self) -> list[Card]:
        """Fetch the card catalog."""

    @abstractmethod
    async def start_match(self, player_id: str) -> MatchStart:
        """Start a new match for a player."""

    @abstractmethod
    async def deploy(self, request: DeployRequest) -> dict[str, Any]:
        """Deploy a card into a lane of a running match."""

    @abstractmethod
    async def advance(self, match_id: str) -> dict[str, Any]:
        """Advance the server-side simulation of a match by one tick."""

    @abstractmethod
    async def fetch_state(self, match_id: str) -> MatchSnapshot:
        """Fetch the current authoritative state of a match."""

    async def aclose(self) -> None:
        """Release any resources held by the transport."""


class HttpMatchTransport(MatchTransport):
    """MatchTransport backed by an httpx.AsyncClient.

    The transport owns its client unless one is injected, in which case
    the caller is responsible for closing it.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Raises:
            ConfigError: If the client settings (e.g. the base address) are
                invalid
        """
        self.config = config or ClientConfig()
        validate_client_config(self.config)
        self.base_url = self.config.base_url.strip().rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.config.request_timeout_seconds
        )
        self._logger = get_logger("battle_arena.transport", base_url=self.base_url)

    async def __aenter__(self) -> "HttpMatchTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        match_id: str | None = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body (or None if empty)."""
        async with transport_timer(operation, match_id=match_id, logger=self._logger):
            try:
                response = await self._client.request(
                    method, f"{self.base_url}{path}", json=body
                )
            except httpx.HTTPError as e:
                raise TransportError(
                    operation, f"{type(e).__name__}: {e}", endpoint=path
                ) from e

            if response.is_error:
                raise TransportError(
                    operation,
                    response.reason_phrase or "request rejected",
                    endpoint=path,
                    status_code=response.status_code,
                )

            if not response.content:
                return None

            try:
                return response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise TransportError(
                    operation,
                    f"malformed JSON body: {e}",
                    endpoint=path,
                    status_code=response.status_code,
                ) from e

    def _parse(
        self, operation: str, path: str, model: type[ModelT], payload: Any
    ) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                operation,
                f"unexpected {model.__name__} payload: {e.error_count()} error(s)",
                endpoint=path,
            ) from e

    async def seed(self) -> None:
        await self._request("seed", "POST", "/seed")

    async def create_player(self, username: str) -> Player:
        path = "/player"
        payload = await self._request(
            "create_player", "POST", path, body={"username": username}
        )
        return self._parse("create_player", path, Player, payload)

    async def list_cards(self) -> list[Card]:
        path = "/cards"
        payload = await self._request("list_cards", "GET", path)
        return list(self._parse("list_cards", path, CardCatalog, payload).cards)

    async def start_match(self, player_id: str) -> MatchStart:
        path = "/match/start"
        payload = await self._request(
            "start_match", "POST", path, body={"player_id": player_id}
        )
        return self._parse("start_match", path, MatchStart, payload)

    async def deploy(self, request: DeployRequest) -> dict[str, Any]:
        payload = await self._request(
            "deploy",
            "POST",
            "/match/deploy",
            body=request.to_payload(),
            match_id=request.match_id,
        )
        return payload if isinstance(payload, dict) else {"result": payload}

    async def advance(self, match_id: str) -> dict[str, Any]:
        payload = await self._request(
            "advance", "POST", f"/match/tick/{match_id}", match_id=match_id
        )
        return payload if isinstance(payload, dict) else {"result": payload}

    async def fetch_state(self, match_id: str) -> MatchSnapshot:
        path = f"/match/state/{match_id}"
        payload = await self._request("fetch_state", "GET", path, match_id=match_id)
        return self._parse("fetch_state", path, MatchSnapshot, payload)
