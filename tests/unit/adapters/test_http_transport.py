"""Unit tests for HttpMatchTransport against an httpx.MockTransport."""

import json

import httpx
import pytest

from battle_arena.adapters.http import HttpMatchTransport
from battle_arena.config import ClientConfig, ConfigError
from battle_arena.core.session import MatchSession
from battle_arena.schemas.messages import DeployRequest
from battle_arena.utils.errors import RecoveryAction, TransportError

BASE_URL = "http://arena.test:8000"


def make_transport(handler) -> tuple[HttpMatchTransport, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    transport = HttpMatchTransport(ClientConfig(base_url=BASE_URL + "/"), client)
    return transport, requests


class TestRequests:
    """Test request shape per capability."""

    @pytest.mark.asyncio
    async def test_seed(self) -> None:
        transport, requests = make_transport(lambda r: httpx.Response(200))

        assert await transport.seed() is None

        assert requests[0].method == "POST"
        assert str(requests[0].url) == f"{BASE_URL}/seed"

    @pytest.mark.asyncio
    async def test_create_player(self) -> None:
        transport, requests = make_transport(
            lambda r: httpx.Response(200, json={"player_id": 7, "username": "Ann"})
        )

        player = await transport.create_player("Ann")

        assert player.player_id == "7"
        assert player.username == "Ann"
        assert json.loads(requests[0].content) == {"username": "Ann"}
        assert requests[0].url.path == "/player"

    @pytest.mark.asyncio
    async def test_list_cards_ignores_unknown_fields(self) -> None:
        body = {
            "cards": [
                {
                    "_id": "abc",
                    "card_id": "knight",
                    "name": "Knight",
                    "cost": 3,
                    "role": "tank",
                }
            ]
        }
        transport, requests = make_transport(lambda r: httpx.Response(200, json=body))

        cards = await transport.list_cards()

        assert requests[0].method == "GET"
        assert requests[0].url.path == "/cards"
        assert [(c.card_id, c.cost) for c in cards] == [("knight", 3.0)]

    @pytest.mark.asyncio
    async def test_start_match(self) -> None:
        body = {
            "match_id": "m-1",
            "state": {
                "elixir": 5,
                "time": 0,
                "towers": [{"side": "player", "lane": "left", "hp": 1000}],
                "units": [],
            },
        }
        transport, requests = make_transport(lambda r: httpx.Response(200, json=body))

        started = await transport.start_match("p1")

        assert started.match_id == "m-1"
        assert started.state.elixir == 5
        assert started.state.towers[0].lane == "left"
        assert json.loads(requests[0].content) == {"player_id": "p1"}

    @pytest.mark.asyncio
    async def test_deploy(self) -> None:
        transport, requests = make_transport(
            lambda r: httpx.Response(200, json={"accepted": True})
        )

        result = await transport.deploy(
            DeployRequest(match_id="m-1", card_id="knight", lane=1)
        )

        assert result == {"accepted": True}
        assert requests[0].url.path == "/match/deploy"
        assert json.loads(requests[0].content) == {
            "match_id": "m-1",
            "card_id": "knight",
            "lane": 1,
        }

    @pytest.mark.asyncio
    async def test_advance(self) -> None:
        transport, requests = make_transport(lambda r: httpx.Response(200, json=True))

        result = await transport.advance("m-1")

        assert result == {"result": True}
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/match/tick/m-1"

    @pytest.mark.asyncio
    async def test_fetch_state(self) -> None:
        body = {
            "elixir": 5.9,
            "time": 1,
            "units": [{"owner": "player", "lane": 1, "x": 1}],
            "winner": None,
        }
        transport, requests = make_transport(lambda r: httpx.Response(200, json=body))

        snapshot = await transport.fetch_state("m-1")

        assert requests[0].method == "GET"
        assert requests[0].url.path == "/match/state/m-1"
        assert snapshot.elixir == 5.9
        assert snapshot.towers == ()
        assert snapshot.units[0].lane == 1


class TestFailures:
    """Test failure translation into TransportError."""

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        transport, _ = make_transport(lambda r: httpx.Response(404))

        with pytest.raises(TransportError) as exc_info:
            await transport.fetch_state("missing")

        error = exc_info.value
        assert error.operation == "fetch_state"
        assert error.status_code == 404
        assert error.endpoint == "/match/state/missing"
        assert error.recovery_action == RecoveryAction.RETRY

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport, _ = make_transport(handler)

        with pytest.raises(TransportError, match="advance failed") as exc_info:
            await transport.advance("m-1")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_malformed_json(self) -> None:
        transport, _ = make_transport(
            lambda r: httpx.Response(200, content=b"<html>oops</html>")
        )

        with pytest.raises(TransportError, match="malformed JSON"):
            await transport.list_cards()

    @pytest.mark.asyncio
    async def test_unexpected_payload_shape(self) -> None:
        transport, _ = make_transport(
            lambda r: httpx.Response(200, json={"state": {}})
        )

        with pytest.raises(TransportError, match="MatchStart"):
            await transport.start_match("p1")

    @pytest.mark.asyncio
    async def test_empty_state_body_is_rejected(self) -> None:
        transport, _ = make_transport(lambda r: httpx.Response(200))

        with pytest.raises(TransportError):
            await transport.fetch_state("m-1")


class TestLifecycle:
    """Test client ownership."""

    @pytest.mark.asyncio
    async def test_owned_client_closed_on_exit(self) -> None:
        async with HttpMatchTransport(ClientConfig(base_url=BASE_URL)) as transport:
            assert transport.base_url == BASE_URL

        assert transport._client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self) -> None:
        transport, _ = make_transport(lambda r: httpx.Response(200))

        await transport.aclose()

        assert not transport._client.is_closed


class TestConfiguration:
    """Test base address validation at construction."""

    @pytest.mark.parametrize(
        "base_url", ["ftp://nowhere", "", "localhost:8000", "http://"]
    )
    def test_invalid_base_url_raises_config_error(self, base_url: str) -> None:
        with pytest.raises(ConfigError, match="base_url"):
            HttpMatchTransport(ClientConfig(base_url=base_url))

    def test_session_with_invalid_base_url_raises_config_error(self) -> None:
        with pytest.raises(ConfigError):
            MatchSession(config=ClientConfig(base_url="ftp://nowhere"))

    def test_surrounding_whitespace_is_ignored(self) -> None:
        transport = HttpMatchTransport(
            ClientConfig(base_url=" http://arena.test/ "),
            httpx.AsyncClient(transport=httpx.MockTransport(lambda r: None)),
        )

        assert transport.base_url == "http://arena.test"
