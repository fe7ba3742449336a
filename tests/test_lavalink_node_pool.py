"""
Unit Tests for the Lavalink Node Pool

Uses httpx.MockTransport so no request leaves the process.

Tests for:
- v4 envelope normalization
- Identifier prefixing for free-text queries
- Failover between nodes and retry cooldown
- Startup health probing
"""

import httpx
import pytest
from pydantic import SecretStr

from discord_play_queue.config.settings import LavalinkNodeSettings, LavalinkSettings
from discord_play_queue.domain.shared.exceptions import PreconditionError
from discord_play_queue.infrastructure.lavalink.node_pool import (
    LOAD_TRACKS_PATH,
    LavalinkNodePool,
    normalize_load_result,
)

from fakes import backend_entry

TWO_NODES = LavalinkSettings(
    nodes=(
        LavalinkNodeSettings(name="primary", host="lava-1", password=SecretStr("pw1")),
        LavalinkNodeSettings(name="backup", host="lava-2", password=SecretStr("pw2")),
    ),
    node_retry_s=30.0,
)


class FakeLavalink:
    """Answers load requests per host; hosts in ``down`` refuse connections."""

    def __init__(self, payload=None) -> None:
        self.payload = payload or {"loadType": "search", "data": [backend_entry("Hit")]}
        self.down: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host in self.down:
            raise httpx.ConnectError("refused", request=request)
        if request.url.path == "/version":
            return httpx.Response(200, text="4.0.8\n")
        return httpx.Response(200, json=self.payload)

    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]


@pytest.fixture
def lavalink():
    return FakeLavalink()


@pytest.fixture
def pool(lavalink):
    http = httpx.AsyncClient(transport=httpx.MockTransport(lavalink.handler))
    return LavalinkNodePool(TWO_NODES, client=http)


# =============================================================================
# normalize_load_result Tests
# =============================================================================


class TestNormalizeLoadResult:
    """Reshaping Lavalink v4 envelopes."""

    def test_track(self):
        """Should wrap a single track in a list."""
        entry = backend_entry("One")
        assert normalize_load_result({"loadType": "track", "data": entry}) == {
            "loadType": "track",
            "tracks": [entry],
        }

    def test_playlist(self):
        """Should lift the playlist's track list."""
        entries = [backend_entry("A"), backend_entry("B")]
        result = normalize_load_result(
            {"loadType": "playlist", "data": {"info": {"name": "Mix"}, "tracks": entries}}
        )
        assert result == {"loadType": "playlist", "tracks": entries}

    def test_search(self):
        """Should use the data list directly."""
        entries = [backend_entry("A")]
        assert normalize_load_result({"loadType": "search", "data": entries})["tracks"] == entries

    @pytest.mark.parametrize("load_type", ["empty", "error"])
    def test_empty_and_error(self, load_type):
        """Should produce an empty track list."""
        result = normalize_load_result({"loadType": load_type, "data": {"message": "x"}})
        assert result == {"loadType": load_type, "tracks": []}

    @pytest.mark.parametrize(
        "payload",
        [
            {"loadType": "SEARCH_RESULT", "tracks": []},
            {"loadType": "mystery", "data": []},
            {"loadType": "search"},
            "not a dict",
            None,
        ],
    )
    def test_passthrough(self, payload):
        """Should leave v3 payloads and unrecognised shapes untouched."""
        assert normalize_load_result(payload) == payload


# =============================================================================
# Identifier Tests
# =============================================================================


class TestBuildIdentifier:
    """Building the ``identifier`` query parameter."""

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("lofi beats", "ytsearch:lofi beats"),
            ("Song 1 - Artist 1", "ytsearch:Song 1 - Artist 1"),
            ("https://www.youtube.com/watch?v=abc", "https://www.youtube.com/watch?v=abc"),
            ("www.example.com/song.mp3", "www.example.com/song.mp3"),
            ("scsearch:ambient", "scsearch:ambient"),
            ("song www.band", "ytsearch:song www.band"),
            ("remix of https://example.com", "ytsearch:remix of https://example.com"),
        ],
    )
    def test_identifier(self, pool, query, expected):
        """Should prefix free text and pass URLs and explicit searches through."""
        assert pool.build_identifier(query) == expected


# =============================================================================
# Search Tests
# =============================================================================


class TestSearch:
    """Load requests and failover."""

    @pytest.mark.asyncio
    async def test_search_request(self, pool, lavalink):
        """Should call the first node with the identifier and password."""
        result = await pool.search("lofi")

        request = lavalink.requests[0]
        assert request.url.host == "lava-1"
        assert request.url.path == LOAD_TRACKS_PATH
        assert request.url.params["identifier"] == "ytsearch:lofi"
        assert request.headers["Authorization"] == "pw1"
        assert result["loadType"] == "search"
        assert result["tracks"][0]["info"]["title"] == "Hit"

    @pytest.mark.asyncio
    async def test_fails_over_to_next_node(self, pool, lavalink):
        """Should try the backup node when the primary is down."""
        lavalink.down.add("lava-1")

        result = await pool.search("lofi")

        assert lavalink.hosts() == ["lava-1", "lava-2"]
        assert result["tracks"]
        assert pool.available_node_count == 1

    @pytest.mark.asyncio
    async def test_failed_node_skipped_during_cooldown(self, pool, lavalink):
        """Should not retry a failed node before the cooldown elapses."""
        lavalink.down.add("lava-1")
        await pool.search("first")
        lavalink.requests.clear()

        await pool.search("second")

        assert lavalink.hosts() == ["lava-2"]

    @pytest.mark.asyncio
    async def test_failed_node_retried_after_cooldown(self, pool, lavalink):
        """Should put a node back in rotation once the cooldown has passed."""
        lavalink.down.add("lava-1")
        await pool.search("first")
        primary = pool._nodes[0]
        primary.failed_at -= TWO_NODES.node_retry_s + 1

        lavalink.down.clear()
        lavalink.requests.clear()
        await pool.search("second")

        assert lavalink.hosts() == ["lava-1"]
        assert pool.available_node_count == 2

    @pytest.mark.asyncio
    async def test_all_nodes_down(self, pool, lavalink):
        """Should raise PreconditionError when no node answers."""
        lavalink.down.update({"lava-1", "lava-2"})

        with pytest.raises(PreconditionError) as exc_info:
            await pool.search("lofi")

        assert exc_info.value.requirement == "search_backend"
        assert pool.available_node_count == 0

    @pytest.mark.asyncio
    async def test_http_error_status_fails_over(self):
        """Should treat an HTTP error status like a transport failure."""

        def handler(request):
            if request.url.host == "lava-1":
                return httpx.Response(500)
            return httpx.Response(200, json={"loadType": "empty", "data": {}})

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        pool = LavalinkNodePool(TWO_NODES, client=http)

        result = await pool.search("anything")

        assert result == {"loadType": "empty", "tracks": []}

    @pytest.mark.asyncio
    async def test_invalid_json_fails_over(self):
        """Should move on when a node answers with something other than JSON."""

        def handler(request):
            if request.url.host == "lava-1":
                return httpx.Response(200, text="<html>")
            return httpx.Response(200, json={"loadType": "search", "data": []})

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        pool = LavalinkNodePool(TWO_NODES, client=http)

        assert await pool.search("anything") == {"loadType": "search", "tracks": []}


# =============================================================================
# Health Tests
# =============================================================================


class TestRefresh:
    """Startup health probing."""

    @pytest.mark.asyncio
    async def test_all_healthy(self, pool, lavalink):
        """Should report every reachable node."""
        assert await pool.refresh() == 2
        assert all(r.url.path == "/version" for r in lavalink.requests)

    @pytest.mark.asyncio
    async def test_unreachable_node(self, pool, lavalink):
        """Should mark unreachable nodes as failed."""
        lavalink.down.add("lava-2")

        assert await pool.refresh() == 1
        assert pool.available_node_count == 1

    @pytest.mark.asyncio
    async def test_refresh_restores_node(self, pool, lavalink):
        """Should bring a recovered node straight back."""
        lavalink.down.add("lava-1")
        await pool.refresh()
        lavalink.down.clear()

        assert await pool.refresh() == 2

    @pytest.mark.asyncio
    async def test_close(self, pool):
        """Should close the HTTP client."""
        await pool.close()

        assert pool._client.is_closed
