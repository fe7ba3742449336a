import pytest

from fakes import FakeSearchBackend, backend_entry, backend_payload

# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def requester():
    """The Discord user queuing tracks in most tests."""
    from discord_play_queue.domain.music.value_objects import Requester

    return Requester(user_id=111111111, display_name="Alice")


@pytest.fixture
def sample_track():
    """Create a sample track for testing."""
    from discord_play_queue.domain.music.entities import Track

    return Track(
        uri="https://youtube.com/watch?v=test123",
        title="Test Track",
        author="Test Artist",
        encoded="QAAAjQIAJVJpY2sgQXN0bGV5",
        identifier="test123",
        length_ms=180_000,
        source_name="youtube",
        artwork_url="https://i.ytimg.com/vi/test123/hq720.jpg",
    )


@pytest.fixture
def make_track():
    """Factory for tracks with a unique uri per title."""
    from discord_play_queue.domain.music.entities import Track

    def _make(title: str, **kwargs) -> Track:
        slug = title.lower().replace(" ", "-")
        return Track(uri=kwargs.pop("uri", f"https://example.com/{slug}"), title=title, **kwargs)

    return _make


# ============================================================================
# Backend Payload Fixtures
# ============================================================================


@pytest.fixture
def payload():
    """Builder for ``{"loadType", "tracks"}`` search backend payloads."""
    return backend_payload


@pytest.fixture
def entry():
    """Builder for a single search backend track entry."""
    return backend_entry


# ============================================================================
# Collaborator Fakes
# ============================================================================


@pytest.fixture
def fake_backend():
    return FakeSearchBackend()


@pytest.fixture
def connection_provider():
    from discord_play_queue.infrastructure.playback.connection_provider import (
        InMemoryConnectionProvider,
    )

    return InMemoryConnectionProvider()


@pytest.fixture
def registry():
    from discord_play_queue.application.services.requester_registry import RequesterRegistry

    return RequesterRegistry()
