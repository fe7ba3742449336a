# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, validators, messages and exceptions
- music/: Track, playback session and query/outcome value objects
"""

from discord_play_queue.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
