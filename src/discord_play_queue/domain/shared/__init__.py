"""
Shared Domain Kernel

Contains types and exceptions shared across the package.
"""

from discord_play_queue.domain.shared.exceptions import (
    BackendResponseError,
    DomainError,
    InvalidOperationError,
    PreconditionError,
    ProviderError,
)

__all__ = [
    "DomainError",
    "PreconditionError",
    "ProviderError",
    "BackendResponseError",
    "InvalidOperationError",
]
