"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class PreconditionError(DomainError):
    """Raised when a request cannot start (no voice context, no backend nodes)."""

    def __init__(self, requirement: str, message: str | None = None) -> None:
        msg = message or f"Precondition not met: {requirement}"
        super().__init__(msg, code="PRECONDITION_FAILED")
        self.requirement = requirement


class ProviderError(DomainError):
    """Raised when the external catalog provider fails (auth, network, payload)."""

    def __init__(
        self, provider: str, message: str | None = None, status_code: int | None = None
    ) -> None:
        msg = message or f"{provider} request failed"
        super().__init__(msg, code="PROVIDER_ERROR")
        self.provider = provider
        self.status_code = status_code


class BackendResponseError(DomainError):
    """Raised when the audio search backend returns a payload of the wrong shape."""

    def __init__(self, message: str, load_type: object | None = None) -> None:
        super().__init__(message, code="BACKEND_RESPONSE_ERROR")
        self.load_type = load_type


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state
