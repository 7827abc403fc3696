"""Custom exception hierarchy."""

from __future__ import annotations

AUTH_HINT = "Check that BREX_API_KEY is set to a valid, unexpired user token."


class BrexToolError(Exception):
    """Base exception for all library errors."""

    pass


class ValidationError(BrexToolError):
    """Malformed or out-of-range request input.

    Always raised before any upstream call is made.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UpstreamError(BrexToolError):
    """Error from the upstream Brex API (status, transport or payload shape)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.hint = hint

    def __str__(self) -> str:
        base = super().__str__()
        if self.hint:
            return f"{base} ({self.hint})"
        return base


class AuthenticationError(UpstreamError):
    """Upstream rejected the credentials (401/403)."""

    def __init__(self, message: str, status_code: int | None = 401) -> None:
        super().__init__(message, status_code=status_code, hint=AUTH_HINT)


class NotFoundError(UpstreamError):
    """Requested upstream resource does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


class RateLimitError(UpstreamError):
    """Upstream rate limit exceeded."""

    def __init__(self, message: str, retry_after: int = 60) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class RegistryError(BrexToolError):
    """Lookup or registration failure in an explicit registry."""

    pass


class UnknownOperationError(RegistryError):
    """No operation is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown operation: {name}")
        self.name = name


class UnknownEntityError(RegistryError):
    """No entity definition is registered for the requested kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown entity kind: {kind}")
        self.kind = kind
