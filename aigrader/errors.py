"""Exceptions raised by provider calls and handled at the engine adapter boundary."""

from typing import Optional


class ProviderError(Exception):
    """An upstream provider answered with a non-success status."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider} error: {message}")
        self.provider = provider
        self.status_code = status_code


def describe_error(error: BaseException) -> str:
    """Non-empty message for an exception; timeouts stringify to ''."""
    return str(error) or error.__class__.__name__
