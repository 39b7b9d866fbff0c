"""Exception types raised by the nftitem x402 client."""

from __future__ import annotations

from typing import Any


class NftItemError(Exception):
    """Base class for every error the client raises on purpose."""


class ConfigurationError(NftItemError):
    """Raised when credentials or CLI options are missing or unusable."""


class ValidationError(NftItemError, ValueError):
    """Raised when user input is rejected before any request is sent."""


class OperationError(NftItemError, RuntimeError):
    def __init__(self, message: str, status: int, data: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.data = data
