"""Exceptions raised by the oracle client and response validators."""

from __future__ import annotations

from typing import Any


class OracleClientError(Exception):
    """Base class for every failure surfaced by the oracle client."""


class OracleError(OracleClientError):
    """Raised when the oracle answers with a non-2xx status other than 404."""

    def __init__(self, status: int, endpoint: str):
        self.status = status
        self.endpoint = endpoint
        super().__init__(f"Oracle {endpoint} error: {status}")


class OracleTransportError(OracleClientError):
    """Raised when the oracle cannot be reached or returns an undecodable body."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Oracle {endpoint} unreachable: {reason}")


class ResponseValidationError(OracleClientError, ValueError):
    """Raised when a decoded oracle response breaks its documented shape."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        self.message = message
        super().__init__(f"{message}: {field}={value!r}")


class InvalidIdentityError(ValueError):
    """Raised when a value is not a 64-character hex public key."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid identity (expected 64 hex characters): {value!r}")
