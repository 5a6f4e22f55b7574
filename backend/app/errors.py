"""Typed gateway errors and the result object operations return."""

from dataclasses import dataclass
from typing import Any

GENERIC_ERROR_MESSAGE = "Internal server error."
INVALID_REQUEST_MESSAGE = "Invalid request data."


class GatewayError(Exception):
    """Base class for errors an operation can end in."""

    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message


class ValidationFailed(GatewayError):
    """A required input was missing or empty."""

    status_code = 400

    def __init__(self, message: str = INVALID_REQUEST_MESSAGE):
        super().__init__(message)


class AuthFailed(GatewayError):
    """No usable OAuth token; the client must re-authenticate."""

    status_code = 302

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message)


class ProviderError(GatewayError):
    """The YouTube API call failed. The message is shown to the client."""

    status_code = 500


class SerializationError(GatewayError):
    """The payload could not be encoded. Details stay in the server log."""

    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)


@dataclass
class OperationResult:
    """Outcome of a gateway operation: either a payload or a typed error."""

    payload: Any = None
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: Any) -> "OperationResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: GatewayError) -> "OperationResult":
        return cls(error=error)
