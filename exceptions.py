# src/exceptions.py
"""Error types shared by the gateway client, the member store and the subscription flow."""
from typing import Any, Optional

from fastapi import HTTPException


class ConfigurationError(Exception):
    """Required configuration (credentials, URLs) is missing."""


class SubscriptionError(Exception):
    """Base for failures that end the subscription flow on the error page."""
    default_status: int = 1

    def __init__(self, message: str, status: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status = self.default_status if status is None else status

    def __str__(self) -> str:
        return self.message


class ValidationError(SubscriptionError):
    """Required input is missing or invalid."""
    default_status = 3


class GatewayError(SubscriptionError):
    """The gateway answered without the expected success indicator."""
    default_status = 2

    def __init__(self, message: str, status: Optional[Any] = None, payload: Optional[dict] = None):
        super().__init__(message, status)
        self.payload = payload or {}


class NotFoundError(SubscriptionError):
    """No member matches the lookup key."""
    default_status = 4


class PersistenceError(SubscriptionError):
    """Writing to the member store failed."""
    default_status = 5


def to_http_exception(error: SubscriptionError) -> HTTPException:
    """Translate a flow error for JSON endpoints."""
    if isinstance(error, ValidationError):
        status_code = 400
    elif isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, GatewayError):
        status_code = 502
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail={"status": error.status, "message": error.message})
