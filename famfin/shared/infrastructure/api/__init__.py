"""
REST API Interface - httpx client and endpoint groups.
"""

from famfin.shared.infrastructure.api.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ValidationError,
)
from famfin.shared.infrastructure.api.client import ApiClient
from famfin.shared.infrastructure.api.endpoints import AuthApi, FamilyApi, TransactionsApi

__all__ = [
    # Errors
    "ApiError",
    "ApiConnectionError",
    "AuthenticationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServerError",
    "ValidationError",
    # Client
    "ApiClient",
    # Endpoints
    "AuthApi",
    "FamilyApi",
    "TransactionsApi",
]
