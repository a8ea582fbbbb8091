"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (REST API, local storage).
"""

# REST API
from famfin.shared.infrastructure.api import (
    ApiClient,
    ApiError,
    ApiConnectionError,
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ValidationError,
    AuthApi,
    FamilyApi,
    TransactionsApi,
)

# Persistence
from famfin.shared.infrastructure.persistence import (
    DuckDBKeyValueStorage,
    KeyValueStorage,
    MemoryKeyValueStorage,
    create_storage,
)

__all__ = [
    # REST API
    "ApiClient",
    "ApiError",
    "ApiConnectionError",
    "AuthenticationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServerError",
    "ValidationError",
    "AuthApi",
    "FamilyApi",
    "TransactionsApi",
    # Persistence
    "DuckDBKeyValueStorage",
    "KeyValueStorage",
    "MemoryKeyValueStorage",
    "create_storage",
]
