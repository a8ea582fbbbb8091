"""Application Store - explicit container for state and services.

Built once in ``main`` and passed to the shell and controllers. There is no
module-level instance: tests build their own Store around in-memory storage
and a mock transport.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .app_state import AppState
from famfin.client.navigation.guard import NavigationGuard
from famfin.shared.core.configuration import SystemConfig
from famfin.shared.core.event_bus import EventBus
from famfin.shared.domain.family.service import FamilyService
from famfin.shared.domain.session.store import SessionStore
from famfin.shared.domain.transactions.service import TransactionService
from famfin.shared.infrastructure.api.client import ApiClient
from famfin.shared.infrastructure.api.endpoints import AuthApi, FamilyApi, TransactionsApi
from famfin.shared.infrastructure.persistence.key_value import (
    DuckDBKeyValueStorage,
    KeyValueStorage,
    create_storage,
)

logger = logging.getLogger(__name__)


class Store:
    """Everything the UI needs, wired together.

    Usage:
        store = await Store.create(config)
        await store.start()
        ...
        await store.shutdown()
    """

    def __init__(
        self,
        config: SystemConfig,
        bus: EventBus,
        storage: KeyValueStorage,
        api_client: ApiClient,
    ) -> None:
        self.config = config
        self.bus = bus
        self.storage = storage
        self.api_client = api_client

        self.session = SessionStore(
            AuthApi(api_client),
            storage,
            bus,
            token_key=config.storage.token_key,
            user_key=config.storage.user_key,
        )
        self.transactions = TransactionService(TransactionsApi(api_client), self.session, bus)
        self.family = FamilyService(FamilyApi(api_client), self.session, bus)
        self.guard = NavigationGuard(self.session, bus)
        self.app = AppState(bus)

    @classmethod
    async def create(
        cls,
        config: SystemConfig,
        storage: Optional[KeyValueStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "Store":
        """Open storage and build the API client for ``config``."""
        if storage is None:
            storage = create_storage(config.storage.db_path)
        if isinstance(storage, DuckDBKeyValueStorage):
            await storage.open()
        return cls(config, EventBus(), storage, ApiClient(config.api, transport=transport))

    async def start(self) -> None:
        """Bind state to the bus, attach the guard, then restore the session."""
        await self.app.initialize()
        await self.guard.attach()
        await self.session.restore()
        logger.info("Store started")

    async def shutdown(self) -> None:
        await self.guard.detach()
        await self.bus.wait_until_idle()
        await self.api_client.aclose()
        await self.storage.close()
        logger.info("Store shut down")
