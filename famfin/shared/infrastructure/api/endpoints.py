"""Typed endpoint groups over ApiClient.

These return raw JSON; the domain layer turns it into models.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from famfin.shared.infrastructure.api.client import ApiClient


class AuthApi:
    """/auth endpoints."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self.client.post("/auth/login", json={"email": email, "password": password})

    async def register(self, name: str, email: str, password: str) -> Any:
        return await self.client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )

    async def change_password(self, token: Optional[str], old_password: str, new_password: str) -> Any:
        return await self.client.post(
            "/auth/change-password",
            token=token,
            json={"oldPassword": old_password, "newPassword": new_password},
        )


class TransactionsApi:
    """/transactions endpoints, including family aggregates."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list(
        self,
        token: Optional[str],
        search: Optional[str] = None,
        type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return await self.client.get(
            "/transactions",
            token=token,
            params={"search": search, "type": type},
        ) or []

    async def create(self, token: Optional[str], data: Dict[str, Any]) -> Any:
        return await self.client.post("/transactions", token=token, json=data)

    async def update(self, token: Optional[str], transaction_id: str, data: Dict[str, Any]) -> Any:
        return await self.client.put(f"/transactions/{transaction_id}", token=token, json=data)

    async def delete(self, token: Optional[str], transaction_id: str) -> Any:
        return await self.client.delete(f"/transactions/{transaction_id}", token=token)

    async def family_summary(self, token: Optional[str]) -> Dict[str, Any]:
        return await self.client.get("/transactions/family/summary", token=token) or {}

    async def family_recent(self, token: Optional[str]) -> List[Dict[str, Any]]:
        return await self.client.get("/transactions/family/recent", token=token) or []

    async def family_monthly_stats(self, token: Optional[str], months: int) -> Dict[str, Any]:
        return await self.client.get(
            "/transactions/family/monthly-stats",
            token=token,
            params={"months": months},
        ) or {}


class FamilyApi:
    """/family endpoints."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def my_family(self, token: Optional[str]) -> Dict[str, Any]:
        return await self.client.get("/family/my-family", token=token)

    async def create(self, token: Optional[str], name: str) -> Any:
        return await self.client.post("/family/create", token=token, json={"name": name})

    async def join(self, token: Optional[str], invite_code: str) -> Any:
        return await self.client.post("/family/join", token=token, json={"inviteCode": invite_code})

    async def leave(self, token: Optional[str]) -> Any:
        return await self.client.post("/family/leave", token=token, json={})
