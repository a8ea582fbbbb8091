"""Tests for TransactionService."""

import pytest

from famfin.shared.core import events
from famfin.shared.domain.models import Transaction, TransactionDraft
from famfin.shared.domain.transactions.service import (
    MSG_FORBIDDEN,
    MSG_GENERIC,
    MSG_INVALID_DATA,
    MSG_SESSION_EXPIRED,
    submission_error_message,
)
from famfin.shared.infrastructure.api.errors import error_for_status

from .conftest import TOKEN, request_json

TX_ROW = {
    "_id": "t1",
    "type": "expense",
    "amount": 25000,
    "description": "Makan siang",
    "category": "Makanan",
    "date": "2024-01-12T00:00:00.000Z",
    "createdBy": {"_id": "u1", "name": "Ana"},
}


def draft(**overrides):
    fields = dict(type="expense", amount=25000, description="Makan siang", category="Makanan", date="2024-01-12")
    fields.update(overrides)
    return TransactionDraft(**fields)


class TestSubmissionErrors:
    @pytest.mark.parametrize(
        "status, payload, expected",
        [
            (400, {"message": "Jumlah tidak valid"}, "Jumlah tidak valid"),
            (400, None, MSG_INVALID_DATA),
            (401, {"message": "jwt expired"}, MSG_SESSION_EXPIRED),
            (403, None, MSG_FORBIDDEN),
            (500, {"message": "boom"}, MSG_GENERIC),
        ],
    )
    def test_message_by_status(self, status, payload, expected):
        assert submission_error_message(error_for_status(status, payload)) == expected


@pytest.mark.asyncio
class TestListing:
    async def test_list_parses_rows(self, transactions, server):
        server.on("GET", "/transactions", json=[TX_ROW])
        items = await transactions.list()

        assert [tx.id for tx in items] == ["t1"]
        request = server.last("GET", "/transactions")
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert dict(request.url.params) == {}

    async def test_list_sends_filters(self, transactions, server):
        server.on("GET", "/transactions", json=[])
        await transactions.list(search="  makan ", type="expense")

        params = dict(server.last("GET", "/transactions").url.params)
        assert params == {"search": "makan", "type": "expense"}

    async def test_list_failure_returns_none(self, transactions, server):
        server.on("GET", "/transactions", status=500)
        assert await transactions.list() is None

    async def test_unauthorized_signs_out(self, transactions, server, signed_in):
        """A 401 on any call ends the session."""
        server.on("GET", "/transactions", status=401, json={"message": "Token tidak valid"})
        assert await transactions.list() is None
        assert signed_in.is_authenticated is False


@pytest.mark.asyncio
class TestMutations:
    async def test_create(self, transactions, server, bus, recorder):
        server.on("POST", "/transactions", status=201, json={**TX_ROW, "_id": "t2"})
        await bus.subscribe(events.TOPIC_TRANSACTIONS_CHANGED, recorder)

        result = await transactions.save(draft())
        await bus.wait_until_idle()

        assert result.success is True
        assert request_json(server.last("POST", "/transactions"))["amount"] == 25000
        assert recorder.payloads == [{"action": "created", "transaction_id": "t2"}]

    async def test_update(self, transactions, server, bus, recorder):
        server.on("PUT", "/transactions/t1", json=TX_ROW)
        await bus.subscribe(events.TOPIC_TRANSACTIONS_CHANGED, recorder)

        result = await transactions.save(draft(amount=30000), transaction_id="t1")
        await bus.wait_until_idle()

        assert result.success is True
        assert request_json(server.last("PUT", "/transactions/t1"))["amount"] == 30000
        assert recorder.payloads == [{"action": "updated", "transaction_id": "t1"}]

    async def test_save_failure_message(self, transactions, server, bus, recorder):
        server.on("POST", "/transactions", status=400, json={"message": "Kategori wajib"})
        await bus.subscribe(events.TOPIC_TRANSACTIONS_CHANGED, recorder)

        result = await transactions.save(draft())
        await bus.wait_until_idle()

        assert result.success is False
        assert result.error == "Kategori wajib"
        assert recorder.payloads == []

    async def test_save_forbidden(self, transactions, server):
        server.on("PUT", "/transactions/t1", status=403)
        result = await transactions.save(draft(), transaction_id="t1")
        assert result.error == MSG_FORBIDDEN

    async def test_delete(self, transactions, server, bus, recorder):
        server.on("DELETE", "/transactions/t1", json={"message": "deleted"})
        await bus.subscribe(events.TOPIC_TRANSACTIONS_CHANGED, recorder)

        assert await transactions.delete("t1") is True
        await bus.wait_until_idle()
        assert recorder.payloads == [{"action": "deleted", "transaction_id": "t1"}]

    async def test_delete_failure(self, transactions, server):
        server.on("DELETE", "/transactions/t1", status=404)
        assert await transactions.delete("t1") is False


@pytest.mark.asyncio
class TestDashboard:
    async def test_load_dashboard(self, transactions, server):
        server.on("GET", "/transactions/family/summary", json={"totalIncome": 100, "totalExpense": 40, "balance": 60})
        server.on("GET", "/transactions/family/recent", json=[TX_ROW])
        server.on(
            "GET",
            "/transactions/family/monthly-stats",
            json={"months": ["Jan"], "income": [100], "expense": [40]},
        )

        data = await transactions.load_dashboard(3)

        assert data.summary.balance == 60
        assert len(data.recent) == 1
        assert data.monthly.months == ["Jan"]
        assert server.last("GET", "/transactions/family/monthly-stats").url.params["months"] == "3"

    async def test_dashboard_failure_returns_none(self, transactions, server):
        server.on("GET", "/transactions/family/summary", json={})
        server.on("GET", "/transactions/family/recent", status=500)
        server.on("GET", "/transactions/family/monthly-stats", json={})
        assert await transactions.load_dashboard(6) is None


@pytest.mark.asyncio
class TestPermissions:
    async def test_creator_can_edit(self, transactions):
        assert transactions.can_edit(Transaction.model_validate(TX_ROW)) is True

    async def test_other_member_cannot_edit(self, transactions):
        row = {**TX_ROW, "createdBy": {"_id": "u2", "name": "Budi"}}
        assert transactions.can_edit(Transaction.model_validate(row)) is False

    async def test_unknown_creator_cannot_edit(self, transactions):
        row = {**TX_ROW, "createdBy": None}
        assert transactions.can_edit(Transaction.model_validate(row)) is False
