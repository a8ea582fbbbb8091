"""Transactions Controller - searchable list with type filter and delete."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, List, Optional

import flet as ft

from famfin.client.ui.components.widgets import (
    card,
    choice_row,
    empty_state,
    error_banner,
    header_band,
    loading_indicator,
    show_error,
    transaction_tile,
)
from famfin.client.ui.theme import BUTTON_DANGER, NAVY_PRIMARY, TEXT_LABEL
from famfin.shared.domain.models import Transaction

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)

TYPE_FILTERS = [("all", "Semua"), ("income", "Pemasukan"), ("expense", "Pengeluaran")]
MSG_LOAD_FAILED = "Gagal memuat transaksi"
MSG_DELETE_FAILED = "Gagal menghapus transaksi"


class TransactionsController:
    """Controller for the transactions tab.

    Args:
        store: Application store
        page: Flet page
        open_form: Called with a transaction to edit, or None to add one
    """

    def __init__(self, store: Store, page: ft.Page, open_form: Callable[[Optional[Transaction]], None]):
        self.store = store
        self.page = page
        self.open_form = open_form

        self.search = ""
        self.type_filter = "all"
        self._items: Optional[List[Transaction]] = None
        self._pending_delete: Optional[str] = None

        self._search_field = ft.TextField(
            hint_text="Cari transaksi...",
            prefix_icon=ft.Icons.SEARCH,
            on_submit=self._on_search,
            expand=True,
        )
        self._filters = ft.Container()
        self._error = error_banner()
        self._list = ft.Column(spacing=0)

    def build_view(self) -> ft.Control:
        self._render()
        return ft.Column(
            [
                header_band(
                    "Transaksi",
                    "Catatan pemasukan dan pengeluaran keluarga",
                    trailing=ft.IconButton(
                        ft.Icons.ADD_CIRCLE,
                        icon_color=ft.Colors.WHITE,
                        icon_size=32,
                        tooltip="Tambah transaksi",
                        on_click=lambda e: self.open_form(None),
                    ),
                ),
                ft.Container(
                    expand=True,
                    padding=16,
                    content=ft.Column(
                        [
                            ft.Row(
                                [
                                    self._search_field,
                                    ft.IconButton(ft.Icons.SEARCH, icon_color=NAVY_PRIMARY, on_click=self._on_search),
                                ]
                            ),
                            self._filters,
                            self._error,
                            card(self._list),
                        ],
                        spacing=12,
                        scroll=ft.ScrollMode.AUTO,
                        expand=True,
                    ),
                ),
            ],
            spacing=0,
            expand=True,
        )

    async def refresh(self) -> None:
        if self._items is None:
            self._list.controls = [loading_indicator()]
            self._update()

        async with self.store.app.busy("Memuat transaksi..."):
            items = await self.store.transactions.list(self.search, self.type_filter)
        if items is None:
            show_error(self._error, MSG_LOAD_FAILED)
        else:
            show_error(self._error, None)
            self._items = items
        self._render()

    # --- Rendering ---

    def _update(self) -> None:
        try:
            self.page.update()
        except RuntimeError:
            pass

    def _render(self) -> None:
        self._filters.content = choice_row(TYPE_FILTERS, self.type_filter, self._on_filter)
        if self._items is None:
            self._list.controls = [loading_indicator()]
        elif not self._items:
            self._list.controls = [empty_state("Tidak ada transaksi")]
        else:
            self._list.controls = [self._tile(tx) for tx in self._items]
        self._update()

    def _tile(self, transaction: Transaction) -> ft.Control:
        if not self.store.transactions.can_edit(transaction):
            return transaction_tile(transaction)

        if self._pending_delete == transaction.id:
            trailing: List[ft.Control] = [
                ft.Text("Hapus?", size=12, color=TEXT_LABEL),
                ft.IconButton(
                    ft.Icons.CHECK,
                    icon_color=BUTTON_DANGER,
                    tooltip="Ya, hapus",
                    on_click=lambda e, tx_id=transaction.id: self.page.run_task(self._confirm_delete, tx_id),
                ),
                ft.IconButton(ft.Icons.CLOSE, tooltip="Batal", on_click=self._cancel_delete),
            ]
        else:
            trailing = [
                ft.IconButton(
                    ft.Icons.EDIT,
                    icon_color=NAVY_PRIMARY,
                    tooltip="Ubah",
                    on_click=lambda e, tx=transaction: self.open_form(tx),
                ),
                ft.IconButton(
                    ft.Icons.DELETE_OUTLINE,
                    icon_color=BUTTON_DANGER,
                    tooltip="Hapus",
                    on_click=lambda e, tx_id=transaction.id: self._ask_delete(tx_id),
                ),
            ]
        return transaction_tile(transaction, trailing=trailing)

    # --- Handlers ---

    async def _on_search(self, e: ft.ControlEvent) -> None:
        self.search = self._search_field.value or ""
        await self.refresh()

    def _on_filter(self, value: str) -> None:
        self.type_filter = value
        self.page.run_task(self.refresh)

    def _ask_delete(self, transaction_id: Optional[str]) -> None:
        self._pending_delete = transaction_id
        self._render()

    def _cancel_delete(self, e: ft.ControlEvent) -> None:
        self._pending_delete = None
        self._render()

    async def _confirm_delete(self, transaction_id: str) -> None:
        self._pending_delete = None
        async with self.store.app.busy("Menghapus transaksi..."):
            deleted = await self.store.transactions.delete(transaction_id)
        if not deleted:
            show_error(self._error, MSG_DELETE_FAILED)
            self._render()
            return
        await self.refresh()
