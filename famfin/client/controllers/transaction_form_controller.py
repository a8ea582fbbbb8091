"""Transaction Form Controller - add or edit one transaction."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Callable, Optional

import flet as ft

from famfin.client.ui.components.widgets import (
    card,
    choice_row,
    error_banner,
    header_band,
    primary_button,
    show_error,
)
from famfin.client.ui.theme import RED_PRIMARY, TEAL_PRIMARY, TEXT_LABEL
from famfin.shared.domain.formatting import mask_date_input
from famfin.shared.domain.models import Transaction, TransactionType, categories_for
from famfin.shared.domain.validation import FormValidationError, build_transaction_draft

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)

TYPE_OPTIONS = [(TransactionType.INCOME.value, "Pemasukan"), (TransactionType.EXPENSE.value, "Pengeluaran")]


class TransactionFormController:
    """Controller for the add/edit transaction screen.

    Args:
        store: Application store
        page: Flet page
        on_done: Called after a successful save or on cancel
    """

    def __init__(self, store: Store, page: ft.Page, on_done: Callable[[], None]):
        self.store = store
        self.page = page
        self.on_done = on_done

        self._editing: Optional[Transaction] = None
        self._type = TransactionType.EXPENSE.value
        self._category = ""
        self._last_date = ""
        self._busy = False

        self._amount = ft.TextField(label="Jumlah", keyboard_type=ft.KeyboardType.NUMBER, prefix_text="Rp ")
        self._description = ft.TextField(label="Deskripsi")
        self._date = ft.TextField(
            label="Tanggal (YYYY-MM-DD)",
            keyboard_type=ft.KeyboardType.NUMBER,
            on_change=self._on_date_change,
        )
        self._type_row = ft.Container()
        self._category_row = ft.Container()
        self._error = error_banner()
        self._submit_button: Optional[ft.ElevatedButton] = None

    def load(self, transaction: Optional[Transaction]) -> None:
        """Fill the form from ``transaction``, or reset it for a new one."""
        self._editing = transaction
        show_error(self._error, None)
        if transaction is None:
            self._type = TransactionType.EXPENSE.value
            self._category = ""
            self._amount.value = ""
            self._description.value = ""
            self._date.value = date.today().isoformat()
        else:
            self._type = transaction.type.value
            self._category = transaction.category
            self._amount.value = f"{transaction.amount:g}"
            self._description.value = transaction.description
            self._date.value = transaction.date_only
        self._last_date = self._date.value

    def build_view(self) -> ft.Control:
        title = "Ubah Transaksi" if self._editing else "Tambah Transaksi"
        self._submit_button = primary_button("Simpan", self._on_submit, icon=ft.Icons.SAVE)
        self._render_choices()
        return ft.Column(
            [
                header_band(
                    title,
                    trailing=ft.IconButton(
                        ft.Icons.CLOSE,
                        icon_color=ft.Colors.WHITE,
                        tooltip="Batal",
                        on_click=lambda e: self.on_done(),
                    ),
                ),
                ft.Container(
                    expand=True,
                    padding=16,
                    content=ft.Column(
                        [
                            card(
                                ft.Column(
                                    [
                                        ft.Text("Jenis", size=12, color=TEXT_LABEL),
                                        self._type_row,
                                        self._amount,
                                        self._description,
                                        ft.Text("Kategori", size=12, color=TEXT_LABEL),
                                        self._category_row,
                                        self._date,
                                        self._error,
                                        self._submit_button,
                                    ],
                                    spacing=12,
                                )
                            ),
                        ],
                        scroll=ft.ScrollMode.AUTO,
                        expand=True,
                    ),
                ),
            ],
            spacing=0,
            expand=True,
        )

    def _render_choices(self) -> None:
        accent = TEAL_PRIMARY if self._type == TransactionType.INCOME.value else RED_PRIMARY
        self._type_row.content = choice_row(TYPE_OPTIONS, self._type, self._on_type, accent=accent)
        categories = [(c, c) for c in categories_for(self._type)]
        self._category_row.content = choice_row(categories, self._category, self._on_category, accent=accent)

    def _update(self) -> None:
        try:
            self.page.update()
        except RuntimeError:
            pass

    # --- Handlers ---

    def _on_type(self, value: str) -> None:
        if value != self._type:
            self._type = value
            # Categories differ per type
            self._category = ""
        self._render_choices()
        self._update()

    def _on_category(self, value: str) -> None:
        self._category = value
        self._render_choices()
        self._update()

    def _on_date_change(self, e: ft.ControlEvent) -> None:
        masked = mask_date_input(self._date.value or "", self._last_date)
        self._last_date = masked
        if masked != self._date.value:
            self._date.value = masked
            self._update()

    async def _on_submit(self, e: ft.ControlEvent) -> None:
        if self._busy:
            return
        user = self.store.session.user
        try:
            draft = build_transaction_draft(
                self._type,
                self._amount.value,
                self._description.value,
                self._category,
                self._date.value,
                user_id=user.id if user else None,
            )
        except FormValidationError as err:
            show_error(self._error, err.message)
            self._update()
            return

        self._busy = True
        if self._submit_button is not None:
            self._submit_button.disabled = True
        self._update()
        try:
            async with self.store.app.busy("Menyimpan transaksi..."):
                result = await self.store.transactions.save(draft, self._editing.id if self._editing else None)
        finally:
            self._busy = False
            if self._submit_button is not None:
                self._submit_button.disabled = False

        if not result.success:
            show_error(self._error, result.error)
            self._update()
            return

        self.on_done()
