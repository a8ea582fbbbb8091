"""
Dashboard Controller - family balance at a glance.
Summary cards, monthly income/expense bars for the chosen period and the
most recent family transactions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

import flet as ft

from famfin.client.ui.components.widgets import (
    card,
    choice_row,
    empty_state,
    header_band,
    loading_indicator,
    transaction_tile,
)
from famfin.client.ui.theme import (
    BORDER_LIGHT,
    NAVY_PRIMARY,
    RED_PRIMARY,
    TEAL_PRIMARY,
    TEXT_LABEL,
    TEXT_VALUE,
)
from famfin.shared.domain.formatting import PERIOD_OPTIONS, average, build_chart_data, format_currency
from famfin.shared.domain.models import DashboardData

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)

CHART_HEIGHT = 140


class DashboardController:
    """Controller for the dashboard tab."""

    def __init__(self, store: Store, page: ft.Page):
        self.store = store
        self.page = page
        self.months = store.config.ui.default_period_months
        self._data: Optional[DashboardData] = None
        self._loading = False
        self._body = ft.Column(spacing=16, scroll=ft.ScrollMode.AUTO, expand=True)

    def build_view(self) -> ft.Control:
        user = self.store.session.user
        greeting = f"Halo, {user.name}" if user and user.name else "Halo"

        self._render()
        return ft.Column(
            [
                header_band(
                    greeting,
                    "Ringkasan keuangan keluarga",
                    trailing=ft.IconButton(
                        ft.Icons.LOGOUT,
                        icon_color=ft.Colors.WHITE,
                        tooltip="Keluar",
                        on_click=self._on_logout,
                    ),
                ),
                ft.Container(content=self._body, padding=16, expand=True),
            ],
            spacing=0,
            expand=True,
        )

    async def refresh(self) -> None:
        """Reload the dashboard for the current period.

        A failed load keeps whatever was rendered before.
        """
        self._loading = self._data is None
        self._render()
        async with self.store.app.busy("Memuat dashboard..."):
            data = await self.store.transactions.load_dashboard(self.months)
        self._loading = False
        if data is not None:
            self._data = data
        self._render()

    # --- Rendering ---

    def _render(self) -> None:
        if self._loading:
            self._body.controls = [loading_indicator()]
            self._update()
            return

        data = self._data or DashboardData()
        self._body.controls = [
            self._build_summary(data),
            self._build_chart(data),
            self._build_recent(data),
        ]
        self._update()

    def _update(self) -> None:
        try:
            self.page.update()
        except RuntimeError:
            # Session destroyed, ignore update
            pass

    def _stat(self, label: str, value: float, color: str, icon: ft.IconData) -> ft.Container:
        return ft.Container(
            expand=True,
            padding=12,
            border_radius=12,
            border=ft.border.all(1, BORDER_LIGHT),
            content=ft.Column(
                [
                    ft.Row([ft.Icon(icon, color=color, size=18), ft.Text(label, size=12, color=TEXT_LABEL)], spacing=6),
                    ft.Text(format_currency(value, self.store.config.ui.currency), size=15, weight=ft.FontWeight.W_600, color=color),
                ],
                spacing=6,
            ),
        )

    def _build_summary(self, data: DashboardData) -> ft.Control:
        summary = data.summary
        return card(
            ft.Column(
                [
                    ft.Text("Saldo Keluarga", size=13, color=TEXT_LABEL),
                    ft.Text(
                        format_currency(summary.balance, self.store.config.ui.currency),
                        size=26,
                        weight=ft.FontWeight.W_700,
                        color=NAVY_PRIMARY,
                    ),
                    ft.Row(
                        [
                            self._stat("Pemasukan", summary.total_income, TEAL_PRIMARY, ft.Icons.ARROW_DOWNWARD),
                            self._stat("Pengeluaran", summary.total_expense, RED_PRIMARY, ft.Icons.ARROW_UPWARD),
                        ],
                        spacing=12,
                    ),
                ],
                spacing=8,
            )
        )

    def _build_chart(self, data: DashboardData) -> ft.Control:
        chart = build_chart_data(data.monthly)
        peak = max(chart["income"] + chart["expense"]) or 1.0

        def bar(value: float, color: str) -> ft.Container:
            return ft.Container(
                width=10,
                height=max(2.0, CHART_HEIGHT * value / peak),
                bgcolor=color,
                border_radius=ft.border_radius.only(top_left=3, top_right=3),
                tooltip=format_currency(value, self.store.config.ui.currency),
            )

        columns: List[ft.Control] = []
        for label, income, expense in zip(chart["labels"], chart["income"], chart["expense"]):
            columns.append(
                ft.Column(
                    [
                        ft.Row(
                            [bar(income, TEAL_PRIMARY), bar(expense, RED_PRIMARY)],
                            spacing=2,
                            vertical_alignment=ft.CrossAxisAlignment.END,
                        ),
                        ft.Text(label, size=11, color=TEXT_LABEL),
                    ],
                    spacing=4,
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    alignment=ft.MainAxisAlignment.END,
                )
            )

        periods = [(str(option["value"]), option["label"]) for option in PERIOD_OPTIONS]
        return card(
            ft.Column(
                [
                    choice_row(periods, str(self.months), self._on_period_change),
                    ft.Container(
                        height=CHART_HEIGHT + 24,
                        content=ft.Row(
                            columns,
                            spacing=14,
                            scroll=ft.ScrollMode.AUTO,
                            vertical_alignment=ft.CrossAxisAlignment.END,
                        ),
                    ),
                    ft.Row(
                        [
                            ft.Text(
                                f"Rata-rata pemasukan: {format_currency(average(chart['income']), self.store.config.ui.currency)}",
                                size=12,
                                color=TEXT_VALUE,
                            ),
                            ft.Text(
                                f"Rata-rata pengeluaran: {format_currency(average(chart['expense']), self.store.config.ui.currency)}",
                                size=12,
                                color=TEXT_VALUE,
                            ),
                        ],
                        wrap=True,
                        spacing=16,
                    ),
                ],
                spacing=12,
            ),
            title="Statistik Bulanan",
        )

    def _build_recent(self, data: DashboardData) -> ft.Control:
        if not data.recent:
            content: ft.Control = empty_state("Belum ada transaksi")
        else:
            content = ft.Column([transaction_tile(tx) for tx in data.recent], spacing=0)
        return card(content, title="Transaksi Terbaru")

    # --- Handlers ---

    def _on_period_change(self, value: str) -> None:
        self.months = int(value)
        logger.info(f"Dashboard period changed to {self.months} months")
        self.page.run_task(self.refresh)

    async def _on_logout(self, e: ft.ControlEvent) -> None:
        await self.store.session.logout()
