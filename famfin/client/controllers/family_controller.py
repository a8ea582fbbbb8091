"""Family Controller - family card, members and create/join/leave."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

import flet as ft

from famfin.client.ui.components.widgets import (
    card,
    error_banner,
    header_band,
    loading_indicator,
    primary_button,
    show_error,
)
from famfin.client.ui.theme import (
    BUTTON_DANGER,
    NAVY_PRIMARY,
    TEXT_LABEL,
    TEXT_VALUE,
    role_colors,
)
from famfin.shared.domain.formatting import initials, role_label
from famfin.shared.domain.models import Family, FamilyLookup
from famfin.shared.domain.validation import validate_family_name

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)

MSG_CREATE_FAILED = "Gagal membuat keluarga"
MSG_LEAVE_FAILED = "Gagal keluar dari keluarga"


class FamilyController:
    """Controller for the family tab."""

    def __init__(self, store: Store, page: ft.Page):
        self.store = store
        self.page = page
        self._lookup: Optional[FamilyLookup] = None
        self._confirm_leave = False

        self._name_field = ft.TextField(label="Nama Keluarga")
        self._code_field = ft.TextField(label="Kode Invite", capitalization=ft.TextCapitalization.CHARACTERS)
        self._error = error_banner()
        self._body = ft.Column(spacing=16, scroll=ft.ScrollMode.AUTO, expand=True)

    def build_view(self) -> ft.Control:
        self._render()
        return ft.Column(
            [
                header_band("Keluarga", "Kelola anggota keluarga"),
                ft.Container(content=self._body, padding=16, expand=True),
            ],
            spacing=0,
            expand=True,
        )

    async def refresh(self) -> None:
        self._lookup = await self.store.family.fetch()
        show_error(self._error, self._lookup.error)
        self._render()

    # --- Rendering ---

    def _update(self) -> None:
        try:
            self.page.update()
        except RuntimeError:
            pass

    def _render(self) -> None:
        if self._lookup is None:
            self._body.controls = [loading_indicator()]
        elif self._lookup.family is not None:
            self._body.controls = [self._error, *self._build_family(self._lookup.family)]
        else:
            self._body.controls = [self._error, *self._build_no_family()]
        self._update()

    def _build_family(self, family: Family) -> List[ft.Control]:
        info: List[ft.Control] = [
            ft.Text(family.name, size=20, weight=ft.FontWeight.W_700, color=NAVY_PRIMARY),
            ft.Text(f"{family.member_count} anggota", size=13, color=TEXT_LABEL),
        ]
        if family.invite_code:
            info.append(
                ft.Row(
                    [
                        ft.Text("Kode Invite:", size=13, color=TEXT_LABEL),
                        ft.Text(family.invite_code, size=16, weight=ft.FontWeight.W_700, selectable=True, color=TEXT_VALUE),
                    ],
                    spacing=8,
                )
            )

        members = ft.Column([self._member_row(m.name, m.email, m.role) for m in family.members], spacing=8)

        if self._confirm_leave:
            leave: ft.Control = ft.Row(
                [
                    ft.Text("Yakin ingin keluar dari keluarga?", color=TEXT_VALUE, expand=True),
                    ft.TextButton("Batal", on_click=self._cancel_leave),
                    primary_button("Keluar", self._on_leave, color=BUTTON_DANGER),
                ]
            )
        else:
            leave = ft.OutlinedButton(
                "Keluar dari Keluarga",
                icon=ft.Icons.EXIT_TO_APP,
                on_click=self._ask_leave,
                style=ft.ButtonStyle(color=BUTTON_DANGER),
            )

        return [card(ft.Column(info, spacing=6)), card(members, title="Anggota"), leave]

    def _member_row(self, name: Optional[str], email: Optional[str], role: str) -> ft.Control:
        fg, bg = role_colors(role)
        return ft.Row(
            [
                ft.CircleAvatar(content=ft.Text(initials(name)), bgcolor=NAVY_PRIMARY, color=ft.Colors.WHITE),
                ft.Column(
                    [
                        ft.Text(name or "-", size=14, weight=ft.FontWeight.W_500, color=TEXT_VALUE),
                        ft.Text(email or "", size=12, color=TEXT_LABEL),
                    ],
                    spacing=2,
                    expand=True,
                ),
                ft.Container(
                    padding=ft.padding.symmetric(horizontal=10, vertical=4),
                    border_radius=12,
                    bgcolor=bg,
                    content=ft.Text(role_label(role), size=12, color=fg),
                ),
            ],
            spacing=12,
        )

    def _build_no_family(self) -> List[ft.Control]:
        return [
            ft.Text("Anda belum tergabung dalam keluarga", size=15, color=TEXT_VALUE),
            card(
                ft.Column([self._name_field, primary_button("Buat Keluarga", self._on_create, icon=ft.Icons.GROUP_ADD)], spacing=12),
                title="Buat Keluarga Baru",
            ),
            card(
                ft.Column([self._code_field, primary_button("Gabung", self._on_join, icon=ft.Icons.LOGIN)], spacing=12),
                title="Gabung dengan Kode Invite",
            ),
        ]

    # --- Handlers ---

    async def _on_create(self, e: ft.ControlEvent) -> None:
        error = validate_family_name(self._name_field.value)
        if error:
            show_error(self._error, error)
            self._update()
            return
        async with self.store.app.busy("Membuat keluarga..."):
            created = await self.store.family.create(self._name_field.value or "")
        if not created:
            show_error(self._error, MSG_CREATE_FAILED)
            self._update()
            return
        self._name_field.value = ""
        await self.refresh()

    async def _on_join(self, e: ft.ControlEvent) -> None:
        async with self.store.app.busy("Bergabung dengan keluarga..."):
            result = await self.store.family.join_with_message(self._code_field.value or "")
        if not result.success:
            show_error(self._error, result.error)
            self._update()
            return
        self._code_field.value = ""
        await self.refresh()

    def _ask_leave(self, e: ft.ControlEvent) -> None:
        self._confirm_leave = True
        self._render()

    def _cancel_leave(self, e: ft.ControlEvent) -> None:
        self._confirm_leave = False
        self._render()

    async def _on_leave(self, e: ft.ControlEvent) -> None:
        self._confirm_leave = False
        async with self.store.app.busy("Keluar dari keluarga..."):
            left = await self.store.family.leave()
        if not left:
            show_error(self._error, MSG_LEAVE_FAILED)
            self._render()
            return
        await self.refresh()
