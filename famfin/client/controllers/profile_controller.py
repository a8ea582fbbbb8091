"""Profile Controller - who is signed in, and the way to settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

import flet as ft

from famfin.client.ui.components.widgets import card, header_band
from famfin.client.ui.theme import BUTTON_DANGER, NAVY_PRIMARY, TEXT_LABEL, TEXT_VALUE
from famfin.shared.domain.formatting import initials, role_label
from famfin.shared.domain.models import FamilyLookup

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)


class ProfileController:
    """Controller for the profile tab."""

    def __init__(self, store: Store, page: ft.Page, navigate: Callable[[str], None]):
        self.store = store
        self.page = page
        self.navigate = navigate
        self._family_text = ft.Text("Memuat...", size=13, color=TEXT_LABEL)

    def build_view(self) -> ft.Control:
        user = self.store.session.user
        name = user.name if user else None
        email = user.email if user else None

        identity = ft.Column(
            [
                ft.CircleAvatar(
                    content=ft.Text(initials(name), size=28, weight=ft.FontWeight.W_700),
                    radius=40,
                    bgcolor=NAVY_PRIMARY,
                    color=ft.Colors.WHITE,
                ),
                ft.Text(name or "-", size=20, weight=ft.FontWeight.W_700, color=TEXT_VALUE),
                ft.Text(email or "", size=13, color=TEXT_LABEL),
                self._family_text,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=6,
        )

        menu = ft.Column(
            [
                ft.ListTile(
                    leading=ft.Icon(ft.Icons.SETTINGS, color=NAVY_PRIMARY),
                    title=ft.Text("Pengaturan"),
                    trailing=ft.Icon(ft.Icons.CHEVRON_RIGHT),
                    on_click=lambda e: self.navigate("settings"),
                ),
                ft.ListTile(
                    leading=ft.Icon(ft.Icons.LOGOUT, color=BUTTON_DANGER),
                    title=ft.Text("Keluar", color=BUTTON_DANGER),
                    on_click=self._on_logout,
                ),
            ],
            spacing=0,
        )

        return ft.Column(
            [
                header_band("Profil"),
                ft.Container(
                    expand=True,
                    padding=16,
                    content=ft.Column([card(identity), card(menu)], spacing=16, scroll=ft.ScrollMode.AUTO),
                ),
            ],
            spacing=0,
            expand=True,
        )

    async def refresh(self) -> None:
        lookup = await self.store.family.fetch()
        self._family_text.value = self._describe_family(lookup)
        try:
            self.page.update()
        except RuntimeError:
            pass

    def _describe_family(self, lookup: FamilyLookup) -> str:
        if lookup.error:
            return lookup.error
        if lookup.family is None:
            return "Belum tergabung dalam keluarga"

        user = self.store.session.user
        role: Optional[str] = None
        for member in lookup.family.members:
            if user is not None and member.id == user.id:
                role = member.role
        suffix = f" ({role_label(role)})" if role else ""
        return f"Keluarga {lookup.family.name}{suffix}"

    async def _on_logout(self, e: ft.ControlEvent) -> None:
        await self.store.session.logout()
