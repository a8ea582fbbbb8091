"""Settings Controller - password change, joining a family, logout."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import flet as ft

from famfin.client.ui.components.widgets import card, error_banner, header_band, primary_button, show_error
from famfin.client.ui.theme import BUTTON_DANGER, TEAL_PRIMARY

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)

MSG_PASSWORD_CHANGED = "Password berhasil diubah"
MSG_JOINED = "Berhasil bergabung dengan keluarga"


class SettingsController:
    """Controller for the settings screen, reached from the profile tab."""

    def __init__(self, store: Store, page: ft.Page, navigate: Callable[[str], None]):
        self.store = store
        self.page = page
        self.navigate = navigate

        self._old_password = ft.TextField(label="Password Lama", password=True, can_reveal_password=True)
        self._new_password = ft.TextField(label="Password Baru", password=True, can_reveal_password=True)
        self._confirm_password = ft.TextField(label="Konfirmasi Password Baru", password=True, can_reveal_password=True)
        self._password_error = error_banner()
        self._password_notice = ft.Text("", color=TEAL_PRIMARY, size=13, visible=False)

        self._invite_code = ft.TextField(label="Kode Invite", capitalization=ft.TextCapitalization.CHARACTERS)
        self._join_error = error_banner()
        self._join_notice = ft.Text("", color=TEAL_PRIMARY, size=13, visible=False)

    def build_view(self) -> ft.Control:
        for banner in (self._password_error, self._join_error):
            show_error(banner, None)
        self._password_notice.visible = False
        self._join_notice.visible = False

        password_form = ft.Column(
            [
                self._old_password,
                self._new_password,
                self._confirm_password,
                self._password_error,
                self._password_notice,
                primary_button("Ubah Password", self._on_change_password, icon=ft.Icons.LOCK_RESET),
            ],
            spacing=12,
        )
        join_form = ft.Column(
            [
                self._invite_code,
                self._join_error,
                self._join_notice,
                primary_button("Gabung Keluarga", self._on_join, icon=ft.Icons.GROUP_ADD),
            ],
            spacing=12,
        )

        return ft.Column(
            [
                header_band(
                    "Pengaturan",
                    trailing=ft.IconButton(
                        ft.Icons.ARROW_BACK,
                        icon_color=ft.Colors.WHITE,
                        tooltip="Kembali",
                        on_click=lambda e: self.navigate("profile"),
                    ),
                ),
                ft.Container(
                    expand=True,
                    padding=16,
                    content=ft.Column(
                        [
                            card(password_form, title="Ubah Password"),
                            card(join_form, title="Gabung Keluarga"),
                            ft.OutlinedButton(
                                "Keluar",
                                icon=ft.Icons.LOGOUT,
                                on_click=self._on_logout,
                                style=ft.ButtonStyle(color=BUTTON_DANGER),
                            ),
                        ],
                        spacing=16,
                        scroll=ft.ScrollMode.AUTO,
                    ),
                ),
            ],
            spacing=0,
            expand=True,
        )

    def _update(self) -> None:
        try:
            self.page.update()
        except RuntimeError:
            pass

    async def _on_change_password(self, e: ft.ControlEvent) -> None:
        async with self.store.app.busy("Mengubah password..."):
            result = await self.store.session.change_password(
                self._old_password.value or "",
                self._new_password.value or "",
                self._confirm_password.value or "",
            )
        show_error(self._password_error, result.error)
        self._password_notice.visible = result.success
        if result.success:
            self._password_notice.value = MSG_PASSWORD_CHANGED
            for field in (self._old_password, self._new_password, self._confirm_password):
                field.value = ""
        self._update()

    async def _on_join(self, e: ft.ControlEvent) -> None:
        async with self.store.app.busy("Bergabung dengan keluarga..."):
            result = await self.store.family.join_with_message(self._invite_code.value or "")
        show_error(self._join_error, result.error)
        self._join_notice.visible = result.success
        if result.success:
            self._join_notice.value = MSG_JOINED
            self._invite_code.value = ""
        self._update()

    async def _on_logout(self, e: ft.ControlEvent) -> None:
        await self.store.session.logout()
