"""Auth Controller - login and registration screens.

Neither screen navigates on success: a successful login changes the session,
the NavigationGuard swaps the mounted flow and the shell re-renders.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

import flet as ft

from famfin.client.ui.components.widgets import error_banner, primary_button, show_error
from famfin.client.ui.theme import BG_CARD, BLUE_ACCENT, NAVY_PRIMARY, TEXT_LABEL, TEAL_PRIMARY
from famfin.shared.domain.validation import validate_login, validate_registration

if TYPE_CHECKING:
    from famfin.client.state import Store

logger = logging.getLogger(__name__)

MSG_REGISTERED = "Registrasi berhasil, silakan login"


class AuthController:
    """Controller for the unauthenticated flow."""

    def __init__(self, store: Store, page: ft.Page, navigate: Callable[[str], None]):
        self.store = store
        self.page = page
        self.navigate = navigate
        self._notice: Optional[str] = None
        self._busy = False

        self._error = error_banner()
        self._submit_button: Optional[ft.ElevatedButton] = None

        # Login fields
        self._email = ft.TextField(label="Email", keyboard_type=ft.KeyboardType.EMAIL, autofocus=True)
        self._password = ft.TextField(label="Password", password=True, can_reveal_password=True)

        # Register fields
        self._reg_name = ft.TextField(label="Nama Lengkap")
        self._reg_email = ft.TextField(label="Email", keyboard_type=ft.KeyboardType.EMAIL)
        self._reg_password = ft.TextField(label="Password", password=True, can_reveal_password=True)
        self._reg_confirm = ft.TextField(label="Konfirmasi Password", password=True, can_reveal_password=True)

    def build_view(self, route: str = "login") -> ft.Control:
        show_error(self._error, None)
        if route == "register":
            return self._build_register_view()
        return self._build_login_view()

    # --- Layout ---

    def _frame(self, icon: ft.IconData, title: str, subtitle: str, body: ft.Control) -> ft.Control:
        return ft.Container(
            expand=True,
            alignment=ft.Alignment(0, 0),
            padding=24,
            content=ft.Container(
                width=420,
                bgcolor=BG_CARD,
                border_radius=16,
                padding=28,
                content=ft.Column(
                    [
                        ft.Icon(icon, size=56, color=BLUE_ACCENT),
                        ft.Text(title, size=26, weight=ft.FontWeight.W_700, color=NAVY_PRIMARY),
                        ft.Text(subtitle, size=13, color=TEXT_LABEL),
                        ft.Container(height=8),
                        body,
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    spacing=10,
                ),
            ),
        )

    def _build_login_view(self) -> ft.Control:
        notice = ft.Text(self._notice or "", color=TEAL_PRIMARY, size=13, visible=bool(self._notice))
        self._notice = None
        self._submit_button = primary_button("Login", self._on_login)
        body = ft.Column(
            [
                notice,
                self._email,
                self._password,
                self._error,
                ft.Row([self._submit_button], alignment=ft.MainAxisAlignment.CENTER),
                ft.TextButton("Belum punya akun? Daftar", on_click=lambda e: self.navigate("register")),
            ],
            spacing=12,
            horizontal_alignment=ft.CrossAxisAlignment.STRETCH,
        )
        return self._frame(ft.Icons.ACCOUNT_BALANCE_WALLET, "Keuangan Keluarga", "Masuk untuk melanjutkan", body)

    def _build_register_view(self) -> ft.Control:
        self._submit_button = primary_button("Daftar", self._on_register)
        body = ft.Column(
            [
                self._reg_name,
                self._reg_email,
                self._reg_password,
                self._reg_confirm,
                self._error,
                ft.Row([self._submit_button], alignment=ft.MainAxisAlignment.CENTER),
                ft.TextButton("Sudah punya akun? Login", on_click=lambda e: self.navigate("login")),
            ],
            spacing=12,
            horizontal_alignment=ft.CrossAxisAlignment.STRETCH,
        )
        return self._frame(ft.Icons.PERSON_ADD, "Buat Akun", "Daftar untuk mulai mencatat keuangan", body)

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        if self._submit_button is not None:
            self._submit_button.disabled = busy
        self.page.update()

    # --- Handlers ---

    async def _on_login(self, e: ft.ControlEvent) -> None:
        if self._busy:
            return
        error = validate_login(self._email.value, self._password.value)
        if error:
            show_error(self._error, error)
            self.page.update()
            return

        show_error(self._error, None)
        self._set_busy(True)
        try:
            async with self.store.app.busy("Masuk..."):
                result = await self.store.session.login(self._email.value.strip(), self._password.value)
        finally:
            self._set_busy(False)

        if not result.success:
            show_error(self._error, result.error)
            self.page.update()
            return
        self._password.value = ""
        logger.info("Login form submitted successfully")

    async def _on_register(self, e: ft.ControlEvent) -> None:
        if self._busy:
            return
        error = validate_registration(
            self._reg_name.value,
            self._reg_email.value,
            self._reg_password.value,
            self._reg_confirm.value,
        )
        if error:
            show_error(self._error, error)
            self.page.update()
            return

        show_error(self._error, None)
        self._set_busy(True)
        try:
            async with self.store.app.busy("Mendaftarkan akun..."):
                result = await self.store.session.register(
                    self._reg_name.value.strip(),
                    self._reg_email.value.strip(),
                    self._reg_password.value,
                )
        finally:
            self._set_busy(False)

        if not result.success:
            show_error(self._error, result.error)
            self.page.update()
            return

        self._email.value = self._reg_email.value.strip()
        for field in (self._reg_name, self._reg_email, self._reg_password, self._reg_confirm):
            field.value = ""
        self._notice = MSG_REGISTERED
        self.navigate("login")
