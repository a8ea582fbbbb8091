"""Reusable Flet building blocks shared by the controllers."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import flet as ft

from famfin.client.ui.theme import (
    BG_CARD,
    BG_ERROR,
    BORDER_LIGHT,
    BUTTON_PRIMARY,
    NAVY_DARK,
    TEXT_ERROR,
    TEXT_LABEL,
    TEXT_SECTION_HEADER,
    TEXT_TITLE,
    TEXT_VALUE,
    amount_background,
    amount_color,
)
from famfin.shared.domain.formatting import category_icon, format_currency, format_date
from famfin.shared.domain.models import Transaction


def resolve_icon(name: str) -> ft.IconData:
    return getattr(ft.Icons, str(name).upper(), ft.Icons.MORE_HORIZ)


def header_band(title: str, subtitle: str = "", trailing: Optional[ft.Control] = None) -> ft.Container:
    """Navy band at the top of every app screen."""
    texts: List[ft.Control] = [ft.Text(title, size=22, weight=ft.FontWeight.W_700, color=TEXT_TITLE)]
    if subtitle:
        texts.append(ft.Text(subtitle, size=13, color=TEXT_TITLE, opacity=0.8))
    row: List[ft.Control] = [ft.Column(texts, spacing=4, expand=True)]
    if trailing is not None:
        row.append(trailing)
    return ft.Container(
        bgcolor=NAVY_DARK,
        padding=ft.padding.only(left=20, right=20, top=24, bottom=20),
        content=ft.Row(row, vertical_alignment=ft.CrossAxisAlignment.CENTER),
    )


def card(content: ft.Control, title: str = "") -> ft.Container:
    controls: List[ft.Control] = []
    if title:
        controls.append(ft.Text(title, size=16, weight=ft.FontWeight.W_600, color=TEXT_SECTION_HEADER))
    controls.append(content)
    return ft.Container(
        bgcolor=BG_CARD,
        border=ft.border.all(1, BORDER_LIGHT),
        border_radius=12,
        padding=16,
        content=ft.Column(controls, spacing=12),
    )


def error_banner() -> ft.Container:
    """Hidden inline error box; fill with ``show_error``."""
    return ft.Container(
        visible=False,
        bgcolor=BG_ERROR,
        border_radius=8,
        padding=10,
        content=ft.Text("", color=TEXT_ERROR, size=13),
    )


def show_error(banner: ft.Container, message: Optional[str]) -> None:
    banner.visible = bool(message)
    banner.content.value = message or ""  # type: ignore[union-attr]


def primary_button(label: str, on_click: Callable, icon: Optional[ft.IconData] = None, color: str = BUTTON_PRIMARY) -> ft.ElevatedButton:
    return ft.ElevatedButton(
        label,
        icon=icon,
        on_click=on_click,
        bgcolor=color,
        color=ft.Colors.WHITE,
        height=46,
    )


def choice_row(
    options: Sequence[Tuple[str, str]],
    selected: str,
    on_select: Callable[[str], None],
    accent: str = BUTTON_PRIMARY,
) -> ft.Row:
    """Row of pill buttons where exactly one option is highlighted."""
    chips: List[ft.Control] = []
    for key, label in options:
        is_selected = key == selected

        def make_callback(k):
            return lambda e: on_select(k)

        chips.append(
            ft.Container(
                padding=ft.padding.symmetric(horizontal=14, vertical=8),
                border_radius=20,
                bgcolor=accent if is_selected else BG_CARD,
                border=ft.border.all(1, accent if is_selected else BORDER_LIGHT),
                on_click=make_callback(key),
                ink=True,
                content=ft.Text(label, size=13, color=ft.Colors.WHITE if is_selected else TEXT_VALUE),
            )
        )
    return ft.Row(chips, spacing=8, wrap=True)


def transaction_tile(
    transaction: Transaction,
    trailing: Optional[List[ft.Control]] = None,
    show_creator: bool = True,
) -> ft.Container:
    sign = "+" if transaction.type.value == "income" else "-"
    subtitle = format_date(transaction.date)
    if show_creator:
        subtitle = f"{transaction.creator_name} • {subtitle}"

    row: List[ft.Control] = [
        ft.Container(
            width=40,
            height=40,
            border_radius=20,
            bgcolor=amount_background(transaction.type),
            alignment=ft.Alignment(0, 0),
            content=ft.Icon(resolve_icon(category_icon(transaction.category)), color=amount_color(transaction.type), size=20),
        ),
        ft.Column(
            [
                ft.Text(transaction.description, size=14, weight=ft.FontWeight.W_500, color=TEXT_VALUE),
                ft.Text(f"{transaction.category} • {subtitle}", size=12, color=TEXT_LABEL),
            ],
            spacing=2,
            expand=True,
        ),
        ft.Text(
            f"{sign}{format_currency(transaction.amount)}",
            size=14,
            weight=ft.FontWeight.W_600,
            color=amount_color(transaction.type),
        ),
    ]
    if trailing:
        row.extend(trailing)

    return ft.Container(
        padding=ft.padding.symmetric(horizontal=4, vertical=8),
        border=ft.border.only(bottom=ft.BorderSide(1, BORDER_LIGHT)),
        content=ft.Row(row, spacing=12, vertical_alignment=ft.CrossAxisAlignment.CENTER),
    )


def empty_state(message: str, icon: ft.IconData = ft.Icons.INBOX) -> ft.Container:
    return ft.Container(
        padding=24,
        alignment=ft.Alignment(0, 0),
        content=ft.Column(
            [ft.Icon(icon, size=40, color=TEXT_LABEL), ft.Text(message, color=TEXT_LABEL, size=13)],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=8,
        ),
    )


def loading_indicator() -> ft.Container:
    return ft.Container(
        padding=24,
        alignment=ft.Alignment(0, 0),
        content=ft.ProgressRing(width=28, height=28, stroke_width=3, color=BUTTON_PRIMARY),
    )
