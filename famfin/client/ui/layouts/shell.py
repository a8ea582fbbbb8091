from __future__ import annotations

import logging
from typing import Dict, List, Optional

import flet as ft

from famfin.client.controllers import (
    AuthController,
    DashboardController,
    FamilyController,
    ProfileController,
    SettingsController,
    TransactionFormController,
    TransactionsController,
)
from famfin.client.navigation.guard import Flow
from famfin.client.state import Store
from famfin.client.ui.theme import (
    BG_CARD,
    BG_PAGE,
    BORDER_LIGHT,
    NAV_ACTIVE,
    NAV_INACTIVE,
    NAVY_PRIMARY,
    TEXT_LABEL,
    get_log_color,
)
from famfin.shared.core import events
from famfin.shared.domain.models import Transaction

logger = logging.getLogger(__name__)

TABS: List[dict] = [
    {"id": "dashboard", "label": "Dashboard", "icon": "dashboard"},
    {"id": "transactions", "label": "Transaksi", "icon": "receipt_long"},
    {"id": "family", "label": "Keluarga", "icon": "groups"},
    {"id": "profile", "label": "Profil", "icon": "person"},
]

# Screens pushed on top of a tab keep that tab highlighted
PARENT_TAB: Dict[str, str] = {
    "add_transaction": "transactions",
    "settings": "profile",
}


def apply_shell_theme(page: ft.Page, primary_color: str = NAVY_PRIMARY) -> None:
    page.theme = ft.Theme(
        color_scheme_seed=primary_color,
        visual_density=ft.VisualDensity.COMFORTABLE,
        use_material3=True,
    )
    page.theme_mode = ft.ThemeMode.LIGHT
    page.bgcolor = BG_PAGE
    page.padding = 0


def _nav_destinations(items: List[dict]) -> List[ft.NavigationRailDestination]:
    destinations: List[ft.NavigationRailDestination] = []
    for item in items:
        icon_name = str(item.get("icon", "dashboard")).upper()
        icon = getattr(ft.Icons, icon_name, ft.Icons.DASHBOARD)
        destinations.append(
            ft.NavigationRailDestination(icon=icon, label=item.get("label", ""))
        )
    return destinations


async def build_shell(page: ft.Page, store: Store) -> ft.View:
    """Root view. Mounts nothing while restoring, then the auth or app flow.

    The NavigationGuard decides which flow is mounted; this function only
    renders what the guard reports.
    """
    apply_shell_theme(page, store.config.ui.primary_color)

    def _update() -> None:
        try:
            page.update()
        except RuntimeError:
            # Session destroyed, ignore update
            pass

    # --- Controllers ---
    def navigate(route_id: str) -> None:
        page.run_task(show_route, route_id)

    def open_form(transaction: Optional[Transaction]) -> None:
        form_controller.load(transaction)
        navigate("add_transaction")

    auth_controller = AuthController(store, page, navigate)
    dashboard_controller = DashboardController(store, page)
    transactions_controller = TransactionsController(store, page, open_form)
    form_controller = TransactionFormController(store, page, lambda: navigate("transactions"))
    family_controller = FamilyController(store, page)
    profile_controller = ProfileController(store, page, navigate)
    settings_controller = SettingsController(store, page, navigate)

    refreshable = {
        "dashboard": dashboard_controller,
        "transactions": transactions_controller,
        "family": family_controller,
        "profile": profile_controller,
    }

    # --- UI primitives ---
    root = ft.Container(expand=True)
    content_container = ft.Container(expand=True, bgcolor=BG_PAGE)
    status_text = ft.Text(store.app.status_text.value, color=TEXT_LABEL, size=12)
    busy_ring = ft.ProgressRing(width=12, height=12, stroke_width=2, visible=store.app.is_busy.value)
    log_text = ft.Text("", color=TEXT_LABEL, size=12)

    nav_rail = ft.NavigationRail(label_type=ft.NavigationRailLabelType.ALL)
    nav_rail.bgcolor = BG_CARD
    nav_rail.indicator_color = "rgba(20, 66, 114, 0.15)"
    nav_rail.selected_label_text_style = ft.TextStyle(color=NAV_ACTIVE)
    nav_rail.unselected_label_text_style = ft.TextStyle(color=NAV_INACTIVE)
    nav_rail.min_width = 80
    nav_rail.destinations = _nav_destinations(TABS)
    nav_rail.selected_index = 0

    app_chrome = ft.Row(
        [
            nav_rail,
            ft.VerticalDivider(width=1, color=BORDER_LIGHT),
            ft.Column(
                [
                    content_container,
                    ft.Container(
                        padding=ft.padding.only(left=16, right=16, top=6, bottom=6),
                        border=ft.border.only(top=ft.BorderSide(1, BORDER_LIGHT)),
                        content=ft.Row(
                            [
                                busy_ring,
                                status_text,
                                ft.Container(expand=True),
                                log_text,
                            ],
                            spacing=8,
                        ),
                    ),
                ],
                spacing=0,
                expand=True,
            ),
        ],
        expand=True,
        spacing=0,
    )

    # --- Routing ---

    async def show_route(route_id: str) -> None:
        """Render ``route_id`` if the mounted flow allows it."""
        if route_id not in store.guard.routes():
            logger.warning(f"Route {route_id!r} not reachable in flow {store.guard.state.value}")
            return

        store.app.set_route(route_id)
        if store.guard.state is Flow.UNAUTHENTICATED:
            root.content = auth_controller.build_view(route_id)
            _update()
            return

        tab = PARENT_TAB.get(route_id, route_id)
        ids = [item["id"] for item in TABS]
        if tab in ids:
            nav_rail.selected_index = ids.index(tab)

        if route_id == "add_transaction":
            content_container.content = form_controller.build_view()
        elif route_id == "settings":
            content_container.content = settings_controller.build_view()
        else:
            content_container.content = refreshable[route_id].build_view()
        _update()

        controller = refreshable.get(route_id)
        if controller is not None:
            await controller.refresh()

    async def _on_nav_change(e: ft.ControlEvent) -> None:
        idx = nav_rail.selected_index
        if idx is not None and 0 <= idx < len(TABS):
            await show_route(TABS[idx]["id"])

    nav_rail.on_change = _on_nav_change  # type: ignore[assignment]

    def render_flow(flow: Flow) -> None:
        if flow is Flow.RESTORING:
            root.content = None
            _update()
            return
        if flow is Flow.AUTHENTICATED:
            root.content = app_chrome
        navigate(store.guard.initial_route() or "")

    def _on_flow(previous: Flow, current: Flow) -> None:
        logger.info(f"Shell switching flow {previous.value} -> {current.value}")
        render_flow(current)

    # --- Listener Bindings ---
    store.guard.add_listener(_on_flow)

    def _sync_status() -> None:
        status_text.value = store.app.status_text.value
        _update()

    def _sync_logs() -> None:
        if store.app.logs.value:
            latest = store.app.logs.value[-1]
            log_text.value = latest.get("message", "")
            log_text.color = get_log_color(latest.get("level", "info"))
            _update()

    def _sync_busy() -> None:
        busy_ring.visible = store.app.is_busy.value
        _update()

    store.app.status_text.listen(_sync_status)
    store.app.is_busy.listen(_sync_busy)
    store.app.logs.listen(_sync_logs)

    async def _on_transactions_changed(payload) -> None:
        labels = {"created": "Transaksi ditambahkan", "updated": "Transaksi diperbarui", "deleted": "Transaksi dihapus"}
        await store.app.push_log(labels.get(payload.get("action"), "Transaksi berubah"), "success")

    async def _on_family_changed(payload) -> None:
        labels = {"created": "Keluarga dibuat", "joined": "Bergabung dengan keluarga", "left": "Keluar dari keluarga"}
        await store.app.push_log(labels.get(payload.get("action"), "Keluarga berubah"), "success")

    await store.bus.subscribe(events.TOPIC_TRANSACTIONS_CHANGED, _on_transactions_changed)
    await store.bus.subscribe(events.TOPIC_FAMILY_CHANGED, _on_family_changed)

    # Initial render; the guard may already be past RESTORING
    render_flow(store.guard.state)

    return ft.View(
        route="/",
        controls=[root],
        bgcolor=BG_PAGE,
        padding=0,
    )
