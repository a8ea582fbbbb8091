"""Flow selection between the sign-in screens and the app."""

from .guard import APP_ROUTES, AUTH_ROUTES, Flow, NavigationGuard

__all__ = ["APP_ROUTES", "AUTH_ROUTES", "Flow", "NavigationGuard"]
