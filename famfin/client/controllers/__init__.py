"""Screen controllers. Each builds one Flet view and talks to the Store."""

from .auth_controller import AuthController
from .dashboard_controller import DashboardController
from .family_controller import FamilyController
from .profile_controller import ProfileController
from .settings_controller import SettingsController
from .transaction_form_controller import TransactionFormController
from .transactions_controller import TransactionsController

__all__ = [
    "AuthController",
    "DashboardController",
    "FamilyController",
    "ProfileController",
    "SettingsController",
    "TransactionFormController",
    "TransactionsController",
]
