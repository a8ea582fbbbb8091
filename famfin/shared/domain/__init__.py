"""
Shared Domain Module
====================

Business logic for sessions, transactions and family membership.
"""

# Records
from famfin.shared.domain.models import (
    CATEGORIES,
    AuthResult,
    DashboardData,
    Family,
    FamilyLookup,
    FamilyMember,
    MonthlyStats,
    Session,
    Summary,
    Transaction,
    TransactionDraft,
    TransactionType,
    UserProfile,
)

# Form guards
from famfin.shared.domain.validation import FormValidationError, build_transaction_draft

# Session
from famfin.shared.domain.session.store import SessionStore

# Transactions
from famfin.shared.domain.transactions.service import TransactionService

# Family
from famfin.shared.domain.family.service import FamilyService

__all__ = [
    # Records
    "CATEGORIES",
    "AuthResult",
    "DashboardData",
    "Family",
    "FamilyLookup",
    "FamilyMember",
    "MonthlyStats",
    "Session",
    "Summary",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "UserProfile",
    # Form guards
    "FormValidationError",
    "build_transaction_draft",
    # Services
    "SessionStore",
    "TransactionService",
    "FamilyService",
]
