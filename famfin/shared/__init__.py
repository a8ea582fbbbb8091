"""
famfin Shared Kernel
====================

UI-independent logic for the family finance client.

Architecture:
- core: EventBus, configuration, logging
- infrastructure: Technical adapters (REST API, local storage)
- domain: Business logic (session, transactions, family, form guards)
"""

__version__ = "0.1.0"
__author__ = "famfin Team"

__all__ = []
