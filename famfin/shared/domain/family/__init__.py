"""Family group membership."""

from .service import FamilyService

__all__ = ["FamilyService"]
