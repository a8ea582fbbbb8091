"""Authentication session lifecycle."""

from .store import SessionStore

__all__ = ["SessionStore"]
