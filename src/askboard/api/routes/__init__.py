"""API routes."""

from . import qa, users

__all__ = ["qa", "users"]
