"""Application DTOs."""

from src.application.dtos.auth_dtos import IssuedSession

__all__ = ["IssuedSession"]
