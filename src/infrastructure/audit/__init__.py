"""Audit trail adapters."""

from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter

__all__ = ["PostgresAuditAdapter"]
