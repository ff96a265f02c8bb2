"""Database persistence infrastructure.

- Base model for all database entities
- Database connection and session management
- Transient-fault retry for store operations
- Repository implementations
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.retry import RetryPolicy, StoreRetrier

__all__ = [
    "BaseModel",
    "Database",
    "RetryPolicy",
    "StoreRetrier",
]
