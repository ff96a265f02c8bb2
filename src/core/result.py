"""Result types for railway-oriented programming.

Operations that can fail for business reasons (bad credentials, expired
codes, exhausted quotas) return a Result instead of raising. Callers
dispatch on the variant with structural pattern matching.

Usage:
    def parse_code(raw: str) -> Result[str, ValidationError]:
        if not raw.isdigit():
            return Failure(error=ValidationError(...))
        return Success(value=raw)

    match parse_code("123456"):
        case Success(value=code):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
