from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

EMPTY_ITEMS = "empty_items"
INTERNAL_ERROR = "internal_error"
INVALID_PAYLOAD = "invalid_payload"


@dataclass
class Result(Generic[T]):
    """Use-case outcome carrying the HTTP status the endpoint should answer with."""

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    status_code: int = 200

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: str = INTERNAL_ERROR, status_code: int = 500) -> "Result[T]":
        return Result(ok=False, error=error, error_code=code, status_code=status_code)

    @staticmethod
    def invalid(code: str) -> "Result[T]":
        """Input rejected before any side effect."""
        return Result(ok=False, error=code, error_code=code, status_code=400)
