"""Tagged success/failure result for batch operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    data: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying the error that caused it."""

    error: Exception

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


Result = Union[Ok[T], Err]
