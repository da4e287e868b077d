"""Structured success/failure value for user-facing actions."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import DomainError

T = TypeVar("T")


@dataclass
class ActionResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ActionResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: DomainError) -> "ActionResult[T]":
        return cls(success=False, error=error.message, error_code=error.code)
