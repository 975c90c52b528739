# salon_booking/core/result.py
"""Explicit success/failure values returned across the scheduling boundary"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from salon_booking.core.errors import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[DomainError] = None

    @classmethod
    def ok(cls, data: T = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: DomainError) -> "OperationResult[T]":
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return the data or raise the carried error"""
        if not self.success:
            raise self.error
        return self.data

    def to_dict(self) -> dict:
        if self.success:
            data = self.data.model_dump(mode="json") if hasattr(self.data, "model_dump") else self.data
            return {"success": True, "data": data}
        return {"success": False, "error": self.error.to_dict()}
