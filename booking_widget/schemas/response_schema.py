"""Uniform result wrapper returned by every data operation."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Outcome of a remote operation.

    ``error`` is always display-ready text; callers never see raw exceptions.
    """
    data: Optional[T] = None
    error: Optional[str] = None
    success: bool = False

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ApiResponse[T]":
        return cls(data=data, error=None, success=True)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse[T]":
        return cls(data=None, error=error, success=False)
