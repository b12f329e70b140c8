"""
Uniform outcome envelope returned by every data-access operation.
"""
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, model_validator

T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
    """Success-discriminated result: ``data`` on success, ``error`` on failure."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_shape(self):
        if self.success and self.error is not None:
            raise ValueError("a successful result carries no error")
        if not self.success:
            if not self.error:
                raise ValueError("a failed result needs an error message")
            if self.data is not None:
                raise ValueError("a failed result carries no data")
        return self

    @classmethod
    def ok(cls, data=None) -> "ServiceResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ServiceResult":
        return cls(success=False, error=error)


def driver_message(exc: Exception) -> str:
    """Text of the database driver error wrapped by a SQLAlchemy exception."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)
