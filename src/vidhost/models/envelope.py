"""Response envelope and error-to-status mapping for outer surfaces."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, computed_field

from vidhost.exceptions import (
    ExternalStorageError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    VidhostError,
)
from vidhost.models.base import VidhostBaseModel

_STATUS_BY_ERROR: tuple[tuple[type[VidhostError], int], ...] = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ExternalStorageError, 502),
    (PersistenceError, 500),
)


def status_for(error: BaseException) -> int:
    """Map an error to the status code an HTTP layer should return."""

    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


class ApiResponse(VidhostBaseModel):
    """Uniform ``{status_code, data, message, success}`` envelope."""

    status_code: int = Field(ge=100, le=599)
    data: Any = None
    message: str = "Success"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return self.status_code < 400

    @classmethod
    def ok(cls, data: Any = None, message: str = "Success", *, status_code: int = 200) -> "ApiResponse":
        return cls(status_code=status_code, data=data, message=message)

    @classmethod
    def from_error(cls, error: BaseException, *, data: Optional[Any] = None) -> "ApiResponse":
        if data is None and isinstance(error, ExternalStorageError) and error.provider_ids:
            data = {"provider_ids": list(error.provider_ids)}
        return cls(status_code=status_for(error), data=data, message=str(error) or type(error).__name__)


__all__ = ["ApiResponse", "status_for"]
