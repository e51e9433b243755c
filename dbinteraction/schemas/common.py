"""Response envelope schemas - uniform result contract for every data-access call."""

from typing import Generic, TypeVar

from pydantic import BaseModel, model_validator

from dbinteraction.core.errors import DataAccessError, ErrorKind

T = TypeVar("T")

NO_ID = -1


class GenericResponse(BaseModel):
    """Acknowledgement for insert/delete. id == -1 means no id was produced."""

    id: int = NO_ID
    status_data: str | None = None


class ResponseEnvelope(BaseModel, Generic[T]):
    """JSON envelope for all data-access results.

    data is None when no rows came back or the call failed; callers must check
    error (or ok), since a missing exception does not imply success.
    """

    data: list[T] | None = None
    count: int = 0
    error: str | None = None
    error_code: ErrorKind | None = None

    @model_validator(mode="after")
    def check_error_excludes_data(self):
        if self.error is not None and self.data is not None:
            raise ValueError("an envelope carrying an error cannot carry data")
        if self.count < 0:
            raise ValueError("count must be >= 0")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_rows(cls, rows: list) -> "ResponseEnvelope":
        """Success with N rows; zero rows leave data unset."""
        return cls(data=rows or None, count=len(rows))

    @classmethod
    def from_error(cls, exc: DataAccessError) -> "ResponseEnvelope":
        return cls(error=str(exc) or exc.kind.value, error_code=exc.kind)
