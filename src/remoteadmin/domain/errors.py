"""
Error taxonomy for remote administration operations.

Every failure surfaced by the package is an AdminError tagged with an
ErrorKind, so callers can tell a rejected input from an unreachable host,
a failed read, or a write that may have left the host partially changed.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(Enum):
    """Step class an error is attributable to."""

    VALIDATION = "Validation"
    CONNECTION = "Connection"
    QUERY = "Query"
    MUTATION = "Mutation"


class ErrorRecord(BaseModel):
    """
    Serializable view of an AdminError.

    Carried inside result models so that failures travel with the data
    they relate to instead of being raised past the caller.
    """

    kind: ErrorKind = Field(..., description="Error classification")
    message: str = Field(..., description="Human-readable summary")
    error_text: str = Field("", description="Underlying transport/engine error text")
    error_name: str = Field("", description="Class name of the underlying error")
    step: Optional[str] = Field(None, description="Operation step that failed")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        text = f"[{self.kind.value}] {self.message}"
        if self.error_text and self.error_text != self.message:
            text += f": {self.error_text}"
        return text


class AdminError(Exception):
    """
    Tagged error raised by clients, runners and input validation.

    Args:
        kind: Error classification
        message: Human-readable summary
        cause: Underlying exception, if any
        step: Name of the operation step that failed
        detail: Error text when there is no exception to carry
            (e.g. stderr of a failed remote script)
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: Optional[BaseException] = None,
        step: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause
        self.step = step
        self.detail = detail

    @classmethod
    def validation(cls, message: str, step: Optional[str] = None) -> AdminError:
        return cls(ErrorKind.VALIDATION, message, step=step)

    @classmethod
    def connection(
        cls,
        message: str,
        cause: Optional[BaseException] = None,
        detail: Optional[str] = None,
    ) -> AdminError:
        return cls(ErrorKind.CONNECTION, message, cause=cause, step="connect", detail=detail)

    @classmethod
    def query(
        cls,
        message: str,
        cause: Optional[BaseException] = None,
        step: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> AdminError:
        return cls(ErrorKind.QUERY, message, cause=cause, step=step, detail=detail)

    @classmethod
    def mutation(
        cls,
        message: str,
        cause: Optional[BaseException] = None,
        step: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> AdminError:
        return cls(ErrorKind.MUTATION, message, cause=cause, step=step, detail=detail)

    @property
    def error_text(self) -> str:
        """Text of the underlying error, falling back to the message."""
        if self.detail:
            return self.detail
        if self.cause is not None:
            return str(self.cause) or type(self.cause).__name__
        return self.message

    @property
    def error_name(self) -> str:
        """Class name of the underlying error."""
        if self.cause is not None:
            return type(self.cause).__name__
        return f"{self.kind.value}Error"

    def to_record(self) -> ErrorRecord:
        return ErrorRecord(
            kind=self.kind,
            message=self.message,
            error_text=self.error_text,
            error_name=self.error_name,
            step=self.step,
        )

    def __str__(self) -> str:
        return str(self.to_record())
