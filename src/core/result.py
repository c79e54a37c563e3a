"""Success/failure values returned by every fallible operation.

Workflows inspect each result with ``isinstance`` and decide whether to
abort or continue; expected failures are never raised.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from core.exceptions import AppException

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A successful result carrying a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed result carrying the error that caused it."""

    error: AppException

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Success[T], Failure]
