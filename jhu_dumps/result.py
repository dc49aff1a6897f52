"""
Two-variant result type returned by the public API.

``Ok`` wraps a value, ``Err`` wraps one of the failures from
``jhu_dumps.exceptions``. Callers branch with ``isinstance`` (or a
``match`` statement) before touching the payload::

    result = resolve_format(date(2020, 3, 1))
    if isinstance(result, Err):
        ...  # result.error is a ResolutionFailure
    layout = result.value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the carried error."""
        raise self.error


Result = Union[Ok[T], Err[E]]
