from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E


Result: TypeAlias = Ok[T] | Err[E]


def errors_of(results: Iterable[Result[T, E]]) -> list[E]:
    """Collect the error values of every ``Err`` in *results*, in order."""
    return [r.error for r in results if isinstance(r, Err)]
