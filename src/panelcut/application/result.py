"""Discriminated result type returned by the optimization entry points.

Validation failures come back as ``Err`` values rather than exceptions so
callers (CLI, web, library users) branch on ``is_ok`` instead of catching.
A plan with unplaced pieces is still an ``Ok``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome.

    Attributes:
        kind: Machine-readable error category (e.g. ``invalid_piece``).
        message: Human-readable error message.
        details: Structured details for API consumers.
    """

    kind: str
    message: str
    details: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ValueError(f"Called unwrap on Err({self.kind}): {self.message}")

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "error_type": self.kind, "details": self.details}


Result = Union[Ok[T], Err]
