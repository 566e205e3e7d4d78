"""Value kinds, parameter requests and resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Generic, Literal, TypeVar

from pydantic import BaseModel
from whenever import TimeDelta

if TYPE_CHECKING:
    from gcomm_conf.errors import ParameterResolutionError


class ValueKind(StrEnum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DURATION = "duration"
    BITMASK = "bitmask"
    STR = "str"


ParameterValue = int | float | bool | str | TimeDelta

T = TypeVar("T", int, float, bool, str, TimeDelta)


@dataclass(frozen=True)
class ParameterRequest(Generic[T]):
    """A single parameter lookup: key, target kind and optional constraints.

    ``None`` means "not supplied" for default, minimum and maximum.
    """

    key: str
    kind: ValueKind
    default: T | None = None
    min_value: T | None = None
    max_value: T | None = None


class ResolutionFailure(BaseModel):
    """Why a parameter could not be resolved."""

    key: str
    operation: Literal["missing", "parse", "bounds"]
    reason: Literal["missing_parameter", "invalid_value", "below_minimum", "above_maximum"]
    message: str
    raw: str | None = None
    detail: str | None = None
    value: str | None = None
    bound: str | None = None


@dataclass(frozen=True)
class Resolution(Generic[T]):
    """Outcome of resolving one parameter: a typed value or a failure, never both."""

    key: str
    value: T | None = None
    failure: ResolutionFailure | None = None
    used_default: bool = False

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        if self.failure is not None:
            from gcomm_conf.errors import error_for

            exc: ParameterResolutionError = error_for(self.failure)
            raise exc
        return self.value  # type: ignore[return-value]

    def value_or(self, fallback: T) -> T:
        return fallback if self.failure is not None else self.value  # type: ignore[return-value]
