"""Exceptions raised when a caller unwraps a failed resolution."""

from __future__ import annotations

from gcomm_conf.types import ResolutionFailure


class ParameterResolutionError(ValueError):
    def __init__(self, failure: ResolutionFailure) -> None:
        self.failure = failure
        self.key = failure.key
        super().__init__(failure.message)


class MissingParameterError(ParameterResolutionError):
    pass


class InvalidValueError(ParameterResolutionError):
    pass


class BelowMinimumError(ParameterResolutionError):
    pass


class AboveMaximumError(ParameterResolutionError):
    pass


_ERRORS: dict[str, type[ParameterResolutionError]] = {
    "missing_parameter": MissingParameterError,
    "invalid_value": InvalidValueError,
    "below_minimum": BelowMinimumError,
    "above_maximum": AboveMaximumError,
}


def error_for(failure: ResolutionFailure) -> ParameterResolutionError:
    return _ERRORS[failure.reason](failure)


class ConversionError(ValueError):
    """Raised by the converters when raw text does not match the target kind."""

    def __init__(self, raw: str, kind: str, reason: str) -> None:
        self.raw = raw
        self.kind = kind
        self.reason = reason
        super().__init__(f"cannot convert '{raw}' to {kind}: {reason}")


class DuplicateParameterError(ValueError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Parameter '{key}' is already registered")


class UnknownParameterError(ValueError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown parameter key '{key}'")
