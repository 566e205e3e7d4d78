"""Parameter resolver: typed lookup of one option with default and bounds.

Resolution order:
1. Look up the key. If absent, return the default verbatim (no conversion,
   no bounds check) or fail with ``missing_parameter``.
2. Convert the raw text to the requested kind, failing with ``invalid_value``.
3. Check the converted value against the minimum, then the maximum.

The resolver keeps no state and never mutates the source, so it is safe to
share across threads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gcomm_conf.converters import convert, format_value
from gcomm_conf.errors import ConversionError
from gcomm_conf.types import ParameterRequest, Resolution, ResolutionFailure, T, ValueKind

if TYPE_CHECKING:
    from gcomm_conf.source import OptionSource

logger = logging.getLogger("gcomm_conf.resolver")


def resolve(source: OptionSource, request: ParameterRequest[T]) -> Resolution[T]:
    key = request.key
    raw = source.get_option(key)

    if raw is None:
        if request.default is None:
            return _fail(
                key,
                operation="missing",
                reason="missing_parameter",
                message=f"param {key} not found from uri {source}",
            )
        logger.debug("param %s not set, using default %s", key, request.default)
        return Resolution(key=key, value=request.default, used_default=True)

    try:
        value = convert(raw, request.kind)
    except ConversionError as e:
        return _fail(
            key,
            operation="parse",
            reason="invalid_value",
            message=f"param {key} value '{raw}' is not a valid {request.kind}: {e.reason}",
            raw=raw,
            detail=e.reason,
        )

    if request.min_value is not None and value < request.min_value:  # type: ignore[operator]
        return _fail(
            key,
            operation="bounds",
            reason="below_minimum",
            message=(
                f"param {key} value {_show(value, request.kind)} out of range "
                f"min allowed {_show(request.min_value, request.kind)}"
            ),
            raw=raw,
            value=_show(value, request.kind),
            bound=_show(request.min_value, request.kind),
        )

    if request.max_value is not None and value > request.max_value:  # type: ignore[operator]
        return _fail(
            key,
            operation="bounds",
            reason="above_maximum",
            message=(
                f"param {key} value {_show(value, request.kind)} out of range "
                f"max allowed {_show(request.max_value, request.kind)}"
            ),
            raw=raw,
            value=_show(value, request.kind),
            bound=_show(request.max_value, request.kind),
        )

    logger.debug("param %s resolved to %s", key, raw)
    return Resolution(key=key, value=value)  # type: ignore[arg-type]


def require_param(source: OptionSource, key: str, kind: ValueKind) -> Resolution:
    return resolve(source, ParameterRequest(key, kind))


def param_with_default(
    source: OptionSource, key: str, kind: ValueKind, default: T
) -> Resolution[T]:
    return resolve(source, ParameterRequest(key, kind, default=default))


def param_in_range(
    source: OptionSource, key: str, kind: ValueKind, min_value: T, max_value: T
) -> Resolution[T]:
    return resolve(source, ParameterRequest(key, kind, min_value=min_value, max_value=max_value))


def param_with_default_min(
    source: OptionSource, key: str, kind: ValueKind, default: T, min_value: T
) -> Resolution[T]:
    return resolve(source, ParameterRequest(key, kind, default=default, min_value=min_value))


def param_with_default_max(
    source: OptionSource, key: str, kind: ValueKind, default: T, max_value: T
) -> Resolution[T]:
    return resolve(source, ParameterRequest(key, kind, default=default, max_value=max_value))


def param_with_default_in_range(
    source: OptionSource,
    key: str,
    kind: ValueKind,
    default: T,
    min_value: T,
    max_value: T,
) -> Resolution[T]:
    """Resolve with all constraints. The default itself is never range-checked."""
    return resolve(
        source,
        ParameterRequest(key, kind, default=default, min_value=min_value, max_value=max_value),
    )


def _show(value: object, kind: ValueKind) -> str:
    try:
        return format_value(value, kind)  # type: ignore[arg-type]
    except (TypeError, ValueError, AttributeError):
        return str(value)


def _fail(key: str, **fields: str) -> Resolution:
    failure = ResolutionFailure(key=key, **fields)  # type: ignore[arg-type]
    logger.debug("param %s failed: %s", key, failure.message)
    return Resolution(key=key, failure=failure)
