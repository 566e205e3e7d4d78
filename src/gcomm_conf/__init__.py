"""Typed parameter resolution for gcomm transport descriptors."""

from gcomm_conf.errors import (
    AboveMaximumError,
    BelowMinimumError,
    ConversionError,
    InvalidValueError,
    MissingParameterError,
    ParameterResolutionError,
)
from gcomm_conf.registry import ParameterEntry, ParameterRegistry, default_registry
from gcomm_conf.resolver import (
    param_in_range,
    param_with_default,
    param_with_default_in_range,
    param_with_default_max,
    param_with_default_min,
    require_param,
    resolve,
)
from gcomm_conf.source import Descriptor, OptionSource
from gcomm_conf.types import ParameterRequest, Resolution, ResolutionFailure, ValueKind

__all__ = [
    "AboveMaximumError",
    "BelowMinimumError",
    "ConversionError",
    "Descriptor",
    "InvalidValueError",
    "MissingParameterError",
    "OptionSource",
    "ParameterEntry",
    "ParameterRegistry",
    "ParameterRequest",
    "ParameterResolutionError",
    "Resolution",
    "ResolutionFailure",
    "ValueKind",
    "default_registry",
    "param_in_range",
    "param_with_default",
    "param_with_default_in_range",
    "param_with_default_max",
    "param_with_default_min",
    "require_param",
    "resolve",
]
