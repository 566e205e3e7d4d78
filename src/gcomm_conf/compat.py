"""Environment variables as descriptor options.

Each registry key has a matching ``GCOMM_*`` variable: the key upper-cased
with dots replaced by underscores, e.g. ``evs.suspect_timeout`` is read from
``GCOMM_EVS_SUSPECT_TIMEOUT``.
"""

from __future__ import annotations

from collections.abc import Mapping

from gcomm_conf.registry import ParameterRegistry, default_registry

ENV_PREFIX = "GCOMM_"


def env_var_for(key: str) -> str:
    return ENV_PREFIX + key.replace(".", "_").upper()


def env_var_map(registry: ParameterRegistry | None = None) -> dict[str, str]:
    """Mapping of env var name to parameter key for every registered key."""
    if registry is None:
        registry = default_registry()
    return {env_var_for(key): key for key in registry.all_keys()}


def env_vars_to_options(
    env_vars: Mapping[str, str], registry: ParameterRegistry | None = None
) -> dict[str, str]:
    """Collect descriptor options from environment variables.

    Unknown variables are ignored (they may belong to something else). Values
    are kept as raw text; conversion happens at resolution time.
    """
    mapping = env_var_map(registry)
    return {mapping[name]: value for name, value in env_vars.items() if name in mapping}
