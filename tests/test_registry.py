"""Unit tests for the parameter registry, explanations and env var mapping."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError
from whenever import TimeDelta

from gcomm_conf import keys
from gcomm_conf.compat import env_var_for, env_var_map, env_vars_to_options
from gcomm_conf.errors import DuplicateParameterError, UnknownParameterError
from gcomm_conf.explain import ParameterExplanation
from gcomm_conf.registry import (
    ParameterEntry,
    ParameterRegistry,
    ParameterRelation,
    Subsystem,
    build_default_registry,
    default_registry,
)
from gcomm_conf.resolver import param_with_default_in_range
from gcomm_conf.source import Descriptor
from gcomm_conf.types import ValueKind


class TestDefaultRegistry:
    def test_every_option_key_registered(self):
        registry = build_default_registry()
        option_keys = [
            value
            for name, value in vars(keys).items()
            if name.isupper() and isinstance(value, str) and not name.endswith("_SCHEME")
        ]
        assert sorted(option_keys) == sorted(registry.all_keys())

    def test_keys_carry_subsystem_prefix(self):
        for entry in build_default_registry().all_entries():
            assert entry.key.startswith(f"{entry.subsystem.value}.")

    def test_documented_defaults_convert(self):
        for entry in build_default_registry().all_entries():
            if entry.default_value is not None:
                entry.typed_default()
            entry.typed_min()
            entry.typed_max()

    def test_documented_values(self):
        registry = build_default_registry()
        assert registry.require(keys.EVS_SUSPECT_TIMEOUT).typed_default() == TimeDelta(seconds=5)
        assert registry.require(keys.EVS_INACTIVE_TIMEOUT).typed_default() == TimeDelta(seconds=15)
        assert registry.require(keys.EVS_VIEW_FORGET_TIMEOUT).typed_default() == TimeDelta(
            minutes=5
        )
        assert registry.require(keys.EVS_JOIN_RETRANS_PERIOD).typed_default() == TimeDelta(
            milliseconds=300
        )
        assert registry.require(keys.EVS_SEND_WINDOW).typed_default() == 32
        assert registry.require(keys.EVS_USER_SEND_WINDOW).typed_default() == 16
        assert registry.require(keys.EVS_USE_AGGREGATE).typed_default() is True
        assert registry.require(keys.GMCAST_GROUP).max_length == 16

    def test_schemes(self):
        assert keys.SCHEMES == ("tcp", "udp", "gmcast", "evs", "pc")

    def test_by_subsystem(self):
        registry = build_default_registry()
        assert [e.key for e in registry.by_subsystem(Subsystem.SOCKET)] == [keys.TCP_NON_BLOCKING]
        assert len(registry.by_subsystem(Subsystem.GMCAST)) == 5

    def test_default_registry_is_shared_and_frozen(self):
        registry = default_registry()
        assert registry is default_registry()
        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.register(
                ParameterEntry(
                    key="evs.extra", subsystem=Subsystem.EVS, kind=ValueKind.INT, description=""
                )
            )

    def test_default_registry_is_built_once_across_threads(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            seen = list(pool.map(lambda _: default_registry(), range(32)))
        assert all(r is seen[0] for r in seen)
        assert seen[0].frozen

    def test_shared_entries_are_immutable(self):
        entry = default_registry().require(keys.EVS_SUSPECT_TIMEOUT)
        with pytest.raises(ValidationError):
            entry.default_value = "PT99S"
        assert isinstance(entry.relations, tuple)
        assert default_registry().require(keys.EVS_SUSPECT_TIMEOUT).default_value == "PT5S"

    def test_shared_relations_are_immutable(self):
        entry = default_registry().require(keys.EVS_INACTIVE_CHECK_PERIOD)
        assert isinstance(entry.relations, tuple)
        with pytest.raises(ValidationError):
            entry.relations[0].divisor = 100
        assert entry.relations[0].divisor == 2


class TestRegistryOperations:
    def _entry(self, key="evs.x"):
        return ParameterEntry(key=key, subsystem=Subsystem.EVS, kind=ValueKind.INT, description="x")

    def test_duplicate_rejected(self):
        registry = ParameterRegistry()
        registry.register(self._entry())
        with pytest.raises(DuplicateParameterError):
            registry.register(self._entry())

    def test_unknown_key(self):
        registry = ParameterRegistry()
        assert registry.get("evs.x") is None
        assert "evs.x" not in registry
        with pytest.raises(UnknownParameterError):
            registry.require("evs.x")


class TestRelations:
    def test_fraction_of_duration(self):
        relation = ParameterRelation(bound="max", reference_key=keys.EVS_SUSPECT_TIMEOUT, divisor=2)
        assert relation.bound_from(TimeDelta(seconds=5)) == TimeDelta(milliseconds=2500)
        assert relation.describe() == "max = evs.suspect_timeout / 2"

    def test_multiple_of_duration(self):
        relation = ParameterRelation(
            bound="max", reference_key=keys.EVS_INACTIVE_TIMEOUT, multiplier=5
        )
        assert relation.bound_from(TimeDelta(seconds=15)) == TimeDelta(seconds=75)

    def test_numeric_reference(self):
        relation = ParameterRelation(bound="max", reference_key="evs.send_window", divisor=2)
        assert relation.bound_from(32) == 16
        assert relation.bound_from(3.0) == 1.5

    def test_rejects_non_numeric_reference(self):
        relation = ParameterRelation(bound="max", reference_key="gmcast.group")
        with pytest.raises(TypeError):
            relation.bound_from("group")
        with pytest.raises(TypeError):
            relation.bound_from(True)

    def test_caller_computes_bounds_before_resolving(self):
        registry = default_registry()
        source = Descriptor(
            {keys.EVS_SUSPECT_TIMEOUT: "PT1S", keys.EVS_INACTIVE_CHECK_PERIOD: "PT0.6S"}
        )
        entry = registry.require(keys.EVS_INACTIVE_CHECK_PERIOD)
        (relation,) = entry.relations
        max_value = relation.bound_from(TimeDelta(seconds=1))

        result = param_with_default_in_range(
            source,
            entry.key,
            entry.kind,
            entry.typed_default(),
            entry.typed_min(),
            max_value,
        )
        assert result.failure.reason == "above_maximum"
        assert result.failure.bound == "PT0.5S"


class TestExplain:
    def test_text(self):
        entry = default_registry().require(keys.EVS_KEEPALIVE_PERIOD)
        text = ParameterExplanation.from_entry(entry).to_text()
        assert "Parameter: evs.keepalive_period" in text
        assert "Default: PT1S" in text
        assert "min = PT0.1S" in text
        assert "max = evs.suspect_timeout / 3 (advisory)" in text

    def test_json(self):
        entry = default_registry().require(keys.GMCAST_MCAST_ADDR)
        data = json.loads(ParameterExplanation.from_entry(entry).to_json())
        assert data["key"] == "gmcast.mcast_addr"
        assert data["default_value"] is None
        assert data["kind"] == "str"


class TestEnvVars:
    def test_name_mapping(self):
        assert env_var_for("evs.suspect_timeout") == "GCOMM_EVS_SUSPECT_TIMEOUT"
        assert env_var_map()["GCOMM_SOCKET_NON_BLOCKING"] == "socket.non_blocking"

    def test_unknown_vars_ignored(self):
        options = env_vars_to_options(
            {"GCOMM_EVS_SEND_WINDOW": "8", "HOME": "/root", "GCOMM_NOT_A_KEY": "1"}
        )
        assert options == {"evs.send_window": "8"}

    def test_values_kept_as_raw_text(self):
        options = env_vars_to_options({"GCOMM_EVS_USE_AGGREGATE": "yes"})
        assert options == {"evs.use_aggregate": "yes"}

    def test_empty_registry_maps_nothing(self):
        assert env_vars_to_options({"GCOMM_EVS_SEND_WINDOW": "8"}, ParameterRegistry()) == {}
