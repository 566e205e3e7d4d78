"""Parameter Registry: documented kind, default and bounds for every known option key.

The registry is descriptive. The resolver never consults it; callers read an
entry's documented default and bounds and pass them to the resolver. Relations
between keys (for example a check period capped at half the suspect timeout)
are advisory and must be computed by the caller with ``ParameterRelation``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from whenever import TimeDelta

from gcomm_conf import keys
from gcomm_conf.converters import convert
from gcomm_conf.errors import DuplicateParameterError, UnknownParameterError
from gcomm_conf.types import ParameterValue, ValueKind


class Subsystem(StrEnum):
    SOCKET = "socket"
    GMCAST = "gmcast"
    EVS = "evs"


class ParameterRelation(BaseModel):
    """A bound expressed as ``reference_key * multiplier / divisor``."""

    model_config = ConfigDict(frozen=True)

    bound: Literal["min", "max"]
    reference_key: str
    multiplier: int = 1
    divisor: int = 1

    def bound_from(self, reference: ParameterValue) -> ParameterValue:
        """Compute the bound from the already-resolved value of ``reference_key``."""
        if isinstance(reference, TimeDelta):
            nanos = reference.in_nanoseconds() * self.multiplier // self.divisor
            return TimeDelta(nanoseconds=nanos)
        if isinstance(reference, bool) or not isinstance(reference, int | float):
            raise TypeError(f"Cannot derive a bound from {type(reference).__name__}")
        if isinstance(reference, int):
            return reference * self.multiplier // self.divisor
        return reference * self.multiplier / self.divisor

    def describe(self) -> str:
        expr = self.reference_key
        if self.multiplier != 1:
            expr += f" * {self.multiplier}"
        if self.divisor != 1:
            expr += f" / {self.divisor}"
        return f"{self.bound} = {expr}"


class ParameterEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    subsystem: Subsystem
    kind: ValueKind
    description: str
    default_value: str | None = None
    min_value: str | None = None
    max_value: str | None = None
    max_length: int | None = None
    relations: tuple[ParameterRelation, ...] = ()

    def typed_default(self) -> ParameterValue | None:
        return None if self.default_value is None else convert(self.default_value, self.kind)

    def typed_min(self) -> ParameterValue | None:
        return None if self.min_value is None else convert(self.min_value, self.kind)

    def typed_max(self) -> ParameterValue | None:
        return None if self.max_value is None else convert(self.max_value, self.kind)


class ParameterRegistry:
    """Registry of all known option keys.

    Once frozen, further registration is rejected and lookups are served from a
    read-only table.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ParameterEntry] = {}
        self._frozen = False

    def register(self, entry: ParameterEntry) -> None:
        if self._frozen:
            raise RuntimeError("Registry is frozen")
        if entry.key in self._entries:
            raise DuplicateParameterError(entry.key)
        self._entries[entry.key] = entry

    def freeze(self) -> ParameterRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, key: str) -> ParameterEntry | None:
        return self._entries.get(key)

    def require(self, key: str) -> ParameterEntry:
        entry = self._entries.get(key)
        if entry is None:
            raise UnknownParameterError(key)
        return entry

    def by_subsystem(self, subsystem: Subsystem) -> list[ParameterEntry]:
        return [e for e in self._entries.values() if e.subsystem == subsystem]

    def all_keys(self) -> list[str]:
        return list(self._entries.keys())

    def all_entries(self) -> list[ParameterEntry]:
        return list(self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def default_registry() -> ParameterRegistry:
    """Process-wide registry, built once at import and frozen."""
    return _DEFAULT_REGISTRY


def build_default_registry() -> ParameterRegistry:
    """Build a registry populated with every documented option key."""
    registry = ParameterRegistry()

    # =========================================================================
    # Socket options
    # =========================================================================

    registry.register(
        ParameterEntry(
            key=keys.TCP_NON_BLOCKING,
            subsystem=Subsystem.SOCKET,
            kind=ValueKind.BOOL,
            description="Whether the socket is put into non-blocking state (0 or 1)",
        )
    )

    # =========================================================================
    # GMCast discovery
    # =========================================================================

    registry.register(
        ParameterEntry(
            key=keys.GMCAST_GROUP,
            subsystem=Subsystem.GMCAST,
            kind=ValueKind.STR,
            description=(
                "Group name. Peers accept a GMCast connection only if the group names match"
            ),
            max_length=16,
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.GMCAST_LISTEN_ADDR,
            subsystem=Subsystem.GMCAST,
            kind=ValueKind.STR,
            description=(
                "Listening address in URI form (e.g. tcp://192.168.3.1:4567). Should be"
                " passed as the last option; when unset, all interfaces on port 4567 are used"
            ),
            default_value="tcp://0.0.0.0:4567",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.GMCAST_MCAST_ADDR,
            subsystem=Subsystem.GMCAST,
            kind=ValueKind.STR,
            description=(
                "Multicast address. The multicast socket binds to the interface of the"
                " listening address"
            ),
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.GMCAST_MCAST_PORT,
            subsystem=Subsystem.GMCAST,
            kind=ValueKind.INT,
            description="Multicast port; defaults to the port of the listening address",
            min_value="0",
            max_value="65535",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.GMCAST_MCAST_TTL,
            subsystem=Subsystem.GMCAST,
            kind=ValueKind.INT,
            description="Multicast packet TTL; 1 limits multicast to a single LAN segment",
            default_value="1",
            min_value="1",
            max_value="255",
        )
    )

    # =========================================================================
    # EVS membership protocol: timeouts and periods
    # =========================================================================

    registry.register(
        ParameterEntry(
            key=keys.EVS_VIEW_FORGET_TIMEOUT,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description=(
                "How long known group views are remembered, used to filter delayed"
                " messages from views that are no longer live"
            ),
            default_value="PT5M",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_SUSPECT_TIMEOUT,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description=(
                "How long a node may stay silent before it is suspected. A node suspected"
                " by the majority is dropped and a new view is formed immediately"
            ),
            default_value="PT5S",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_INACTIVE_TIMEOUT,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description=(
                "Hard limit on node silence. The node is dropped even if it becomes live"
                " while the new group is forming"
            ),
            default_value="PT15S",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_INACTIVE_CHECK_PERIOD,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description="How often node liveness is checked",
            default_value="PT1S",
            min_value="PT0.1S",
            relations=(
                ParameterRelation(bound="max", reference_key=keys.EVS_SUSPECT_TIMEOUT, divisor=2),
            ),
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_CONSENSUS_TIMEOUT,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description=(
                "How long forming a new group is attempted before falling back to"
                " singleton groups"
            ),
            default_value="PT30S",
            relations=(
                ParameterRelation(bound="min", reference_key=keys.EVS_INACTIVE_TIMEOUT),
                ParameterRelation(
                    bound="max", reference_key=keys.EVS_INACTIVE_TIMEOUT, multiplier=5
                ),
            ),
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_INSTALL_TIMEOUT,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description="How long installation of a new view is waited for",
            default_value="PT15S",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_KEEPALIVE_PERIOD,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description=(
                "How often keepalive messages are sent. Liveness is judged from these,"
                " so keep it well below the suspect timeout"
            ),
            default_value="PT1S",
            min_value="PT0.1S",
            relations=(
                ParameterRelation(bound="max", reference_key=keys.EVS_SUSPECT_TIMEOUT, divisor=3),
            ),
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_JOIN_RETRANS_PERIOD,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description="How often join messages are retransmitted during group formation",
            default_value="PT0.3S",
            min_value="PT0.1S",
            relations=(
                ParameterRelation(bound="max", reference_key=keys.EVS_SUSPECT_TIMEOUT, divisor=3),
            ),
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_STATS_REPORT_PERIOD,
            subsystem=Subsystem.EVS,
            kind=ValueKind.DURATION,
            description=(
                "How often statistics are logged; only effective when enabled in the"
                " info log mask"
            ),
            default_value="PT1M",
        )
    )

    # =========================================================================
    # EVS membership protocol: logging, windows and flags
    # =========================================================================

    registry.register(
        ParameterEntry(
            key=keys.EVS_DEBUG_LOG_MASK,
            subsystem=Subsystem.EVS,
            kind=ValueKind.BITMASK,
            description="Bitwise-or of debug flags to log; by default only state information",
            default_value="0x1",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_INFO_LOG_MASK,
            subsystem=Subsystem.EVS,
            kind=ValueKind.BITMASK,
            description="Bitwise-or of info flags to log",
            default_value="0x0",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_SEND_WINDOW,
            subsystem=Subsystem.EVS,
            kind=ValueKind.INT,
            description="Messages that may be in flight without all acknowledgements",
            default_value="32",
            min_value="1",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_USER_SEND_WINDOW,
            subsystem=Subsystem.EVS,
            kind=ValueKind.INT,
            description="Like the send window, but for messages sent from the upper layer",
            default_value="16",
            min_value="1",
        )
    )

    registry.register(
        ParameterEntry(
            key=keys.EVS_USE_AGGREGATE,
            subsystem=Subsystem.EVS,
            kind=ValueKind.BOOL,
            description="Whether several user messages may be aggregated into one message",
            default_value="1",
        )
    )

    return registry


_DEFAULT_REGISTRY = build_default_registry().freeze()
