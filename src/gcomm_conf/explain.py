"""Template-based explanation of a single registry entry."""

from __future__ import annotations

from pydantic import BaseModel

from gcomm_conf.registry import ParameterEntry, Subsystem  # noqa: TC001
from gcomm_conf.types import ValueKind  # noqa: TC001


class ParameterExplanation(BaseModel):
    key: str
    subsystem: Subsystem
    kind: ValueKind
    description: str
    default_value: str | None
    bounds: list[str]

    @classmethod
    def from_entry(cls, entry: ParameterEntry) -> ParameterExplanation:
        bounds: list[str] = []
        if entry.min_value is not None:
            bounds.append(f"min = {entry.min_value}")
        if entry.max_value is not None:
            bounds.append(f"max = {entry.max_value}")
        if entry.max_length is not None:
            bounds.append(f"max length = {entry.max_length}")
        bounds.extend(f"{r.describe()} (advisory)" for r in entry.relations)
        return cls(
            key=entry.key,
            subsystem=entry.subsystem,
            kind=entry.kind,
            description=entry.description,
            default_value=entry.default_value,
            bounds=bounds,
        )

    def to_text(self) -> str:
        lines = [
            f"Parameter: {self.key}",
            f"  Subsystem: {self.subsystem.value}",
            f"  Type: {self.kind.value}",
            f"  Default: {self.default_value if self.default_value is not None else '(none)'}",
            f"  Purpose: {self.description}",
        ]
        if self.bounds:
            lines.append("  Bounds:")
            lines.extend(f"    {b}" for b in self.bounds)
        return "\n".join(lines)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)
