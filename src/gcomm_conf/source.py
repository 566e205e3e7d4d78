"""Lookup sources: read-only access to the options of a parsed descriptor."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Protocol, runtime_checkable


@runtime_checkable
class OptionSource(Protocol):
    """Anything the resolver can read options from.

    ``get_option`` returns ``None`` when the key is absent. ``str()`` must
    render the whole descriptor for use in error messages.
    """

    def get_option(self, key: str) -> str | None: ...

    def __str__(self) -> str: ...


class Descriptor(Mapping[str, str]):
    """Immutable view over an already-parsed transport descriptor.

    Options are copied on construction, so later changes to the caller's
    mapping are not observed.
    """

    def __init__(
        self,
        options: Mapping[str, str] | None = None,
        *,
        scheme: str = "gcomm",
        authority: str = "",
    ) -> None:
        self._options = MappingProxyType(dict(options or {}))
        self._scheme = scheme
        self._authority = authority

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]], **kwargs: str) -> Descriptor:
        """Build from ordered key/value pairs; the last occurrence of a key wins."""
        options: dict[str, str] = {}
        for key, value in pairs:
            options[key] = value
        return cls(options, **kwargs)

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def authority(self) -> str:
        return self._authority

    def get_option(self, key: str) -> str | None:
        return self._options.get(key)

    def __getitem__(self, key: str) -> str:
        return self._options[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __str__(self) -> str:
        query = "&".join(f"{k}={v}" for k, v in self._options.items())
        uri = f"{self._scheme}://{self._authority}"
        return f"{uri}?{query}" if query else uri

    def __repr__(self) -> str:
        return f"Descriptor({str(self)!r})"
