"""Immutable snapshot of the providers currently being probed."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator


class InFlightSet:
    """Copy-on-write set of provider ids.

    Every mutation returns a new instance; existing snapshots never
    change, so a reader holding one always sees a consistent view.
    """

    __slots__ = ("_keys",)

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: FrozenSet[str] = frozenset(keys)

    def with_key(self, provider_id: str) -> "InFlightSet":
        return InFlightSet(self._keys | {provider_id})

    def without_key(self, provider_id: str) -> "InFlightSet":
        """Return a snapshot without *provider_id* (idempotent)."""
        if provider_id not in self._keys:
            return self
        return InFlightSet(self._keys - {provider_id})

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InFlightSet):
            return self._keys == other._keys
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._keys)

    def __repr__(self) -> str:
        return f"InFlightSet({sorted(self._keys)!r})"
