"""Vehicle identity resolution.

A vehicle may carry only a local id (before the store has persisted it)
or both a local and a store id. Every lookup by reference goes through
these two functions.
"""

from __future__ import annotations

from typing import Protocol


class _Identified(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def store_id(self) -> str | None: ...


def resolve_key(record: _Identified) -> str:
    """Canonical key of a record: the store id when present, else the local id."""
    return record.store_id or record.id


def matches(record: _Identified, ref: str) -> bool:
    """Whether *ref* identifies *record*.

    The canonical key wins; the local id is accepted too so references
    handed out before first persistence keep resolving.
    """
    return ref == resolve_key(record) or ref == record.id
