"""Lookup engine — wire address resolution with inventory matching."""

from __future__ import annotations

from typing import Iterable

from .inventory import InventoryIndex
from .match import MatchEngine
from .models import MatchOutcome
from .resolver import AddressResolver


def lookup_address(
    query: str,
    index: InventoryIndex,
    resolver: AddressResolver | None = None,
) -> MatchOutcome:
    """Look up one address (IP, hostname or URL, possibly defanged).

    Accepts formats like:
        10.0.0.5
        db1.internal.example.com
        https://www.example.com/path
        10[.]0[.]0[.]5
    """
    return lookup_addresses([query], index, resolver)[0]


def lookup_addresses(
    queries: Iterable[str],
    index: InventoryIndex,
    resolver: AddressResolver | None = None,
) -> list[MatchOutcome]:
    """Look up several addresses one after another."""
    if resolver is None:
        resolver = AddressResolver()
    engine = MatchEngine(index)
    return [engine.match(resolver.resolve(q), query=q.strip()) for q in queries]
