"""Match resolved addresses against the inventory and expand relations."""

from __future__ import annotations

import logging

from .inventory import InventoryIndex
from .models import (
    Match,
    MatchOutcome,
    MatchStatus,
    Record,
    RelatedRecord,
    ResolutionResult,
)

logger = logging.getLogger(__name__)


class MatchEngine:
    """Find the records owning a resolution's addresses."""

    def __init__(self, index: InventoryIndex):
        self.index = index

    def match(
        self, resolution: ResolutionResult, query: str | None = None
    ) -> MatchOutcome:
        """Look up every resolved IP, then the canonical address.

        A record reached through several addresses is reported once, for
        the first address that hit it.
        """
        if query is None:
            query = resolution.canonical or ""

        if not resolution.ips:
            return MatchOutcome(
                query=query,
                resolution=resolution,
                status=MatchStatus.NO_ADDRESS_FOUND,
            )

        candidates = list(resolution.ips)
        if resolution.canonical is not None and resolution.canonical not in candidates:
            candidates.append(resolution.canonical)

        matches: list[Match] = []
        seen: set[tuple[str, str]] = set()
        for address in candidates:
            record = self.index.lookup_by_address(address)
            if record is None or record.key in seen:
                continue
            seen.add(record.key)
            matches.append(
                Match(record=record, address=address, related=self.related(record))
            )

        logger.debug(
            "match query=%s candidates=%d hits=%d",
            query,
            len(candidates),
            len(matches),
        )

        if not matches:
            return MatchOutcome(
                query=query, resolution=resolution, status=MatchStatus.NO_MATCH
            )

        return MatchOutcome(
            query=query,
            resolution=resolution,
            status=MatchStatus.MATCHED,
            matches=matches,
        )

    def related(self, record: Record) -> list[RelatedRecord]:
        """Resolve a record's ``type/name`` references.

        Tokens without a slash and references to unknown records are skipped.
        """
        result: list[RelatedRecord] = []
        for token in record.related:
            type_, sep, name = token.partition("/")
            if not sep:
                continue
            target = self.index.lookup_by_type_name(type_, name)
            if target is None:
                continue
            result.append(RelatedRecord(index=len(result) + 1, record=target))
        return result
