"""Dataclasses for inventory records, resolutions and match outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import LoadError


@dataclass(frozen=True)
class Record:
    """One inventory entry: a named piece of infrastructure."""

    name: str
    type: str  # e.g. "server", "database"
    addresses: tuple[str, ...] = ()
    related: tuple[str, ...] = ()  # "type/name" references
    infrastructure: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.type, self.name)

    @classmethod
    def from_dict(cls, data: Any) -> Record:
        """Build a Record from one decoded JSON object.

        Unknown fields are ignored. Raises LoadError when a known field
        has the wrong shape.
        """
        if not isinstance(data, dict):
            raise LoadError(f"Expected a record object, got {type(data).__name__}")

        for required in ("name", "type"):
            value = data.get(required)
            if not isinstance(value, str) or not value:
                raise LoadError(f"Record is missing a '{required}': {data!r}")

        infrastructure = data.get("infrastructure")
        if infrastructure is not None and not isinstance(infrastructure, str):
            raise LoadError(
                f"Record {data['type']}/{data['name']} has a non-string infrastructure"
            )

        return cls(
            name=data["name"],
            type=data["type"],
            addresses=_string_list(data, "addresses"),
            related=_string_list(data, "related"),
            infrastructure=infrastructure,
        )


def _string_list(data: dict, key: str) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise LoadError(
            f"Record {data['type']}/{data['name']}: '{key}' must be a list of strings"
        )
    return tuple(value)


@dataclass
class ResolutionResult:
    """IP candidates for one input address."""

    ips: list[str] = field(default_factory=list)
    canonical: str | None = None


@dataclass
class RelatedRecord:
    """A relation that resolved to a known record."""

    index: int  # 1-based, per match
    record: Record


@dataclass
class Match:
    """A record owning one of the resolved addresses."""

    record: Record
    address: str  # the IP or canonical address that hit
    related: list[RelatedRecord] = field(default_factory=list)


class MatchStatus(Enum):
    NO_ADDRESS_FOUND = "no_address_found"
    NO_MATCH = "no_match"
    MATCHED = "matched"


@dataclass
class MatchOutcome:
    """Result of looking up one address against the inventory."""

    query: str
    resolution: ResolutionResult
    status: MatchStatus
    matches: list[Match] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status is MatchStatus.MATCHED
