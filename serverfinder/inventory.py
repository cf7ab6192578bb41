"""Lookup file discovery, JSON loading and the in-memory inventory index."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from .config import LOOKUP_SEARCH_PATHS
from .errors import DuplicateAddressError, DuplicateNameError, LoadError
from .models import Record

logger = logging.getLogger(__name__)


def find_lookup_file(explicit: str | Path | None = None) -> Path:
    """Return the first existing lookup file.

    Tries *explicit* (when given and present), then LOOKUP_SEARCH_PATHS
    in order. Raises LoadError listing every tried path.
    """
    paths: list[Path] = []
    if explicit is not None:
        paths.append(Path(explicit).expanduser())
    paths.extend(LOOKUP_SEARCH_PATHS)

    for path in paths:
        if path.is_file():
            logger.debug("lookup_file path=%s", path)
            return path

    raise LoadError(
        "No lookup file found. (Tried paths: "
        + "; ".join(str(p) for p in paths)
        + ")"
    )


def load_records(path: str | Path) -> list[Record]:
    """Read the lookup file and decode its records.

    An empty file is an empty inventory.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Could not read lookup file {path}: {e}") from e

    if not text.strip():
        logger.warning("Lookup file %s is empty", path)
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Could not parse lookup file {path}: {e}") from e

    if not isinstance(data, list):
        raise LoadError(f"Lookup file {path} must contain a JSON array of records")

    return [Record.from_dict(item) for item in data]


class InventoryIndex:
    """Address and (type, name) indices over an immutable record list.

    Built once; lookups never mutate it.
    """

    def __init__(self, records: Iterable[Record]):
        self._records: list[Record] = []
        self._by_address: dict[str, Record] = {}
        self._by_name: dict[tuple[str, str], Record] = {}

        for record in records:
            for address in record.addresses:
                if address in self._by_address:
                    raise DuplicateAddressError(address)
                self._by_address[address] = record

            if record.key in self._by_name:
                raise DuplicateNameError(record.type, record.name)
            self._by_name[record.key] = record

            self._records.append(record)

    @classmethod
    def load(cls, records: Iterable[Record]) -> InventoryIndex:
        """Build the index, raising DuplicateAddressError / DuplicateNameError."""
        index = cls(records)
        logger.debug(
            "inventory_loaded records=%d addresses=%d",
            len(index._records),
            len(index._by_address),
        )
        return index

    @classmethod
    def from_file(cls, path: str | Path) -> InventoryIndex:
        return cls.load(load_records(path))

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def lookup_by_address(self, address: str) -> Record | None:
        return self._by_address.get(address)

    def lookup_by_type_name(self, type: str, name: str) -> Record | None:
        return self._by_name.get((type, name))


def load_index(lookup_file: str | Path | None = None) -> InventoryIndex:
    """Locate, read and index the lookup file."""
    return InventoryIndex.from_file(find_lookup_file(lookup_file))
