"""Exceptions raised while loading the lookup data."""

from __future__ import annotations


class FinderError(Exception):
    """Base class for fatal server-finder errors."""

    def __init__(self, message: str):
        super().__init__(f"Finder error: {message}")


class LoadError(FinderError):
    """The lookup file is missing, unreadable or malformed."""


class DuplicateAddressError(LoadError):
    """Two records declare the same address."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(
            f"Address {address} already exists in DB - please check data source!"
        )


class DuplicateNameError(LoadError):
    """Two records share the same (type, name) pair."""

    def __init__(self, type: str, name: str):
        self.type = type
        self.name = name
        super().__init__(
            f"Name {name} already exists in type {type} - please check data source!"
        )
