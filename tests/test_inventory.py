"""Tests for the inventory module."""

import json

import pytest

from serverfinder.errors import (
    DuplicateAddressError,
    DuplicateNameError,
    FinderError,
    LoadError,
)
from serverfinder.inventory import (
    InventoryIndex,
    find_lookup_file,
    load_index,
    load_records,
)
from serverfinder.models import Record


@pytest.fixture
def sample_data():
    return [
        {
            "name": "my-server",
            "infrastructure": "digitalocean",
            "type": "server",
            "addresses": ["123.123.231.132"],
            "related": ["database/my-db"],
        },
        {
            "name": "my-db",
            "infrastructure": "digitalocean",
            "type": "database",
            "addresses": ["10.20.30.40", "my-db-hostname.digitalocean.example.com"],
            "related": ["server/my-server"],
            "notes": "extra fields are ignored",
        },
    ]


@pytest.fixture
def lookup_file(tmp_path, sample_data):
    path = tmp_path / "server-finder-data.json"
    path.write_text(json.dumps(sample_data))
    return path


@pytest.fixture
def no_search_paths(monkeypatch, tmp_path):
    """Point the default search paths at files that do not exist."""
    paths = [tmp_path / "missing-a.json", tmp_path / "missing-b.json"]
    monkeypatch.setattr("serverfinder.inventory.LOOKUP_SEARCH_PATHS", paths)
    return paths


class TestRecordFromDict:
    def test_full_record(self, sample_data):
        record = Record.from_dict(sample_data[1])
        assert record.name == "my-db"
        assert record.type == "database"
        assert record.infrastructure == "digitalocean"
        assert record.addresses == (
            "10.20.30.40",
            "my-db-hostname.digitalocean.example.com",
        )
        assert record.related == ("server/my-server",)
        assert record.key == ("database", "my-db")

    def test_optional_fields(self):
        record = Record.from_dict({"name": "web1", "type": "server"})
        assert record.addresses == ()
        assert record.related == ()
        assert record.infrastructure is None

    @pytest.mark.parametrize(
        "data",
        [
            "not an object",
            {"type": "server", "addresses": []},
            {"name": "", "type": "server"},
            {"name": "web1", "type": 3},
            {"name": "web1", "type": "server", "addresses": "10.0.0.1"},
            {"name": "web1", "type": "server", "related": [1, 2]},
            {"name": "web1", "type": "server", "infrastructure": ["aws"]},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(LoadError):
            Record.from_dict(data)


class TestInventoryIndex:
    def test_lookup_every_address(self, sample_data):
        records = [Record.from_dict(d) for d in sample_data]
        index = InventoryIndex.load(records)

        for record in records:
            for address in record.addresses:
                assert index.lookup_by_address(address) is record

    def test_lookup_by_type_name(self, sample_data):
        index = InventoryIndex.load([Record.from_dict(d) for d in sample_data])
        assert index.lookup_by_type_name("database", "my-db").name == "my-db"
        assert index.lookup_by_type_name("server", "my-db") is None

    def test_unknown_address(self, sample_data):
        index = InventoryIndex.load([Record.from_dict(d) for d in sample_data])
        assert index.lookup_by_address("8.8.8.8") is None

    def test_records_in_order(self, sample_data):
        index = InventoryIndex.load([Record.from_dict(d) for d in sample_data])
        assert [r.name for r in index.records] == ["my-server", "my-db"]
        assert len(index) == 2

    def test_empty(self):
        index = InventoryIndex.load([])
        assert len(index) == 0
        assert index.lookup_by_address("10.0.0.1") is None

    def test_duplicate_address(self):
        records = [
            Record(name="a", type="server", addresses=("10.0.0.1",)),
            Record(name="b", type="server", addresses=("10.0.0.2", "10.0.0.1")),
        ]
        with pytest.raises(DuplicateAddressError) as exc_info:
            InventoryIndex.load(records)
        assert exc_info.value.address == "10.0.0.1"
        assert "10.0.0.1" in str(exc_info.value)

    def test_duplicate_address_within_record(self):
        records = [Record(name="a", type="server", addresses=("10.0.0.1", "10.0.0.1"))]
        with pytest.raises(DuplicateAddressError):
            InventoryIndex.load(records)

    def test_duplicate_hostname_address(self):
        records = [
            Record(name="a", type="server", addresses=("db.example.com",)),
            Record(name="b", type="database", addresses=("db.example.com",)),
        ]
        with pytest.raises(DuplicateAddressError):
            InventoryIndex.load(records)

    def test_duplicate_name(self):
        records = [
            Record(name="web1", type="server", addresses=("10.0.0.1",)),
            Record(name="web1", type="server", addresses=("10.0.0.2",)),
        ]
        with pytest.raises(DuplicateNameError) as exc_info:
            InventoryIndex.load(records)
        assert exc_info.value.type == "server"
        assert exc_info.value.name == "web1"

    def test_same_name_different_type(self):
        records = [
            Record(name="app", type="server", addresses=("10.0.0.1",)),
            Record(name="app", type="database", addresses=("10.0.0.2",)),
        ]
        index = InventoryIndex.load(records)
        assert index.lookup_by_type_name("server", "app").addresses == ("10.0.0.1",)
        assert index.lookup_by_type_name("database", "app").addresses == ("10.0.0.2",)

    def test_errors_are_finder_errors(self):
        assert issubclass(DuplicateAddressError, FinderError)
        assert issubclass(DuplicateNameError, LoadError)


class TestLoadRecords:
    def test_load(self, lookup_file):
        records = load_records(lookup_file)
        assert [r.key for r in records] == [
            ("server", "my-server"),
            ("database", "my-db"),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError):
            load_records(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{not json")
        with pytest.raises(LoadError, match="Could not parse"):
            load_records(path)

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "obj.json"
        path.write_text('{"name": "web1"}')
        with pytest.raises(LoadError, match="JSON array"):
            load_records(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("  \n")
        assert load_records(path) == []


class TestFindLookupFile:
    def test_explicit_path(self, lookup_file, no_search_paths):
        assert find_lookup_file(lookup_file) == lookup_file

    def test_explicit_missing_falls_back(self, tmp_path, monkeypatch, lookup_file):
        monkeypatch.setattr(
            "serverfinder.inventory.LOOKUP_SEARCH_PATHS",
            [tmp_path / "missing.json", lookup_file],
        )
        assert find_lookup_file(tmp_path / "other.json") == lookup_file

    def test_search_order(self, tmp_path, monkeypatch):
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"
        first.write_text("[]")
        second.write_text("[]")
        monkeypatch.setattr(
            "serverfinder.inventory.LOOKUP_SEARCH_PATHS", [first, second]
        )
        assert find_lookup_file() == first

    def test_not_found_lists_paths(self, no_search_paths):
        with pytest.raises(LoadError) as exc_info:
            find_lookup_file()
        message = str(exc_info.value)
        assert message.startswith("Finder error: No lookup file found.")
        for path in no_search_paths:
            assert str(path) in message


class TestLoadIndex:
    def test_load_index(self, lookup_file, no_search_paths):
        index = load_index(lookup_file)
        assert index.lookup_by_address("123.123.231.132").name == "my-server"
        assert (
            index.lookup_by_address("my-db-hostname.digitalocean.example.com").name
            == "my-db"
        )
