"""
Tests for the generic RecordStore

Every operation goes through a MemoryPort so the persisted JSON can be
inspected directly.
"""
import json
import logging

import pytest

from schooldesk.ports import MemoryPort
from schooldesk.storage import RecordStore


class FailingPort(MemoryPort):
    """Port whose writes always fail, like a full disk"""

    def set(self, key, value):
        raise OSError("quota exceeded")


class TestGetAll:
    """Reading a collection"""

    def test_missing_key_is_empty(self, store):
        """Test an unknown collection reads as an empty list"""
        assert store.get_all("students") == []

    def test_corrupt_json_is_empty_and_logged(self, port, store, err_logger):
        """Test a parse failure is swallowed and written to the error log"""
        port.set("students", "{not json")

        assert store.get_all("students") == []
        assert err_logger.path.exists()
        assert "Error parsing students" in err_logger.path.read_text(encoding="utf-8")

    def test_non_list_payload_is_empty(self, port, store):
        """Test a stored object instead of an array reads as empty"""
        port.set("students", json.dumps({"id": "1"}))

        assert store.get_all("students") == []

    def test_non_object_entries_are_dropped_and_logged(self, port, store, caplog):
        """Test stray scalars in a collection are skipped with an error line"""
        port.set("students", json.dumps([{"id": "1"}, 7, "x"]))

        with caplog.at_level(logging.ERROR):
            assert store.get_all("students") == [{"id": "1"}]
        assert "Dropping 2 non-object entries from students" in caplog.text


class TestSetAll:
    """Writing a whole collection"""

    def test_round_trip_preserves_order(self, store):
        """Test set_all followed by get_all returns the same sequence"""
        records = [{"id": str(i), "name": f"n{i}"} for i in (3, 1, 2)]

        assert store.set_all("classes", records) is True
        assert store.get_all("classes") == records

    def test_overwrites_prior_content(self, store):
        """Test set_all replaces the collection rather than merging"""
        store.set_all("classes", [{"id": "1"}, {"id": "2"}])
        store.set_all("classes", [{"id": "9"}])

        assert store.get_all("classes") == [{"id": "9"}]

    def test_unserializable_record_keeps_prior_content(self, port, store):
        """Test a serialization failure drops the write and reports False"""
        store.set_all("classes", [{"id": "1"}])
        before = port.get("classes")

        assert store.set_all("classes", [{"id": "2", "bad": object()}]) is False
        assert port.get("classes") == before

    def test_port_failure_reports_false(self, err_logger):
        """Test a failing port write is caught and reported"""
        store = RecordStore(FailingPort(), err_logger=err_logger)

        assert store.set_all("classes", [{"id": "1"}]) is False
        assert "Error saving classes" in err_logger.path.read_text(encoding="utf-8")


class TestAdd:
    """Adding records"""

    def test_add_then_find_returns_record(self, store):
        """Test find_by_id returns exactly what was added"""
        record = {"id": "s1", "name": "Asha", "classId": "3"}

        assert store.add("students", record) is True
        assert store.find_by_id("students", "s1") == record

    def test_new_records_go_first_by_default(self, store):
        """Test add prepends when new_records_first is on"""
        store.add("notices", {"id": "a"})
        store.add("notices", {"id": "b"})

        assert [r["id"] for r in store.get_all("notices")] == ["b", "a"]

    def test_append_mode(self, port):
        """Test add appends when new_records_first is off"""
        store = RecordStore(port, new_records_first=False)
        store.add("notices", {"id": "a"})
        store.add("notices", {"id": "b"})

        assert [r["id"] for r in store.get_all("notices")] == ["a", "b"]

    def test_duplicate_id_rejected(self, store):
        """Test adding an id that already exists leaves the collection alone"""
        store.add("students", {"id": "s1", "name": "first"})

        assert store.add("students", {"id": "s1", "name": "second"}) is False
        assert store.get_all("students") == [{"id": "s1", "name": "first"}]


class TestUpdateDelete:
    """Updating and deleting by id"""

    @pytest.fixture
    def seeded(self, store):
        store.set_all("students", [{"id": "1", "name": "A"}, {"id": "2", "name": "B"}])
        return store

    def test_update_replaces_in_place(self, seeded):
        """Test update swaps the whole record and keeps its position"""
        assert seeded.update("students", "2", {"id": "2", "name": "Bee"}) is True

        assert seeded.get_all("students") == [{"id": "1", "name": "A"}, {"id": "2", "name": "Bee"}]

    def test_update_keeps_stored_id(self, seeded):
        """Test an update cannot reassign a record's id"""
        seeded.update("students", "1", {"id": "other", "name": "Ay"})

        assert seeded.find_by_id("students", "1") == {"id": "1", "name": "Ay"}
        assert seeded.find_by_id("students", "other") is None

    def test_update_unknown_id_changes_nothing(self, seeded, port):
        """Test update of a missing id reports False and writes nothing"""
        before = port.get("students")

        assert seeded.update("students", "404", {"id": "404", "name": "Ghost"}) is False
        assert port.get("students") == before

    def test_delete_removes_record(self, seeded):
        """Test delete filters out the matching id"""
        assert seeded.delete("students", "1") is True

        assert seeded.get_all("students") == [{"id": "2", "name": "B"}]

    def test_delete_unknown_id_changes_nothing(self, seeded, port):
        """Test delete of a missing id reports False and writes nothing"""
        before = port.get("students")

        assert seeded.delete("students", "404") is False
        assert port.get("students") == before

    def test_find_missing_is_none(self, seeded):
        """Test find_by_id returns None for an unknown id"""
        assert seeded.find_by_id("students", "404") is None


class TestQuery:
    """Ad-hoc filtered reads"""

    def test_query_filters_snapshot(self, store):
        """Test query applies the predicate to every record"""
        store.set_all("expenses", [{"id": "1", "amount": 5}, {"id": "2", "amount": 50}])

        assert store.query("expenses", lambda r: r["amount"] > 10) == [{"id": "2", "amount": 50}]

    def test_clear(self, store):
        """Test clear empties the collection"""
        store.set_all("expenses", [{"id": "1"}])

        assert store.clear("expenses") is True
        assert store.get_all("expenses") == []
