"""Tests for the EntryStore and its storage backends."""

import json
import pytest
from decimal import Decimal

from simplifinance.entry_store import EntryStore
from simplifinance.models.audit import AuditEventType
from simplifinance.models.entry import EntryType
from simplifinance.services.storage import (
    InMemoryEntryStorage,
    JsonFileEntryStorage,
    NotFoundError,
    SnapshotCorruptError,
    StorageError,
)


LEGACY_ENTRY = {
    "id": "legacy-1",
    "type": "INCOME",
    "description": "Salário",
    "amount": 5000,
    "date": "2025-03-05T12:00:00.000Z",
    "isPaid": True,
    "month": 2,
    "year": 2025,
}


@pytest.fixture
def snapshot_path(tmp_path):
    return tmp_path / "data" / "snapshot.json"


@pytest.fixture
def file_storage(snapshot_path):
    return JsonFileEntryStorage(path=snapshot_path, storage_key="finance_entries", save_attempts=2)


class TestJsonFileEntryStorage:
    """Tests for the local snapshot file."""

    def test_missing_file_is_empty(self, file_storage):
        assert file_storage.load_all() == []

    def test_round_trip(self, file_storage, snapshot_path, make_entry):
        entries = [
            make_entry(type=EntryType.FIXED_EXPENSE, description="Aluguel", amount="1500.75"),
            make_entry(description="Mercado", original_id="x", is_replicated=True),
        ]
        file_storage.save_all(entries)

        reloaded = JsonFileEntryStorage(path=snapshot_path).load_all()

        assert [e.model_dump() for e in reloaded] == [e.model_dump() for e in entries]
        assert reloaded[0].amount == Decimal("1500.75")

    def test_snapshot_is_key_value_document(self, file_storage, snapshot_path, make_entry):
        file_storage.save_all([make_entry()])
        document = json.loads(snapshot_path.read_text(encoding="utf-8"))
        assert list(document) == ["finance_entries"]
        assert document["finance_entries"][0]["isPaid"] is False

    def test_other_keys_preserved(self, file_storage, snapshot_path, make_entry):
        snapshot_path.parent.mkdir(parents=True)
        snapshot_path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

        file_storage.save_all([make_entry()])

        document = json.loads(snapshot_path.read_text(encoding="utf-8"))
        assert document["theme"] == "dark"
        assert len(document["finance_entries"]) == 1

    def test_loads_legacy_string_value(self, file_storage, snapshot_path):
        snapshot_path.parent.mkdir(parents=True)
        snapshot_path.write_text(
            json.dumps({"finance_entries": json.dumps([LEGACY_ENTRY])}),
            encoding="utf-8",
        )
        entries = file_storage.load_all()
        assert len(entries) == 1
        assert entries[0].id == "legacy-1"
        assert entries[0].is_paid is True
        assert entries[0].amount == Decimal("5000")

    @pytest.mark.parametrize("content", [
        "{not json",
        "[1, 2, 3]",
        json.dumps({"finance_entries": {"id": "x"}}),
        json.dumps({"finance_entries": [{"id": "x", "type": "LOAN"}]}),
    ])
    def test_corrupt_snapshot_raises(self, file_storage, snapshot_path, content):
        snapshot_path.parent.mkdir(parents=True)
        snapshot_path.write_text(content, encoding="utf-8")
        with pytest.raises(SnapshotCorruptError):
            file_storage.load_all()

    def test_save_replaces_corrupt_document(self, file_storage, snapshot_path, make_entry):
        snapshot_path.parent.mkdir(parents=True)
        snapshot_path.write_text("{not json", encoding="utf-8")

        file_storage.save_all([make_entry()])

        assert len(file_storage.load_all()) == 1

    def test_transient_write_failure_is_retried(self, file_storage, monkeypatch, make_entry):
        real_write = file_storage._write_document
        calls = []

        def flaky(document):
            calls.append(1)
            if len(calls) == 1:
                raise OSError("disk busy")
            real_write(document)

        monkeypatch.setattr(file_storage, "_write_document", flaky)
        file_storage.save_all([make_entry()])

        assert len(calls) == 2
        assert len(file_storage.load_all()) == 1

    def test_persistent_write_failure_raises_storage_error(self, file_storage, monkeypatch, make_entry):
        def broken(document):
            raise OSError("read-only file system")

        monkeypatch.setattr(file_storage, "_write_document", broken)
        with pytest.raises(StorageError):
            file_storage.save_all([make_entry()])

    def test_no_temp_files_left_behind(self, file_storage, snapshot_path, make_entry):
        file_storage.save_all([make_entry()])
        file_storage.save_all([make_entry(), make_entry()])
        assert [p.name for p in snapshot_path.parent.iterdir()] == ["snapshot.json"]


class TestEntryStore:
    """Tests for the EntryStore lifecycle."""

    def test_restores_snapshot_at_init(self, make_entry):
        storage = InMemoryEntryStorage()
        storage.save_all([make_entry(description="Rent")])

        store = EntryStore(storage)

        assert [e.description for e in store.entries] == ["Rent"]

    def test_long_legacy_description_keeps_whole_snapshot(self):
        """An entry longer than the form allows is not treated as corruption."""
        long_entry = dict(LEGACY_ENTRY, id="legacy-2", description="y" * 250, type="VARIABLE_EXPENSE")
        storage = InMemoryEntryStorage(json.dumps([LEGACY_ENTRY, long_entry]))

        store = EntryStore(storage)

        assert len(store) == 2
        assert store.require("legacy-2").description == "y" * 250

    def test_corrupt_snapshot_starts_empty(self, audit_logger, audit_storage):
        store = EntryStore(InMemoryEntryStorage(snapshot="{broken"), audit_logger)

        assert store.entries == []
        types = [e.event_type for e in audit_storage.events]
        assert AuditEventType.SNAPSHOT_CORRUPT in types

    def test_corrupt_file_recovers_and_next_save_overwrites(self, file_storage, snapshot_path, make_entry):
        snapshot_path.parent.mkdir(parents=True)
        snapshot_path.write_text("[[[", encoding="utf-8")

        store = EntryStore(file_storage)
        store.append([make_entry()])

        assert len(EntryStore(JsonFileEntryStorage(path=snapshot_path)).entries) == 1

    def test_every_mutation_saves(self, make_entry):
        storage = InMemoryEntryStorage()
        store = EntryStore(storage)
        entry = make_entry()

        store.append([entry])
        store.replace(entry.with_changes(is_paid=True))
        store.delete(entry.id)
        store.replace_all([make_entry()])

        assert storage.save_count == 4
        assert len(storage.load_all()) == 1

    def test_empty_append_does_not_save(self):
        storage = InMemoryEntryStorage()
        store = EntryStore(storage)
        assert store.append([]) == []
        assert storage.save_count == 0

    def test_entries_returns_copy(self, store, make_entry):
        store.append([make_entry()])
        store.entries.clear()
        assert len(store) == 1

    def test_replace_keeps_position(self, store, make_entry):
        first, second, third = make_entry(description="A"), make_entry(description="B"), make_entry(description="C")
        store.append([first, second, third])

        store.replace(second.with_changes(description="B2"))

        assert [e.description for e in store.entries] == ["A", "B2", "C"]

    def test_replace_unknown_raises(self, store, make_entry):
        with pytest.raises(NotFoundError):
            store.replace(make_entry())

    def test_delete_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            store.delete("missing")

    def test_get(self, store, make_entry):
        entry = make_entry()
        store.append([entry])
        assert store.get(entry.id) == entry
        assert store.get("missing") is None

    def test_save_failure_is_audited_and_raised(self, make_entry, audit_logger, audit_storage):
        class BrokenStorage(InMemoryEntryStorage):
            def save_all(self, entries):
                raise StorageError("disk full")

        store = EntryStore(BrokenStorage(), audit_logger)
        with pytest.raises(StorageError):
            store.append([make_entry()])

        assert AuditEventType.SAVE_FAILED in [e.event_type for e in audit_storage.events]
        assert len(store) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
