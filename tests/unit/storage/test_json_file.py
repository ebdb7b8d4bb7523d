"""Tests for sightlog.storage.json_file - JsonFileStore implementation.

Tests cover:
- Lifecycle (initialize seeds, never overwrites)
- Read failures (missing, malformed, wrong top-level type)
- Write round trip and failed writes
- Sequence operations against a real file
- Serialized mutations under concurrency
"""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path

import pytest

from sightlog.core.exceptions import (
    IndexOutOfRange,
    ParseFailure,
    ReadFailure,
    UnknownField,
    WriteFailure,
)
from sightlog.protocols.storage import DocumentStore
from sightlog.storage.json_file import JsonFileStore

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
async def store(data_file: Path) -> JsonFileStore:
    """Initialized store over an empty document."""
    s = JsonFileStore(data_file)
    await s.initialize()
    yield s
    await s.close()


def write_raw(path: Path, doc: object) -> None:
    path.write_text(json.dumps(doc), encoding="utf-8")


# =============================================================================
# Lifecycle
# =============================================================================


class TestJsonFileStoreLifecycle:
    """Tests for initialize/close."""

    async def test_implements_protocol(self, store: JsonFileStore) -> None:
        assert isinstance(store, DocumentStore)

    async def test_initialize_creates_empty_document(self, data_file: Path) -> None:
        store = JsonFileStore(data_file)
        await store.initialize()

        assert json.loads(data_file.read_text()) == {"sightings": []}

    async def test_initialize_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "data.json"
        store = JsonFileStore(path)
        await store.initialize()

        assert path.exists()

    async def test_initialize_keeps_existing_file(self, data_file: Path) -> None:
        write_raw(data_file, {"sightings": [{"shape": "disk"}]})
        store = JsonFileStore(data_file)
        await store.initialize()

        assert await store.read() == {"sightings": [{"shape": "disk"}]}

    async def test_initialize_does_not_repair_malformed_file(self, data_file: Path) -> None:
        data_file.write_text("{not json")
        store = JsonFileStore(data_file)
        await store.initialize()

        assert data_file.read_text() == "{not json"

    async def test_initialize_without_create(self, data_file: Path) -> None:
        store = JsonFileStore(data_file, create=False)
        await store.initialize()

        assert not data_file.exists()

    async def test_initialize_and_close_idempotent(self, data_file: Path) -> None:
        store = JsonFileStore(data_file)
        await store.initialize()
        await store.initialize()
        await store.close()
        await store.close()
        assert store._initialized is False


# =============================================================================
# Read / Write
# =============================================================================


class TestJsonFileStoreRead:
    """Tests for read failures."""

    async def test_missing_file_is_read_failure(self, data_file: Path) -> None:
        store = JsonFileStore(data_file, create=False)

        with pytest.raises(ReadFailure) as exc_info:
            await store.read()
        assert exc_info.value.path == data_file

    async def test_directory_is_read_failure(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path, create=False)

        with pytest.raises(ReadFailure):
            await store.read()

    async def test_malformed_json_is_parse_failure(self, data_file: Path) -> None:
        data_file.write_text('{"sightings": [')
        store = JsonFileStore(data_file)

        with pytest.raises(ParseFailure):
            await store.read()

    async def test_non_object_is_parse_failure(self, data_file: Path) -> None:
        write_raw(data_file, ["a", "b"])
        store = JsonFileStore(data_file)

        with pytest.raises(ParseFailure, match="expected a JSON object"):
            await store.read()

    async def test_field_not_a_list_is_parse_failure(self, data_file: Path) -> None:
        write_raw(data_file, {"sightings": "nope"})
        store = JsonFileStore(data_file)

        with pytest.raises(ParseFailure):
            await store.append("sightings", {"shape": "disk"})


class TestJsonFileStoreWrite:
    """Tests for write and round trips."""

    async def test_round_trip(self, store: JsonFileStore) -> None:
        doc = {
            "sightings": [
                {"shape": "Circle", "city": "Zürich", "post_create_date_time": "01/02/2021 10:00"},
                {"shape": "cigar", "summary": "two lights\nthen one"},
            ]
        }
        await store.write(doc)

        assert await store.read() == doc

    async def test_write_replaces_content(self, store: JsonFileStore) -> None:
        await store.write({"sightings": [{"shape": "a"}], "extra": []})
        await store.write({"sightings": []})

        assert await store.read() == {"sightings": []}

    async def test_unserializable_is_write_failure(
        self, store: JsonFileStore, data_file: Path
    ) -> None:
        await store.write({"sightings": [{"shape": "disk"}]})

        with pytest.raises(WriteFailure):
            await store.write({"sightings": [object()]})

        assert json.loads(data_file.read_text()) == {"sightings": [{"shape": "disk"}]}

    async def test_failed_write_leaves_no_temp_file(
        self, store: JsonFileStore, data_file: Path
    ) -> None:
        with pytest.raises(WriteFailure):
            await store.write({"sightings": [{1, 2}]})

        assert sorted(p.name for p in data_file.parent.iterdir()) == ["data.json"]

    async def test_write_into_missing_directory_fails(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "gone" / "data.json", create=False)

        with pytest.raises(WriteFailure):
            await store.write({"sightings": []})


# =============================================================================
# Sequence Operations
# =============================================================================


class TestJsonFileStoreSequence:
    """Tests for append / remove / replace against a file."""

    async def test_append_grows_by_one(self, store: JsonFileStore) -> None:
        await store.write({"sightings": [{"shape": "a"}, {"shape": "b"}]})

        await store.append("sightings", {"shape": "Triangle"})

        doc = await store.read()
        assert len(doc["sightings"]) == 3
        assert doc["sightings"][-1] == {"shape": "Triangle"}

    async def test_append_unknown_field(self, store: JsonFileStore, data_file: Path) -> None:
        before = data_file.read_text()

        with pytest.raises(UnknownField) as exc_info:
            await store.append("recipes", {"name": "soup"})

        assert exc_info.value.field == "recipes"
        assert data_file.read_text() == before

    async def test_remove_shifts_later_elements(self, store: JsonFileStore) -> None:
        items = [{"n": str(i)} for i in range(5)]
        await store.write({"sightings": items})

        removed = await store.remove_by_index("sightings", 2)

        doc = await store.read()
        assert removed == {"n": "2"}
        assert doc["sightings"] == items[:2] + items[3:]

    @pytest.mark.parametrize("index", [-1, 3, 100])
    async def test_remove_out_of_range_leaves_file(
        self, store: JsonFileStore, data_file: Path, index: int
    ) -> None:
        await store.write({"sightings": ["a", "b", "c"]})
        before = data_file.read_text()

        with pytest.raises(IndexOutOfRange):
            await store.remove_by_index("sightings", index)

        assert data_file.read_text() == before

    async def test_edit_one_element(self, store: JsonFileStore) -> None:
        await store.write({"sightings": ["a", "b", "c"]})

        previous = await store.edit_one_element("sightings", 1, "B")

        assert previous == "b"
        assert (await store.read())["sightings"] == ["a", "B", "c"]

    async def test_edit_one_element_out_of_range(self, store: JsonFileStore) -> None:
        await store.write({"sightings": ["a"]})

        with pytest.raises(IndexOutOfRange):
            await store.edit_one_element("sightings", 1, "x")

        assert (await store.read())["sightings"] == ["a"]

    async def test_get_one(self, store: JsonFileStore) -> None:
        await store.write({"sightings": ["a", "b"]})

        assert await store.get_one("sightings", 1) == "b"
        with pytest.raises(IndexOutOfRange):
            await store.get_one("sightings", 2)

    async def test_edit_mutator_error_writes_nothing(
        self, store: JsonFileStore, data_file: Path
    ) -> None:
        await store.write({"sightings": ["a"]})
        before = data_file.read_text()

        def broken(doc: dict) -> None:
            doc["sightings"].clear()
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await store.edit(broken)

        assert data_file.read_text() == before


# =============================================================================
# Concurrency
# =============================================================================


class TestJsonFileStoreConcurrency:
    """Mutations interleaving on one event loop."""

    async def test_concurrent_appends_all_kept(self, store: JsonFileStore) -> None:
        await asyncio.gather(*(store.append("sightings", {"n": str(i)}) for i in range(25)))

        doc = await store.read()
        assert sorted(int(s["n"]) for s in doc["sightings"]) == list(range(25))

    async def test_concurrent_removes_and_appends(self, store: JsonFileStore) -> None:
        await store.write({"sightings": [{"n": str(i)} for i in range(10)]})

        await asyncio.gather(
            *(store.remove_by_index("sightings", 0) for _ in range(4)),
            *(store.append("sightings", {"n": f"new-{i}"}) for i in range(3)),
        )

        doc = await store.read()
        assert len(doc["sightings"]) == 10 - 4 + 3


class TestJsonFileStoreCancellation:
    """A cancelled caller never leaves a write running outside the lock."""

    @pytest.fixture
    def slow_store(self, store: JsonFileStore, monkeypatch: pytest.MonkeyPatch) -> JsonFileStore:
        write_file = store._write_file

        def slow_write(doc: dict) -> None:
            time.sleep(0.3)
            write_file(doc)

        monkeypatch.setattr(store, "_write_file", slow_write)
        return store

    async def test_cancelled_append_does_not_lose_next_append(
        self, slow_store: JsonFileStore
    ) -> None:
        task = asyncio.create_task(slow_store.append("sightings", {"n": "A"}))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        await slow_store.append("sightings", {"n": "B"})

        assert (await slow_store.read())["sightings"] == [{"n": "A"}, {"n": "B"}]

    async def test_cancelled_write_finishes_before_next_edit(
        self, slow_store: JsonFileStore
    ) -> None:
        task = asyncio.create_task(slow_store.write({"sightings": [{"n": "W"}]}))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        removed = await slow_store.remove_by_index("sightings", 0)

        assert removed == {"n": "W"}
        assert (await slow_store.read())["sightings"] == []

    async def test_no_temp_files_left(self, slow_store: JsonFileStore, data_file: Path) -> None:
        task = asyncio.create_task(slow_store.append("sightings", {"n": "A"}))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await slow_store.append("sightings", {"n": "B"})

        assert sorted(p.name for p in data_file.parent.iterdir()) == ["data.json"]
