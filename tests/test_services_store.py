"""Tests for the memory store (room ids, YAML and in-memory backends)."""

import uuid
from pathlib import Path

import pytest

from gitact.errors import MemoryStoreError
from gitact.models import RepoRef
from gitact.services.store import InMemoryMemoryStore, MemoryRecord, YamlMemoryStore, room_id_for


class TestRoomId:
    """room_id_for is a stable UUID per repository."""

    def test_deterministic(self) -> None:
        ref = RepoRef(owner="octo", name="demo")
        assert room_id_for(ref) == room_id_for(RepoRef(owner="octo", name="demo"))
        assert room_id_for(ref) == str(uuid.uuid5(uuid.NAMESPACE_URL, "github-octo-demo"))

    def test_distinct_per_repository(self) -> None:
        assert room_id_for(RepoRef(owner="a", name="b")) != room_id_for(RepoRef(owner="a", name="c"))


class TestMemoryRecord:
    def test_defaults(self) -> None:
        record = MemoryRecord(room_id="room", text="t", metadata={"type": "issue"})
        assert uuid.UUID(record.id)
        assert record.created_at > 0
        assert record.type == "issue"

    def test_type_missing(self) -> None:
        assert MemoryRecord(room_id="room").type is None


@pytest.fixture(params=["memory", "yaml"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return InMemoryMemoryStore()
    return YamlMemoryStore(tmp_path / "memories")


class TestStores:
    """Both backends append and return records per room, oldest first."""

    def test_empty_room(self, store) -> None:
        assert store.get_memories("nothing-here") == []

    def test_append_and_read(self, store) -> None:
        store.add_memory(MemoryRecord(room_id="r1", text="first", metadata={"type": "issue", "number": 1}))
        store.add_memory(MemoryRecord(room_id="r1", text="second", metadata={"type": "pull_request"}))
        store.add_memory(MemoryRecord(room_id="r2", text="other"))
        records = store.get_memories("r1")
        assert [r.text for r in records] == ["first", "second"]
        assert records[0].metadata == {"type": "issue", "number": 1}
        assert [r.text for r in store.get_memories("r2")] == ["other"]


class TestYamlMemoryStore:
    """YAML file layout and tolerance of damaged files."""

    def test_file_per_room(self, tmp_path: Path) -> None:
        store = YamlMemoryStore(tmp_path)
        store.add_memory(MemoryRecord(room_id="abc", text="hello"))
        content = (tmp_path / "abc.yaml").read_text(encoding="utf-8")
        assert "hello" in content
        assert "room_id: abc" in content

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        YamlMemoryStore(tmp_path).add_memory(MemoryRecord(room_id="abc", text="kept"))
        assert [r.text for r in YamlMemoryStore(tmp_path).get_memories("abc")] == ["kept"]

    def test_invalid_yaml_is_empty(self, tmp_path: Path) -> None:
        (tmp_path / "abc.yaml").write_text("- [unclosed", encoding="utf-8")
        assert YamlMemoryStore(tmp_path).get_memories("abc") == []

    def test_invalid_entries_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "abc.yaml").write_text(
            "- text: ok\n- just a string\n- text: bad\n  created_at: not-a-number\n",
            encoding="utf-8",
        )
        records = YamlMemoryStore(tmp_path).get_memories("abc")
        assert [r.text for r in records] == ["ok"]
        assert records[0].room_id == "abc"

    def test_non_list_file(self, tmp_path: Path) -> None:
        (tmp_path / "abc.yaml").write_text("key: value\n", encoding="utf-8")
        assert YamlMemoryStore(tmp_path).get_memories("abc") == []

    def test_unparseable_file_is_not_overwritten(self, tmp_path: Path) -> None:
        """add_memory refuses to rewrite a room file it cannot parse."""
        store = YamlMemoryStore(tmp_path)
        for title in ("one", "two", "three"):
            store.add_memory(MemoryRecord(room_id="abc", text=title, metadata={"type": "issue"}))
        path = tmp_path / "abc.yaml"
        with path.open("a", encoding="utf-8") as fh:
            fh.write("- [unclosed\n")
        damaged = path.read_text(encoding="utf-8")

        with pytest.raises(MemoryStoreError):
            store.add_memory(MemoryRecord(room_id="abc", text="new"))
        assert path.read_text(encoding="utf-8") == damaged
        assert not (tmp_path / "abc.yaml.tmp").exists()

    def test_non_list_file_is_not_overwritten(self, tmp_path: Path) -> None:
        (tmp_path / "abc.yaml").write_text("key: value\n", encoding="utf-8")
        with pytest.raises(MemoryStoreError):
            YamlMemoryStore(tmp_path).add_memory(MemoryRecord(room_id="abc", text="new"))
        assert (tmp_path / "abc.yaml").read_text(encoding="utf-8") == "key: value\n"

    def test_invalid_entries_kept_on_append(self, tmp_path: Path) -> None:
        """Entries that fail validation stay in the file after a write."""
        (tmp_path / "abc.yaml").write_text(
            "- text: ok\n- text: bad\n  created_at: not-a-number\n",
            encoding="utf-8",
        )
        store = YamlMemoryStore(tmp_path)
        store.add_memory(MemoryRecord(room_id="abc", text="new"))
        content = (tmp_path / "abc.yaml").read_text(encoding="utf-8")
        assert "not-a-number" in content
        assert [r.text for r in store.get_memories("abc")] == ["ok", "new"]

    def test_write_failure_raises_typed_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(MemoryStoreError):
            YamlMemoryStore(blocker / "memories").add_memory(MemoryRecord(room_id="abc", text="x"))
