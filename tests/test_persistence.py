"""Tests for index persistence (save/load)."""

import json
from pathlib import Path

import pytest

from seekable_csv.models import IndexMeta, RecordInfo
from seekable_csv.persistence import FORMAT_VERSION, load_index, save_index


@pytest.fixture
def sample_meta() -> IndexMeta:
    """Create sample IndexMeta for testing."""
    return IndexMeta(
        total_records=100,
        start_offset=0,
        end_offset=5000,
        checkpoint_interval=10,
        checkpoints={0: 0, 10: 500, 20: 1000},
        indexed_at="2024-01-01T00:00:00+00:00",
        version="1.0",
    )


@pytest.fixture
def sample_records() -> list[RecordInfo]:
    """Create sample RecordInfo list for testing."""
    return [
        RecordInfo(record_number=i, offset=i * 50, length=50)
        for i in range(100)
    ]


def valid_meta() -> dict:
    return {
        "total_records": 1,
        "start_offset": 0,
        "end_offset": 10,
        "checkpoint_interval": 10,
        "checkpoints": {},
        "indexed_at": "2024-01-01",
    }


class TestSaveIndex:
    """Tests for save_index function."""

    def test_saves_valid_json(
        self, tmp_path: Path, sample_meta: IndexMeta, sample_records: list[RecordInfo]
    ):
        """Saved index is valid JSON with the expected sections."""
        index_path = tmp_path / "test.idx"
        save_index(index_path, sample_meta, sample_records)

        with open(index_path) as f:
            data = json.load(f)

        assert data["format_version"] == FORMAT_VERSION
        assert "meta" in data
        assert "records" in data

    def test_stores_meta_fields(
        self, tmp_path: Path, sample_meta: IndexMeta, sample_records: list[RecordInfo]
    ):
        """All metadata fields are stored."""
        index_path = tmp_path / "test.idx"
        save_index(index_path, sample_meta, sample_records)

        with open(index_path) as f:
            meta = json.load(f)["meta"]

        assert meta["total_records"] == 100
        assert meta["start_offset"] == 0
        assert meta["end_offset"] == 5000
        assert meta["checkpoint_interval"] == 10
        assert meta["checkpoints"] == {"0": 0, "10": 500, "20": 1000}
        assert meta["indexed_at"] == sample_meta.indexed_at
        assert meta["version"] == "1.0"

    def test_stores_records_compactly(
        self, tmp_path: Path, sample_meta: IndexMeta, sample_records: list[RecordInfo]
    ):
        """Records are stored as [offset, length] arrays."""
        index_path = tmp_path / "test.idx"
        save_index(index_path, sample_meta, sample_records)

        content = index_path.read_text()
        records = json.loads(content)["records"]

        assert len(records) == 100
        assert records[0] == [0, 50]
        assert records[50] == [2500, 50]
        # No pretty-printing
        assert ": " not in content
        assert ", " not in content


class TestLoadIndex:
    """Tests for load_index function."""

    def test_restores_index(
        self, tmp_path: Path, sample_meta: IndexMeta, sample_records: list[RecordInfo]
    ):
        """Meta and records survive a save/load cycle."""
        index_path = tmp_path / "test.idx"
        save_index(index_path, sample_meta, sample_records)

        result = load_index(index_path)
        assert result is not None
        loaded_meta, loaded_records = result

        assert loaded_meta == sample_meta
        assert loaded_records == sample_records

    def test_restores_checkpoints_as_int_keys(
        self, tmp_path: Path, sample_meta: IndexMeta, sample_records: list[RecordInfo]
    ):
        """Checkpoint keys are restored as integers."""
        index_path = tmp_path / "test.idx"
        save_index(index_path, sample_meta, sample_records)

        result = load_index(index_path)
        assert result is not None
        loaded_meta, _ = result

        assert 10 in loaded_meta.checkpoints
        assert "10" not in loaded_meta.checkpoints  # type: ignore[operator]

    def test_large_offsets(self, tmp_path: Path):
        """Offsets beyond 4 GiB are kept exactly."""
        large_offset = 9 * 1024 * 1024 * 1024
        meta = IndexMeta(
            total_records=1,
            start_offset=large_offset,
            end_offset=large_offset + 1000,
            checkpoint_interval=100,
            checkpoints={0: large_offset},
        )
        records = [RecordInfo(record_number=0, offset=large_offset, length=1000)]

        index_path = tmp_path / "test.idx"
        save_index(index_path, meta, records)
        result = load_index(index_path)

        assert result is not None
        assert result[1][0].offset == large_offset

    def test_default_version_when_missing(self, tmp_path: Path):
        """Uses default version when not in saved data."""
        index_path = tmp_path / "test.idx"
        data = {"format_version": FORMAT_VERSION, "meta": valid_meta(), "records": [[0, 10]]}
        index_path.write_text(json.dumps(data))

        result = load_index(index_path)
        assert result is not None
        assert result[0].version == "1.0"

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "not valid json {{{",
            json.dumps({"format_version": "0.1", "meta": {}, "records": []}),
            json.dumps({"meta": {}, "records": []}),
            json.dumps({"format_version": FORMAT_VERSION, "records": []}),
            json.dumps({"format_version": FORMAT_VERSION, "meta": valid_meta()}),
            json.dumps(
                {"format_version": FORMAT_VERSION, "meta": {"total_records": 1}, "records": []}
            ),
            json.dumps(
                {
                    "format_version": FORMAT_VERSION,
                    "meta": valid_meta(),
                    "records": [{"bad": "format"}],
                }
            ),
        ],
        ids=[
            "empty",
            "invalid-json",
            "wrong-version",
            "missing-version",
            "missing-meta",
            "missing-records",
            "malformed-meta",
            "malformed-records",
        ],
    )
    def test_invalid_index_returns_none(self, tmp_path: Path, content: str):
        """Unusable index files load as None."""
        index_path = tmp_path / "bad.idx"
        index_path.write_text(content)
        assert load_index(index_path) is None

    def test_missing_file_returns_none(self, tmp_path: Path):
        """Returns None for missing file."""
        assert load_index(tmp_path / "missing.idx") is None
