"""Index persistence (save/load record index to disk)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import IndexMeta, RecordInfo

logger = logging.getLogger(__name__)

# Index file format version
FORMAT_VERSION = "1.0"


def save_index(index_path: Path, meta: IndexMeta, records: list[RecordInfo]) -> None:
    """Save an index to disk in compact JSON format.

    Records are stored as ``[offset, length]`` pairs; record numbers are
    implied by position.

    Args:
        index_path: Where to save the index file
        meta: Index metadata
        records: Record positions in record-number order
    """
    data = {
        "format_version": FORMAT_VERSION,
        "meta": {
            "total_records": meta.total_records,
            "start_offset": meta.start_offset,
            "end_offset": meta.end_offset,
            "checkpoint_interval": meta.checkpoint_interval,
            "checkpoints": meta.checkpoints,
            "indexed_at": meta.indexed_at,
            "version": meta.version,
        },
        "records": [[record.offset, record.length] for record in records],
    }

    with open(index_path, "w", encoding="utf-8") as f:
        json.dump(data, f, separators=(",", ":"))


def load_index(index_path: Path) -> tuple[IndexMeta, list[RecordInfo]] | None:
    """Load an index from disk.

    Args:
        index_path: Path to the index file

    Returns:
        Tuple of (meta, records), or None if the file is missing or invalid
    """
    try:
        with open(index_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if data.get("format_version") != FORMAT_VERSION:
            logger.debug("Ignoring index %s: unsupported format version", index_path)
            return None

        raw_meta = data["meta"]
        meta = IndexMeta(
            total_records=raw_meta["total_records"],
            start_offset=raw_meta["start_offset"],
            end_offset=raw_meta["end_offset"],
            checkpoint_interval=raw_meta["checkpoint_interval"],
            # JSON stringifies dict keys
            checkpoints={int(k): v for k, v in raw_meta["checkpoints"].items()},
            indexed_at=raw_meta["indexed_at"],
            version=raw_meta.get("version", "1.0"),
        )
        records = [
            RecordInfo(record_number=n, offset=offset, length=length)
            for n, (offset, length) in enumerate(data["records"])
        ]
        return meta, records

    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError, FileNotFoundError) as e:
        logger.debug("Ignoring index %s: %s", index_path, e)
        return None
