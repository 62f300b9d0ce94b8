"""Data models for seekable-csv."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict


@dataclass(frozen=True, slots=True)
class RecordInfo:
    """Position of a single record in the logical file.

    Attributes:
        record_number: 0-indexed record number
        offset: Byte offset from start of the logical file
        length: Length in bytes (including line terminator)
    """

    record_number: int
    offset: int
    length: int


@dataclass
class IndexMeta:
    """Metadata about an indexed delimited-text file.

    Attributes:
        total_records: Total number of records indexed
        start_offset: Logical-file offset where indexing started
        end_offset: Logical-file offset just past the last indexed record
        checkpoint_interval: Records between stored checkpoints
        checkpoints: Mapping of record_number -> byte_offset
        indexed_at: ISO timestamp when index was built
        version: Index format version
    """

    total_records: int
    start_offset: int
    end_offset: int
    checkpoint_interval: int
    checkpoints: Dict[int, int] = field(default_factory=dict)
    indexed_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    version: str = "1.0"

    @property
    def byte_length(self) -> int:
        """Bytes covered by the indexed records."""
        return self.end_offset - self.start_offset
