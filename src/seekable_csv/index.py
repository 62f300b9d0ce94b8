"""Record index: byte offsets for every record of a delimited-text stream."""

from __future__ import annotations

import bisect
import logging
from pathlib import Path
from typing import Iterator, Union

from .models import IndexMeta, RecordInfo
from .persistence import load_index, save_index
from .seeking import SeekingCsvParser

logger = logging.getLogger(__name__)


class RecordIndex:
    """Byte-offset index for O(1) seeking to any record.

    Built by reading a stream once through a SeekingCsvParser; afterwards
    any record can be fetched by seeking the parser straight to its offset.
    Offsets are logical-file-relative, which are also valid seek targets as
    long as the parser's stream starts at logical byte 0.

    Example:
        >>> with open("events.csv", newline="", encoding="utf-8") as f:
        ...     parser = SeekingCsvParser(f)
        ...     index = RecordIndex.build(parser)
        ...     index.save("events.csv.idx")
        ...     fields = index.read_record(parser, 5000)
        ...     for fields in index.iter_from(parser, 1000):
        ...         process(fields)
    """

    def __init__(self, meta: IndexMeta, records: list[RecordInfo]) -> None:
        self._meta = meta
        self._records = records

    @classmethod
    def build(
        cls, parser: SeekingCsvParser, checkpoint_interval: int = 100
    ) -> "RecordIndex":
        """Index every remaining record of a parser.

        Args:
            parser: Parser positioned at a record boundary
            checkpoint_interval: Store checkpoint every N records

        Returns:
            A new RecordIndex covering the records read

        Raises:
            ValueError: If checkpoint_interval is less than 1
        """
        if checkpoint_interval < 1:
            raise ValueError(f"checkpoint_interval must be at least 1, got {checkpoint_interval}")

        records: list[RecordInfo] = []
        checkpoints: dict[int, int] = {}
        start_offset = parser.byte_position_raw

        while parser.read_record() is not None:
            record_number = len(records)
            offset = parser.record_start_position_raw
            records.append(
                RecordInfo(
                    record_number=record_number,
                    offset=offset,
                    length=parser.byte_position_raw - offset,
                )
            )

            if record_number % checkpoint_interval == 0:
                checkpoints[record_number] = offset

        meta = IndexMeta(
            total_records=len(records),
            start_offset=start_offset,
            end_offset=parser.byte_position_raw,
            checkpoint_interval=checkpoint_interval,
            checkpoints=checkpoints,
        )
        logger.debug(
            "Indexed %d records between bytes %d and %d",
            meta.total_records,
            meta.start_offset,
            meta.end_offset,
        )
        return cls(meta, records)

    @classmethod
    def load(cls, index_path: Union[str, Path]) -> "RecordIndex | None":
        """Load a persisted index, or None if it is missing or invalid."""
        loaded = load_index(Path(index_path))
        if loaded is None:
            return None
        return cls(*loaded)

    def save(self, index_path: Union[str, Path]) -> None:
        """Persist index to disk."""
        save_index(Path(index_path), self._meta, self._records)

    @property
    def meta(self) -> IndexMeta:
        return self._meta

    @property
    def records(self) -> list[RecordInfo]:
        return self._records

    @property
    def total_records(self) -> int:
        """Total number of indexed records."""
        return self._meta.total_records

    def get_offset(self, record_number: int) -> tuple[int, int]:
        """Get byte offset and length for a specific record.

        Args:
            record_number: 0-indexed record number

        Returns:
            Tuple of (byte_offset, length)

        Raises:
            IndexError: If record_number is out of range
        """
        if record_number < 0 or record_number >= len(self._records):
            raise IndexError(
                f"Record {record_number} out of range (0-{len(self._records) - 1})"
            )
        info = self._records[record_number]
        return info.offset, info.length

    def find_record(self, offset: int) -> int:
        """Record number of the record containing a byte offset.

        Raises:
            IndexError: If offset falls outside the indexed byte range
        """
        if offset < self._meta.start_offset or offset >= self._meta.end_offset:
            raise IndexError(
                f"Offset {offset} outside indexed range "
                f"({self._meta.start_offset}-{self._meta.end_offset - 1})"
            )
        return bisect.bisect_right(self._records, offset, key=lambda info: info.offset) - 1

    def read_record(self, parser: SeekingCsvParser, record_number: int) -> list[str] | None:
        """Seek to and read a specific record.

        Args:
            parser: Parser over the indexed stream
            record_number: 0-indexed record number

        Returns:
            The record's fields

        Raises:
            IndexError: If record_number is out of range
        """
        offset, _ = self.get_offset(record_number)
        parser.seek(offset)
        return parser.read_record()

    def iter_from(
        self, parser: SeekingCsvParser, start_record: int = 0
    ) -> Iterator[list[str]]:
        """Iterate records starting from a specific record.

        Args:
            parser: Parser over the indexed stream
            start_record: 0-indexed record to start from (default: 0)

        Yields:
            Each record's fields
        """
        if start_record < 0:
            start_record = 0
        if start_record >= len(self._records):
            return

        offset, _ = self.get_offset(start_record)
        parser.seek(offset)
        yield from parser

    def __len__(self) -> int:
        """Return total number of records."""
        return self.total_records

    def __getitem__(self, record_number: int) -> RecordInfo:
        """Get a record's position by number (e.g., index[100])."""
        self.get_offset(record_number)
        return self._records[record_number]

    def __repr__(self) -> str:
        return f"RecordIndex(records={self.total_records})"
