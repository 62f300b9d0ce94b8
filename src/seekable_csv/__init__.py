"""seekable-csv: resume CSV parsing at any record's byte offset.

Example:
    >>> from seekable_csv import RecordIndex, SeekingCsvParser
    >>> with open("events.csv", newline="", encoding="utf-8") as f:
    ...     parser = SeekingCsvParser(f)
    ...
    ...     # Byte position of every record
    ...     for fields in parser:
    ...         print(parser.record_start_position_raw, fields)
    ...
    ...     # Jump straight to a known record start
    ...     parser.seek(4096)
    ...     fields = parser.read_record()
    ...
    ...     # Build an index once, then random access
    ...     parser.seek(0)
    ...     index = RecordIndex.build(parser)
    ...     fields = index.read_record(parser, 5000)
"""

from .config import ParserConfig
from .exceptions import (
    ConfigurationError,
    DisposedError,
    InvalidStreamStateError,
    SeekingParserError,
    UnsupportedStreamError,
)
from .index import RecordIndex
from .models import IndexMeta, RecordInfo
from .parser import CsvParser
from .seeking import SeekingCsvParser

__version__ = "0.1.0"
__all__ = [
    # Core
    "SeekingCsvParser",
    "CsvParser",
    "ParserConfig",
    # Indexing
    "RecordIndex",
    "IndexMeta",
    "RecordInfo",
    # Exceptions
    "SeekingParserError",
    "ConfigurationError",
    "UnsupportedStreamError",
    "InvalidStreamStateError",
    "DisposedError",
]
