"""CSV parsing with seeking support, for indexing into large files."""

from __future__ import annotations

import io
import logging
from typing import IO, Iterator, TextIO

from .config import ParserConfig
from .exceptions import (
    ConfigurationError,
    InvalidStreamStateError,
    UnsupportedStreamError,
)
from .parser import CsvParser

logger = logging.getLogger(__name__)


class SeekingCsvParser:
    """CsvParser with seeking support and byte-accurate record positions.

    Tracks the byte position at the start of every record it reads and can
    jump to any byte offset in the underlying stream, resuming parsing from
    there. Positions come in two flavours:

    - stream-relative: measured from where parsing started (construction
      or the last seek)
    - raw: stream-relative plus ``initial_offset``, i.e. measured from the
      start of the logical file

    Example:
        >>> with open("events.csv", newline="", encoding="utf-8") as f:
        ...     parser = SeekingCsvParser(f)
        ...     offsets = []
        ...     while (fields := parser.read_record()) is not None:
        ...         offsets.append(parser.record_start_position_raw)
        ...     parser.seek(offsets[1000])
        ...     row = parser.read_record()
    """

    def __init__(
        self,
        reader: TextIO,
        config: ParserConfig | None = None,
        initial_offset: int = 0,
    ) -> None:
        """Create a seeking parser.

        Args:
            reader: Text reader backed by a seekable binary stream. It is
                switched to untranslated newlines; a reader that was already
                read from must have been opened with ``newline=""``.
            config: Parser options. Defaults to ParserConfig(count_bytes=True).
            initial_offset: Bytes of logical-file content preceding the first
                byte parsed from the stream (e.g. a header consumed out of band)

        Raises:
            ConfigurationError: If config.count_bytes is false or the reader
                decodes with a lossy error handler
            UnsupportedStreamError: If the reader has no seekable binary stream
            InvalidStreamStateError: If the stream reports a negative position
        """
        config = config or ParserConfig(count_bytes=True)
        if not config.count_bytes:
            raise ConfigurationError("Expected config.count_bytes to be set to True")

        stream = getattr(reader, "buffer", None)
        if stream is None:
            raise UnsupportedStreamError(
                f"Reader {type(reader).__name__} does not expose an underlying binary stream"
            )
        if not stream.seekable():
            raise UnsupportedStreamError("Underlying stream doesn't support seeking")

        position = stream.tell()
        if position < 0:
            raise InvalidStreamStateError(position)

        self._initial_offset = initial_offset
        self._record_start_position = 0
        self._stream: IO[bytes] = stream
        self._reader = reader
        self._parser = CsvParser(reader, config)

        logger.debug(
            "Opened seeking parser at stream position %d (initial offset %d)",
            position,
            initial_offset,
        )

    @property
    def parser(self) -> CsvParser:
        """The wrapped record parser."""
        return self._parser

    @property
    def initial_offset(self) -> int:
        """Logical-file offset of stream-relative position 0."""
        self._parser.check_disposed()
        return self._initial_offset

    @property
    def record_start_position(self) -> int:
        """Byte position of the start of the line for the current record."""
        self._parser.check_disposed()
        return self._record_start_position

    @property
    def record_start_position_raw(self) -> int:
        """Byte position of the start of the current record, offset for initial stream position."""
        self._parser.check_disposed()
        return self._record_start_position + self._initial_offset

    @property
    def byte_position(self) -> int:
        """Byte position the parser is currently on, relative to the stream."""
        self._parser.check_disposed()
        return self._parser.byte_position

    @property
    def byte_position_raw(self) -> int:
        """Byte position the parser is currently on, offset for initial stream position."""
        self._parser.check_disposed()
        return self._parser.byte_position + self._initial_offset

    @property
    def record(self) -> int:
        """Records read since construction or the last seek."""
        self._parser.check_disposed()
        return self._parser.record

    @property
    def row(self) -> int:
        """Physical lines consumed since construction or the last seek."""
        self._parser.check_disposed()
        return self._parser.row

    @property
    def raw_record(self) -> str:
        """Raw text of the current record."""
        self._parser.check_disposed()
        return self._parser.raw_record

    @property
    def closed(self) -> bool:
        """Whether close() has been called. Readable after close."""
        return self._parser.closed

    def read_record(self) -> list[str] | None:
        """Read the next record, remembering where it started.

        The start position is captured before the read is attempted, so it
        also moves on a read that fails or hits end of stream.

        Returns:
            The record's fields, or None at end of stream

        Raises:
            DisposedError: If the parser has been closed
        """
        self._parser.check_disposed()
        self._record_start_position = self._parser.byte_position
        return self._parser.read_record()

    def seek(self, position: int) -> None:
        """Advance to the given absolute byte position in the underlying stream.

        The position is assumed to be the start of a record; if it is not,
        field splitting from there on is undefined. Afterwards record
        numbering restarts, stream-relative positions are measured from
        ``position`` and raw positions equal ``position`` plus them.

        Args:
            position: Byte offset in the underlying stream

        Raises:
            DisposedError: If the parser has been closed
        """
        self._parser.check_disposed()
        self._stream.seek(position, io.SEEK_SET)
        # Drop decoded read-ahead by re-syncing the text layer to the stream.
        self._reader.seek(self._stream.tell())
        self._initial_offset = position
        self._parser.reset()
        self._record_start_position = 0
        logger.debug("Seeked to byte %d", position)

    def close(self) -> None:
        """Close the wrapped parser (and the reader, unless leave_open)."""
        self._parser.close()

    def __iter__(self) -> Iterator[list[str]]:
        while True:
            fields = self.read_record()
            if fields is None:
                return
            yield fields

    def __enter__(self) -> "SeekingCsvParser":
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager and close the parser."""
        self.close()

    def __repr__(self) -> str:
        return (
            f"SeekingCsvParser(record={self._parser.record}, "
            f"initial_offset={self._initial_offset}, "
            f"record_start_position={self._record_start_position})"
        )
