"""Record parser that counts the bytes it consumes."""

from __future__ import annotations

import codecs
import csv
import io
import logging
from typing import Iterator, TextIO

from .config import ParserConfig
from .exceptions import ConfigurationError, DisposedError

logger = logging.getLogger(__name__)

# Error handlers under which re-encoding decoded text gives back the bytes read
ROUND_TRIP_ERRORS = frozenset({"strict", "surrogateescape", "surrogatepass"})


class CsvParser:
    """Delimited-text parser over a buffering text reader.

    Physical lines are pulled from the reader one at a time and handed to
    ``csv.reader`` for field splitting, so the parser never consumes text
    beyond the end of the record it returns. With ``count_bytes`` enabled
    each consumed line is re-encoded to keep ``byte_position`` exact: a
    byte-order mark at the start of the stream is counted with the first
    record, and the reader is switched to untranslated newlines
    (``newline=""``) so line terminators are measured as stored.

    Example:
        >>> with open("data.csv", newline="", encoding="utf-8") as f:
        ...     parser = CsvParser(f, ParserConfig(count_bytes=True))
        ...     for fields in parser:
        ...         print(parser.byte_position, fields)
    """

    def __init__(self, reader: TextIO, config: ParserConfig | None = None) -> None:
        """Create a parser.

        Args:
            reader: Text reader to pull lines from
            config: Parser options. Defaults to ParserConfig().

        Raises:
            ConfigurationError: If bytes are counted and the reader decodes
                with a lossy error handler (e.g. ``errors="replace"``)
        """
        self._reader = reader
        self._config = config or ParserConfig()
        encoding = self._config.encoding or getattr(reader, "encoding", None) or "utf-8"
        self._codec = codecs.lookup(encoding).name
        self._errors = getattr(reader, "errors", None) or "strict"
        self._disposed = False

        if self._config.count_bytes:
            if self._errors not in ROUND_TRIP_ERRORS:
                raise ConfigurationError(
                    f"Cannot count bytes for a reader decoding with errors={self._errors!r}; "
                    f"use one of {sorted(ROUND_TRIP_ERRORS)}"
                )
            self._untranslate_newlines()

        self._byte_position = 0
        self._record = 0
        self._row = 0
        self._raw_record = ""
        self._pending_bom = 0
        self._encoder = self._new_encoder()
        self._tokenizer = self._new_tokenizer()

    def _untranslate_newlines(self) -> None:
        reconfigure = getattr(self._reader, "reconfigure", None)
        if reconfigure is None:
            return
        try:
            reconfigure(newline="")
        except io.UnsupportedOperation:
            # Already read from; only a reader opened with newline="" counts correctly.
            logger.warning(
                "Reader was read before parsing; byte positions assume it was opened with newline=''"
            )

    def _new_encoder(self) -> codecs.IncrementalEncoder:
        """Encoder for measuring lines, past any byte-order mark.

        The mark is counted once, with the first line, only when the stream
        is at byte 0 and actually begins with it.
        """
        encoder = codecs.getincrementalencoder(self._codec)(self._errors)
        bom = encoder.encode("")
        self._pending_bom = 0
        if bom and self._config.count_bytes and self._stream_starts_with(bom):
            self._pending_bom = len(bom)
        return encoder

    def _stream_starts_with(self, bom: bytes) -> bool:
        stream = getattr(self._reader, "buffer", None)
        if stream is None or not stream.seekable() or stream.tell() != 0:
            return False
        head = stream.read(len(bom))
        stream.seek(0)
        # Either byte order
        return head in (bom, bom[::-1])

    def _new_tokenizer(self) -> Iterator[list[str]]:
        return csv.reader(self._lines(), **self._config.dialect_kwargs())

    def _lines(self) -> Iterator[str]:
        """Yield physical lines, counting rows and bytes as they are consumed."""
        while True:
            line = self._reader.readline()
            if not line:
                return
            self._row += 1
            self._raw_record += line
            if self._config.count_bytes:
                self._byte_position += self._pending_bom + len(self._encoder.encode(line))
                self._pending_bom = 0
            yield line

    @property
    def config(self) -> ParserConfig:
        """Parser options."""
        return self._config

    @property
    def reader(self) -> TextIO:
        """The text reader being parsed."""
        return self._reader

    @property
    def byte_position(self) -> int:
        """Bytes consumed since construction or the last reset."""
        return self._byte_position

    @property
    def record(self) -> int:
        """Number of records read since construction or the last reset."""
        return self._record

    @property
    def row(self) -> int:
        """Number of physical lines consumed since construction or the last reset."""
        return self._row

    @property
    def raw_record(self) -> str:
        """Raw text of the most recently read record, terminator included."""
        return self._raw_record

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._disposed

    def read_record(self) -> list[str] | None:
        """Read the next record.

        Returns:
            The record's fields, an empty list for a blank line, or None at
            end of stream

        Raises:
            DisposedError: If the parser has been closed
            csv.Error: If the record is malformed (strict mode)
        """
        self.check_disposed()
        self._raw_record = ""
        try:
            fields = next(self._tokenizer)
        except StopIteration:
            return None
        self._record += 1
        return fields

    def reset(self) -> None:
        """Clear counters, tokenizer state and the byte-measuring encoder.

        The reader's position is left alone; callers that reposition the
        stream do so before calling this.
        """
        self._byte_position = 0
        self._record = 0
        self._row = 0
        self._raw_record = ""
        self._encoder = self._new_encoder()
        self._tokenizer = self._new_tokenizer()

    def check_disposed(self) -> None:
        """Raise DisposedError if the parser has been closed."""
        if self._disposed:
            raise DisposedError(type(self).__name__)

    def close(self) -> None:
        """Release the reader unless leave_open was set. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        if not self._config.leave_open:
            self._reader.close()

    def __iter__(self) -> Iterator[list[str]]:
        while True:
            fields = self.read_record()
            if fields is None:
                return
            yield fields

    def __enter__(self) -> "CsvParser":
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager and close the reader."""
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(record={self._record}, byte_position={self._byte_position})"
