"""Parser configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Options shared by CsvParser and SeekingCsvParser.

    Attributes:
        count_bytes: Maintain a running count of bytes consumed. Required by
            SeekingCsvParser, which derives every position from this counter.
        delimiter: Field delimiter passed to csv.reader
        quotechar: Quote character passed to csv.reader
        escapechar: Escape character passed to csv.reader (None disables)
        doublequote: Whether two quotechars inside a field mean one
        skipinitialspace: Ignore whitespace right after a delimiter
        strict: Raise csv.Error on bad input instead of guessing
        encoding: Codec used to measure byte lengths. None means the
            reader's own encoding.
        leave_open: Leave the reader open when the parser is closed
    """

    count_bytes: bool = False
    delimiter: str = ","
    quotechar: str | None = '"'
    escapechar: str | None = None
    doublequote: bool = True
    skipinitialspace: bool = False
    strict: bool = False
    encoding: str | None = None
    leave_open: bool = False

    def dialect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for csv.reader."""
        return {
            "delimiter": self.delimiter,
            "quotechar": self.quotechar,
            "escapechar": self.escapechar,
            "doublequote": self.doublequote,
            "skipinitialspace": self.skipinitialspace,
            "strict": self.strict,
        }
