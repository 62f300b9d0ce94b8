"""Custom exceptions for seekable-csv."""


class SeekingParserError(Exception):
    """Base class for parser setup and lifecycle errors.

    Parse failures raised by the csv module (csv.Error) and I/O errors
    raised by the stream are not wrapped and do not inherit from this.
    """


class ConfigurationError(SeekingParserError):
    """Raised when byte counting is disabled for a seeking parser.

    The wrapped parser's byte counter is the only source of record
    positions, so a SeekingCsvParser cannot work without it. Construct
    again with ``ParserConfig(count_bytes=True)``.
    """


class UnsupportedStreamError(SeekingParserError):
    """Raised when the reader is not backed by a seekable binary stream.

    This happens if:
    - The reader has no underlying ``buffer`` (e.g. io.StringIO)
    - The underlying stream reports that it cannot seek (pipes, sockets)
    """


class InvalidStreamStateError(SeekingParserError):
    """Stream reported a negative position at construction.

    Attributes:
        position: The position the stream reported
    """

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Underlying stream reports position {position} < 0")


class DisposedError(SeekingParserError):
    """Operation attempted on a parser that has been closed.

    Attributes:
        name: Class name of the closed parser
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot access a closed parser: {name}")
