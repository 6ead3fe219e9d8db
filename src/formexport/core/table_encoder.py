"""
Delimited-text encoding of export tables.

Rows are written with the csv module using minimal quoting: a value is
quoted only when it contains the separator, a double quote or a line
break, and embedded quotes are doubled. The document starts with a UTF-8
byte-order mark so spreadsheet applications detect the encoding, and every
line ends with CRLF.

Encoding is incremental. Each row is formatted and handed to the sink on
its own, so the full table is never held in memory.
"""

import csv
import io
from typing import Iterable, Iterator, Sequence

from .errors import InvalidSeparatorError
from .repository import DeliverySink
from ..infrastructure.logging_config import get_logger

logger = get_logger(__name__)


BOM = b'\xef\xbb\xbf'
LINE_TERMINATOR = '\r\n'
QUOTE_CHAR = '"'
ENCODING = 'utf-8'


def validate_separator(separator: str) -> str:
    """
    Check that a separator can delimit fields.

    The encoder never substitutes a default; callers wanting a fallback
    should use core.export.resolve_separator first.

    Args:
        separator: The candidate separator.

    Returns:
        The separator, unchanged.

    Raises:
        InvalidSeparatorError: If separator is not a single character, or
            is the quote character or a line break.
    """
    if not isinstance(separator, str) or len(separator) != 1:
        raise InvalidSeparatorError(separator)
    if separator in (QUOTE_CHAR, '\r', '\n'):
        raise InvalidSeparatorError(separator)
    return separator


class _LineFormatter:
    """Formats one row at a time into an encoded delimited line."""

    def __init__(self, separator: str):
        self._buffer = io.StringIO()
        self._writer = csv.writer(
            self._buffer,
            delimiter=separator,
            quotechar=QUOTE_CHAR,
            quoting=csv.QUOTE_MINIMAL,
            doublequote=True,
            lineterminator=LINE_TERMINATOR,
        )

    def format(self, values: Sequence[str]) -> bytes:
        """
        Encode one row. Unencodable characters (lone surrogates) become '?'.

        A row made of a single empty value is written as '""', so it is
        not mistaken for a blank line.
        """
        self._buffer.seek(0)
        self._buffer.truncate(0)
        self._writer.writerow(values)
        return self._buffer.getvalue().encode(ENCODING, errors='replace')


def iter_encoded(
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    separator: str
) -> Iterator[bytes]:
    """
    Generate the encoded document chunk by chunk.

    Yields the byte-order mark, then the header line, then one line per row
    in the order given.

    Args:
        header: Column labels.
        rows: Data rows, each aligned with header.
        separator: Single-character field separator.

    Yields:
        Encoded chunks of the document.

    Raises:
        InvalidSeparatorError: If separator is invalid. Raised before any
            chunk is produced.
    """
    validate_separator(separator)
    formatter = _LineFormatter(separator)

    def generate() -> Iterator[bytes]:
        yield BOM
        yield formatter.format(header)
        for row in rows:
            yield formatter.format(row)

    return generate()


def encode(
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    separator: str,
    sink: DeliverySink
) -> int:
    """
    Encode a table and write it to a sink.

    Write failures are not retried; the sink's exception propagates
    unchanged and whatever was written before it stays written.

    Args:
        header: Column labels.
        rows: Data rows, each aligned with header.
        separator: Single-character field separator.
        sink: Destination accepting bytes via write().

    Returns:
        Number of bytes written.

    Raises:
        InvalidSeparatorError: If separator is invalid. Nothing is written.
    """
    total = 0
    line_count = 0
    for chunk in iter_encoded(header, rows, separator):
        sink.write(chunk)
        total += len(chunk)
        line_count += 1

    # BOM chunk does not count as a line
    logger.debug(f"Encoded {line_count - 1} lines ({total} bytes)")
    return total
