"""
Delivery sinks for encoded exports.

A sink receives the document bytes as they are produced. Nothing is
buffered or rolled back: if an export aborts, whatever was written so far
remains at the destination.
"""

from pathlib import Path
from typing import BinaryIO, Optional

from ..core.repository import DeliverySink
from .logging_config import get_logger

logger = get_logger(__name__)


class StreamSink(DeliverySink):
    """
    Writes to an already open binary stream (e.g., sys.stdout.buffer).

    The stream is flushed on end() but never closed; its owner closes it.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.bytes_written = 0

    def write(self, data: bytes) -> None:
        self.stream.write(data)
        self.bytes_written += len(data)

    def end(self) -> None:
        self.stream.flush()


class FileSink(DeliverySink):
    """
    Writes an export to a file, opened on begin() and closed on end().

    Can be used as a context manager so the file is closed even when the
    export fails part way.
    """

    def __init__(self, path: Path, overwrite: bool = False):
        """
        Initialize the sink.

        Args:
            path: Destination file.
            overwrite: Whether an existing file may be replaced.
        """
        self.path = Path(path)
        self.overwrite = overwrite
        self.bytes_written = 0
        self._file: Optional[BinaryIO] = None

    def begin(self) -> None:
        """
        Open the destination file.

        Raises:
            FileExistsError: If the file exists and overwrite is False.
            OSError: If the file cannot be opened.
        """
        if not self.path.parent.exists():
            raise FileNotFoundError(f"Parent directory does not exist: {self.path.parent}")

        mode = 'wb' if self.overwrite else 'xb'
        self._file = open(self.path, mode)
        logger.debug(f"Writing export to {self.path}")

    def write(self, data: bytes) -> None:
        if self._file is None:
            raise ValueError("FileSink.write() called before begin()")
        self._file.write(data)
        self.bytes_written += len(data)

    def end(self) -> None:
        self.close()

    def close(self) -> None:
        """Close the file if it is open."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> 'FileSink':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
