"""
Tests for delivery sinks.
"""

import io

import pytest

from formexport.infrastructure.sinks import FileSink, StreamSink


class TestStreamSink:
    """Tests for StreamSink."""

    def test_writes_to_stream(self):
        """Test that bytes are appended to the stream."""
        stream = io.BytesIO()
        sink = StreamSink(stream)

        sink.begin()
        sink.write(b"abc")
        sink.write(b"def")
        sink.end()

        assert stream.getvalue() == b"abcdef"
        assert sink.bytes_written == 6

    def test_does_not_close_stream(self):
        """Test that the stream stays open after end()."""
        stream = io.BytesIO()
        sink = StreamSink(stream)

        sink.end()

        assert not stream.closed


class TestFileSink:
    """Tests for FileSink."""

    def test_writes_file(self, tmp_path):
        """Test that written bytes end up in the file."""
        path = tmp_path / "out.csv"

        with FileSink(path) as sink:
            sink.begin()
            sink.write(b"\xef\xbb\xbfA\r\n")
            sink.end()

        assert path.read_bytes() == b"\xef\xbb\xbfA\r\n"
        assert sink.bytes_written == 6

    def test_refuses_existing_file(self, tmp_path):
        """Test that an existing file is not replaced by default."""
        path = tmp_path / "out.csv"
        path.write_bytes(b"old")

        with pytest.raises(FileExistsError):
            FileSink(path).begin()

        assert path.read_bytes() == b"old"

    def test_overwrite(self, tmp_path):
        """Test that overwrite replaces an existing file."""
        path = tmp_path / "out.csv"
        path.write_bytes(b"old content")

        with FileSink(path, overwrite=True) as sink:
            sink.begin()
            sink.write(b"new")
            sink.end()

        assert path.read_bytes() == b"new"

    def test_missing_parent_directory(self, tmp_path):
        """Test that a missing parent directory is reported."""
        with pytest.raises(FileNotFoundError):
            FileSink(tmp_path / "nope" / "out.csv").begin()

    def test_write_before_begin(self, tmp_path):
        """Test that writing before begin() is an error."""
        with pytest.raises(ValueError):
            FileSink(tmp_path / "out.csv").write(b"x")

    def test_partial_output_kept_on_error(self, tmp_path):
        """Test that bytes written before a failure stay in the file."""
        path = tmp_path / "out.csv"

        with pytest.raises(RuntimeError):
            with FileSink(path) as sink:
                sink.begin()
                sink.write(b"partial")
                raise RuntimeError("aborted")

        assert path.read_bytes() == b"partial"
