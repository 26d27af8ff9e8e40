"""
Writer for numeric delimited text.

**Conceptual**: The inverse of ``NumericCsvReader``. Given headings and a
float64 table, produce text the reader will parse back to the same values.
Output is canonical: one delimiter between fields, no padding, a fixed float
format (scientific notation with 16 digits after the point by default, enough
to round-trip every finite float64 exactly), and a consistent line ending.

**Buffering**: text is collected in an internal buffer and handed to the sink
once it grows past ``WriterSettings.buffer_size``, and on ``flush()``.
``write_all()`` always flushes before returning, including when it raises, and
the writer is a context manager that flushes on exit:

    with NumericCsvWriter(handle) as writer:
        writer.write_heading(["x", "y"])
        for row in rows:
            writer.write(row)

**Failures**: any error raised by the sink surfaces as ``StreamError`` on the
call that triggered it. Whatever reached the sink before that stays there;
there is no rollback.
"""

import io
import logging
from typing import Iterable, Optional, Sequence

import numpy as np

from src.config.settings import WriterSettings
from src.data.schemas import FieldCountError, StreamError
from src.utils.text import format_float

logger = logging.getLogger(__name__)


class NumericCsvWriter:
    """
    Writes headings and float rows to a text or binary sink.

    Args:
        sink: Object with a ``write()`` method. Binary sinks
              (``io.RawIOBase``/``io.BufferedIOBase`` instances) receive bytes
              encoded with ``settings.encoding``; everything else receives str.
              The writer never closes the sink.
        settings: Writer configuration (defaults to ``WriterSettings()``).
    """

    def __init__(self, sink, settings: Optional[WriterSettings] = None):
        self.settings = settings or WriterSettings()
        self._sink = sink
        self._binary = isinstance(sink, (io.RawIOBase, io.BufferedIOBase))
        self._buffer: list[str] = []
        self._buffered = 0

    def __enter__(self) -> "NumericCsvWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.flush()
            return
        # The body's exception takes precedence over a failure to flush
        try:
            self.flush()
        except StreamError as flush_error:
            logger.debug("Flush on exit failed while handling %s: %s", exc_type.__name__, flush_error)

    def _emit(self, text: str) -> None:
        self._buffer.append(text)
        self._buffered += len(text)
        if self._buffered >= self.settings.buffer_size:
            self._drain()

    def _drain(self) -> None:
        """Hand buffered text to the sink without flushing the sink itself."""
        if not self._buffer:
            return
        text = "".join(self._buffer)
        self._buffer = []
        self._buffered = 0
        try:
            if self._binary:
                self._sink.write(text.encode(self.settings.encoding))
            else:
                self._sink.write(text)
        except (OSError, ValueError) as e:
            raise StreamError(f"Failed to write to sink. Error: {e}") from e

    def flush(self) -> None:
        """
        Write all buffered output to the sink and flush the sink if it can be.

        Raises:
            StreamError: If the sink fails.
        """
        self._drain()
        sink_flush = getattr(self._sink, "flush", None)
        if sink_flush is not None:
            try:
                sink_flush()
            except (OSError, ValueError) as e:
                raise StreamError(f"Failed to flush sink. Error: {e}") from e

    def write_heading(self, headings: Sequence[str]) -> None:
        """
        Write a heading line.

        Names are joined with the delimiter, wrapped in double quotes when
        ``quote_heading`` is set. Names are written as given; a name containing
        the delimiter will not read back as a single column.

        Raises:
            StreamError: If the sink fails.
        """
        if self.settings.quote_heading:
            headings = [f'"{name}"' for name in headings]
        self._emit(self.settings.delimiter.join(headings) + self.settings.line_ending)

    def write(self, row: Iterable[float]) -> None:
        """
        Write one data row using the configured float format and precision.

        Raises:
            StreamError: If the sink fails.
        """
        fmt = self.settings.float_format
        precision = self.settings.precision
        fields = [format_float(value, fmt, precision) for value in row]
        self._emit(self.settings.delimiter.join(fields) + self.settings.line_ending)

    def write_all(self, headings: Optional[Sequence[str]], table) -> None:
        """
        Write an optional heading followed by every row of a table, then flush.

        Args:
            headings: Column names, or None to write no heading line.
            table: 2-D array-like of numbers (converted with ``np.asarray``).

        Raises:
            ValueError: If ``table`` is not 2-D.
            FieldCountError: If the heading count differs from the table's
                             column count. Nothing is written in this case.
            StreamError: If the sink fails.
        """
        values = np.asarray(table, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(
                f"Table must be 2-D (rows x fields), got shape {values.shape}."
            )
        if headings is not None and len(headings) != values.shape[1]:
            raise FieldCountError(expected=values.shape[1], actual=len(headings))

        try:
            if headings is not None:
                self.write_heading(headings)
            for row in values:
                self.write(row)
        finally:
            self.flush()
        logger.debug("Wrote %d rows x %d fields", values.shape[0], values.shape[1])
