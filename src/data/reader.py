"""
Fault-tolerant reader for numeric delimited text.

**Conceptual**: Hand-produced data files rarely follow CSV rules exactly:
they have comment banners, blank lines before the heading, columns padded
with spaces, trailing delimiters, and headings that are sometimes quoted and
sometimes not. ``NumericCsvReader`` accepts all of that, but is strict about
the one thing that matters for a numeric table: every row must have the same
number of fields, and every field must be a number.

**Lifecycle** (``ReaderState``):

    UNSTARTED --read_heading()--> HEADING_READ --read()--> READING
        |                                                     |
        +------------------------read()-----------------------+
                                                              |
                                   end of stream --> EXHAUSTED

  - ``read_heading()`` is optional and must be called at most once, before
    any ``read()``. This is a caller contract; it is not checked.
  - Once the end of the stream is seen the reader stays EXHAUSTED and
    ``read()`` keeps returning None without touching the source.

**Field count**: fixed by ``ReaderSettings.fields_per_record`` if set,
otherwise by the heading, otherwise by the first data line. Every later line
must match it exactly (after blank tokens are dropped).

**Threading**: a reader mutates its cursor in place. Do not share one reader
between threads; independent readers over independent streams are fine.

Example:
    >>> import io
    >>> reader = NumericCsvReader(io.StringIO("a b c\\n1 2 3\\n4 5 6\\n"),
    ...                           ReaderSettings(delimiter=" "))
    >>> reader.read_heading()
    ['a', 'b', 'c']
    >>> reader.read_all().tolist()
    [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional

import numpy as np

from src.config.settings import ReaderSettings
from src.data.schemas import FieldCountError, ParseError, StreamError
from src.utils.text import parse_float, split_fields, strip_quotes

logger = logging.getLogger(__name__)


class ReaderState(Enum):
    """Progress of a reader through its stream."""
    UNSTARTED = "unstarted"
    HEADING_READ = "heading_read"
    READING = "reading"
    EXHAUSTED = "exhausted"


class NumericCsvReader:
    """
    Reads headings and float64 rows from a line-oriented source.

    Args:
        source: Any iterable of lines: an open text or binary file,
                ``io.StringIO``/``io.BytesIO``, or a list of strings. Byte
                lines are decoded with ``settings.encoding``. The reader never
                opens or closes the source.
        settings: Reader configuration (defaults to ``ReaderSettings()``).
    """

    def __init__(self, source: Iterable, settings: Optional[ReaderSettings] = None):
        self.settings = settings or ReaderSettings()
        self._lines = iter(source)
        self._fields_per_record = self.settings.fields_per_record
        self._state = ReaderState.UNSTARTED
        self._line_number = 0

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def fields_per_record(self) -> Optional[int]:
        """Established field count, or None if not yet known."""
        return self._fields_per_record

    @property
    def line_number(self) -> int:
        """Number of physical lines consumed so far (1-based number of the last line)."""
        return self._line_number

    def _next_line(self) -> Optional[str]:
        """
        Pull one line from the source with its terminator removed.

        Returns None at end of stream and moves the reader to EXHAUSTED.

        Raises:
            StreamError: If the source raises while producing the line.
        """
        try:
            line = next(self._lines)
        except StopIteration:
            self._state = ReaderState.EXHAUSTED
            return None
        except (OSError, ValueError) as e:
            # ValueError covers reads from closed files and decode failures
            raise StreamError(
                f"line {self._line_number + 1}: failed to read from source. Error: {e}"
            ) from e

        if isinstance(line, bytes):
            try:
                line = line.decode(self.settings.encoding)
            except UnicodeDecodeError as e:
                raise StreamError(
                    f"line {self._line_number + 1}: cannot decode as "
                    f"{self.settings.encoding}. Error: {e}"
                ) from e

        self._line_number += 1
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def _is_skippable_heading_line(self, line: str) -> bool:
        if not line.strip():
            return True
        comment = self.settings.comment
        return bool(comment) and line.startswith(comment)

    def read_heading(self) -> list[str]:
        """
        Read the heading row, skipping leading blank and comment lines.

        **Functionally**:
          - Skips lines that are blank (whitespace only) or start with the
            comment prefix.
          - Splits the first remaining line on the heading delimiter, trims
            tokens, and drops blank ones.
          - Strips one layer of double quotes from each name.
          - Establishes the stream's field count (or checks it against a
            preconfigured one).

        If the stream ends before a usable line is found, returns an empty
        list and the reader becomes EXHAUSTED.

        Returns:
            Column names in file order.

        Raises:
            StreamError: If the source fails.
            FieldCountError: If ``fields_per_record`` was preconfigured and the
                             heading has a different number of names.
        """
        line = self._next_line()
        while line is not None and self._is_skippable_heading_line(line):
            line = self._next_line()

        if line is None:
            logger.debug("No heading found before end of stream")
            return []

        tokens = split_fields(line, self.settings.effective_heading_delimiter)

        if self._fields_per_record is not None and len(tokens) != self._fields_per_record:
            raise FieldCountError(
                expected=self._fields_per_record,
                actual=len(tokens),
                line=self._line_number,
            )
        self._fields_per_record = len(tokens)

        headings = [strip_quotes(token) for token in tokens]
        self._state = ReaderState.HEADING_READ
        logger.debug("Read heading on line %d: %s", self._line_number, headings)
        return headings

    def read(self) -> Optional[np.ndarray]:
        """
        Read the next data row.

        **Functionally**:
          - Pulls one line (more if ``skip_blank_lines`` is set and the line
            has no tokens).
          - Splits, trims, and drops blank tokens.
          - On the first data line of a stream with no heading and no
            configured count, the token count becomes the field count.
          - Parses every token as float64.

        Returns:
            1-D float64 array of length ``fields_per_record``, or None at end
            of stream. None is never returned for an error.

        Raises:
            StreamError: If the source fails.
            FieldCountError: If the line has the wrong number of tokens.
            ParseError: If a token is not a number. No partial row is returned.
        """
        if self._state is ReaderState.EXHAUSTED:
            return None

        while True:
            line = self._next_line()
            if line is None:
                return None
            tokens = split_fields(line, self.settings.delimiter)
            if tokens or not self.settings.skip_blank_lines:
                break

        if self._state is ReaderState.UNSTARTED and self._fields_per_record is None:
            self._fields_per_record = len(tokens)
        self._state = ReaderState.READING

        if len(tokens) != self._fields_per_record:
            raise FieldCountError(
                expected=self._fields_per_record,
                actual=len(tokens),
                line=self._line_number,
            )

        row = np.empty(len(tokens), dtype=np.float64)
        for i, token in enumerate(tokens):
            try:
                row[i] = parse_float(token)
            except ValueError as e:
                raise ParseError(token=token, field=i, line=self._line_number) from e
        return row

    def read_all(self) -> np.ndarray:
        """
        Read every remaining row into a 2-D float64 array.

        Any error aborts the whole call and propagates; rows read so far are
        discarded. Callers wanting to skip bad lines should loop over
        ``read()`` themselves.

        Returns:
            Array of shape (rows, fields_per_record). With no rows the shape is
            (0, fields_per_record), or (0, 0) if the field count was never
            established.

        Raises:
            StreamError, FieldCountError, ParseError: As raised by ``read()``.
        """
        rows = []
        while True:
            row = self.read()
            if row is None:
                break
            rows.append(row)

        n_fields = self._fields_per_record or 0
        if not rows:
            return np.empty((0, n_fields), dtype=np.float64)

        table = np.vstack(rows)
        logger.debug("Read %d rows x %d fields", table.shape[0], table.shape[1])
        return table

    def __iter__(self) -> Iterator[np.ndarray]:
        while True:
            row = self.read()
            if row is None:
                return
            yield row
