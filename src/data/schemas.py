"""
Error taxonomy and table contract for numeric CSV data.

**Conceptual**: This module defines the "data contract" shared by the reader,
the writer, and every downstream consumer: a numeric table is a dense,
rectangular float64 matrix with an optional parallel list of column headings.
It also defines the closed set of errors the I/O layer can raise, each
carrying enough structured detail (line number, token, field position) to
point a user straight at the offending spot in a file.

**Error kinds**:
  - StreamError: the underlying source or sink failed (I/O error, decode
    error, closed handle). The stream is usually unusable afterwards.
  - FieldCountError: a line (or the heading) has a different number of
    non-blank tokens than the stream's established field count. The reader
    has already moved past the line, so reading can continue.
  - ParseError: a token is not a number. Also fatal for that line only.

All three derive from NumCsvError so callers can catch the whole family in
one clause.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd


class NumCsvError(Exception):
    """Base class for all numeric CSV reading/writing errors."""
    pass


class StreamError(NumCsvError):
    """
    Raised when the underlying byte/text source or sink fails.

    The underlying exception is always chained (``raise StreamError(...) from e``)
    so the root cause remains visible in tracebacks.
    """
    pass


class FieldCountError(NumCsvError):
    """
    Raised when a line's non-blank token count differs from the expected count.

    Attributes:
        expected: The stream's established (or preconfigured) field count.
        actual: The number of non-blank tokens found.
        line: 1-based line number in the source, or None when not tied to a line
              (e.g., a heading/table mismatch on the write path).
    """

    def __init__(self, expected: int, actual: int, line: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.line = line
        where = f"line {line}: " if line is not None else ""
        super().__init__(
            f"{where}wrong number of fields: expected {expected}, found {actual}."
        )


class ParseError(NumCsvError, ValueError):
    """
    Raised when a token cannot be interpreted as a floating-point number.

    Attributes:
        token: The offending token text (already trimmed).
        field: 0-based position of the token within the line's non-blank tokens.
        line: 1-based line number in the source.
    """

    def __init__(self, token: str, field: int, line: Optional[int] = None):
        self.token = token
        self.field = field
        self.line = line
        where = f"line {line}, " if line is not None else ""
        super().__init__(
            f"{where}field {field}: cannot parse {token!r} as a floating-point number."
        )


@dataclass(frozen=True)
class NumericTable:
    """
    A rectangular numeric table with optional column headings.

    **Conceptual**: This is the one structure handed to downstream consumers
    (model training, analysis). They decide how to slice it into inputs and
    outputs; the I/O layer only guarantees the shape contract.

    Attributes:
        values: 2-D float64 array of shape (rows, fields).
        headings: Column names, or None when the source had no heading row.
                  When present, len(headings) == values.shape[1].
    """
    values: np.ndarray
    headings: Optional[list[str]] = None

    def __post_init__(self):
        """Validate shape and heading length after initialization."""
        validate_numeric_table(self.values, self.headings)

    @property
    def shape(self) -> tuple[int, int]:
        return self.values.shape

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame (headings become column labels)."""
        return pd.DataFrame(self.values, columns=self.headings)


def validate_numeric_table(
    values: np.ndarray,
    headings: Optional[list[str]] = None,
) -> None:
    """
    Validate that an array and optional headings form a valid numeric table.

    **Checks**:
      - ``values`` is a 2-D numpy array of a floating dtype.
      - When headings are given, there is exactly one per column.

    Args:
        values: Candidate table values.
        headings: Optional column names.

    Raises:
        ValueError: If ``values`` is not a 2-D float array.
        FieldCountError: If the heading count differs from the column count.

    Returns:
        None (side-effect only; raises on error).
    """
    if not isinstance(values, np.ndarray) or values.ndim != 2:
        shape = getattr(values, "shape", None)
        raise ValueError(
            f"Numeric table values must be a 2-D numpy array, got shape {shape}."
        )
    if not np.issubdtype(values.dtype, np.floating):
        raise ValueError(
            f"Numeric table values must have a floating dtype, got {values.dtype}."
        )
    if headings is not None and len(headings) != values.shape[1]:
        raise FieldCountError(expected=values.shape[1], actual=len(headings))
