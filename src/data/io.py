"""
Path-level readers and writers for numeric CSV files.

**Conceptual**: ``NumericCsvReader`` and ``NumericCsvWriter`` work on streams
the caller owns. This module is the one place in the project that opens files
by path, so scripts and analysis code can say "load this file as a table"
without repeating the open/heading/read_all boilerplate. It also converts
between ``NumericTable`` and pandas DataFrames for callers who prefer to
inspect or slice data with pandas.

**Rule**: Scripts should go through these functions rather than calling
``pd.read_csv`` on wild data files. ``pd.read_csv`` is strict about quoting and
produces object columns on stray text; the numeric reader gives a clear error
with a line number instead.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from src.config.settings import ReaderSettings, WriterSettings
from src.data.reader import NumericCsvReader
from src.data.schemas import NumericTable, StreamError
from src.data.writer import NumericCsvWriter

logger = logging.getLogger(__name__)


def read_numeric_csv(
    path: Path | str,
    settings: Optional[ReaderSettings] = None,
) -> NumericTable:
    """
    Read a numeric CSV file into a NumericTable.

    **Functionally**:
      - Opens the file in text mode (``newline=""`` so CRLF endings reach the
        reader intact and are stripped there).
      - Reads the heading unless ``settings.no_heading`` is set.
      - Reads all rows with ``NumericCsvReader.read_all()``.

    Args:
        path: Path to the file.
        settings: Reader settings (defaults to ``ReaderSettings()``).

    Returns:
        NumericTable with ``headings`` (None when ``no_heading``) and ``values``.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        StreamError: If the file can't be opened or read (e.g., it is a directory).
        FieldCountError: If a line has the wrong number of fields.
        ParseError: If a field is not a number.

    Example:
        >>> table = read_numeric_csv("data/exp4.txt", ReaderSettings(delimiter=" "))
        >>> table.headings
        ['x1', 'x2', 'x3', 'y']
        >>> table.shape
        (10000, 4)
    """
    path = Path(path)
    settings = settings or ReaderSettings()

    if not path.exists():
        raise FileNotFoundError(
            f"Numeric CSV not found: {path}. "
            f"Ensure the file exists and the path is correct."
        )

    try:
        handle = open(path, "r", encoding=settings.encoding, newline="")
    except OSError as e:
        raise StreamError(f"{path}: failed to open for reading. Error: {e}") from e

    with handle:
        reader = NumericCsvReader(handle, settings)
        headings = None if settings.no_heading else reader.read_heading()
        values = reader.read_all()

    logger.debug("Loaded %s: %d rows x %d fields", path, values.shape[0], values.shape[1])
    return NumericTable(values=values, headings=headings)


def write_numeric_csv(
    table: NumericTable,
    path: Path | str,
    settings: Optional[WriterSettings] = None,
) -> None:
    """
    Write a NumericTable to a file in canonical form.

    Creates the parent directory if needed. The heading line is written when
    ``table.headings`` is not None.

    Args:
        table: Table to write.
        path: Destination path (overwritten if it exists).
        settings: Writer settings (defaults to ``WriterSettings()``).

    Raises:
        StreamError: If the file can't be created or written.
    """
    path = Path(path)
    settings = settings or WriterSettings()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path, "w", encoding=settings.encoding, newline="")
    except OSError as e:
        raise StreamError(f"{path}: failed to open for writing. Error: {e}") from e

    with handle:
        NumericCsvWriter(handle, settings).write_all(table.headings, table.values)

    logger.debug("Wrote %s: %d rows x %d fields", path, table.shape[0], table.shape[1])


def table_to_dataframe(table: NumericTable) -> pd.DataFrame:
    """Convert a NumericTable to a float64 DataFrame (headings become columns)."""
    return table.to_dataframe()


def dataframe_to_table(df: pd.DataFrame, include_headings: bool = True) -> NumericTable:
    """
    Convert a DataFrame of numeric columns to a NumericTable.

    Args:
        df: DataFrame whose columns are all numeric (int, float or bool).
        include_headings: Use the column labels (as strings) for headings.
                          If False, the table has no headings.

    Returns:
        NumericTable with float64 values.

    Raises:
        ValueError: If any column is not numeric.
    """
    non_numeric = [
        col for col in df.columns
        if not pd.api.types.is_numeric_dtype(df[col])
    ]
    if non_numeric:
        raise ValueError(
            f"DataFrame has non-numeric columns: {non_numeric}. "
            f"Only numeric columns can be written as a numeric table."
        )

    values = df.to_numpy(dtype=np.float64)
    headings = [str(col) for col in df.columns] if include_headings else None
    return NumericTable(values=values, headings=headings)
