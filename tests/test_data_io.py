"""
Tests for path-level I/O and the table contract.

This module tests:
  - NumericTable validation (shape, dtype, heading length).
  - read_numeric_csv / write_numeric_csv on real files.
  - pandas interchange (table_to_dataframe, dataframe_to_table).
  - Error handling (missing file, malformed lines).

All tests use temporary directories (via tmp_path fixture).
"""

import numpy as np
import pandas as pd
import pytest

from src.config.settings import ReaderSettings, WriterSettings
from src.data.io import (
    dataframe_to_table,
    read_numeric_csv,
    table_to_dataframe,
    write_numeric_csv,
)
from src.data.schemas import (
    FieldCountError,
    NumericTable,
    ParseError,
    StreamError,
    validate_numeric_table,
)


# ============================================================================
# Helper functions for test data generation
# ============================================================================

def make_table(n_rows: int = 10, headings=("x1", "x2", "x3", "y")) -> NumericTable:
    """
    Create a small NumericTable with a linear target column.
    """
    rng = np.random.default_rng(0)
    inputs = rng.uniform(-1.0, 1.0, size=(n_rows, len(headings) - 1))
    target = inputs.sum(axis=1, keepdims=True)
    values = np.hstack([inputs, target])
    return NumericTable(values=values, headings=list(headings))


# ============================================================================
# Tests for the table contract (src/data/schemas.py)
# ============================================================================

def test_validate_numeric_table_valid():
    # Should not raise
    validate_numeric_table(np.zeros((3, 2)), ["a", "b"])
    validate_numeric_table(np.zeros((0, 0)))


def test_validate_numeric_table_rejects_1d_values():
    with pytest.raises(ValueError) as exc_info:
        validate_numeric_table(np.zeros(3))

    assert "2-D" in str(exc_info.value)


def test_validate_numeric_table_rejects_integer_values():
    with pytest.raises(ValueError) as exc_info:
        NumericTable(values=np.zeros((2, 2), dtype=int))

    assert "floating dtype" in str(exc_info.value)


def test_numeric_table_heading_length_must_match_columns():
    with pytest.raises(FieldCountError):
        NumericTable(values=np.zeros((2, 3)), headings=["a", "b"])


def test_numeric_table_to_dataframe():
    table = make_table(n_rows=4)
    df = table.to_dataframe()

    assert list(df.columns) == ["x1", "x2", "x3", "y"]
    assert df.shape == (4, 4)
    np.testing.assert_array_equal(df.to_numpy(), table.values)


def test_numeric_table_without_headings_to_dataframe():
    df = NumericTable(values=np.ones((2, 3))).to_dataframe()
    assert list(df.columns) == [0, 1, 2]


# ============================================================================
# Tests for file readers/writers (src/data/io.py)
# ============================================================================

def test_write_and_read_numeric_csv_roundtrip(tmp_path):
    table = make_table(n_rows=25)
    path = tmp_path / "data.csv"

    write_numeric_csv(table, path)
    loaded = read_numeric_csv(path)

    assert loaded.headings == table.headings
    np.testing.assert_array_equal(loaded.values, table.values)


def test_roundtrip_with_crlf_and_space_delimiter(tmp_path):
    table = make_table(n_rows=5)
    path = tmp_path / "data.txt"

    write_numeric_csv(table, path, WriterSettings(delimiter=" ", use_crlf=True))
    assert b"\r\n" in path.read_bytes()

    loaded = read_numeric_csv(path, ReaderSettings(delimiter=" "))
    assert loaded.headings == table.headings
    np.testing.assert_array_equal(loaded.values, table.values)


def test_read_wild_space_delimited_file(tmp_path):
    """A hand-written file with comments, padding and a quoted heading."""
    path = tmp_path / "exp4.txt"
    path.write_text(
        "# experiment 4\n"
        "\n"
        '"x1"  "x2"   "x3" "y"\n'
        " 0.1  0.2  0.3   0.6\n"
        "1e-1 2e-1 3e-1 6e-1  \n"
    )

    table = read_numeric_csv(path, ReaderSettings(delimiter=" ", comment="#"))

    assert table.headings == ["x1", "x2", "x3", "y"]
    assert table.shape == (2, 4)
    np.testing.assert_allclose(table.values[1], [0.1, 0.2, 0.3, 0.6])


def test_read_numeric_csv_no_heading(tmp_path):
    path = tmp_path / "raw.csv"
    path.write_text("1,2\n3,4\n")

    table = read_numeric_csv(path, ReaderSettings(no_heading=True))

    assert table.headings is None
    np.testing.assert_array_equal(table.values, [[1.0, 2.0], [3.0, 4.0]])


def test_read_numeric_csv_heading_only(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("a,b,c\n")

    table = read_numeric_csv(path)

    assert table.headings == ["a", "b", "c"]
    assert table.shape == (0, 3)


def test_read_numeric_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError) as exc_info:
        read_numeric_csv(tmp_path / "nope.csv")

    assert "not found" in str(exc_info.value)


def test_read_numeric_csv_malformed_line(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("a,b\n1,2\n3,four\n")

    with pytest.raises(ParseError) as exc_info:
        read_numeric_csv(path)

    assert exc_info.value.line == 3
    assert exc_info.value.token == "four"


def test_write_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "out.csv"

    write_numeric_csv(make_table(n_rows=2), path)

    assert path.exists()


def test_write_numeric_csv_without_headings(tmp_path):
    path = tmp_path / "values.csv"
    table = NumericTable(values=np.array([[1.0, 2.0]]))

    write_numeric_csv(table, path, WriterSettings(float_format="g"))

    assert path.read_text() == "1,2\n"


# ============================================================================
# pandas interchange
# ============================================================================

def test_table_to_dataframe_and_back():
    table = make_table(n_rows=6)

    df = table_to_dataframe(table)
    back = dataframe_to_table(df)

    assert back.headings == table.headings
    np.testing.assert_array_equal(back.values, table.values)


def test_dataframe_to_table_converts_ints_and_labels():
    df = pd.DataFrame({1: [1, 2], "b": [0.5, 1.5]})

    table = dataframe_to_table(df)

    assert table.headings == ["1", "b"]
    assert table.values.dtype == np.float64
    np.testing.assert_array_equal(table.values, [[1.0, 0.5], [2.0, 1.5]])


def test_dataframe_to_table_without_headings():
    table = dataframe_to_table(pd.DataFrame({"a": [1.0]}), include_headings=False)
    assert table.headings is None


def test_dataframe_to_table_rejects_text_columns():
    df = pd.DataFrame({"a": [1.0], "label": ["cat"]})

    with pytest.raises(ValueError) as exc_info:
        dataframe_to_table(df)

    assert "label" in str(exc_info.value)


def test_read_numeric_csv_directory_raises_stream_error(tmp_path):
    with pytest.raises(StreamError) as exc_info:
        read_numeric_csv(tmp_path)

    assert isinstance(exc_info.value.__cause__, OSError)


def test_write_numeric_csv_to_directory_raises_stream_error(tmp_path):
    with pytest.raises(StreamError) as exc_info:
        write_numeric_csv(make_table(n_rows=2), tmp_path)

    assert "failed to open for writing" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, OSError)
