#!/usr/bin/env python3
"""
Inspect a numeric data file: headings, shape, and per-column statistics.

**Purpose**: Quick sanity check before handing a data file to a model. Reads
the file with the same tolerant numeric reader used everywhere else, so a
file that inspects cleanly will also load cleanly.

**Usage**:
    From project root:
    ```bash
    python actions/inspect_numeric_csv.py data/exp4.txt --delimiter space
    ```

**Exit codes**:
  - 0: File read successfully
  - 1: Bad input (missing file, malformed line, bad option)
  - 2: Unexpected error
  - 130: Interrupted
"""

import argparse
import sys
import traceback
from pathlib import Path

import pandas as pd

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from actions.convert_numeric_csv import add_reader_arguments, build_reader_settings
from src.config.settings import get_settings
from src.data.io import read_numeric_csv, table_to_dataframe
from src.data.schemas import NumCsvError, NumericTable


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Print headings, shape and column statistics of a numeric data file.",
    )
    parser.add_argument("input", help="Path to the data file")
    add_reader_arguments(parser)
    return parser.parse_args(argv)


def summarize_table(table: NumericTable) -> pd.DataFrame:
    """
    Per-column summary statistics (count, mean, std, min, quartiles, max).

    Returns:
        DataFrame with one column per table column, as from ``DataFrame.describe()``.
        Empty when the table has no columns.
    """
    df = table_to_dataframe(table)
    if df.shape[1] == 0:
        return pd.DataFrame()
    return df.describe()


def main(argv=None):
    """Main entrypoint for inspection."""
    try:
        args = parse_args(argv)

        try:
            reader_settings = build_reader_settings(args, get_settings().reader)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        input_path = Path(args.input)
        try:
            table = read_numeric_csv(input_path, reader_settings)
        except (FileNotFoundError, NumCsvError) as e:
            print(f"  ✗ {input_path}: {e}", file=sys.stderr)
            sys.exit(1)

        rows, fields = table.shape
        print("=" * 60)
        print(f"File: {input_path}")
        print("=" * 60)
        if table.headings is not None:
            print(f"Headings: {table.headings}")
        print(f"Rows: {rows}")
        print(f"Fields: {fields}")
        if rows > 0:
            print()
            print(summarize_table(table).to_string())
        sys.exit(0)

    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)

    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(2)


if __name__ == "__main__":
    main()
