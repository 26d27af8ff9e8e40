#!/usr/bin/env python3
"""
Convert a hand-produced numeric data file into canonical numeric CSV.

**Purpose**: Data files "from the wild" come space-delimited, padded with
blanks, preceded by comment banners, with quoted or unquoted headings. This
script reads such a file with the tolerant numeric reader and writes it back
out in one predictable form: comma-delimited (by default), no padding, and
full-precision scientific notation.

**What it does**:
  1. Loads default reader/writer settings from the environment (.env)
  2. Applies any command-line overrides
  3. Reads INPUT (heading + rows) with full field-count and number checks
  4. Writes OUTPUT with the writer settings
  5. Prints a summary (headings, rows, fields)

**Usage**:
    From project root:
    ```bash
    python actions/convert_numeric_csv.py data/exp4.txt data/exp4.csv --delimiter space
    python actions/convert_numeric_csv.py raw.dat clean.csv --comment "#" --float-format g
    ```

**Exit codes**:
  - 0: Success
  - 1: Bad input (missing file, malformed line, bad option)
  - 2: Unexpected error
  - 130: Interrupted
"""

import argparse
import dataclasses
import sys
import traceback
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.config.settings import ReaderSettings, WriterSettings, get_settings, parse_delimiter
from src.data.io import read_numeric_csv, write_numeric_csv
from src.data.schemas import NumCsvError
from src.utils.text import FLOAT_FORMATS


def add_reader_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options that control how the input file is read."""
    parser.add_argument(
        "--delimiter",
        type=parse_delimiter,
        default=None,
        help="Input field delimiter (literal, or space/tab/comma/semicolon/pipe)",
    )
    parser.add_argument(
        "--heading-delimiter",
        type=parse_delimiter,
        default=None,
        help="Delimiter for the heading line only (default: same as --delimiter)",
    )
    parser.add_argument(
        "--comment",
        default=None,
        help="Skip lines starting with this prefix before the heading",
    )
    parser.add_argument(
        "--fields",
        type=int,
        default=None,
        help="Expected number of fields per line (default: inferred)",
    )
    parser.add_argument(
        "--no-heading",
        action="store_true",
        help="Input has no heading row",
    )
    parser.add_argument(
        "--skip-blank-lines",
        action="store_true",
        help="Ignore blank lines between data rows",
    )


def build_reader_settings(args: argparse.Namespace, base: ReaderSettings) -> ReaderSettings:
    """
    Merge command-line overrides onto base reader settings.

    Options left unset on the command line keep the base (environment) value.

    Raises:
        ValueError: If the merged settings are invalid.
    """
    overrides = {}
    if args.delimiter is not None:
        overrides["delimiter"] = args.delimiter
    if args.heading_delimiter is not None:
        overrides["heading_delimiter"] = args.heading_delimiter
    if args.comment is not None:
        overrides["comment"] = args.comment
    if args.fields is not None:
        overrides["fields_per_record"] = args.fields
    if args.no_heading:
        overrides["no_heading"] = True
    if args.skip_blank_lines:
        overrides["skip_blank_lines"] = True
    return dataclasses.replace(base, **overrides)


def build_writer_settings(args: argparse.Namespace, base: WriterSettings) -> WriterSettings:
    """
    Merge command-line overrides onto base writer settings.

    Raises:
        ValueError: If the merged settings are invalid.
    """
    overrides = {}
    if args.out_delimiter is not None:
        overrides["delimiter"] = args.out_delimiter
    if args.quote_heading:
        overrides["quote_heading"] = True
    if args.crlf:
        overrides["use_crlf"] = True
    if args.float_format is not None:
        overrides["float_format"] = args.float_format
    if args.precision is not None:
        overrides["precision"] = args.precision
    return dataclasses.replace(base, **overrides)


def parse_args(argv=None):
    """
    Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Namespace with input, output, reader and writer options.
    """
    parser = argparse.ArgumentParser(
        description="Convert a numeric data file to canonical numeric CSV.",
        epilog="""
Examples:
  # Space-delimited file with a heading
  python actions/convert_numeric_csv.py data/exp4.txt data/exp4.csv --delimiter space

  # Skip '#' comment lines, write fixed-point with 6 decimals
  python actions/convert_numeric_csv.py raw.dat clean.csv --comment "#" --float-format f --precision 6
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("input", help="Path to the input data file")
    parser.add_argument("output", help="Path to write the canonical CSV")
    add_reader_arguments(parser)

    parser.add_argument(
        "--out-delimiter",
        type=parse_delimiter,
        default=None,
        help="Output field delimiter (default: ,)",
    )
    parser.add_argument(
        "--quote-heading",
        action="store_true",
        help="Wrap heading names in double quotes",
    )
    parser.add_argument(
        "--crlf",
        action="store_true",
        help="Use \\r\\n line endings",
    )
    parser.add_argument(
        "--float-format",
        choices=FLOAT_FORMATS,
        default=None,
        help="Float format character (default: e)",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Float precision (default: 16)",
    )

    return parser.parse_args(argv)


def convert_file(
    input_path: Path,
    output_path: Path,
    reader_settings: ReaderSettings,
    writer_settings: WriterSettings,
) -> dict:
    """
    Read one numeric file and write it back in canonical form.

    Returns:
        Dict with keys 'headings', 'rows', 'fields'.

    Raises:
        FileNotFoundError: If the input file doesn't exist.
        NumCsvError: If the input is malformed or writing fails.
    """
    table = read_numeric_csv(input_path, reader_settings)
    write_numeric_csv(table, output_path, writer_settings)
    rows, fields = table.shape
    return {
        "headings": table.headings,
        "rows": rows,
        "fields": fields,
    }


def main(argv=None):
    """
    Main entrypoint for conversion.

    Steps:
      1. Parse arguments and build settings
      2. Convert the file
      3. Print a summary
    """
    try:
        args = parse_args(argv)

        try:
            settings = get_settings()
            reader_settings = build_reader_settings(args, settings.reader)
            writer_settings = build_writer_settings(args, settings.writer)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        input_path = Path(args.input)
        output_path = Path(args.output)
        print(f"Converting {input_path} -> {output_path}")

        try:
            summary = convert_file(input_path, output_path, reader_settings, writer_settings)
        except (FileNotFoundError, NumCsvError) as e:
            print(f"  ✗ {input_path}: {e}", file=sys.stderr)
            sys.exit(1)

        if summary["headings"] is not None:
            print(f"  ✓ Headings: {summary['headings']}")
        print(f"  ✓ Rows: {summary['rows']}, fields: {summary['fields']}")
        print(f"  ✓ Saved to {output_path}")
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
