"""
Token-level helpers for numeric delimited text.

**Conceptual**: Every line of a numeric CSV goes through the same small set of
steps: split on a delimiter, trim whitespace, drop blank tokens, and convert
the survivors to floats (or, on the way out, convert floats back to text).
Keeping those steps here means the reader and writer share exactly one
definition of "a field" and "a number".

**Tolerance rules** (applied identically to headings and data lines):
  - Surrounding whitespace is removed from every token.
  - Tokens that are empty after trimming are dropped, so a trailing
    delimiter (``"1,2,"``) or padding around delimiters (``"1 ,  2"`` with a
    space delimiter) does not create phantom fields.
  - A consequence: ``"1,,2"`` is read as two fields, not three. An embedded
    empty field cannot be told apart from a stray extra delimiter.
"""

import math

# Floating-point format characters accepted by the writer
FLOAT_FORMATS = ("e", "E", "f", "F", "g", "G")

# Default number of digits after the decimal point (or significant digits for g/G)
DEFAULT_PRECISION = 16

# Spellings of infinity accepted on input (after sign and case are removed)
INFINITY_LITERALS = ("inf", "infinity")


def split_fields(line: str, delimiter: str) -> list[str]:
    """
    Split a line on a delimiter, trim each piece, and drop blank pieces.

    Args:
        line: A single line of text with any line terminator already removed.
        delimiter: Field delimiter (may be more than one character).

    Returns:
        List of non-blank, whitespace-trimmed tokens in line order.

    Example:
        >>> split_fields(" 1.0, 2.0 ,", ",")
        ['1.0', '2.0']
        >>> split_fields("a  b c", " ")
        ['a', 'b', 'c']
    """
    tokens = []
    for piece in line.split(delimiter):
        piece = piece.strip()
        if piece:
            tokens.append(piece)
    return tokens


def strip_quotes(token: str) -> str:
    """Remove one trailing and then one leading double quote, if present."""
    if token.endswith('"'):
        token = token[:-1]
    if token.startswith('"'):
        token = token[1:]
    return token


def parse_float(token: str) -> float:
    """
    Parse a trimmed token as a 64-bit float.

    **Accepted**: plain decimal literals (``"3"``, ``"-0.5"``, ``".25"``),
    exponent literals (``"1e-3"``, ``"2.5E+10"``), and the special values
    ``nan``, ``inf`` and ``infinity`` in any letter case with an optional sign.

    **Rejected**: anything ``float()`` would refuse, plus forms ``float()``
    otherwise allows but which are not plain numeric literals in a data file:
      - digit-group underscores (``"1_000"``),
      - non-ASCII digits (``"١٢"``),
      - finite literals too large for float64 (``"1e400"``), which ``float()``
        silently turns into infinity.

    Args:
        token: Token with surrounding whitespace already removed.

    Returns:
        The parsed value.

    Raises:
        ValueError: If the token is not a valid numeric literal.
    """
    if "_" in token or not token.isascii():
        raise ValueError(f"could not convert string to float: {token!r}")
    value = float(token)
    if math.isinf(value) and token.lstrip("+-").lower() not in INFINITY_LITERALS:
        raise ValueError(f"value out of range for float64: {token!r}")
    return value


def format_float(value: float, float_format: str = "e", precision: int = DEFAULT_PRECISION) -> str:
    """
    Render a float with a fixed format character and precision.

    The default (``"e"``, 16) writes 17 significant digits, which is enough
    for every finite float64 to read back bit-for-bit.

    Args:
        value: Value to render.
        float_format: One of ``FLOAT_FORMATS``.
        precision: Digits after the decimal point (significant digits for g/G).

    Returns:
        Text representation, e.g. ``"1.5000000000000000e+00"``.

    Raises:
        ValueError: If ``float_format`` is not supported.
    """
    if float_format not in FLOAT_FORMATS:
        raise ValueError(
            f"Unsupported float format {float_format!r}. "
            f"Expected one of: {list(FLOAT_FORMATS)}."
        )
    value = float(value)
    # nan/inf render the same in every format; keep them readable by parse_float
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    return format(value, f".{precision}{float_format}")
