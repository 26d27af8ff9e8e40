"""
Configuration settings for numeric CSV reading and writing.

**Conceptual**: This module provides strongly-typed, immutable configuration
objects for the reader and the writer. A settings object is created once,
attached to a reader/writer at construction, and never changes during a pass
over a stream. Defaults match the most common case (comma-delimited, heading
row present, scientific notation on output) so most callers never touch them.

**Where values come from**:
  - Code: construct ``ReaderSettings(delimiter=" ")`` directly (the usual case
    for library use and tests).
  - Environment: ``Settings.from_env()`` reads ``NUMCSV_*`` variables, with a
    ``.env`` file at the project root loaded via python-dotenv. This is how
    the command-line actions pick up site-wide defaults.

All settings are validated in ``__post_init__`` so a bad delimiter or format
fails at startup, not halfway through a file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from src.utils.text import FLOAT_FORMATS, DEFAULT_PRECISION

# Load .env from project root (no-op if the file doesn't exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Named delimiters accepted in environment variables and on the command line,
# where a bare space or tab is easy to lose
DELIMITER_ALIASES = {
    "space": " ",
    "tab": "\t",
    "comma": ",",
    "semicolon": ";",
    "pipe": "|",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_delimiter(value: str) -> str:
    """Resolve a delimiter name ("space", "tab", ...) or return the literal value."""
    return DELIMITER_ALIASES.get(value.lower(), value)


def _env_delimiter(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return parse_delimiter(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(
        f"{name} must be a boolean (one of {sorted(_TRUE_VALUES | _FALSE_VALUES - {''})}), got: {raw}"
    )


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


@dataclass(frozen=True)
class ReaderSettings:
    """
    Configuration for reading numeric CSV streams.

    Attributes:
        delimiter: Field delimiter for data lines (default ",").
        heading_delimiter: Delimiter for the heading line only. Empty string
                          means "same as delimiter".
        comment: Lines starting with this prefix are skipped while searching
                 for the heading. Empty string disables comment handling.
        fields_per_record: Expected number of fields. None means "infer from the
                          heading, or from the first data line if there is no
                          heading". When set, enforced strictly on every line.
        no_heading: The file has no heading row; table-level readers skip
                    heading parsing entirely.
        skip_blank_lines: Skip data lines with no non-blank tokens instead of
                          treating them as zero-field records.
        encoding: Text encoding used when the source yields bytes.
    """
    delimiter: str = ","
    heading_delimiter: str = ""
    comment: str = ""
    fields_per_record: Optional[int] = None
    no_heading: bool = False
    skip_blank_lines: bool = False
    encoding: str = "utf-8"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.delimiter:
            raise ValueError("Reader delimiter must be a non-empty string.")
        if self.fields_per_record is not None and self.fields_per_record < 1:
            raise ValueError(
                f"fields_per_record must be a positive integer or None, "
                f"got: {self.fields_per_record}"
            )

    @property
    def effective_heading_delimiter(self) -> str:
        return self.heading_delimiter or self.delimiter

    @classmethod
    def from_env(cls) -> "ReaderSettings":
        """
        Load reader settings from environment variables.

        **Environment variables** (all optional):
          - NUMCSV_DELIMITER: field delimiter; "space", "tab", "comma",
            "semicolon" and "pipe" are accepted as names.
          - NUMCSV_HEADING_DELIMITER: heading delimiter (same aliases).
          - NUMCSV_COMMENT: comment prefix.
          - NUMCSV_FIELDS_PER_RECORD: expected field count.
          - NUMCSV_NO_HEADING, NUMCSV_SKIP_BLANK_LINES: booleans.
          - NUMCSV_ENCODING: encoding for byte sources.

        Raises:
            ValueError: If a variable has an invalid value.
        """
        return cls(
            delimiter=_env_delimiter("NUMCSV_DELIMITER", ","),
            heading_delimiter=_env_delimiter("NUMCSV_HEADING_DELIMITER", ""),
            comment=os.getenv("NUMCSV_COMMENT", ""),
            fields_per_record=_env_int("NUMCSV_FIELDS_PER_RECORD", None),
            no_heading=_env_bool("NUMCSV_NO_HEADING", False),
            skip_blank_lines=_env_bool("NUMCSV_SKIP_BLANK_LINES", False),
            encoding=os.getenv("NUMCSV_ENCODING", "utf-8"),
        )


@dataclass(frozen=True)
class WriterSettings:
    """
    Configuration for writing numeric CSV streams.

    Attributes:
        delimiter: Field delimiter (default ",").
        quote_heading: Wrap each heading name in double quotes.
        use_crlf: Terminate lines with "\\r\\n" instead of "\\n".
        float_format: Float format character, one of e/E/f/F/g/G (default "e").
        precision: Digits after the decimal point, or significant digits for
                   g/G (default 16).
        encoding: Text encoding used when the sink expects bytes.
        buffer_size: Number of buffered characters that triggers a write to
                     the sink.
    """
    delimiter: str = ","
    quote_heading: bool = False
    use_crlf: bool = False
    float_format: str = "e"
    precision: int = DEFAULT_PRECISION
    encoding: str = "utf-8"
    buffer_size: int = 4096

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.delimiter:
            raise ValueError("Writer delimiter must be a non-empty string.")
        if self.float_format not in FLOAT_FORMATS:
            raise ValueError(
                f"float_format must be one of {list(FLOAT_FORMATS)}, got: {self.float_format!r}"
            )
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got: {self.precision}")
        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got: {self.buffer_size}")

    @property
    def line_ending(self) -> str:
        return "\r\n" if self.use_crlf else "\n"

    @classmethod
    def from_env(cls) -> "WriterSettings":
        """
        Load writer settings from environment variables.

        **Environment variables** (all optional):
          - NUMCSV_WRITE_DELIMITER: output delimiter (same aliases as reading).
          - NUMCSV_QUOTE_HEADING, NUMCSV_USE_CRLF: booleans.
          - NUMCSV_FLOAT_FORMAT: e/E/f/F/g/G.
          - NUMCSV_PRECISION: integer precision.
          - NUMCSV_ENCODING: encoding for byte sinks.

        Raises:
            ValueError: If a variable has an invalid value.
        """
        return cls(
            delimiter=_env_delimiter("NUMCSV_WRITE_DELIMITER", ","),
            quote_heading=_env_bool("NUMCSV_QUOTE_HEADING", False),
            use_crlf=_env_bool("NUMCSV_USE_CRLF", False),
            float_format=os.getenv("NUMCSV_FLOAT_FORMAT", "e"),
            precision=_env_int("NUMCSV_PRECISION", DEFAULT_PRECISION),
            encoding=os.getenv("NUMCSV_ENCODING", "utf-8"),
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings: reader and writer configuration together.

    **Usage pattern**:
      ```python
      from src.config.settings import get_settings

      settings = get_settings()
      reader = NumericCsvReader(handle, settings.reader)
      ```

    Attributes:
        reader: Settings used by readers.
        writer: Settings used by writers.
    """
    reader: ReaderSettings = ReaderSettings()
    writer: WriterSettings = WriterSettings()

    @classmethod
    def from_env(cls) -> "Settings":
        """Load reader and writer settings from environment variables."""
        return cls(
            reader=ReaderSettings.from_env(),
            writer=WriterSettings.from_env(),
        )


_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.
    Tests can bypass this by constructing their own settings objects, or call
    ``reset_settings()`` after changing environment variables.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If an environment variable has an invalid value.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """Reset the global settings singleton (for testing)."""
    global _default_settings
    _default_settings = None
