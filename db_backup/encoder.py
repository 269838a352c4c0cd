"""
SQL literal encoding for dumped field values.
"""

import re
from datetime import timedelta
from typing import Any, Optional

# Values matching these are written without quotes. Zero and zero-padded
# numbers ("0", "007") do not match the integer pattern and end up quoted.
UNQUOTED_LITERALS = frozenset({"true", "false", "NULL", "null"})
INTEGER_PATTERN = re.compile(r"-?[1-9][0-9]*")

# Applied in order; the backslash must go first.
_ESCAPES = (
    ("\\", "\\\\"),
    ("'", "\\'"),
    ('"', '\\"'),
    ("\0", "\\0"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\f", "\\f"),
    ("\t", "\\t"),
    ("\v", "\\v"),
    ("\a", "\\a"),
    ("\b", "\\b"),
)

def _format_time(value: timedelta) -> str:
    """Render a TIME column as [-]HH:MM:SS[.ffffff]. Hours may exceed 24."""
    micros = value // timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    seconds, micros = divmod(abs(micros), 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micros:
        text += f".{micros:06d}"
    return text


_TEXT_CONVERTERS = {
    bool: lambda v: "1" if v else "0",
    bytes: lambda v: v.decode("utf-8", "surrogateescape"),
    bytearray: lambda v: bytes(v).decode("utf-8", "surrogateescape"),
    set: lambda v: ",".join(sorted(v)),
    timedelta: _format_time,
}


def to_text(value: Any) -> Optional[str]:
    """Convert a driver value into the text the server would have sent."""
    if value is None:
        return None
    converter = _TEXT_CONVERTERS.get(type(value))
    if converter:
        return converter(value)
    return str(value)


def escape_string(text: str) -> str:
    """Backslash-escape quotes, backslashes and control characters."""
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def encode_value(value: Any) -> str:
    """Encode a single field value as a literal for an INSERT statement."""
    text = to_text(value)
    if text is None:
        return "NULL"
    if text in UNQUOTED_LITERALS or INTEGER_PATTERN.fullmatch(text):
        return text
    return f'"{escape_string(text)}"'
