"""Render SQL queries with their arguments inlined, for logging."""

from __future__ import annotations

PLACEHOLDER_DOLLAR = "$"
PLACEHOLDER_QUESTION = "?"

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _escape_char(ch: str) -> str:
    if ch in _ESCAPES:
        return _ESCAPES[ch]
    code = ord(ch)
    if 0xDC80 <= code <= 0xDCFF:
        # A byte that was not valid UTF-8, smuggled through surrogateescape.
        return f"\\x{code - 0xDC00:02x}"
    if ch.isprintable():
        return ch
    if code < 0x80:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def _quote(text: str) -> str:
    return '"' + "".join(_escape_char(ch) for ch in text) + '"'


def _format_value(value: object) -> str:
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (bytes, bytearray)):
        return _quote(bytes(value).decode("utf-8", errors="surrogateescape"))
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    return str(value)


def pretty(query: str, placeholder: str, *args: object) -> str:
    """Substitute numbered placeholders with the arguments and flatten whitespace."""
    for number, value in enumerate(args, start=1):
        query = query.replace(f"{placeholder}{number}", _format_value(value))
    query = query.replace("\t", "").replace("\n", " ")
    return query.strip()