from __future__ import annotations

"""CSV row tokenizer.

Single pass over the text with one piece of state (inside a quoted field or
not). Malformed input never raises: an unterminated quote simply runs to the end
of the text.

Rules:
- ``"`` toggles quoting; ``""`` inside a quoted field is one literal quote
- newline ends a row only outside quotes
- delimiter ends a field only outside quotes
- carriage returns are dropped everywhere, quoted content included
- rows whose source text is whitespace only are not emitted
"""

__all__ = [
    "DELIMITER",
    "QUOTE",
    "RawRow",
    "tokenize_rows",
]

DELIMITER = ","
QUOTE = '"'
BOM = "\ufeff"

RawRow = list[str]


def tokenize_rows(text: str, delimiter: str = DELIMITER) -> list[RawRow]:
    """Split CSV text into rows of raw (untrimmed) field strings.

    Args:
        text: Raw CSV text
        delimiter: Single field separator character

    Returns:
        Rows in source order. Empty or whitespace-only input yields ``[]``.
    """
    if len(delimiter) != 1 or delimiter in (QUOTE, "\n", "\r"):
        raise ValueError(f"invalid delimiter: {delimiter!r}")

    if text.startswith(BOM):
        text = text[1:]

    rows: list[RawRow] = []
    fields: RawRow = []
    current: list[str] = []
    in_quotes = False
    # Whether the current row has anything but whitespace in its source text.
    # Quotes and delimiters count, so ``,,`` is a row of three empty fields.
    has_content = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == QUOTE:
            has_content = True
            if in_quotes and i + 1 < n and text[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "\r":
            pass
        elif ch == "\n" and not in_quotes:
            fields.append("".join(current))
            if has_content:
                rows.append(fields)
            fields = []
            current = []
            has_content = False
        elif ch == delimiter and not in_quotes:
            has_content = True
            fields.append("".join(current))
            current = []
        else:
            if not ch.isspace():
                has_content = True
            current.append(ch)
        i += 1

    # Trailing row without a final newline; also closes an unterminated quote.
    if has_content:
        fields.append("".join(current))
        rows.append(fields)

    return rows
