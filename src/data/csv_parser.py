"""
Single-line CSV field splitter.

**Conceptual**: Chart datasets are small, comma-separated files where a field
may be wrapped in double quotes so it can contain a literal comma (for
example `"Mean(Labelled energy consumption (kWh/year))"` headers or brand names
like `"Samsung, Inc"`). This module turns one line of such text into an ordered
list of string fields.

**Rules**:
  - `,` separates fields unless it appears inside a quoted section.
  - A `"` toggles quoted mode and is not copied into the field.
  - A line that ends with `,` produces a trailing empty field.
  - One surrounding pair of quotes is removed from each field if still present.

**Known limitation**: doubled quotes (`""`) inside a quoted field are not
unescaped the way RFC 4180 describes. Files containing literal quote
characters will lose them. Use the stdlib `csv` module if that matters.
"""

from typing import List

DELIMITER = ","
QUOTE = '"'


def parse_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into fields.

    Args:
        line: A single line of CSV text (no trailing newline).

    Returns:
        List of raw field strings, in column order. Always at least one
        element; an empty line yields `[""]`.

    Example:
        >>> parse_csv_line('"a,b",c')
        ['a,b', 'c']
        >>> parse_csv_line('a,b,')
        ['a', 'b', '']
    """
    values: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(char)

    # Last field (also covers the trailing-delimiter case)
    values.append("".join(current))

    return [_unwrap_quotes(value) for value in values]


def _unwrap_quotes(value: str) -> str:
    """Remove one leading and one trailing quote if both are present."""
    if len(value) >= 2 and value.startswith(QUOTE) and value.endswith(QUOTE):
        return value[1:-1]
    return value
