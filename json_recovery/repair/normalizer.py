"""
Structural normalizer.

Fixes two systematic habits of generative models in one scan:
- unquoted property names (`{name: "A"}`)
- trailing commas (`{"a": 1,}`)

Both rewrites are applied only outside string literals, so values such as
"score: 5, passed" are never touched.
"""

import re

# Bare identifier in key position, followed by optional whitespace and a colon
_UNQUOTED_KEY = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*(?=\s*:)")


def _next_significant(text: str, start: int) -> str:
    """Return the first non-whitespace character at or after start ("" at end)."""
    for i in range(start, len(text)):
        if not text[i].isspace():
            return text[i]
    return ""


def normalize_structure(text: str) -> str:
    """
    Quote bare property names and drop trailing commas.

    Args:
        text: Boundary-extracted JSON text.

    Returns:
        Normalized text.
    """
    out: list[str] = []
    in_string = False
    escape_next = False
    # True right after `{` or `,` (ignoring whitespace): a key may start here
    key_position = False
    i = 0
    n = len(text)

    while i < n:
        char = text[i]

        if in_string:
            out.append(char)
            if escape_next:
                escape_next = False
            elif char == "\\":
                escape_next = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            key_position = False
        elif char == ",":
            if _next_significant(text, i + 1) in ("}", "]"):
                i += 1
                continue
            key_position = True
        elif char == "{":
            key_position = True
        elif key_position and not char.isspace():
            key_position = False
            match = _UNQUOTED_KEY.match(text, i)
            if match:
                out.append(f'"{match.group(0)}"')
                i = match.end()
                continue

        out.append(char)
        i += 1

    return "".join(out)
