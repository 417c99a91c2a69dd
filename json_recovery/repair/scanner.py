"""
String-state scanner.

Walks the text once, tracking whether the cursor is inside a string literal
and whether the next character is escaped. Raw control characters found
inside string literals are rewritten as JSON escapes.

Multi-line answer text copied verbatim into a string field is the most
common reason otherwise well-formed model output fails strict parsing.
"""

_NAMED_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# Code points below this are control characters that JSON forbids inside strings
CONTROL_THRESHOLD = 32


def escape_control_character(char: str) -> str:
    """Return the JSON escape sequence for a single control character."""
    if char in _NAMED_ESCAPES:
        return _NAMED_ESCAPES[char]
    return f"\\u{ord(char):04x}"


def escape_control_characters(text: str) -> str:
    """
    Escape raw control characters inside string literals.

    Transition rules, in precedence order:
    1. If the previous character was a backslash, emit literally.
    2. A backslash marks the next character as escaped.
    3. An unescaped double quote toggles the in-string state.
    4. Inside a string, a code point below 32 is emitted as an escape.

    The pass is idempotent: running it over its own output changes nothing.

    Args:
        text: Working JSON text.

    Returns:
        Text with no raw control characters inside string literals.
    """
    in_string = False
    escape_next = False
    out: list[str] = []

    for char in text:
        if escape_next:
            escape_next = False
            out.append(char)
        elif char == "\\":
            escape_next = True
            out.append(char)
        elif char == '"':
            in_string = not in_string
            out.append(char)
        elif in_string and ord(char) < CONTROL_THRESHOLD:
            out.append(escape_control_character(char))
        else:
            out.append(char)

    return "".join(out)
