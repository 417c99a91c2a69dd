"""
Positional repair classifier.

Maps a strict-parser failure onto one of the small set of local repairs the
engine is allowed to make, and applies it to the working text.
"""

import json

from json_recovery.models import ErrorKind, ParseDiagnostic
from json_recovery.repair.scanner import escape_control_character, escape_control_characters

# Substrings of the messages raised by the standard library decoder
_KIND_BY_MESSAGE: tuple[tuple[str, ErrorKind], ...] = (
    ("Expecting ',' delimiter", ErrorKind.MISSING_SEPARATOR),
    ("Invalid control character", ErrorKind.CONTROL_CHARACTER),
)

_VALUE_OPENERS = frozenset('"{[-0123456789tfn')
_STRING_OR_CONTAINER_OPENERS = frozenset('"{[')


def classify(error: json.JSONDecodeError) -> ParseDiagnostic:
    """
    Build a diagnostic from a decoder error.

    Args:
        error: The exception raised by json.loads.

    Returns:
        ParseDiagnostic with the repair class for this failure.
    """
    kind = ErrorKind.UNCLASSIFIED
    for fragment, candidate in _KIND_BY_MESSAGE:
        if fragment in error.msg:
            kind = candidate
            break

    return ParseDiagnostic(
        kind=kind,
        message=error.msg,
        offset=error.pos,
        line=error.lineno,
        column=error.colno,
    )


def _is_unescaped_quote(text: str, index: int) -> bool:
    """Check whether text[index] is a quote not preceded by an odd run of backslashes."""
    if text[index] != '"':
        return False
    backslashes = 0
    j = index - 1
    while j >= 0 and text[j] == "\\":
        backslashes += 1
        j -= 1
    return backslashes % 2 == 0


def _ends_value(char: str) -> bool:
    return char == '"' or char in "}]" or char.isalnum()


def insert_missing_separator(text: str, offset: int, window: int) -> tuple[str, int] | None:
    """
    Insert a comma where the parser expected one.

    First checks the local context: if the last non-whitespace character
    before offset ends a value and the character at offset opens one, the
    comma goes at offset. Otherwise scans backward (at most `window`
    characters) for an unescaped closing quote followed by whitespace and a
    string/object/array opener, and inserts the comma before that opener.

    Args:
        text: Working JSON text.
        offset: Offset reported by the parser.
        window: Maximum characters to scan backward.

    Returns:
        Tuple of (new text, insertion index), or None if no position applies.
    """
    if offset >= len(text):
        return None

    before = offset - 1
    while before >= 0 and text[before].isspace():
        before -= 1

    if before >= 0 and _ends_value(text[before]) and text[offset] in _VALUE_OPENERS:
        return text[:offset] + "," + text[offset:], offset

    lower = max(0, offset - window)
    for i in range(offset - 1, lower - 1, -1):
        if not _is_unescaped_quote(text, i):
            continue
        j = i + 1
        while j < len(text) and text[j].isspace():
            j += 1
        if j > i + 1 and j < len(text) and text[j] in _STRING_OR_CONTAINER_OPENERS:
            return text[:j] + "," + text[j:], j

    return None


def escape_stray_control(text: str, offset: int) -> tuple[str, str] | None:
    """
    Escape control characters the parser rejected.

    Re-runs the string-state scanner over the whole text; if that changes
    nothing, escapes the single character at offset.

    Returns:
        Tuple of (new text, action description), or None if nothing changed.
    """
    # The engine scans before its first parse, so this only fires when the
    # scanner and the parser disagree about where a string ends.
    rescanned = escape_control_characters(text)
    if rescanned != text:
        return rescanned, "re-escaped control characters inside strings"

    if offset < len(text) and ord(text[offset]) < 32:
        escaped = escape_control_character(text[offset])
        return text[:offset] + escaped + text[offset + 1 :], f"escaped control character at {offset}"

    return None


def apply_repair(text: str, diagnostic: ParseDiagnostic, window: int) -> tuple[str, str] | None:
    """
    Apply the repair selected for a diagnostic.

    Args:
        text: Working JSON text.
        diagnostic: Classified parser failure.
        window: Backward-scan window for separator insertion.

    Returns:
        Tuple of (repaired text, action description), or None when the
        failure is unclassified or no repair position exists.
    """
    if diagnostic.kind == ErrorKind.MISSING_SEPARATOR:
        inserted = insert_missing_separator(text, diagnostic.offset, window)
        if inserted is None:
            return None
        repaired, index = inserted
        return repaired, f"inserted ',' at {index}"

    if diagnostic.kind == ErrorKind.CONTROL_CHARACTER:
        return escape_stray_control(text, diagnostic.offset)

    return None
