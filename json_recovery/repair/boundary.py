"""
Boundary extraction for raw model responses.

Models wrap JSON in markdown fences or surround it with prose even when told
not to. This module narrows the response to the candidate `{...}` payload
before any structural repair is attempted.
"""

import re

from json_recovery.repair.errors import NoJSONBoundaryFoundError, make_excerpt

# Opening fence on its own line, with an optional language tag (```json, ```JSON5, ...)
_OPENING_FENCE = re.compile(r"^[ \t]*```[\w+.-]*[ \t\r]*$", re.MULTILINE)
_FENCE = "```"


def strip_code_fence(text: str) -> str:
    """
    Remove markdown code-fence markers surrounding the payload.

    The body runs from the first opening fence to the last closing fence so
    that backticks quoted inside string values do not end the block early.
    Fence bodies without a `{` are ignored and the text is returned as-is.

    Args:
        text: Raw response text.

    Returns:
        Text with the surrounding fence markers removed.
    """
    opening = _OPENING_FENCE.search(text)
    if not opening:
        return text

    body_start = opening.end()
    closing = text.rfind(_FENCE)
    body = text[body_start:closing] if closing >= body_start else text[body_start:]

    if "{" not in body:
        return text
    return body.strip()


def extract_json_span(text: str, excerpt_radius: int = 40) -> str:
    """
    Narrow text to the outermost `{...}` span.

    Args:
        text: Raw response text.
        excerpt_radius: Characters kept on each side of the failure in excerpts.

    Returns:
        Substring from the first `{` to the last `}`, inclusive.

    Raises:
        NoJSONBoundaryFoundError: If no plausible span exists.
    """
    candidate = strip_code_fence(text.strip())

    first = candidate.find("{")
    if first == -1:
        raise NoJSONBoundaryFoundError(
            "No JSON object found in response", excerpt=make_excerpt(text, 0, excerpt_radius)
        )

    last = candidate.rfind("}")
    if last < first:
        raise NoJSONBoundaryFoundError(
            "Unclosed JSON object in response",
            excerpt=make_excerpt(candidate, first, excerpt_radius),
        )

    return candidate[first : last + 1]
