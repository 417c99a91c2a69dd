"""
Error taxonomy for JSON recovery.

Every failure the engine can report is a RepairError subclass. Callers that
only care whether recovery worked can catch the base class; callers that want
to decide whether to re-run the model call can inspect the subclass.
"""

from json_recovery.models import ParseDiagnostic


class RepairError(Exception):
    """
    Raised when a raw model response cannot be recovered into JSON.

    Attributes:
        attempts: Number of parse attempts consumed before giving up.
        diagnostic: The last parser diagnostic, if any parse was attempted.
        excerpt: Bounded slice of the working text around the failure offset.
    """

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        diagnostic: ParseDiagnostic | None = None,
        excerpt: str = "",
    ):
        self.attempts = attempts
        self.diagnostic = diagnostic
        self.excerpt = excerpt
        super().__init__(message)


class InvalidInputError(RepairError):
    """Raised when the input is not a usable, non-empty string."""


class NoJSONBoundaryFoundError(RepairError):
    """Raised when no `{...}` span exists in the response."""


class RepairExhaustedError(RepairError):
    """Raised when the attempt ceiling is reached without a successful parse."""


class UnderlyingSyntaxError(RepairError):
    """Raised when the parser error has no applicable repair."""


def make_excerpt(text: str, offset: int, radius: int) -> str:
    """
    Slice text around offset for error reports.

    Args:
        text: Working text.
        offset: Failure offset.
        radius: Characters kept on each side.

    Returns:
        At most 2 * radius characters, with "..." marking truncated ends.
    """
    start = max(0, offset - radius)
    end = min(len(text), offset + radius)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"
