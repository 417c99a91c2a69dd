"""
Repair engine - the bounded retry orchestrator.

Runs boundary extraction and structural normalization once, then loops:
strict parse, classify the failure, apply one positional repair, retry,
until the parse succeeds or the attempt ceiling is reached.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from json_recovery.config import Settings, get_settings
from json_recovery.models import ErrorKind, ParseDiagnostic, RepairResult, RepairStep
from json_recovery.repair.boundary import extract_json_span
from json_recovery.repair.classifier import apply_repair, classify
from json_recovery.repair.errors import (
    InvalidInputError,
    RepairError,
    RepairExhaustedError,
    UnderlyingSyntaxError,
    make_excerpt,
)
from json_recovery.repair.normalizer import normalize_structure
from json_recovery.repair.scanner import escape_control_characters

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BACKSCAN_WINDOW = 50
DEFAULT_EXCERPT_RADIUS = 40

# NaN/Infinity in value position, for locating the token in error excerpts
_CONSTANT_TOKEN = re.compile(r"(?<=[:\[,])\s*(-?(?:NaN|Infinity))\b")


class NonStandardConstantError(ValueError):
    """Raised by the strict parser for NaN, Infinity and -Infinity."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Non-standard constant {token!r} is not valid JSON")


def _reject_constant(token: str) -> Any:
    raise NonStandardConstantError(token)


def strict_loads(text: str) -> Any:
    """
    Parse text as strict JSON.

    Same as json.loads, except NaN, Infinity and -Infinity are rejected
    instead of becoming floats.

    Raises:
        json.JSONDecodeError: On syntax errors.
        NonStandardConstantError: On NaN/Infinity tokens.
        RecursionError: When nesting exceeds the interpreter's limit.
    """
    return json.loads(text, parse_constant=_reject_constant)


def _position(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of offset."""
    line = text.count("\n", 0, offset) + 1
    column = offset - text.rfind("\n", 0, offset)
    return line, column


@dataclass
class RepairState:
    """Per-call working state. Never shared between calls."""

    text: str
    attempts: int = 0
    diagnostic: ParseDiagnostic | None = None
    steps: list[RepairStep] = field(default_factory=list)


class RepairEngine:
    """
    Recovers JSON values from raw generative-model output.

    The engine holds configuration only; every call builds its own
    RepairState, so one instance can be shared between threads.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backscan_window: int = DEFAULT_BACKSCAN_WINDOW,
        excerpt_radius: int = DEFAULT_EXCERPT_RADIUS,
    ):
        """
        Initialize the repair engine.

        Args:
            max_attempts: Parse attempts allowed before giving up.
            backscan_window: Characters scanned backward for comma insertion.
            excerpt_radius: Characters kept on each side of a failure in excerpts.

        Raises:
            ValueError: If max_attempts is below 1.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self._max_attempts = max_attempts
        self._backscan_window = backscan_window
        self._excerpt_radius = excerpt_radius

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RepairEngine":
        """Build an engine from application settings."""
        settings = settings or get_settings()
        return cls(
            max_attempts=settings.repair_max_attempts,
            backscan_window=settings.repair_backscan_window,
            excerpt_radius=settings.repair_excerpt_radius,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def parse(self, raw_text: Any) -> Any:
        """Recover and return just the parsed value."""
        return self.repair(raw_text).value

    def repair(self, raw_text: Any) -> RepairResult:
        """
        Recover a JSON value from a raw model response.

        Args:
            raw_text: Unmodified model output.

        Returns:
            RepairResult with the parsed value and the repairs applied.

        Raises:
            InvalidInputError: If raw_text is not a non-empty string.
            NoJSONBoundaryFoundError: If no `{...}` span exists.
            UnderlyingSyntaxError: If a parse failure has no applicable repair.
            RepairExhaustedError: If the attempt ceiling is reached.
        """
        if not isinstance(raw_text, str):
            raise InvalidInputError(
                f"Expected a string response, got {type(raw_text).__name__}"
            )
        if not raw_text.strip():
            raise InvalidInputError("Response text is empty")

        logger.debug("Recovering JSON from {} characters of model output", len(raw_text))

        span = extract_json_span(raw_text, self._excerpt_radius)
        state = RepairState(text=escape_control_characters(normalize_structure(span)))

        while state.attempts < self._max_attempts:
            state.attempts += 1
            try:
                value = strict_loads(state.text)
            except json.JSONDecodeError as e:
                self._repair_once(state, e)
                continue
            except NonStandardConstantError as e:
                raise self._unparseable(state, e, UnderlyingSyntaxError) from e
            except RecursionError as e:
                raise self._unparseable(state, e, UnderlyingSyntaxError) from e
            return self._result(state, value)

        # One last parse so a fix made on the final iteration is not discarded
        try:
            value = strict_loads(state.text)
        except NonStandardConstantError as e:
            raise self._unparseable(state, e, UnderlyingSyntaxError) from e
        except RecursionError as e:
            raise self._unparseable(state, e, RepairExhaustedError) from e
        except json.JSONDecodeError as e:
            state.diagnostic = classify(e)
            logger.warning(
                "JSON recovery exhausted after {} attempts: {}",
                state.attempts,
                state.diagnostic.describe(),
            )
            raise RepairExhaustedError(
                f"Failed to parse JSON after {state.attempts} repair attempts: "
                f"{state.diagnostic.describe()}",
                attempts=state.attempts,
                diagnostic=state.diagnostic,
                excerpt=make_excerpt(state.text, e.pos, self._excerpt_radius),
            ) from e
        return self._result(state, value)

    def _repair_once(self, state: RepairState, error: json.JSONDecodeError) -> None:
        """
        Classify a parse failure and apply one repair to the state.

        Raises:
            UnderlyingSyntaxError: If the failure cannot be repaired.
        """
        diagnostic = classify(error)
        state.diagnostic = diagnostic

        repaired = apply_repair(state.text, diagnostic, self._backscan_window)
        if repaired is None:
            reason = (
                "no known repair"
                if diagnostic.kind == ErrorKind.UNCLASSIFIED
                else "no repair position found"
            )
            logger.warning(
                "Unrepairable JSON syntax error ({}): {}", reason, diagnostic.describe()
            )
            raise UnderlyingSyntaxError(
                f"Unrepairable JSON syntax error ({reason}): {diagnostic.describe()}",
                attempts=state.attempts,
                diagnostic=diagnostic,
                excerpt=make_excerpt(state.text, error.pos, self._excerpt_radius),
            ) from error

        state.text, action = repaired
        state.steps.append(
            RepairStep(
                attempt=state.attempts,
                kind=diagnostic.kind,
                offset=diagnostic.offset,
                action=action,
            )
        )
        logger.debug("Attempt {}: {} ({})", state.attempts, action, diagnostic.message)

    def _unparseable(
        self,
        state: RepairState,
        error: NonStandardConstantError | RecursionError,
        error_cls: type[RepairError],
    ) -> RepairError:
        """
        Build the error for a failure no positional repair can address.

        Args:
            state: Working state at the time of failure.
            error: Constant rejection or nesting overflow from the parser.
            error_cls: RepairError subclass to build.

        Returns:
            The error to raise, with diagnostic and excerpt filled in.
        """
        if isinstance(error, NonStandardConstantError):
            match = _CONSTANT_TOKEN.search(state.text)
            offset = match.start(1) if match else 0
            message = str(error)
        else:
            offset = 0
            message = "Nesting too deep to parse"

        line, column = _position(state.text, offset)
        state.diagnostic = ParseDiagnostic(
            kind=ErrorKind.UNCLASSIFIED,
            message=message,
            offset=offset,
            line=line,
            column=column,
        )
        logger.warning("Unparseable JSON: {}", state.diagnostic.describe())

        if error_cls is RepairExhaustedError:
            summary = f"Failed to parse JSON after {state.attempts} repair attempts"
        else:
            summary = "Unrepairable JSON syntax error (no known repair)"

        return error_cls(
            f"{summary}: {state.diagnostic.describe()}",
            attempts=state.attempts,
            diagnostic=state.diagnostic,
            excerpt=make_excerpt(state.text, offset, self._excerpt_radius),
        )

    def _result(self, state: RepairState, value: Any) -> RepairResult:
        if state.steps:
            logger.debug(
                "Parsed JSON after {} attempts and {} repairs", state.attempts, len(state.steps)
            )
        return RepairResult(
            value=value,
            attempts=state.attempts,
            steps=tuple(state.steps),
            repaired_text=state.text,
        )


def repair_parse(raw_text: Any, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Any:
    """
    Recover a JSON value from raw model output.

    Args:
        raw_text: Unmodified model output.
        max_attempts: Parse attempts allowed before giving up.

    Returns:
        The parsed JSON value.

    Raises:
        RepairError: If recovery fails; see RepairEngine.repair.
    """
    return RepairEngine(max_attempts=max_attempts).parse(raw_text)
