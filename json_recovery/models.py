"""
Pydantic models for the JSON recovery engine.

These models describe:
- Parser diagnostics extracted from json.JSONDecodeError
- Individual repair steps applied to the working text
- The final recovery result handed back to callers

All models are frozen so results can be shared freely between threads.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorKind(str, Enum):
    """Repair class selected for a parser failure."""

    MISSING_SEPARATOR = "missing_separator"
    CONTROL_CHARACTER = "control_character"
    UNCLASSIFIED = "unclassified"


# ==============================================================================
# Diagnostic Models
# ==============================================================================


class ParseDiagnostic(BaseModel):
    """
    Structured view of a strict-parser failure.

    Built from the msg/pos/lineno/colno fields the standard library parser
    exposes, plus the repair class the message maps to.
    """

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = Field(
        ...,
        description="Repair class the failure was mapped to",
    )

    message: str = Field(
        ...,
        description="Parser message without position suffix",
    )

    offset: int = Field(
        ...,
        ge=0,
        description="Character offset of the failure in the working text",
    )

    line: int = Field(
        default=1,
        ge=1,
        description="1-based line number of the failure",
    )

    column: int = Field(
        default=1,
        ge=1,
        description="1-based column number of the failure",
    )

    def describe(self) -> str:
        """Render the diagnostic the way the parser would."""
        return f"{self.message}: line {self.line} column {self.column} (char {self.offset})"


class RepairStep(BaseModel):
    """A single positional repair applied during recovery."""

    model_config = ConfigDict(frozen=True)

    attempt: int = Field(..., ge=1, description="Attempt whose failure triggered this repair")
    kind: ErrorKind = Field(..., description="Repair class applied")
    offset: int = Field(..., ge=0, description="Offset reported by the parser")
    action: str = Field(..., min_length=1, description="Description of the edit made")


# ==============================================================================
# Result Models
# ==============================================================================


class RepairResult(BaseModel):
    """
    Successful recovery outcome.

    Contains the parsed value along with the trail of repairs that
    were needed to get there.
    """

    model_config = ConfigDict(frozen=True)

    value: Any = Field(
        ...,
        description="Parsed JSON value",
    )

    attempts: int = Field(
        ...,
        ge=1,
        description="Number of parse attempts consumed",
    )

    steps: tuple[RepairStep, ...] = Field(
        default=(),
        description="Positional repairs applied, in order",
    )

    repaired_text: str = Field(
        ...,
        description="Working text that finally parsed",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def repaired(self) -> bool:
        """Whether any positional repair was needed."""
        return len(self.steps) > 0
