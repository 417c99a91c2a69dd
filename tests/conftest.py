"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

from typing import Generator

import pytest

from json_recovery.config import Settings, get_settings
from json_recovery.repair import RepairEngine


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reset the cached settings so environment changes are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with a small attempt ceiling."""
    return Settings(
        repair_max_attempts=3,
        repair_backscan_window=20,
        repair_excerpt_radius=10,
        log_level="DEBUG",
    )


# ==============================================================================
# Engine Fixtures
# ==============================================================================


@pytest.fixture
def engine() -> RepairEngine:
    """Create a repair engine with default configuration."""
    return RepairEngine()


# ==============================================================================
# Sample Model Response Fixtures
# ==============================================================================


@pytest.fixture
def valid_evaluation_json() -> str:
    """A well-formed evaluation payload."""
    return (
        '{"students": [{"studentName": "Asha K", "questions": ['
        '{"questionNumber": "1a", "marksAwarded": 3, "reasonForMarksAllocation": "Correct"}, '
        '{"questionNumber": "1b", "marksAwarded": 0.5, "reasonForMarksAllocation": null}'
        "]}], \"passed\": true}"
    )


@pytest.fixture
def messy_model_response() -> str:
    """
    A realistic malformed evaluation response.

    Fenced, preceded by prose, with unquoted keys, a raw newline inside a
    string, a missing comma between array elements and trailing commas.
    """
    return """Here is the evaluation you asked for:

```json
{
  students: [
    {
      studentName: "Asha K",
      questions: [
        {
          questionNumber: "1a",
          marksAwarded: 3,
          reasonForMarksAllocation: "Correct formula.
Units missing in final step."
        }
        {
          questionNumber: "1b",
          marksAwarded: 2,
          reasonForMarksAllocation: "Partial working shown",
        },
      ],
    }
  ]
}
```

Let me know if you need anything else."""
