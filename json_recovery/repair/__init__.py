"""
JSON Repair Module.

Boundary extraction, structural normalization, control-character escaping
and the bounded retry loop that ties them together.
"""

from json_recovery.repair.engine import RepairEngine, repair_parse
from json_recovery.repair.errors import (
    InvalidInputError,
    NoJSONBoundaryFoundError,
    RepairError,
    RepairExhaustedError,
    UnderlyingSyntaxError,
)

__all__ = [
    "InvalidInputError",
    "NoJSONBoundaryFoundError",
    "RepairEngine",
    "RepairError",
    "RepairExhaustedError",
    "UnderlyingSyntaxError",
    "repair_parse",
]
