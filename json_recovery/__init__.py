"""
JSON Recovery - turns raw grading-model output into parsed JSON.

Generative models asked for pure JSON still wrap it in fences, leave keys
unquoted, drop commas and paste multi-line answers into strings. This
package recovers a valid value from such output, or fails with a typed,
diagnosable error.
"""

__version__ = "1.0.0"
__author__ = "JSON Recovery Team"
