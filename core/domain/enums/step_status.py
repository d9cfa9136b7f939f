"""
Step Status Enum.

Outcome of a single workflow step.
"""
from enum import Enum


class StepStatus(str, Enum):
    """Step status values."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
