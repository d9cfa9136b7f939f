"""
Workflow State Enum.

States of the wrap state machine. Progress is linear; any state may move
to ABORTED on a fatal failure.
"""
from enum import Enum


class WorkflowState(str, Enum):
    """Wrap workflow states."""

    INIT = "init"
    PARAMS_RESOLVED = "params_resolved"
    VERIFIED = "verified"
    TOKEN_READY = "token_ready"
    WHITELISTED = "whitelisted"
    ROLE_GRANTED = "role_granted"
    APPROVED = "approved"
    WRAPPED = "wrapped"
    ENRICHED = "enriched"
    DONE = "done"
    ABORTED = "aborted"
