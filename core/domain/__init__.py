"""Domain layer - value objects, enums and the workflow error taxonomy."""

from .enums import ContractRole, Network, StepStatus, WorkflowState
from .errors import WorkflowError
from .value_objects import Address, ExecutionID, FractionsAmount, MainId

__all__ = [
    "Address",
    "ContractRole",
    "ExecutionID",
    "FractionsAmount",
    "MainId",
    "Network",
    "StepStatus",
    "WorkflowError",
    "WorkflowState",
]
