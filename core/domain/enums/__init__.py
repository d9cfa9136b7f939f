"""Domain enums."""

from .contract_role import ContractRole
from .network import Network
from .step_status import StepStatus
from .workflow_state import WorkflowState

__all__ = ["ContractRole", "Network", "StepStatus", "WorkflowState"]
