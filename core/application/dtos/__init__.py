"""Application DTOs."""

from .chain_dto import (
    ContractBinding,
    ContractSet,
    DecodedEvent,
    NetworkProfile,
    Signer,
    TransactionReceipt,
)
from .report_dto import ErrorInfo, StepResult, WorkflowReport
from .workflow_dto import (
    MetadataDocument,
    MetadataMapping,
    SignerPair,
    WorkflowRequest,
)

__all__ = [
    "ContractBinding",
    "ContractSet",
    "DecodedEvent",
    "ErrorInfo",
    "MetadataDocument",
    "MetadataMapping",
    "NetworkProfile",
    "Signer",
    "SignerPair",
    "StepResult",
    "TransactionReceipt",
    "WorkflowReport",
    "WorkflowRequest",
]
