"""
Workflow error taxonomy.

Every failure a run can hit is one of these types. They are raised inside
services and converted into step results by the orchestrator, so callers
only ever see them as data inside a WorkflowReport.
"""
from typing import Any, Dict, Optional

# Plain-language advice for the platform's known revert errors, keyed by error name.
ERROR_HINTS = {
    "AssetAlreadyCreated": "This NFT already has a main id on the base asset; it was wrapped before.",
    "InvalidOwner": "Only the current NFT owner can wrap it. Use the owner's key.",
    "NotWhitelisted": "The NFT collection must be whitelisted on the wrapped asset contract first.",
    "UnsupportedInterface": "The collection does not implement ERC-721 as the wrapper expects.",
    "StatusChanged": "The whitelist status already has the requested value.",
    "AccessControlUnauthorizedAccount": "The signing account lacks the required role; use the admin key.",
    "ERC721InsufficientApproval": "Approve the wrapped asset contract for this token before wrapping.",
    "ERC721IncorrectOwner": "The token is owned by a different account than the one signing.",
    "ERC721NonexistentToken": "The token id does not exist in this collection.",
    "EnforcedPause": "The contract is paused.",
}


def revert_hint(error_name: Optional[str]) -> Optional[str]:
    return ERROR_HINTS.get(error_name or "")


class WorkflowError(Exception):
    """Base class for all typed workflow failures."""

    code = "WorkflowError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}


class InvalidParameter(WorkflowError):
    """A parameter failed validation during resolution."""

    code = "InvalidParameter"

    def __init__(self, field: str, source: str, reason: str):
        super().__init__(
            f"Invalid {field} (from {source}): {reason}",
            {"field": field, "source": source, "reason": reason},
        )
        self.field = field
        self.source = source


class ContractNotDeployed(WorkflowError):
    """No bytecode at an address that must hold a contract."""

    code = "ContractNotDeployed"

    def __init__(self, address: str, role: Optional[str] = None):
        label = f"{role} " if role else ""
        super().__init__(
            f"No {label}contract deployed at {address}",
            {"address": address, "role": role},
        )
        self.address = address


class PermissionMissing(WorkflowError):
    """An account lacks a role the next action requires."""

    code = "PermissionMissing"

    def __init__(self, role: str, account: str, contract: Optional[str] = None):
        where = f" on {contract}" if contract else ""
        super().__init__(
            f"Account {account} does not hold {role}{where}",
            {"role": role, "account": account, "contract": contract},
        )
        self.role = role
        self.account = account


class OwnershipMismatch(WorkflowError):
    """The acting signer does not own the asset it must act on."""

    code = "OwnershipMismatch"

    def __init__(self, expected: str, actual: str, subject: str = "token"):
        super().__init__(
            f"{subject} is owned by {actual}, expected {expected}",
            {"expected": expected, "actual": actual, "subject": subject},
        )
        self.expected = expected
        self.actual = actual


class SimulationFailed(WorkflowError):
    """A dry-run of a mutating call reverted; nothing was sent."""

    code = "SimulationFailed"

    def __init__(self, reason: str, method: Optional[str] = None, error_name: Optional[str] = None):
        super().__init__(
            reason,
            {"reason": reason, "method": method, "errorName": error_name},
        )
        self.reason = reason
        self.error_name = error_name


class TransactionReverted(WorkflowError):
    """A submitted transaction was mined with a failed status."""

    code = "TransactionReverted"

    def __init__(self, reason: str, transaction_hash: Optional[str] = None, error_name: Optional[str] = None):
        super().__init__(
            reason,
            {"reason": reason, "transactionHash": transaction_hash, "errorName": error_name},
        )
        self.reason = reason
        self.transaction_hash = transaction_hash


class TransactionTimeout(WorkflowError):
    """A submitted transaction was not included before the deadline."""

    code = "TransactionTimeout"

    def __init__(self, transaction_hash: str, timeout_seconds: float):
        super().__init__(
            f"Timeout waiting for {transaction_hash} after {timeout_seconds:g}s",
            {"transactionHash": transaction_hash, "timeoutSeconds": timeout_seconds},
        )
        self.transaction_hash = transaction_hash


class ContractPaused(WorkflowError):
    """The NFT collection is paused and cannot mint."""

    code = "ContractPaused"

    def __init__(self, address: str):
        super().__init__(f"Contract {address} is paused", {"address": address})


class MissingEventData(WorkflowError):
    """An expected event was not found in a receipt."""

    code = "MissingEventData"

    def __init__(self, event: str, transaction_hash: Optional[str] = None):
        super().__init__(
            f"{event} event not found in transaction {transaction_hash}",
            {"event": event, "transactionHash": transaction_hash},
        )


class ChainUnavailable(WorkflowError):
    """A read against the node failed for transport reasons."""

    code = "ChainUnavailable"

    def __init__(self, reason: str):
        super().__init__(reason, {"reason": reason})


class RunAborted(WorkflowError):
    """The run was cancelled at an inter-step boundary."""

    code = "RunAborted"

    def __init__(self, reason: str = "cancelled by caller"):
        super().__init__(reason, {"reason": reason})
