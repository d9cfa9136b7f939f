"""
Run result DTOs - ErrorInfo, StepResult, WorkflowReport.

A WorkflowReport is created at the start of a run, mutated only by the
orchestrator and returned to the caller once finished. ``to_dict`` is the
machine-readable form: camelCase keys, ordered steps, and integers too
large for a JSON double rendered as decimal strings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.domain.enums import StepStatus
from core.domain.errors import WorkflowError
from polytrade_sdk.utils.datetime import isoformat_z, utc_now

from .chain_dto import TransactionReceipt

_MAX_SAFE_INTEGER = 2 ** 53 - 1


def to_jsonable(value: Any) -> Any:
    """Recursively convert report data into JSON-safe values."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value) if abs(value) > _MAX_SAFE_INTEGER else value
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (str, float)):
        return value
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, datetime):
        return isoformat_z(value)
    return str(value)


@dataclass
class ErrorInfo:
    """Serializable form of a step failure."""

    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        if isinstance(exc, WorkflowError):
            return cls(code=exc.code, message=exc.message, details=dict(exc.details))
        return cls(code="UnexpectedError", message=str(exc) or type(exc).__name__,
                   details={"type": type(exc).__name__})

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": to_jsonable(self.details)}


@dataclass
class StepResult:
    """Outcome of one workflow step."""

    name: str
    status: StepStatus
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    gas_limit: Optional[int] = None
    error: Optional[ErrorInfo] = None
    detail: Optional[str] = None
    duration_ms: int = 0
    receipt: Optional[TransactionReceipt] = field(default=None, repr=False, compare=False)

    @property
    def success(self) -> bool:
        return self.status != StepStatus.FAILED

    @classmethod
    def skipped(cls, name: str, detail: str) -> "StepResult":
        return cls(name=name, status=StepStatus.SKIPPED, detail=detail)

    @classmethod
    def succeeded(cls, name: str, detail: Optional[str] = None) -> "StepResult":
        return cls(name=name, status=StepStatus.SUCCEEDED, detail=detail)

    @classmethod
    def failed(cls, name: str, exc: BaseException, transaction_hash: Optional[str] = None) -> "StepResult":
        return cls(
            name=name,
            status=StepStatus.FAILED,
            error=ErrorInfo.from_exception(exc),
            transaction_hash=transaction_hash,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "status": self.status.value}
        if self.transaction_hash is not None:
            data["transactionHash"] = self.transaction_hash
        if self.block_number is not None:
            data["blockNumber"] = self.block_number
        if self.gas_used is not None:
            data["gasUsed"] = self.gas_used
        if self.gas_limit is not None:
            data["gasLimit"] = self.gas_limit
        if self.detail is not None:
            data["detail"] = self.detail
        if self.error is not None:
            data["error"] = self.error.to_dict()
        data["durationMs"] = self.duration_ms
        return data


@dataclass
class WorkflowReport:
    """Aggregated result of a run."""

    operation: str
    execution_id: str
    success: bool = False
    steps: List[StepResult] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    next_steps: List[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None

    def log(self, message: str) -> None:
        self.logs.append(message)

    def add_step(self, step: StepResult) -> None:
        self.steps.append(step)

    def step(self, name: str) -> Optional[StepResult]:
        for step in self.steps:
            if step.name == name:
                return step
        return None

    @property
    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if step.status == StepStatus.FAILED:
                return step
        return None

    def fail_preflight(self, name: str, exc: BaseException) -> "WorkflowReport":
        """Record a failure that happened before the step machine started."""
        self.add_step(StepResult.failed(name, exc))
        self.log(f"{name} failed: {ErrorInfo.from_exception(exc).message}")
        return self.finish()

    def finish(self) -> "WorkflowReport":
        self.success = self.failed_step is None
        self.finished_at = utc_now()
        return self

    def to_dict(self) -> Dict[str, Any]:
        error = self.failed_step.error.to_dict() if self.failed_step and self.failed_step.error else None
        return {
            "operation": self.operation,
            "executionId": self.execution_id,
            "success": self.success,
            "steps": [s.to_dict() for s in self.steps],
            "logs": list(self.logs),
            "data": to_jsonable(self.data),
            "nextSteps": list(self.next_steps),
            "error": error,
            "startedAt": isoformat_z(self.started_at),
            "finishedAt": isoformat_z(self.finished_at) if self.finished_at else None,
        }
