"""Orchestrator - runs workflows with eventing and cancellation."""

from core.domain.enums import StepStatus, WorkflowState
from core.domain.errors import RunAborted, WorkflowError, revert_hint
from polytrade_sdk.logging import get_logger
from polytrade_sdk.utils.datetime import utc_now

from .bus import EventBusProtocol
from .events import Event, EventMetadata
from .models import ExecutionContext, StepResult, WorkflowReport
from .workflow import WorkflowDefinition, WorkflowStep

_STEP_EVENTS = {
    StepStatus.SUCCEEDED: "workflow.step.succeeded",
    StepStatus.SKIPPED: "workflow.step.skipped",
    StepStatus.FAILED: "workflow.step.failed",
}


class Orchestrator:
    """Orchestrator for running workflows step by step.

    Steps run strictly in order. Every outcome is appended to the run's
    WorkflowReport; the first failure of a required step halts the run.
    Nothing is retried.
    """

    def __init__(
        self,
        event_bus: EventBusProtocol,
        service: str,
        operation: str | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            event_bus: EventBusProtocol for publishing events
            service: Service name
            operation: Optional operation name
        """
        self._event_bus = event_bus
        self._service = service
        self._operation = operation
        self._logger = get_logger("orchestration.orchestrator")

    async def run(self, workflow: WorkflowDefinition, ctx: ExecutionContext) -> WorkflowReport:
        """Run a workflow.

        Args:
            workflow: WorkflowDefinition to run
            ctx: ExecutionContext owning the report being filled

        Returns:
            The finished WorkflowReport
        """
        report = ctx.report

        self._logger.info(
            "workflow_starting",
            execution_id=str(ctx.execution_id),
            workflow_name=workflow.name,
            service=self._service,
            step_count=len(workflow.steps),
        )
        await self.publish(
            "workflow.started",
            ctx,
            {"workflow_name": workflow.name, "step_count": len(workflow.steps)},
        )

        for step in workflow.steps:
            if ctx.cancelled:
                exc = RunAborted(f"cancelled before {step.name}")
                report.add_step(StepResult.failed("cancelled", exc))
                report.log(f"Run cancelled before step {step.name}; no further transactions were sent.")
                ctx.state = WorkflowState.ABORTED
                await self.publish("workflow.step.failed", ctx, {"step_name": "cancelled"})
                break

            result = await self._execute_step(ctx, step)
            report.add_step(result)

            if result.status == StepStatus.FAILED:
                self._narrate_failure(report, result)
                if step.required:
                    ctx.state = WorkflowState.ABORTED
                    self._logger.warning(
                        "workflow_step_failed",
                        execution_id=str(ctx.execution_id),
                        step_name=step.name,
                        error=result.error.code if result.error else None,
                    )
                    break
                continue

            if result.status == StepStatus.SKIPPED and result.detail:
                report.log(f"Step {result.name} skipped: {result.detail}")
            if step.reaches is not None:
                ctx.state = step.reaches

        if ctx.state != WorkflowState.ABORTED and report.failed_step is None:
            ctx.state = WorkflowState.DONE

        report.data["finalState"] = ctx.state.value
        report.finish()
        finished_at = report.finished_at or utc_now()

        await self.publish(
            "workflow.finished",
            ctx,
            {
                "workflow_name": workflow.name,
                "success": report.success,
                "state": ctx.state.value,
                "step_count": len(report.steps),
            },
        )
        self._logger.info(
            "workflow_finished",
            execution_id=str(ctx.execution_id),
            workflow_name=workflow.name,
            success=report.success,
            state=ctx.state.value,
            duration_ms=int((finished_at - ctx.started_at).total_seconds() * 1000),
        )
        return report

    async def _execute_step(self, ctx: ExecutionContext, step: WorkflowStep) -> StepResult:
        """Execute a single workflow step.

        Exceptions raised by the activity become a failed StepResult; they
        never escape the run.
        """
        started_at = utc_now()
        await self.publish("workflow.step.started", ctx, {"step_name": step.name})

        try:
            result = await step.activity(ctx)
        except WorkflowError as exc:
            result = StepResult.failed(step.name, exc)
        except Exception as exc:
            self._logger.error(
                "step_crashed",
                execution_id=str(ctx.execution_id),
                step_name=step.name,
                error=str(exc),
                exc_info=True,
            )
            result = StepResult.failed(step.name, exc)

        if not result.duration_ms:
            result.duration_ms = int((utc_now() - started_at).total_seconds() * 1000)

        payload: dict[str, object] = {"step_name": step.name, "status": result.status.value}
        if result.transaction_hash:
            payload["transaction_hash"] = result.transaction_hash
        if result.error is not None:
            payload["error"] = result.error.code
        await self.publish(_STEP_EVENTS[result.status], ctx, payload)
        return result

    @staticmethod
    def _narrate_failure(report: WorkflowReport, result: StepResult) -> None:
        error = result.error
        if error is None:
            return
        report.log(f"Step {result.name} failed ({error.code}): {error.message}")
        hint = revert_hint(error.details.get("errorName"))
        if hint:
            report.log(f"Hint: {hint}")

    async def publish(self, name: str, ctx: ExecutionContext, payload: dict[str, object]) -> None:
        """Publish an event for a run.

        Args:
            name: Event name
            ctx: ExecutionContext of the run
            payload: Event payload
        """
        metadata = EventMetadata(
            execution_id=str(ctx.execution_id),
            service=self._service,
            operation=ctx.operation or self._operation,
            timestamp=utc_now(),
        )
        await self._event_bus.publish(Event(name=name, payload=payload, metadata=metadata))
