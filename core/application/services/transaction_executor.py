"""
Transaction Executor.

Every mutating call goes through the same sequence:

1. simulate the call from the signer; a revert stops here, nothing is sent
2. estimate gas and add the safety margin (fallback ceiling on failure)
3. sign and submit
4. wait for inclusion; revert and timeout become failed steps

Nothing is retried. A timed-out transaction may still land, so a re-run
relies on the precondition checks to skip work that already happened.
"""
import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from typing import Any, Dict, Optional, Sequence, Tuple

from core.application.dtos.chain_dto import ContractBinding, Signer
from core.application.dtos.report_dto import StepResult
from core.application.interfaces import ChainConnection
from core.domain.enums import StepStatus
from core.domain.errors import WorkflowError
from core.settings.modules.workflow_settings import WorkflowSettings
from polytrade_sdk.utils.datetime import utc_now

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, Dict[str, object]], Awaitable[None]]


class TransactionExecutor:
    """
    Runs mutating calls for one workflow run.

    Calls from the same signer are serialized with a per-signer lock held
    from submission until inclusion, so nonces never collide.
    """

    def __init__(
        self,
        connection: ChainConnection,
        settings: WorkflowSettings,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._connection = connection
        self._gas_limit_fallback = settings.gas_limit
        self._gas_margin = settings.gas_safety_margin
        self._gas_price_wei = settings.gas_price_wei
        self._receipt_timeout = settings.receipt_timeout_seconds
        self._progress = progress
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, address: str) -> asyncio.Lock:
        if address not in self._locks:
            self._locks[address] = asyncio.Lock()
        return self._locks[address]

    async def _emit(self, name: str, payload: Dict[str, object]) -> None:
        if self._progress is not None:
            await self._progress(name, payload)

    async def execute(
        self,
        step_name: str,
        binding: ContractBinding,
        method: str,
        args: Sequence[Any],
        signer: Signer,
    ) -> StepResult:
        """
        Simulate, estimate, submit and confirm one call.

        Args:
            step_name: Name recorded on the StepResult
            binding: Target contract
            method: Contract function name
            args: Positional call arguments
            signer: Credential that signs the transaction

        Returns:
            StepResult; failed results carry the decoded error
        """
        sender = str(signer.address)
        started = utc_now()
        call = f"{binding.role.value}.{method}"

        async with self._lock_for(sender):
            try:
                await self._connection.simulate(binding, method, args, sender)
            except WorkflowError as exc:
                logger.warning(f"Simulation of {call} from {sender} failed: {exc.message}")
                return self._finish(StepResult.failed(step_name, exc), started)

            await self._emit("transaction.simulated", {"step_name": step_name, "call": call, "sender": sender})

            gas_limit, estimate = await self._gas_limit(binding, method, args, sender)

            try:
                pending = await self._connection.send_transaction(
                    binding, method, args, signer, gas_limit, self._gas_price_wei
                )
            except WorkflowError as exc:
                logger.error(f"Submitting {call} failed: {exc.message}")
                return self._finish(StepResult.failed(step_name, exc), started)

            logger.info(f"Submitted {call} from {sender}: {pending.hash} (gas limit {gas_limit})")
            await self._emit(
                "transaction.submitted",
                {"step_name": step_name, "call": call, "transaction_hash": pending.hash,
                 "gas_limit": gas_limit, "gas_estimate": estimate},
            )

            try:
                receipt = await pending.wait(self._receipt_timeout)
            except WorkflowError as exc:
                logger.error(f"{call} {pending.hash} did not confirm: {exc.message}")
                result = StepResult.failed(step_name, exc, transaction_hash=pending.hash)
                result.gas_limit = gas_limit
                return self._finish(result, started)

        await self._emit(
            "transaction.confirmed",
            {"step_name": step_name, "call": call, "transaction_hash": receipt.transaction_hash,
             "block_number": receipt.block_number, "gas_used": receipt.gas_used},
        )
        result = StepResult(
            name=step_name,
            status=StepStatus.SUCCEEDED,
            transaction_hash=receipt.transaction_hash,
            block_number=receipt.block_number,
            gas_used=receipt.gas_used,
            gas_limit=gas_limit,
            receipt=receipt,
        )
        return self._finish(result, started)

    async def _gas_limit(
        self, binding: ContractBinding, method: str, args: Sequence[Any], sender: str
    ) -> Tuple[int, Optional[int]]:
        """Return (gas limit, raw estimate or None when falling back)."""
        try:
            estimate = await self._connection.estimate_gas(binding, method, args, sender)
        except Exception as exc:
            logger.warning(
                f"Gas estimation for {binding.role.value}.{method} failed ({exc}); "
                f"using fallback limit {self._gas_limit_fallback}"
            )
            return self._gas_limit_fallback, None
        return math.ceil(estimate * (1 + self._gas_margin)), estimate

    @staticmethod
    def _finish(result: StepResult, started) -> StepResult:
        result.duration_ms = int((utc_now() - started).total_seconds() * 1000)
        return result
