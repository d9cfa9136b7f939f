"""
Platform Tool Service.

The operational surface: mint-only, metadata enrichment, full wrap
orchestration, verification and batch verification, plus two read-only
helpers. Each operation takes a parameter bag and a network selector and
returns a WorkflowReport. Operations never raise; callers inspect
``report.success``.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.application.dtos.report_dto import StepResult, WorkflowReport
from core.application.dtos.tool_dto import (
    BatchVerifyRequest,
    MetadataToolRequest,
    ToolRequest,
)
from core.application.dtos.workflow_dto import MetadataMapping, WorkflowRequest
from core.application.interfaces import IDeploymentRecordStore, IMetadataEnrichmentProvider
from core.application.services.parameter_resolver import ParameterResolver
from core.domain.enums import ContractRole, StepStatus
from core.domain.errors import InvalidParameter, WorkflowError
from core.domain.value_objects import Address, MainId
from core.infrastructure.chain import DEFAULT_CONTRACTS, ChainGateway, ContractRegistry, describe_networks
from core.settings import AppSettings
from orchestration.asset_workflows import AssetWorkflowRunner, new_report
from orchestration.bus import EventBusProtocol, InMemoryEventBus

logger = logging.getLogger(__name__)

RunBody = Callable[[AssetWorkflowRunner, WorkflowReport], Awaitable[WorkflowReport]]


class PlatformToolService:
    """Entry point for every tool operation."""

    def __init__(
        self,
        settings: AppSettings,
        gateway: ChainGateway,
        registry: ContractRegistry,
        record_store: Optional[IDeploymentRecordStore] = None,
        event_bus: Optional[EventBusProtocol] = None,
        provider: Optional[IMetadataEnrichmentProvider] = None,
    ):
        self._settings = settings
        self._gateway = gateway
        self._registry = registry
        self._record_store = record_store
        self._event_bus = event_bus or InMemoryEventBus()
        self._provider = provider
        self._resolver = ParameterResolver(settings, DEFAULT_CONTRACTS, record_store)

    @property
    def event_bus(self) -> EventBusProtocol:
        return self._event_bus

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def mint_asset(self, params: ToolRequest) -> WorkflowReport:
        """Mint a new token on the collection."""
        report = await self._run(
            "mint_asset", params, lambda runner, report: runner.mint(report), record=True
        )
        if report.success:
            token_id = report.data.get("tokenId")
            if params.preparation_mode == "mint":
                report.next_steps = [
                    f"Run orchestrate_wrap with TARGET_TOKEN_ID={token_id} to fractionalize the token.",
                    f"The token will be wrapped under main id {report.data.get('predictedMainId')}; "
                    "enrich its metadata after wrapping.",
                ]
            else:
                report.next_steps = [f"Check the token with verify_asset using tokenId {token_id}."]
        return report

    async def orchestrate_wrap(
        self, params: ToolRequest, cancel_event: Optional[asyncio.Event] = None
    ) -> WorkflowReport:
        """Run the full Mint -> Whitelist -> Grant-Role -> Approve -> Wrap workflow."""
        report = await self._run(
            "orchestrate_wrap",
            params,
            lambda runner, report: runner.orchestrate_wrap(report, cancel_event),
            provider=self._provider,
            record=True,
        )
        if report.success:
            report.next_steps = [f"Confirm balances with verify_asset using tokenId {report.data.get('tokenId')}."]
            marketplace = (report.data.get("contracts") or {}).get(ContractRole.MARKETPLACE.value)
            if marketplace and not report.data.get("alreadyWrapped"):
                report.next_steps.append(f"Fractions can now be listed on the marketplace at {marketplace}.")
        elif report.failed_step is not None:
            report.next_steps = [
                "Fix the cause reported above and run orchestrate_wrap again; completed steps are skipped."
            ]
        return report

    async def enrich_metadata(self, params: MetadataToolRequest) -> WorkflowReport:
        """Write base URIs for one main id, a batch of them, or through the provider."""
        overrides: Dict[str, Any] = dict(params.env_overrides)
        if params.admin_private_key:
            overrides["adminPrivateKey"] = params.admin_private_key

        use_provider = params.enrichment_strategy == "provider"
        try:
            mappings = [] if use_provider else self._mappings(params)
        except InvalidParameter as exc:
            report = new_report("enrich_metadata")
            report.data["finalState"] = "aborted"
            return report.fail_preflight("resolve_parameters", exc)

        return await self._run(
            "enrich_metadata",
            params,
            lambda runner, report: runner.enrich_metadata(report, mappings, use_provider),
            overrides=overrides,
            provider=self._provider,
            record=True,
        )

    async def verify_asset(self, params: ToolRequest) -> WorkflowReport:
        """Read-only report on a token and the platform contracts."""
        report = await self._run("verify_asset", params, lambda runner, report: runner.verify(report))
        report.next_steps = self._verify_hints(report)
        return report

    async def verify_batch(self, params: BatchVerifyRequest) -> WorkflowReport:
        """
        Verify several tokens concurrently.

        Each target is an independent run over the shared connection; the
        batch succeeds only if every verification did.
        """
        report = new_report("verify_batch")

        async def verify_one(target) -> WorkflowReport:
            overrides = dict(params.env_overrides)
            overrides["ORIG_NFT_CONTRACT_ADDRESS"] = target.nft_contract
            overrides["TARGET_TOKEN_ID"] = target.token_id
            return await self._run(
                "verify_asset", params, lambda runner, sub: runner.verify(sub), overrides=overrides
            )

        results = await asyncio.gather(*(verify_one(t) for t in params.targets))
        for target, sub in zip(params.targets, results):
            name = f"verify:{target.nft_contract}:{target.token_id}"
            if sub.success:
                report.add_step(StepResult.succeeded(name, sub.data.get("assetStatus")))
            else:
                failed = sub.failed_step
                report.add_step(StepResult(name=name, status=StepStatus.FAILED, error=failed.error if failed else None))
            report.log(f"{name}: {'ok' if sub.success else 'failed'}")

        report.data["results"] = [sub.to_dict() for sub in results]
        report.data["verifiedCount"] = sum(1 for sub in results if sub.success)
        return report.finish()

    def calculate_main_id(self, nft_contract: str, token_id: int) -> WorkflowReport:
        """Predict the main id a token will be wrapped under."""
        report = new_report("calculate_main_id")
        try:
            address = Address(nft_contract)
        except ValueError:
            return report.fail_preflight(
                "calculate_main_id",
                InvalidParameter("nftContract", "override", f"{nft_contract!r} is not a 20-byte hex address"),
            )
        if token_id < 0:
            return report.fail_preflight(
                "calculate_main_id", InvalidParameter("tokenId", "override", "must be a non-negative integer")
            )
        main_id = MainId.predict(address, token_id)
        report.data.update(nftContract=str(address), tokenId=token_id, mainId=main_id.value, mainIdHex=main_id.hex)
        report.add_step(StepResult.succeeded("calculate_main_id", str(main_id)))
        report.log(f"Token {token_id} of {address} maps to main id {main_id}.")
        return report.finish()

    def describe_networks(self) -> List[Dict[str, object]]:
        return describe_networks(self._gateway.profiles)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run(
        self,
        operation: str,
        params: ToolRequest,
        body: RunBody,
        overrides: Optional[Dict[str, Any]] = None,
        provider: Optional[IMetadataEnrichmentProvider] = None,
        record: bool = False,
    ) -> WorkflowReport:
        report = new_report(operation)
        try:
            request = self._resolver.resolve(
                overrides=params.env_overrides if overrides is None else overrides,
                contract_overrides=params.contracts.by_role(),
                network=params.network,
                user_prompt=params.user_prompt,
                skip_if_already_wrapped=params.skip_if_already_wrapped,
            )
        except InvalidParameter as exc:
            report.data["finalState"] = "aborted"
            return report.fail_preflight("resolve_parameters", exc)

        try:
            connection = await self._gateway.connect(request.network)
        except WorkflowError as exc:
            report.data.update(network=request.network.value, finalState="aborted")
            return report.fail_preflight("connect", exc)

        runner = AssetWorkflowRunner(
            connection=connection,
            contracts=self._registry.build(request),
            request=request,
            settings=self._settings.workflow,
            event_bus=self._event_bus,
            provider=provider,
        )
        try:
            report = await body(runner, report)
        except Exception as exc:
            logger.error(f"{operation} crashed: {exc}", exc_info=True)
            report.add_step(StepResult.failed(operation, exc))
            report.finish()

        if record:
            self._record(request, report)
        return report

    def _record(self, request: WorkflowRequest, report: WorkflowReport) -> None:
        if self._record_store is None:
            return
        run = {
            "operation": report.operation,
            "executionId": report.execution_id,
            "success": report.success,
            "tokenId": report.data.get("tokenId"),
            "mainId": str(report.data["mainId"]) if report.data.get("mainId") is not None else None,
            "transactions": dict(report.data.get("transactions") or {}),
            "finishedAt": report.to_dict()["finishedAt"],
        }
        self._record_store.record_run(request.network.value, report.data.get("contracts") or {}, run)

    @staticmethod
    def _mappings(params: MetadataToolRequest) -> List[MetadataMapping]:
        config = params.metadata_config
        if params.enrichment_strategy == "batch":
            entries = [(m.main_id, m.base_uri, m.description, m.category) for m in config.batch_mappings]
            if not entries:
                raise InvalidParameter("batchMappings", "override", "at least one mapping is required")
        else:
            if config.main_id is None or not config.base_uri:
                raise InvalidParameter("metadataConfig", "override", "mainId and baseURI are required")
            entries = [(config.main_id, config.base_uri, "", "")]

        mappings = []
        for main_id, base_uri, description, category in entries:
            try:
                value = MainId(int(str(main_id).strip(), 0)).value
            except ValueError:
                raise InvalidParameter("mainId", "override", f"{main_id!r} is not a uint256") from None
            mappings.append(MetadataMapping(value, base_uri, description, category))
        return mappings

    @staticmethod
    def _verify_hints(report: WorkflowReport) -> List[str]:
        status = report.data.get("assetStatus")
        if status == "wrapped":
            checks = report.data.get("checks") or {}
            if not checks.get("tokenUri"):
                return ["Set the asset's metadata with enrich_metadata."]
            return []
        if status == "ready_to_wrap":
            return ["Run orchestrate_wrap to wrap the token; the setup steps will be skipped."]
        if status == "needs_setup":
            return ["Run orchestrate_wrap; it whitelists, grants the role and approves before wrapping."]
        return []
