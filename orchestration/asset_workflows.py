"""
Asset workflows - mint, wrap, metadata and verification runs.

An AssetWorkflowRunner is built for one resolved WorkflowRequest. It owns
the run's verifier, executor and the artifacts discovered along the way
(token id, main id), and turns each operation into a WorkflowDefinition
for the Orchestrator. Runners are never shared between runs.
"""

import asyncio
from uuid import UUID

from core.application.dtos.chain_dto import ContractBinding, ContractSet, Signer
from core.application.dtos.report_dto import ErrorInfo, StepResult, WorkflowReport
from core.application.dtos.workflow_dto import MetadataMapping, WorkflowRequest
from core.application.interfaces import ChainConnection, IMetadataEnrichmentProvider
from core.application.services.precondition_verifier import PreconditionVerifier
from core.application.services.transaction_executor import TransactionExecutor
from core.domain.enums import ContractRole, StepStatus, WorkflowState
from core.domain.errors import (
    ContractNotDeployed,
    InvalidParameter,
    MissingEventData,
    OwnershipMismatch,
    PermissionMissing,
    ContractPaused,
    SimulationFailed,
    WorkflowError,
)
from core.domain.value_objects import Address, ExecutionID, MainId
from core.settings.modules.workflow_settings import WorkflowSettings
from polytrade_sdk.logging import get_logger
from polytrade_sdk.units import from_fixed_point
from polytrade_sdk.utils.datetime import utc_now

from .bus import EventBusProtocol
from .models import ExecutionContext
from .orchestrator import Orchestrator
from .workflow import WorkflowDefinition, WorkflowStep

SERVICE_NAME = "polytrade"


def new_report(operation: str) -> WorkflowReport:
    """Start an empty report with a fresh execution id."""
    return WorkflowReport(operation=operation, execution_id=str(ExecutionID.generate()))


class AssetWorkflowRunner:
    """Runs the asset workflows for one resolved request."""

    def __init__(
        self,
        connection: ChainConnection,
        contracts: ContractSet,
        request: WorkflowRequest,
        settings: WorkflowSettings,
        event_bus: EventBusProtocol,
        provider: IMetadataEnrichmentProvider | None = None,
    ) -> None:
        self._connection = connection
        self._contracts = contracts
        self._request = request
        self._settings = settings
        self._provider = provider
        self._orchestrator = Orchestrator(event_bus, SERVICE_NAME)
        self._executor: TransactionExecutor | None = None
        self._logger = get_logger("orchestration.asset_workflows")

        self.verifier = PreconditionVerifier(connection, contracts)
        self.token_id: int | None = request.token_id
        self.main_id: int | None = None
        self._mint_fresh = request.token_id is None
        self._owner_must_hold = False

    @property
    def request(self) -> WorkflowRequest:
        return self._request

    # ------------------------------------------------------------------
    # Run plumbing
    # ------------------------------------------------------------------

    def _context(self, report: WorkflowReport, cancel_event: asyncio.Event | None) -> ExecutionContext:
        profile = self._connection.profile
        report.data.update(
            {
                "network": profile.network.value,
                "networkName": profile.display_name,
                "chainId": profile.chain_id,
                "explorerUrl": profile.explorer_url,
                "contracts": self._contracts.addresses(),
                "request": self._request.describe(),
            }
        )
        ctx = ExecutionContext(
            execution_id=ExecutionID(UUID(report.execution_id)),
            service=SERVICE_NAME,
            operation=report.operation,
            started_at=utc_now(),
            report=report,
            state=WorkflowState.PARAMS_RESOLVED,
            cancel_event=cancel_event,
        )

        async def progress(name: str, payload: dict[str, object]) -> None:
            await self._orchestrator.publish(name, ctx, payload)

        self._executor = TransactionExecutor(self._connection, self._settings, progress)
        return ctx

    def _abort_preflight(self, ctx: ExecutionContext, exc: WorkflowError) -> WorkflowReport:
        ctx.state = WorkflowState.ABORTED
        ctx.report.data["finalState"] = ctx.state.value
        self._logger.warning(
            "preflight_failed",
            execution_id=str(ctx.execution_id),
            operation=ctx.operation,
            error=exc.code,
        )
        return ctx.report.fail_preflight("verify_preconditions", exc)

    def _short_circuit(self, ctx: ExecutionContext) -> WorkflowReport:
        ctx.state = WorkflowState.DONE
        ctx.report.data["finalState"] = ctx.state.value
        return ctx.report.finish()

    async def _transact(
        self,
        ctx: ExecutionContext,
        name: str,
        binding: ContractBinding,
        method: str,
        args: list,
        signer: Signer,
    ) -> StepResult:
        result = await self._executor.execute(name, binding, method, args, signer)
        if result.status == StepStatus.SUCCEEDED and result.transaction_hash:
            url = self._connection.profile.transaction_url(result.transaction_hash)
            ctx.report.data.setdefault("transactions", {})[name] = url
            ctx.report.log(f"Step {name} confirmed in block {result.block_number}: {url}")
        return result

    @staticmethod
    def _fail_after_receipt(result: StepResult, exc: WorkflowError) -> StepResult:
        """Mark a confirmed transaction's step failed, keeping its hash."""
        result.status = StepStatus.FAILED
        result.error = ErrorInfo.from_exception(exc)
        return result

    async def _record_account_state(self, ctx: ExecutionContext) -> None:
        """Report the signers' native balances and the collection's supply."""
        signers = self._request.signers
        accounts = [s for s in (signers.owner, signers.admin) if s is not None]
        if signers.same_key:
            accounts = accounts[:1]

        reads = [self.verifier.native_balance(s.address) for s in accounts]
        if self._contracts.nft_collection is not None:
            reads.append(self.verifier.total_supply())
        results = await asyncio.gather(*reads)

        currency = self._connection.profile.currency
        balances = {}
        for signer, wei in zip(accounts, results):
            balances[signer.label] = {
                "address": str(signer.address),
                "balanceWei": wei,
                "balance": str(from_fixed_point(wei)),
            }
            if wei == 0:
                ctx.report.log(f"The {signer.label} signer {signer.address} holds no {currency} for gas.")
        ctx.report.data["signerBalances"] = balances
        if self._contracts.nft_collection is not None:
            ctx.report.data["totalSupply"] = results[-1]

    async def _require_role(
        self,
        ctx: ExecutionContext,
        binding: ContractBinding,
        role_name: str,
        signer: Signer,
    ) -> None:
        if await self.verifier.has_named_role(binding, role_name, signer.address):
            return
        ctx.report.log(
            f"The {signer.label} signer {signer.address} lacks {role_name} on the "
            f"{binding.role.value} contract {binding.address}; supply the key of an account that holds it."
        )
        raise PermissionMissing(role_name, str(signer.address), str(binding.address))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def mint(
        self, report: WorkflowReport, cancel_event: asyncio.Event | None = None
    ) -> WorkflowReport:
        """Mint a new token on the collection and report its id."""
        ctx = self._context(report, cancel_event)
        self._mint_fresh = True
        try:
            self._request.require("nft_contract", "owner_signer")
            await self.verifier.ensure_deployed([self._contracts.nft_collection])
            await self._record_account_state(ctx)
        except WorkflowError as exc:
            return self._abort_preflight(ctx, exc)

        ctx.state = WorkflowState.VERIFIED
        workflow = WorkflowDefinition(
            name="mint_asset",
            service=SERVICE_NAME,
            operation=report.operation,
            steps=[WorkflowStep("mint", self._mint, WorkflowState.TOKEN_READY)],
        )
        return await self._orchestrator.run(workflow, ctx)

    async def orchestrate_wrap(
        self, report: WorkflowReport, cancel_event: asyncio.Event | None = None
    ) -> WorkflowReport:
        """
        Run Mint -> Whitelist -> Grant-Role -> Approve -> Wrap.

        The mint step is skipped when a token id was supplied. A metadata
        step follows the wrap when an enrichment provider is configured.
        """
        ctx = self._context(report, cancel_event)
        self._owner_must_hold = True
        try:
            await self._verify_wrap_preconditions(ctx)
        except WorkflowError as exc:
            return self._abort_preflight(ctx, exc)

        if report.data.get("alreadyWrapped") and self._request.skip_if_already_wrapped:
            report.log(
                f"Token {self.token_id} is already held by the wrapped asset contract; nothing to do."
            )
            return self._short_circuit(ctx)

        ctx.state = WorkflowState.VERIFIED
        steps = [
            WorkflowStep("mint", self._mint, WorkflowState.TOKEN_READY),
            WorkflowStep("whitelist", self._whitelist, WorkflowState.WHITELISTED),
            WorkflowStep("grant_role", self._grant_role, WorkflowState.ROLE_GRANTED),
            WorkflowStep("approve", self._approve, WorkflowState.APPROVED),
            WorkflowStep("wrap", self._wrap, WorkflowState.WRAPPED),
        ]
        if self._provider is not None:
            steps.append(WorkflowStep("enrich_metadata", self._enrich_wrapped, WorkflowState.ENRICHED))

        workflow = WorkflowDefinition(
            name="orchestrate_wrap", service=SERVICE_NAME, operation=report.operation, steps=steps
        )
        return await self._orchestrator.run(workflow, ctx)

    async def enrich_metadata(
        self,
        report: WorkflowReport,
        mappings: list[MetadataMapping] | None = None,
        use_provider: bool = False,
        cancel_event: asyncio.Event | None = None,
    ) -> WorkflowReport:
        """
        Write base URIs for wrapped assets.

        Explicit mappings each get their own step and do not depend on one
        another. With ``use_provider`` the configured provider builds the
        URI for the request's token, addressed by its predicted main id.
        """
        ctx = self._context(report, cancel_event)
        mappings = list(mappings or [])
        try:
            self._request.require("admin_signer")
            self._request.require_contracts(ContractRole.BASE_ASSET)
            if use_provider:
                if self._provider is None:
                    raise InvalidParameter("enrichmentStrategy", "override", "no metadata provider configured")
                self._request.require("nft_contract", "token_id")
            elif not mappings:
                raise InvalidParameter("metadataConfig", "override", "no main id to base URI mapping given")
            base = self._contracts.base_asset
            await self.verifier.ensure_deployed([base])
            await self._require_role(ctx, base, "DEFAULT_ADMIN_ROLE", self._request.signers.admin)
        except WorkflowError as exc:
            return self._abort_preflight(ctx, exc)

        ctx.state = WorkflowState.VERIFIED
        if use_provider:
            predicted = MainId.predict(self._request.nft_contract, self.token_id)
            self.main_id = predicted.value
            report.data.update(mainId=predicted.value, mainIdHex=predicted.hex, mainIdSource="predicted")
            steps = [WorkflowStep("enrich_metadata", self._enrich_wrapped, WorkflowState.ENRICHED)]
        else:
            report.data["mappings"] = [
                {"mainId": m.main_id, "baseURI": m.base_uri, "description": m.description, "category": m.category}
                for m in mappings
            ]
            steps = [
                WorkflowStep(f"set_base_uri:{m.main_id}", self._mapping_activity(m), required=False)
                for m in mappings
            ]

        workflow = WorkflowDefinition(
            name="enrich_metadata", service=SERVICE_NAME, operation=report.operation, steps=steps
        )
        return await self._orchestrator.run(workflow, ctx)

    async def verify(
        self, report: WorkflowReport, cancel_event: asyncio.Event | None = None
    ) -> WorkflowReport:
        """Read-only inspection of a token and the platform contracts."""
        ctx = self._context(report, cancel_event)
        try:
            self._request.require("nft_contract", "token_id")
            self._request.require_contracts(ContractRole.BASE_ASSET, ContractRole.WRAPPED_ASSET)
        except WorkflowError as exc:
            return self._abort_preflight(ctx, exc)

        predicted = MainId.predict(self._request.nft_contract, self.token_id)
        self.main_id = predicted.value
        report.data.update(
            tokenId=self.token_id, mainId=predicted.value, mainIdHex=predicted.hex, mainIdSource="predicted",
        )
        report.data["checks"] = {}

        workflow = WorkflowDefinition(
            name="verify_asset",
            service=SERVICE_NAME,
            operation=report.operation,
            steps=[
                WorkflowStep("contracts_deployed", self._check_deployed, WorkflowState.VERIFIED),
                WorkflowStep("account_state", self._check_account_state, required=False),
                WorkflowStep("token_ownership", self._check_ownership),
                WorkflowStep("whitelist_status", self._check_whitelist, required=False),
                WorkflowStep("asset_manager_role", self._check_asset_manager, required=False),
                WorkflowStep("approval_status", self._check_approval, required=False),
                WorkflowStep("fraction_balance", self._check_fraction_balance, required=False),
                WorkflowStep("metadata_uri", self._check_metadata_uri, required=False),
            ],
        )
        await self._orchestrator.run(workflow, ctx)
        report.data["assetStatus"] = self._asset_status(report.data["checks"])
        return report

    # ------------------------------------------------------------------
    # Wrap preconditions
    # ------------------------------------------------------------------

    async def _verify_wrap_preconditions(self, ctx: ExecutionContext) -> None:
        request = self._request
        report = ctx.report
        request.require("nft_contract", "owner_signer", "admin_signer")
        request.require_contracts(ContractRole.BASE_ASSET, ContractRole.WRAPPED_ASSET)

        contracts = self._contracts
        await self.verifier.ensure_deployed(
            [contracts.nft_collection, contracts.base_asset, contracts.wrapped_asset]
        )
        report.log(
            f"Contracts deployed on {self._connection.profile.display_name}: collection "
            f"{contracts.nft_collection.address}, base asset {contracts.base_asset.address}, "
            f"wrapped asset {contracts.wrapped_asset.address}."
        )
        await self._record_account_state(ctx)

        if self.token_id is None:
            recipient = request.recipient or request.signers.owner.address
            report.log(f"No token id supplied; a new token will be minted to {recipient}.")
            return

        report.data["tokenId"] = self.token_id
        if await self.verifier.is_already_wrapped(self.token_id):
            predicted = MainId.predict(request.nft_contract, self.token_id)
            report.data.update(
                alreadyWrapped=True,
                currentOwner=str(contracts.wrapped_asset.address),
                mainId=predicted.value,
                mainIdHex=predicted.hex,
                mainIdSource="predicted",
            )
            if request.skip_if_already_wrapped:
                return
            raise OwnershipMismatch(
                str(request.signers.owner.address),
                str(contracts.wrapped_asset.address),
                f"token {self.token_id} (already wrapped)",
            )

        owner_address = request.signers.owner.address
        if await self.verifier.is_owner_of(self.token_id, owner_address):
            report.data.update(alreadyWrapped=False, currentOwner=str(owner_address))
            return

        owner = await self.verifier.owner_of(self.token_id)
        report.data.update(alreadyWrapped=False, currentOwner=str(owner))
        report.log(
            f"Token {self.token_id} belongs to {owner}, not to the owner signer "
            f"{owner_address}. Use that account's key as ownerPrivateKey; "
            "tokens held by another account are never transferred on its behalf."
        )
        raise OwnershipMismatch(str(owner_address), str(owner), f"token {self.token_id}")

    # ------------------------------------------------------------------
    # Mutating activities
    # ------------------------------------------------------------------

    async def _mint(self, ctx: ExecutionContext) -> StepResult:
        if not self._mint_fresh:
            return StepResult.skipped("mint", f"using existing token {self.token_id}")

        request = self._request
        nft = self._contracts.nft_collection
        owner_signer = request.signers.owner

        collection_owner, paused = await asyncio.gather(
            self.verifier.collection_owner(), self.verifier.is_paused()
        )
        if collection_owner != owner_signer.address:
            ctx.report.log(
                f"Only the collection owner {collection_owner} can mint; the owner signer is {owner_signer.address}."
            )
            raise PermissionMissing("collection owner", str(owner_signer.address), str(nft.address))
        if paused:
            raise ContractPaused(str(nft.address))

        recipient = request.recipient or owner_signer.address
        result = await self._transact(ctx, "mint", nft, "safeMint", [str(recipient), request.token_uri], owner_signer)
        if not result.success:
            return result

        try:
            token_id = self._minted_token_id(result)
        except MissingEventData as exc:
            ctx.report.log("The mint transaction confirmed but emitted no Transfer from the zero address.")
            return self._fail_after_receipt(result, exc)

        self.token_id = token_id
        predicted = MainId.predict(nft.address, token_id)
        ctx.report.data.update(
            tokenId=token_id,
            recipient=str(recipient),
            tokenUri=request.token_uri,
            mintTransactionHash=result.transaction_hash,
            predictedMainId=predicted.value,
        )
        ctx.report.log(f"Minted token {token_id} to {recipient}.")
        result.detail = f"minted token {token_id}"

        if self._owner_must_hold and recipient != owner_signer.address:
            holder = await self.verifier.owner_of(token_id)
            if holder != owner_signer.address:
                ctx.report.log(
                    f"Token {token_id} was minted to {holder}; the owner signer {owner_signer.address} "
                    "cannot approve or wrap it."
                )
                return self._fail_after_receipt(
                    result, OwnershipMismatch(str(owner_signer.address), str(holder), f"token {token_id}")
                )
        return result

    def _minted_token_id(self, result: StepResult) -> int:
        events = self._connection.decode_events(self._contracts.nft_collection, "Transfer", result.receipt)
        for event in events:
            if Address(event.args["from"]).is_zero:
                return int(event.args["tokenId"])
        raise MissingEventData("Transfer", result.transaction_hash)

    async def _whitelist(self, ctx: ExecutionContext) -> StepResult:
        admin = self._request.signers.admin
        wrapped = self._contracts.wrapped_asset
        nft_address = self._contracts.nft_collection.address

        await self._require_role(ctx, wrapped, "DEFAULT_ADMIN_ROLE", admin)
        if await self.verifier.is_whitelisted(nft_address, admin.address):
            return StepResult.skipped("whitelist", f"collection {nft_address} is already whitelisted")
        return await self._transact(ctx, "whitelist", wrapped, "whitelist", [str(nft_address), True], admin)

    async def _grant_role(self, ctx: ExecutionContext) -> StepResult:
        admin = self._request.signers.admin
        base = self._contracts.base_asset
        wrapped = self._contracts.wrapped_asset

        asset_manager = await self.verifier.role_id(base, "ASSET_MANAGER")
        if await self.verifier.has_role(base, asset_manager, wrapped.address):
            return StepResult.skipped("grant_role", "wrapped asset contract already holds ASSET_MANAGER")
        await self._require_role(ctx, base, "DEFAULT_ADMIN_ROLE", admin)
        return await self._transact(
            ctx, "grant_role", base, "grantRole", [asset_manager, str(wrapped.address)], admin
        )

    async def _approve(self, ctx: ExecutionContext) -> StepResult:
        owner = self._request.signers.owner
        wrapped = self._contracts.wrapped_asset
        nft = self._contracts.nft_collection

        if await self.verifier.is_approved_for_transfer(self.token_id, owner.address, wrapped.address):
            return StepResult.skipped("approve", f"wrapped asset contract may already move token {self.token_id}")
        return await self._transact(
            ctx, "approve", nft, "approve", [str(wrapped.address), self.token_id], owner
        )

    async def _wrap(self, ctx: ExecutionContext) -> StepResult:
        request = self._request
        owner = request.signers.owner
        wrapped = self._contracts.wrapped_asset
        nft = self._contracts.nft_collection
        fractions = request.fractions

        result = await self._transact(
            ctx, "wrap", wrapped, "wrapERC721", [str(nft.address), self.token_id, fractions.base_units], owner
        )
        if not result.success:
            return result

        predicted = MainId.predict(nft.address, self.token_id)
        data = ctx.report.data
        event = self._wrap_event(result)
        if event is not None:
            main_id = MainId(int(event.args["mainId"]))
            data["mainIdSource"] = "event"
            data["wrapNonce"] = int(event.args["nonce"])
        else:
            main_id = predicted
            data["mainIdSource"] = "predicted"
            ctx.report.log("No ERC721Wrapped event found in the wrap receipt; reporting the predicted main id.")
            self._logger.warning("wrap_event_missing", transaction_hash=result.transaction_hash)

        self.main_id = main_id.value
        data.update(
            alreadyWrapped=False,
            mainId=main_id.value,
            mainIdHex=main_id.hex,
            predictedMainId=predicted.value,
            mainIdMatchesPrediction=main_id == predicted,
            fractionsAmount=str(fractions),
            fractionsBaseUnits=fractions.base_units,
            wrapTransactionHash=result.transaction_hash,
        )
        ctx.report.log(f"Wrapped token {self.token_id} into {fractions} fractions under main id {main_id}.")
        result.detail = f"main id {main_id}"
        return result

    def _wrap_event(self, result: StepResult):
        events = self._connection.decode_events(self._contracts.wrapped_asset, "ERC721Wrapped", result.receipt)
        nft_address = self._contracts.nft_collection.address
        for event in events:
            if Address(event.args["contractAddress"]) == nft_address and int(event.args["tokenId"]) == self.token_id:
                return event
        return events[0] if events else None

    async def _enrich_wrapped(self, ctx: ExecutionContext) -> StepResult:
        nft = self._contracts.nft_collection
        document = await self._provider.build_metadata(self.main_id, str(nft.address), self.token_id)
        ctx.report.data["metadataAttributes"] = dict(document.attributes)
        return await self._apply_base_uri(ctx, "enrich_metadata", self.main_id, document.base_uri)

    def _mapping_activity(self, mapping: MetadataMapping):
        async def activity(ctx: ExecutionContext) -> StepResult:
            return await self._apply_base_uri(ctx, f"set_base_uri:{mapping.main_id}", mapping.main_id, mapping.base_uri)

        return activity

    async def _apply_base_uri(self, ctx: ExecutionContext, name: str, main_id: int, base_uri: str) -> StepResult:
        admin = self._request.signers.admin
        base = self._contracts.base_asset

        try:
            current = await self.verifier.token_uri(main_id, 0)
        except SimulationFailed:
            current = ""
        if current and current.startswith(base_uri):
            return StepResult.skipped(name, f"base URI for main id {main_id} is already {base_uri}")

        await self._require_role(ctx, base, "DEFAULT_ADMIN_ROLE", admin)
        result = await self._transact(ctx, name, base, "setBaseURI", [main_id, base_uri], admin)
        if result.success:
            ctx.report.data.setdefault("baseUris", {})[str(main_id)] = base_uri
        return result

    # ------------------------------------------------------------------
    # Read-only checks
    # ------------------------------------------------------------------

    @staticmethod
    def _record(ctx: ExecutionContext, key: str, value: object) -> None:
        ctx.report.data["checks"][key] = value

    async def _check_deployed(self, ctx: ExecutionContext) -> StepResult:
        bindings = self._contracts.all()
        outcome = await self.verifier.contracts_deployed(b.address for b in bindings)
        self._record(ctx, "contractsDeployed", {b.role.value: str(b.address) not in outcome["missing"] for b in bindings})
        if outcome["missing"]:
            first = outcome["missing"][0]
            role = next(b.role.value for b in bindings if str(b.address) == first)
            raise ContractNotDeployed(first, role)
        return StepResult.succeeded("contracts_deployed", f"{len(bindings)} contracts have code")

    async def _check_account_state(self, ctx: ExecutionContext) -> StepResult:
        await self._record_account_state(ctx)
        supply = ctx.report.data.get("totalSupply")
        detail = f"collection supply {supply}" if supply is not None else "collection has no totalSupply"
        return StepResult.succeeded("account_state", detail)

    async def _check_ownership(self, ctx: ExecutionContext) -> StepResult:
        owner = await self.verifier.owner_of(self.token_id)
        wrapped = owner == self._contracts.wrapped_asset.address
        self._record(ctx, "owner", str(owner))
        self._record(ctx, "isWrapped", wrapped)
        ctx.report.data["alreadyWrapped"] = wrapped
        signer = self._request.signers.owner
        if signer is not None:
            self._record(ctx, "ownedBySigner", owner == signer.address)
        detail = "held by the wrapped asset contract" if wrapped else f"owned by {owner}"
        return StepResult.succeeded("token_ownership", detail)

    async def _check_whitelist(self, ctx: ExecutionContext) -> StepResult:
        checks = ctx.report.data["checks"]
        if checks.get("isWrapped"):
            self._record(ctx, "whitelisted", True)
            return StepResult.succeeded("whitelist_status", "implied by the wrapped state")
        admin = self._request.signers.admin
        if admin is None:
            return StepResult.skipped("whitelist_status", "no admin signer to check the whitelist with")
        whitelisted = await self.verifier.is_whitelisted(self._contracts.nft_collection.address, admin.address)
        self._record(ctx, "whitelisted", whitelisted)
        return StepResult.succeeded("whitelist_status", "whitelisted" if whitelisted else "not whitelisted")

    async def _check_asset_manager(self, ctx: ExecutionContext) -> StepResult:
        base = self._contracts.base_asset
        granted = await self.verifier.has_named_role(base, "ASSET_MANAGER", self._contracts.wrapped_asset.address)
        self._record(ctx, "assetManagerRoleGranted", granted)
        return StepResult.succeeded("asset_manager_role", "granted" if granted else "not granted")

    async def _check_approval(self, ctx: ExecutionContext) -> StepResult:
        checks = ctx.report.data["checks"]
        if checks.get("isWrapped"):
            return StepResult.skipped("approval_status", "token is held by the wrapped asset contract")
        approved = await self.verifier.is_approved_for_transfer(
            self.token_id, Address(checks["owner"]), self._contracts.wrapped_asset.address
        )
        self._record(ctx, "approved", approved)
        return StepResult.succeeded("approval_status", "approved" if approved else "not approved")

    async def _check_fraction_balance(self, ctx: ExecutionContext) -> StepResult:
        signer = self._request.signers.owner
        holder = signer.address if signer is not None else self._request.recipient
        if holder is None:
            return StepResult.skipped("fraction_balance", "no owner or recipient address to check")
        balance = await self.verifier.fraction_balance(holder, self.main_id)
        self._record(ctx, "fractionHolder", str(holder))
        self._record(ctx, "fractionBalance", balance)
        self._record(ctx, "fractionBalanceDisplay", str(from_fixed_point(balance)))
        return StepResult.succeeded("fraction_balance", f"{from_fixed_point(balance)} fractions held by {holder}")

    async def _check_metadata_uri(self, ctx: ExecutionContext) -> StepResult:
        if not ctx.report.data["checks"].get("isWrapped"):
            return StepResult.skipped("metadata_uri", "token is not wrapped")
        try:
            uri = await self.verifier.token_uri(self.main_id, 0)
        except SimulationFailed as exc:
            return StepResult.skipped("metadata_uri", f"tokenURI unavailable: {exc.reason}")
        self._record(ctx, "tokenUri", uri)
        return StepResult.succeeded("metadata_uri", uri or "empty")

    @staticmethod
    def _asset_status(checks: dict) -> str:
        if checks.get("isWrapped"):
            return "wrapped"
        if "owner" not in checks:
            return "unknown"
        ready = checks.get("whitelisted") and checks.get("assetManagerRoleGranted") and checks.get("approved")
        return "ready_to_wrap" if ready else "needs_setup"
