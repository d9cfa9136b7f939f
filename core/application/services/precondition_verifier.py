"""
Precondition Verifier.

Read-only checks against live chain state. Nothing here sends a
transaction; the orchestrator uses the answers to decide whether a step
is needed, already satisfied, or impossible.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from core.application.dtos.chain_dto import ContractBinding, ContractSet
from core.application.interfaces import ChainConnection
from core.domain.errors import ContractNotDeployed, SimulationFailed
from core.domain.value_objects import Address

logger = logging.getLogger(__name__)

ALREADY_WHITELISTED_ERRORS = ("StatusChanged",)


class PreconditionVerifier:
    """
    Live-state checks for one run.

    Role identifiers are read from the contracts once and cached for the
    lifetime of the verifier.
    """

    def __init__(self, connection: ChainConnection, contracts: ContractSet) -> None:
        self._connection = connection
        self._contracts = contracts
        self._role_ids: Dict[tuple, bytes] = {}

    @property
    def contracts(self) -> ContractSet:
        return self._contracts

    def _nft(self) -> ContractBinding:
        if self._contracts.nft_collection is None:
            raise ValueError("No NFT collection bound for this run")
        return self._contracts.nft_collection

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    async def contracts_deployed(self, addresses: Iterable[Address]) -> Dict[str, List[str]]:
        """
        Check that every address holds bytecode.

        Returns:
            {"missing": [...]} listing addresses without code
        """
        targets = list(dict.fromkeys(addresses))
        codes = await asyncio.gather(*(self._connection.get_code(str(a)) for a in targets))
        missing = [str(a) for a, code in zip(targets, codes) if not code or code in (b"", b"\x00")]
        return {"missing": missing}

    async def ensure_deployed(self, bindings: Iterable[ContractBinding]) -> None:
        """Raise ContractNotDeployed for the first binding without code."""
        bindings = list(bindings)
        result = await self.contracts_deployed(b.address for b in bindings)
        if result["missing"]:
            first = result["missing"][0]
            role = next((b.role.value for b in bindings if str(b.address) == first), None)
            raise ContractNotDeployed(first, role)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    async def role_id(self, binding: ContractBinding, role_name: str) -> bytes:
        """Read a role identifier such as DEFAULT_ADMIN_ROLE from a contract."""
        key = (str(binding.address), role_name)
        if key not in self._role_ids:
            self._role_ids[key] = await self._connection.call_view(binding, role_name)
        return self._role_ids[key]

    async def has_role(self, binding: ContractBinding, role: bytes, account: Address) -> bool:
        return bool(await self._connection.call_view(binding, "hasRole", [role, str(account)]))

    async def has_named_role(self, binding: ContractBinding, role_name: str, account: Address) -> bool:
        return await self.has_role(binding, await self.role_id(binding, role_name), account)

    # ------------------------------------------------------------------
    # NFT collection
    # ------------------------------------------------------------------

    async def owner_of(self, token_id: int) -> Address:
        return Address(await self._connection.call_view(self._nft(), "ownerOf", [token_id]))

    async def is_owner_of(self, token_id: int, expected_owner: Address) -> bool:
        return await self.owner_of(token_id) == expected_owner

    async def collection_owner(self) -> Address:
        return Address(await self._connection.call_view(self._nft(), "owner"))

    async def is_paused(self) -> bool:
        try:
            return bool(await self._connection.call_view(self._nft(), "paused"))
        except SimulationFailed as exc:
            # Collections without a pause switch revert on paused().
            logger.debug(f"paused() not available on {self._nft().address}: {exc.reason}")
            return False

    async def total_supply(self) -> Optional[int]:
        try:
            return int(await self._connection.call_view(self._nft(), "totalSupply"))
        except SimulationFailed:
            return None

    async def is_approved_for_transfer(
        self, token_id: int, owner: Address, operator: Address
    ) -> bool:
        """True if ``operator`` may move the token, per-token or as operator-for-all."""
        approved, for_all = await asyncio.gather(
            self._connection.call_view(self._nft(), "getApproved", [token_id]),
            self._connection.call_view(self._nft(), "isApprovedForAll", [str(owner), str(operator)]),
        )
        return Address(approved) == operator or bool(for_all)

    async def is_already_wrapped(self, token_id: int) -> bool:
        """The canonical signal: the wrapper contract itself owns the NFT."""
        return await self.owner_of(token_id) == self._contracts.wrapped_asset.address

    # ------------------------------------------------------------------
    # Wrapper / base asset
    # ------------------------------------------------------------------

    async def is_whitelisted(self, nft_contract: Address, admin: Address) -> bool:
        """
        Probe whitelist status by simulating ``whitelist(nft, true)``.

        The wrapper has no getter; it reverts with StatusChanged when the
        status would not change. Any other revert is re-raised.
        """
        try:
            await self._connection.simulate(
                self._contracts.wrapped_asset, "whitelist", [str(nft_contract), True], str(admin)
            )
        except SimulationFailed as exc:
            if exc.error_name in ALREADY_WHITELISTED_ERRORS or "already" in exc.reason.lower():
                return True
            raise
        return False

    async def fraction_balance(self, account: Address, main_id: int, sub_id: int = 0) -> int:
        return int(
            await self._connection.call_view(
                self._contracts.base_asset, "balanceOf", [str(account), main_id, sub_id]
            )
        )

    async def token_uri(self, main_id: int, sub_id: int = 0) -> str:
        return str(
            await self._connection.call_view(self._contracts.base_asset, "tokenURI", [main_id, sub_id])
        )

    async def native_balance(self, account: Address) -> int:
        return await self._connection.get_balance(str(account))
