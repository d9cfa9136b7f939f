"""
Chain Gateway - web3 connections to XDC networks.

One Web3ChainConnection per network is created lazily and shared by every
run on that network. The connection itself holds no signer state; keys
are passed per transaction and used only to sign locally.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.logs import DISCARD
from web3.middleware import ExtraDataToPOAMiddleware

from core.application.dtos.chain_dto import (
    ContractBinding,
    DecodedEvent,
    NetworkProfile,
    Signer,
    TransactionReceipt,
)
from core.application.interfaces import ChainConnection, PendingTransaction
from core.application.services.network_resolution import select_network
from core.domain.enums import Network
from core.domain.errors import (
    ChainUnavailable,
    SimulationFailed,
    TransactionReverted,
    TransactionTimeout,
)
from core.settings.modules.network_settings import NetworkSettings

from .networks import build_network_profiles
from .revert import RevertDecoder

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError, Web3Exception)

ConnectionFactory = Callable[[NetworkProfile], ChainConnection]


class Web3PendingTransaction(PendingTransaction):
    """A transaction accepted by the node, not yet confirmed."""

    def __init__(self, connection: "Web3ChainConnection", tx_hash: str, tx: Dict[str, Any]) -> None:
        self.hash = tx_hash
        self._connection = connection
        self._tx = tx

    async def wait(self, timeout_seconds: float) -> TransactionReceipt:
        w3 = self._connection.w3
        try:
            receipt = await w3.eth.wait_for_transaction_receipt(self.hash, timeout=timeout_seconds)
        except TimeExhausted:
            raise TransactionTimeout(self.hash, timeout_seconds) from None
        except TRANSPORT_ERRORS as exc:
            raise ChainUnavailable(f"waiting for {self.hash} failed: {exc}") from exc

        if receipt["status"] != 1:
            decoded = await self._connection.replay_revert(self._tx, receipt["blockNumber"])
            raise TransactionReverted(decoded.reason, self.hash, decoded.name)

        return TransactionReceipt(
            transaction_hash=self.hash,
            block_number=receipt["blockNumber"],
            gas_used=receipt["gasUsed"],
            status=receipt["status"],
            raw=receipt,
        )


class Web3ChainConnection(ChainConnection):
    """ChainConnection backed by web3.py's AsyncWeb3."""

    def __init__(
        self,
        profile: NetworkProfile,
        request_timeout_seconds: float = 30.0,
        decoder: Optional[RevertDecoder] = None,
    ) -> None:
        self._profile = profile
        self._decoder = decoder or RevertDecoder()
        provider = AsyncHTTPProvider(
            profile.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout_seconds)},
        )
        self.w3 = AsyncWeb3(provider)
        # XDC blocks carry extended extraData.
        self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    @property
    def profile(self) -> NetworkProfile:
        return self._profile

    def _contract(self, binding: ContractBinding):
        return self.w3.eth.contract(address=str(binding.address), abi=binding.abi)

    def _function(self, binding: ContractBinding, method: str, args: Sequence[Any]):
        return getattr(self._contract(binding).functions, method)(*args)

    async def chain_id(self) -> int:
        try:
            return await self.w3.eth.chain_id
        except TRANSPORT_ERRORS as exc:
            raise ChainUnavailable(f"{self._profile.rpc_url}: {exc}") from exc

    async def get_code(self, address: str) -> bytes:
        try:
            return bytes(await self.w3.eth.get_code(address))
        except TRANSPORT_ERRORS as exc:
            raise ChainUnavailable(f"get_code({address}) failed: {exc}") from exc

    async def get_balance(self, address: str) -> int:
        try:
            return int(await self.w3.eth.get_balance(address))
        except TRANSPORT_ERRORS as exc:
            raise ChainUnavailable(f"get_balance({address}) failed: {exc}") from exc

    async def call_view(
        self,
        binding: ContractBinding,
        method: str,
        args: Sequence[Any] = (),
        from_address: Optional[str] = None,
    ) -> Any:
        params = {"from": from_address} if from_address else {}
        try:
            return await self._function(binding, method, args).call(params)
        except ContractLogicError as exc:
            decoded = self._decoder.from_exception(exc)
            raise SimulationFailed(decoded.reason, method, decoded.name) from exc
        except TRANSPORT_ERRORS as exc:
            raise ChainUnavailable(f"{binding.role.value}.{method} failed: {exc}") from exc

    async def simulate(
        self, binding: ContractBinding, method: str, args: Sequence[Any], sender: str
    ) -> Any:
        return await self.call_view(binding, method, args, from_address=sender)

    async def estimate_gas(
        self, binding: ContractBinding, method: str, args: Sequence[Any], sender: str
    ) -> int:
        return int(await self._function(binding, method, args).estimate_gas({"from": sender}))

    async def send_transaction(
        self,
        binding: ContractBinding,
        method: str,
        args: Sequence[Any],
        signer: Signer,
        gas_limit: int,
        gas_price_wei: Optional[int] = None,
    ) -> PendingTransaction:
        sender = str(signer.address)
        try:
            nonce = await self.w3.eth.get_transaction_count(sender, "pending")
            gas_price = gas_price_wei if gas_price_wei else await self.w3.eth.gas_price
            tx = await self._function(binding, method, args).build_transaction(
                {
                    "from": sender,
                    "nonce": nonce,
                    "gas": gas_limit,
                    "gasPrice": gas_price,
                    "chainId": self._profile.chain_id,
                }
            )
            signed = signer.account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except ContractLogicError as exc:
            decoded = self._decoder.from_exception(exc)
            raise SimulationFailed(decoded.reason, method, decoded.name) from exc
        except TRANSPORT_ERRORS as exc:
            raise ChainUnavailable(f"sending {binding.role.value}.{method} failed: {exc}") from exc
        return Web3PendingTransaction(self, AsyncWeb3.to_hex(tx_hash), tx)

    async def replay_revert(self, tx: Dict[str, Any], block_number: int):
        """Re-run a reverted transaction as a call at its block to recover the reason."""
        call = {key: tx[key] for key in ("from", "to", "data", "value") if key in tx}
        try:
            await self.w3.eth.call(call, block_identifier=block_number)
        except ContractLogicError as exc:
            return self._decoder.from_exception(exc)
        except TRANSPORT_ERRORS as exc:
            logger.warning(f"Could not replay reverted transaction: {exc}")
        return self._decoder.decode(None)

    def decode_events(
        self, binding: ContractBinding, event_name: str, receipt: TransactionReceipt
    ) -> List[DecodedEvent]:
        if receipt.raw is None:
            return []
        event = getattr(self._contract(binding).events, event_name)()
        decoded = []
        for entry in event.process_receipt(receipt.raw, errors=DISCARD):
            if str(entry["address"]).lower() != str(binding.address).lower():
                continue
            decoded.append(
                DecodedEvent(
                    name=entry["event"],
                    address=entry["address"],
                    args=dict(entry["args"]),
                    log_index=entry["logIndex"],
                )
            )
        return decoded


class ChainGateway:
    """
    Entry point to the chain.

    ``connect`` accepts an explicit network or a free-text intent and
    returns the shared connection for the selected network, verifying the
    node's chain id on first use.
    """

    def __init__(
        self,
        settings: NetworkSettings,
        connection_factory: Optional[ConnectionFactory] = None,
    ) -> None:
        self._settings = settings
        self._profiles = build_network_profiles(settings)
        self._factory = connection_factory or (
            lambda profile: Web3ChainConnection(profile, settings.request_timeout_seconds)
        )
        self._connections: Dict[Network, ChainConnection] = {}
        self._lock = asyncio.Lock()

    @property
    def profiles(self) -> Dict[Network, NetworkProfile]:
        return dict(self._profiles)

    def profile(self, network: Network) -> NetworkProfile:
        return self._profiles[network]

    async def connect(
        self, selector: Union[Network, str, None] = None, intent: Optional[str] = None
    ) -> ChainConnection:
        """
        Return the shared connection for a network.

        Raises:
            InvalidParameter: If an explicit network name is unknown
            ChainUnavailable: If the node is unreachable or on another chain
        """
        if isinstance(selector, Network):
            network = selector
        else:
            network, _ = select_network(selector, intent, self._settings.default_network)

        async with self._lock:
            if network in self._connections:
                return self._connections[network]

            profile = self._profiles[network]
            connection = self._factory(profile)
            chain_id = await connection.chain_id()
            if chain_id != profile.chain_id:
                raise ChainUnavailable(
                    f"{profile.rpc_url} reports chain id {chain_id}, expected {profile.chain_id}"
                )
            logger.info(f"Connected to {profile.display_name} (chain {chain_id}) via {profile.rpc_url}")
            self._connections[network] = connection
            return connection
