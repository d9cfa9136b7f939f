"""Application layer interfaces."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from core.application.dtos.chain_dto import (
    ContractBinding,
    DecodedEvent,
    NetworkProfile,
    Signer,
    TransactionReceipt,
)
from core.application.dtos.workflow_dto import MetadataDocument


class PendingTransaction(ABC):
    """
    Handle for a submitted transaction.

    A pending transaction is never cancelled; it is only awaited until it
    is included or the deadline passes.
    """

    hash: str

    @abstractmethod
    async def wait(self, timeout_seconds: float) -> TransactionReceipt:
        """
        Wait for inclusion.

        Args:
            timeout_seconds: Deadline for inclusion

        Returns:
            Receipt of the included transaction

        Raises:
            TransactionReverted: If the transaction was mined with status 0
            TransactionTimeout: If it was not included before the deadline
        """
        pass


class ChainConnection(ABC):
    """
    Interface for a connection to one network.

    One connection is shared by every run on the same network. It only
    carries read-only state; signers are passed per call.
    """

    @property
    @abstractmethod
    def profile(self) -> NetworkProfile:
        """Network this connection talks to."""
        pass

    @abstractmethod
    async def chain_id(self) -> int:
        """Return the chain id reported by the node."""
        pass

    @abstractmethod
    async def get_code(self, address: str) -> bytes:
        """Return the deployed bytecode at an address (empty if none)."""
        pass

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Return the native balance in wei."""
        pass

    @abstractmethod
    async def call_view(
        self,
        binding: ContractBinding,
        method: str,
        args: Sequence[Any] = (),
        from_address: Optional[str] = None,
    ) -> Any:
        """
        Call a read-only contract function.

        Raises:
            ChainUnavailable: On transport failure
            SimulationFailed: If the call itself reverts
        """
        pass

    @abstractmethod
    async def simulate(
        self, binding: ContractBinding, method: str, args: Sequence[Any], sender: str
    ) -> Any:
        """
        Dry-run a mutating call from ``sender`` without changing state.

        Returns:
            The decoded return value of the call

        Raises:
            SimulationFailed: With the decoded revert reason
        """
        pass

    @abstractmethod
    async def estimate_gas(
        self, binding: ContractBinding, method: str, args: Sequence[Any], sender: str
    ) -> int:
        """Estimate execution cost. Any exception means no estimate."""
        pass

    @abstractmethod
    async def send_transaction(
        self,
        binding: ContractBinding,
        method: str,
        args: Sequence[Any],
        signer: Signer,
        gas_limit: int,
        gas_price_wei: Optional[int] = None,
    ) -> PendingTransaction:
        """Sign and submit a transaction. Returns once the node accepted it."""
        pass

    @abstractmethod
    def decode_events(
        self, binding: ContractBinding, event_name: str, receipt: TransactionReceipt
    ) -> List[DecodedEvent]:
        """Decode every ``event_name`` log emitted by ``binding`` in a receipt."""
        pass


class IMetadataEnrichmentProvider(ABC):
    """
    Interface for metadata enrichment.

    Providers produce the descriptive or compliance metadata for a wrapped
    asset. Writing it on chain is done by the orchestrator.
    """

    name: str = "provider"

    @abstractmethod
    async def build_metadata(
        self, main_id: int, nft_contract: str, token_id: int
    ) -> MetadataDocument:
        """
        Build metadata for a wrapped asset.

        Args:
            main_id: Authoritative main id from the wrap event
            nft_contract: Source NFT collection
            token_id: Source token id

        Returns:
            MetadataDocument with the base URI to set on chain
        """
        pass


class IDeploymentRecordStore(ABC):
    """Interface for the advisory record of contract addresses and runs."""

    @abstractmethod
    def contracts_for(self, network: str) -> Dict[str, str]:
        """Return recorded contract addresses for a network (may be empty)."""
        pass

    @abstractmethod
    def record_run(self, network: str, contracts: Dict[str, str], run: Dict[str, Any]) -> None:
        """Merge addresses and append a run summary. Never raises."""
        pass


__all__ = [
    "ChainConnection",
    "IDeploymentRecordStore",
    "IMetadataEnrichmentProvider",
    "PendingTransaction",
]
