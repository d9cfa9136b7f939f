"""
Chain-facing data carriers.

Plain dataclasses shared by the gateway, the executor and the
orchestrator. None of them hold a live connection.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from core.domain.enums import ContractRole, Network
from core.domain.value_objects import Address


@dataclass(frozen=True)
class NetworkProfile:
    """Static description of a supported chain."""

    network: Network
    display_name: str
    chain_id: int
    rpc_url: str
    explorer_url: str
    currency: str = "XDC"

    def transaction_url(self, transaction_hash: str) -> str:
        return f"{self.explorer_url}/txs/{transaction_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"


@dataclass(frozen=True)
class Signer:
    """
    A run-scoped credential.

    The private key never leaves the wrapped eth_account object and is
    excluded from repr so it cannot end up in logs or reports.
    """

    label: str
    account: LocalAccount = field(repr=False, compare=False)

    @classmethod
    def from_private_key(cls, label: str, private_key: str) -> "Signer":
        key = private_key.strip()
        if not key.startswith("0x"):
            key = "0x" + key
        return cls(label=label, account=Account.from_key(key))

    @property
    def address(self) -> Address:
        return Address(self.account.address)


@dataclass(frozen=True)
class ContractBinding:
    """A contract role bound to an address and its call interface."""

    role: ContractRole
    address: Address
    abi: List[Dict[str, Any]] = field(repr=False, compare=False)

    def has_function(self, name: str) -> bool:
        return any(item.get("type") == "function" and item.get("name") == name for item in self.abi)


@dataclass(frozen=True)
class ContractSet:
    """Resolved contracts for one run. Immutable once built."""

    nft_collection: Optional[ContractBinding] = None
    base_asset: Optional[ContractBinding] = None
    wrapped_asset: Optional[ContractBinding] = None
    marketplace: Optional[ContractBinding] = None
    fee_manager: Optional[ContractBinding] = None

    def all(self) -> List[ContractBinding]:
        bindings = [self.nft_collection, self.base_asset, self.wrapped_asset, self.marketplace, self.fee_manager]
        return [b for b in bindings if b is not None]

    def addresses(self) -> Dict[str, str]:
        return {b.role.value: str(b.address) for b in self.all()}


@dataclass
class TransactionReceipt:
    """Outcome of an included transaction."""

    transaction_hash: str
    block_number: int
    gas_used: int
    status: int = 1
    raw: Any = field(default=None, repr=False, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class DecodedEvent:
    """A log entry decoded against a contract ABI."""

    name: str
    address: str
    args: Dict[str, Any]
    log_index: int = 0
