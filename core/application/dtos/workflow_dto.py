"""
Workflow request DTOs.

A WorkflowRequest is the single validated input to an orchestration run.
It is produced by the ParameterResolver and owned by exactly one run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.domain.enums import ContractRole, Network
from core.domain.errors import InvalidParameter
from core.domain.value_objects import Address, FractionsAmount

from .chain_dto import Signer


SOURCE_OVERRIDE = "override"
SOURCE_EXTRACTION = "extraction"
SOURCE_PERSISTED = "persisted"
SOURCE_DEFAULT = "default"
SOURCE_NONE = "none"


@dataclass(frozen=True)
class SignerPair:
    """Owner and admin credentials. They may be the same key."""

    owner: Optional[Signer] = None
    admin: Optional[Signer] = None

    @property
    def same_key(self) -> bool:
        return (
            self.owner is not None
            and self.admin is not None
            and self.owner.address == self.admin.address
        )


@dataclass(frozen=True)
class WorkflowRequest:
    """Validated parameters for one run."""

    network: Network
    nft_contract: Optional[Address]
    recipient: Optional[Address]
    token_id: Optional[int]
    fractions: FractionsAmount
    token_uri: str
    contracts: Dict[ContractRole, Address]
    signers: SignerPair
    skip_if_already_wrapped: bool = True
    sources: Dict[str, str] = field(default_factory=dict)

    def require(self, *fields: str) -> None:
        """Fail with InvalidParameter if any named field is unset."""
        for name in fields:
            if name in ("owner_signer", "admin_signer"):
                value = getattr(self.signers, name.split("_")[0])
            else:
                value = getattr(self, name)
            if value is None:
                raise InvalidParameter(
                    _camel(name), self.sources.get(_camel(name), SOURCE_NONE), "required but not provided"
                )

    def contract(self, role: ContractRole) -> Optional[Address]:
        return self.contracts.get(role)

    def require_contracts(self, *roles: ContractRole) -> None:
        for role in roles:
            if role not in self.contracts:
                raise InvalidParameter(
                    role.value, SOURCE_NONE, f"no address configured on {self.network.value}"
                )

    def describe(self) -> Dict[str, Any]:
        """Public, key-free view of the request for reports."""
        return {
            "network": self.network.value,
            "nftContract": str(self.nft_contract) if self.nft_contract else None,
            "recipientAddress": str(self.recipient) if self.recipient else None,
            "tokenId": self.token_id,
            "fractionsAmount": str(self.fractions),
            "tokenUri": self.token_uri,
            "contracts": {role.value: str(addr) for role, addr in self.contracts.items()},
            "ownerAddress": str(self.signers.owner.address) if self.signers.owner else None,
            "adminAddress": str(self.signers.admin.address) if self.signers.admin else None,
            "sources": dict(self.sources),
        }


@dataclass(frozen=True)
class MetadataMapping:
    """One main id to base URI assignment."""

    main_id: int
    base_uri: str
    description: str = ""
    category: str = ""


@dataclass(frozen=True)
class MetadataDocument:
    """Metadata produced by an enrichment provider for a wrapped asset."""

    base_uri: str
    attributes: Dict[str, Any] = field(default_factory=dict)


def _camel(name: str) -> str:
    aliases = {
        "recipient": "recipientAddress",
        "fractions": "fractionsAmount",
        "owner_signer": "ownerPrivateKey",
        "admin_signer": "adminPrivateKey",
    }
    if name in aliases:
        return aliases[name]
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


__all__: List[str] = [
    "MetadataDocument",
    "MetadataMapping",
    "SignerPair",
    "WorkflowRequest",
    "SOURCE_DEFAULT",
    "SOURCE_EXTRACTION",
    "SOURCE_NONE",
    "SOURCE_OVERRIDE",
    "SOURCE_PERSISTED",
]
