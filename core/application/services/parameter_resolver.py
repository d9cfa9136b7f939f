"""
Parameter Resolver.

Merges parameters from four layers into one validated WorkflowRequest:

    override > extraction > persisted > default

Overrides come from the caller's parameter bag (the same variable names
the environment uses, or their camelCase equivalents). Extraction reads
the free-text user prompt. Persisted values come from settings and the
deployment record. Defaults are the published testnet deployment and
the workflow defaults.

Resolution is all-or-nothing: the first invalid value raises
InvalidParameter and no request is produced.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from core.application.dtos.chain_dto import Signer
from core.application.dtos.workflow_dto import (
    SOURCE_DEFAULT,
    SOURCE_EXTRACTION,
    SOURCE_NONE,
    SOURCE_OVERRIDE,
    SOURCE_PERSISTED,
    SignerPair,
    WorkflowRequest,
)
from core.application.interfaces import IDeploymentRecordStore
from core.application.services.network_resolution import select_network
from core.domain.enums import ContractRole, Network
from core.domain.errors import InvalidParameter
from core.domain.value_objects import Address, FractionsAmount
from core.settings import AppSettings

logger = logging.getLogger(__name__)


DEFAULT_FRACTIONS = "100000"
DEFAULT_TOKEN_URI = "https://CANFT4.com"

# Parameter bag keys accepted per logical parameter, first match wins.
OVERRIDE_KEYS: Dict[str, Tuple[str, ...]] = {
    "nftContract": ("ORIG_NFT_CONTRACT_ADDRESS", "nftContract"),
    "recipientAddress": ("ORIG_NFT_RECIPIENT_ADDRESS", "recipientAddress"),
    "tokenUri": ("ORIG_NFT_TOKEN_URI", "tokenUri"),
    "tokenId": ("TARGET_TOKEN_ID", "tokenId"),
    "fractionsAmount": ("TARGET_FRACTIONS", "fractionsAmount"),
    "ownerPrivateKey": ("ORIG_NFT_OWNER_PRIVATE_KEY", "ownerPrivateKey"),
    "adminPrivateKey": (
        "POLYTRADE_ADMIN_PRIVATE_KEY",
        "POLYTRADE_ADMIN_TESTNET_PRIVATE_KEY",
        "adminPrivateKey",
    ),
}

PLATFORM_ROLES = (
    ContractRole.BASE_ASSET,
    ContractRole.WRAPPED_ASSET,
    ContractRole.MARKETPLACE,
    ContractRole.FEE_MANAGER,
)

_CONTRACT_SETTING_FIELDS = {
    ContractRole.BASE_ASSET: "base_asset",
    ContractRole.WRAPPED_ASSET: "wrapped_asset",
    ContractRole.MARKETPLACE: "marketplace",
    ContractRole.FEE_MANAGER: "fee_manager",
}

# Explicit forms first, then contextual forms.
_TOKEN_ID_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"token\s*id\s*[:\s=]\s*(\d+)",
        r"tokenid\s*[:\s=]\s*(\d+)",
        r"\bid\s*[:\s=]\s*(\d+)",
        r"token\s*#?(\d+)",
        r"nft\s*#?(\d+)",
        r"asset\s*#?(\d+)",
        r"item\s*#?(\d+)",
        r"wrap\s*(\d+)",
        r"fractionalize\s*(\d+)",
        r"(\d+)\s*(?:token|nft|asset)",
        r"number\s*(\d+)",
        r"#(\d+)",
    )
]
_STANDALONE_INTEGER = re.compile(r"\b\d{1,6}\b")
_DIGITS = re.compile(r"^\d+$")


def extract_token_id(text: Optional[str]) -> Optional[int]:
    """
    Pull a token id out of a free-text intent.

    The first matching pattern wins. Without a contextual match the
    smallest standalone integer of at most six digits is used. Text with
    no digits yields None.
    """
    if not text:
        return None
    for pattern in _TOKEN_ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    candidates = [int(value) for value in _STANDALONE_INTEGER.findall(text)]
    return min(candidates) if candidates else None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _first(candidates: Iterable[Tuple[Any, str]]) -> Tuple[Any, str]:
    for value, source in candidates:
        if not _blank(value):
            return value, source
    return None, SOURCE_NONE


class ParameterResolver:
    """Resolves a parameter bag into a validated WorkflowRequest."""

    def __init__(
        self,
        settings: AppSettings,
        default_contracts: Mapping[Network, Mapping[ContractRole, str]],
        record_store: Optional[IDeploymentRecordStore] = None,
    ) -> None:
        self._settings = settings
        self._default_contracts = default_contracts
        self._record_store = record_store

    def resolve(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        contract_overrides: Optional[Mapping[str, Any]] = None,
        network: Optional[str] = None,
        user_prompt: Optional[str] = None,
        skip_if_already_wrapped: bool = True,
    ) -> WorkflowRequest:
        """
        Resolve every parameter of a run.

        Args:
            overrides: Caller parameter bag (environment-style names)
            contract_overrides: Contract addresses keyed by role name
            network: Explicit network name
            user_prompt: Free-text intent used for network and token id
            skip_if_already_wrapped: Short-circuit flag carried through

        Returns:
            Validated WorkflowRequest

        Raises:
            InvalidParameter: On the first invalid value
        """
        overrides = dict(overrides or {})
        contract_overrides = dict(contract_overrides or {})
        sources: Dict[str, str] = {}

        selected, sources["network"] = select_network(
            network, user_prompt, self._settings.network.default_network
        )
        env_applies = self._env_applies_to(selected)
        recorded = self._recorded_contracts(selected)

        owner = self._signer("ownerPrivateKey", "owner", overrides,
                             self._settings.signers.owner_private_key, sources)
        admin = self._signer("adminPrivateKey", "admin", overrides,
                             self._settings.signers.admin_private_key, sources)

        nft_contract = self._address(
            "nftContract",
            [
                (self._override(overrides, "nftContract"), SOURCE_OVERRIDE),
                (self._settings.contracts.nft_contract if env_applies else None, SOURCE_PERSISTED),
                (recorded.get(ContractRole.NFT_COLLECTION.value), SOURCE_PERSISTED),
            ],
            sources,
        )
        recipient = self._address(
            "recipientAddress",
            [
                (self._override(overrides, "recipientAddress"), SOURCE_OVERRIDE),
                (self._settings.contracts.recipient if env_applies else None, SOURCE_PERSISTED),
                (str(owner.address) if owner else None, SOURCE_DEFAULT),
            ],
            sources,
        )
        token_id = self._token_id(overrides, user_prompt, sources)
        fractions = self._fractions(overrides, sources)
        token_uri = self._token_uri(overrides, sources)

        contracts: Dict[ContractRole, Address] = {}
        for role in PLATFORM_ROLES:
            env_value = getattr(self._settings.contracts, _CONTRACT_SETTING_FIELDS[role])
            address = self._address(
                role.value,
                [
                    (contract_overrides.get(role.value), SOURCE_OVERRIDE),
                    (env_value if env_applies else None, SOURCE_PERSISTED),
                    (recorded.get(role.value), SOURCE_PERSISTED),
                    (self._default_contracts.get(selected, {}).get(role), SOURCE_DEFAULT),
                ],
                sources,
            )
            if address is not None:
                contracts[role] = address

        request = WorkflowRequest(
            network=selected,
            nft_contract=nft_contract,
            recipient=recipient,
            token_id=token_id,
            fractions=fractions,
            token_uri=token_uri,
            contracts=contracts,
            signers=SignerPair(owner=owner, admin=admin),
            skip_if_already_wrapped=skip_if_already_wrapped,
            sources=sources,
        )
        logger.info(
            f"Resolved parameters for {selected.value}: "
            f"tokenId={token_id} ({sources['tokenId']}), nftContract={nft_contract}"
        )
        return request

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def _env_applies_to(self, network: Network) -> bool:
        try:
            return Network.from_name(self._settings.network.default_network) == network
        except ValueError:
            return False

    def _recorded_contracts(self, network: Network) -> Dict[str, str]:
        if self._record_store is None:
            return {}
        return self._record_store.contracts_for(network.value)

    @staticmethod
    def _override(overrides: Mapping[str, Any], name: str) -> Any:
        for key in OVERRIDE_KEYS[name]:
            if not _blank(overrides.get(key)):
                return overrides[key]
        return None

    def _workflow_setting(self, field: str) -> Optional[Any]:
        """A workflow setting, only when it was actually configured."""
        workflow = self._settings.workflow
        if field in workflow.model_fields_set:
            return getattr(workflow, field)
        return None

    # ------------------------------------------------------------------
    # Per-parameter resolution
    # ------------------------------------------------------------------

    @staticmethod
    def _address(
        name: str, candidates: List[Tuple[Any, str]], sources: Dict[str, str]
    ) -> Optional[Address]:
        value, source = _first(candidates)
        sources[name] = source
        if value is None:
            return None
        try:
            return Address(str(value))
        except ValueError:
            raise InvalidParameter(name, source, f"{value!r} is not a 20-byte hex address") from None

    def _signer(
        self,
        name: str,
        label: str,
        overrides: Mapping[str, Any],
        persisted: Any,
        sources: Dict[str, str],
    ) -> Optional[Signer]:
        secret = persisted.get_secret_value() if persisted is not None else None
        value, source = _first([(self._override(overrides, name), SOURCE_OVERRIDE), (secret, SOURCE_PERSISTED)])
        sources[name] = source
        if value is None:
            return None
        try:
            return Signer.from_private_key(label, str(value))
        except (ValueError, TypeError):
            # The key itself is never echoed back.
            raise InvalidParameter(name, source, "not a valid 32-byte private key") from None

    def _token_id(
        self, overrides: Mapping[str, Any], user_prompt: Optional[str], sources: Dict[str, str]
    ) -> Optional[int]:
        value, source = _first(
            [
                (self._override(overrides, "tokenId"), SOURCE_OVERRIDE),
                (extract_token_id(user_prompt), SOURCE_EXTRACTION),
                (self._settings.workflow.target_token_id, SOURCE_PERSISTED),
            ]
        )
        sources["tokenId"] = source if value is not None else SOURCE_DEFAULT
        if value is None:
            return None
        if isinstance(value, bool):
            raise InvalidParameter("tokenId", source, "must be a non-negative integer")
        if isinstance(value, int):
            token_id = value
        elif _DIGITS.match(str(value).strip()):
            token_id = int(str(value).strip())
        else:
            raise InvalidParameter("tokenId", source, f"{value!r} is not a non-negative integer")
        if token_id < 0 or token_id >= 2 ** 256:
            raise InvalidParameter("tokenId", source, f"{token_id} is out of range")
        return token_id

    def _fractions(self, overrides: Mapping[str, Any], sources: Dict[str, str]) -> FractionsAmount:
        value, source = _first(
            [
                (self._override(overrides, "fractionsAmount"), SOURCE_OVERRIDE),
                (self._workflow_setting("target_fractions"), SOURCE_PERSISTED),
                (DEFAULT_FRACTIONS, SOURCE_DEFAULT),
            ]
        )
        sources["fractionsAmount"] = source
        if isinstance(value, bool):
            raise InvalidParameter("fractionsAmount", source, "must be a positive decimal quantity")
        try:
            return FractionsAmount.from_display(value)
        except ValueError as exc:
            raise InvalidParameter("fractionsAmount", source, str(exc)) from None

    def _token_uri(self, overrides: Mapping[str, Any], sources: Dict[str, str]) -> str:
        value, source = _first(
            [
                (self._override(overrides, "tokenUri"), SOURCE_OVERRIDE),
                (self._workflow_setting("token_uri"), SOURCE_PERSISTED),
                (DEFAULT_TOKEN_URI, SOURCE_DEFAULT),
            ]
        )
        sources["tokenUri"] = source
        return str(value).strip()
