"""Tests for ParameterResolver and network selection."""

import pytest

from core.application.services import detect_network_from_text, extract_token_id, select_network
from core.application.services.parameter_resolver import ParameterResolver
from core.domain.enums import ContractRole, Network
from core.domain.errors import InvalidParameter
from core.domain.value_objects import Address
from core.infrastructure.chain import DEFAULT_CONTRACTS
from core.infrastructure.persistence import DeploymentRecordStore
from core.settings.modules import ContractSettings, SignerSettings
from tests.conftest import ADMIN, NFT_ADDRESS, OWNER, OWNER_KEY, build_settings, signer_overrides

MAINNET_BASE = "0x" + "cd" * 20


# =============================================================================
# Network selection
# =============================================================================


@pytest.mark.parametrize(
    "text, expected",
    [
        ("wrap token 5 on mainnet", Network.MAINNET),
        ("deploy to production", Network.MAINNET),
        ("wrap token 5 on apothem", Network.TESTNET),
        ("try it on testnet before mainnet", Network.TESTNET),
        ("wrap token 5", Network.TESTNET),
        ("domain name lookup", Network.TESTNET),
    ],
)
def test_detect_network_from_text(text, expected):
    assert detect_network_from_text(text) == expected


def test_explicit_network_wins_over_intent():
    assert select_network("mainnet", "use the testnet", "testnet") == (Network.MAINNET, "override")


def test_explicit_alias_is_accepted():
    assert select_network("xinfin", None) == (Network.MAINNET, "override")


def test_unknown_network_is_invalid():
    with pytest.raises(InvalidParameter) as exc_info:
        select_network("ropsten", None)
    assert exc_info.value.field == "network"


def test_configured_default_used_without_intent():
    assert select_network(None, "   ", "mainnet") == (Network.MAINNET, "persisted")
    assert select_network(None, None, None) == (Network.TESTNET, "default")


# =============================================================================
# Token id extraction
# =============================================================================


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Wrap token id: 17 please", 17),
        ("fractionalize NFT #8", 8),
        ("wrap 12", 12),
        ("asset 3 into 1000 fractions", 3),
        ("use 900 and 44", 44),
        ("nothing numeric here", None),
        ("", None),
    ],
)
def test_extract_token_id(text, expected):
    assert extract_token_id(text) == expected


# =============================================================================
# Resolution layers
# =============================================================================


def test_defaults_fill_platform_contracts(resolver):
    request = resolver.resolve(overrides=signer_overrides())

    assert request.network == Network.TESTNET
    assert str(request.contracts[ContractRole.WRAPPED_ASSET]).lower() == (
        DEFAULT_CONTRACTS[Network.TESTNET][ContractRole.WRAPPED_ASSET].lower()
    )
    assert request.sources["baseAsset"] == "default"
    assert request.fractions.base_units == 100000 * 10 ** 18
    assert request.token_uri == "https://CANFT4.com"
    assert request.token_id is None
    assert request.sources["tokenId"] == "default"


def test_signers_and_recipient_default(resolver):
    request = resolver.resolve(overrides=signer_overrides())

    assert str(request.signers.owner.address) == OWNER
    assert str(request.signers.admin.address) == ADMIN
    assert str(request.recipient) == OWNER
    assert request.sources["recipientAddress"] == "default"
    assert not request.signers.same_key


def test_override_beats_extraction(resolver):
    request = resolver.resolve(overrides=signer_overrides(TARGET_TOKEN_ID="9"), user_prompt="wrap token 4")

    assert request.token_id == 9
    assert request.sources["tokenId"] == "override"


def test_extraction_used_without_override(resolver):
    request = resolver.resolve(overrides=signer_overrides(), user_prompt="wrap token 4")

    assert request.token_id == 4
    assert request.sources["tokenId"] == "extraction"


def test_camel_case_override_keys(resolver):
    request = resolver.resolve(
        overrides={"nftContract": "xdc" + "ab" * 20, "ownerPrivateKey": OWNER_KEY[2:], "tokenId": 3}
    )

    assert request.nft_contract == Address(NFT_ADDRESS)
    assert str(request.signers.owner.address) == OWNER
    assert request.token_id == 3


def test_contract_override_by_role(resolver):
    request = resolver.resolve(overrides=signer_overrides(), contract_overrides={"baseAsset": MAINNET_BASE})

    assert request.contracts[ContractRole.BASE_ASSET] == Address(MAINNET_BASE)
    assert request.sources["baseAsset"] == "override"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"ORIG_NFT_CONTRACT_ADDRESS": "0x1234"}, "nftContract"),
        ({"ORIG_NFT_OWNER_PRIVATE_KEY": "not-a-key"}, "ownerPrivateKey"),
        ({"TARGET_TOKEN_ID": "-1"}, "tokenId"),
        ({"TARGET_TOKEN_ID": "abc"}, "tokenId"),
        ({"TARGET_FRACTIONS": "0"}, "fractionsAmount"),
        ({"TARGET_FRACTIONS": "1.0000000000000000001"}, "fractionsAmount"),
        ({"TARGET_FRACTIONS": "1e80"}, "fractionsAmount"),
    ],
)
def test_invalid_values_are_rejected(resolver, overrides, field):
    with pytest.raises(InvalidParameter) as exc_info:
        resolver.resolve(overrides=overrides)
    assert exc_info.value.field == field


def test_long_fractions_reach_the_request_exactly(resolver):
    request = resolver.resolve(overrides=signer_overrides(TARGET_FRACTIONS="12345678901.123456789012345679"))

    assert request.fractions.base_units == 12345678901123456789012345679
    assert request.sources["fractionsAmount"] == "override"


def test_private_key_is_not_echoed(resolver):
    with pytest.raises(InvalidParameter) as exc_info:
        resolver.resolve(overrides={"ORIG_NFT_OWNER_PRIVATE_KEY": "0xdeadbeef"})
    assert "deadbeef" not in str(exc_info.value)


def test_mainnet_has_no_default_contracts(resolver):
    request = resolver.resolve(overrides=signer_overrides(), network="mainnet")

    assert ContractRole.BASE_ASSET not in request.contracts
    with pytest.raises(InvalidParameter):
        request.require_contracts(ContractRole.BASE_ASSET)


def test_env_contracts_only_apply_to_default_network(tmp_path):
    settings = build_settings(tmp_path)
    settings.contracts = ContractSettings(
        nft_contract=NFT_ADDRESS, recipient=None, base_asset=MAINNET_BASE,
        wrapped_asset=None, marketplace=None, fee_manager=None,
    )
    resolver = ParameterResolver(settings, DEFAULT_CONTRACTS)

    testnet = resolver.resolve()
    mainnet = resolver.resolve(network="mainnet")

    assert testnet.nft_contract == Address(NFT_ADDRESS)
    assert testnet.contracts[ContractRole.BASE_ASSET] == Address(MAINNET_BASE)
    assert testnet.sources["baseAsset"] == "persisted"
    assert mainnet.nft_contract is None
    assert ContractRole.BASE_ASSET not in mainnet.contracts


def test_persisted_signer_keys(tmp_path):
    settings = build_settings(tmp_path)
    settings.signers = SignerSettings(owner_private_key=OWNER_KEY, admin_private_key=OWNER_KEY)
    request = ParameterResolver(settings, DEFAULT_CONTRACTS).resolve()

    assert request.sources["ownerPrivateKey"] == "persisted"
    assert request.signers.same_key


def test_deployment_record_supplies_mainnet_contracts(tmp_path):
    store = DeploymentRecordStore(tmp_path / "deployments.json")
    store.record_run("mainnet", {"baseAsset": MAINNET_BASE, "nftCollection": NFT_ADDRESS}, {"operation": "mint"})
    resolver = ParameterResolver(build_settings(tmp_path), DEFAULT_CONTRACTS, store)

    request = resolver.resolve(network="mainnet")

    assert request.contracts[ContractRole.BASE_ASSET] == Address(MAINNET_BASE)
    assert request.nft_contract == Address(NFT_ADDRESS)
    assert request.sources["nftContract"] == "persisted"


def test_describe_never_contains_keys(resolver):
    described = resolver.resolve(overrides=signer_overrides()).describe()

    assert described["ownerAddress"] == OWNER
    assert OWNER_KEY not in str(described)
