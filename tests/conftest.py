"""Shared fixtures: settings, signers and an in-memory chain."""

import pytest
from eth_account import Account

from core.application.services.parameter_resolver import ParameterResolver
from core.application.services.tool_service import PlatformToolService
from core.infrastructure.chain import DEFAULT_CONTRACTS, ChainGateway, ContractRegistry
from core.infrastructure.persistence import DeploymentRecordStore
from core.settings.modules import (
    AppSettings,
    ContractSettings,
    NetworkSettings,
    SignerSettings,
    WorkflowSettings,
)
from orchestration.asset_workflows import AssetWorkflowRunner
from orchestration.bus import InMemoryEventBus
from tests.mocks.fake_chain import FakeChain

OWNER_KEY = "0x" + "11" * 32
ADMIN_KEY = "0x" + "22" * 32
STRANGER_KEY = "0x" + "33" * 32

OWNER = Account.from_key(OWNER_KEY).address
ADMIN = Account.from_key(ADMIN_KEY).address
STRANGER = Account.from_key(STRANGER_KEY).address

NFT_ADDRESS = "0x" + "ab" * 20


def build_settings(tmp_path, **workflow) -> AppSettings:
    return AppSettings(
        network=NetworkSettings(default_network="testnet", testnet_rpc_url="http://fake-rpc"),
        contracts=ContractSettings(
            nft_contract=None, recipient=None, base_asset=None,
            wrapped_asset=None, marketplace=None, fee_manager=None,
        ),
        workflow=WorkflowSettings(
            deployment_record_path=str(tmp_path / "deployments.json"),
            receipt_timeout_seconds=5,
            **workflow,
        ),
        signers=SignerSettings(owner_private_key=None, admin_private_key=None),
    )


def signer_overrides(**extra) -> dict:
    overrides = {
        "ORIG_NFT_CONTRACT_ADDRESS": NFT_ADDRESS,
        "ORIG_NFT_OWNER_PRIVATE_KEY": OWNER_KEY,
        "POLYTRADE_ADMIN_TESTNET_PRIVATE_KEY": ADMIN_KEY,
    }
    overrides.update(extra)
    return overrides


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    return build_settings(tmp_path)


@pytest.fixture
def chain() -> FakeChain:
    """Collection owned by OWNER, platform administered by ADMIN."""
    fake = FakeChain(nft_address=NFT_ADDRESS, collection_owner=OWNER)
    fake.make_admin(ADMIN)
    return fake


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def resolver(app_settings) -> ParameterResolver:
    return ParameterResolver(app_settings, DEFAULT_CONTRACTS)


@pytest.fixture
def make_runner(chain, app_settings, resolver, event_bus):
    """Build a runner for a parameter bag against the fake chain."""

    def _make(overrides=None, provider=None, **resolve_kwargs) -> AssetWorkflowRunner:
        request = resolver.resolve(overrides=overrides or signer_overrides(), **resolve_kwargs)
        return AssetWorkflowRunner(
            connection=chain,
            contracts=ContractRegistry().build(request),
            request=request,
            settings=app_settings.workflow,
            event_bus=event_bus,
            provider=provider,
        )

    return _make


@pytest.fixture
def record_store(tmp_path) -> DeploymentRecordStore:
    return DeploymentRecordStore(tmp_path / "deployments.json")


@pytest.fixture
def tool_service(app_settings, chain, record_store, event_bus) -> PlatformToolService:
    gateway = ChainGateway(app_settings.network, connection_factory=lambda profile: chain)
    return PlatformToolService(
        settings=app_settings,
        gateway=gateway,
        registry=ContractRegistry(),
        record_store=record_store,
        event_bus=event_bus,
    )
