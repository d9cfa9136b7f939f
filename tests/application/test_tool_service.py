"""Tests for PlatformToolService - the operation surface."""

import pytest

from core.application.dtos.tool_dto import (
    BatchVerifyRequest,
    MetadataToolRequest,
    ToolRequest,
)
from core.application.services.tool_service import PlatformToolService
from core.domain.enums import StepStatus
from core.infrastructure.chain import ChainGateway, ContractRegistry
from polytrade_sdk.identifiers import compute_main_id
from tests.conftest import ADMIN_KEY, NFT_ADDRESS, OWNER, signer_overrides


def _request(**overrides) -> ToolRequest:
    return ToolRequest(envOverrides=signer_overrides(**overrides))


@pytest.mark.asyncio
async def test_orchestrate_wrap_records_the_run(tool_service, chain, record_store):
    chain.give_token(5, OWNER)

    report = await tool_service.orchestrate_wrap(_request(TARGET_TOKEN_ID=5))

    assert report.success is True
    assert report.next_steps[0].startswith("Confirm balances")
    assert any("marketplace" in hint for hint in report.next_steps)

    record = record_store.load()["testnet"]
    run = record["runs"][-1]
    assert run["operation"] == "orchestrate_wrap"
    assert run["success"] is True
    assert run["tokenId"] == 5
    assert run["mainId"] == str(compute_main_id(NFT_ADDRESS, 5))
    assert set(run["transactions"]) == {"whitelist", "grant_role", "approve", "wrap"}
    assert record["contracts"]["nftCollection"].lower() == NFT_ADDRESS


@pytest.mark.asyncio
async def test_failed_wrap_suggests_rerun(tool_service, chain):
    chain.give_token(5, OWNER)
    chain.timeout_on.add("wrapERC721")

    report = await tool_service.orchestrate_wrap(_request(TARGET_TOKEN_ID=5))

    assert report.success is False
    assert "run orchestrate_wrap again" in report.next_steps[0]


@pytest.mark.asyncio
async def test_mint_preparation_mode_points_to_wrap(tool_service, chain):
    chain.next_token_id = 12

    report = await tool_service.mint_asset(
        ToolRequest(envOverrides=signer_overrides(), preparationMode="mint")
    )

    assert report.success is True
    assert "TARGET_TOKEN_ID=12" in report.next_steps[0]


@pytest.mark.asyncio
async def test_invalid_parameter_is_reported_not_raised(tool_service, chain):
    report = await tool_service.orchestrate_wrap(_request(TARGET_TOKEN_ID="twelve"))

    assert report.success is False
    assert report.steps[0].name == "resolve_parameters"
    assert report.to_dict()["error"]["details"]["field"] == "tokenId"
    assert chain.view_calls == 0


@pytest.mark.asyncio
async def test_chain_id_mismatch_fails_connect(app_settings, chain, record_store):
    chain.reported_chain_id = 50
    gateway = ChainGateway(app_settings.network, connection_factory=lambda profile: chain)
    service = PlatformToolService(app_settings, gateway, ContractRegistry(), record_store)

    report = await service.verify_asset(_request(TARGET_TOKEN_ID=1))

    assert report.steps[0].name == "connect"
    assert report.steps[0].error.code == "ChainUnavailable"


@pytest.mark.asyncio
async def test_verify_asset_hints(tool_service, chain):
    chain.give_token(5, OWNER)

    report = await tool_service.verify_asset(_request(TARGET_TOKEN_ID=5))

    assert report.data["assetStatus"] == "needs_setup"
    assert "orchestrate_wrap" in report.next_steps[0]


@pytest.mark.asyncio
async def test_verify_is_not_recorded(tool_service, chain, record_store):
    chain.give_token(5, OWNER)

    await tool_service.verify_asset(_request(TARGET_TOKEN_ID=5))

    assert record_store.load() == {}


@pytest.mark.asyncio
async def test_verify_batch_reports_each_target(tool_service, chain):
    chain.give_token(1, OWNER)
    chain.give_token(2, chain.wrapped_address)

    report = await tool_service.verify_batch(
        BatchVerifyRequest(
            envOverrides=signer_overrides(),
            targets=[
                {"nftContract": NFT_ADDRESS, "tokenId": 1},
                {"nftContract": NFT_ADDRESS, "tokenId": 2},
                {"nftContract": NFT_ADDRESS, "tokenId": 3},
            ],
        )
    )

    assert [s.status for s in report.steps] == [StepStatus.SUCCEEDED, StepStatus.SUCCEEDED, StepStatus.FAILED]
    assert report.steps[0].detail == "needs_setup"
    assert report.steps[1].detail == "wrapped"
    assert report.data["verifiedCount"] == 2
    assert len(report.data["results"]) == 3
    assert report.success is False


@pytest.mark.asyncio
async def test_enrich_metadata_single_mapping(tool_service, chain):
    main_id = compute_main_id(NFT_ADDRESS, 5)

    report = await tool_service.enrich_metadata(
        MetadataToolRequest(
            envOverrides={},
            adminPrivateKey=ADMIN_KEY,
            enrichmentStrategy="single",
            metadataConfig={"mainId": hex(main_id), "baseURI": "https://meta.example.com/5/"},
        )
    )

    assert report.success is True, report.to_dict()
    assert chain.base_uris[main_id] == "https://meta.example.com/5/"


@pytest.mark.asyncio
async def test_enrich_metadata_rejects_bad_main_id(tool_service, chain):
    report = await tool_service.enrich_metadata(
        MetadataToolRequest(
            adminPrivateKey=ADMIN_KEY,
            enrichmentStrategy="batch",
            metadataConfig={"batchMappings": [{"mainId": "not-a-number", "baseURI": "https://x/"}]},
        )
    )

    assert report.steps[0].name == "resolve_parameters"
    assert report.steps[0].error.details["field"] == "mainId"
    assert chain.sent == []


def test_calculate_main_id(tool_service):
    report = tool_service.calculate_main_id("xdc" + NFT_ADDRESS[2:], 5)

    assert report.success is True
    assert report.data["mainId"] == compute_main_id(NFT_ADDRESS, 5)
    assert report.data["mainIdHex"].startswith("0x")
    assert len(report.data["mainIdHex"]) == 66


def test_calculate_main_id_rejects_bad_input(tool_service):
    assert tool_service.calculate_main_id("0x1234", 5).steps[0].error.details["field"] == "nftContract"
    assert tool_service.calculate_main_id(NFT_ADDRESS, -1).steps[0].error.details["field"] == "tokenId"


def test_describe_networks(tool_service):
    networks = {n["network"]: n for n in tool_service.describe_networks()}

    assert networks["testnet"]["chainId"] == 51
    assert networks["mainnet"]["chainId"] == 50
    assert networks["testnet"]["defaultContracts"]["baseAsset"]
    assert networks["mainnet"]["defaultContracts"] == {}
