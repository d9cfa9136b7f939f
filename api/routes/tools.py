"""
Tool endpoints.

Each endpoint runs one platform operation and answers HTTP 200 with the
workflow report; the report's ``success`` field carries the outcome.
Malformed bodies are rejected by FastAPI with 422.
"""
from fastapi import APIRouter, Depends, status
import logging

from api.dependencies import get_tool_service
from core.application.dtos.tool_dto import (
    BatchVerifyRequest,
    MainIdRequest,
    MetadataToolRequest,
    ToolRequest,
)


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# WORKFLOWS
# =============================================================================

@router.post(
    "/mint",
    status_code=status.HTTP_200_OK,
    summary="Mint a source NFT",
)
async def mint_asset(params: ToolRequest, service=Depends(get_tool_service)):
    """
    Mint a new token on the NFT collection.

    With `preparationMode: "mint"` the report lists the follow-up wrap.
    """
    report = await service.mint_asset(params)
    return report.to_dict()


@router.post(
    "/orchestrate-wrap",
    status_code=status.HTTP_200_OK,
    summary="Mint (if needed), whitelist, grant role, approve and wrap",
)
async def orchestrate_wrap(params: ToolRequest, service=Depends(get_tool_service)):
    """
    Full wrap workflow.

    Steps whose effect is already on chain are reported as `skipped`, so
    a failed run can simply be repeated.
    """
    report = await service.orchestrate_wrap(params)
    logger.info(f"orchestrate_wrap {report.execution_id}: success={report.success}")
    return report.to_dict()


@router.post(
    "/metadata",
    status_code=status.HTTP_200_OK,
    summary="Set base URIs for wrapped assets",
)
async def enrich_metadata(params: MetadataToolRequest, service=Depends(get_tool_service)):
    report = await service.enrich_metadata(params)
    return report.to_dict()


# =============================================================================
# VERIFICATION
# =============================================================================

@router.post(
    "/verify",
    status_code=status.HTTP_200_OK,
    summary="Verify one asset",
)
async def verify_asset(params: ToolRequest, service=Depends(get_tool_service)):
    report = await service.verify_asset(params)
    return report.to_dict()


@router.post(
    "/verify-batch",
    status_code=status.HTTP_200_OK,
    summary="Verify several assets concurrently",
)
async def verify_batch(params: BatchVerifyRequest, service=Depends(get_tool_service)):
    report = await service.verify_batch(params)
    return report.to_dict()


# =============================================================================
# HELPERS
# =============================================================================

@router.post(
    "/main-id",
    status_code=status.HTTP_200_OK,
    summary="Predict the main id of a token",
)
async def calculate_main_id(params: MainIdRequest, service=Depends(get_tool_service)):
    return service.calculate_main_id(params.nft_contract, params.token_id).to_dict()


@router.get(
    "/networks",
    status_code=status.HTTP_200_OK,
    summary="Supported networks and default contracts",
)
async def list_networks(service=Depends(get_tool_service)):
    return {"networks": service.describe_networks()}
