"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter, Depends
import platform

from api.dependencies import get_chain_gateway
from core.domain.enums import Network
from core.domain.errors import WorkflowError
from polytrade_sdk.utils.datetime import isoformat_z, utc_now


router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns process health only; the chain is not contacted.
    """
    return {
        "status": "healthy",
        "timestamp": isoformat_z(utc_now()),
        "service": "polytrade-ops",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(gateway=Depends(get_chain_gateway)):
    """
    Readiness check endpoint.

    Connects to each configured network and reports whether the node
    answers with the expected chain id.
    """
    checks = {"api": "ok"}
    for network in Network:
        try:
            await gateway.connect(network)
            checks[network.value] = "ok"
        except WorkflowError as exc:
            checks[network.value] = f"unavailable: {exc.message}"

    ready = checks.get(Network.TESTNET.value) == "ok" or checks.get(Network.MAINNET.value) == "ok"
    return {
        "status": "ready" if ready else "degraded",
        "timestamp": isoformat_z(utc_now()),
        "checks": checks,
    }
