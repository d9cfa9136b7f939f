from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from core.settings.base_settings import PolytradeBaseSettings


class NetworkSettings(PolytradeBaseSettings):
    """
    Chain endpoints.

    RPC_URL / XDC_RPC_URL are legacy names and only override the test
    network endpoint.
    """

    default_network: str = Field(
        "testnet", validation_alias=AliasChoices("POLYTRADE_NETWORK", "default_network")
    )
    testnet_rpc_url: str = Field(
        "https://rpc.apothem.network",
        validation_alias=AliasChoices("TESTNET_RPC_URL", "RPC_URL", "XDC_RPC_URL", "testnet_rpc_url"),
    )
    mainnet_rpc_url: str = Field(
        "https://rpc.xinfin.network",
        validation_alias=AliasChoices("MAINNET_RPC_URL", "mainnet_rpc_url"),
    )
    request_timeout_seconds: float = Field(
        30.0, validation_alias=AliasChoices("RPC_TIMEOUT_SECONDS", "request_timeout_seconds")
    )

    @field_validator("default_network")
    @classmethod
    def _normalise_network(cls, v: str) -> str:
        return v.strip().lower()
