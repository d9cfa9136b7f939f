from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator

from core.settings.base_settings import PolytradeBaseSettings


class WorkflowSettings(PolytradeBaseSettings):
    """
    Workflow defaults and transaction tuning.
    """

    target_token_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("TARGET_TOKEN_ID", "target_token_id")
    )
    target_fractions: str = Field(
        "100000", validation_alias=AliasChoices("TARGET_FRACTIONS", "target_fractions")
    )
    token_uri: str = Field(
        "https://CANFT4.com", validation_alias=AliasChoices("ORIG_NFT_TOKEN_URI", "token_uri")
    )

    # Gas
    gas_limit: int = Field(8_000_000, validation_alias=AliasChoices("GAS_LIMIT", "gas_limit"))
    gas_price_wei: Optional[int] = Field(
        None, validation_alias=AliasChoices("GAS_PRICE", "gas_price_wei")
    )
    gas_safety_margin: float = Field(
        0.2, validation_alias=AliasChoices("GAS_SAFETY_MARGIN", "gas_safety_margin")
    )
    receipt_timeout_seconds: float = Field(
        120.0, validation_alias=AliasChoices("RECEIPT_TIMEOUT_SECONDS", "receipt_timeout_seconds")
    )

    # Persistence / enrichment
    deployment_record_path: str = Field(
        "deployments/deployments.json",
        validation_alias=AliasChoices("DEPLOYMENT_RECORD_PATH", "deployment_record_path"),
    )
    metadata_base_uri: Optional[str] = Field(
        None, validation_alias=AliasChoices("METADATA_BASE_URI", "metadata_base_uri")
    )
    metadata_service_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("METADATA_SERVICE_URL", "metadata_service_url")
    )

    @field_validator("gas_safety_margin")
    @classmethod
    def _margin_floor(cls, v: float) -> float:
        if v < 0.2:
            raise ValueError("gas_safety_margin must be at least 0.2")
        return v

    @field_validator("target_token_id", "metadata_base_uri", "metadata_service_url", mode="before")
    @classmethod
    def _blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
