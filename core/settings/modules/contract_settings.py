from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator

from core.settings.base_settings import PolytradeBaseSettings


class ContractSettings(PolytradeBaseSettings):
    """
    Contract addresses from the environment.

    These apply to the default network only and are validated by the
    parameter resolver, which reports the offending variable as coming
    from the persisted layer.
    """

    nft_contract: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("ORIG_NFT_CONTRACT_ADDRESS", "NFT_CONTRACT_ADDRESS", "nft_contract"),
    )
    recipient: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("ORIG_NFT_RECIPIENT_ADDRESS", "NFT_RECIPIENT_ADDRESS", "recipient"),
    )
    base_asset: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "POLYTRADE_BASE_ASSET_CONTRACT", "POLYTRADE_BASE_ASSET_TESTNET_CONTRACT", "base_asset"
        ),
    )
    wrapped_asset: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "POLYTRADE_WRAPPED_ASSET_CONTRACT", "POLYTRADE_WRAPPED_ASSET_TESTNET_CONTRACT", "wrapped_asset"
        ),
    )
    marketplace: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "POLYTRADE_MARKETPLACE_CONTRACT", "POLYTRADE_MARKETPLACE_TESTNET_CONTRACT", "marketplace"
        ),
    )
    fee_manager: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "POLYTRADE_FEE_MANAGER_CONTRACT", "POLYTRADE_FEE_MANAGER_TESTNET_CONTRACT", "fee_manager"
        ),
    )

    @field_validator("*")
    @classmethod
    def _blank_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None
