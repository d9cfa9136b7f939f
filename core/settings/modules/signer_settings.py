from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, SecretStr

from core.settings.base_settings import PolytradeBaseSettings


class SignerSettings(PolytradeBaseSettings):
    """
    Private keys for the two acting roles.

    The NFT owner signs mint, approve and wrap; the admin signs whitelist,
    role grants and base URI updates. Both may be the same key.
    """

    owner_private_key: Optional[SecretStr] = Field(
        None, validation_alias=AliasChoices("ORIG_NFT_OWNER_PRIVATE_KEY", "owner_private_key")
    )
    admin_private_key: Optional[SecretStr] = Field(
        None,
        validation_alias=AliasChoices(
            "POLYTRADE_ADMIN_PRIVATE_KEY", "POLYTRADE_ADMIN_TESTNET_PRIVATE_KEY", "admin_private_key"
        ),
    )
