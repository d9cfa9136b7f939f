"""Application DTOs for the tool operations.

Field aliases follow the camelCase parameter bags callers already send
(``envOverrides``, ``skipIfAlreadyWrapped`` ...); snake_case names are
accepted as well.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ContractOverrides(BaseModel):
    """Platform contract addresses supplied by the caller."""

    base_asset: Optional[str] = Field(None, alias="baseAsset")
    wrapped_asset: Optional[str] = Field(None, alias="wrappedAsset")
    marketplace: Optional[str] = Field(None, alias="marketplace")
    fee_manager: Optional[str] = Field(None, alias="feeManager")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def by_role(self) -> Dict[str, str]:
        """Non-empty addresses keyed by contract role name."""
        return {
            role: value
            for role, value in self.model_dump(by_alias=True).items()
            if value not in (None, "")
        }


class ToolRequest(BaseModel):
    """Parameter bag shared by the mint, wrap and verify operations."""

    env_overrides: Dict[str, Any] = Field(
        default_factory=dict,
        alias="envOverrides",
        description="Parameter overrides keyed by environment variable name",
    )
    contracts: ContractOverrides = Field(default_factory=ContractOverrides)
    network: Optional[str] = Field(None, description="testnet, mainnet, apothem or xinfin")
    user_prompt: Optional[str] = Field(
        None, alias="userPrompt", description="Free text used to infer network and token id"
    )
    skip_if_already_wrapped: bool = Field(True, alias="skipIfAlreadyWrapped")
    preparation_mode: Optional[str] = Field(
        None, alias="preparationMode", description="'mint' when minting ahead of a wrap"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MetadataMappingDTO(BaseModel):
    """One mainId to base URI assignment."""

    main_id: Union[int, str] = Field(..., alias="mainId")
    base_uri: str = Field(..., alias="baseURI", min_length=1)
    description: str = ""
    category: str = ""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MetadataConfig(BaseModel):
    """Metadata targets for the enrichment operation."""

    main_id: Optional[Union[int, str]] = Field(None, alias="mainId")
    base_uri: Optional[str] = Field(None, alias="baseURI")
    batch_mappings: List[MetadataMappingDTO] = Field(default_factory=list, alias="batchMappings")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MetadataToolRequest(ToolRequest):
    """Parameter bag of the metadata enrichment operation."""

    enrichment_strategy: Literal["single", "batch", "provider"] = Field("single", alias="enrichmentStrategy")
    metadata_config: MetadataConfig = Field(default_factory=MetadataConfig, alias="metadataConfig")
    admin_private_key: Optional[str] = Field(None, alias="adminPrivateKey", repr=False)


class VerificationTargetDTO(BaseModel):
    """One collection and token to verify."""

    nft_contract: str = Field(..., alias="nftContract")
    token_id: int = Field(..., alias="tokenId", ge=0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class BatchVerifyRequest(ToolRequest):
    """Several verifications sharing one network and contract set."""

    targets: List[VerificationTargetDTO] = Field(..., min_length=1)


class MainIdRequest(BaseModel):
    """Inputs of the main id calculation."""

    nft_contract: str = Field(..., alias="nftContract")
    token_id: int = Field(..., alias="tokenId", ge=0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)
