"""Logical contract roles on the platform."""
from enum import Enum


class ContractRole(str, Enum):
    """Which part of the platform a contract address plays."""

    NFT_COLLECTION = "nftCollection"
    BASE_ASSET = "baseAsset"
    WRAPPED_ASSET = "wrappedAsset"
    MARKETPLACE = "marketplace"
    FEE_MANAGER = "feeManager"
