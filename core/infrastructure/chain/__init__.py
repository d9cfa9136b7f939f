"""Chain infrastructure - web3 gateway, contract registry, revert decoding."""

from .gateway import ChainGateway, Web3ChainConnection
from .networks import DEFAULT_CONTRACTS, build_network_profiles, describe_networks
from .registry import ContractRegistry
from .revert import DecodedRevert, RevertDecoder

__all__ = [
    "ChainGateway",
    "ContractRegistry",
    "DEFAULT_CONTRACTS",
    "DecodedRevert",
    "RevertDecoder",
    "Web3ChainConnection",
    "build_network_profiles",
    "describe_networks",
]
