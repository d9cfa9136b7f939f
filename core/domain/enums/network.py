"""Supported networks."""
from enum import Enum


class Network(str, Enum):
    """Network names understood by the chain gateway."""

    TESTNET = "testnet"
    MAINNET = "mainnet"

    @classmethod
    def from_name(cls, name: str) -> "Network":
        """Parse an explicit network name, accepting chain-specific aliases."""
        key = name.strip().lower()
        aliases = {"apothem": cls.TESTNET, "xinfin": cls.MAINNET}
        if key in aliases:
            return aliases[key]
        return cls(key)
