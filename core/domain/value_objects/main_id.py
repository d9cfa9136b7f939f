"""Main id value object."""
from dataclasses import dataclass

from polytrade_sdk.identifiers import compute_main_id, main_id_hex

from .value_objects import Address


@dataclass(frozen=True)
class MainId:
    """
    Identifier of a wrapped asset inside the dual-id contract.

    Derived as keccak256(abi.encode(nftContract, tokenId)) and read back
    from the ERC721Wrapped event after wrapping. Rendered in decimal.
    """

    value: int

    def __post_init__(self):
        if self.value < 0 or self.value >= 2 ** 256:
            raise ValueError(f"Main id out of uint256 range: {self.value}")

    @classmethod
    def predict(cls, nft_contract: Address, token_id: int) -> "MainId":
        """Derive the main id the wrapper will assign to a token."""
        return cls(compute_main_id(str(nft_contract), token_id))

    @property
    def hex(self) -> str:
        return main_id_hex(self.value)

    def __str__(self) -> str:
        return str(self.value)
