"""Derived identifiers for wrapped assets."""

from eth_abi import encode as abi_encode
from eth_utils import keccak, to_checksum_address


def compute_main_id(nft_contract: str, token_id: int) -> int:
    """Compute the mainId a wrapped NFT is expected to live under.

    ``mainId = keccak256(abi.encode(address, uint256))``. The value is a
    prediction only: the ``ERC721Wrapped`` event emitted by the wrapper is
    authoritative.

    Args:
        nft_contract: NFT collection address (any case, 0x-prefixed)
        token_id: Token id inside the collection

    Returns:
        The 256-bit identifier as an integer
    """
    if token_id < 0:
        raise ValueError(f"token_id must be non-negative, got {token_id}")
    encoded = abi_encode(["address", "uint256"], [to_checksum_address(nft_contract), token_id])
    return int.from_bytes(keccak(encoded), "big")


def main_id_hex(main_id: int) -> str:
    """Render a mainId as a 0x-prefixed 32-byte hex string."""
    return "0x" + main_id.to_bytes(32, "big").hex()
