"""
Call interfaces of the platform contracts.

Only the functions, events and errors the workflows touch are listed.
"""
from typing import Any, Dict, List, Sequence, Tuple

Param = Tuple[str, str]


def _inputs(params: Sequence[Param], indexed: Sequence[str] = ()) -> List[Dict[str, Any]]:
    items = []
    for type_, name in params:
        item: Dict[str, Any] = {"name": name, "type": type_, "internalType": type_}
        if indexed is not None:
            item["indexed"] = name in indexed
        items.append(item)
    return items


def function(
    name: str,
    inputs: Sequence[Param] = (),
    outputs: Sequence[Param] = (),
    mutability: str = "view",
) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t, "internalType": t} for t, n in inputs],
        "outputs": [{"name": n, "type": t, "internalType": t} for t, n in outputs],
        "stateMutability": mutability,
    }


def event(name: str, inputs: Sequence[Param], indexed: Sequence[str] = ()) -> Dict[str, Any]:
    return {"type": "event", "name": name, "inputs": _inputs(inputs, indexed), "anonymous": False}


def error(name: str, inputs: Sequence[Param] = ()) -> Dict[str, Any]:
    return {"type": "error", "name": name, "inputs": [{"name": n, "type": t} for t, n in inputs]}


ACCESS_CONTROL_ABI = [
    function("hasRole", [("bytes32", "role"), ("address", "account")], [("bool", "")]),
    function("grantRole", [("bytes32", "role"), ("address", "account")], mutability="nonpayable"),
    function("DEFAULT_ADMIN_ROLE", outputs=[("bytes32", "")]),
]

PLATFORM_ERRORS_ABI = [
    error("AssetAlreadyCreated"),
    error("InvalidOwner"),
    error("NotWhitelisted"),
    error("UnsupportedInterface"),
    error("StatusChanged"),
    error("AccessControlUnauthorizedAccount", [("address", "account"), ("bytes32", "neededRole")]),
    error("ERC721InsufficientApproval", [("address", "operator"), ("uint256", "tokenId")]),
    error("ERC721IncorrectOwner", [("address", "sender"), ("uint256", "tokenId"), ("address", "owner")]),
    error("ERC721NonexistentToken", [("uint256", "tokenId")]),
    error("EnforcedPause"),
]

NFT_COLLECTION_ABI = [
    function("name", outputs=[("string", "")]),
    function("symbol", outputs=[("string", "")]),
    function("owner", outputs=[("address", "")]),
    function("paused", outputs=[("bool", "")]),
    function("totalSupply", outputs=[("uint256", "")]),
    function("ownerOf", [("uint256", "tokenId")], [("address", "")]),
    function("balanceOf", [("address", "owner")], [("uint256", "")]),
    function("tokenURI", [("uint256", "tokenId")], [("string", "")]),
    function("getApproved", [("uint256", "tokenId")], [("address", "")]),
    function("isApprovedForAll", [("address", "owner"), ("address", "operator")], [("bool", "")]),
    function("approve", [("address", "to"), ("uint256", "tokenId")], mutability="nonpayable"),
    function("safeMint", [("address", "to"), ("string", "uri")], mutability="nonpayable"),
    event(
        "Transfer",
        [("address", "from"), ("address", "to"), ("uint256", "tokenId")],
        indexed=("from", "to", "tokenId"),
    ),
] + PLATFORM_ERRORS_ABI

BASE_ASSET_ABI = ACCESS_CONTROL_ABI + [
    function("ASSET_MANAGER", outputs=[("bytes32", "")]),
    function("setBaseURI", [("uint256", "mainId"), ("string", "newBaseURI")], mutability="nonpayable"),
    function("tokenURI", [("uint256", "mainId"), ("uint256", "subId")], [("string", "")]),
    function(
        "balanceOf",
        [("address", "account"), ("uint256", "mainId"), ("uint256", "subId")],
        [("uint256", "")],
    ),
    function("totalSupply", [("uint256", "mainId"), ("uint256", "subId")], [("uint256", "")]),
] + PLATFORM_ERRORS_ABI

WRAPPED_ASSET_ABI = ACCESS_CONTROL_ABI + [
    function("whitelist", [("address", "contractAddress"), ("bool", "status")], mutability="nonpayable"),
    function(
        "wrapERC721",
        [("address", "contractAddress"), ("uint256", "tokenId"), ("uint256", "fractions")],
        [("uint256", "")],
        mutability="nonpayable",
    ),
    event(
        "ERC721Wrapped",
        [
            ("address", "owner"),
            ("address", "contractAddress"),
            ("uint256", "tokenId"),
            ("uint256", "mainId"),
            ("uint256", "nonce"),
        ],
        indexed=("owner", "contractAddress", "tokenId"),
    ),
] + PLATFORM_ERRORS_ABI

MARKETPLACE_ABI = [
    function(
        "createListing",
        [("uint256", "mainId"), ("uint256", "subId"), ("uint256", "amount"), ("uint256", "price")],
        mutability="nonpayable",
    ),
    function("cancelListing", [("uint256", "listingId")], mutability="nonpayable"),
] + PLATFORM_ERRORS_ABI

FEE_MANAGER_ABI: List[Dict[str, Any]] = list(PLATFORM_ERRORS_ABI)
