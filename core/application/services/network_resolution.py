"""Network selection from an explicit name or free-text intent."""

import re
from typing import Optional, Tuple

from core.domain.enums import Network
from core.domain.errors import InvalidParameter

MAINNET_KEYWORDS = ("mainnet", "production", "prod", "live", "main")
TESTNET_KEYWORDS = ("testnet", "apothem", "test", "testing", "development", "dev", "staging")

SAFE_DEFAULT_NETWORK = Network.TESTNET


def _mentions(text: str, keywords: Tuple[str, ...]) -> bool:
    return any(re.search(rf"\b{re.escape(word)}\b", text) for word in keywords)


def detect_network_from_text(text: str) -> Network:
    """
    Infer the network from a free-text intent.

    Only an unambiguous mainnet mention selects mainnet. Text mentioning
    both networks, or neither, resolves to the test network.
    """
    lowered = text.lower()
    wants_main = _mentions(lowered, MAINNET_KEYWORDS)
    wants_test = _mentions(lowered, TESTNET_KEYWORDS)
    if wants_main and not wants_test:
        return Network.MAINNET
    return SAFE_DEFAULT_NETWORK


def select_network(
    explicit: Optional[str],
    intent: Optional[str],
    configured_default: Optional[str] = None,
) -> Tuple[Network, str]:
    """
    Pick the network for a run.

    Args:
        explicit: Network name given by the caller
        intent: Free-text user prompt
        configured_default: Default network from settings

    Returns:
        Tuple of (network, source)

    Raises:
        InvalidParameter: If an explicit or configured name is unknown
    """
    if explicit:
        try:
            return Network.from_name(explicit), "override"
        except ValueError:
            raise InvalidParameter("network", "override", f"unknown network {explicit!r}") from None

    if intent and intent.strip():
        return detect_network_from_text(intent), "extraction"

    if configured_default:
        try:
            return Network.from_name(configured_default), "persisted"
        except ValueError:
            raise InvalidParameter(
                "network", "persisted", f"unknown network {configured_default!r}"
            ) from None

    return SAFE_DEFAULT_NETWORK, "default"
