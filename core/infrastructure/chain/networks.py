"""Supported networks and the published testnet deployment."""
from typing import Dict, List

from core.application.dtos.chain_dto import NetworkProfile
from core.domain.enums import ContractRole, Network
from core.settings.modules.network_settings import NetworkSettings

DEFAULT_CONTRACTS: Dict[Network, Dict[ContractRole, str]] = {
    Network.TESTNET: {
        ContractRole.BASE_ASSET: "0x8A3a86d55b3F57b4Be9ce0113e09d0B9f7b12771",
        ContractRole.WRAPPED_ASSET: "0x92F5a2bD28CCB184af7874e1707ABc7a7df45075",
        ContractRole.MARKETPLACE: "0x0d1Aa18eFa38eE8c3d32A84b9D452EAf4E3D571d",
        ContractRole.FEE_MANAGER: "0x31dDa0071Da559E4189C6Beb11eca942cB0350BE",
    },
    # No published mainnet deployment: mainnet runs must supply addresses.
    Network.MAINNET: {},
}


def build_network_profiles(settings: NetworkSettings) -> Dict[Network, NetworkProfile]:
    return {
        Network.TESTNET: NetworkProfile(
            network=Network.TESTNET,
            display_name="XDC Apothem Testnet",
            chain_id=51,
            rpc_url=settings.testnet_rpc_url,
            explorer_url="https://explorer.apothem.network",
        ),
        Network.MAINNET: NetworkProfile(
            network=Network.MAINNET,
            display_name="XDC Network",
            chain_id=50,
            rpc_url=settings.mainnet_rpc_url,
            explorer_url="https://explorer.xinfin.network",
        ),
    }


def describe_networks(profiles: Dict[Network, NetworkProfile]) -> List[Dict[str, object]]:
    return [
        {
            "network": profile.network.value,
            "name": profile.display_name,
            "chainId": profile.chain_id,
            "rpcUrl": profile.rpc_url,
            "explorerUrl": profile.explorer_url,
            "currency": profile.currency,
            "defaultContracts": {
                role.value: address for role, address in DEFAULT_CONTRACTS.get(network, {}).items()
            },
        }
        for network, profile in profiles.items()
    ]
