"""Contract Registry - binds logical roles to addresses and call interfaces."""
from typing import Any, Dict, List, Mapping, Optional

from core.application.dtos.chain_dto import ContractBinding, ContractSet
from core.application.dtos.workflow_dto import WorkflowRequest
from core.domain.enums import ContractRole
from core.domain.value_objects import Address

from .abis import (
    BASE_ASSET_ABI,
    FEE_MANAGER_ABI,
    MARKETPLACE_ABI,
    NFT_COLLECTION_ABI,
    WRAPPED_ASSET_ABI,
)

ROLE_ABIS: Dict[ContractRole, List[Dict[str, Any]]] = {
    ContractRole.NFT_COLLECTION: NFT_COLLECTION_ABI,
    ContractRole.BASE_ASSET: BASE_ASSET_ABI,
    ContractRole.WRAPPED_ASSET: WRAPPED_ASSET_ABI,
    ContractRole.MARKETPLACE: MARKETPLACE_ABI,
    ContractRole.FEE_MANAGER: FEE_MANAGER_ABI,
}


class ContractRegistry:
    """
    One typed interface per contract role.

    Built once per process; ``build`` produces the immutable ContractSet
    for a run from the request's resolved addresses.
    """

    def __init__(self, abis: Optional[Mapping[ContractRole, List[Dict[str, Any]]]] = None) -> None:
        self._abis = dict(ROLE_ABIS)
        if abis:
            self._abis.update(abis)

    def bind(self, role: ContractRole, address: Address) -> ContractBinding:
        return ContractBinding(role=role, address=address, abi=self._abis[role])

    def build(self, request: WorkflowRequest) -> ContractSet:
        def _bind(role: ContractRole) -> Optional[ContractBinding]:
            address = request.contract(role)
            return self.bind(role, address) if address is not None else None

        return ContractSet(
            nft_collection=(
                self.bind(ContractRole.NFT_COLLECTION, request.nft_contract)
                if request.nft_contract is not None
                else None
            ),
            base_asset=_bind(ContractRole.BASE_ASSET),
            wrapped_asset=_bind(ContractRole.WRAPPED_ASSET),
            marketplace=_bind(ContractRole.MARKETPLACE),
            fee_manager=_bind(ContractRole.FEE_MANAGER),
        )
