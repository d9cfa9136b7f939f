from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.contract_settings import ContractSettings
from core.settings.modules.network_settings import NetworkSettings
from core.settings.modules.signer_settings import SignerSettings
from core.settings.modules.workflow_settings import WorkflowSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    network: NetworkSettings
    contracts: ContractSettings
    workflow: WorkflowSettings
    signers: SignerSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        network=NetworkSettings(),
        contracts=ContractSettings(),
        workflow=WorkflowSettings(),
        signers=SignerSettings(),
    )
