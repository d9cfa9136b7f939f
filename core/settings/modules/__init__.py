# Settings modules
from .app_settings import AppSettings, get_app_settings
from .contract_settings import ContractSettings
from .network_settings import NetworkSettings
from .signer_settings import SignerSettings
from .workflow_settings import WorkflowSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "ContractSettings",
    "NetworkSettings",
    "SignerSettings",
    "WorkflowSettings",
]
