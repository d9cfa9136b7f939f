"""
FastAPI Dependencies.

Provides dependency injection for the tool service and its collaborators.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.interfaces import IMetadataEnrichmentProvider
from core.application.services.tool_service import PlatformToolService
from core.infrastructure.adapters.metadata import HttpMetadataProvider, TemplateMetadataProvider
from core.infrastructure.chain import ChainGateway, ContractRegistry
from core.infrastructure.persistence import DeploymentRecordStore
from core.settings import get_app_settings
from orchestration.bus import InMemoryEventBus

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_gateway = None
_registry = None
_record_store = None
_event_bus = None
_metadata_provider = None
_metadata_provider_loaded = False
_tool_service = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_chain_gateway() -> ChainGateway:
    global _gateway
    if _gateway is None:
        _gateway = ChainGateway(get_app_settings().network)
        logger.info("Created ChainGateway instance")
    return _gateway


def get_contract_registry() -> ContractRegistry:
    global _registry
    if _registry is None:
        _registry = ContractRegistry()
    return _registry


def get_record_store() -> DeploymentRecordStore:
    global _record_store
    if _record_store is None:
        path = Path(get_app_settings().workflow.deployment_record_path)
        if not path.is_absolute():
            path = _PROJECT_ROOT / path
        _record_store = DeploymentRecordStore(path)
        logger.info(f"Using deployment record at {path}")
    return _record_store


def get_event_bus() -> InMemoryEventBus:
    global _event_bus
    if _event_bus is None:
        _event_bus = InMemoryEventBus()
    return _event_bus


def get_metadata_provider() -> Optional[IMetadataEnrichmentProvider]:
    """The configured enrichment provider; the HTTP service wins over a template."""
    global _metadata_provider, _metadata_provider_loaded

    if not _metadata_provider_loaded:
        workflow = get_app_settings().workflow
        if workflow.metadata_service_url:
            _metadata_provider = HttpMetadataProvider(workflow.metadata_service_url)
            logger.info(f"Using metadata service at {workflow.metadata_service_url}")
        elif workflow.metadata_base_uri:
            _metadata_provider = TemplateMetadataProvider(workflow.metadata_base_uri)
            logger.info("Using template metadata provider")
        else:
            logger.info("No metadata provider configured; wraps run without enrichment")
        _metadata_provider_loaded = True

    return _metadata_provider


def get_tool_service() -> PlatformToolService:
    global _tool_service
    if _tool_service is None:
        _tool_service = PlatformToolService(
            settings=get_app_settings(),
            gateway=get_chain_gateway(),
            registry=get_contract_registry(),
            record_store=get_record_store(),
            event_bus=get_event_bus(),
            provider=get_metadata_provider(),
        )
        logger.info("Created PlatformToolService instance")
    return _tool_service


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _gateway, _registry, _record_store, _event_bus
    global _metadata_provider, _metadata_provider_loaded, _tool_service

    _gateway = None
    _registry = None
    _record_store = None
    _event_bus = None
    _metadata_provider = None
    _metadata_provider_loaded = False
    _tool_service = None
    get_app_settings.cache_clear()

    logger.info("Dependencies reset")
