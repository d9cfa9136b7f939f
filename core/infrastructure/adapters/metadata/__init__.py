"""Metadata enrichment providers."""

from .http_metadata_provider import HttpMetadataProvider
from .template_metadata_provider import TemplateMetadataProvider

__all__ = ["HttpMetadataProvider", "TemplateMetadataProvider"]
