"""
Template Metadata Provider.

Builds the base URI for a wrapped asset from a configured template such
as ``https://meta.example.com/assets/{main_id}/``.
"""
import logging

from core.application.dtos.workflow_dto import MetadataDocument
from core.application.interfaces import IMetadataEnrichmentProvider
from polytrade_sdk.identifiers import main_id_hex

logger = logging.getLogger(__name__)


class TemplateMetadataProvider(IMetadataEnrichmentProvider):
    """Fills ``{main_id}``, ``{main_id_hex}`` and ``{token_id}`` into a URI template."""

    name = "template"

    def __init__(self, base_uri_template: str):
        if not base_uri_template.strip():
            raise ValueError("Metadata base URI template cannot be empty")
        self.template = base_uri_template.strip()

    async def build_metadata(
        self, main_id: int, nft_contract: str, token_id: int
    ) -> MetadataDocument:
        base_uri = self.template.format(
            main_id=main_id,
            main_id_hex=main_id_hex(main_id),
            token_id=token_id,
            nft_contract=nft_contract,
        )
        logger.info(f"Template metadata for mainId {main_id}: {base_uri}")
        return MetadataDocument(
            base_uri=base_uri,
            attributes={"nftContract": nft_contract, "tokenId": token_id, "provider": self.name},
        )
