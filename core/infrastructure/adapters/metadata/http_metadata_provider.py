"""
HTTP Metadata Provider.

Asks an external enrichment service for the metadata of a wrapped asset.
The service owns the compliance and proof logic; this adapter only
transports the request and reads back ``baseURI``.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from core.application.dtos.workflow_dto import MetadataDocument
from core.application.interfaces import IMetadataEnrichmentProvider
from core.domain.errors import WorkflowError

logger = logging.getLogger(__name__)


class MetadataServiceError(WorkflowError):
    """The enrichment service failed or answered without a base URI."""

    code = "MetadataServiceError"


class HttpMetadataProvider(IMetadataEnrichmentProvider):
    """
    Calls ``POST {service_url}/metadata``.

    Request body: ``{"mainId": "<decimal>", "nftContract": "0x..", "tokenId": n}``.
    Expected reply: ``{"baseURI": "...", "attributes": {...}}``.
    """

    name = "http"

    def __init__(
        self,
        service_url: str,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.endpoint = service_url.rstrip("/") + "/metadata"
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session

    async def build_metadata(
        self, main_id: int, nft_contract: str, token_id: int
    ) -> MetadataDocument:
        payload = {"mainId": str(main_id), "nftContract": nft_contract, "tokenId": token_id}
        try:
            if self._session is not None:
                body = await self._post(self._session, payload)
            else:
                async with aiohttp.ClientSession(timeout=self.timeout) as session:
                    body = await self._post(session, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error(f"Metadata service request failed: {exc}", exc_info=True)
            raise MetadataServiceError(
                f"Metadata service unreachable: {exc}", {"endpoint": self.endpoint}
            ) from exc

        base_uri = body.get("baseURI") if isinstance(body, dict) else None
        if not base_uri:
            raise MetadataServiceError(
                "Metadata service reply has no baseURI", {"endpoint": self.endpoint}
            )
        logger.info(f"Metadata service returned baseURI for mainId {main_id}")
        return MetadataDocument(base_uri=str(base_uri), attributes=dict(body.get("attributes") or {}))

    async def _post(self, session: aiohttp.ClientSession, payload: dict) -> dict:
        async with session.post(self.endpoint, json=payload) as response:
            if response.status != 200:
                error_text = await response.text()
                raise MetadataServiceError(
                    f"Metadata service error: {response.status}",
                    {"endpoint": self.endpoint, "status": response.status, "body": error_text[:500]},
                )
            return await response.json()
