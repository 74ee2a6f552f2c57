"""HTTP client for a paid-services directory."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError as ModelValidationError

from paid_service_orchestrator.orchestrator.errors import (
    CatalogUnavailable,
    ServiceNotFound,
    ServiceRequestFailed,
)
from paid_service_orchestrator.orchestrator.paid_services.capabilities import CatalogClient
from paid_service_orchestrator.orchestrator.paid_services.models import (
    ServiceSchema,
    ServiceSummary,
)

logger = logging.getLogger(__name__)


class HttpCatalogClient(CatalogClient):
    """Directory of node services exposed as JSON over HTTP.

    Layout (relative to `base_url`):
      - GET  /{network}/nodes/{node}/services
      - GET  /{network}/nodes/{node}/services/{name}
      - POST /{network}/nodes/{node}/services/{id}/requests
    """

    def __init__(self, *, base_url: str, session: requests.Session | None = None) -> None:
        if not base_url:
            raise ValueError("Catalog base URL is required")

        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {"Accept": "application/json", "User-Agent": "paid-service-orchestrator"}
        )

    def close(self) -> None:
        self._session.close()

    def _services_url(self, *, node: str, network: str, suffix: str = "") -> str:
        if suffix and not suffix.startswith("/"):
            suffix = "/" + suffix
        return f"{self._base_url}/{quote(network)}/nodes/{node}/services{suffix}"

    def list_services_sync(self, *, node: str, network: str) -> list[ServiceSummary]:
        url = self._services_url(node=node, network=network)
        try:
            resp = self._session.get(url)
            resp.raise_for_status()
            data: dict[str, Any] = resp.json()
            services = [ServiceSummary.model_validate(s) for s in data.get("services") or []]
        except (requests.RequestException, ValueError, ModelValidationError) as e:
            raise CatalogUnavailable(
                "FailedToGetServicesList", details={"node": node, "error": str(e)}
            ) from e

        logger.debug("Listed services", extra={"node": node, "count": len(services)})
        return services

    def get_service_schema_sync(self, *, node: str, network: str, named: str) -> ServiceSchema:
        url = self._services_url(node=node, network=network, suffix=quote(named, safe=""))
        try:
            resp = self._session.get(url)
        except requests.RequestException as e:
            raise CatalogUnavailable("FailedToGetServiceSchema", details={"error": str(e)}) from e

        if resp.status_code == 404:
            raise ServiceNotFound("ServiceNotFound", details={"name": named})

        try:
            resp.raise_for_status()
            return ServiceSchema.model_validate(resp.json())
        except (requests.RequestException, ValueError, ModelValidationError) as e:
            raise CatalogUnavailable(
                "UnexpectedServiceSchema", details={"name": named, "error": str(e)}
            ) from e

    def make_service_request_sync(
        self,
        *,
        node: str,
        network: str,
        id: str,  # noqa: A002 (service id)
        arguments: dict[str, Any],
    ) -> dict[str, Any]:
        url = self._services_url(node=node, network=network, suffix=f"{quote(id, safe='')}/requests")
        logger.info("Sending service request", extra={"node": node, "service_id": id})
        try:
            resp = self._session.post(url, json={"arguments": arguments})
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ServiceRequestFailed(
                "FailedToMakeServiceRequest", details={"service_id": id, "error": str(e)}
            ) from e

        if not isinstance(data, dict):
            raise ServiceRequestFailed("UnexpectedServiceResponse", details={"service_id": id})
        return data

    async def list_services(self, *, node: str, network: str) -> list[ServiceSummary]:
        return await asyncio.to_thread(self.list_services_sync, node=node, network=network)

    async def get_service_schema(self, *, node: str, network: str, named: str) -> ServiceSchema:
        return await asyncio.to_thread(
            self.get_service_schema_sync, node=node, network=network, named=named
        )

    async def make_service_request(
        self,
        *,
        node: str,
        network: str,
        id: str,  # noqa: A002 (service id)
        arguments: dict[str, Any],
    ) -> dict[str, Any]:
        return await asyncio.to_thread(
            self.make_service_request_sync, node=node, network=network, id=id, arguments=arguments
        )
