"""Unit tests for the HTTP catalog client (mocked HTTP)."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
import requests

from paid_service_orchestrator.orchestrator.catalog.client import HttpCatalogClient
from paid_service_orchestrator.orchestrator.errors import (
    CatalogUnavailable,
    ServiceNotFound,
    ServiceRequestFailed,
)

NODE = "02" + "ab" * 32
BASE = "https://directory.example/paid-services"


def _response(status: int, payload: Any = None) -> Mock:
    resp = Mock(spec=requests.Response)
    resp.status_code = status
    resp.ok = status < 400
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


@pytest.fixture
def session() -> requests.Session:
    s = requests.Session()
    s.get = Mock()  # type: ignore[method-assign]
    s.post = Mock()  # type: ignore[method-assign]
    return s


@pytest.fixture
def client(session: requests.Session) -> HttpCatalogClient:
    return HttpCatalogClient(base_url=BASE + "/", session=session)


@pytest.mark.asyncio
async def test_list_services(client: HttpCatalogClient, session: Mock) -> None:
    session.get.return_value = _response(
        200, {"services": [{"name": "ping", "description": "Ping"}, {"name": "joke"}]}
    )

    services = await client.list_services(node=NODE, network="btc")

    assert [s.name for s in services] == ["ping", "joke"]
    assert services[1].description == ""
    session.get.assert_called_once_with(f"{BASE}/btc/nodes/{NODE}/services")


def test_list_services_unavailable(client: HttpCatalogClient, session: Mock) -> None:
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(CatalogUnavailable) as excinfo:
        client.list_services_sync(node=NODE, network="btc")

    assert excinfo.value.as_pair() == (503, "FailedToGetServicesList")


def test_list_services_rejects_unexpected_payloads(
    client: HttpCatalogClient, session: Mock
) -> None:
    session.get.return_value = _response(200, {"services": [{"description": "no name"}]})

    with pytest.raises(CatalogUnavailable):
        client.list_services_sync(node=NODE, network="btc")


@pytest.mark.asyncio
async def test_get_service_schema(client: HttpCatalogClient, session: Mock) -> None:
    session.get.return_value = _response(
        200,
        {"id": "1", "description": "d", "fields": [{"name": "to", "description": "Recipient"}]},
    )

    schema = await client.get_service_schema(node=NODE, network="btc", named="relay message")

    assert schema.id == "1"
    assert schema.fields[0].name == "to"
    session.get.assert_called_once_with(f"{BASE}/btc/nodes/{NODE}/services/relay%20message")


def test_get_service_schema_not_found(client: HttpCatalogClient, session: Mock) -> None:
    session.get.return_value = _response(404)

    with pytest.raises(ServiceNotFound) as excinfo:
        client.get_service_schema_sync(node=NODE, network="btc", named="missing")

    assert excinfo.value.code == 404
    assert excinfo.value.details == {"name": "missing"}


@pytest.mark.asyncio
async def test_make_service_request(client: HttpCatalogClient, session: Mock) -> None:
    session.post.return_value = _response(200, {"paywall": "lnbc1", "text": "Pay?"})

    response = await client.make_service_request(
        node=NODE, network="btc", id="1", arguments={"to": "bob"}
    )

    assert response == {"paywall": "lnbc1", "text": "Pay?"}
    session.post.assert_called_once_with(
        f"{BASE}/btc/nodes/{NODE}/services/1/requests", json={"arguments": {"to": "bob"}}
    )


def test_make_service_request_failure(client: HttpCatalogClient, session: Mock) -> None:
    session.post.return_value = _response(500)

    with pytest.raises(ServiceRequestFailed) as excinfo:
        client.make_service_request_sync(node=NODE, network="btc", id="1", arguments={})

    assert excinfo.value.message == "FailedToMakeServiceRequest"


def test_make_service_request_rejects_non_object_responses(
    client: HttpCatalogClient, session: Mock
) -> None:
    session.post.return_value = _response(200, ["not", "an", "object"])

    with pytest.raises(ServiceRequestFailed) as excinfo:
        client.make_service_request_sync(node=NODE, network="btc", id="1", arguments={})

    assert excinfo.value.message == "UnexpectedServiceResponse"
