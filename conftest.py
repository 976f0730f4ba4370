"""Shared fixtures: a scripted stand-in for aiohttp.ClientSession."""

import json
from typing import Any, Dict, List, Optional

import pytest

from connectors.sap_sales_order import ProxyGatewayConfig, SalesOrderClient
from connectors.sap_sales_order.so_samples import SAMPLE_SALES_ORDERS


class FakeResponse:
    """Just enough of aiohttp.ClientResponse for the client."""

    def __init__(
        self,
        status: int = 200,
        body: Any = None,
        content_type: str = "application/json",
        reason: str = "OK",
    ):
        self.status = status
        self.reason = reason
        self.content_type = content_type
        if body is None:
            self._text = ""
        elif isinstance(body, str):
            self._text = body
        else:
            self._text = json.dumps(body)

    async def text(self) -> str:
        return self._text


class _RequestContext:
    def __init__(self, outcome):
        self._outcome = outcome

    async def __aenter__(self):
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self._outcome

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *outcomes):
        self._outcomes: List[Any] = list(outcomes)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def queue(self, outcome) -> None:
        self._outcomes.append(outcome)

    def request(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._outcomes:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return _RequestContext(self._outcomes.pop(0))

    async def close(self) -> None:
        self.closed = True


def envelope(orders: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """OData collection envelope around raw order dicts."""
    return {"d": {"results": list(SAMPLE_SALES_ORDERS if orders is None else orders)}}


@pytest.fixture
def gateway_config() -> ProxyGatewayConfig:
    return ProxyGatewayConfig(base_url="http://gateway.test")


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(gateway_config, fake_session) -> SalesOrderClient:
    return SalesOrderClient(gateway_config, session=fake_session)


@pytest.fixture
def credentialed_client(client) -> SalesOrderClient:
    client.set_credentials("SALES_USER", "s3cret", "https://sap.test/sap/opu/odata/sap/API_SALES_ORDER_SRV")
    return client
