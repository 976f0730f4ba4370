"""SAP Sales Order gateway client.

Talks to the same-origin proxy gateway (see api/routes/sap.py), which performs
the Basic-authenticated call to the SAP OData service. Handles connection
verification, envelope unwrapping and error classification.

No timeouts of its own, no retries: a failed request surfaces immediately.
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from connectors.sap_sales_order.so_auth import Credentials, CredentialStore
from connectors.sap_sales_order.so_format import decode_remote_date
from connectors.sap_sales_order.so_models import (
    OrderListing,
    SAPSalesOrder,
    SAPSalesOrderEnvelope,
    SAPSingleOrderEnvelope,
)
from connectors.sap_sales_order.so_samples import sample_orders
from core.observability.logging import get_logger, with_correlation

logger = get_logger(__name__)


class SalesOrderApiError(Exception):
    """Base exception for sales order client errors."""
    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class MissingCredentialsError(SalesOrderApiError):
    """An authenticated operation was called with no credentials set."""
    pass


class AuthenticationError(SalesOrderApiError):
    """Credentials rejected by SAP (401)."""
    pass


class AuthorizationError(SalesOrderApiError):
    """Credentials valid but not allowed to read sales orders (403)."""
    pass


class TargetNotFoundError(SalesOrderApiError):
    """Service address wrong or resource absent (404)."""
    pass


class TransportError(SalesOrderApiError):
    """Network failure, unexpected status, non-JSON or malformed body."""
    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response_body: str = "",
        content_type: str = "",
    ):
        super().__init__(message, status_code, response_body)
        self.content_type = content_type


class UnexpectedShapeError(SalesOrderApiError):
    """Valid JSON that does not carry the expected envelope."""
    pass


_STATUS_ERRORS = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: TargetNotFoundError,
}


@dataclass
class ProxyGatewayConfig:
    """Where the proxy gateway endpoints live."""
    base_url: str = "http://localhost:8000"
    verify_path: str = "/api/sap/test-connection"
    orders_path: str = "/api/sap/sales-orders"

    def get_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    @property
    def verify_url(self) -> str:
        return self.get_url(self.verify_path)

    @property
    def orders_url(self) -> str:
        return self.get_url(self.orders_path)

    def order_url(self, sales_order_id: str) -> str:
        return f"{self.orders_url}/{quote(sales_order_id, safe='')}"


@dataclass
class GatewayResponse:
    """Status, content type and body text of one gateway call."""
    status: int
    content_type: str
    text: str
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_json(self) -> bool:
        mime = self.content_type.split(";", 1)[0].strip().lower()
        return mime == "application/json" or mime.endswith("+json")


def _check_limit(limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")


class SalesOrderClient:
    """Client for SAP sales orders behind the proxy gateway.

    Provides:
    - Credential slot (one active set, caller-owned)
    - Connection verification gating the "connected" state
    - Sales order listing with demo fallback when no credentials are set
    - Classified errors for every failed authenticated request

    Usage:
        async with SalesOrderClient(ProxyGatewayConfig("https://dashboard.example.com")) as client:
            client.set_credentials(username, password, api_url)
            await client.test_connection()
            listing = await client.list_orders(100)
    """

    def __init__(
        self,
        gateway_config: Optional[ProxyGatewayConfig] = None,
        credential_store: Optional[CredentialStore] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize client.

        Args:
            gateway_config: Proxy gateway location
            credential_store: Credential slot (a fresh empty store if None)
            session: Optional shared aiohttp session; not closed by close()
        """
        self.gateway_config = gateway_config or ProxyGatewayConfig()
        self.credential_store = credential_store or CredentialStore()
        self._session = session
        self._owns_session = session is None
        self._verified = False

    async def __aenter__(self) -> "SalesOrderClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    # =========================================================================
    # Credentials & Connection State
    # =========================================================================

    def set_credentials(self, username: str, password: str, api_url: str) -> Credentials:
        """Replace the active credentials. The client is not connected until verified."""
        self._verified = False
        return self.credential_store.set_credentials(username, password, api_url)

    def clear_credentials(self) -> None:
        self._verified = False
        self.credential_store.clear_credentials()

    def has_credentials(self) -> bool:
        return self.credential_store.has_credentials()

    def disconnect(self) -> None:
        """Forget the session's credentials and return to demo mode."""
        self.clear_credentials()
        logger.info("Disconnected from SAP; serving demo data")

    @property
    def is_connected(self) -> bool:
        """True iff credentials are set and the last verification succeeded."""
        return self.has_credentials() and self._verified

    def _require_credentials(self) -> Credentials:
        credentials = self.credential_store.current
        if credentials is None:
            raise MissingCredentialsError(
                "No SAP credentials configured. Enter credentials to connect."
            )
        return credentials

    # =========================================================================
    # Transport
    # =========================================================================

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> GatewayResponse:
        """Issue one gateway request and read the full body.

        Raises:
            TransportError: The request could not be completed
        """
        session = self._get_session()
        try:
            async with session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Accept": "application/json"},
            ) as response:
                text = await response.text()
                return GatewayResponse(
                    status=response.status,
                    content_type=response.content_type or "",
                    text=text,
                    reason=response.reason or "",
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"Request to sales order gateway failed: {type(e).__name__}: {e}"
            ) from e

    @staticmethod
    def _error_message(response: GatewayResponse) -> str:
        """Prefer the gateway's own {error} text."""
        try:
            body = json.loads(response.text) if response.text else None
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("error", "message"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return f"HTTP {response.status} {response.reason}".strip()

    def _raise_for_status(self, response: GatewayResponse) -> None:
        if response.ok:
            return

        message = self._error_message(response)
        error_cls = _STATUS_ERRORS.get(response.status)
        if error_cls is not None:
            raise error_cls(message, response.status, response.text)

        raise TransportError(
            f"Gateway returned status {response.status} "
            f"(content type '{response.content_type or 'unknown'}'): {message}",
            response.status,
            response.text,
            content_type=response.content_type,
        )

    def _decode_json(self, response: GatewayResponse) -> Any:
        """Classify the status, then parse a JSON body.

        Raises:
            AuthenticationError / AuthorizationError / TargetNotFoundError
            TransportError: Other status, non-JSON content type, bad JSON
        """
        self._raise_for_status(response)

        if not response.is_json:
            raise TransportError(
                f"Expected a JSON response but received content type "
                f"'{response.content_type or 'unknown'}' (status {response.status})",
                response.status,
                response.text,
                content_type=response.content_type,
            )

        try:
            return json.loads(response.text)
        except ValueError as e:
            raise TransportError(
                f"Malformed JSON response (status {response.status}, "
                f"content type '{response.content_type}'): {e}",
                response.status,
                response.text,
                content_type=response.content_type,
            ) from e

    # =========================================================================
    # Connection Verification
    # =========================================================================

    async def test_connection(self, use_listing_probe: bool = False) -> bool:
        """Verify the stored credentials through the gateway.

        Args:
            use_listing_probe: Probe the listing endpoint with top=1 instead
                of the verify endpoint; any well-formed JSON counts as success

        Returns:
            True. Every failure raises instead.

        Raises:
            MissingCredentialsError: No credentials set (no request is made)
            SalesOrderApiError: Classified verification failure
        """
        credentials = self._require_credentials()
        probe = "listing" if use_listing_probe else "verify"

        with with_correlation(operation="test_connection"):
            try:
                if use_listing_probe:
                    await self._probe_listing(credentials)
                else:
                    await self._probe_verify(credentials)
            except SalesOrderApiError as e:
                if self.credential_store.current is credentials:
                    self._verified = False
                logger.warning(
                    f"Connection test failed: {e}",
                    extra_fields={"probe": probe, "status": e.status_code, "error_type": type(e).__name__},
                )
                raise

            # Credentials replaced while the probe was in flight stay unverified
            if self.credential_store.current is credentials:
                self._verified = True
            logger.info("Connection test succeeded", extra_fields={"probe": probe})
            return True

    async def _probe_verify(self, credentials: Credentials) -> None:
        response = await self._request(
            "POST",
            self.gateway_config.verify_url,
            json_body=credentials.as_request_body(),
        )
        body = self._decode_json(response)

        if not isinstance(body, dict) or "success" not in body:
            raise UnexpectedShapeError(
                "Connection test response did not contain a 'success' flag",
                response.status,
                response.text,
            )
        if body["success"] is not True:
            error = body.get("error")
            raise TransportError(
                error if isinstance(error, str) and error else "Gateway reported an unsuccessful connection test",
                response.status,
                response.text,
                content_type=response.content_type,
            )

    async def _probe_listing(self, credentials: Credentials) -> None:
        params = credentials.as_query_params()
        params["top"] = "1"
        response = await self._request("GET", self.gateway_config.orders_url, params=params)
        self._decode_json(response)

    # =========================================================================
    # Sales Orders
    # =========================================================================

    async def list_orders(self, limit: int = 50) -> OrderListing:
        """List sales orders, newest first.

        Without credentials this returns the demo sample set and makes no
        network call. With credentials, the remote records come back in
        received order; failures raise and never fall back to samples.

        Args:
            limit: Maximum number of orders to request (positive integer)
        """
        _check_limit(limit)
        credentials = self.credential_store.current
        if credentials is None:
            with with_correlation(operation="list_orders", client_mode="demo"):
                logger.debug("No credentials configured; returning sample orders")
                return OrderListing.demo(sample_orders())

        return await self._fetch_listing(credentials, {"top": str(limit)}, "list_orders")

    async def list_orders_by_customer(self, customer_id: str, limit: int = 50) -> OrderListing:
        """List sales orders for one sold-to party, newest first."""
        _check_limit(limit)
        credentials = self.credential_store.current
        if credentials is None:
            with with_correlation(operation="list_orders_by_customer", client_mode="demo"):
                orders = [o for o in sample_orders() if o.SoldToParty == customer_id]
                logger.debug(f"Returning {len(orders)} sample orders for customer {customer_id}")
                return OrderListing.demo(orders)

        return await self._fetch_listing(
            credentials,
            {"top": str(limit), "customer": customer_id},
            "list_orders_by_customer",
        )

    async def list_orders_by_date_range(
        self,
        start: date,
        end: date,
        limit: int = 50,
    ) -> OrderListing:
        """List sales orders created between start and end (inclusive)."""
        _check_limit(limit)
        if start > end:
            raise ValueError(f"start ({start}) must not be after end ({end})")

        credentials = self.credential_store.current
        if credentials is None:
            with with_correlation(operation="list_orders_by_date_range", client_mode="demo"):
                orders = []
                for order in sample_orders():
                    created = decode_remote_date(order.CreationDate)
                    if created is not None and start <= created.date() <= end:
                        orders.append(order)
                logger.debug(f"Returning {len(orders)} sample orders between {start} and {end}")
                return OrderListing.demo(orders)

        return await self._fetch_listing(
            credentials,
            {"top": str(limit), "fromDate": start.isoformat(), "toDate": end.isoformat()},
            "list_orders_by_date_range",
        )

    async def get_order(self, sales_order_id: str) -> Optional[SAPSalesOrder]:
        """Get one sales order with its line items.

        In demo mode, returns the matching sample order or None.

        Raises:
            ValueError: Empty sales order id
            TargetNotFoundError: Authenticated lookup of an unknown order
            UnexpectedShapeError: The body is not a single sales order
        """
        if not sales_order_id:
            raise ValueError("sales_order_id must not be empty")

        credentials = self.credential_store.current
        if credentials is None:
            with with_correlation(operation="get_order", client_mode="demo", sales_order_id=sales_order_id):
                logger.debug("No credentials configured; looking up sample order")
                return next(
                    (o for o in sample_orders() if o.SalesOrder == sales_order_id),
                    None,
                )

        with with_correlation(operation="get_order", client_mode="authenticated", sales_order_id=sales_order_id):
            response = await self._request(
                "GET",
                self.gateway_config.order_url(sales_order_id),
                params=credentials.as_query_params(),
            )
            body = self._decode_json(response)

            d = body.get("d") if isinstance(body, dict) else None
            if not isinstance(d, dict):
                raise UnexpectedShapeError(
                    "Sales order response did not contain a 'd' object",
                    response.status,
                    response.text,
                )
            # A collection body, or an object with no key, is not a single order
            if "results" in d or not d.get("SalesOrder"):
                raise UnexpectedShapeError(
                    "Sales order response did not contain a single sales order",
                    response.status,
                    response.text,
                )
            try:
                return SAPSingleOrderEnvelope.model_validate(body).d
            except ValidationError as e:
                raise UnexpectedShapeError(
                    f"Sales order record did not match the expected schema: {e.error_count()} error(s)",
                    response.status,
                    response.text,
                ) from e

    async def _fetch_listing(
        self,
        credentials: Credentials,
        extra_params: Dict[str, str],
        operation: str,
    ) -> OrderListing:
        params = credentials.as_query_params()
        params.update(extra_params)

        with with_correlation(operation=operation, client_mode="authenticated"):
            response = await self._request("GET", self.gateway_config.orders_url, params=params)
            body = self._decode_json(response)
            orders = self._unwrap_collection(body, response)
            logger.info(
                f"Fetched {len(orders)} sales orders",
                extra_fields={"count": len(orders), "top": extra_params.get("top")},
            )
            return OrderListing.authenticated(orders)

    @staticmethod
    def _unwrap_collection(body: Any, response: GatewayResponse) -> List[SAPSalesOrder]:
        d = body.get("d") if isinstance(body, dict) else None
        results = d.get("results") if isinstance(d, dict) else None
        if not isinstance(results, list):
            raise UnexpectedShapeError(
                "Sales order response did not contain a 'd.results' list",
                response.status,
                response.text,
            )

        try:
            return list(SAPSalesOrderEnvelope.model_validate(body).d.results)
        except ValidationError as e:
            raise UnexpectedShapeError(
                f"Sales order records did not match the expected schema: {e.error_count()} error(s)",
                response.status,
                response.text,
            ) from e
