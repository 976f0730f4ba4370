"""Upstream calls from the gateway to the SAP sales order OData service.

Builds the Basic-authenticated request for the fixed set of sales order
queries and returns the raw status, content type and body for the route
to relay.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional
from urllib.parse import quote

import aiohttp

from connectors.sap_sales_order.so_auth import Credentials
from core.observability.logging import get_logger

logger = get_logger(__name__)

SALES_ORDER_ENTITY_SET = "A_SalesOrder"

# Messages surfaced to the user for well-known upstream statuses
STATUS_MESSAGES: Dict[int, str] = {
    401: "Authentication failed. Please check your credentials.",
    403: "Access denied. You may not have permission to access this resource.",
    404: "API endpoint not found. Please check the API URL.",
}


@dataclass
class UpstreamResponse:
    """What SAP answered."""
    status: int
    reason: str
    content_type: str
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_json(self) -> bool:
        mime = self.content_type.split(";", 1)[0].strip().lower()
        return mime == "application/json" or mime.endswith("+json")


def describe_failure(status: int, reason: str, prefix: str) -> str:
    """User-facing message for a failed upstream call."""
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    return f"{prefix}: {status} {reason}".strip()


def _odata_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_listing_params(
    top: int,
    customer: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> Dict[str, str]:
    """OData query options for the sales order listing.

    Always expands line items and orders by creation date, newest first.
    At most one fixed filter applies: customer, or the creation date range.
    """
    params = {
        "$top": str(top),
        "$expand": "to_Item",
        "$orderby": "CreationDate desc",
    }

    if customer:
        params["$filter"] = f"SoldToParty eq {_odata_literal(customer)}"
    elif from_date and to_date:
        params["$filter"] = (
            f"CreationDate ge datetime'{from_date.isoformat()}T00:00:00' "
            f"and CreationDate le datetime'{to_date.isoformat()}T23:59:59'"
        )

    return params


def sales_order_url(api_url: str, sales_order_id: Optional[str] = None) -> str:
    """URL of the entity set, or of one sales order by key."""
    base = f"{api_url.rstrip('/')}/{SALES_ORDER_ENTITY_SET}"
    if sales_order_id is None:
        return base
    key = quote(_odata_literal(sales_order_id), safe="'")
    return f"{base}({key})"


async def _get(url: str, credentials: Credentials, params: Optional[Dict[str, str]] = None) -> UpstreamResponse:
    headers = {
        "Authorization": credentials.authorization_header,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    async with aiohttp.ClientSession() as session:
        async with session.get(url, headers=headers, params=params) as response:
            text = await response.text()
            upstream = UpstreamResponse(
                status=response.status,
                reason=response.reason or "",
                content_type=response.content_type or "",
                text=text,
            )

    logger.info(
        f"SAP responded {upstream.status}",
        extra_fields={"status": upstream.status, "content_type": upstream.content_type},
    )
    return upstream


async def probe_sales_orders(credentials: Credentials) -> UpstreamResponse:
    """Minimal request used to check that credentials work."""
    return await _get(sales_order_url(credentials.api_url), credentials, {"$top": "1"})


async def fetch_sales_orders(credentials: Credentials, params: Dict[str, str]) -> UpstreamResponse:
    """Fetch the sales order listing with the given OData query options."""
    return await _get(sales_order_url(credentials.api_url), credentials, params)


async def fetch_sales_order(credentials: Credentials, sales_order_id: str) -> UpstreamResponse:
    """Fetch one sales order with its line items."""
    return await _get(
        sales_order_url(credentials.api_url, sales_order_id),
        credentials,
        {"$expand": "to_Item"},
    )
