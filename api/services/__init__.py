"""API Services Package."""

from api.services.sap_upstream import (
    UpstreamResponse,
    build_listing_params,
    describe_failure,
    fetch_sales_order,
    fetch_sales_orders,
    probe_sales_orders,
    sales_order_url,
)

__all__ = [
    "UpstreamResponse",
    "build_listing_params",
    "describe_failure",
    "fetch_sales_order",
    "fetch_sales_orders",
    "probe_sales_orders",
    "sales_order_url",
]
