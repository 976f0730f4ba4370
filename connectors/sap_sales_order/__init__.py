"""SAP Sales Order Connector Package.

Reads SAP S/4HANA sales orders (API_SALES_ORDER_SRV) through the proxy
gateway, with a demo fallback when no credentials are configured.
"""

from connectors.sap_sales_order.so_auth import Credentials, CredentialStore
from connectors.sap_sales_order.so_client import (
    SalesOrderClient,
    ProxyGatewayConfig,
    SalesOrderApiError,
    MissingCredentialsError,
    AuthenticationError,
    AuthorizationError,
    TargetNotFoundError,
    TransportError,
    UnexpectedShapeError,
)
from connectors.sap_sales_order.so_models import (
    SAPSalesOrder,
    SAPSalesOrderItem,
    SAPItemCollection,
    SAPSalesOrderEnvelope,
    ListingMode,
    OrderListing,
)
from connectors.sap_sales_order.so_format import (
    DeliveryStatus,
    decode_remote_date,
    format_remote_date,
    status_label,
    status_color,
    filter_orders,
    total_net_value,
)
from connectors.sap_sales_order.so_samples import sample_orders

__all__ = [
    # Client
    "SalesOrderClient",
    "ProxyGatewayConfig",
    # Credentials
    "Credentials",
    "CredentialStore",
    # Errors
    "SalesOrderApiError",
    "MissingCredentialsError",
    "AuthenticationError",
    "AuthorizationError",
    "TargetNotFoundError",
    "TransportError",
    "UnexpectedShapeError",
    # Models
    "SAPSalesOrder",
    "SAPSalesOrderItem",
    "SAPItemCollection",
    "SAPSalesOrderEnvelope",
    "ListingMode",
    "OrderListing",
    # Formatting
    "DeliveryStatus",
    "decode_remote_date",
    "format_remote_date",
    "status_label",
    "status_color",
    "filter_orders",
    "total_net_value",
    # Demo data
    "sample_orders",
]
