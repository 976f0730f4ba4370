"""ERP Connectors - remote system integrations.

This package contains the SAP S/4HANA sales order connector. It handles:
- Credential handling for the remote system
- Calls through the proxy gateway
- OData envelope unwrapping and record models
- Demo data when no credentials are configured

Key Design Principle:
- Screens depend ONLY on SalesOrderClient and the pure helpers
- Records keep SAP property names; no SAP HTTP details leak to callers
"""

from connectors.sap_sales_order import (
    SalesOrderClient,
    ProxyGatewayConfig,
    Credentials,
    CredentialStore,
    OrderListing,
    ListingMode,
)

__all__ = [
    "SalesOrderClient",
    "ProxyGatewayConfig",
    "Credentials",
    "CredentialStore",
    "OrderListing",
    "ListingMode",
]
