"""Sample sales orders served in demo mode.

Used whenever no SAP credentials are configured so the dashboard has
content before a connection is established. Each order's line item net
amounts add up to its TotalNetAmount.
"""

from typing import Any, Dict, List

from connectors.sap_sales_order.so_models import SAPSalesOrder


SAMPLE_SALES_ORDERS: List[Dict[str, Any]] = [
    {
        "SalesOrder": "0000000001",
        "SalesOrderType": "OR",
        "SoldToParty": "0000100001",
        "SoldToPartyName": "ABC Corporation",
        "CreationDate": "/Date(1704067200000)/",
        "CreatedByUser": "SALES001",
        "TotalNetAmount": "15750.00",
        "TransactionCurrency": "USD",
        "SalesOrderDate": "/Date(1704067200000)/",
        "OverallDeliveryStatus": "A",
        "OverallBillingStatus": "A",
        "to_Item": {
            "results": [
                {
                    "SalesOrderItem": "000010",
                    "Material": "MAT001",
                    "SalesOrderItemText": "Premium Widget Set",
                    "OrderQuantity": "5.000",
                    "OrderQuantityUnit": "EA",
                    "NetAmount": "7500.00",
                    "TransactionCurrency": "USD",
                },
                {
                    "SalesOrderItem": "000020",
                    "Material": "MAT002",
                    "SalesOrderItemText": "Standard Widget",
                    "OrderQuantity": "10.000",
                    "OrderQuantityUnit": "EA",
                    "NetAmount": "8250.00",
                    "TransactionCurrency": "USD",
                },
            ],
        },
    },
    {
        "SalesOrder": "0000000002",
        "SalesOrderType": "OR",
        "SoldToParty": "0000100002",
        "SoldToPartyName": "XYZ Industries",
        "CreationDate": "/Date(1703980800000)/",
        "CreatedByUser": "SALES002",
        "TotalNetAmount": "28900.00",
        "TransactionCurrency": "USD",
        "SalesOrderDate": "/Date(1703980800000)/",
        "OverallDeliveryStatus": "B",
        "OverallBillingStatus": "A",
        "to_Item": {
            "results": [
                {
                    "SalesOrderItem": "000010",
                    "Material": "MAT003",
                    "SalesOrderItemText": "Enterprise Solution Package",
                    "OrderQuantity": "1.000",
                    "OrderQuantityUnit": "EA",
                    "NetAmount": "28900.00",
                    "TransactionCurrency": "USD",
                },
            ],
        },
    },
    {
        "SalesOrder": "0000000003",
        "SalesOrderType": "OR",
        "SoldToParty": "0000100003",
        "SoldToPartyName": "Tech Solutions Ltd",
        "CreationDate": "/Date(1703894400000)/",
        "CreatedByUser": "SALES001",
        "TotalNetAmount": "12300.00",
        "TransactionCurrency": "USD",
        "SalesOrderDate": "/Date(1703894400000)/",
        "OverallDeliveryStatus": "C",
        "OverallBillingStatus": "B",
        "to_Item": {
            "results": [
                {
                    "SalesOrderItem": "000010",
                    "Material": "MAT004",
                    "SalesOrderItemText": "Software License",
                    "OrderQuantity": "3.000",
                    "OrderQuantityUnit": "EA",
                    "NetAmount": "9000.00",
                    "TransactionCurrency": "USD",
                },
                {
                    "SalesOrderItem": "000020",
                    "Material": "MAT005",
                    "SalesOrderItemText": "Support Package",
                    "OrderQuantity": "1.000",
                    "OrderQuantityUnit": "EA",
                    "NetAmount": "3300.00",
                    "TransactionCurrency": "USD",
                },
            ],
        },
    },
]


def sample_orders() -> List[SAPSalesOrder]:
    """Fixed demo orders, newest first."""
    return [SAPSalesOrder.model_validate(raw) for raw in SAMPLE_SALES_ORDERS]
