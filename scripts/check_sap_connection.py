#!/usr/bin/env python
"""Smoke check for the SAP sales order client.

This script checks the client's ability to:
1. List the demo sample orders without credentials (--dry-run)
2. Verify credentials through a running proxy gateway
3. List sales orders with their line items

Usage:
    # Start the gateway first:
    python -m api.server

    # With real SAP credentials (set environment variables or a .env file):
    export SAP_USERNAME=...
    export SAP_PASSWORD=...
    python scripts/check_sap_connection.py

    # Dry run (no network, demo orders only):
    python scripts/check_sap_connection.py --dry-run
"""

import argparse
import asyncio
import os
import sys
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from connectors.sap_sales_order import (
    AuthenticationError,
    Credentials,
    ProxyGatewayConfig,
    SalesOrderApiError,
    SalesOrderClient,
    format_remote_date,
    status_label,
    total_net_value,
)
from core.config import get_settings


def print_listing(listing) -> None:
    print(f"Found {len(listing)} orders ({listing.mode.value}):")
    for order in listing:
        print(
            f"  • {order.SalesOrder} {format_remote_date(order.CreationDate) or 'N/A':>10} "
            f"{order.SoldToPartyName or order.SoldToParty or 'N/A'} "
            f"{order.TotalNetAmount} {order.TransactionCurrency or ''}"
        )
        print(f"    └─ {status_label(order.OverallDeliveryStatus)}, {len(order.items)} items")
    print(f"Total net value: {total_net_value(listing.orders)}")


async def check_demo() -> bool:
    """List sample orders through a client with no credentials (no network)."""
    print("=" * 60)
    print("SAP Sales Order Client (Dry Run)")
    print("=" * 60)

    async with SalesOrderClient() as client:
        listing = await client.list_orders()

    if not listing.is_demo:
        print("\n✗ Client without credentials did not return demo orders")
        return False
    print_listing(listing)
    return True


async def check_live(credentials: Credentials, gateway_url: str, top: int) -> bool:
    """Verify credentials and list orders through the proxy gateway."""
    print("=" * 60)
    print("SAP Sales Order Client Live Check")
    print("=" * 60)
    print(f"Gateway: {gateway_url}")
    print(f"SAP API: {credentials.api_url}")

    async with SalesOrderClient(ProxyGatewayConfig(base_url=gateway_url)) as client:
        client.set_credentials(credentials.username, credentials.password, credentials.api_url)
        try:
            print("\n--- Verifying ---")
            await client.test_connection()
            print("✓ Connection successful")

            print("\n--- List Sales Orders ---")
            print_listing(await client.list_orders(limit=top))
            return True

        except AuthenticationError as e:
            print(f"\n✗ Authentication failed: {e}")
            print("  Check SAP_USERNAME and SAP_PASSWORD")
            return False
        except SalesOrderApiError as e:
            print(f"\n✗ API error: {e}")
            return False


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Check the SAP sales order connection")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list demo orders, don't make network calls"
    )
    parser.add_argument("--username", help="SAP user (default: SAP_USERNAME)")
    parser.add_argument("--password", help="SAP password (default: SAP_PASSWORD)")
    parser.add_argument("--api-url", help="Sales order OData service URL (default: SAP_SALES_ORDER_API)")
    parser.add_argument("--gateway-url", default=settings.proxy_base_url, help="Proxy gateway base URL")
    parser.add_argument("--top", type=int, default=10, help="Number of orders to list (default: 10)")

    args = parser.parse_args()

    if args.dry_run:
        success = asyncio.run(check_demo())
    else:
        # Flags override the environment defaults field by field
        credentials = replace(
            settings,
            sap_username=args.username or settings.sap_username,
            sap_password=args.password or settings.sap_password,
            sap_api_url=args.api_url or settings.sap_api_url,
        ).default_credentials()

        if credentials is None:
            print("Missing SAP credentials. Set environment variables:")
            print("  SAP_USERNAME, SAP_PASSWORD (and optionally SAP_SALES_ORDER_API)")
            print("\nOr run with --dry-run for demo orders only.")
            sys.exit(1)

        success = asyncio.run(check_live(
            credentials,
            gateway_url=args.gateway_url,
            top=args.top,
        ))

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
