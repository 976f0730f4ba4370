"""Tests for the operator smoke check script."""

from unittest.mock import AsyncMock, patch

import pytest

from connectors.sap_sales_order import OrderListing, SalesOrderClient, sample_orders
from scripts.check_sap_connection import check_demo


@pytest.mark.asyncio
async def test_dry_run_lists_demo_orders(capsys):
    assert await check_demo() is True

    out = capsys.readouterr().out
    assert "Found 3 orders (demo)" in out
    assert "Total net value: 56950.00" in out


@pytest.mark.asyncio
async def test_dry_run_reports_non_demo_listing(capsys):
    listing = OrderListing.authenticated(sample_orders())
    with patch.object(SalesOrderClient, "list_orders", new=AsyncMock(return_value=listing)):
        assert await check_demo() is False

    assert "✗" in capsys.readouterr().out
