"""Display helpers for SAP sales orders.

Pure functions used by the dashboard screens: decoding OData v2 date
literals, mapping fulfillment-status codes to labels and colors, and the
search/status filtering and totals shown above the order list.
"""

import re
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional

from connectors.sap_sales_order.so_models import SAPSalesOrder


# =============================================================================
# OData v2 dates
# =============================================================================

# "/Date(" ["-"] DIGITS [("+" | "-") DIGITS] ")/"
# DIGITS before the optional offset are milliseconds since the Unix epoch (UTC).
# The offset only records the originating zone; it does not shift the instant.
_ODATA_DATE_RE = re.compile(r"^/Date\((-?\d+)(?:[+-]\d+)?\)/$")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def decode_remote_date(value: Optional[str]) -> Optional[datetime]:
    """Decode an OData v2 date literal to an aware UTC datetime.

    Returns None when the value is not a wrapped date literal, or when the
    instant lies outside the range datetime can represent.
    """
    if not isinstance(value, str):
        return None
    match = _ODATA_DATE_RE.match(value.strip())
    if not match:
        return None
    try:
        return _EPOCH + timedelta(milliseconds=int(match.group(1)))
    except (OverflowError, OSError):
        # Outside the representable datetime range
        return None


def format_remote_date(value: str, tz: tzinfo = timezone.utc) -> str:
    """Render a wrapped OData date as a locale calendar date.

    Values that are not wrapped date literals (e.g. "2024-01-01") are
    returned unchanged.
    """
    decoded = decode_remote_date(value)
    if decoded is None:
        return value
    try:
        return decoded.astimezone(tz).strftime("%x")
    except (OverflowError, ValueError):
        return value


# =============================================================================
# Fulfillment status
# =============================================================================

class DeliveryStatus(str, Enum):
    """Overall processing status codes (delivery and billing)."""
    NOT_PROCESSED = "A"
    PARTIALLY_PROCESSED = "B"
    COMPLETELY_PROCESSED = "C"


STATUS_LABELS: Dict[str, str] = {
    DeliveryStatus.NOT_PROCESSED.value: "Not Processed",
    DeliveryStatus.PARTIALLY_PROCESSED.value: "Partially Processed",
    DeliveryStatus.COMPLETELY_PROCESSED.value: "Completely Processed",
}

STATUS_COLORS: Dict[str, str] = {
    DeliveryStatus.NOT_PROCESSED.value: "#f59e0b",  # amber
    DeliveryStatus.PARTIALLY_PROCESSED.value: "#3b82f6",  # blue
    DeliveryStatus.COMPLETELY_PROCESSED.value: "#10b981",  # green
}

UNKNOWN_STATUS_LABEL = "Unknown"
UNKNOWN_STATUS_COLOR = "#6b7280"  # gray


def status_label(code: Optional[str]) -> str:
    return STATUS_LABELS.get(code, UNKNOWN_STATUS_LABEL) if isinstance(code, str) else UNKNOWN_STATUS_LABEL


def status_color(code: Optional[str]) -> str:
    return STATUS_COLORS.get(code, UNKNOWN_STATUS_COLOR) if isinstance(code, str) else UNKNOWN_STATUS_COLOR


# =============================================================================
# List filtering
# =============================================================================

# Status filter chips on the sales order screen -> OverallDeliveryStatus
ORDER_FILTERS: Dict[str, Optional[str]] = {
    "all": None,
    "pending": DeliveryStatus.NOT_PROCESSED.value,
    "processing": DeliveryStatus.PARTIALLY_PROCESSED.value,
    "completed": DeliveryStatus.COMPLETELY_PROCESSED.value,
}


def filter_orders(
    orders: Iterable[SAPSalesOrder],
    status_filter: str = "all",
    query: str = "",
) -> List[SAPSalesOrder]:
    """Apply the status chip and the search box to a list of orders.

    The search is a case-insensitive substring match on the order number,
    the sold-to party name and the creating user. Input order is kept.

    Raises:
        ValueError: Unknown status filter name
    """
    if status_filter not in ORDER_FILTERS:
        raise ValueError(
            f"Unknown status filter '{status_filter}', expected one of {sorted(ORDER_FILTERS)}"
        )

    wanted_status = ORDER_FILTERS[status_filter]
    needle = query.strip().lower()

    filtered = []
    for order in orders:
        if wanted_status is not None and order.OverallDeliveryStatus != wanted_status:
            continue
        if needle:
            haystack = (
                order.SalesOrder or "",
                order.SoldToPartyName or "",
                order.CreatedByUser or "",
            )
            if not any(needle in text.lower() for text in haystack):
                continue
        filtered.append(order)

    return filtered


def total_net_value(orders: Iterable[SAPSalesOrder]) -> Decimal:
    """Sum of TotalNetAmount across orders; missing amounts count as zero."""
    return sum((order.TotalNetAmount or Decimal("0") for order in orders), Decimal("0"))
