"""SAP Sales Order data models.

These map to the SAP S/4HANA OData v2 schema of API_SALES_ORDER_SRV.
Attribute names follow the remote property names so records can be relayed
and compared without translation.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# SAP OData Models
# =============================================================================

class SAPBaseModel(BaseModel):
    """Base model for SAP OData entities.

    Records are immutable snapshots; properties this module does not name
    are kept as extra fields.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


class SAPSalesOrderItem(SAPBaseModel):
    """Sales order line item.

    Maps to: /A_SalesOrderItem (expanded via to_Item)
    """
    SalesOrderItem: Optional[str] = Field(None, alias="SalesOrderItem")
    Material: Optional[str] = Field(None, alias="Material")
    SalesOrderItemText: Optional[str] = Field(None, alias="SalesOrderItemText")
    OrderQuantity: Optional[Decimal] = Field(None, alias="OrderQuantity")
    OrderQuantityUnit: Optional[str] = Field(None, alias="OrderQuantityUnit")
    NetAmount: Optional[Decimal] = Field(None, alias="NetAmount")
    TransactionCurrency: Optional[str] = Field(None, alias="TransactionCurrency")


class SAPItemCollection(SAPBaseModel):
    """Deferred/expanded navigation collection: {"results": [...]}."""
    results: List[SAPSalesOrderItem] = Field(default_factory=list)


class SAPSalesOrder(SAPBaseModel):
    """Sales order header.

    Maps to: /A_SalesOrder
    """
    SalesOrder: Optional[str] = Field(None, alias="SalesOrder")
    SalesOrderType: Optional[str] = Field(None, alias="SalesOrderType")
    SoldToParty: Optional[str] = Field(None, alias="SoldToParty")
    SoldToPartyName: Optional[str] = Field(None, alias="SoldToPartyName")
    CreationDate: Optional[str] = Field(None, alias="CreationDate")  # "/Date(<ms>)/"
    CreatedByUser: Optional[str] = Field(None, alias="CreatedByUser")
    TotalNetAmount: Optional[Decimal] = Field(None, alias="TotalNetAmount")
    TransactionCurrency: Optional[str] = Field(None, alias="TransactionCurrency")
    SalesOrderDate: Optional[str] = Field(None, alias="SalesOrderDate")
    OverallDeliveryStatus: Optional[str] = Field(None, alias="OverallDeliveryStatus")  # "A", "B", "C"
    OverallBillingStatus: Optional[str] = Field(None, alias="OverallBillingStatus")

    # Line items (present when requested with $expand=to_Item)
    to_Item: Optional[SAPItemCollection] = Field(None, alias="to_Item")

    @property
    def items(self) -> List[SAPSalesOrderItem]:
        """Expanded line items, empty when not expanded."""
        return list(self.to_Item.results) if self.to_Item else []


class SAPCollectionBody(SAPBaseModel):
    results: List[SAPSalesOrder]


class SAPSalesOrderEnvelope(SAPBaseModel):
    """Collection response envelope: {"d": {"results": [...]}}."""
    d: SAPCollectionBody


class SAPSingleOrderEnvelope(SAPBaseModel):
    """Single entity response envelope: {"d": {...}}."""
    d: SAPSalesOrder


# =============================================================================
# Listing Result
# =============================================================================

class ListingMode(str, Enum):
    """Where a listing came from."""
    AUTHENTICATED = "authenticated"
    DEMO = "demo"


@dataclass(frozen=True)
class OrderListing:
    """Sales orders together with the mode that produced them.

    DEMO listings are built from the fixed sample set without any network
    call; AUTHENTICATED listings hold the remote records in received order.
    """
    mode: ListingMode
    orders: List[SAPSalesOrder] = field(default_factory=list)

    @classmethod
    def demo(cls, orders: List[SAPSalesOrder]) -> "OrderListing":
        return cls(ListingMode.DEMO, list(orders))

    @classmethod
    def authenticated(cls, orders: List[SAPSalesOrder]) -> "OrderListing":
        return cls(ListingMode.AUTHENTICATED, list(orders))

    @property
    def is_demo(self) -> bool:
        return self.mode is ListingMode.DEMO

    def __iter__(self) -> Iterator[SAPSalesOrder]:
        return iter(self.orders)

    def __len__(self) -> int:
        return len(self.orders)

    def __getitem__(self, index: int) -> Any:
        return self.orders[index]
