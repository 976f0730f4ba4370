"""SAP proxy gateway routes.

Implements:
- POST /api/sap/test-connection - Check credentials against SAP
- GET /api/sap/sales-orders - List sales orders (relayed verbatim)
- GET /api/sap/sales-orders/{sales_order_id} - One sales order with items
- OPTIONS on each - CORS preflight

Credentials arrive per request (JSON body or query parameters) and are
used only for the upstream call. Requests missing any credential field are
rejected with 400 before SAP is contacted.
"""

import json
import uuid
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from api.services import sap_upstream
from connectors.sap_sales_order.so_auth import Credentials
from core.observability.logging import get_logger, with_correlation

logger = get_logger(__name__)

router = APIRouter(prefix="/sap")

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

MISSING_CREDENTIALS = "Missing required credentials"


# =============================================================================
# Request/Response Models
# =============================================================================

class CredentialsPayload(BaseModel):
    """Credential fields as sent by the client."""
    username: Optional[str] = None
    password: Optional[str] = None
    apiUrl: Optional[str] = None

    def to_credentials(self) -> Optional[Credentials]:
        """Credentials, or None if any field is missing or empty."""
        if not (self.username and self.password and self.apiUrl):
            return None
        return Credentials(username=self.username, password=self.password, api_url=self.apiUrl)


class ConnectionTestResponse(BaseModel):
    """Result of a connection test."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


def _json(status_code: int, content: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _error(status_code: int, message: str) -> JSONResponse:
    return _json(status_code, {"error": message})


def _relay(upstream: sap_upstream.UpstreamResponse) -> Response:
    """Pass a successful SAP body through untouched, or map the failure."""
    if not upstream.ok:
        message = sap_upstream.describe_failure(upstream.status, upstream.reason, "SAP API Error")
        logger.warning(f"SAP request failed: {message}", extra_fields={"status": upstream.status})
        return _error(upstream.status, message)

    if not upstream.is_json:
        message = (
            f"SAP returned a non-JSON response "
            f"(content type '{upstream.content_type or 'unknown'}')"
        )
        logger.error(message, extra_fields={"status": upstream.status})
        return _error(500, message)

    try:
        json.loads(upstream.text)
    except ValueError as e:
        message = f"SAP returned malformed JSON: {e}"
        logger.error(message, extra_fields={"status": upstream.status})
        return _error(500, message)

    return Response(
        content=upstream.text,
        status_code=200,
        media_type="application/json",
        headers=CORS_HEADERS,
    )


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


# =============================================================================
# Routes
# =============================================================================

@router.post("/test-connection", response_model=ConnectionTestResponse)
async def test_connection(request: Request) -> JSONResponse:
    """Verify credentials with a minimal sales order request ($top=1)."""
    with with_correlation(request_id=uuid.uuid4().hex, operation="test_connection"):
        try:
            payload = await request.json()
        except ValueError:
            payload = None

        credentials = None
        if isinstance(payload, dict):
            try:
                credentials = CredentialsPayload.model_validate(payload).to_credentials()
            except ValidationError:
                credentials = None

        if credentials is None:
            logger.warning("Rejected connection test: missing credentials")
            return _json(400, ConnectionTestResponse(success=False, error=MISSING_CREDENTIALS).model_dump(exclude_none=True))

        try:
            upstream = await sap_upstream.probe_sales_orders(credentials)
        except Exception as e:
            logger.exception(f"Connection test error: {e}")
            return _json(
                500,
                ConnectionTestResponse(success=False, error=str(e) or "Connection test failed").model_dump(exclude_none=True),
            )

        if not upstream.ok:
            message = sap_upstream.describe_failure(upstream.status, upstream.reason, "Connection failed")
            logger.warning(f"Connection test failed: {message}", extra_fields={"status": upstream.status})
            return _json(
                upstream.status,
                ConnectionTestResponse(success=False, error=message).model_dump(exclude_none=True),
            )

        logger.info("Connection test succeeded")
        return _json(
            200,
            ConnectionTestResponse(success=True, message="Connection successful").model_dump(exclude_none=True),
        )


@router.options("/test-connection")
async def test_connection_preflight() -> Response:
    return _preflight()


@router.get("/sales-orders")
async def list_sales_orders(
    username: Optional[str] = Query(None),
    password: Optional[str] = Query(None),
    apiUrl: Optional[str] = Query(None),
    top: int = Query(50, ge=1, description="Maximum number of orders"),
    customer: Optional[str] = Query(None, description="Only orders for this sold-to party"),
    fromDate: Optional[date] = Query(None, description="Created on or after (YYYY-MM-DD)"),
    toDate: Optional[date] = Query(None, description="Created on or before (YYYY-MM-DD)"),
) -> Response:
    """List sales orders with line items, newest first.

    On success the SAP body ({"d": {"results": [...]}}) is relayed verbatim.
    """
    with with_correlation(request_id=uuid.uuid4().hex, operation="list_sales_orders"):
        credentials = CredentialsPayload(username=username, password=password, apiUrl=apiUrl).to_credentials()
        if credentials is None:
            logger.warning("Rejected sales order listing: missing credentials")
            return _error(400, MISSING_CREDENTIALS)

        if (fromDate is None) != (toDate is None):
            return _error(400, "fromDate and toDate must be given together")
        if fromDate and toDate and fromDate > toDate:
            return _error(400, "fromDate must not be after toDate")

        params = sap_upstream.build_listing_params(top, customer=customer, from_date=fromDate, to_date=toDate)

        try:
            upstream = await sap_upstream.fetch_sales_orders(credentials, params)
        except Exception as e:
            logger.exception(f"Proxy error: {e}")
            return _error(500, str(e) or "Internal server error")

        return _relay(upstream)


@router.options("/sales-orders")
async def list_sales_orders_preflight() -> Response:
    return _preflight()


@router.get("/sales-orders/{sales_order_id}")
async def get_sales_order(
    sales_order_id: str,
    username: Optional[str] = Query(None),
    password: Optional[str] = Query(None),
    apiUrl: Optional[str] = Query(None),
) -> Response:
    """Get one sales order with its line items ({"d": {...}} relayed verbatim)."""
    with with_correlation(
        request_id=uuid.uuid4().hex,
        operation="get_sales_order",
        sales_order_id=sales_order_id,
    ):
        credentials = CredentialsPayload(username=username, password=password, apiUrl=apiUrl).to_credentials()
        if credentials is None:
            logger.warning("Rejected sales order lookup: missing credentials")
            return _error(400, MISSING_CREDENTIALS)

        try:
            upstream = await sap_upstream.fetch_sales_order(credentials, sales_order_id)
        except Exception as e:
            logger.exception(f"Proxy error: {e}")
            return _error(500, str(e) or "Internal server error")

        return _relay(upstream)


@router.options("/sales-orders/{sales_order_id}")
async def get_sales_order_preflight(sales_order_id: str) -> Response:
    return _preflight()
