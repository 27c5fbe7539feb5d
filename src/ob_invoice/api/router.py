# src/ob_invoice/api/router.py
"""ob_invoice REST endpoints.

POST   /invoices                      — create a DRAFT invoice from an order
GET    /invoices                      — list with cursor pagination
GET    /invoices/{invoice_id}         — detail
POST   /invoices/{invoice_id}/issue   — DRAFT → ISSUED
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_common.database import get_db_session
from src.ob_common.enums import InvoiceStatus
from src.ob_common.response import ApiResponse, success_response
from src.ob_gateway.auth.dependencies import Principal, get_current_principal
from src.ob_invoice.application.schemas import CreateInvoiceRequest
from src.ob_invoice.application.service import InvoiceApplicationService

router = APIRouter(prefix="/invoices", tags=["invoices"])

_service = InvoiceApplicationService()


def _wrap(request: Request, data: object) -> ApiResponse:
    return success_response(data, getattr(request.state, "request_id", None))


@router.post("", status_code=201)
async def create_invoice(
    req: CreateInvoiceRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_invoice(db, principal.org_id, req)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("")
async def list_invoices(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: InvoiceStatus | None = Query(None, description="Filter by invoice status"),
    order_id: str | None = Query(None, description="Filter by source order"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    cursor: str | None = Query(None, description="Pagination cursor (invoice ID)"),
) -> ApiResponse:
    result = await _service.list_invoices(
        db,
        principal.org_id,
        status.value if status else None,
        order_id,
        cursor,
        limit,
    )
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/{invoice_id}")
async def get_invoice(
    invoice_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_invoice(db, principal.org_id, invoice_id)
    return _wrap(request, result.model_dump(mode="json"))


@router.post("/{invoice_id}/issue")
async def issue_invoice(
    invoice_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.issue_invoice(db, principal.org_id, invoice_id)
    return _wrap(request, result.model_dump(mode="json"))
