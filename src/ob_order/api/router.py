# src/ob_order/api/router.py
"""ob_order REST endpoints.

POST   /orders                          — create (PENDING, priced)
GET    /orders                          — list with cursor pagination
GET    /orders/{order_id}               — detail
PATCH  /orders/{order_id}               — update while PENDING; `items` replaces the set
POST   /orders/{order_id}/status        — lifecycle transition
POST   /orders/{order_id}/delivery-status — delivery sub-status, any order status
DELETE /orders/{order_id}
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_common.database import get_db_session
from src.ob_common.enums import OrderStatus
from src.ob_common.response import ApiResponse, success_response
from src.ob_gateway.auth.dependencies import Principal, get_current_principal
from src.ob_order.application.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    DeliveryStatusRequest,
    UpdateOrderRequest,
)
from src.ob_order.application.service import OrderApplicationService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderApplicationService()


def _wrap(request: Request, data: object) -> ApiResponse:
    return success_response(data, getattr(request.state, "request_id", None))


@router.post("", status_code=201)
async def create_order(
    req: CreateOrderRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_order(db, principal.org_id, req)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("")
async def list_orders(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: OrderStatus | None = Query(None, description="Filter by order status"),
    customer_id: str | None = Query(None, description="Filter by customer"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    cursor: str | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    result = await _service.list_orders(
        db,
        principal.org_id,
        status.value if status else None,
        customer_id,
        cursor,
        limit,
    )
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_order(db, principal.org_id, order_id)
    return _wrap(request, result.model_dump(mode="json"))


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    req: UpdateOrderRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_order(db, principal.org_id, order_id, req)
    return _wrap(request, result.model_dump(mode="json"))


@router.post("/{order_id}/status")
async def change_status(
    order_id: str,
    req: ChangeStatusRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.change_status(db, principal.org_id, order_id, req)
    return _wrap(request, result.model_dump(mode="json"))


@router.post("/{order_id}/delivery-status")
async def update_delivery_status(
    order_id: str,
    req: DeliveryStatusRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_delivery_status(db, principal.org_id, order_id, req)
    return _wrap(request, result.model_dump(mode="json"))


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_order(db, principal.org_id, order_id)
    return _wrap(request, {"order_id": order_id})
