from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.core.security import Principal
from storefront.models.order import OrderStatusChange, OrderStatusUpdate, OrderView
from storefront.routers.auth import get_current_principal
from storefront.services.order import OrderService

router = APIRouter()

def get_order_service(session: Session = Depends(get_session)) -> OrderService:
    return OrderService(session)

@router.post("/checkout", response_model=OrderView, status_code=status.HTTP_201_CREATED)
def checkout(
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service)
):
    """Turn the caller's cart into a PENDING order"""
    return service.checkout(principal.user_id)

@router.get("/", response_model=List[OrderView])
def list_my_orders(
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1, le=100),
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service)
):
    return service.list_my_orders(principal.user_id, page=page, size=size)

@router.get("/{order_id}", response_model=OrderView)
def get_order(
    order_id: int,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service)
):
    return service.get_order(order_id, principal.user_id, principal.role)

@router.get("/{order_id}/history", response_model=List[OrderStatusChange])
def get_order_history(
    order_id: int,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service)
):
    return service.status_history(order_id, principal.user_id, principal.role)

@router.patch("/{order_id}/status", response_model=OrderView)
def update_order_status(
    order_id: int,
    status_update: OrderStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service)
):
    """Advance or cancel an order. Admin only."""
    return service.set_order_status(order_id, status_update.status, principal.user_id, principal.role)
