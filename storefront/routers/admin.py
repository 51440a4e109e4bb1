from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.core.exceptions import Forbidden
from storefront.core.security import Principal
from storefront.models.catalog import CatalogItemCreate, CatalogItemRead, PriceUpdate, StockUpdate
from storefront.models.order import OrderStatus, OrderView
from storefront.routers.auth import get_current_principal
from storefront.services.catalog import CatalogService
from storefront.services.order import OrderService

router = APIRouter()

def get_admin_principal(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Get admin principal with role check"""
    if not principal.is_admin:
        raise Forbidden("Admin access required")
    return principal

def get_catalog_service(session: Session = Depends(get_session)) -> CatalogService:
    return CatalogService(session)

def get_order_service(session: Session = Depends(get_session)) -> OrderService:
    return OrderService(session)

# Order endpoints
@router.get("/orders", response_model=List[OrderView])
def get_orders(
    page: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=100),
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    admin: Principal = Depends(get_admin_principal),
    service: OrderService = Depends(get_order_service)
):
    """Get all orders, newest first, optionally filtered by status"""
    return service.list_orders(admin.role, status=order_status, page=page, size=limit)

# Catalog upkeep
@router.get("/products", response_model=List[CatalogItemRead])
def get_products(
    admin: Principal = Depends(get_admin_principal),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.list_items(include_inactive=True)

@router.post("/products", response_model=CatalogItemRead, status_code=status.HTTP_201_CREATED)
def create_product(
    item_in: CatalogItemCreate,
    admin: Principal = Depends(get_admin_principal),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.create_item(item_in)

@router.put("/products/{item_id}/stock", response_model=CatalogItemRead)
def update_product_stock(
    item_id: int,
    stock_update: StockUpdate,
    admin: Principal = Depends(get_admin_principal),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.set_stock(item_id, stock_update.stock_quantity)

@router.put("/products/{item_id}/price", response_model=CatalogItemRead)
def update_product_price(
    item_id: int,
    price_update: PriceUpdate,
    admin: Principal = Depends(get_admin_principal),
    service: CatalogService = Depends(get_catalog_service)
):
    """Reprice an item. Orders already placed keep their frozen prices."""
    return service.set_price(item_id, price_update.unit_price)
