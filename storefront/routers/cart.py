from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.core.security import Principal
from storefront.models.cart import CartItemCreate, CartItemUpdate, CartLineView, CartSummary
from storefront.routers.auth import get_current_principal
from storefront.services.cart import CartService

router = APIRouter()

def get_cart_service(session: Session = Depends(get_session)) -> CartService:
    return CartService(session)

@router.get("/", response_model=List[CartLineView])
def get_cart(principal: Principal = Depends(get_current_principal), service: CartService = Depends(get_cart_service)):
    """Get user's cart items"""
    return service.list_cart(principal.user_id)

@router.get("/summary", response_model=CartSummary)
def get_cart_summary(principal: Principal = Depends(get_current_principal), service: CartService = Depends(get_cart_service)):
    return service.cart_summary(principal.user_id)

@router.post("/add", response_model=CartLineView, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    cart_item: CartItemCreate,
    principal: Principal = Depends(get_current_principal),
    service: CartService = Depends(get_cart_service)
):
    """Add item to cart"""
    return service.add_to_cart(principal.user_id, cart_item.item_id, cart_item.quantity)

@router.put("/update/{cart_item_id}")
def update_cart_item(
    cart_item_id: int,
    cart_update: CartItemUpdate,
    principal: Principal = Depends(get_current_principal),
    service: CartService = Depends(get_cart_service)
):
    """Update cart item quantity; below 1 removes the line"""
    line = service.update_quantity(principal.user_id, cart_item_id, cart_update.quantity)
    if line is None:
        return {"message": "Item removed from cart"}
    return line

@router.delete("/remove/{cart_item_id}")
def remove_from_cart(
    cart_item_id: int,
    principal: Principal = Depends(get_current_principal),
    service: CartService = Depends(get_cart_service)
):
    """Remove item from cart"""
    service.remove_from_cart(principal.user_id, cart_item_id)
    return {"message": "Item removed from cart"}

@router.delete("/clear")
def clear_cart(
    principal: Principal = Depends(get_current_principal),
    service: CartService = Depends(get_cart_service)
):
    """Clear entire cart"""
    removed = service.clear_cart(principal.user_id)
    return {"message": "Cart cleared", "removed": removed}
