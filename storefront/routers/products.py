from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.models.catalog import CatalogItemRead
from storefront.services.catalog import CatalogService

router = APIRouter()

def get_catalog_service(session: Session = Depends(get_session)) -> CatalogService:
    return CatalogService(session)

@router.get("/", response_model=List[CatalogItemRead])
def read_products(q: Optional[str] = None, service: CatalogService = Depends(get_catalog_service)):
    if q:
        return service.search(q)
    return service.list_items()

@router.get("/{item_id}", response_model=CatalogItemRead)
def read_product(item_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_item(item_id)
