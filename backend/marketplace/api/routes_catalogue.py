from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from sqlalchemy.orm import Session
from marketplace.db import get_db
from marketplace.repositories.product_repo import ProductRepository
from marketplace.schemas.product_schema import ProductOut, ProductPage

router = APIRouter(tags=["catalogue"])

@router.get("", summary="List products", response_model=ProductPage)
def list_products(
    q: Optional[str] = Query(None, description="search term"),
    store_id: Optional[int] = Query(None, description="only products of this store"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    repo = ProductRepository(db)
    items, total = repo.list(q=q, store_id=store_id, page=page, size=size)
    return {
        "items": [ProductOut.model_validate(p) for p in items],
        "total": total,
    }

@router.get("/{product_id}", summary="Get product by id", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    repo = ProductRepository(db)
    p = repo.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductOut.model_validate(p)
