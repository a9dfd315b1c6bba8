from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from marketplace.api.deps import current_user_id
from marketplace.db import get_db
from marketplace.schemas.cart_schema import AddItemIn, CartOut, UpdateItemIn
from marketplace.services.cart_service import CartService
from marketplace.services.errors import ServiceException

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _out(cart) -> CartOut:
    return CartOut.model_validate(cart)


@router.get("", summary="Get cart", response_model=CartOut)
def get_cart(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return _out(svc.get_cart(user_id))
    except ServiceException as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/items", summary="Add item to cart", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return _out(svc.add_item(user_id, payload.product_id, payload.quantity))
    except ServiceException as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/items/{item_id}", summary="Change item quantity", response_model=CartOut)
def update_item(
    item_id: int,
    payload: UpdateItemIn,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return _out(svc.update_item(user_id, item_id, payload.quantity))
    except ServiceException as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/items/{item_id}", summary="Remove item", response_model=CartOut)
def remove_item(
    item_id: int,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return _out(svc.remove_item(user_id, item_id))
    except ServiceException as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("", summary="Empty cart", response_model=CartOut)
def clear_cart(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return _out(svc.clear(user_id))
    except ServiceException as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
