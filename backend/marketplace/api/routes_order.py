import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from marketplace.api.deps import current_user_id
from marketplace.db import get_db
from marketplace.schemas.order_schema import (
    CreateOrderIn,
    OrderEventOut,
    OrderOut,
    UpdateOrderIn,
    UpdateOrderStatusIn,
)
from marketplace.services.errors import ServiceException
from marketplace.services.order_service import OrderService

router = APIRouter(tags=["orders"])
log = logging.getLogger("marketplace.api.orders")


def _http_error(e: ServiceException) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", summary="Create order (checkout)", status_code=status.HTTP_201_CREATED, response_model=OrderOut)
def create_order(
    payload: CreateOrderIn,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        order = svc.create(user_id, payment_method=payload.payment_method, notes=payload.notes)
        return OrderOut.model_validate(order)
    except ServiceException as e:
        raise _http_error(e)
    except Exception as e:
        log.exception("Checkout failed for user %s", user_id)
        raise HTTPException(status_code=500, detail=f"Internal server error: {type(e).__name__}")


@router.get("", summary="List my orders", response_model=List[OrderOut])
def my_orders(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        return [OrderOut.model_validate(o) for o in svc.find_by_client(user_id)]
    except ServiceException as e:
        raise _http_error(e)


@router.get("/all", summary="List all orders", response_model=List[OrderOut])
def all_orders(limit: int = 100, db: Session = Depends(get_db)):
    svc = OrderService(db)
    return [OrderOut.model_validate(o) for o in svc.find_all(limit=limit)]


@router.get("/store", summary="List orders of my store", response_model=List[OrderOut])
def my_store_orders(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        return [OrderOut.model_validate(o) for o in svc.find_by_store_owner(user_id)]
    except ServiceException as e:
        raise _http_error(e)


@router.get("/store/{store_id}", summary="List orders of a store", response_model=List[OrderOut])
def store_orders(store_id: int, db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        return [OrderOut.model_validate(o) for o in svc.find_by_store(store_id)]
    except ServiceException as e:
        raise _http_error(e)


@router.get("/{order_id}", summary="Get order", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        return OrderOut.model_validate(svc.find_by_id(order_id))
    except ServiceException as e:
        raise _http_error(e)


@router.get("/{order_id}/events", summary="Order timeline", response_model=List[OrderEventOut])
def order_events(order_id: int, db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        return [OrderEventOut.model_validate(ev) for ev in svc.history(order_id)]
    except ServiceException as e:
        raise _http_error(e)


@router.patch("/{order_id}", summary="Update order notes", response_model=OrderOut)
def update_order(
    order_id: int,
    payload: UpdateOrderIn,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        return OrderOut.model_validate(svc.update(order_id, payload.notes, user_id=user_id))
    except ServiceException as e:
        raise _http_error(e)


@router.patch("/{order_id}/status", summary="Move order to next status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: UpdateOrderStatusIn,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        order = svc.update_status(order_id, payload.status, actor=f"user:{user_id}")
        return OrderOut.model_validate(order)
    except ServiceException as e:
        raise _http_error(e)


@router.patch("/{order_id}/cancel", summary="Cancel order", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        return OrderOut.model_validate(svc.cancel_order(order_id, user_id=user_id))
    except ServiceException as e:
        raise _http_error(e)


@router.delete("/{order_id}", summary="Remove pending order", status_code=status.HTTP_204_NO_CONTENT)
def remove_order(
    order_id: int,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        svc.remove(order_id, user_id=user_id)
    except ServiceException as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
