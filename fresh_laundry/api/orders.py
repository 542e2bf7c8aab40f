from typing import List

from fastapi import APIRouter, Depends, status

from fresh_laundry.api.deps import get_orders_service, require_admin
from fresh_laundry.models.schemas import OrderOut, OrderPlaced, PlaceOrderRequest, StatusUpdate, StatusUpdated
from fresh_laundry.services.orders_service import OrdersService

router = APIRouter()


@router.post("/place_order", response_model=OrderPlaced, status_code=status.HTTP_201_CREATED)
def place_order(payload: PlaceOrderRequest, orders: OrdersService = Depends(get_orders_service)):
    order_id = orders.place_order(
        payload.user_id,
        payload.pickup_date,
        payload.pickup_time,
        payload.delivery_option,
        payload.total_price,
        payload.items,
    )
    return {"message": "Order placed successfully", "orderId": order_id}


@router.get("/orders", response_model=List[OrderOut], dependencies=[Depends(require_admin)])
def list_orders(orders: OrdersService = Depends(get_orders_service)):
    return orders.get_all()


@router.get("/orders/{order_id}", response_model=OrderOut, dependencies=[Depends(require_admin)])
def get_order(order_id: int, orders: OrdersService = Depends(get_orders_service)):
    return orders.get_by_id(order_id)


@router.put("/orders/{order_id}/status", response_model=StatusUpdated, dependencies=[Depends(require_admin)])
def update_status(order_id: int, payload: StatusUpdate, orders: OrdersService = Depends(get_orders_service)):
    new_status = orders.set_status(order_id, payload.status)
    return {"success": True, "message": f"Order status updated to {new_status}"}
