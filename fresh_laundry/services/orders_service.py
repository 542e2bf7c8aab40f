import logging
from collections import defaultdict
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from fresh_laundry.core.errors import Internal, InvalidInput, NotFound
from fresh_laundry.db.session import Database
from fresh_laundry.models.schemas import OrderItemIn
from fresh_laundry.models.tables import Order, OrderItem, OrderStatus, User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ID = 1


class OrdersService:
    def __init__(self, database: Database):
        self.database = database

    def place_order(
        self,
        user_id: int,
        pickup_date: date,
        pickup_time: str,
        delivery_option: str,
        total_price: float,
        items: Sequence[OrderItemIn],
    ) -> int:
        """
        Write the order and all of its items in one transaction.

        Either the order row and every item row are committed together or
        nothing is; a failure after the order insert rolls the order back.
        """
        if not items:
            raise InvalidInput("Cannot place an empty order.")

        try:
            with self.database.session() as session:
                order = Order(
                    user_id=user_id,
                    pickup_date=pickup_date,
                    pickup_time=pickup_time,
                    delivery_option=delivery_option,
                    total_price=total_price,
                    status=OrderStatus.PENDING.value,
                )
                session.add(order)
                session.flush()
                order_id = order.id

                self._insert_items(session, order_id, items)
        except SQLAlchemyError as e:
            orig = getattr(e, "orig", None) or e
            logger.error(
                "ORDER TRANSACTION FAILED, rolled back. Error: %s, SQL message: %s",
                type(orig).__name__,
                orig,
            )
            raise Internal("Failed to place order. Database rollback occurred.", error=str(orig))

        logger.info("Order %s placed for user %s with %d item(s)", order_id, user_id, len(items))
        return order_id

    def _insert_items(self, session, order_id: int, items: Sequence[OrderItemIn]):
        rows = [
            {
                "order_id": order_id,
                "category_id": item.category_id or DEFAULT_CATEGORY_ID,
                "item_id": item.item_id,
                "item_name": item.title,
                "quantity": item.quantity,
                "price_per_unit": item.price_per_unit,
            }
            for item in items
        ]
        session.execute(insert(OrderItem), rows)

    def get_all(self) -> List[dict]:
        """All orders, newest first, each with its customer's name and items."""
        try:
            with self.database.session() as session:
                rows = session.execute(
                    self._orders_query().order_by(Order.created_at.desc(), Order.id.desc())
                ).all()
                items_by_order = self._items_for(session, [order.id for order, _ in rows])
        except SQLAlchemyError as e:
            logger.error("FETCH ERROR: %s", e, exc_info=True)
            raise Internal("Failed to fetch orders")

        return [self._serialize(order, client_name, items_by_order[order.id]) for order, client_name in rows]

    def get_by_id(self, order_id: int) -> dict:
        try:
            with self.database.session() as session:
                row = session.execute(self._orders_query().where(Order.id == order_id)).first()
                if row is None:
                    raise NotFound("Order not found")
                order, client_name = row
                items = self._items_for(session, [order.id])[order.id]
        except SQLAlchemyError as e:
            logger.error("Fetch order %s error: %s", order_id, e, exc_info=True)
            raise Internal("Failed to fetch order")

        return self._serialize(order, client_name, items)

    def set_status(self, order_id: int, status: Optional[str]) -> str:
        if status not in OrderStatus.values():
            raise InvalidInput("Invalid status value")

        try:
            with self.database.session() as session:
                result = session.execute(
                    update(Order).where(Order.id == order_id).values(status=status)
                )
                if result.rowcount == 0:
                    raise NotFound("Order not found")
        except SQLAlchemyError as e:
            logger.error("Update Error: %s", e, exc_info=True)
            raise Internal("Failed to update order status")

        logger.info("Order %s status set to %r", order_id, status)
        return status

    @staticmethod
    def _orders_query():
        return select(Order, User.name.label("client_name")).join(User, Order.user_id == User.id)

    @staticmethod
    def _items_for(session, order_ids: List[int]):
        # One query for every requested order instead of one per order.
        items_by_order = defaultdict(list)
        if not order_ids:
            return items_by_order
        items = session.execute(
            select(OrderItem).where(OrderItem.order_id.in_(order_ids)).order_by(OrderItem.id)
        ).scalars()
        for item in items:
            items_by_order[item.order_id].append(
                {
                    "categoryId": item.category_id,
                    "id": item.item_id,
                    "title": item.item_name,
                    "quantity": item.quantity,
                    "pricePerUnit": item.price_per_unit,
                }
            )
        return items_by_order

    @staticmethod
    def _serialize(order: Order, client_name: str, items: List[dict]) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "client_name": client_name,
            "pickup_date": order.pickup_date,
            "pickup_time": order.pickup_time,
            "delivery_option": order.delivery_option,
            "total_price": order.total_price,
            "status": order.status,
            "created_at": order.created_at,
            "items": items,
        }
