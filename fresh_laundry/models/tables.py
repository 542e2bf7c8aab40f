from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, Integer, String, ForeignKey, Float, Date, DateTime
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


class OrderStatus(str, Enum):
    # Any status may follow any other; there is no transition graph.
    PENDING = "pending"
    IN_WASH = "in wash"
    FINISHED = "finished"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    orders = relationship("Order", back_populates="user")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    pickup_date = Column(Date)
    pickup_time = Column(String(50))
    delivery_option = Column(String(100))
    total_price = Column(Float, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    category_id = Column(Integer, nullable=False, default=1)
    item_id = Column(Integer)
    item_name = Column(String(255))
    quantity = Column(Integer, nullable=False)
    price_per_unit = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")
