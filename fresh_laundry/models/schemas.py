from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import date, datetime


# Accounts
class RegisterRequest(BaseModel):
    # Presence is checked by the accounts service so every kind reports the same message.
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class AccountOut(BaseModel):
    id: int
    name: str
    email: str


class UserRegistered(BaseModel):
    message: str
    user: AccountOut


class AdminRegistered(BaseModel):
    message: str
    admin: AccountOut


class UserLoggedIn(BaseModel):
    message: str
    token: str
    user: AccountOut


class AdminLoggedIn(BaseModel):
    message: str
    token: str
    admin: AccountOut


# Orders
class OrderItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category_id: Optional[int] = Field(None, alias="categoryId")
    item_id: int = Field(..., alias="id")
    title: str
    quantity: int = Field(..., gt=0)
    price_per_unit: float = Field(..., alias="pricePerUnit")


class OrderItemOut(OrderItemIn):
    category_id: int = Field(..., alias="categoryId")


class PlaceOrderRequest(BaseModel):
    user_id: int
    pickup_date: date
    pickup_time: str
    delivery_option: str
    total_price: float
    items: List[OrderItemIn] = []


class OrderPlaced(BaseModel):
    message: str
    orderId: int


class OrderOut(BaseModel):
    id: int
    user_id: int
    client_name: str
    pickup_date: Optional[date] = None
    pickup_time: Optional[str] = None
    delivery_option: Optional[str] = None
    total_price: float
    status: str
    created_at: datetime
    items: List[OrderItemOut]


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class StatusUpdated(BaseModel):
    success: bool
    message: str


# Dashboard
class StatsOut(BaseModel):
    pending: int
    in_wash: int
    finished: int
    total_revenue: float
