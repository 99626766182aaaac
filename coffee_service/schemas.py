from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "preparing", "ready", "completed", "cancelled"]
Number = Union[int, float]


class HealthResponse(BaseModel):
    status: Literal["OK"]
    timestamp: str


class MenuItem(BaseModel):
    id: int
    name: str
    price: Number
    description: str


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    price: Number
    description: Optional[str] = None


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Presence and emptiness are checked by OrderService.
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    items: Optional[List[OrderItem]] = None
    total: Optional[Number] = None


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    customer_name: str = Field(..., alias="customerName")
    items: List[OrderItem]
    total: Optional[Number]
    timestamp: str
    status: OrderStatus


class MenuResponse(BaseModel):
    success: bool = True
    data: List[MenuItem]


class OrderResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Order


class OrderListResponse(BaseModel):
    success: bool = True
    data: List[Order]


class DeleteResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
