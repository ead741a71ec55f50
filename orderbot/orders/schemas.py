# -*- coding: utf-8 -*-
"""
Pydantic schemas for orders, payments and per-business analytics.
"""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING    = "PENDING"
    CONFIRMED  = "CONFIRMED"
    PROCESSING = "PROCESSING"
    COMPLETED  = "COMPLETED"
    CANCELLED  = "CANCELLED"


class PaymentMethod(str, Enum):
    PENDING = "PENDING"
    UPI     = "UPI"
    ONLINE  = "ONLINE"
    COD     = "COD"


class PaymentStatus(str, Enum):
    PENDING   = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED    = "FAILED"


class ChatSender(str, Enum):
    CUSTOMER = "CUSTOMER"
    BOT      = "BOT"
    BUSINESS = "BUSINESS"


class OrderItem(BaseModel):
    product_id: str
    name:       str
    quantity:   int   = Field(..., gt=0)
    price:      float = Field(..., ge=0)


class PaymentDetails(BaseModel):
    method:         PaymentMethod = PaymentMethod.PENDING
    status:         PaymentStatus = PaymentStatus.PENDING
    transaction_id: Optional[str] = None
    amount:         float
    timestamp:      datetime      = Field(default_factory=datetime.now)


class ChatEntry(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    message:   str
    sender:    ChatSender


class Order(BaseModel):
    id:                   str
    business_id:          str
    customer_id:          str
    items:                List[OrderItem]
    total_amount:         float
    status:               OrderStatus     = OrderStatus.PENDING
    payment:              PaymentDetails
    language:             str
    delivery_address:     Optional[str]   = None
    special_instructions: Optional[str]   = None
    created_at:           datetime        = Field(default_factory=datetime.now)
    updated_at:           datetime        = Field(default_factory=datetime.now)
    chat_history:         List[ChatEntry] = Field(default_factory=list)


class ProductStat(BaseModel):
    product_id:  str
    name:        str
    order_count: int
    revenue:     float


class PaymentMethodStat(BaseModel):
    method:       str
    count:        int
    total_amount: float


class OrderAnalytics(BaseModel):
    total_orders:         int   = 0
    completed_orders:     int   = 0
    cancelled_orders:     int   = 0
    total_revenue:        float = 0.0
    average_order_value:  float = 0.0
    popular_products:     List[ProductStat]       = Field(default_factory=list)
    payment_method_stats: List[PaymentMethodStat] = Field(default_factory=list)
