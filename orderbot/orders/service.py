# -*- coding: utf-8 -*-
"""
Order service consumed by the bot dispatcher.

The dispatcher only needs `create_order`; the rest (status, payments,
chat history, analytics) backs the HTTP surface. Orders live in memory —
storage is owned by whatever service replaces this one in production.
"""
from __future__ import annotations

import time
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Sequence

from orderbot.errors import OrderNotFoundError, OutOfStockError, ProductNotFoundError
from orderbot.orders.catalog import ProductCatalog
from orderbot.orders.schemas import (
    ChatEntry, ChatSender, Order, OrderAnalytics, OrderItem, OrderStatus,
    PaymentDetails, PaymentMethod, PaymentMethodStat, PaymentStatus, ProductStat,
)
from orderbot.schemas import OrderLine
from orderbot.utils.logger import get_logger

logger = get_logger(__name__)


class OrderService(Protocol):
    async def create_order(
        self,
        business_id: str,
        customer_id: str,
        items: Sequence[OrderLine],
        language: str,
    ) -> Order:
        ...


class InMemoryOrderService:
    """Prices extracted order lines against a ProductCatalog and keeps orders in a dict."""

    def __init__(self, catalog: ProductCatalog):
        self.catalog = catalog
        self._orders: Dict[str, Order] = {}

    def _new_id(self) -> str:
        ms = int(time.time() * 1000)
        while f"ORD{ms}" in self._orders:
            ms += 1
        return f"ORD{ms}"

    async def create_order(
        self,
        business_id: str,
        customer_id: str,
        items: Sequence[OrderLine],
        language: str,
        delivery_address: Optional[str] = None,
        special_instructions: Optional[str] = None,
    ) -> Order:
        priced: List[OrderItem] = []
        requested: Dict[str, int] = {}
        for line in items:
            product = self.catalog.find(line.name)
            if product is None:
                raise ProductNotFoundError(line.name)
            # "pizza" and "pizzas" on separate lines draw on the same stock
            requested[product.id] = requested.get(product.id, 0) + line.quantity
            if not product.in_stock(requested[product.id]):
                raise OutOfStockError(product.name, requested[product.id], product.stock or 0)
            priced.append(OrderItem(
                product_id=product.id,
                name=product.name,
                quantity=line.quantity,
                price=product.price,
            ))

        # all lines validated — only now reserve stock
        for item in priced:
            product = self.catalog.get(item.product_id)
            if product.stock is not None:
                product.stock -= item.quantity

        total = sum(i.price * i.quantity for i in priced)
        order = Order(
            id=self._new_id(),
            business_id=business_id,
            customer_id=customer_id,
            items=priced,
            total_amount=total,
            payment=PaymentDetails(amount=total),
            language=language,
            delivery_address=delivery_address,
            special_instructions=special_instructions,
        )
        self._orders[order.id] = order
        logger.info(
            "Order %s created: business=%s items=%d total=%.2f",
            order.id, business_id, len(priced), total,
        )
        return order

    async def get_order(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        order = await self.get_order(order_id)
        order.status = status
        order.updated_at = datetime.now()
        logger.info("Order %s → %s", order_id, status.value)
        return order

    async def process_payment(
        self,
        order_id: str,
        method: PaymentMethod,
        transaction_id: Optional[str] = None,
    ) -> PaymentDetails:
        order = await self.get_order(order_id)
        payment = PaymentDetails(
            method=method,
            transaction_id=transaction_id,
            amount=order.total_amount,
        )
        # UPI / ONLINE settle asynchronously through the gateway
        if method == PaymentMethod.COD:
            payment.status = PaymentStatus.COMPLETED
        order.payment = payment
        order.updated_at = datetime.now()
        logger.info("Payment for %s: method=%s status=%s", order_id, method.value, payment.status.value)
        return payment

    async def add_chat_message(self, order_id: str, message: str, sender: ChatSender) -> ChatEntry:
        order = await self.get_order(order_id)
        entry = ChatEntry(message=message, sender=sender)
        order.chat_history.append(entry)
        return entry

    async def get_order_analytics(self, business_id: str) -> OrderAnalytics:
        orders = [o for o in self._orders.values() if o.business_id == business_id]
        if not orders:
            return OrderAnalytics()

        live      = [o for o in orders if o.status != OrderStatus.CANCELLED]
        revenue   = sum(o.total_amount for o in live)
        products: Dict[str, ProductStat] = {}
        methods   = defaultdict(lambda: [0, 0.0])

        for o in live:
            for item in o.items:
                stat = products.setdefault(
                    item.product_id,
                    ProductStat(product_id=item.product_id, name=item.name, order_count=0, revenue=0.0),
                )
                stat.order_count += 1
                stat.revenue += item.price * item.quantity
            methods[o.payment.method.value][0] += 1
            methods[o.payment.method.value][1] += o.total_amount

        return OrderAnalytics(
            total_orders=len(orders),
            completed_orders=sum(1 for o in orders if o.status == OrderStatus.COMPLETED),
            cancelled_orders=len(orders) - len(live),
            total_revenue=revenue,
            average_order_value=revenue / len(live) if live else 0.0,
            popular_products=sorted(products.values(), key=lambda s: (-s.order_count, -s.revenue)),
            payment_method_stats=[
                PaymentMethodStat(method=m, count=c, total_amount=t)
                for m, (c, t) in sorted(methods.items())
            ],
        )
