import itertools
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import OrderNotFound
from .helpers import money
from .models import LineItem, Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderLedger:
    """Canonical order store: order id -> Order, in creation order."""

    def __init__(self):
        self._orders: Dict[str, Order] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._orders

    def get(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def all(self) -> List[Order]:
        return list(self._orders.values())

    def create(
        self,
        table: int,
        items: Iterable[LineItem] = (),
        total: Optional[float] = None,
        device: Optional[str] = None,
    ) -> Order:
        """
        Create a pending order for a table.

        When `total` is given it is kept as an override and never recomputed
        from the items; otherwise the total is the sum of the priced lines.
        """
        items = list(items)
        if total is None:
            total = sum(item.line_total() for item in items)

        order = Order(id=f"ord_{next(self._ids)}", table=table, items=items, total=total, device=device)
        self._orders[order.id] = order
        logger.info("Order %s created for table %s (total %s)", order.id, table, money(order.total))
        return order

    def add_item(self, order_id: str, item: LineItem) -> Order:
        order = self.get(order_id)
        order.items.append(item)
        # quantity-only lines leave the total alone
        if item.price:
            order.total = order.total + item.line_total()
        return order

    def transition(self, order_id: str, status: OrderStatus) -> Tuple[Order, OrderStatus]:
        """Move an order to any status. No edge is rejected, closed included."""
        order = self.get(order_id)
        previous = order.status
        order.status = OrderStatus(status)
        logger.info("Order %s: %s -> %s", order_id, previous.value, order.status.value)
        return order, previous

    def remove(self, order_id: str) -> Optional[Order]:
        order = self._orders.pop(order_id, None)
        if order is not None:
            logger.info("Order %s retired", order_id)
        return order

    def query_by_status(self, status: OrderStatus) -> List[Order]:
        status = OrderStatus(status)
        return [o for o in self._orders.values() if o.status == status]
