import logging
from typing import Callable, Dict, List, Optional

from .errors import TableNotFound
from .models import Order, Table

logger = logging.getLogger(__name__)


class TableStateStore:
    """
    Canonical table store: table number -> Table.

    The store knows nothing about sessions or the wire protocol. When a table
    is freed its active order is handed to `retire_order` so the ledger can
    drop it.
    """

    def __init__(self, retire_order: Optional[Callable[[str], object]] = None):
        self._tables: Dict[int, Table] = {}
        self._retire_order = retire_order

    def initialize(self, count: int, capacity: int = 4, label_prefix: str = "Table") -> None:
        self._tables = {
            n: Table(number=n, capacity=capacity, label=f"{label_prefix} {n}")
            for n in range(1, count + 1)
        }
        logger.info("Initialized %d tables (capacity %d)", count, capacity)

    def __len__(self) -> int:
        return len(self._tables)

    def get(self, number: int) -> Table:
        table = self._tables.get(number)
        if table is None:
            raise TableNotFound(number)
        return table

    def attach_device(self, number: int, device: str) -> Table:
        table = self.get(number)
        if device not in table.devices:
            table.devices.append(device)
        table.refresh_status()
        return table

    def detach_device(self, number: int, device: str) -> Table:
        table = self.get(number)
        table.devices = [d for d in table.devices if d != device]
        table.refresh_status()

        if not table.occupied and table.active_order is not None:
            order_id = table.active_order.id
            table.active_order = None
            if self._retire_order is not None:
                self._retire_order(order_id)
            logger.info("Table %s freed, order %s retired", number, order_id)
        return table

    def set_active_order(self, number: int, order: Order) -> Table:
        table = self.get(number)
        table.active_order = order
        return table

    def clear_active_order_if_matches(self, number: int, order_id: str) -> bool:
        table = self._tables.get(number)
        if table is None or table.active_order is None or table.active_order.id != order_id:
            return False
        table.active_order = None
        return True

    def tables_with_device(self, device: str) -> List[Table]:
        return [t for t in self.snapshot_all() if device in t.devices]

    def occupied_count(self) -> int:
        return sum(1 for t in self._tables.values() if t.occupied)

    def snapshot_all(self) -> List[Table]:
        return [self._tables[n] for n in sorted(self._tables)]
