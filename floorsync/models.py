from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .helpers import utcnow


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    CLOSED = "closed"


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class LineItem(BaseModel):
    """A single order line. Fields other than price/quantity are carried as-is."""

    model_config = ConfigDict(extra="allow")

    price: Optional[float] = None
    quantity: Optional[int] = None

    def line_total(self) -> float:
        if not self.price:
            return 0
        return self.price * max(self.quantity or 1, 1)


class Order(BaseModel):
    id: str
    table: int
    items: List[LineItem] = Field(default_factory=list)
    total: float = 0
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    device: Optional[str] = None


class Table(BaseModel):
    number: int
    occupied: bool = False
    devices: List[str] = Field(default_factory=list)
    active_order: Optional[Order] = None
    capacity: int = 4
    label: str = ""
    status: TableStatus = TableStatus.AVAILABLE

    def refresh_status(self) -> None:
        # occupied and status both follow the device set
        self.occupied = bool(self.devices)
        self.status = TableStatus.OCCUPIED if self.occupied else TableStatus.AVAILABLE
