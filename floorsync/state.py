import asyncio
from typing import Optional

from .config import Settings, settings as default_settings
from .connections import ConnectionRegistry
from .orders import OrderLedger
from .tables import TableStateStore

# In-memory stores, rebuilt by reset() at application startup
orders = OrderLedger()
tables = TableStateStore(retire_order=orders.remove)
connections = ConnectionRegistry()

# Every inbound event is handled to completion under this lock
hub_lock = asyncio.Lock()

settings = default_settings


def reset(config: Optional[Settings] = None) -> None:
    global orders, tables, connections, hub_lock, settings

    settings = config or default_settings
    orders = OrderLedger()
    tables = TableStateStore(retire_order=orders.remove)
    tables.initialize(settings.table_count, settings.table_capacity, settings.table_label_prefix)
    connections = ConnectionRegistry()
    hub_lock = asyncio.Lock()


reset()
