from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .. import state
from ..broadcast import emit_all, publish_tables, server_status, tables_snapshot
from ..models import OrderStatus
from ..protocol import Out

router = APIRouter(tags=["floor"])


@router.get("/tables")
async def list_tables():
    return {"tables": tables_snapshot()}


@router.get("/orders")
async def list_orders(status: Optional[OrderStatus] = None):
    orders = state.orders.query_by_status(status) if status else state.orders.all()
    return {"orders": [o.model_dump(mode="json") for o in orders]}


@router.get("/status")
async def hub_status():
    return server_status()


@router.delete("/orders/{order_id}")
async def remove_order(order_id: str):
    async with state.hub_lock:
        order = state.orders.remove(order_id)
        if order is None:
            return JSONResponse({"error": "order not found"}, status_code=404)

        state.tables.clear_active_order_if_matches(order.table, order.id)
        await emit_all(Out.ORDER_REMOVED, {"order_id": order.id, "table": order.table})
        await publish_tables()

    return {"order_id": order.id, "status": "REMOVED"}
