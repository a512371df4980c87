import logging
from typing import Any, Awaitable, Callable, Dict

from . import state
from .broadcast import (
    emit_all,
    emit_others,
    emit_room,
    publish_tables,
    reply,
    reply_error,
    server_status,
    tables_snapshot,
)
from .connections import Session
from .errors import HubError, UnknownEvent
from .models import OrderStatus, Table
from .protocol import (
    AddOrderItemRequest,
    CreateOrderRequest,
    Frame,
    IdentifyPayload,
    In,
    OrderStatusRequest,
    OrdersByStatusRequest,
    Out,
    RolePayload,
    RoomPayload,
    TableRequest,
    parse_frame,
    parse_payload,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Session, Any], Awaitable[None]]
HANDLERS: Dict[str, Handler] = {}


def on(event: str):
    def register(fn: Handler) -> Handler:
        HANDLERS[event] = fn
        return fn
    return register


async def handle_text(session: Session, raw: str) -> None:
    try:
        frame = parse_frame(raw)
    except HubError as err:
        await reply_error(session, err)
        return
    await dispatch(session, frame)


async def dispatch(session: Session, frame: Frame) -> None:
    """Run the handler for one inbound frame; hub errors go back to the sender only."""
    try:
        handler = HANDLERS.get(frame.type)
        if handler is None:
            raise UnknownEvent(frame.type)
        await handler(session, frame.data)
    except HubError as err:
        await reply_error(session, err)


def _table_change(table: Table) -> dict:
    return {"number": table.number, "occupied": table.occupied, "devices": list(table.devices)}


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------
@on(In.IDENTIFY)
async def identify(session: Session, data: Any) -> None:
    profile = parse_payload(IdentifyPayload, data).root
    state.connections.identify(session.id, profile)
    logger.info("Session %s identified as %s", session.id, profile)

    await reply(session, Out.IDENTIFIED, {"success": True, "message": "Session identified", "profile": profile})
    await reply(session, Out.SERVER_STATUS, server_status())


@on(In.SET_ROLE)
async def set_role(session: Session, data: Any) -> None:
    role = parse_payload(RolePayload, data).role
    state.connections.set_role(session.id, role)
    logger.info("Session %s registered as %s", session.id, role)


@on(In.JOIN_ROOM)
async def join_room(session: Session, data: Any) -> None:
    room = parse_payload(RoomPayload, data).room
    state.connections.join(session.id, room)
    await reply(session, Out.JOINED_ROOM, {"room": room, "success": True})


@on(In.LEAVE_ROOM)
async def leave_room(session: Session, data: Any) -> None:
    room = parse_payload(RoomPayload, data).room
    state.connections.leave(session.id, room)
    await reply(session, Out.LEFT_ROOM, {"room": room, "success": True})


# -----------------------------------------------------------------------------
# Tables
# -----------------------------------------------------------------------------
@on(In.GET_TABLE_STATES)
async def get_table_states(session: Session, data: Any) -> None:
    await reply(session, Out.TABLE_STATES, tables_snapshot())


@on(In.SELECT_TABLE)
async def select_table(session: Session, data: Any) -> None:
    req = parse_payload(TableRequest, data)
    device = req.device or session.id

    table = state.tables.attach_device(req.table, device)
    state.connections.track_device(session.id, device)
    logger.info("Table %s selected by device %s", table.number, device)

    await emit_all(Out.TABLE_SELECTED, {"table": table.number, "device": device, "table_state": table.model_dump(mode="json")})
    await emit_all(Out.TABLE_STATUS_CHANGED, _table_change(table))
    await publish_tables()


@on(In.RELEASE_TABLE)
async def release_table(session: Session, data: Any) -> None:
    req = parse_payload(TableRequest, data)
    device = req.device or session.id

    table = state.tables.detach_device(req.table, device)
    state.connections.untrack_device(device)
    logger.info("Table %s released by device %s", table.number, device)

    await emit_all(Out.TABLE_RELEASED, {"table": table.number, "device": device, "table_state": table.model_dump(mode="json")})
    await emit_all(Out.TABLE_STATUS_CHANGED, _table_change(table))
    await publish_tables()


# -----------------------------------------------------------------------------
# Orders
# -----------------------------------------------------------------------------
@on(In.CREATE_ORDER)
async def create_order(session: Session, data: Any) -> None:
    req = parse_payload(CreateOrderRequest, data)
    state.tables.get(req.table)

    order = state.orders.create(req.table, req.items, total=req.total, device=req.device or session.id)
    table = state.tables.set_active_order(req.table, order)

    order_state = order.model_dump(mode="json")
    await emit_all(Out.TABLE_ORDER_CREATED, {"order": order_state, "table": table.model_dump(mode="json")})
    await emit_all(Out.ORDER_CREATED, order_state)
    await publish_tables()


@on(In.UPDATE_ORDER_STATUS)
async def update_order_status(session: Session, data: Any) -> None:
    req = parse_payload(OrderStatusRequest, data)
    order, previous = state.orders.transition(req.order_id, req.status)

    order_state = order.model_dump(mode="json")
    await emit_all(
        Out.ORDER_STATUS_CHANGED,
        {
            "order_id": order.id,
            "status": order.status.value,
            "previous_status": previous.value,
            "order": order_state,
        },
    )
    await emit_all(Out.ORDER_UPDATED, order_state)

    if previous is OrderStatus.PENDING and order.status is OrderStatus.PREPARING:
        await emit_all(Out.KITCHEN_ORDER, order_state)
        logger.info("Order %s sent to kitchen", order.id)
    elif previous is OrderStatus.PREPARING and order.status is OrderStatus.READY:
        await emit_all(Out.ORDER_READY_FOR_PAYMENT, order_state)
        logger.info("Order %s ready for payment", order.id)

    await publish_tables()


@on(In.ADD_ORDER_ITEM)
async def add_order_item(session: Session, data: Any) -> None:
    req = parse_payload(AddOrderItemRequest, data)
    order = state.orders.add_item(req.order_id, req.item)
    logger.info("Item added to order %s", order.id)

    await emit_all(Out.ORDER_UPDATED, order.model_dump(mode="json"))
    await publish_tables()


@on(In.GET_ORDERS_BY_STATUS)
async def get_orders_by_status(session: Session, data: Any) -> None:
    status = parse_payload(OrdersByStatusRequest, data).status
    orders = state.orders.query_by_status(status)
    await reply(session, Out.ORDERS_BY_STATUS, {"status": status.value, "orders": [o.model_dump(mode="json") for o in orders]})


# -----------------------------------------------------------------------------
# Relays (no store state)
# -----------------------------------------------------------------------------
@on(In.WAITER_SUBMIT_ORDER)
async def waiter_submit_order(session: Session, data: Any) -> None:
    if session.role == state.settings.waiter_role:
        await emit_room(state.settings.cashier_role, In.WAITER_SUBMIT_ORDER, data)
    else:
        logger.debug("Session %s is not a waiter, cashier room skipped", session.id)
    await emit_others(session, In.WAITER_SUBMIT_ORDER, data)


@on(In.CASHIER_REPLY)
async def cashier_reply(session: Session, data: Any) -> None:
    if session.role != state.settings.cashier_role:
        logger.debug("Dropped cashier reply from non-cashier session %s", session.id)
        return
    await emit_room(state.settings.waiter_role, In.CASHIER_REPLY, data)


def _relay_to_others(event: str) -> Handler:
    async def relay(session: Session, data: Any) -> None:
        logger.debug("Relaying %s from session %s", event, session.id)
        await emit_others(session, event, data)
    return relay


for _event in (In.SPECIAL_ORDER_NEW, In.PAYMENT_MADE, In.SPECIAL_ORDER_CANCELLED):
    on(_event)(_relay_to_others(_event))
