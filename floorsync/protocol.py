"""
Wire protocol of the floor hub.

Every frame, in both directions, is a JSON object ``{"type": <event>, "data": <payload>}``.
Inbound payloads are validated against the models below before a handler sees them.
"""
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError, model_validator

from .errors import InvalidPayload
from .models import LineItem, OrderStatus

P = TypeVar("P", bound=BaseModel)


class In:
    IDENTIFY = "identify"
    SET_ROLE = "set-role"
    JOIN_ROOM = "join-room"
    LEAVE_ROOM = "leave-room"
    GET_TABLE_STATES = "get-table-states"
    SELECT_TABLE = "select-table"
    RELEASE_TABLE = "release-table"
    CREATE_ORDER = "create-order"
    UPDATE_ORDER_STATUS = "update-order-status"
    ADD_ORDER_ITEM = "add-order-item"
    GET_ORDERS_BY_STATUS = "get-orders-by-status"
    WAITER_SUBMIT_ORDER = "waiter-submit-order"
    CASHIER_REPLY = "cashier-reply"
    SPECIAL_ORDER_NEW = "special-order-new"
    PAYMENT_MADE = "payment-made"
    SPECIAL_ORDER_CANCELLED = "special-order-cancelled"


class Out:
    CONNECTED = "connected"
    IDENTIFIED = "identified"
    SERVER_STATUS = "server-status"
    JOINED_ROOM = "joined-room"
    LEFT_ROOM = "left-room"
    TABLE_STATES = "table-states"
    TABLE_STATES_UPDATED = "table-states-updated"
    TABLE_SELECTED = "table-selected"
    TABLE_RELEASED = "table-released"
    TABLE_STATUS_CHANGED = "table-status-changed"
    TABLE_ORDER_CREATED = "table-order-created"
    ORDER_CREATED = "order-created"
    ORDER_STATUS_CHANGED = "order-status-changed"
    ORDER_UPDATED = "order-updated"
    ORDER_REMOVED = "order-removed"
    KITCHEN_ORDER = "kitchen-order"
    ORDER_READY_FOR_PAYMENT = "order-ready-for-payment"
    ORDERS_BY_STATUS = "orders-by-status"
    OPERATION_ERROR = "operation-error"


class Frame(BaseModel):
    type: str = Field(min_length=1)
    data: Any = None


class IdentifyPayload(RootModel[Dict[str, Any]]):
    pass


class RolePayload(BaseModel):
    role: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _bare_string(cls, data):
        if isinstance(data, str):
            return {"role": data}
        return data


class RoomPayload(BaseModel):
    room: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _bare_string(cls, data):
        if isinstance(data, str):
            return {"room": data}
        return data


class TableRequest(BaseModel):
    table: int
    device: Optional[str] = None


class CreateOrderRequest(BaseModel):
    table: int
    items: List[LineItem] = Field(default_factory=list)
    total: Optional[float] = None
    device: Optional[str] = None


class OrderStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    status: OrderStatus


class AddOrderItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    item: LineItem


class OrdersByStatusRequest(BaseModel):
    status: OrderStatus


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ())) or "payload"
    return f"{where}: {first.get('msg', 'invalid')}"


def parse_frame(raw: str) -> Frame:
    try:
        return Frame.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidPayload(f"Malformed frame ({_describe(exc)})") from exc


def parse_payload(model: Type[P], data: Any) -> P:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidPayload(f"Invalid payload ({_describe(exc)})") from exc
