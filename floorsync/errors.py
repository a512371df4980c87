class HubError(Exception):
    """Recoverable failure reported to the session that caused it."""

    kind = "hub_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict:
        return {"message": self.message, "kind": self.kind}


class TableNotFound(HubError):
    kind = "table_not_found"

    def __init__(self, table):
        super().__init__(f"Table {table} not found")
        self.table = table


class OrderNotFound(HubError):
    kind = "order_not_found"

    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class InvalidPayload(HubError):
    kind = "invalid_payload"


class UnknownEvent(HubError):
    kind = "unknown_event"

    def __init__(self, event):
        super().__init__(f"Unknown event {event!r}")
        self.event = event
