from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def money(amount: float) -> str:
    return f"{amount:.2f}"


def make_frame(event: str, data: Any = None) -> dict:
    return {"type": event, "data": data}
