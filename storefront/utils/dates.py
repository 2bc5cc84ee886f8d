# storefront/utils/dates.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # sqlite oddaje naiwne daty, zapisujemy zawsze w UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
