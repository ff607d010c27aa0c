import datetime as dt
import threading
from dataclasses import dataclass, field
from typing import Callable

from sitetrack.core.logging import logger


@dataclass(frozen=True)
class DatabaseUpdated:
    table_name: str
    timestamp: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    def as_payload(self) -> dict:
        return {"tableName": self.table_name, "timestamp": self.timestamp.isoformat()}


Handler = Callable[[DatabaseUpdated], None]


class EventBus:
    """In-process "database updated" broadcast. A failing subscriber is
    logged and skipped; the others still run."""

    def __init__(self) -> None:
        self._handlers: list[Handler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        with self._lock:
            self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: Handler) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def publish(self, event: DatabaseUpdated) -> int:
        with self._lock:
            handlers = list(self._handlers)
        delivered = 0
        for h in handlers:
            try:
                h(event)
                delivered += 1
            except Exception as e:
                logger.warning("event_handler_failed", table=event.table_name, error=str(e))
        logger.info("database_updated", table=event.table_name, subscribers=len(handlers))
        return delivered

    def notify(self, table_name: str) -> int:
        return self.publish(DatabaseUpdated(table_name))
