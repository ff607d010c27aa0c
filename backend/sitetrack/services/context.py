import datetime as dt
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

from sqlalchemy.orm import Session

from sitetrack.core.config import Settings
from sitetrack.core.logging import logger
from sitetrack.services.etl.utils import today_local
from sitetrack.services.events import EventBus


@dataclass
class ReconciliationContext:
    """Everything the reconciliation services need, built once at startup
    and closed at shutdown."""

    session_factory: Callable[[], Session]
    bus: EventBus = field(default_factory=EventBus)
    fetch_timeout: float = 8.0
    max_workers: int = 3
    tz: str = "UTC"
    status_writeback: bool = True
    _executor: ThreadPoolExecutor | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def from_settings(
        cls, settings: Settings, session_factory: Callable[[], Session], bus: EventBus | None = None
    ) -> "ReconciliationContext":
        return cls(
            session_factory=session_factory,
            bus=bus or EventBus(),
            fetch_timeout=settings.FETCH_TIMEOUT_SEC,
            max_workers=max(1, settings.FETCH_WORKERS),
            tz=settings.TZ,
            status_writeback=settings.STATUS_WRITEBACK,
        )

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="fetch")
            return self._executor

    def today(self) -> dt.date:
        return today_local(self.tz)

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
        logger.info("reconciliation_context_closed")
