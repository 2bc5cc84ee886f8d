# storefront/services/countdown.py
import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from storefront.utils.dates import utcnow, as_utc
from storefront.utils.settings import COUNTDOWN_HOUR_WRAP
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

URGENT_MS = 60 * 60 * 1000
VERY_URGENT_MS = 30 * 60 * 1000


class CountdownState(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class TimeLeft:
    hours: int
    minutes: int
    seconds: int
    total_ms: int

    @property
    def is_urgent(self) -> bool:
        return self.total_ms <= URGENT_MS

    @property
    def is_very_urgent(self) -> bool:
        return self.total_ms <= VERY_URGENT_MS


ZERO = TimeLeft(0, 0, 0, 0)


def time_left(expires_at: datetime, now: datetime, hour_wrap: int = COUNTDOWN_HOUR_WRAP) -> TimeLeft:
    remaining = int((as_utc(expires_at) - as_utc(now)).total_seconds() * 1000)
    if remaining <= 0:
        return ZERO

    # godziny zawijane modulo hour_wrap (domyslnie 36, maksymalne okno rezerwacji)
    hours = (remaining // (1000 * 60 * 60)) % hour_wrap
    minutes = (remaining // (1000 * 60)) % 60
    seconds = (remaining // 1000) % 60
    return TimeLeft(hours, minutes, seconds, remaining)


class ExpiryCountdown:
    """
    Odliczanie do expires_at, ACTIVE -> EXPIRED (jednokierunkowo).

    tick() przelicza pozostaly czas; przy przejsciu w EXPIRED wola
    on_expire dokladnie raz. run()/start() tykaja co `period` sekund
    i same sie koncza po EXPIRED. `async with` gwarantuje zwolnienie timera.
    Osiagniecie zera nie zmienia statusu rezerwacji w bazie.
    """

    def __init__(
        self,
        expires_at: datetime,
        on_expire: Callable[[], None] | None = None,
        on_tick: Callable[[TimeLeft], None] | None = None,
        clock: Callable[[], datetime] = utcnow,
        period: float = 1.0,
        hour_wrap: int = COUNTDOWN_HOUR_WRAP,
    ):
        self.expires_at = as_utc(expires_at)
        self.on_expire = on_expire
        self.on_tick = on_tick
        self.clock = clock
        self.period = period
        self.hour_wrap = hour_wrap

        self.state = CountdownState.ACTIVE
        self.last = time_left(self.expires_at, clock(), hour_wrap)
        self._task: asyncio.Task | None = None

    @property
    def expired(self) -> bool:
        return self.state is CountdownState.EXPIRED

    def tick(self) -> TimeLeft:
        if self.expired:
            return ZERO

        self.last = time_left(self.expires_at, self.clock(), self.hour_wrap)

        if self.last.total_ms <= 0:
            self.state = CountdownState.EXPIRED
            logger.info(f"Countdown to {self.expires_at.isoformat()} expired")
            if self.on_tick:
                self.on_tick(ZERO)
            if self.on_expire:
                self.on_expire()
            return ZERO

        if self.on_tick:
            self.on_tick(self.last)
        return self.last

    async def run(self):
        while True:
            self.tick()
            if self.expired:
                return
            await asyncio.sleep(self.period)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def __aenter__(self) -> "ExpiryCountdown":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.stop()

    async def updates(self):
        """Async generator: jeden TimeLeft na tick, konczy sie po EXPIRED."""
        while True:
            left = self.tick()
            yield left
            if self.expired:
                return
            await asyncio.sleep(self.period)
