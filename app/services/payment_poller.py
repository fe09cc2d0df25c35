"""
Payment-status poller for the checkout confirmation page.

After Stripe redirects the browser back, the webhook may not have landed
yet. The poller re-reads the paid flag a bounded number of times and ends
in `confirmed` or `failed`. It is a plain state machine driven by an
injectable sleep, so it runs the same under a real event loop and in tests.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol
from urllib.parse import parse_qs, urlparse

import httpx

from app.core.config import settings
from app.core.errors import ConfirmationError, InvalidTransition, TransientReadError
from app.core.logging import get_logger

logger = get_logger(__name__)


class PollState(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    WAITING = "waiting"
    ERROR = "error"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class PollEvent(str, Enum):
    START = "start"
    PAID = "paid"
    UNPAID = "unpaid"
    READ_ERROR = "read_error"
    EXHAUSTED = "exhausted"
    TICK = "tick"
    RECHECK = "recheck"


TRANSITIONS: dict[tuple[PollState, PollEvent], PollState] = {
    (PollState.IDLE, PollEvent.START): PollState.CHECKING,
    (PollState.CHECKING, PollEvent.PAID): PollState.CONFIRMED,
    (PollState.CHECKING, PollEvent.UNPAID): PollState.WAITING,
    (PollState.CHECKING, PollEvent.READ_ERROR): PollState.ERROR,
    (PollState.CHECKING, PollEvent.EXHAUSTED): PollState.FAILED,
    (PollState.WAITING, PollEvent.TICK): PollState.CHECKING,
    (PollState.ERROR, PollEvent.TICK): PollState.CHECKING,
    (PollState.FAILED, PollEvent.RECHECK): PollState.CHECKING,
}

TERMINAL_STATES = frozenset({PollState.CONFIRMED, PollState.FAILED})


class StatusReader(Protocol):
    async def read_paid(self, user_id: str) -> bool:
        """Return the current paid flag. Raise TransientReadError on failure."""
        ...


@dataclass(frozen=True)
class ConfirmationParams:
    user_id: str

    @classmethod
    def from_url(cls, url: str) -> "ConfirmationParams":
        """
        Parse `/success?success=true&userId=...`.

        The user id must be carried in the URL; it is never taken from an
        ambient session, since the cookie may not be available yet.
        """
        query = parse_qs(urlparse(url).query)
        if query.get("success", [""])[0] != "true":
            raise ConfirmationError("Checkout was not completed")

        user_id = query.get("userId", [""])[0].strip()
        if not user_id:
            raise ConfirmationError("Missing userId in confirmation URL")
        return cls(user_id=user_id)


class HttpStatusReader:
    """
    Reads the paid flag from `GET /api/v1/payments/status`.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    async def read_paid(self, user_id: str) -> bool:
        url = f"{self.base_url}/api/v1/payments/status"
        try:
            if self._client is not None:
                resp = await self._client.get(url, params={"userId": user_id})
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(url, params={"userId": user_id})
        except httpx.HTTPError as e:
            raise TransientReadError(f"Status read failed: {e}") from e

        if resp.status_code != 200:
            raise TransientReadError(f"Status read returned {resp.status_code}")

        return bool(resp.json().get("paid"))


class PaymentStatusPoller:
    def __init__(
        self,
        user_id: str,
        reader: StatusReader,
        *,
        max_attempts: int | None = None,
        interval: float | None = None,
        redirect_countdown: float | None = None,
        on_confirmed: Optional[Callable[[str], Awaitable[None]]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.user_id = user_id
        self.reader = reader
        self.max_attempts = max_attempts if max_attempts is not None else settings.POLL_MAX_ATTEMPTS
        self.interval = interval if interval is not None else settings.POLL_INTERVAL_SECONDS
        self.redirect_countdown = (
            redirect_countdown if redirect_countdown is not None else settings.REDIRECT_COUNTDOWN_SECONDS
        )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval <= 0:
            raise ValueError("interval must be positive")

        self.on_confirmed = on_confirmed
        self._sleep = sleep

        self.state = PollState.IDLE
        self.attempts = 0
        self.last_error: str | None = None
        self.history: list[PollState] = [PollState.IDLE]

        self._cancelled = False
        self._timer: asyncio.Future | None = None

    def _fire(self, event: PollEvent) -> PollState:
        try:
            new_state = TRANSITIONS[(self.state, event)]
        except KeyError:
            raise InvalidTransition(f"{event.value} not allowed in state {self.state.value}") from None
        logger.debug("Poller %s: %s --%s--> %s", self.user_id, self.state.value, event.value, new_state.value)
        self.state = new_state
        self.history.append(new_state)
        return new_state

    async def _wait(self, seconds: float) -> None:
        if self._cancelled:
            raise asyncio.CancelledError()
        self._timer = asyncio.ensure_future(self._sleep(seconds))
        try:
            await self._timer
        finally:
            self._timer = None
        if self._cancelled:
            raise asyncio.CancelledError()

    async def _check(self, budget: int) -> PollState:
        """
        One read. `budget` is how many reads this run may still make,
        including this one.
        """
        self.attempts += 1
        try:
            paid = await self.reader.read_paid(self.user_id)
        except TransientReadError as e:
            self.last_error = str(e)
            logger.warning("Payment status read %d for %s failed: %s", self.attempts, self.user_id, e)
            if budget > 1:
                return self._fire(PollEvent.READ_ERROR)
            return self._fire(PollEvent.EXHAUSTED)

        if paid:
            return self._fire(PollEvent.PAID)
        if budget > 1:
            return self._fire(PollEvent.UNPAID)
        return self._fire(PollEvent.EXHAUSTED)

    async def _confirmed(self) -> None:
        logger.info("Payment confirmed for %s after %d read(s)", self.user_id, self.attempts)
        if self.on_confirmed is not None:
            await self._wait(self.redirect_countdown)
            await self.on_confirmed(settings.DASHBOARD_PATH)

    async def run(self) -> str:
        """
        Poll until the paid flag is seen or attempts run out.

        Returns "confirmed" or "failed". Makes at most `max_attempts` reads
        with `interval` seconds between them. Raises asyncio.CancelledError
        if `cancel()` is called first.
        """
        self._fire(PollEvent.START)

        remaining = self.max_attempts
        while True:
            state = await self._check(remaining)
            remaining -= 1
            if state in TERMINAL_STATES:
                break
            await self._wait(self.interval)
            self._fire(PollEvent.TICK)

        if self.state is PollState.CONFIRMED:
            await self._confirmed()
        else:
            logger.warning("Payment not confirmed for %s after %d read(s)", self.user_id, self.attempts)
        return self.state.value

    async def recheck(self) -> str:
        """
        Manual "check again" after the loop failed: exactly one read.
        """
        self._fire(PollEvent.RECHECK)
        await self._check(1)
        if self.state is PollState.CONFIRMED:
            await self._confirmed()
        return self.state.value

    def cancel(self) -> None:
        """Stop scheduling further reads; the pending wait is cancelled."""
        self._cancelled = True
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
