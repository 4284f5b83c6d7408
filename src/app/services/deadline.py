"""
Request deadline for store work.

The API layer opens the deadline around a use case; the unit of work lifts
it when commit starts. Work before commit is cancelled and rolled back on
expiry, while a commit that has started always runs to completion so the
caller never gets a timeout for a change that was applied.
"""

import asyncio
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Optional

_current_deadline: ContextVar[Optional[asyncio.Timeout]] = ContextVar(
    "store_deadline", default=None
)


@asynccontextmanager
async def store_deadline(seconds: float):
    """Raises TimeoutError if the block is still running after seconds"""
    async with asyncio.timeout(seconds) as deadline:
        token = _current_deadline.set(deadline)
        try:
            yield deadline
        finally:
            _current_deadline.reset(token)


def lift_store_deadline() -> None:
    deadline = _current_deadline.get()
    # Already expired: the cancellation is on its way and must win
    if deadline is not None and not deadline.expired():
        deadline.reschedule(None)
