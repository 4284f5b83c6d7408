"""
Retry for idempotent store reads.

Only reads go through here. Mutations (identity creation, token consumption)
are never retried: after an ambiguous failure a second attempt could produce
a second winner.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from src.app.repositories.errors import TransientStorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_read_once(read: Callable[[], Awaitable[T]]) -> T:
    try:
        return await read()
    except TransientStorageError as exc:
        logger.warning(f"Transient storage failure on read, retrying once: {exc}")
        return await read()
