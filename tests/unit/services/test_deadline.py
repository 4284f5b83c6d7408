import asyncio

import pytest

from src.app.services.deadline import lift_store_deadline, store_deadline


@pytest.mark.asyncio
async def test_deadline_expires():
    with pytest.raises(TimeoutError):
        async with store_deadline(0.05):
            await asyncio.sleep(1)


@pytest.mark.asyncio
async def test_lifted_deadline_does_not_expire():
    async with store_deadline(0.05):
        lift_store_deadline()
        await asyncio.sleep(0.1)


def test_lift_outside_a_deadline_is_a_no_op():
    lift_store_deadline()
