# ---------- tests/test_event_loop.py ----------
import time

import anyio
import httpx
import pytest

# Well under one bcrypt verification at the default cost
MAX_LOOP_STALL = 0.1


@pytest.mark.anyio
async def test_sign_in_leaves_event_loop_free(async_client: httpx.AsyncClient, test_user):
    """Password hashing and DB work run off the loop, so other tasks keep ticking."""
    gaps = []
    finished = anyio.Event()

    async def ticker():
        last = time.perf_counter()
        while not finished.is_set():
            await anyio.sleep(0.005)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    async with anyio.create_task_group() as tg:
        tg.start_soon(ticker)
        response = await async_client.post(
            "/api/auth/sign-in/email",
            json={"email": "test@example.com", "password": "password123"},
        )
        finished.set()

    assert response.status_code == 200
    assert gaps
    assert max(gaps) < MAX_LOOP_STALL

