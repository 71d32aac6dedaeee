import os
from datetime import datetime, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from letterbox.api.deps import get_async_session, get_current_time
from letterbox.main import app
from letterbox.models import init_db
from letterbox.models.base import build_engine


class FakeClock:
    """get_current_time 대체용 시계 (테스트에서 직접 시간을 진행시킨다)"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 0, 0))


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'letterbox_test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, clock):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_current_time] = clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def letter_payload(**overrides):
    payload = {
        "title": "Hi",
        "content": "Hello",
        "senderPincode": "100001",
        "receiverPincode": "200002",
        "receiverAddress": "X",
        "deliveryTime": "0.0042",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def send_letter(client):
    async def _send(**overrides):
        response = await client.post("/api/letters", json=letter_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _send
