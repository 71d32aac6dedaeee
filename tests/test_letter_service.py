from datetime import datetime

import pytest

from letterbox.models import User
from letterbox.services.exceptions import LetterBoxValidationError
from letterbox.services.letter_service import compute_delivery_time, parse_delay_days


@pytest.mark.parametrize(
    "value, expected",
    [("0.0042", 0.0042), (" 2 ", 2.0), (1, 1.0), (0.5, 0.5), ("0", 1.0), ("365", 365.0), ("730", 730.0), ("-0.5", -0.5)],
)
def test_parse_delay_days(value, expected):
    assert parse_delay_days(value) == expected


@pytest.mark.parametrize("value", [None, "", "  ", "soon", True, 0, 0.0, "inf", "nan", [1]])
def test_parse_delay_days_rejects(value):
    with pytest.raises(LetterBoxValidationError):
        parse_delay_days(value)


def test_compute_delivery_time_rounds_to_whole_seconds():
    now = datetime(2026, 1, 1)

    delivery_time, seconds = compute_delivery_time(now, 0.0042)

    assert seconds == 363
    assert (delivery_time - now).total_seconds() == 363


def test_compute_delivery_time_rejects_dates_past_calendar_range():
    with pytest.raises(LetterBoxValidationError):
        compute_delivery_time(datetime(2026, 1, 1), 1e12)


def test_compute_delivery_time_allows_past_delivery():
    now = datetime(2026, 1, 1)

    delivery_time, seconds = compute_delivery_time(now, -0.5)

    assert seconds == -43200
    assert delivery_time < now


async def test_get_or_create_is_idempotent(session):
    first, created = await User.get_or_create(session, "100001")
    second, created_again = await User.get_or_create(session, "100001")

    assert created is True
    assert created_again is False
    assert first.USER_ID == second.USER_ID


async def test_get_or_create_recovers_from_concurrent_insert(session_factory, monkeypatch):
    async with session_factory() as session:
        winner, _ = await User.get_or_create(session, "300003")

    original = User.get_by_pincode.__func__
    calls = []

    async def racing_lookup(cls, session, pincode):
        # 첫 조회는 아직 다른 요청이 커밋하기 전인 것처럼 비어 있다
        calls.append(pincode)
        if len(calls) == 1:
            return None
        return await original(cls, session, pincode)

    monkeypatch.setattr(User, "get_by_pincode", classmethod(racing_lookup))

    async with session_factory() as session:
        user, created = await User.get_or_create(session, "300003")

    assert created is False
    assert user.USER_ID == winner.USER_ID
    assert len(calls) == 2
