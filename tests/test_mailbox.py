import uuid
from datetime import datetime, timedelta

from letterbox.models import Delivery, Letter, User
from letterbox.services.mailbox_service import exceeds_clamp, format_countdown

NOW = datetime(2026, 3, 1, 9, 0, 0)


def test_format_countdown_labels():
    assert format_countdown(NOW, NOW) == "Ready for delivery"
    assert format_countdown(NOW - timedelta(days=1), NOW) == "Ready for delivery"
    assert format_countdown(NOW + timedelta(seconds=42), NOW) == "42s until delivery"
    assert format_countdown(NOW + timedelta(minutes=6, seconds=3), NOW) == "6m 3s until delivery"
    assert format_countdown(NOW + timedelta(hours=26, minutes=5), NOW) == "26h 5m until delivery"


def test_clamp_only_beyond_one_year():
    assert not exceeds_clamp(NOW + timedelta(hours=8760), NOW)
    assert exceeds_clamp(NOW + timedelta(hours=8761), NOW)
    assert format_countdown(NOW + timedelta(days=800), NOW) == "Ready for delivery"


async def test_mailbox_partitions_ready_and_pending(client, clock, send_letter):
    early = await send_letter(deliveryTime="0.0042", title="Early")
    late = await send_letter(deliveryTime="1", title="Late")
    clock.advance(minutes=10)

    response = await client.get("/api/mailbox", params={"pincode": "200002"})

    assert response.status_code == 200
    mailbox = response.json()
    assert [letter["id"] for letter in mailbox["ready"]] == [early["letterId"]]
    assert [letter["id"] for letter in mailbox["pending"]] == [late["letterId"]]
    assert mailbox["ready"][0]["countdown"] == "Ready for delivery"
    assert mailbox["pending"][0]["countdown"] == "23h 50m until delivery"
    assert mailbox["unreadCount"] == 1


async def test_opening_a_letter_clears_unread_count(client, clock, send_letter):
    body = await send_letter(deliveryTime="0.0042")
    clock.advance(minutes=10)
    await client.post(f"/api/letters/{body['letterId']}/deliver")

    mailbox = (await client.get("/api/mailbox", params={"pincode": "200002"})).json()

    assert mailbox["unreadCount"] == 0
    assert mailbox["ready"][0]["isDelivered"] is True


async def test_far_future_letter_is_treated_as_ready(client, session, clock):
    sender = User(USER_ID=str(uuid.uuid4()), PINCODE="100001", CREATED_AT=clock.now)
    receiver = User(USER_ID=str(uuid.uuid4()), PINCODE="200002", CREATED_AT=clock.now)
    letter_id = str(uuid.uuid4())
    session.add_all([
        sender,
        receiver,
        Letter(
            LETTER_ID=letter_id,
            SENDER_ID=sender.USER_ID,
            RECEIVER_ID=receiver.USER_ID,
            TITLE="Legacy",
            CONTENT="Stored with seconds read as days",
            RECEIVER_ADDRESS="X",
            DELIVERY_TIME=clock.now + timedelta(days=3 * 365),
            CREATED_AT=clock.now,
            delivery=Delivery(DELIVERY_ID=str(uuid.uuid4())),
        ),
    ])
    await session.commit()

    mailbox = (await client.get("/api/mailbox", params={"pincode": "200002"})).json()

    assert [letter["id"] for letter in mailbox["ready"]] == [letter_id]
    assert mailbox["pending"] == []
    assert mailbox["unreadCount"] == 1


async def test_mailbox_requires_pincode(client):
    response = await client.get("/api/mailbox")

    assert response.status_code == 400
    assert response.json() == {"error": "Pincode is required"}


async def test_unknown_pincode_has_empty_mailbox(client):
    mailbox = (await client.get("/api/mailbox", params={"pincode": "777777"})).json()

    assert mailbox == {"pincode": "777777", "ready": [], "pending": [], "unreadCount": 0}


async def test_letter_sent_over_a_year_out_is_ready_in_mailbox_only(client, send_letter):
    body = await send_letter(deliveryTime="400")

    mailbox = (await client.get("/api/mailbox", params={"pincode": "200002"})).json()
    listed = await client.get("/api/letters", params={"receiverPincode": "200002"})
    early = await client.post(f"/api/letters/{body['letterId']}/deliver")

    assert [letter["id"] for letter in mailbox["ready"]] == [body["letterId"]]
    assert mailbox["ready"][0]["countdown"] == "Ready for delivery"
    assert listed.json()["letters"] == []
    assert early.status_code == 400
