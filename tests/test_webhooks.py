from decimal import Decimal

import pytest

from finance_dashboard.api import webhooks
from finance_dashboard.models.account import Transaction, TransactionType
from finance_dashboard.services import ai_service
from finance_dashboard.services.webhook_service import handle_setu_event, parse_text_expense, twiml_message


@pytest.mark.parametrize(
    "text, expected",
    [
        ("snacks ₹200", ("snacks", Decimal("200"))),
        ("Groceries Rs.1,250.50", ("groceries", Decimal("1250.50"))),
        ("fuel 900", ("fuel", Decimal("900"))),
        ("rent INR15000", ("rent", Decimal("15000"))),
    ],
)
def test_parse_text_expense(text, expected):
    assert parse_text_expense(text) == expected


@pytest.mark.parametrize("text", ["", "snacks", "snacks ₹abc", "snacks ₹0", "two word ₹20", "snacks ₹-5"])
def test_parse_text_expense_rejects_other_shapes(text):
    assert parse_text_expense(text) is None


def cloud_api_payload(sender, body):
    return {
        "entry": [{
            "changes": [{
                "value": {
                    "messages": [{"from": sender, "type": "text", "text": {"body": body}}],
                },
            }],
        }],
    }


def test_subscription_verification(client):
    resp = client.get(
        "/api/addTransaction",
        params={"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "12345"},
    )
    assert resp.status_code == 200
    assert resp.text == "12345"

    resp = client.get(
        "/api/addTransaction",
        params={"hub.mode": "subscribe", "hub.verify_token": "wrong", "hub.challenge": "12345"},
    )
    assert resp.status_code == 403


def test_text_message_records_expense_for_linked_user(client, db, make_user):
    owner, _ = make_user("user_wa", whatsapp_number="919876543210")

    resp = client.post("/api/addTransaction", json=cloud_api_payload("919876543210", "snacks ₹200"))
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}

    txn = db.query(Transaction).filter(Transaction.user_id == owner.id).one()
    assert txn.type == TransactionType.EXPENSE
    assert txn.category == "snacks"
    assert Decimal(txn.amount) == Decimal("200")
    assert txn.description == "WhatsApp: snacks ₹200"


def test_unlinked_or_unparseable_messages_are_acknowledged(client, db, make_user):
    make_user("user_wa", whatsapp_number="919876543210")

    assert client.post("/api/addTransaction", json=cloud_api_payload("910000000000", "snacks ₹200")).json() == {"status": "ok"}
    assert client.post("/api/addTransaction", json=cloud_api_payload("919876543210", "hello there friend")).json() == {"status": "ok"}
    assert client.post("/api/addTransaction", json={"object": "whatsapp_business_account"}).json() == {"status": "ok"}
    assert db.query(Transaction).count() == 0


@pytest.mark.parametrize(
    "messages",
    [
        [{"from": "919876543210", "type": "text", "text": "snacks ₹200"}],
        [{"from": "919876543210", "type": "text", "text": {"body": 200}}],
        [{"from": "919876543210", "type": "text"}],
        ["snacks ₹200"],
        "snacks ₹200",
    ],
)
def test_malformed_messages_are_acknowledged(client, db, make_user, messages):
    make_user("user_wa", whatsapp_number="919876543210")
    payload = {"entry": [{"changes": [{"value": {"messages": messages}}]}]}

    resp = client.post("/api/addTransaction", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert db.query(Transaction).count() == 0


def test_storage_failure_is_still_acknowledged(client, db, make_user, monkeypatch):
    make_user("user_wa", whatsapp_number="919876543210")

    def broken_store(db, sender, text):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(webhooks, "record_text_expense", broken_store)

    resp = client.post("/api/addTransaction", json=cloud_api_payload("919876543210", "snacks ₹200"))
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert db.query(Transaction).count() == 0


def test_twilio_message_is_stored_and_answered(client, db, make_user, monkeypatch):
    owner, _ = make_user("user_tw", whatsapp_number="14155550100")
    monkeypatch.setattr(
        ai_service,
        "generate_text",
        lambda contents, system_instruction=None: '{"type": "expense", "amount": 450, "category": "Dining", "description": "Dinner"}',
    )

    resp = client.post("/api/whatsapp", data={"Body": "spent 450 on dinner", "From": "whatsapp:+14155550100"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/xml")
    assert resp.text == "<Response><Message>Transaction added successfully ✅</Message></Response>"

    txn = db.query(Transaction).filter(Transaction.user_id == owner.id).one()
    assert txn.type == TransactionType.EXPENSE
    assert txn.category == "Dining"


def test_twilio_replies_for_unlinked_number(client, monkeypatch):
    monkeypatch.setattr(
        ai_service,
        "generate_text",
        lambda contents, system_instruction=None: '{"type": "INCOME", "amount": 1000, "category": "gift"}',
    )
    resp = client.post("/api/whatsapp", data={"Body": "got 1000", "From": "whatsapp:+14155550199"})
    assert "Number not linked to account ❌" in resp.text


def test_twilio_replies_when_message_cannot_be_parsed(client):
    resp = client.post("/api/whatsapp", data={"Body": "hello", "From": "whatsapp:+14155550100"})
    assert resp.status_code == 200
    assert "Could not understand transaction ❌" in resp.text


def test_twiml_escapes_text():
    assert twiml_message("a < b & c") == "<Response><Message>a &lt; b &amp; c</Message></Response>"


def test_setu_webhook(client):
    resp = client.post("/api/setu/webhook", json={"Detail": {"ConsentStatus": "ACTIVE", "ConsentId": "c-1"}})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Webhook processed"}

    resp = client.post("/api/setu/webhook", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_setu_event_kinds():
    assert handle_setu_event({"Detail": {"ConsentStatus": "REJECTED"}}) == "consent_status"
    assert handle_setu_event({"type": "FI_DATA_READY"}) == "fi_data_ready"
    assert handle_setu_event({"type": "SESSION_STATUS"}) == "other"
