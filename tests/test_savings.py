from datetime import datetime, timezone
from decimal import Decimal

from finance_dashboard.models.savings import SavingsJar
from finance_dashboard.services.savings_service import DEPOSIT_HISTORY_LIMIT, apply_deposit
from tests.conftest import auth_header


def create_jar(client, headers, **overrides):
    payload = {"name": "Vacation", "target_amount": "50000", "notes": "Goa"}
    payload.update(overrides)
    resp = client.post("/api/savings", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_then_list_returns_created_fields(client, headers):
    jar = create_jar(client, headers, goal_date="2027-03-01")

    resp = client.get("/api/savings", headers=headers)
    assert resp.status_code == 200
    jars = resp.json()
    assert len(jars) == 1
    assert jars[0]["id"] == jar["id"]
    assert jars[0]["name"] == "Vacation"
    assert Decimal(jars[0]["target_amount"]) == Decimal("50000")
    assert Decimal(jars[0]["current_amount"]) == Decimal("0")
    assert jars[0]["goal_date"] == "2027-03-01"
    assert jars[0]["recent_deposits"] == []
    assert jar["id"].startswith("JAR-")


def test_deposit_and_withdrawal_update_balance_and_history(client, headers):
    jar = create_jar(client, headers)

    resp = client.patch(f"/api/savings/{jar['id']}", json={"deposit_delta": "1500"}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["current_amount"]) == Decimal("1500")
    assert body["recent_deposits"][0]["amount"] == 1500

    resp = client.patch(f"/api/savings/{jar['id']}", json={"deposit_delta": "-500"}, headers=headers)
    body = resp.json()
    assert Decimal(body["current_amount"]) == Decimal("1000")
    assert [d["amount"] for d in body["recent_deposits"]] == [-500, 1500]


def test_withdrawal_never_drives_balance_below_zero(client, headers):
    jar = create_jar(client, headers, current_amount="200")

    resp = client.patch(f"/api/savings/{jar['id']}", json={"deposit_delta": "-1000"}, headers=headers)
    assert resp.status_code == 200
    assert Decimal(resp.json()["current_amount"]) == Decimal("0")


def test_rename_without_delta_keeps_history(client, headers):
    jar = create_jar(client, headers)
    resp = client.patch(f"/api/savings/{jar['id']}", json={"name": "Trip", "notes": "Kerala"}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Trip"
    assert body["notes"] == "Kerala"
    assert body["recent_deposits"] == []


def test_delete_then_update_is_not_found(client, headers):
    jar = create_jar(client, headers)

    resp = client.delete(f"/api/savings/{jar['id']}", headers=headers)
    assert resp.status_code == 204

    resp = client.patch(f"/api/savings/{jar['id']}", json={"name": "Again"}, headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Savings jar not found"

    resp = client.delete(f"/api/savings/{jar['id']}", headers=headers)
    assert resp.status_code == 404


def test_jars_are_private_to_their_owner(client, headers):
    jar = create_jar(client, headers)
    other = auth_header("user_bob", email="bob@example.com")

    assert client.get("/api/savings", headers=other).json() == []
    assert client.patch(f"/api/savings/{jar['id']}", json={"name": "Mine"}, headers=other).status_code == 404
    assert client.delete(f"/api/savings/{jar['id']}", headers=other).status_code == 404


def test_invalid_payload_is_bad_request(client, headers):
    resp = client.post("/api/savings", json={"name": "", "target_amount": "-1"}, headers=headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["errors"]


def test_history_keeps_only_newest_entries():
    jar = SavingsJar(current_amount=Decimal("0"), recent_deposits=[])
    for i in range(DEPOSIT_HISTORY_LIMIT + 5):
        apply_deposit(jar, Decimal(i + 1), now=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert len(jar.recent_deposits) == DEPOSIT_HISTORY_LIMIT
    assert jar.recent_deposits[0]["amount"] == DEPOSIT_HISTORY_LIMIT + 5
    assert jar.recent_deposits[-1]["amount"] == 6
    assert jar.current_amount == Decimal(sum(range(1, DEPOSIT_HISTORY_LIMIT + 6)))


def test_deposit_entry_shape():
    moment = datetime(2026, 5, 4, 10, 30, tzinfo=timezone.utc)
    jar = SavingsJar(current_amount=Decimal("100"), recent_deposits=[])
    apply_deposit(jar, Decimal("-40.5"), now=moment)

    entry = jar.recent_deposits[0]
    assert entry == {"id": int(moment.timestamp() * 1000), "amount": -40.5, "date": moment.isoformat()}
    assert jar.current_amount == Decimal("59.5")
