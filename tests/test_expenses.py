from datetime import date
from decimal import Decimal


def add_expense(client, headers, **overrides):
    payload = {"title": "Groceries", "category": "food", "amount": "820.50"}
    payload.update(overrides)
    resp = client.post("/api/expenses", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_date_defaults_to_today(client, headers):
    expense = add_expense(client, headers)
    assert expense["date"] == date.today().isoformat()
    assert Decimal(expense["amount"]) == Decimal("820.50")


def test_list_is_ordered_by_date(client, headers):
    add_expense(client, headers, title="Later", date="2026-03-10")
    add_expense(client, headers, title="Earlier", date="2026-01-05")
    add_expense(client, headers, title="Middle", date="2026-02-01")

    resp = client.get("/api/expenses", headers=headers)
    assert resp.status_code == 200
    assert [e["title"] for e in resp.json()] == ["Earlier", "Middle", "Later"]


def test_update_changes_only_given_fields(client, headers):
    expense = add_expense(client, headers, notes="weekly")

    resp = client.put(f"/api/expenses/{expense['id']}", json={"amount": "900"}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["amount"]) == Decimal("900")
    assert body["title"] == "Groceries"
    assert body["notes"] == "weekly"


def test_delete_returns_message_and_unknown_is_not_found(client, headers):
    expense = add_expense(client, headers)

    resp = client.delete(f"/api/expenses/{expense['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Deleted"}

    assert client.put(f"/api/expenses/{expense['id']}", json={"amount": "1"}, headers=headers).status_code == 404
    assert client.delete(f"/api/expenses/{expense['id']}", headers=headers).status_code == 404


def test_non_positive_amount_is_rejected(client, headers):
    resp = client.post("/api/expenses", json={"title": "x", "category": "y", "amount": "0"}, headers=headers)
    assert resp.status_code == 400


def test_expenses_are_scoped_to_user(client, headers, make_user):
    add_expense(client, headers)
    _, other = make_user("user_bob")
    assert client.get("/api/expenses", headers=other).json() == []
