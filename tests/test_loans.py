from datetime import date
from decimal import Decimal

from finance_dashboard.models.account import Account, AccountType
from finance_dashboard.models.loan import Loan, LoanStatus, LoanType
from finance_dashboard.services.loan_service import get_debt_overview, get_overview_summary


def loan_payload(**overrides):
    payload = {
        "name": "Car loan",
        "lender": "HDFC",
        "type": "AUTO",
        "principal_amount": "500000",
        "outstanding_balance": "300000",
        "interest_rate": "9.5",
        "tenure_in_months": 60,
        "emi_amount": "10500",
        "start_date": "2025-01-31",
    }
    payload.update(overrides)
    return payload


def create_loan(client, headers, **overrides):
    resp = client.post("/api/loans", json=loan_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_sets_first_payment_one_month_after_start(client, headers):
    loan = create_loan(client, headers)
    assert loan["status"] == "ACTIVE"
    assert loan["issue_date"] == "2025-01-31"
    assert loan["next_payment_date"] == "2025-02-28"


def test_create_validates_fields(client, headers):
    assert client.post("/api/loans", json=loan_payload(name="ab"), headers=headers).status_code == 400
    assert client.post("/api/loans", json=loan_payload(lender="H"), headers=headers).status_code == 400
    assert client.post("/api/loans", json=loan_payload(interest_rate="0"), headers=headers).status_code == 400
    assert client.post("/api/loans", json=loan_payload(interest_rate="101"), headers=headers).status_code == 400
    assert client.post("/api/loans", json=loan_payload(tenure_in_months=0), headers=headers).status_code == 400


def test_patch_updates_provided_fields_only(client, headers):
    loan = create_loan(client, headers)
    resp = client.patch(f"/api/loans/{loan['id']}", json={"outstanding_balance": "250000"}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["outstanding_balance"]) == Decimal("250000")
    assert body["lender"] == "HDFC"
    assert Decimal(body["interest_rate"]) == Decimal("9.5")


def test_patch_and_delete_unknown_loan(client, headers):
    resp = client.patch("/api/loans/LON-MISSING", json={"lender": "SBI"}, headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Loan not found or access denied"
    assert client.delete("/api/loans/LON-MISSING", headers=headers).status_code == 404
    assert client.get("/api/loans/LON-MISSING", headers=headers).status_code == 404


def test_delete_loan(client, headers):
    loan = create_loan(client, headers)
    resp = client.delete(f"/api/loans/{loan['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Loan deleted successfully"}
    assert client.get("/api/loans", headers=headers).json() == []


def test_payments_reduce_balance_and_pay_off(client, headers):
    loan = create_loan(client, headers, outstanding_balance="15000")

    resp = client.post(
        f"/api/loans/{loan['id']}/payments",
        json={"amount": "10000", "payment_date": "2025-03-01"},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert Decimal(body["outstanding_balance"]) == Decimal("5000")
    assert body["status"] == "ACTIVE"
    assert body["next_payment_date"] == "2025-03-28"
    assert len(body["payments"]) == 1

    resp = client.post(
        f"/api/loans/{loan['id']}/payments",
        json={"amount": "8000", "payment_date": "2025-04-01"},
        headers=headers,
    )
    body = resp.json()
    assert Decimal(body["outstanding_balance"]) == Decimal("0")
    assert body["status"] == "PAID_OFF"
    assert body["next_payment_date"] is None
    assert [p["payment_date"] for p in body["payments"]] == ["2025-04-01", "2025-03-01"]

    resp = client.post(f"/api/loans/{loan['id']}/payments", json={"amount": "1"}, headers=headers)
    assert resp.status_code == 400


def test_loans_are_private(client, headers, make_user):
    loan = create_loan(client, headers)
    _, other = make_user("user_bob")
    assert client.get(f"/api/loans/{loan['id']}", headers=other).status_code == 404
    assert client.patch(f"/api/loans/{loan['id']}", json={"lender": "X1"}, headers=other).status_code == 404


def test_quick_create_starts_with_outstanding_equal_principal(client, headers):
    resp = client.post(
        "/api/loan-overview",
        json={"lender": "SBI", "type": "HOME", "principal_amount": "2000000", "interest_rate": "8.4"},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert Decimal(body["outstanding_balance"]) == Decimal("2000000")
    assert body["status"] == "ACTIVE"

    listed = client.get("/api/loan-overview", headers=headers).json()
    assert [l["id"] for l in listed] == [body["id"]]


def add_loan(db, user, **fields):
    values = dict(
        user_id=user.id,
        lender="Bank",
        type=LoanType.PERSONAL,
        status=LoanStatus.ACTIVE,
        principal_amount=Decimal("100000"),
        outstanding_balance=Decimal("60000"),
        interest_rate=Decimal("10"),
    )
    values.update(fields)
    loan = Loan(**values)
    db.add(loan)
    db.commit()
    return loan


def test_overview_summary_arithmetic(db, user):
    owner = user[0]
    add_loan(db, owner, interest_rate=Decimal("10"), emi_amount=Decimal("5000"), next_payment_date=date(2026, 6, 5))
    add_loan(db, owner, principal_amount=Decimal("50000"), outstanding_balance=Decimal("20000"),
             interest_rate=Decimal("14"), emi_amount=Decimal("3000"), next_payment_date=date(2026, 5, 20))
    add_loan(db, owner, principal_amount=Decimal("30000"), outstanding_balance=Decimal("0"),
             status=LoanStatus.PAID_OFF, interest_rate=Decimal("20"))

    summary = get_overview_summary(db, owner.id)["summary"]
    assert summary["total_outstanding"] == Decimal("80000")
    assert summary["total_principal"] == Decimal("180000")
    assert summary["total_paid"] == Decimal("100000")
    assert summary["active_loan_count"] == 2
    assert summary["average_interest_rate"] == Decimal("12")
    assert summary["next_payment"] == {"amount": Decimal("3000"), "date": date(2026, 5, 20)}


def test_overview_summary_endpoint_without_loans(client, headers):
    resp = client.get("/api/loan-overview/summary", headers=headers)
    assert resp.status_code == 200
    summary = resp.json()["summary"]
    assert summary["active_loan_count"] == 0
    assert summary["next_payment"] is None
    assert Decimal(summary["average_interest_rate"]) == Decimal("0")


def test_debt_overview_payoff_year_and_history(db, user):
    owner = user[0]
    add_loan(db, owner, issue_date=date(2024, 3, 1), tenure_in_months=24, outstanding_balance=Decimal("40000"))
    add_loan(db, owner, issue_date=None, outstanding_balance=Decimal("10000"))
    add_loan(db, owner, issue_date=date(2026, 1, 15), tenure_in_months=12, outstanding_balance=Decimal("5000"))

    overview = get_debt_overview(db, owner, today=date(2026, 7, 1))

    assert sorted(row["payoff_year"] for row in overview["active_loans"]) == [2026, 2027, 2031]
    assert overview["debt_history"] == [
        {"year": 2024, "balance": Decimal("50000")},
        {"year": 2025, "balance": Decimal("50000")},
        {"year": 2026, "balance": Decimal("55000")},
    ]
    assert overview["credit_score"] == 0
    assert overview["monthly_income"] == Decimal("0")


def test_debt_overview_endpoint(client, db, user, headers):
    add_loan(db, user[0], emi_amount=None)
    resp = client.get("/api/debt-overview", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["active_loans"]) == 1
    assert Decimal(body["active_loans"][0]["monthly_payment"]) == Decimal("0")
    assert len(body["debt_history"]) == 3


def test_debt_overview_total_assets_comes_from_profile_only(db, make_user):
    owner, _ = make_user("user_bob")
    db.add(Account(user_id=owner.id, name="Main", type=AccountType.SAVINGS, balance=Decimal("75000")))
    db.commit()
    assert get_debt_overview(db, owner)["total_assets"] == Decimal("0")

    owner.total_assets = Decimal("250000")
    db.commit()
    assert get_debt_overview(db, owner)["total_assets"] == Decimal("250000")
