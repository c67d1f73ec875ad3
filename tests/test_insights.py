from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_dashboard.models.account import Transaction, TransactionType
from finance_dashboard.models.loan import Loan, LoanStatus, LoanType
from finance_dashboard.services import ai_service
from finance_dashboard.services.insights_service import (
    compute_insight_metrics,
    fallback_debt_insights,
    insight_status,
    parse_insight_reply,
)


def summary(dti, rates=()):
    return {
        "debt_to_income_ratio": dti,
        "active_loans": [{"interest_rate": rate} for rate in rates],
    }


def titles(insights):
    return [item["title"] for item in insights]


def test_fallback_high_dti_and_high_interest():
    insights = fallback_debt_insights(summary(55, rates=[14, 8]))
    assert titles(insights) == ["High Debt-to-Income Ratio", "Focus on High-Interest Debt"]


def test_fallback_healthy_dti_with_refinance_tip():
    insights = fallback_debt_insights(summary(20, rates=[11]))
    assert titles(insights) == ["Healthy Debt-to-Income Ratio", "Consider Refinancing"]


def test_fallback_caps_at_three():
    insights = fallback_debt_insights(summary(30, rates=[13]))
    assert titles(insights) == [
        "Healthy Debt-to-Income Ratio",
        "Focus on High-Interest Debt",
        "Consider Refinancing",
    ]


def test_fallback_general_tip_when_nothing_applies():
    insights = fallback_debt_insights(summary(0))
    assert titles(insights) == ["Review Your Financials"]


def test_fallback_between_thresholds_is_not_labelled():
    assert titles(fallback_debt_insights(summary(38))) == ["Review Your Financials"]


def test_extract_json_tolerates_fences_and_chatter():
    assert ai_service.extract_json('```json\n[{"a": 1}]\n```') == [{"a": 1}]
    assert ai_service.extract_json('Sure! {"b": 2} Hope that helps.') == {"b": 2}
    with pytest.raises(ai_service.AIServiceError):
        ai_service.extract_json("no json here")


def test_debt_insights_fall_back_without_api_key(client, db, user, headers):
    db.add(Loan(user_id=user[0].id, lender="Card", type=LoanType.PERSONAL, status=LoanStatus.ACTIVE,
                principal_amount=Decimal("50000"), outstanding_balance=Decimal("40000"),
                interest_rate=Decimal("18"), emi_amount=Decimal("4000")))
    db.commit()

    resp = client.get("/api/debt-insights", headers=headers)
    assert resp.status_code == 200
    assert "Focus on High-Interest Debt" in titles(resp.json())


def test_debt_insights_use_model_reply(client, headers, monkeypatch):
    reply = '[{"title": "Pay the card first", "insight": "It has the highest rate."}, {"bad": 1}]'
    monkeypatch.setattr(ai_service, "generate_text", lambda contents, system_instruction=None: reply)

    resp = client.get("/api/debt-insights", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == [{"title": "Pay the card first", "insight": "It has the highest rate."}]


def test_repayment_suggestion_requires_loan_details(client, headers):
    resp = client.post("/api/repayment-suggestion", json={"outstanding": "100000", "emi": "5000"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing loan details"


def test_repayment_suggestion_from_model(client, db, user, headers, monkeypatch):
    db.add(Transaction(user_id=user[0].id, type=TransactionType.INCOME, amount=Decimal("90000"), category="salary"))
    db.commit()

    prompts = []

    def fake_generate(contents, system_instruction=None):
        prompts.append(contents)
        return '{"suggestedExtraPayment": 5000, "reasoning": "About a third of your spare cash."}'

    monkeypatch.setattr(ai_service, "generate_text", fake_generate)

    resp = client.post(
        "/api/repayment-suggestion",
        json={"outstanding": "250000", "interest_rate": "11", "emi": "8000"},
        headers=headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["suggested_extra_payment"]) == Decimal("5000")
    assert body["reasoning"] == "About a third of your spare cash."
    assert "₹30000" in prompts[0]


def test_repayment_suggestion_bad_model_reply(client, headers, monkeypatch):
    monkeypatch.setattr(ai_service, "generate_text", lambda contents, system_instruction=None: '{"other": 1}')
    resp = client.post(
        "/api/repayment-suggestion",
        json={"outstanding": "1000", "interest_rate": "10", "emi": "100"},
        headers=headers,
    )
    assert resp.status_code == 502


@pytest.mark.parametrize(
    "reply",
    [
        '{"suggestedExtraPayment": "Rs 5,000", "reasoning": "x"}',
        '{"suggestedExtraPayment": null, "reasoning": "x"}',
        '{"suggestedExtraPayment": -500, "reasoning": "x"}',
        '[{"suggestedExtraPayment": 5000}]',
    ],
)
def test_repayment_suggestion_unusable_amount_is_bad_gateway(client, headers, monkeypatch, reply):
    monkeypatch.setattr(ai_service, "generate_text", lambda contents, system_instruction=None: reply)
    resp = client.post(
        "/api/repayment-suggestion",
        json={"outstanding": "1000", "interest_rate": "10", "emi": "100"},
        headers=headers,
    )
    assert resp.status_code == 502
    assert resp.json()["message"] == "Failed to get AI suggestion"


@pytest.mark.parametrize("field", ["outstanding", "interest_rate", "emi"])
def test_repayment_suggestion_rejects_non_positive_loan_details(client, headers, field):
    payload = {"outstanding": "100000", "interest_rate": "10", "emi": "5000", field: "0"}
    resp = client.post("/api/repayment-suggestion", json=payload, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing loan details"

    payload[field] = "-1"
    resp = client.post("/api/repayment-suggestion", json=payload, headers=headers)
    assert resp.status_code == 400


def test_copilot_without_api_key_is_unavailable(client, headers):
    resp = client.post("/api/copilot", json={"messages": [{"role": "user", "content": "Hi"}]}, headers=headers)
    assert resp.status_code == 503


def test_copilot_forwards_history_with_context(client, headers, monkeypatch):
    captured = {}

    def fake_generate(contents, system_instruction=None):
        captured["contents"] = contents
        captured["instruction"] = system_instruction
        return "You spent ₹700 on food."

    monkeypatch.setattr(ai_service, "generate_text", fake_generate)

    resp = client.post(
        "/api/copilot",
        json={"messages": [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello! How can I help?"},
            {"role": "user", "content": "How much on food?"},
        ]},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"reply": "You spent ₹700 on food."}
    assert [m["role"] for m in captured["contents"]] == ["user", "model", "user"]
    assert '"transactions"' in captured["instruction"]


def test_copilot_model_failure_is_bad_gateway(client, headers, monkeypatch):
    def boom(contents, system_instruction=None):
        raise ai_service.AIServiceError("quota exceeded")

    monkeypatch.setattr(ai_service, "generate_text", boom)
    resp = client.post("/api/copilot", json={"messages": [{"role": "user", "content": "Hi"}]}, headers=headers)
    assert resp.status_code == 502


def test_copilot_rejects_empty_history(client, headers):
    resp = client.post("/api/copilot", json={"messages": []}, headers=headers)
    assert resp.status_code == 400


def test_financial_context_lists_holdings(client, headers):
    client.post("/api/accounts", json={"name": "Main", "type": "SAVINGS", "balance": "5000"}, headers=headers)
    client.post("/api/transactions", json={"type": "EXPENSE", "amount": "250", "category": "snacks"}, headers=headers)

    resp = client.get("/api/financial-context", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["transactions"]) == 1
    assert body["transactions"][0]["category"] == "snacks"
    assert body["accounts"][0]["name"] == "Main"
    assert body["budget"] is None
    for key in ("loans", "investments", "savings_jars", "ppfs", "fixed_deposits", "bonds", "real_estates", "golds"):
        assert body[key] == []


def insight_context(transactions=(), budget=None, balance="0", loans=()):
    return {
        "transactions": list(transactions),
        "accounts": [{"name": "Main", "balance": Decimal(balance)}],
        "budget": {"amount": Decimal(budget)} if budget else None,
        "loans": list(loans),
        "investments": [],
    }


def txn(amount, type=TransactionType.EXPENSE, day=date(2026, 6, 5), category="food", recurring=False):
    return {
        "type": type,
        "amount": Decimal(amount),
        "date": datetime.combine(day, datetime.min.time()),
        "category": category,
        "description": None,
        "is_recurring": recurring,
    }


def test_insight_metrics_project_current_month():
    context = insight_context(
        [
            txn("600", day=date(2026, 6, 2), category="food"),
            txn("400", day=date(2026, 6, 8), category="fuel"),
            txn("2000", day=date(2026, 5, 20), category="rent", recurring=True),
            txn("50000", type=TransactionType.INCOME, day=date(2026, 6, 1), category="salary"),
        ],
        budget="4000",
        balance="10000",
    )
    metrics = compute_insight_metrics(context, today=date(2026, 6, 10))

    assert metrics["income"] == Decimal("50000")
    assert metrics["expense"] == Decimal("3000")
    assert metrics["current_month_expenses"] == Decimal("1000")
    assert metrics["projected_monthly_expense"] == Decimal("3000")
    assert metrics["budget_completion"] == Decimal("75")
    assert [cat for cat, _ in metrics["top_categories"]] == ["rent", "food", "fuel"]
    assert len(metrics["recurring_expenses"]) == 1


@pytest.mark.parametrize(
    "budget, spent, balance, expected",
    [
        ("1000", "1200", "0", "critical"),
        ("1000", "950", "0", "critical"),
        ("1000", "800", "0", "warning"),
        ("1000", "100", "0", None),
        (None, "100", "5000", "healthy"),
    ],
)
def test_insight_status_from_budget_usage(budget, spent, balance, expected):
    metrics = compute_insight_metrics(
        insight_context([txn(spent)], budget=budget, balance=balance), today=date(2026, 6, 10)
    )
    assert insight_status("spending_analysis", metrics) == expected
    assert insight_status("future_expenditure", metrics) is None


@pytest.mark.parametrize(
    "budget, spent, expected",
    [(None, "100", "warning"), ("2000", "1000", "critical"), ("4000", "1000", "warning"), ("10000", "1000", "healthy")],
)
def test_budget_prediction_status_uses_projection(budget, spent, expected):
    # 1000 spent by the 10th of a 30-day month projects to 3000
    metrics = compute_insight_metrics(insight_context([txn(spent)], budget=budget), today=date(2026, 6, 10))
    assert insight_status("budget_prediction", metrics) == expected


def test_parse_insight_reply():
    assert parse_insight_reply("HEADLINE: 🟢 On track\nDETAIL: Keep it up.") == {
        "headline": "🟢 On track",
        "detail": "Keep it up.",
    }
    assert parse_insight_reply("🟡 Watch dining\nEat out less.") == {
        "headline": "🟡 Watch dining",
        "detail": "Eat out less.",
    }


def test_ai_insight_over_budget_is_critical(client, headers, monkeypatch):
    client.put("/api/budget", json={"amount": "1000"}, headers=headers)
    client.post("/api/transactions", json={"type": "EXPENSE", "amount": "1500", "category": "dining"}, headers=headers)

    prompts = []

    def fake_generate(contents, system_instruction=None):
        prompts.append(contents)
        return "HEADLINE: 🟡 Spending looks fine\nDETAIL: Cook at home twice a week."

    monkeypatch.setattr(ai_service, "generate_text", fake_generate)

    resp = client.post("/api/ai-insights", json={"insight_type": "spending_analysis"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "insight_type": "spending_analysis",
        "status": "critical",
        "headline": "🟡 Spending looks fine",
        "detail": "Cook at home twice a week.",
    }
    assert "You MUST start the HEADLINE with 🔴" in prompts[0]
    assert "dining ₹1500" in prompts[0]


def test_ai_insight_status_follows_headline_when_unconstrained(client, headers, monkeypatch):
    monkeypatch.setattr(
        ai_service,
        "generate_text",
        lambda contents, system_instruction=None: "HEADLINE: 🟢 Steady\nDETAIL: Nothing alarming next month.",
    )
    resp = client.post("/api/ai-insights", json={"insight_type": "future_expenditure"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_ai_insight_errors(client, headers):
    resp = client.post("/api/ai-insights", json={"insight_type": "horoscope"}, headers=headers)
    assert resp.status_code == 400

    resp = client.post("/api/ai-insights", json={}, headers=headers)
    assert resp.status_code == 503


def test_budget_recommendation_from_model(client, db, user, headers, monkeypatch):
    db.add(Loan(user_id=user[0].id, name="Car", lender="HDFC", type=LoanType.AUTO, status=LoanStatus.ACTIVE,
                principal_amount=Decimal("500000"), outstanding_balance=Decimal("300000"),
                interest_rate=Decimal("9"), emi_amount=Decimal("12000")))
    db.commit()

    prompts = []

    def fake_generate(contents, system_instruction=None):
        prompts.append(contents)
        return (
            '```json\n{"suggestedAmount": 45000, "explanation": "Covers your EMI and leaves room to save.",'
            ' "breakdown": {"fixedCosts": 25000, "savings": 10000, "discretionary": 10000}}\n```'
        )

    monkeypatch.setattr(ai_service, "generate_text", fake_generate)

    resp = client.get("/api/budget/recommendation", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["suggested_amount"]) == Decimal("45000")
    assert body["explanation"] == "Covers your EMI and leaves room to save."
    assert Decimal(body["breakdown"]["fixed_costs"]) == Decimal("25000")
    assert Decimal(body["breakdown"]["savings"]) == Decimal("10000")
    assert Decimal(body["breakdown"]["discretionary"]) == Decimal("10000")
    assert '"emi_amount": "12000' in prompts[0]


def test_budget_recommendation_failures(client, headers, monkeypatch):
    assert client.get("/api/budget/recommendation", headers=headers).status_code == 503

    monkeypatch.setattr(
        ai_service,
        "generate_text",
        lambda contents, system_instruction=None: '{"suggestedAmount": "plenty", "explanation": "x"}',
    )
    resp = client.get("/api/budget/recommendation", headers=headers)
    assert resp.status_code == 502
    assert resp.json()["message"] == "Failed to get budget recommendation"
