import calendar
import json
import re
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session

from finance_dashboard.logger_config import logger
from finance_dashboard.models.account import Account, Budget, Transaction, TransactionType
from finance_dashboard.models.investment import Investment
from finance_dashboard.models.loan import Loan, LoanStatus
from finance_dashboard.models.portfolio import PPF, BondDetail, FixedDeposit, Gold, RealEstate
from finance_dashboard.models.savings import SavingsJar
from finance_dashboard.models.user import User
from finance_dashboard.services import ai_service

ZERO = Decimal("0")
CONTEXT_WINDOW_DAYS = 90
MAX_INSIGHTS = 3


class RepaymentReply(BaseModel):
    """Shape the model is asked to return for an extra-payment suggestion."""

    suggestedExtraPayment: Decimal = Field(..., ge=0)
    reasoning: str = ""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _naive(moment: datetime) -> datetime:
    """Strip tzinfo so comparisons work on backends that store naive timestamps."""
    return moment.replace(tzinfo=None)


def _rows(objects, fields: List[str]) -> List[dict]:
    return [{field: getattr(obj, field) for field in fields} for obj in objects]


def _total(values) -> Decimal:
    return sum((Decimal(v or 0) for v in values), ZERO)


# ---------------------------------------------------------------------------
# Financial context
# ---------------------------------------------------------------------------

def get_financial_context(db: Session, user: User, now: Optional[datetime] = None) -> dict:
    """Everything the assistant knows about a user: 90 days of transactions plus all holdings."""
    since = _naive((now or _now()) - timedelta(days=CONTEXT_WINDOW_DAYS))
    uid = user.id

    transactions = (
        db.query(Transaction)
        .filter(Transaction.user_id == uid, Transaction.date >= since)
        .order_by(Transaction.date.desc())
        .all()
    )
    budget = db.query(Budget).filter(Budget.user_id == uid).first()

    return {
        "transactions": _rows(transactions, [
            "id", "type", "amount", "description", "date", "category",
            "is_recurring", "recurring_interval", "status",
        ]),
        "loans": _rows(db.query(Loan).filter(Loan.user_id == uid).all(), [
            "id", "name", "lender", "type", "principal_amount", "outstanding_balance",
            "interest_rate", "tenure_in_months", "emi_amount", "issue_date",
            "next_payment_date", "status",
        ]),
        "investments": _rows(db.query(Investment).filter(Investment.user_id == uid).all(), [
            "id", "name", "type", "amount", "date", "notes",
        ]),
        "savings_jars": _rows(db.query(SavingsJar).filter(SavingsJar.user_id == uid).all(), [
            "id", "name", "target_amount", "current_amount", "goal_date",
        ]),
        "budget": {"amount": budget.amount} if budget else None,
        "ppfs": _rows(db.query(PPF).filter(PPF.user_id == uid).all(), ["balance", "as_of"]),
        "fixed_deposits": _rows(db.query(FixedDeposit).filter(FixedDeposit.user_id == uid).all(), [
            "bank", "principal", "rate", "maturity_date",
        ]),
        "bonds": _rows(db.query(BondDetail).filter(BondDetail.user_id == uid).all(), [
            "name", "units", "invested", "current_value", "maturity_date",
        ]),
        "real_estates": _rows(db.query(RealEstate).filter(RealEstate.user_id == uid).all(), [
            "desc", "purchase_price", "current_value",
        ]),
        "golds": _rows(db.query(Gold).filter(Gold.user_id == uid).all(), [
            "desc", "purchase_price", "current_value",
        ]),
        "accounts": _rows(db.query(Account).filter(Account.user_id == uid).all(), [
            "name", "type", "balance", "is_default",
        ]),
    }


# ---------------------------------------------------------------------------
# Debt insights
# ---------------------------------------------------------------------------

def build_debt_summary(db: Session, user: User, now: Optional[datetime] = None) -> dict:
    """Summarise debt against six months of income and all recorded assets."""
    since = _naive((now or _now()) - relativedelta(months=6))

    loans = (
        db.query(Loan)
        .filter(Loan.user_id == user.id, Loan.status == LoanStatus.ACTIVE)
        .all()
    )
    incomes = (
        db.query(Transaction)
        .filter(
            Transaction.user_id == user.id,
            Transaction.type == TransactionType.INCOME,
            Transaction.date >= since,
        )
        .all()
    )
    accounts = db.query(Account).filter(Account.user_id == user.id).all()
    investments = db.query(Investment).filter(Investment.user_id == user.id).all()
    deposits = db.query(FixedDeposit).filter(FixedDeposit.user_id == user.id).all()

    total_debt = _total(l.outstanding_balance for l in loans)
    total_emi = _total(l.emi_amount for l in loans)

    monthly_incomes = defaultdict(lambda: ZERO)
    for txn in incomes:
        monthly_incomes[txn.date.strftime("%Y-%m")] += Decimal(txn.amount)
    average_income = (
        sum(monthly_incomes.values(), ZERO) / len(monthly_incomes) if monthly_incomes else ZERO
    )

    liquid_assets = _total(acc.balance for acc in accounts)
    total_assets = (
        liquid_assets
        + _total(inv.amount for inv in investments)
        + _total(fd.principal for fd in deposits)
    )

    dti = float(total_emi / average_income * 100) if average_income > 0 else 0.0

    return {
        "total_debt": float(total_debt),
        "total_monthly_emi_payments": float(total_emi),
        "average_monthly_income": float(average_income),
        "debt_to_income_ratio": dti,
        "total_liquid_assets": float(liquid_assets),
        "total_assets": float(total_assets),
        "active_loans": [
            {
                "type": loan.type.value,
                "outstanding_balance": float(loan.outstanding_balance),
                "interest_rate": float(loan.interest_rate),
                "emi_amount": float(loan.emi_amount or 0),
            }
            for loan in loans
        ],
    }


def fallback_debt_insights(summary: dict) -> List[dict]:
    """Rule-based insights used when the model is unavailable."""
    insights = []
    dti = summary["debt_to_income_ratio"]

    if dti > 40:
        insights.append({
            "title": "High Debt-to-Income Ratio",
            "insight": (
                f"Your debt-to-income ratio is {dti:.1f}%. Consider increasing your income "
                "or reducing expenses to improve your financial health."
            ),
        })
    elif 0 < dti <= 35:
        insights.append({
            "title": "Healthy Debt-to-Income Ratio",
            "insight": f"Your debt-to-income ratio of {dti:.1f}% is within a healthy range. Keep up the good work!",
        })

    high_interest = [l for l in summary["active_loans"] if l["interest_rate"] > 12]
    if high_interest:
        insights.append({
            "title": "Focus on High-Interest Debt",
            "insight": (
                f"You have {len(high_interest)} loan(s) with interest rates above 12%. Consider paying "
                "these off first using the debt avalanche method to save on interest."
            ),
        })

    if dti < 40 and any(l["interest_rate"] > 10 for l in summary["active_loans"]):
        insights.append({
            "title": "Consider Refinancing",
            "insight": (
                "With your current financial position, you may be eligible for loan refinancing at "
                "lower interest rates, which could reduce your monthly payments."
            ),
        })

    if not insights:
        insights.append({
            "title": "Review Your Financials",
            "insight": (
                "Continue making regular payments on your debts. Consider creating a budget to track "
                "expenses and find opportunities to save."
            ),
        })

    return insights[:MAX_INSIGHTS]


DEBT_INSIGHTS_PROMPT = """You are an expert financial advisor for a user in India.
Analyze the following financial summary and provide 2-3 concise, actionable, and encouraging insights to help them manage their debt.

Financial Summary:
{summary}

Instructions:
1. Focus on high-impact advice. Suggest specific strategies like the debt avalanche method (focusing on high-interest loans) or debt snowball (focusing on smallest balances).
2. Mention refinancing opportunities if they have high-interest loans and their DTI ratio is reasonable (e.g., under 40-45%).
3. Keep the tone positive and empowering.
4. Return your response ONLY as a valid JSON array of objects. Each object must have two keys: "title" (a short heading) and "insight" (a 1-2 sentence description).
5. Do not include any other text, greetings, or markdown formatting outside of the JSON array.
"""


def get_debt_insights(db: Session, user: User) -> List[dict]:
    summary = build_debt_summary(db, user)

    try:
        reply = ai_service.generate_json(DEBT_INSIGHTS_PROMPT.format(summary=json.dumps(summary, indent=2)))
        if not isinstance(reply, list):
            raise ai_service.AIServiceError("Invalid response format from AI")

        insights = [
            {"title": item["title"], "insight": item["insight"]}
            for item in reply
            if isinstance(item, dict)
            and isinstance(item.get("title"), str)
            and isinstance(item.get("insight"), str)
        ][:MAX_INSIGHTS]
        if not insights:
            raise ai_service.AIServiceError("No valid insights generated")
        return insights
    except ai_service.AIServiceError as e:
        logger.warning(f"Falling back to rule-based debt insights: {e}")
        return fallback_debt_insights(summary)


# ---------------------------------------------------------------------------
# Repayment suggestion
# ---------------------------------------------------------------------------

REPAYMENT_PROMPT = """You are a cautious but encouraging financial advisor in India. A user wants a suggestion for an extra monthly payment on their loan.

User's Financial Summary (3-month average):
- Average Monthly Income: ₹{income:.0f}
- Average Monthly Expenses: ₹{expenses:.0f}
- Estimated Monthly Disposable Income: ₹{disposable:.0f}
- Total Savings/Liquid Assets: ₹{liquid:.0f}

Loan Details:
- Outstanding Balance: ₹{outstanding:.0f}
- Interest Rate: {rate}%
- Current EMI: ₹{emi:.0f}

Your Task:
1. Analyze the user's disposable income.
2. Suggest a single, realistic "extra monthly payment" amount. This amount should be a portion of their disposable income (e.g., 25-50%), ensuring they still have a buffer for savings and emergencies. The amount should be a round number, preferably a multiple of 500.
3. Provide a brief, one-sentence reasoning for your suggestion.

Return your response ONLY as a valid JSON object with two keys:
- "suggestedExtraPayment": A number representing the suggested extra payment.
- "reasoning": A string explaining your suggestion.
"""


def summarize_cash_flow(db: Session, user: User, now: Optional[datetime] = None) -> dict:
    """Three-month average income, expenses and disposable income, plus liquid assets."""
    since = _naive((now or _now()) - relativedelta(months=3))
    transactions = (
        db.query(Transaction)
        .filter(Transaction.user_id == user.id, Transaction.date >= since)
        .all()
    )
    income = _total(t.amount for t in transactions if t.type == TransactionType.INCOME) / 3
    expenses = _total(t.amount for t in transactions if t.type == TransactionType.EXPENSE) / 3
    liquid = _total(
        balance for (balance,) in db.query(Account.balance).filter(Account.user_id == user.id).all()
    )
    return {
        "average_monthly_income": income,
        "average_monthly_expenses": expenses,
        "estimated_disposable_income": income - expenses,
        "total_liquid_assets": liquid,
    }


def get_repayment_suggestion(
    db: Session,
    user: User,
    outstanding: Decimal,
    interest_rate: Decimal,
    emi: Decimal,
) -> dict:
    """Ask the model for an extra monthly payment; raises AIServiceError on failure."""
    flow = summarize_cash_flow(db, user)
    prompt = REPAYMENT_PROMPT.format(
        income=flow["average_monthly_income"],
        expenses=flow["average_monthly_expenses"],
        disposable=flow["estimated_disposable_income"],
        liquid=flow["total_liquid_assets"],
        outstanding=outstanding,
        rate=interest_rate,
        emi=emi,
    )
    reply = ai_service.generate_json(prompt)
    try:
        suggestion = RepaymentReply.model_validate(reply)
    except ValidationError as e:
        raise ai_service.AIServiceError("Invalid response format from AI") from e

    return {
        "suggested_extra_payment": suggestion.suggestedExtraPayment,
        "reasoning": suggestion.reasoning,
    }


# ---------------------------------------------------------------------------
# Budget recommendation
# ---------------------------------------------------------------------------

BUDGET_PROMPT = """You are a professional financial advisor. Analyze the following user data and suggest a realistic monthly budget.

User Data:
- Transactions (last 90 days): {transactions}
- Loans (Monthly EMI obligations): {loans}
- Investments (Current Portfolio): {investments}
- Cash Balance (Across accounts): {accounts}

Guidelines:
1. Calculate average monthly income and regular expenses.
2. Factor in loan EMIs as mandatory fixed costs.
3. Recommend a portion for savings/investments (ideally 20% if feasible).
4. Suggest a "Safe Spending" monthly budget that covers necessities + some discretionary spending but keeps them within their means.
5. Provide a clear, encouraging explanation for the suggested amount.

Respond ONLY with valid JSON in this format:
{{"suggestedAmount": number, "explanation": "string", "breakdown": {{"fixedCosts": number, "savings": number, "discretionary": number}}}}
"""


class BudgetBreakdownReply(BaseModel):
    fixedCosts: Decimal = Field(..., ge=0)
    savings: Decimal = Field(..., ge=0)
    discretionary: Decimal = Field(..., ge=0)


class BudgetReply(BaseModel):
    suggestedAmount: Decimal = Field(..., ge=0)
    explanation: str = ""
    breakdown: BudgetBreakdownReply


def get_budget_recommendation(db: Session, user: User, now: Optional[datetime] = None) -> dict:
    """Ask the model for a monthly budget; raises AIServiceError on failure."""
    since = _naive((now or _now()) - timedelta(days=CONTEXT_WINDOW_DAYS))
    uid = user.id

    transactions = (
        db.query(Transaction)
        .filter(Transaction.user_id == uid, Transaction.date >= since)
        .all()
    )
    loans = db.query(Loan).filter(Loan.user_id == uid, Loan.status == LoanStatus.ACTIVE).all()
    investments = db.query(Investment).filter(Investment.user_id == uid).all()
    accounts = db.query(Account).filter(Account.user_id == uid).all()

    def dumps(rows):
        return json.dumps(rows, default=str)

    prompt = BUDGET_PROMPT.format(
        transactions=dumps(_rows(transactions, ["amount", "type", "category", "date"])),
        loans=dumps(_rows(loans, ["emi_amount", "type", "name"])),
        investments=dumps(_rows(investments, ["amount", "type", "name"])),
        accounts=dumps(_rows(accounts, ["balance", "name"])),
    )
    reply = ai_service.generate_json(prompt)
    try:
        budget = BudgetReply.model_validate(reply)
    except ValidationError as e:
        raise ai_service.AIServiceError("Invalid response format from AI") from e

    return {
        "suggested_amount": budget.suggestedAmount,
        "explanation": budget.explanation,
        "breakdown": {
            "fixed_costs": budget.breakdown.fixedCosts,
            "savings": budget.breakdown.savings,
            "discretionary": budget.breakdown.discretionary,
        },
    }


# ---------------------------------------------------------------------------
# Dashboard insight cards
# ---------------------------------------------------------------------------

CRITICAL, WARNING, HEALTHY = "critical", "warning", "healthy"
STATUS_EMOJI = {CRITICAL: "🔴", WARNING: "🟡", HEALTHY: "🟢"}

SUBSCRIPTION_RE = re.compile(r"netflix|spotify|prime|gym|subscription|fee", re.IGNORECASE)
HEADLINE_RE = re.compile(r"HEADLINE:\s*(.+)")
DETAIL_RE = re.compile(r"DETAIL:\s*(.+)")

INSIGHT_BRIEF = """You are a personal finance advisor. Respond ONLY in this exact format:
HEADLINE: <one short verdict sentence, max 12 words>
DETAIL: <one actionable sentence, max 20 words>
Start HEADLINE with a status emoji: 🟢 (healthy), 🟡 (needs attention), or 🔴 (critical). No other text."""

INSIGHT_TASKS = {
    "spending_analysis": "Give a spending verdict in the HEADLINE. Put one specific saving tip or praise in DETAIL.",
    "budget_prediction": "Put the budget projection verdict in HEADLINE. Put one specific trim tip or encouragement in DETAIL.",
    "anomaly_detection": "Put the anomaly verdict in HEADLINE (mention any unusual spike category). Put what to watch or confirm normal in DETAIL.",
    "future_expenditure": "Put a one-phrase trajectory verdict in HEADLINE. Put the single biggest financial risk to watch next month in DETAIL.",
    "spending_leakage": "Name the top leakage category in the HEADLINE. Give one concrete fix action in DETAIL.",
    "savings_rate": "State current savings posture in HEADLINE. Give one specific savings action in DETAIL.",
    "investment_health": "State portfolio health verdict in HEADLINE. Give one actionable improvement in DETAIL.",
    "debt_optimization": "State debt burden verdict in HEADLINE. Name the best repayment tactic in DETAIL.",
    "subscription_audit": "State subscription health verdict in HEADLINE. Call out the top subscription to review or cut in DETAIL.",
}

# Cards whose colour is pinned by the budget arithmetic below
BUDGET_BOUND_TYPES = {
    "spending_analysis", "anomaly_detection", "spending_leakage", "savings_rate", "subscription_audit",
}


def _is_expense(row: dict) -> bool:
    return row["type"] == TransactionType.EXPENSE


def _active(loans: List[dict]) -> List[dict]:
    return [loan for loan in loans if loan["status"] == LoanStatus.ACTIVE]


def compute_insight_metrics(context: dict, today: Optional[date] = None) -> dict:
    """
    The arithmetic behind the insight cards, done here so the model only
    has to phrase a verdict.
    """
    today = today or _now().date()
    transactions = context["transactions"]
    expenses = [t for t in transactions if _is_expense(t)]

    income = _total(t["amount"] for t in transactions if t["type"] == TransactionType.INCOME)
    expense = _total(t["amount"] for t in expenses)
    total_balance = _total(a["balance"] for a in context["accounts"])

    month_start = today.replace(day=1)
    current_month_expenses = _total(t["amount"] for t in expenses if t["date"].date() >= month_start)
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    projected = current_month_expenses / today.day * days_in_month

    by_category = defaultdict(lambda: ZERO)
    for t in expenses:
        by_category[t["category"]] += Decimal(t["amount"])
    top_categories = sorted(by_category.items(), key=lambda item: item[1], reverse=True)[:3]

    budget = Decimal(context["budget"]["amount"]) if context["budget"] else None
    budget_completion = expense / budget * 100 if budget else ZERO

    loans = _active(context["loans"])
    return {
        "income": income,
        "expense": expense,
        "total_balance": total_balance,
        "current_month_expenses": current_month_expenses,
        "days_elapsed": today.day,
        "projected_monthly_expense": projected,
        "top_categories": top_categories,
        "budget": budget,
        "budget_completion": budget_completion,
        "recurring_expenses": [t for t in expenses if t["is_recurring"]],
        "total_emi": _total(l["emi_amount"] for l in loans),
        "total_loan_balance": _total(l["outstanding_balance"] for l in loans),
        "total_invested": _total(i["amount"] for i in context["investments"]),
    }


def insight_status(insight_type: str, metrics: dict) -> Optional[str]:
    """The colour the numbers force on a card, or None when the model may choose."""
    budget = metrics["budget"]

    if insight_type == "budget_prediction":
        if not budget:
            return WARNING
        projected = metrics["projected_monthly_expense"]
        if projected > budget:
            return CRITICAL
        return WARNING if projected / budget * 100 >= 75 else HEALTHY

    if insight_type not in BUDGET_BOUND_TYPES:
        return None

    completion = metrics["budget_completion"]
    if budget and metrics["expense"] > budget:
        return CRITICAL
    if completion >= 90:
        return CRITICAL
    if completion >= 70:
        return WARNING
    if not budget and metrics["total_balance"] + metrics["income"] > metrics["expense"] * Decimal("1.5"):
        return HEALTHY
    return None


def _money(value) -> str:
    return f"₹{Decimal(value):.0f}"


def build_insight_prompt(insight_type: str, context: dict, metrics: dict, status: Optional[str]) -> str:
    budget = metrics["budget"]
    top = ", ".join(f"{cat} {_money(amount)}" for cat, amount in metrics["top_categories"]) or "none"
    overview = (
        f"Income {_money(metrics['income'])} | Expenses {_money(metrics['expense'])} | "
        f"Budget {_money(budget) if budget else 'not set'} | "
        f"Total Account Balance {_money(metrics['total_balance'])} | Top spend: {top}. "
        f"Budget completion: {metrics['budget_completion']:.1f}%."
    )

    if insight_type == "budget_prediction":
        data = (
            f"Income {_money(metrics['income'])} | Expenses so far {_money(metrics['current_month_expenses'])} "
            f"in {metrics['days_elapsed']} days | Projected full-month {_money(metrics['projected_monthly_expense'])} | "
            f"Budget {_money(budget or 0)} | Recurring expenses: {len(metrics['recurring_expenses'])}."
        )
    elif insight_type == "anomaly_detection":
        recent = ", ".join(
            f"{t['type'].value} {_money(t['amount'])} {t['category']}" for t in context["transactions"][:20]
        )
        data = f"{overview}\nRecent transactions (latest 20): {recent or 'none'}."
    elif insight_type == "spending_leakage":
        recurring = ", ".join(
            f"{_money(t['amount'])} {t['description'] or t['category']}" for t in metrics["recurring_expenses"]
        )
        data = f"{overview}\nRecurring expenses: {recurring or 'none'}."
    elif insight_type == "savings_rate":
        jars = "; ".join(
            f"{j['name']}: {_money(j['current_amount'])}/{_money(j['target_amount'])}" for j in context["savings_jars"]
        )
        data = f"{overview} Savings jars: {jars or 'none set'}."
    elif insight_type == "investment_health":
        holdings = "; ".join(
            f"{i['name']}[{i['type'].value}] {_money(i['amount'])}" for i in context["investments"]
        )
        ppf = _money(context["ppfs"][-1]["balance"]) if context["ppfs"] else "none"
        data = (
            f"Total invested {_money(metrics['total_invested'])} across {len(context['investments'])} "
            f"investments: {holdings or 'none'}. FDs: {len(context['fixed_deposits'])}. PPF: {ppf}."
        )
    elif insight_type == "debt_optimization":
        loans = "; ".join(
            f"{l['name']}({l['lender']}) {_money(l['outstanding_balance'])} @{Decimal(l['interest_rate']):.1f}% "
            f"EMI {_money(l['emi_amount'] or 0)}"
            for l in _active(context["loans"])
        )
        data = (
            f"Active loans: {loans or 'none'}. Monthly EMI total: {_money(metrics['total_emi'])}. "
            f"Total outstanding: {_money(metrics['total_loan_balance'])}. Monthly income: {_money(metrics['income'])}."
        )
    elif insight_type == "subscription_audit":
        subscriptions = ", ".join(
            f"{_money(t['amount'])} {t['description'] or t['category']}"
            for t in context["transactions"]
            if _is_expense(t) and (t["is_recurring"] or SUBSCRIPTION_RE.search(t["description"] or ""))
        )
        data = f"{overview}\nRecurring/subscription expenses: {subscriptions or 'none detected'}."
    elif insight_type == "spending_analysis":
        data = (
            f"{overview} Current month spent: {_money(metrics['current_month_expenses'])} "
            f"in {metrics['days_elapsed']} days."
        )
    else:
        data = overview

    lines = [INSIGHT_BRIEF, "", f"Data: {data}"]
    if status:
        lines.append(f"You MUST start the HEADLINE with {STATUS_EMOJI[status]}.")
    elif insight_type in BUDGET_BOUND_TYPES:
        lines.append(f"The user is within budget. Start with {STATUS_EMOJI[HEALTHY]} or {STATUS_EMOJI[WARNING]}.")
    lines.append(f"Task: {INSIGHT_TASKS[insight_type]}")
    return "\n".join(lines)


def parse_insight_reply(text: str) -> dict:
    """Split a HEADLINE/DETAIL reply; the first line stands in for a missing HEADLINE."""
    headline = HEADLINE_RE.search(text)
    detail = DETAIL_RE.search(text)
    if headline:
        return {
            "headline": headline.group(1).strip(),
            "detail": detail.group(1).strip() if detail else "",
        }

    first, _, rest = text.strip().partition("\n")
    return {"headline": first.strip(), "detail": rest.strip()}


def _status_from_headline(headline: str) -> str:
    for status, emoji in STATUS_EMOJI.items():
        if headline.startswith(emoji):
            return status
    return WARNING


def get_ai_insight(db: Session, user: User, insight_type: str, today: Optional[date] = None) -> dict:
    """One dashboard card; raises AIServiceError when the model fails."""
    context = get_financial_context(db, user)
    metrics = compute_insight_metrics(context, today)
    status = insight_status(insight_type, metrics)

    text = ai_service.generate_text(build_insight_prompt(insight_type, context, metrics, status))
    card = parse_insight_reply(text)
    if not card["headline"]:
        raise ai_service.AIServiceError("Empty insight from model")

    return {
        "insight_type": insight_type,
        "status": status or _status_from_headline(card["headline"]),
        **card,
    }


# ---------------------------------------------------------------------------
# Chat assistant
# ---------------------------------------------------------------------------

ASSISTANT_INSTRUCTION = """You are a friendly personal finance assistant for a user in India.
Answer using the user's financial data below when it is relevant. Amounts are in INR.
Be concise and practical, and say so when the data does not cover a question.

Financial data (JSON):
{context}
"""


def chat_reply(db: Session, user: User, messages: List[dict]) -> str:
    """Forward the chat history to the model with the user's finances as system instruction."""
    context = get_financial_context(db, user)
    contents = [
        {
            "role": "model" if message["role"] == "assistant" else "user",
            "parts": [{"text": message["content"]}],
        }
        for message in messages
    ]
    instruction = ASSISTANT_INSTRUCTION.format(context=json.dumps(context, default=str))
    return ai_service.generate_text(contents, system_instruction=instruction)
