import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from faker import Faker
from dateutil.relativedelta import relativedelta

from finance_dashboard.core.database import Base, SessionLocal, engine
from finance_dashboard.models.account import Account, AccountType, Budget, Transaction, TransactionType
from finance_dashboard.models.expense import Expense
from finance_dashboard.models.investment import Investment, InvestmentType
from finance_dashboard.models.loan import Loan, LoanStatus, LoanType
from finance_dashboard.models.portfolio import PPF, FixedDeposit, Gold
from finance_dashboard.models.savings import SavingsJar
from finance_dashboard.models.user import User

fake = Faker("en_IN")

DEMO_SUBJECT = "user_demo_seed"
EXPENSE_CATEGORIES = ["groceries", "rent", "utilities", "snacks", "travel", "shopping"]


def money(low, high) -> Decimal:
    return Decimal(str(round(random.uniform(low, high), 2)))


Base.metadata.create_all(bind=engine)
db = SessionLocal()

try:
    print("🔄 Clearing existing demo user...")
    existing = db.query(User).filter(User.clerk_user_id == DEMO_SUBJECT).first()
    if existing:
        db.delete(existing)
        db.commit()
    print("✅ Data cleared.")

    print("🔄 Creating demo user and accounts...")
    user = User(
        clerk_user_id=DEMO_SUBJECT,
        email=fake.unique.email(),
        name=fake.name(),
        whatsapp_number="91" + "".join(filter(str.isdigit, fake.msisdn()))[:10],
        monthly_income=Decimal("85000"),
        credit_score=random.randint(650, 820),
    )
    db.add(user)
    db.flush()

    accounts = [
        Account(user_id=user.id, name=f"{fake.company()} Savings", type=AccountType.SAVINGS,
                balance=money(50000, 300000), is_default=True),
        Account(user_id=user.id, name=f"{fake.company()} Current", type=AccountType.CURRENT,
                balance=money(10000, 80000), is_default=False),
    ]
    db.add_all(accounts)
    db.add(Budget(user_id=user.id, amount=Decimal("40000")))
    db.commit()
    print(f"✅ Seeded user {user.id} with {len(accounts)} accounts")

    print("🔄 Creating transactions and expenses...")
    now = datetime.now(timezone.utc)
    transactions = []
    for months_back in range(6):
        salary_day = now - relativedelta(months=months_back)
        transactions.append(Transaction(
            user_id=user.id, account_id=accounts[0].id, type=TransactionType.INCOME,
            amount=Decimal("85000"), category="salary", description="Monthly salary",
            date=salary_day.replace(day=1),
        ))
    for _ in range(60):
        transactions.append(Transaction(
            user_id=user.id, account_id=random.choice(accounts).id, type=TransactionType.EXPENSE,
            amount=money(100, 6000), category=random.choice(EXPENSE_CATEGORIES),
            description=fake.sentence(nb_words=4),
            date=now - timedelta(days=random.randint(0, 170)),
        ))
    expenses = [
        Expense(user_id=user.id, title=fake.word().capitalize(), category=random.choice(EXPENSE_CATEGORIES),
                amount=money(50, 3000), date=date.today() - timedelta(days=random.randint(0, 60)))
        for _ in range(20)
    ]
    db.add_all(transactions + expenses)
    db.commit()
    print(f"✅ Seeded {len(transactions)} transactions")
    print(f"✅ Seeded {len(expenses)} expenses")

    print("🔄 Creating loans, savings and holdings...")
    issue = date.today() - relativedelta(years=2)
    loans = [
        Loan(user_id=user.id, name="Home loan", lender="HDFC Bank", type=LoanType.HOME,
             status=LoanStatus.ACTIVE, principal_amount=Decimal("2500000"),
             outstanding_balance=Decimal("2100000"), interest_rate=Decimal("8.50"),
             tenure_in_months=240, emi_amount=Decimal("21700"), issue_date=issue,
             next_payment_date=date.today() + relativedelta(months=1, day=5)),
        Loan(user_id=user.id, name="Personal loan", lender="Bajaj Finserv", type=LoanType.PERSONAL,
             status=LoanStatus.ACTIVE, principal_amount=Decimal("300000"),
             outstanding_balance=Decimal("120000"), interest_rate=Decimal("14.00"),
             tenure_in_months=36, emi_amount=Decimal("10250"), issue_date=issue,
             next_payment_date=date.today() + relativedelta(months=1, day=10)),
    ]
    jars = [
        SavingsJar(user_id=user.id, name=name, target_amount=target,
                   current_amount=money(0, float(target) / 2), recent_deposits=[])
        for name, target in (("Emergency fund", Decimal("300000")), ("Vacation", Decimal("120000")))
    ]
    holdings = [
        Investment(user_id=user.id, name="Nifty 50 index fund", type=InvestmentType.MUTUAL_FUNDS,
                   amount=money(50000, 200000), date=date.today() - timedelta(days=400)),
        Investment(user_id=user.id, name=fake.company(), type=InvestmentType.STOCKS,
                   amount=money(10000, 80000), date=date.today() - timedelta(days=120)),
        FixedDeposit(user_id=user.id, bank="SBI", principal=Decimal("100000"), rate=Decimal("7.10"),
                     maturity_date=date.today() + relativedelta(years=1)),
        PPF(user_id=user.id, balance=money(100000, 400000), as_of=date.today()),
        Gold(user_id=user.id, desc="Sovereign gold bond", purchase_price=Decimal("60000"),
             current_value=money(60000, 90000)),
    ]
    db.add_all(loans + jars + holdings)
    db.commit()
    print(f"✅ Seeded {len(loans)} loans, {len(jars)} savings jars and {len(holdings)} holdings")

except Exception as e:
    db.rollback()
    print(f"❌ Error during seeding: {e}")
finally:
    db.close()
