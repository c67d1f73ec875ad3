"""create finance dashboard tables

Revision ID: 3b1f2c7d9e01
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3b1f2c7d9e01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

account_type = sa.Enum("CURRENT", "SAVINGS", name="accounttype")
transaction_type = sa.Enum("INCOME", "EXPENSE", name="transactiontype")
transaction_status = sa.Enum("PENDING", "COMPLETED", "FAILED", name="transactionstatus")
recurring_interval = sa.Enum("DAILY", "WEEKLY", "MONTHLY", "YEARLY", name="recurringinterval")
loan_type = sa.Enum("HOME", "AUTO", "PERSONAL", "EDUCATION", "OTHER", name="loantype")
loan_status = sa.Enum("ACTIVE", "PAID_OFF", "DEFAULTED", name="loanstatus")
investment_type = sa.Enum(
    "STOCKS", "MUTUAL_FUNDS", "BONDS", "REAL_ESTATE", "CRYPTO", "OTHER", name="investmenttype"
)


def _timestamps(updated: bool = True):
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True)]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True)
        )
    return columns


def _owner():
    return [
        sa.Column("user_id", sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("clerk_user_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("whatsapp_number", sa.String(length=50), nullable=True),
        sa.Column("monthly_income", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("total_assets", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("credit_score", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_users_clerk_user_id"), "users", ["clerk_user_id"], unique=True)
    op.create_index(op.f("ix_users_whatsapp_number"), "users", ["whatsapp_number"], unique=False)

    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", account_type, nullable=False),
        sa.Column("balance", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        *_owner(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("type", transaction_type, nullable=False),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("status", transaction_status, nullable=False),
        sa.Column("is_recurring", sa.Boolean(), nullable=False),
        sa.Column("recurring_interval", recurring_interval, nullable=True),
        sa.Column("account_id", sa.String(length=20), nullable=True),
        *_owner(),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "budgets",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        *_owner(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("date", sa.Date(), server_default=sa.text("CURRENT_DATE"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_owner(),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "loans",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("lender", sa.String(length=100), nullable=False),
        sa.Column("type", loan_type, nullable=False),
        sa.Column("status", loan_status, nullable=False),
        sa.Column("principal_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("outstanding_balance", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("interest_rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("tenure_in_months", sa.Integer(), nullable=True),
        sa.Column("emi_amount", sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=True),
        sa.Column("next_payment_date", sa.Date(), nullable=True),
        *_owner(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "loan_payments",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("loan_id", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("payment_date", sa.Date(), server_default=sa.text("CURRENT_DATE"), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["loan_id"], ["loans.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "savings_jars",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("target_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("current_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("goal_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recent_deposits", sa.JSON(), nullable=False),
        *_owner(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "investments",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", investment_type, nullable=False),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_owner(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "fixed_deposits",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("bank", sa.String(length=100), nullable=False),
        sa.Column("principal", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("maturity_date", sa.Date(), nullable=True),
        *_owner(),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "ppfs",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("balance", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("as_of", sa.Date(), nullable=False),
        *_owner(),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "bond_details",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("units", sa.Numeric(precision=15, scale=4), nullable=False),
        sa.Column("invested", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("current_value", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("maturity_date", sa.Date(), nullable=True),
        *_owner(),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    for table in ("real_estates", "golds"):
        op.create_table(
            table,
            sa.Column("id", sa.String(length=20), nullable=False),
            sa.Column("desc", sa.String(length=255), nullable=False),
            sa.Column("purchase_price", sa.Numeric(precision=15, scale=2), nullable=False),
            sa.Column("current_value", sa.Numeric(precision=15, scale=2), nullable=False),
            *_owner(),
            *_timestamps(updated=False),
            sa.PrimaryKeyConstraint("id"),
        )

    for table in (
        "accounts", "transactions", "expenses", "loans", "savings_jars", "investments",
        "fixed_deposits", "ppfs", "bond_details", "real_estates", "golds",
    ):
        op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"], unique=False)
    op.create_index(op.f("ix_loan_payments_loan_id"), "loan_payments", ["loan_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_loan_payments_loan_id"), table_name="loan_payments")
    for table in (
        "golds", "real_estates", "bond_details", "ppfs", "fixed_deposits", "investments",
        "savings_jars", "loans", "expenses", "transactions", "accounts",
    ):
        op.drop_index(op.f(f"ix_{table}_user_id"), table_name=table)

    op.drop_table("golds")
    op.drop_table("real_estates")
    op.drop_table("bond_details")
    op.drop_table("ppfs")
    op.drop_table("fixed_deposits")
    op.drop_table("investments")
    op.drop_table("savings_jars")
    op.drop_table("loan_payments")
    op.drop_table("loans")
    op.drop_table("expenses")
    op.drop_table("budgets")
    op.drop_table("transactions")
    op.drop_table("accounts")
    op.drop_index(op.f("ix_users_whatsapp_number"), table_name="users")
    op.drop_index(op.f("ix_users_clerk_user_id"), table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        investment_type, loan_status, loan_type, recurring_interval,
        transaction_status, transaction_type, account_type,
    ):
        enum_type.drop(bind, checkfirst=True)
