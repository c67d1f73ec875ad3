from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from finance_dashboard.common.error_handlers import register_error_handlers
from finance_dashboard.core.config import settings
from finance_dashboard.api import (
    accounts,
    expenses,
    health,
    insights,
    investments,
    loan_overview,
    loans,
    portfolio,
    savings,
    user_profile,
    webhooks,
)

app = FastAPI(title="Finance Dashboard", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register API routers
app.include_router(health.router, prefix="/api/health", tags=["health"])
app.include_router(
    user_profile.router, prefix="/api/user-profile", tags=["user profile"])
app.include_router(savings.router, prefix="/api/savings", tags=["savings"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])
app.include_router(loans.router, prefix="/api/loans", tags=["loans"])
app.include_router(
    loan_overview.router, prefix="/api/loan-overview", tags=["loans"])
app.include_router(
    loan_overview.debt_router, prefix="/api/debt-overview", tags=["loans"])
app.include_router(
    investments.router, prefix="/api/investments", tags=["investments"])
app.include_router(
    portfolio.router, prefix="/api/portfolio-assets", tags=["portfolio"])
app.include_router(
    accounts.accounts_router, prefix="/api/accounts", tags=["accounts"])
app.include_router(
    accounts.transactions_router, prefix="/api/transactions", tags=["transactions"])
app.include_router(accounts.budget_router, prefix="/api/budget", tags=["budget"])
app.include_router(insights.router, prefix="/api", tags=["insights"])
app.include_router(webhooks.router, prefix="/api", tags=["webhooks"])


@app.get("/")
def read_root():
    return {"message": "Welcome to the Finance Dashboard APIs!"}
