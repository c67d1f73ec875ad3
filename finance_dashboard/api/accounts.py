from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.account import TransactionType
from finance_dashboard.models.user import User
from finance_dashboard.schemas.account import (
    AccountCreate,
    AccountResponse,
    BudgetResponse,
    BudgetUpdate,
    CurrentBudgetResponse,
    TransactionCreate,
    TransactionResponse,
)
from finance_dashboard.schemas.insights import BudgetRecommendation
from finance_dashboard.services import ai_service
from finance_dashboard.services.account_service import (
    create_account,
    create_transaction,
    get_accounts,
    get_current_budget,
    get_transactions,
    upsert_budget,
)
from finance_dashboard.services.insights_service import get_budget_recommendation

accounts_router = APIRouter()
transactions_router = APIRouter()
budget_router = APIRouter()


@accounts_router.get("", response_model=List[AccountResponse])
def list_accounts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [AccountResponse.model_validate(a) for a in get_accounts(db, current_user.id)]


@accounts_router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account_route(
    data: AccountCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        account = create_account(
            db,
            user_id=current_user.id,
            name=data.name,
            account_type=data.type,
            balance=data.balance,
            is_default=data.is_default,
        )
        logger.info(f"Account {account.id} created by {current_user.id}")
        return AccountResponse.model_validate(account)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@transactions_router.get("", response_model=List[TransactionResponse])
def list_transactions(
    type: Optional[TransactionType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List transactions, newest first, with optional type and date range filters."""
    try:
        rows = get_transactions(
            db,
            user_id=current_user.id,
            txn_type=type,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )
        return [TransactionResponse.model_validate(t) for t in rows]
    except Exception as e:
        logger.exception("Error fetching transactions")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@transactions_router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction_route(
    data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        transaction = create_transaction(
            db,
            user_id=current_user.id,
            txn_type=data.type,
            amount=data.amount,
            category=data.category,
            description=data.description,
            txn_date=data.date,
            account_id=data.account_id,
            is_recurring=data.is_recurring,
            recurring_interval=data.recurring_interval,
        )
        return TransactionResponse.model_validate(transaction)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@budget_router.get("", response_model=CurrentBudgetResponse)
def current_budget(
    account_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The monthly budget and what has been spent against it this month."""
    budget, spent = get_current_budget(db, current_user.id, account_id=account_id)
    return CurrentBudgetResponse(
        budget=BudgetResponse.model_validate(budget) if budget else None,
        current_expenses=spent,
    )


@budget_router.put("", response_model=BudgetResponse)
def update_budget(
    data: BudgetUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        budget = upsert_budget(db, current_user.id, data.amount)
        return BudgetResponse.model_validate(budget)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@budget_router.get("/recommendation", response_model=BudgetRecommendation)
def budget_recommendation(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """A model-suggested monthly budget from the last 90 days of activity."""
    try:
        return BudgetRecommendation(**get_budget_recommendation(db, current_user))
    except ai_service.AIUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except ai_service.AIServiceError as e:
        logger.error(f"Budget recommendation failed for {current_user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to get budget recommendation")
