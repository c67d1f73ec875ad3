from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.insights import (
    AIInsightRequest,
    AIInsightResponse,
    ChatRequest,
    ChatResponse,
    DebtInsight,
    RepaymentRequest,
    RepaymentSuggestion,
)
from finance_dashboard.services import ai_service
from finance_dashboard.services.insights_service import (
    chat_reply,
    get_ai_insight,
    get_debt_insights,
    get_financial_context,
    get_repayment_suggestion,
)

router = APIRouter()


@router.get("/financial-context")
def financial_context(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return jsonable_encoder(get_financial_context(db, current_user))
    except Exception as e:
        logger.exception("Error fetching financial context")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/debt-insights", response_model=List[DebtInsight])
def debt_insights(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Up to three debt management tips; rule-based when the model is unavailable."""
    try:
        return [DebtInsight(**item) for item in get_debt_insights(db, current_user)]
    except Exception as e:
        logger.exception("Error generating debt insights")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/repayment-suggestion", response_model=RepaymentSuggestion)
def repayment_suggestion(
    data: RepaymentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    details = (data.outstanding, data.interest_rate, data.emi)
    if any(value is None or value <= 0 for value in details):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing loan details")

    try:
        suggestion = get_repayment_suggestion(
            db,
            current_user,
            outstanding=data.outstanding,
            interest_rate=data.interest_rate,
            emi=data.emi,
        )
        return RepaymentSuggestion(**suggestion)
    except ai_service.AIUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except ai_service.AIServiceError as e:
        logger.error(f"Repayment suggestion failed for {current_user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to get AI suggestion")


@router.post("/copilot", response_model=ChatResponse)
def copilot(
    data: ChatRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Chat with the assistant; the caller's finances ride along as context."""
    messages = [message.model_dump() for message in data.messages]
    try:
        return ChatResponse(reply=chat_reply(db, current_user, messages))
    except ai_service.AIUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except ai_service.AIServiceError as e:
        logger.error(f"Copilot request failed for {current_user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to get AI response")


@router.post("/ai-insights", response_model=AIInsightResponse)
def ai_insight(
    data: AIInsightRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """One dashboard insight card. Budget arithmetic is done here and fixes the card's status."""
    try:
        return AIInsightResponse(**get_ai_insight(db, current_user, data.insight_type))
    except ai_service.AIUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except ai_service.AIServiceError as e:
        logger.error(f"AI insight {data.insight_type} failed for {current_user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate insight")
