from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple
from xml.sax.saxutils import escape

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session

from finance_dashboard.logger_config import logger
from finance_dashboard.models.account import Transaction, TransactionType
from finance_dashboard.services import ai_service
from finance_dashboard.services.account_service import create_transaction
from finance_dashboard.services.user_service import get_user_by_whatsapp_number

CURRENCY_MARKERS = ("₹", "rs.", "rs", "inr")


class ParsedTransaction(BaseModel):
    """Shape the model is asked to return for a free-text WhatsApp message."""
    type: TransactionType
    amount: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Meta WhatsApp Cloud API: "<category> ₹<amount>"
# ---------------------------------------------------------------------------

def parse_text_expense(text: str) -> Optional[Tuple[str, Decimal]]:
    """
    Split a message like 'snacks ₹200' into ('snacks', Decimal('200')).
    Returns None when the message does not have that shape.
    """
    parts = (text or "").split()
    if len(parts) != 2:
        return None

    category, raw_amount = parts
    raw_amount = raw_amount.lower()
    for marker in CURRENCY_MARKERS:
        if raw_amount.startswith(marker):
            raw_amount = raw_amount[len(marker):]
            break

    try:
        amount = Decimal(raw_amount.replace(",", ""))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return category.lower(), amount


def first_message(payload: dict) -> Optional[dict]:
    """entry[0].changes[0].value.messages[0] of a Cloud API notification, if present."""
    try:
        message = payload["entry"][0]["changes"][0]["value"]["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None
    return message if isinstance(message, dict) else None


def record_text_expense(db: Session, sender: str, text: str) -> Optional[Transaction]:
    parsed = parse_text_expense(text)
    if parsed is None:
        logger.info(f"Ignoring unparseable WhatsApp message from {sender}: {text!r}")
        return None

    category, amount = parsed
    user = get_user_by_whatsapp_number(db, sender)
    if not user:
        logger.info(f"WhatsApp number {sender} is not linked to any user")
        return None

    transaction = create_transaction(
        db,
        user_id=user.id,
        txn_type=TransactionType.EXPENSE,
        amount=amount,
        category=category,
        description=f"WhatsApp: {text}",
    )
    logger.info(f"Recorded WhatsApp expense {transaction.id} ({category} {amount}) for user {user.id}")
    return transaction


# ---------------------------------------------------------------------------
# Twilio WhatsApp: free text parsed by the model
# ---------------------------------------------------------------------------

TRANSACTION_PROMPT = """Extract transaction info from this message:
"{message}"

Return JSON:
{{
  "type": "EXPENSE or INCOME",
  "amount": number,
  "category": "string",
  "description": "string"
}}
"""


def parse_transaction_with_ai(message: str) -> Optional[ParsedTransaction]:
    try:
        reply = ai_service.generate_json(TRANSACTION_PROMPT.format(message=message))
        if not isinstance(reply, dict):
            return None
        if isinstance(reply.get("type"), str):
            reply["type"] = reply["type"].upper()
        return ParsedTransaction.model_validate(reply)
    except (ai_service.AIServiceError, ValidationError) as e:
        logger.info(f"Could not parse transaction message {message!r}: {e}")
        return None


def twiml_message(text: str) -> str:
    return f"<Response><Message>{escape(text)}</Message></Response>"


def handle_twilio_message(db: Session, message: str, sender: str) -> str:
    """Store the transaction described by a message and return the reply text."""
    parsed = parse_transaction_with_ai(message)
    if parsed is None:
        return "Could not understand transaction ❌"

    user = get_user_by_whatsapp_number(db, sender)
    if not user:
        return "Number not linked to account ❌"

    create_transaction(
        db,
        user_id=user.id,
        txn_type=parsed.type,
        amount=parsed.amount,
        category=parsed.category,
        description=parsed.description,
    )
    return "Transaction added successfully ✅"


# ---------------------------------------------------------------------------
# Setu account aggregator
# ---------------------------------------------------------------------------

def handle_setu_event(event: dict) -> str:
    """Log a Setu notification and return the kind of event it was."""
    detail = event.get("Detail") if isinstance(event.get("Detail"), dict) else {}
    consent_status = detail.get("ConsentStatus")

    if consent_status:
        consent_id = detail.get("ConsentId")
        logger.info(f"Setu consent {consent_id} status: {consent_status}")
        if consent_status == "ACTIVE":
            logger.info("Consent ACTIVE, ready to request FI data")
        elif consent_status == "REJECTED":
            logger.info("Consent REJECTED by user")
        elif consent_status == "EXPIRED":
            logger.info("Consent EXPIRED")
        return "consent_status"

    if event.get("type") == "FI_DATA_READY":
        logger.info("Setu FI data is ready for fetching")
        return "fi_data_ready"

    logger.info("Other Setu webhook event received")
    return "other"
