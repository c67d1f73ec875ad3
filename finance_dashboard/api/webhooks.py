import json

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from finance_dashboard.core.config import settings
from finance_dashboard.core.dependencies import get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.services.webhook_service import (
    first_message,
    handle_setu_event,
    handle_twilio_message,
    record_text_expense,
    twiml_message,
)

router = APIRouter()


@router.get("/addTransaction", response_class=PlainTextResponse)
def verify_subscription(
    mode: str = Query(None, alias="hub.mode"),
    token: str = Query(None, alias="hub.verify_token"),
    challenge: str = Query(None, alias="hub.challenge"),
):
    """Meta calls this once when the webhook is registered."""
    if mode == "subscribe" and settings.WHATSAPP_VERIFY_TOKEN and token == settings.WHATSAPP_VERIFY_TOKEN:
        logger.info("WhatsApp webhook verified")
        return PlainTextResponse(challenge or "")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Verification failed")


@router.post("/addTransaction")
async def receive_whatsapp_message(request: Request, db: Session = Depends(get_db)):
    """
    WhatsApp Cloud API notifications. Text messages shaped like
    'snacks ₹200' become expenses for the linked user. Meta retries
    anything that is not a 200, so every outcome acknowledges.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("WhatsApp webhook sent a non-JSON body")
        return {"status": "ok"}

    message = first_message(payload)
    if message is None or message.get("type") != "text":
        return {"status": "ok"}

    sender = str(message.get("from", ""))
    text_part = message.get("text")
    text = text_part.get("body") if isinstance(text_part, dict) else None
    if not isinstance(text, str):
        logger.warning(f"WhatsApp text message from {sender} has no body")
        return {"status": "ok"}

    try:
        record_text_expense(db, sender, text)
    except Exception:
        db.rollback()
        logger.exception(f"Could not store WhatsApp expense from {sender}")
    return {"status": "ok"}


@router.post("/whatsapp")
def twilio_whatsapp(
    body: str = Form("", alias="Body"),
    sender: str = Form("", alias="From"),
    db: Session = Depends(get_db),
):
    """Twilio WhatsApp sandbox: reply with TwiML for every outcome."""
    number = sender.replace("whatsapp:", "")
    logger.info(f"Twilio message from {number}: {body!r}")
    try:
        reply = handle_twilio_message(db, body, number)
    except ValueError as e:
        logger.error(f"Could not store Twilio transaction from {number}: {e}")
        reply = "Something went wrong ❌"
    return Response(content=twiml_message(reply), media_type="text/xml")


@router.post("/setu/webhook")
async def setu_webhook(request: Request):
    raw = await request.body()
    try:
        event = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        logger.warning("Setu webhook sent an invalid JSON body")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Invalid JSON"},
        )
    if not isinstance(event, dict):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Invalid JSON"},
        )

    handle_setu_event(event)
    return {"success": True, "message": "Webhook processed"}
