from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_db
from finance_dashboard.logger_config import logger

router = APIRouter()


@router.get("")
def health_check(db: Session = Depends(get_db)):
    """Minimal check that the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception as e:
        logger.exception("Health check: database connection failed")
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})
