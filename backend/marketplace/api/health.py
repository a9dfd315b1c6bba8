import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from marketplace.db import get_db

router = APIRouter()
log = logging.getLogger("marketplace.health")


@router.get("/health", tags=["health"])
def health(db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception:
        log.exception("Database health check failed")

    return {
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
    }
