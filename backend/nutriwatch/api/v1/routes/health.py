"""Module: health."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db

router = APIRouter()

# Endpoint: liveness probe that also round-trips the database.
@router.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
