# carit/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + whether the flowchart generator is configured.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from carit.database import get_db
from carit.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "flowchart_generator": "configured" if settings.FLOWCHART_GENERATOR_URL else "disabled",
        "question_generator": "configured" if settings.QUESTION_GENERATOR_URL else "disabled",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
