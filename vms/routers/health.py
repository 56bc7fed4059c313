# vms/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + photo storage.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from vms.database import get_db
from vms.dependencies import get_photo_store
from vms.services.photo_service import PhotoStore
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), photos: PhotoStore = Depends(get_photo_store)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether the photo directory is writable
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "photo_storage": "unknown",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    try:
        result["photo_storage"] = "ok" if photos.is_writable() else "read-only"
    except OSError as e:
        result["photo_storage"] = f"error: {str(e)}"
    if result["photo_storage"] != "ok":
        result["status"] = "degraded"

    return result
