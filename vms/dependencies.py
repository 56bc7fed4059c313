# vms/dependencies.py
"""
FastAPI dependencies that build the per-request service objects.
Each request gets its own DB session and services bound to it.
"""

from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.orm import Session

from vms.config import settings
from vms.database import get_db
from vms.services.approval_workflow import ApprovalWorkflow
from vms.services.photo_service import PhotoStore
from vms.services.visitor_directory import VisitorDirectory

# Primary keys are 32-bit INTEGER columns; anything outside is rejected as bad input
MAX_RECORD_ID = 2**31 - 1
RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


def get_photo_store() -> PhotoStore:
    return PhotoStore(root=settings.PHOTO_DIR, max_bytes=settings.PHOTO_MAX_BYTES)


def get_directory(db: Session = Depends(get_db)) -> VisitorDirectory:
    return VisitorDirectory(db)


def get_workflow(
    db: Session = Depends(get_db),
    directory: VisitorDirectory = Depends(get_directory),
    photos: PhotoStore = Depends(get_photo_store),
) -> ApprovalWorkflow:
    return ApprovalWorkflow(db, directory=directory, photos=photos)
