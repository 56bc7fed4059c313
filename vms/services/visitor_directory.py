# vms/services/visitor_directory.py
"""
Visitor Directory: owns visitor identity records.

Every registration creates a new visitor row; nothing is merged by name or
contact. Deleting a visitor also deletes all of its approvals.
"""

from datetime import datetime
from typing import Iterator, Optional, Union

import pydantic
from sqlalchemy.orm import Session

from vms.database import storage_errors
from vms.exceptions import NotFoundError, ValidationError
from vms.models.visitor import Visitor
from vms.schemas.visitor import VisitorCreate
from vms.utils.logger import get_logger

logger = get_logger(__name__)

LIST_BATCH_SIZE = 200


def validate_visitor(attrs: Union[VisitorCreate, dict, None]) -> VisitorCreate:
    """Check identity fields, raising ValidationError with per-field messages."""
    if isinstance(attrs, VisitorCreate):
        return attrs
    if not isinstance(attrs, dict):
        raise ValidationError("Visitor data must be a JSON object")
    try:
        return VisitorCreate.model_validate(attrs)
    except pydantic.ValidationError as e:
        errors = [{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                  for err in e.errors()]
        raise ValidationError("Invalid visitor data", errors=errors) from e


class VisitorDirectory:
    def __init__(self, db: Session):
        self.db = db

    def create_visitor(self, attrs, photo_path: Optional[str] = None, commit: bool = True) -> Visitor:
        """
        Insert a new visitor. With commit=False the row is only flushed, so the
        caller can add the visit in the same transaction.
        """
        data = validate_visitor(attrs)
        visitor = Visitor(**data.model_dump(), photo_path=photo_path, created_at=datetime.utcnow())
        with storage_errors(self.db, "create visitor"):
            self.db.add(visitor)
            if not commit:
                self.db.flush()
                return visitor
            self.db.commit()
            self.db.refresh(visitor)
        logger.info(f"[DIRECTORY] Visitor {visitor.id} created: {visitor.name}")
        return visitor

    def get_visitor(self, visitor_id: int) -> Visitor:
        try:
            with storage_errors(self.db, "get visitor"):
                visitor = self.db.get(Visitor, visitor_id)
        except OverflowError:
            # Id wider than the INTEGER column, so no such row can exist
            visitor = None
        if visitor is None:
            raise NotFoundError("Visitor", visitor_id)
        return visitor

    def list_visitors(self) -> Iterator[Visitor]:
        """Visitors in insertion order, fetched in batches as the caller iterates."""
        with storage_errors(self.db, "list visitors"):
            query = self.db.query(Visitor).order_by(Visitor.id).yield_per(LIST_BATCH_SIZE)
            yield from query

    def delete_visitor(self, visitor_id: int) -> None:
        visitor = self.get_visitor(visitor_id)
        with storage_errors(self.db, "delete visitor"):
            approval_count = len(visitor.approvals)
            self.db.delete(visitor)
            self.db.commit()
        logger.info(f"[DIRECTORY] Visitor {visitor_id} deleted with {approval_count} approval(s)")
