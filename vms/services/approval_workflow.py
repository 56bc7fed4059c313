# vms/services/approval_workflow.py
"""
Approval Workflow Engine — opens visits and moves them through
PENDING → CHECKED_IN → CHECKED_OUT.

Two ways in:
  - pre_register: scheduled visitor, visit starts PENDING and is checked in later
  - immediate_check_in: walk-in, visit starts CHECKED_IN with in_time = now

Transitions are a single conditional UPDATE guarded by the expected status and
version. When two requests race on the same approval only one UPDATE matches;
the loser re-reads the row and gets InvalidTransitionError (or NotFoundError
if the visitor was deleted in between).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from vms.database import storage_errors
from vms.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from vms.models.approval import Approval
from vms.services.approval_states import (
    ApprovalStatus,
    VisitTransition,
    INITIAL_STATE,
    WALK_IN_STATE,
    get_transition_rule,
)
from vms.services.photo_service import PhotoStore, PhotoUpload
from vms.services.visitor_directory import VisitorDirectory, validate_visitor
from vms.utils.logger import get_logger

logger = get_logger(__name__)

MAX_LIST_LIMIT = 500


class ApprovalWorkflow:
    def __init__(self, db: Session, directory: Optional[VisitorDirectory] = None,
                 photos: Optional[PhotoStore] = None):
        self.db = db
        self.directory = directory or VisitorDirectory(db)
        self.photos = photos or PhotoStore()

    # ── Opening a visit ──────────────────────────────────────────────────────

    def pre_register(self, visitor_attrs, photo: Optional[PhotoUpload] = None) -> Approval:
        """Create a visitor and a PENDING approval for them."""
        return self._open_visit(visitor_attrs, photo, INITIAL_STATE)

    def immediate_check_in(self, visitor_attrs, photo: Optional[PhotoUpload] = None) -> Approval:
        """Walk-in: create a visitor and an approval that is already CHECKED_IN."""
        return self._open_visit(visitor_attrs, photo, WALK_IN_STATE)

    def _open_visit(self, visitor_attrs, photo: Optional[PhotoUpload], status: ApprovalStatus) -> Approval:
        data = validate_visitor(visitor_attrs)
        photo_path = self.photos.save(photo)
        now = datetime.utcnow()
        try:
            with storage_errors(self.db, "open visit"):
                visitor = self.directory.create_visitor(data, photo_path=photo_path, commit=False)
                approval = Approval(
                    visitor_id=visitor.id,
                    status=status.value,
                    in_time=now if status == ApprovalStatus.CHECKED_IN else None,
                    out_time=None,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
                self.db.add(approval)
                self.db.commit()
                self.db.refresh(approval)
        except Exception:
            self.photos.discard(photo_path)
            raise

        logger.info(f"[VISIT] Approval {approval.id} opened as {status.value} "
                    f"for visitor {approval.visitor_id} ({data.name})")
        return approval

    # ── Transitions ──────────────────────────────────────────────────────────

    def check_in_approved(self, approval_id: int) -> Approval:
        """PENDING → CHECKED_IN, records in_time."""
        return self._transition(approval_id, VisitTransition.CHECK_IN)

    def checkout_visit(self, approval_id: int) -> Approval:
        """CHECKED_IN → CHECKED_OUT, records out_time."""
        return self._transition(approval_id, VisitTransition.CHECK_OUT)

    def _transition(self, approval_id: int, transition: VisitTransition) -> Approval:
        approval = self.get_approval(approval_id)
        rule = get_transition_rule(approval.status, transition)
        if rule is None:
            logger.warning(f"[VISIT] Rejected {transition.value} on approval {approval_id} "
                           f"in state {approval.status}")
            raise InvalidTransitionError(approval_id, approval.status, transition.value)

        now = datetime.utcnow()
        # Clock skew between workers must never produce out_time < in_time
        if rule.stamps == "out_time" and approval.in_time and now < approval.in_time:
            now = approval.in_time

        with storage_errors(self.db, transition.value):
            updated = (
                self.db.query(Approval)
                .filter(
                    Approval.id == approval_id,
                    Approval.status == rule.from_state.value,
                    Approval.version == approval.version,
                )
                .update(
                    {
                        Approval.status: rule.to_state.value,
                        getattr(Approval, rule.stamps): now,
                        Approval.version: Approval.version + 1,
                        Approval.updated_at: now,
                    },
                    synchronize_session=False,
                )
            )
            if updated == 1:
                self.db.commit()
                self.db.refresh(approval)
            else:
                self.db.rollback()

        if updated != 1:
            self._raise_lost_race(approval_id, transition)

        logger.info(f"[VISIT] Approval {approval_id}: {rule.from_state.value} → {rule.to_state.value} "
                    f"at {now.isoformat()}")
        return approval

    def _raise_lost_race(self, approval_id: int, transition: VisitTransition):
        self.db.expire_all()
        with storage_errors(self.db, "reload approval"):
            current = self.db.get(Approval, approval_id)
        if current is None:
            raise NotFoundError("Approval", approval_id)
        logger.warning(f"[VISIT] Concurrent update on approval {approval_id}: "
                       f"{transition.value} lost, state is now {current.status}")
        raise InvalidTransitionError(approval_id, current.status, transition.value)

    # ── Reads ────────────────────────────────────────────────────────────────

    def get_approval(self, approval_id: int) -> Approval:
        # Always re-read: another worker may have moved the visit since this session loaded it
        try:
            with storage_errors(self.db, "get approval"):
                approval = self.db.get(Approval, approval_id, populate_existing=True)
        except OverflowError:
            approval = None
        if approval is None:
            raise NotFoundError("Approval", approval_id)
        return approval

    def list_approvals(self, status: Optional[str] = None, limit: int = 50) -> list[Approval]:
        """Approvals newest first, optionally filtered by status."""
        if limit < 1 or limit > MAX_LIST_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
        with storage_errors(self.db, "list approvals"):
            q = self.db.query(Approval).options(joinedload(Approval.visitor))
            if status:
                try:
                    q = q.filter(Approval.status == ApprovalStatus(status).value)
                except ValueError:
                    raise ValidationError(f"Unknown approval status '{status}'")
            return q.order_by(Approval.created_at.desc(), Approval.id.desc()).limit(limit).all()

    def list_active_visits(self) -> list[Approval]:
        """Everyone currently on site, earliest check-in first."""
        with storage_errors(self.db, "list active visits"):
            return (
                self.db.query(Approval)
                .options(joinedload(Approval.visitor))
                .filter(Approval.status == ApprovalStatus.CHECKED_IN.value)
                .order_by(Approval.in_time.asc(), Approval.id.asc())
                .all()
            )
