# vms/models/approval.py
"""
Approvals table — one row per visit.
Status moves PENDING → CHECKED_IN → CHECKED_OUT; in_time/out_time record when.
`version` is bumped on every transition and used as an optimistic lock.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from vms.database import Base
from vms.services.approval_states import ApprovalStatus


class Approval(Base):
    __tablename__ = "approvals"
    __table_args__ = (
        CheckConstraint(
            "(status = 'PENDING' AND in_time IS NULL AND out_time IS NULL)"
            " OR (status = 'CHECKED_IN' AND in_time IS NOT NULL AND out_time IS NULL)"
            " OR (status = 'CHECKED_OUT' AND in_time IS NOT NULL AND out_time IS NOT NULL"
            " AND out_time >= in_time)",
            name="ck_approval_status_times",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    visitor_id = Column(Integer, ForeignKey("visitors.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ApprovalStatus.PENDING.value, index=True)
    in_time = Column(DateTime)
    out_time = Column(DateTime)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)

    visitor = relationship("Visitor", back_populates="approvals")

    def __repr__(self):
        return f"<Approval {self.id} visitor={self.visitor_id} status={self.status}>"
