# vms/models/visitor.py
"""
Visitors table — one identity record per registration.
A visitor can have many approvals (visits) over time.
Deleting a visitor deletes its approvals too.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from vms.database import Base


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(254))
    phone = Column(String(50))
    company = Column(String(200))
    host_name = Column(String(200))
    purpose = Column(Text)
    visitor_type = Column(String(50))        # contractor | vendor | vip | delegate | interviewee
    id_proof = Column(String(100))
    expected_duration = Column(String(50))   # free text, e.g. "2 hours"
    photo_path = Column(String(255))         # file name inside PHOTO_DIR
    created_at = Column(DateTime, nullable=False)

    approvals = relationship(
        "Approval",
        back_populates="visitor",
        cascade="all, delete-orphan",
        order_by="Approval.id",
    )

    def __repr__(self):
        return f"<Visitor {self.id} name={self.name}>"
