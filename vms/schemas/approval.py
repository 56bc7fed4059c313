from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from vms.schemas.visitor import VisitorOut
from vms.services.approval_states import ApprovalStatus


class ApprovalOut(BaseModel):
    id: int
    visitor_id: int
    status: ApprovalStatus
    in_time: Optional[datetime]
    out_time: Optional[datetime]
    version: int
    created_at: datetime
    updated_at: datetime
    visitor: Optional[VisitorOut] = None

    class Config:
        from_attributes = True
