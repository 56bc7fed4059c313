# vms/routers/admin.py
"""
Admin dashboard reads, served on the paths the reception front-end calls:
  GET /api/admin/approvals?status=PENDING
  GET /api/admin/active-visitors
  GET /api/admin/history
"""

from typing import Optional

from fastapi import APIRouter, Depends

from vms.dependencies import get_workflow
from vms.schemas.approval import ApprovalOut
from vms.services.approval_states import ApprovalStatus
from vms.services.approval_workflow import ApprovalWorkflow

router = APIRouter(prefix="/admin")


@router.get("/approvals", response_model=list[ApprovalOut], summary="Approval queue")
def admin_approvals(
    status: Optional[ApprovalStatus] = None,
    limit: int = 50,
    workflow: ApprovalWorkflow = Depends(get_workflow),
):
    return workflow.list_approvals(status=status.value if status else None, limit=limit)


@router.get("/active-visitors", response_model=list[ApprovalOut], summary="Visitors currently on site")
def admin_active_visitors(workflow: ApprovalWorkflow = Depends(get_workflow)):
    return workflow.list_active_visits()


@router.get("/history", response_model=list[ApprovalOut], summary="Visit history, newest first")
def admin_history(limit: int = 100, workflow: ApprovalWorkflow = Depends(get_workflow)):
    return workflow.list_approvals(limit=limit)
