# vms/routers/approvals.py
"""Approval (visit) read endpoints — pending queue for admins and visit history."""

from typing import Optional

from fastapi import APIRouter, Depends

from vms.dependencies import RecordId, get_workflow
from vms.schemas.approval import ApprovalOut
from vms.services.approval_states import ApprovalStatus
from vms.services.approval_workflow import ApprovalWorkflow

router = APIRouter()


@router.get("/approvals", response_model=list[ApprovalOut], summary="List visits — filterable by status")
def list_approvals(
    status: Optional[ApprovalStatus] = None,
    limit: int = 50,
    workflow: ApprovalWorkflow = Depends(get_workflow),
):
    """Newest first. `status=PENDING` gives the queue of visitors waiting to be checked in."""
    return workflow.list_approvals(status=status.value if status else None, limit=limit)


@router.get("/approvals/{approval_id}", response_model=ApprovalOut, summary="Get a visit")
def get_approval(approval_id: RecordId, workflow: ApprovalWorkflow = Depends(get_workflow)):
    return workflow.get_approval(approval_id)
