# vms/routers/visitors.py
"""
Visitor endpoints used by the reception kiosk and the security console.

POST   /visitors/register           : pre-register, visit starts PENDING
POST   /visitors/preregister        : alias of /register
PATCH  /visitors/{approval_id}/checkin : PENDING → CHECKED_IN
PATCH  /visitors/{approval_id}/checkout: CHECKED_IN → CHECKED_OUT
POST   /visitors/checkin            : walk-in, visit starts CHECKED_IN
GET    /visitors, /visitors/active, /visitors/{id}
DELETE /visitors/{id}               : removes the visitor and all their visits

Handlers are plain `def` so FastAPI runs each request on its worker thread pool.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from vms.dependencies import RecordId, get_directory, get_photo_store, get_workflow
from vms.schemas.approval import ApprovalOut
from vms.schemas.visitor import VisitorOut
from vms.services.approval_workflow import ApprovalWorkflow
from vms.services.photo_service import PhotoStore, PhotoUpload
from vms.services.visitor_directory import VisitorDirectory
from vms.utils.json_parser import parse_visitor_json

router = APIRouter()


def _read_photo(photos: PhotoStore, *uploads: Optional[UploadFile]) -> Optional[PhotoUpload]:
    upload = next((u for u in uploads if u is not None), None)
    if upload is None:
        return None
    return photos.read_upload(upload.file, filename=upload.filename)


@router.post("/visitors/register", response_model=ApprovalOut, summary="Pre-register a visitor")
def register_visitor(
    visitorJsonData: str = Form(...),
    photo: Optional[UploadFile] = File(None),
    workflow: ApprovalWorkflow = Depends(get_workflow),
    photos: PhotoStore = Depends(get_photo_store),
):
    """Creates the visitor and a PENDING approval waiting for check-in."""
    attrs = parse_visitor_json(visitorJsonData)
    return workflow.pre_register(attrs, _read_photo(photos, photo))


@router.post("/visitors/preregister", response_model=ApprovalOut, summary="Pre-register a visitor (alias)")
def preregister_visitor(
    visitorJsonData: str = Form(...),
    photo: Optional[UploadFile] = File(None),
    workflow: ApprovalWorkflow = Depends(get_workflow),
    photos: PhotoStore = Depends(get_photo_store),
):
    return register_visitor(visitorJsonData=visitorJsonData, photo=photo, workflow=workflow, photos=photos)


@router.patch("/visitors/{approval_id}/checkin", response_model=ApprovalOut, summary="Check in a pending visit")
def check_in_visit(approval_id: RecordId, workflow: ApprovalWorkflow = Depends(get_workflow)):
    return workflow.check_in_approved(approval_id)


@router.patch("/visitors/{approval_id}/checkout", response_model=ApprovalOut, summary="Check out a visit")
def checkout_visit(approval_id: RecordId, workflow: ApprovalWorkflow = Depends(get_workflow)):
    return workflow.checkout_visit(approval_id)


@router.post("/visitors/checkin", response_model=ApprovalOut, summary="Walk-in check-in")
def immediate_check_in(
    photo: Optional[UploadFile] = File(None),
    photoFile: Optional[UploadFile] = File(None),
    visitor: Optional[str] = Form(None),
    visitorJsonData: Optional[str] = Form(None),
    workflow: ApprovalWorkflow = Depends(get_workflow),
    photos: PhotoStore = Depends(get_photo_store),
):
    """
    Checks a visitor in without pre-registration.
    Older kiosk builds send the fields as `visitor` / `photoFile`, newer ones as
    `visitorJsonData` / `photo`; both are accepted.
    """
    attrs = parse_visitor_json(visitor, visitorJsonData)
    return workflow.immediate_check_in(attrs, _read_photo(photos, photo, photoFile))


@router.get("/visitors", response_model=list[VisitorOut], summary="List visitors")
def list_visitors(directory: VisitorDirectory = Depends(get_directory)):
    return list(directory.list_visitors())


@router.get("/visitors/active", response_model=list[ApprovalOut], summary="Visitors currently on site")
def list_active_visits(workflow: ApprovalWorkflow = Depends(get_workflow)):
    """CHECKED_IN visits, used by the security console to pick who to check out."""
    return workflow.list_active_visits()


@router.get("/visitors/{visitor_id}", response_model=VisitorOut, summary="Get a visitor")
def get_visitor(visitor_id: RecordId, directory: VisitorDirectory = Depends(get_directory)):
    return directory.get_visitor(visitor_id)


@router.delete("/visitors/{visitor_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a visitor")
def delete_visitor(visitor_id: RecordId, directory: VisitorDirectory = Depends(get_directory)):
    directory.delete_visitor(visitor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
