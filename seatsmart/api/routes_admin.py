"""
Admin API routes - requires authentication
"""

import logging
from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.responses import Response
from sqlalchemy.orm import Session

from seatsmart.core.config import settings
from seatsmart.core.db import get_db
from seatsmart.core.exceptions import SeatSmartError
from seatsmart.schemas.guest import GuestImportRequest
from seatsmart.schemas.plan import PlanCreate, ReassignStatus, SeatingSnapshot
from seatsmart.schemas.table import AssignRequest, TableConfigRequest, TableNamesRequest, TableRenameRequest
from seatsmart.services.excel_service import ExcelService
from seatsmart.services.name_service import TableNameService
from seatsmart.services.plan_service import PlanService
from seatsmart.services.qr_service import QRService
from seatsmart.services.seating_service import SeatingService
from seatsmart.utils.security import verify_admin_token
from seatsmart.utils.responses import success_response, error_response, plan_error_response, not_found_error

logger = logging.getLogger(__name__)

router = APIRouter()

def get_name_service() -> TableNameService:
    """Table name generator dependency"""
    return TableNameService()

def snapshot_data(snapshot: SeatingSnapshot) -> dict:
    data = snapshot.model_dump(mode="json")
    data["summary"] = SeatingService.get_seating_summary(snapshot.tables, snapshot.guests)
    return data

@router.post("/plans")
async def create_plan(
    plan_data: PlanCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new seating plan with empty tables"""
    try:
        plan_id, snapshot = PlanService.create_plan(
            db,
            table_count=plan_data.table_count,
            capacity=plan_data.capacity,
            plan_id=plan_data.plan_id
        )
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message="Seating plan created successfully",
        data={
            "plan_id": plan_id,
            "share_url": QRService.get_share_url(plan_id),
            **snapshot_data(snapshot)
        },
        status_code=201
    )

@router.get("/plans/{plan_id}")
async def get_plan(
    plan_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Get the full seating plan"""
    try:
        snapshot = PlanService.get_plan(db, plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message="Seating plan retrieved",
        data={"plan_id": plan_id, **snapshot_data(snapshot)}
    )

@router.put("/plans/{plan_id}")
async def save_plan(
    plan_id: str,
    snapshot: SeatingSnapshot,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Store a complete (tables, guests) snapshot"""
    try:
        saved = PlanService.save_plan(db, plan_id, snapshot)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message="Seating plan saved",
        data={"plan_id": plan_id, "share_url": QRService.get_share_url(plan_id), **snapshot_data(saved)}
    )

@router.put("/plans/{plan_id}/tables")
async def configure_tables(
    plan_id: str,
    config: TableConfigRequest,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Regenerate tables; clears every seat assignment"""
    try:
        snapshot = PlanService.configure_tables(db, plan_id, config.count, config.capacity)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message=f"Generated {config.count} tables of {config.capacity} seats. All seating has been reset.",
        data=snapshot_data(snapshot)
    )

@router.post("/plans/{plan_id}/guests/import")
async def import_guests(
    plan_id: str,
    guest_input: GuestImportRequest,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Replace the guest list from raw text"""
    try:
        snapshot = PlanService.import_guests(db, plan_id, guest_input.raw_text)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message=f"{len(snapshot.guests)} guests imported",
        data=snapshot_data(snapshot)
    )

@router.post("/plans/{plan_id}/guests")
async def add_guests(
    plan_id: str,
    guest_input: GuestImportRequest,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Append guests, skipping names already on the list"""
    if not guest_input.raw_text.strip():
        return error_response(message="No guest names provided", status_code=400)

    try:
        result = PlanService.add_guests(db, plan_id, guest_input.raw_text)
    except SeatSmartError as e:
        return plan_error_response(e)

    if not result.added:
        message = "All entered guest names already exist; no new guests were added."
    elif result.skipped_duplicates:
        message = (
            f"Added {len(result.added)} guests "
            f"(skipped {len(result.skipped_duplicates)} duplicate guests)"
        )
    else:
        message = f"Added {len(result.added)} guests"

    return success_response(message=message, data=result.model_dump(mode="json"))

@router.post("/plans/{plan_id}/guests/upload")
async def upload_guests(
    plan_id: str,
    file: UploadFile = File(...),
    replace: bool = Form(False),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Import guest names from an Excel file"""
    if not ExcelService.is_excel_file(file.filename):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File is too large", status_code=413)

    try:
        raw_text = ExcelService.extract_guest_names(file_content)
    except Exception as e:
        logger.error(f"Failed to read uploaded guest list {file.filename}: {e}")
        return error_response(message=f"Error processing Excel file: {str(e)}", status_code=422)

    try:
        if replace:
            snapshot = PlanService.import_guests(db, plan_id, raw_text)
            return success_response(
                message=f"{len(snapshot.guests)} guests imported from {file.filename}",
                data=snapshot_data(snapshot)
            )
        result = PlanService.add_guests(db, plan_id, raw_text)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message=f"Added {len(result.added)} guests from {file.filename}",
        data=result.model_dump(mode="json")
    )

@router.post("/plans/{plan_id}/auto-assign")
async def auto_assign(
    plan_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Seat all guests table by table"""
    try:
        result = PlanService.auto_assign(db, plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    if result.unassigned:
        message = f"{len(result.unassigned)} guests could not be seated. Add tables or seats."
    else:
        message = "All guests seated"

    return success_response(message=message, data=result.model_dump(mode="json"))

@router.post("/plans/{plan_id}/assign")
async def assign_guests(
    plan_id: str,
    assignment: AssignRequest,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Move selected guests to a table"""
    if not assignment.guest_ids:
        return error_response(message="Select at least one guest", status_code=400)

    try:
        result = PlanService.assign_guests(db, plan_id, assignment.guest_ids, assignment.table_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    if result.status == ReassignStatus.TABLE_NOT_FOUND:
        message = f"Table '{assignment.table_id}' not found; selected guests are now unassigned"
    elif result.status == ReassignStatus.CAPACITY_EXCEEDED:
        message = (
            f"Table is full: seated {len(result.seated_guest_ids)}, "
            f"{len(result.unseated_guest_ids)} guests left unassigned"
        )
    else:
        message = f"Assigned {len(result.seated_guest_ids)} guests"

    return success_response(message=message, data=result.model_dump(mode="json"))

@router.patch("/plans/{plan_id}/tables/{table_id}")
async def rename_table(
    plan_id: str,
    table_id: str,
    rename: TableRenameRequest,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Rename a table"""
    try:
        table = PlanService.rename_table(db, plan_id, table_id, rename.name)
    except SeatSmartError as e:
        return plan_error_response(e)

    if table is None:
        raise not_found_error("Table")

    return success_response(message="Table renamed", data=table.model_dump(mode="json"))

@router.post("/plans/{plan_id}/table-names")
def generate_table_names(
    plan_id: str,
    request: TableNamesRequest,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token),
    name_service: TableNameService = Depends(get_name_service)
):
    """Rename tables with AI generated names for a theme.

    Declared sync so the blocking Gemini call runs in the threadpool.
    """
    try:
        snapshot = PlanService.name_tables(db, plan_id, request.theme, name_service, count=request.count)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message=f"Tables renamed with '{request.theme}' theme",
        data=snapshot_data(snapshot)
    )

@router.get("/plans/{plan_id}/export.xlsx")
async def export_plan(
    plan_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Export the seating chart to Excel"""
    try:
        snapshot = PlanService.get_plan(db, plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    return Response(
        content=ExcelService.export_plan(snapshot.tables, snapshot.guests),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=seating_{plan_id}.xlsx"}
    )
