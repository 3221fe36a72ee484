"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from seatsmart.core.config import settings
from seatsmart.core.db import get_db
from seatsmart.core.exceptions import SeatSmartError
from seatsmart.services.excel_service import ExcelService
from seatsmart.services.plan_service import PlanService
from seatsmart.services.qr_service import QRService
from seatsmart.services.seating_service import SeatingService
from seatsmart.utils.security import rate_limit_check, get_client_ip
from seatsmart.utils.responses import success_response, plan_error_response, rate_limit_error

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/themes")
async def list_themes():
    """Preset themes for table name generation"""
    return success_response(
        message="Table name themes",
        data={
            "themes": settings.THEME_PRESETS,
            "ai_enabled": bool(settings.GEMINI_API_KEY)
        }
    )

@router.get("/template/guest_list_template.xlsx")
async def download_guest_template():
    """Download Excel template for guest list import"""
    return Response(
        content=ExcelService.create_template(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )

@router.get("/plans/{plan_id}/qr.png")
async def get_qr_code(
    plan_id: str,
    db: Session = Depends(get_db)
):
    """Get QR code image linking to the plan's guest lookup page"""
    try:
        PlanService.get_plan(db, plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    return Response(
        content=QRService.generate_plan_qr(plan_id),
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=qr_{plan_id}.png"}
    )

@router.get("/plans/{plan_id}/seating")
async def get_seating_summary(
    plan_id: str,
    request: Request,
    db: Session = Depends(get_db)
):
    """Get public seating summary (occupancy only, no names)"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    try:
        snapshot = PlanService.get_plan(db, plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(
        message="Seating summary retrieved successfully",
        data=SeatingService.get_seating_summary(snapshot.tables, snapshot.guests)
    )
