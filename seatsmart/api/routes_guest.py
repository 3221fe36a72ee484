"""
Guest-facing API routes
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from seatsmart.core.db import get_db
from seatsmart.core.exceptions import SeatSmartError
from seatsmart.schemas.guest import LookupRequest
from seatsmart.services.plan_service import PlanService
from seatsmart.services.seating_service import SeatingService
from seatsmart.utils.security import rate_limit_check, get_client_ip
from seatsmart.utils.responses import success_response, error_response, plan_error_response, rate_limit_error

router = APIRouter()

@router.post("/lookup")
async def lookup_guest(
    request: Request,
    lookup_data: LookupRequest,
    db: Session = Depends(get_db)
):
    """Look up table and seat by (partial) guest name"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    if not lookup_data.name.strip():
        return error_response(message="Please enter your name", status_code=400)

    try:
        snapshot = PlanService.get_plan(db, lookup_data.plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    matches = SeatingService.find_guests(snapshot.guests, snapshot.tables, lookup_data.name)
    if not matches:
        return error_response(
            message="No matches found. Try searching just your first or last name.",
            status_code=404
        )

    return success_response(
        message=f"{len(matches)} match(es) found",
        data={"matches": [match.model_dump() for match in matches]}
    )

@router.get("/plans/{plan_id}")
async def get_plan_for_lookup(
    plan_id: str,
    request: Request,
    db: Session = Depends(get_db)
):
    """Seating plan data for the guest lookup page"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    try:
        snapshot = PlanService.get_plan(db, plan_id)
    except SeatSmartError as e:
        return plan_error_response(e)

    return success_response(message="Seating plan retrieved", data=snapshot.model_dump(mode="json"))

@router.get("/portal")
async def guest_portal(plan: str = ""):
    """Guest portal entry point reached from the shared QR code"""
    if not plan:
        return error_response(
            message="Plan code is required",
            status_code=400
        )

    return success_response(
        message="Guest portal access",
        data={
            "plan_id": plan,
            "instructions": "Use the lookup endpoint to find your table and seat",
            "lookup_url": "/guest/lookup",
            "plan_url": f"/guest/plans/{plan}"
        }
    )
