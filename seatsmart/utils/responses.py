"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from seatsmart.core.exceptions import (
    InvalidSnapshotError,
    NameGenerationError,
    PlanAlreadyExistsError,
    PlanNotFoundError,
    PlanStorageError,
    SeatSmartError,
)
from seatsmart.schemas.common import StandardResponse, ErrorResponse

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )

def plan_error_response(error: SeatSmartError) -> JSONResponse:
    """Map an orchestration error to an error response"""
    if isinstance(error, PlanNotFoundError):
        return error_response(error.message, error_code="plan_not_found", status_code=404)
    if isinstance(error, PlanAlreadyExistsError):
        return error_response(error.message, error_code="plan_exists", status_code=409)
    if isinstance(error, InvalidSnapshotError):
        return error_response(error.message, error_code="invalid_snapshot", details=error.errors, status_code=422)
    if isinstance(error, NameGenerationError):
        return error_response(error.message, error_code="name_generation_failed", status_code=502)
    if isinstance(error, PlanStorageError):
        return error_response("Failed to save or load the seating plan", error_code="storage_error", status_code=500)
    return error_response(error.message, status_code=500)

def not_found_error(resource: str = "Resource"):
    """Create not found error"""
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource} not found"
    )

def rate_limit_error():
    """Create rate limit error"""
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Please try again later."
    )
