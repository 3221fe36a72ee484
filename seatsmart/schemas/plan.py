"""
Seating plan snapshot and engine result schemas
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from seatsmart.core.config import settings
from .guest import Guest
from .table import Table

class SeatingSnapshot(BaseModel):
    """The full (tables, guests) pair at a point in time"""
    tables: List[Table] = Field(default_factory=list)
    guests: List[Guest] = Field(default_factory=list)

class PlanCreate(BaseModel):
    """Schema for creating a seating plan"""
    plan_id: Optional[str] = Field(None, min_length=1, max_length=64)
    table_count: int = Field(settings.DEFAULT_TABLE_COUNT, ge=settings.MIN_TABLES, le=settings.MAX_TABLES)
    capacity: int = Field(settings.DEFAULT_CAPACITY, ge=1, le=settings.MAX_CAPACITY)

class AssignmentResult(BaseModel):
    """Outcome of sequential seat filling"""
    tables: List[Table]
    guests: List[Guest]
    unassigned: List[Guest]

class ReassignStatus(str, Enum):
    ASSIGNED = "assigned"
    TABLE_NOT_FOUND = "table_not_found"
    CAPACITY_EXCEEDED = "capacity_exceeded"

class ReassignmentResult(BaseModel):
    """Outcome of moving selected guests to a table.

    Guests listed in ``unseated_guest_ids`` were detached from their old
    table and left unassigned.
    """
    tables: List[Table]
    guests: List[Guest]
    status: ReassignStatus
    seated_guest_ids: List[str] = Field(default_factory=list)
    unseated_guest_ids: List[str] = Field(default_factory=list)

class GuestMergeResult(BaseModel):
    """Outcome of appending new names to an existing guest list"""
    guests: List[Guest]
    added: List[Guest]
    skipped_duplicates: List[str]
