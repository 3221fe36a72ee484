"""
Guest-related Pydantic schemas
"""

from typing import Optional
from pydantic import BaseModel

class Guest(BaseModel):
    """A person to be seated.

    ``table_id`` and ``seat_number`` are either both set or both unset;
    a guest without a table is unassigned.
    """
    id: str
    original_name: str
    normalized_name: str
    display_name: str
    table_id: Optional[str] = None
    seat_number: Optional[int] = None

    class Config:
        frozen = True

    @property
    def is_assigned(self) -> bool:
        return self.table_id is not None

class GuestImportRequest(BaseModel):
    """Raw guest list text, names separated by newlines or commas"""
    raw_text: str = ""

class LookupRequest(BaseModel):
    """Guest lookup request"""
    plan_id: str
    name: str

class SeatingInfo(BaseModel):
    """Seating information for a guest"""
    guest_id: str
    display_name: str
    table_id: str
    table_name: str
    seat_number: int
