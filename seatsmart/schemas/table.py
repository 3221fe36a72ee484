"""
Table-related Pydantic schemas
"""

from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

from seatsmart.core.config import settings

class Table(BaseModel):
    """A capacity-bounded seating unit.

    ``guests`` holds guest ids in seat order.
    """
    id: str
    name: str
    capacity: int = Field(gt=0)
    guests: Tuple[str, ...] = ()

    class Config:
        frozen = True

    @property
    def available_seats(self) -> int:
        return self.capacity - len(self.guests)

class TableConfigRequest(BaseModel):
    """Table count/capacity configuration"""
    count: int = Field(settings.DEFAULT_TABLE_COUNT, ge=settings.MIN_TABLES, le=settings.MAX_TABLES)
    capacity: int = Field(settings.DEFAULT_CAPACITY, ge=1, le=settings.MAX_CAPACITY)

class TableRenameRequest(BaseModel):
    """Schema for renaming a table"""
    name: str

class AssignRequest(BaseModel):
    """Manual assignment of selected guests to one table"""
    guest_ids: List[str]
    table_id: str

class TableNamesRequest(BaseModel):
    """Themed table name generation request"""
    theme: str = Field(min_length=1)
    count: Optional[int] = Field(None, ge=1, le=settings.MAX_TABLES)
