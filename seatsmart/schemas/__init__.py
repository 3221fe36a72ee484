"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .table import *
from .plan import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Guest",
    "GuestImportRequest",
    "LookupRequest",
    "SeatingInfo",
    "Table",
    "TableConfigRequest",
    "TableRenameRequest",
    "AssignRequest",
    "TableNamesRequest",
    "SeatingSnapshot",
    "PlanCreate",
    "AssignmentResult",
    "ReassignStatus",
    "ReassignmentResult",
    "GuestMergeResult",
]
