"""
Database models package
"""

from .plan import SeatingPlan
from .table import PlanTable
from .guest import PlanGuest

__all__ = ["SeatingPlan", "PlanTable", "PlanGuest"]
