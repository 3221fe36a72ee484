"""
Seating plan model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from seatsmart.core.db import Base

class SeatingPlan(Base):
    __tablename__ = "seating_plans"

    id = Column(String(64), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    tables = relationship(
        "PlanTable", back_populates="plan", cascade="all, delete-orphan", order_by="PlanTable.position"
    )
    guests = relationship(
        "PlanGuest", back_populates="plan", cascade="all, delete-orphan", order_by="PlanGuest.position"
    )
