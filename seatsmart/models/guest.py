"""
Guest model
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from seatsmart.core.db import Base

class PlanGuest(Base):
    __tablename__ = "plan_guests"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(String(64), ForeignKey("seating_plans.id"), nullable=False, index=True)
    guest_id = Column(String(64), nullable=False)
    original_name = Column(String(255), nullable=False)
    normalized_name = Column(String(255), nullable=False, index=True)
    display_name = Column(String(255), nullable=False)
    table_id = Column(String(64), nullable=True)
    seat_number = Column(Integer, nullable=True)
    position = Column(Integer, nullable=False)

    # Relationships
    plan = relationship("SeatingPlan", back_populates="guests")
