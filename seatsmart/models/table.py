"""
Table model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship

from seatsmart.core.db import Base

class PlanTable(Base):
    __tablename__ = "plan_tables"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(String(64), ForeignKey("seating_plans.id"), nullable=False, index=True)
    table_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False)
    guest_ids = Column(JSON, nullable=False, default=list)  # seat order

    # Relationships
    plan = relationship("SeatingPlan", back_populates="tables")
