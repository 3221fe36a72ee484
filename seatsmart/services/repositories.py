"""
Repository layer abstracting seating plan storage (SQLAlchemy vs Firebase Firestore).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from google.api_core.exceptions import GoogleAPIError
from firebase_admin.exceptions import FirebaseError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seatsmart.core.config import settings
from seatsmart.core.exceptions import PlanStorageError
from seatsmart.models import SeatingPlan, PlanTable, PlanGuest
from seatsmart.schemas.guest import Guest
from seatsmart.schemas.table import Table
from seatsmart.schemas.plan import SeatingSnapshot
from seatsmart.services.firebase_client import get_plan_document

logger = logging.getLogger(__name__)

# Client setup failures (missing or malformed credentials) surface as
# RuntimeError, ValueError or OSError before any API call is made
FIRESTORE_ERRORS = (GoogleAPIError, FirebaseError, RuntimeError, ValueError, OSError)


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


class PlanRepo:
    @staticmethod
    def save_sql(db: Session, plan_id: str, tables: Sequence[Table], guests: Sequence[Guest]) -> None:
        try:
            plan = db.query(SeatingPlan).filter(SeatingPlan.id == plan_id).first()
            if not plan:
                plan = SeatingPlan(id=plan_id)
                db.add(plan)
            else:
                plan.updated_at = datetime.utcnow()

            # Replacing the collections lets delete-orphan drop the previous rows
            plan.tables = [
                PlanTable(
                    table_id=table.id,
                    name=table.name,
                    capacity=table.capacity,
                    position=position,
                    guest_ids=list(table.guests),
                )
                for position, table in enumerate(tables)
            ]
            plan.guests = [
                PlanGuest(
                    guest_id=guest.id,
                    original_name=guest.original_name,
                    normalized_name=guest.normalized_name,
                    display_name=guest.display_name,
                    table_id=guest.table_id,
                    seat_number=guest.seat_number,
                    position=position,
                )
                for position, guest in enumerate(guests)
            ]
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error saving seating plan {plan_id}: {e}")
            raise PlanStorageError(f"Failed to save seating plan '{plan_id}': {e}") from e

    @staticmethod
    def load_sql(db: Session, plan_id: str) -> Optional[SeatingSnapshot]:
        try:
            plan = db.query(SeatingPlan).filter(SeatingPlan.id == plan_id).first()
            if not plan:
                return None

            tables = [
                Table(id=row.table_id, name=row.name, capacity=row.capacity, guests=tuple(row.guest_ids or ()))
                for row in plan.tables
            ]
            guests = [
                Guest(
                    id=row.guest_id,
                    original_name=row.original_name,
                    normalized_name=row.normalized_name,
                    display_name=row.display_name,
                    table_id=row.table_id,
                    seat_number=row.seat_number,
                )
                for row in plan.guests
            ]
        except SQLAlchemyError as e:
            logger.error(f"Error loading seating plan {plan_id}: {e}")
            raise PlanStorageError(f"Failed to load seating plan '{plan_id}': {e}") from e

        return SeatingSnapshot(tables=tables, guests=guests)

    # Firestore shape: document "seating_plans/{plan_id}" with serialized tables and guests
    @staticmethod
    def save_fs(plan_id: str, tables: Sequence[Table], guests: Sequence[Guest]) -> None:
        data = SeatingSnapshot(tables=list(tables), guests=list(guests)).model_dump(mode="json")
        data["updated_at"] = datetime.utcnow().isoformat()
        try:
            get_plan_document(plan_id).set(data)
        except FIRESTORE_ERRORS as e:
            logger.error(f"Firestore error saving seating plan {plan_id}: {e}")
            raise PlanStorageError(f"Failed to save seating plan '{plan_id}': {e}") from e

    @staticmethod
    def load_fs(plan_id: str) -> Optional[SeatingSnapshot]:
        try:
            doc = get_plan_document(plan_id).get()
        except FIRESTORE_ERRORS as e:
            logger.error(f"Firestore error loading seating plan {plan_id}: {e}")
            raise PlanStorageError(f"Failed to load seating plan '{plan_id}': {e}") from e

        if not doc.exists:
            return None
        data = doc.to_dict()
        return SeatingSnapshot(tables=data.get("tables", []), guests=data.get("guests", []))


def save_plan(db: Optional[Session], plan_id: str, tables: Sequence[Table], guests: Sequence[Guest]) -> None:
    """Persist a snapshot under ``plan_id``"""
    if use_firestore():
        PlanRepo.save_fs(plan_id, tables, guests)
    else:
        PlanRepo.save_sql(db, plan_id, tables, guests)
    logger.info(f"Saved seating plan {plan_id}: {len(tables)} tables, {len(guests)} guests")


def load_plan(db: Optional[Session], plan_id: str) -> Optional[SeatingSnapshot]:
    """Load the snapshot stored under ``plan_id``, or None"""
    if use_firestore():
        return PlanRepo.load_fs(plan_id)
    return PlanRepo.load_sql(db, plan_id)
