"""
Seating plan orchestration: load a snapshot, apply one operation, persist it
"""

import uuid
import logging
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from seatsmart.core.config import settings
from seatsmart.core.exceptions import InvalidSnapshotError, PlanAlreadyExistsError, PlanNotFoundError
from seatsmart.schemas.plan import (
    AssignmentResult,
    GuestMergeResult,
    ReassignmentResult,
    SeatingSnapshot,
)
from seatsmart.schemas.table import Table
from seatsmart.services.guest_list_service import GuestListService
from seatsmart.services.name_service import TableNameService
from seatsmart.services.repositories import load_plan, save_plan
from seatsmart.services.seating_service import SeatingService

logger = logging.getLogger(__name__)

# One lock per plan id so engine calls on the same snapshot never interleave.
# Entries hold [lock, users] and are dropped when the last user leaves.
_plan_locks: Dict[str, list] = {}
_plan_locks_guard = threading.Lock()

@contextmanager
def plan_lock(plan_id: str):
    with _plan_locks_guard:
        entry = _plan_locks.setdefault(plan_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _plan_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _plan_locks[plan_id]

class PlanService:
    """Service applying seating operations to stored plans"""

    @staticmethod
    def _load(db: Session, plan_id: str) -> SeatingSnapshot:
        snapshot = load_plan(db, plan_id)
        if snapshot is None:
            raise PlanNotFoundError(plan_id)
        return snapshot

    @staticmethod
    def _save(db: Session, plan_id: str, tables: Sequence[Table], guests) -> SeatingSnapshot:
        save_plan(db, plan_id, tables, guests)
        return SeatingSnapshot(tables=list(tables), guests=list(guests))

    @staticmethod
    def create_plan(
        db: Session,
        table_count: int = settings.DEFAULT_TABLE_COUNT,
        capacity: int = settings.DEFAULT_CAPACITY,
        plan_id: Optional[str] = None
    ) -> Tuple[str, SeatingSnapshot]:
        """Create a plan with empty tables and no guests"""
        plan_id = plan_id or uuid.uuid4().hex
        tables = SeatingService.generate_tables(table_count, capacity)
        with plan_lock(plan_id):
            if load_plan(db, plan_id) is not None:
                raise PlanAlreadyExistsError(plan_id)
            snapshot = PlanService._save(db, plan_id, tables, [])
        logger.info(f"Created seating plan {plan_id} with {table_count} tables of {capacity}")
        return plan_id, snapshot

    @staticmethod
    def get_plan(db: Session, plan_id: str) -> SeatingSnapshot:
        """Load a plan, logging any broken guest/table references"""
        snapshot = PlanService._load(db, plan_id)
        valid, errors = SeatingService.validate_snapshot(snapshot.tables, snapshot.guests)
        if not valid:
            logger.warning(f"Seating plan {plan_id} is inconsistent: {'; '.join(errors)}")
        return snapshot

    @staticmethod
    def save_plan(db: Session, plan_id: str, snapshot: SeatingSnapshot) -> SeatingSnapshot:
        """Store a full snapshot submitted by a client"""
        valid, errors = SeatingService.validate_snapshot(snapshot.tables, snapshot.guests)
        if not valid:
            raise InvalidSnapshotError(errors)
        with plan_lock(plan_id):
            return PlanService._save(db, plan_id, snapshot.tables, snapshot.guests)

    @staticmethod
    def import_guests(db: Session, plan_id: str, raw_text: str) -> SeatingSnapshot:
        """Replace the guest list; every table is emptied"""
        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            guests = GuestListService.normalize(raw_text)
            tables = [table.model_copy(update={"guests": ()}) for table in snapshot.tables]
            return PlanService._save(db, plan_id, tables, guests)

    @staticmethod
    def add_guests(db: Session, plan_id: str, raw_text: str) -> GuestMergeResult:
        """Append new guests, skipping names that already exist"""
        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            result = GuestListService.merge_new_guests(snapshot.guests, raw_text)
            if result.added:
                PlanService._save(db, plan_id, snapshot.tables, result.guests)
            return result

    @staticmethod
    def configure_tables(db: Session, plan_id: str, count: int, capacity: int) -> SeatingSnapshot:
        """Regenerate tables; all seating is cleared"""
        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            tables = SeatingService.generate_tables(count, capacity)
            guests = SeatingService.reset_assignments(snapshot.guests)
            return PlanService._save(db, plan_id, tables, guests)

    @staticmethod
    def auto_assign(db: Session, plan_id: str) -> AssignmentResult:
        """Seat every guest sequentially from scratch"""
        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            result = SeatingService.auto_assign(snapshot.guests, snapshot.tables)
            PlanService._save(db, plan_id, result.tables, result.guests)
            return result

    @staticmethod
    def assign_guests(db: Session, plan_id: str, guest_ids: List[str], table_id: str) -> ReassignmentResult:
        """Move the selected guests to one table"""
        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            result = SeatingService.reassign(guest_ids, table_id, snapshot.guests, snapshot.tables)
            PlanService._save(db, plan_id, result.tables, result.guests)
            return result

    @staticmethod
    def rename_table(db: Session, plan_id: str, table_id: str, name: str) -> Optional[Table]:
        """Rename a table, returning it or None if it does not exist"""
        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            tables, renamed = SeatingService.rename_table(snapshot.tables, table_id, name)
            if renamed:
                PlanService._save(db, plan_id, tables, snapshot.guests)
            return SeatingService.get_table(tables, table_id)

    @staticmethod
    def name_tables(
        db: Session,
        plan_id: str,
        theme: str,
        name_service: TableNameService,
        count: Optional[int] = None
    ) -> SeatingSnapshot:
        """Rename tables with names generated for a theme.

        Generation happens before the plan lock is taken; a failure raises
        NameGenerationError and leaves the plan untouched.
        """
        snapshot = PlanService._load(db, plan_id)
        names = name_service.generate(theme, count or len(snapshot.tables))

        with plan_lock(plan_id):
            snapshot = PlanService._load(db, plan_id)
            tables = SeatingService.apply_table_names(snapshot.tables, names)
            return PlanService._save(db, plan_id, tables, snapshot.guests)
