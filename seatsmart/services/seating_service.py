"""
Seating arrangement and validation service

Every operation takes the current (tables, guests) snapshot and returns newly
built collections; the frozen Guest/Table models are never shared mutably
between the input and the result.
"""

import uuid
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from seatsmart.core.config import settings
from seatsmart.schemas.guest import Guest, SeatingInfo
from seatsmart.schemas.table import Table
from seatsmart.schemas.plan import AssignmentResult, ReassignmentResult, ReassignStatus

logger = logging.getLogger(__name__)

class SeatingService:
    """Service for seating arrangement operations"""

    @staticmethod
    def generate_tables(
        count: int = settings.DEFAULT_TABLE_COUNT,
        capacity: int = settings.DEFAULT_CAPACITY
    ) -> List[Table]:
        """Create ``count`` empty tables named Table 1..N"""
        if not settings.MIN_TABLES <= count <= settings.MAX_TABLES:
            raise ValueError(
                f"Table count must be between {settings.MIN_TABLES} and {settings.MAX_TABLES}, got {count}"
            )
        if not 1 <= capacity <= settings.MAX_CAPACITY:
            raise ValueError(f"Table capacity must be between 1 and {settings.MAX_CAPACITY}, got {capacity}")

        return [
            Table(id=str(uuid.uuid4()), name=f"Table {number}", capacity=capacity)
            for number in range(1, count + 1)
        ]

    @staticmethod
    def reset_assignments(guests: Iterable[Guest]) -> List[Guest]:
        """Unseat every guest"""
        return [
            guest.model_copy(update={"table_id": None, "seat_number": None})
            for guest in guests
        ]

    @staticmethod
    def auto_assign(guests: Sequence[Guest], tables: Sequence[Table]) -> AssignmentResult:
        """Fill tables left to right with guests in the given order.

        Existing occupancy is discarded. When the current table is full the
        cursor advances one table; a guest that still finds no free seat is
        returned in ``unassigned``.
        """
        occupants: List[List[str]] = [[] for _ in tables]
        updated_guests = []
        unassigned = []
        current = 0

        for guest in guests:
            if current < len(tables) and len(occupants[current]) >= tables[current].capacity:
                current += 1

            if current < len(tables) and len(occupants[current]) < tables[current].capacity:
                occupants[current].append(guest.id)
                updated_guests.append(guest.model_copy(update={
                    "table_id": tables[current].id,
                    "seat_number": len(occupants[current]),
                }))
            else:
                unseated = guest.model_copy(update={"table_id": None, "seat_number": None})
                updated_guests.append(unseated)
                unassigned.append(unseated)

        updated_tables = [
            table.model_copy(update={"guests": tuple(seated)})
            for table, seated in zip(tables, occupants)
        ]

        if unassigned:
            logger.info(f"Auto-assign left {len(unassigned)} of {len(updated_guests)} guests without a seat")

        return AssignmentResult(tables=updated_tables, guests=updated_guests, unassigned=unassigned)

    @staticmethod
    def reassign(
        guest_ids: Sequence[str],
        target_table_id: str,
        guests: Sequence[Guest],
        tables: Sequence[Table]
    ) -> ReassignmentResult:
        """Move the selected guests to one table.

        Selected guests are first detached from their current tables; the
        guests left behind keep their seat numbers. Guests are then seated
        one by one in the given order until the target table is full.
        Guests that did not fit stay unassigned, they are not returned to
        their previous table. An unknown target table leaves every selected
        guest detached and is reported as ``table_not_found``.
        """
        updated_guests = list(guests)
        updated_tables = list(tables)
        guest_index = {guest.id: index for index, guest in enumerate(updated_guests)}
        table_index = {table.id: index for index, table in enumerate(updated_tables)}

        selected = [guest_id for guest_id in dict.fromkeys(guest_ids) if guest_id in guest_index]

        for guest_id in selected:
            position = guest_index[guest_id]
            guest = updated_guests[position]
            if guest.table_id is None:
                continue

            old_position = table_index.get(guest.table_id)
            if old_position is not None:
                old_table = updated_tables[old_position]
                updated_tables[old_position] = old_table.model_copy(update={
                    "guests": tuple(seated for seated in old_table.guests if seated != guest_id)
                })
            updated_guests[position] = guest.model_copy(update={"table_id": None, "seat_number": None})

        target_position = table_index.get(target_table_id)
        if target_position is None:
            logger.warning(
                f"Table '{target_table_id}' not found; {len(selected)} guest(s) left unassigned. "
                f"Available tables: {list(table_index)}"
            )
            return ReassignmentResult(
                tables=updated_tables,
                guests=updated_guests,
                status=ReassignStatus.TABLE_NOT_FOUND,
                unseated_guest_ids=selected,
            )

        seated_ids = []
        for count, guest_id in enumerate(selected):
            target = updated_tables[target_position]
            if len(target.guests) >= target.capacity:
                unseated_ids = selected[count:]
                logger.info(
                    f"Table '{target.name}' is full; {len(unseated_ids)} selected guest(s) left unassigned"
                )
                return ReassignmentResult(
                    tables=updated_tables,
                    guests=updated_guests,
                    status=ReassignStatus.CAPACITY_EXCEEDED,
                    seated_guest_ids=seated_ids,
                    unseated_guest_ids=unseated_ids,
                )

            updated_tables[target_position] = target.model_copy(update={"guests": target.guests + (guest_id,)})
            position = guest_index[guest_id]
            updated_guests[position] = updated_guests[position].model_copy(update={
                "table_id": target_table_id,
                "seat_number": len(target.guests) + 1,
            })
            seated_ids.append(guest_id)

        return ReassignmentResult(
            tables=updated_tables,
            guests=updated_guests,
            status=ReassignStatus.ASSIGNED,
            seated_guest_ids=seated_ids,
        )

    @staticmethod
    def rename_table(tables: Sequence[Table], table_id: str, name: str) -> Tuple[List[Table], bool]:
        """Rename one table; blank names and unknown ids change nothing"""
        new_name = name.strip()
        renamed = False
        updated = []
        for table in tables:
            if table.id == table_id and new_name:
                table = table.model_copy(update={"name": new_name})
                renamed = True
            updated.append(table)
        return updated, renamed

    @staticmethod
    def apply_table_names(tables: Sequence[Table], names: Sequence[str]) -> List[Table]:
        """Rename tables in order using generated names"""
        updated = list(tables)
        for position, name in enumerate(names[:len(updated)]):
            if name and name.strip():
                updated[position] = updated[position].model_copy(update={"name": name.strip()})
        return updated

    @staticmethod
    def validate_snapshot(
        tables: Sequence[Table],
        guests: Sequence[Guest],
        strict_seats: bool = False
    ) -> Tuple[bool, List[str]]:
        """Check capacity and guest/table cross references.

        Seat numbers are only compared with list positions when
        ``strict_seats`` is set, since detaching guests leaves gaps.
        """
        errors = []

        guests_by_id: Dict[str, Guest] = {}
        for guest in guests:
            if guest.id in guests_by_id:
                errors.append(f"Duplicate guest id '{guest.id}'")
            guests_by_id[guest.id] = guest

        tables_by_id: Dict[str, Table] = {}
        for table in tables:
            if table.id in tables_by_id:
                errors.append(f"Duplicate table id '{table.id}'")
            tables_by_id[table.id] = table

        for table in tables:
            if len(table.guests) > table.capacity:
                errors.append(f"Table '{table.name}' has {len(table.guests)} guests (max {table.capacity})")

            seen = set()
            for index, guest_id in enumerate(table.guests):
                if guest_id in seen:
                    errors.append(f"Guest '{guest_id}' is listed twice in table '{table.name}'")
                    continue
                seen.add(guest_id)

                guest = guests_by_id.get(guest_id)
                if guest is None:
                    errors.append(f"Table '{table.name}' lists unknown guest '{guest_id}'")
                elif guest.table_id != table.id:
                    errors.append(f"Guest '{guest.display_name}' is listed in table '{table.name}' but not seated there")
                elif strict_seats and guest.seat_number != index + 1:
                    errors.append(
                        f"Guest '{guest.display_name}' has seat {guest.seat_number} but sits at position {index + 1}"
                    )

        for guest in guests:
            if (guest.table_id is None) != (guest.seat_number is None):
                errors.append(f"Guest '{guest.display_name}' must have both a table and a seat, or neither")
            if guest.table_id is None:
                continue
            table = tables_by_id.get(guest.table_id)
            if table is None:
                errors.append(f"Guest '{guest.display_name}' is seated at unknown table '{guest.table_id}'")
            elif guest.id not in table.guests:
                errors.append(f"Guest '{guest.display_name}' is missing from table '{table.name}'")

        return len(errors) == 0, errors

    @staticmethod
    def find_guests(guests: Sequence[Guest], tables: Sequence[Table], query: str) -> List[SeatingInfo]:
        """Find seated guests whose name contains the query"""
        normalized_query = query.strip().casefold()
        if not normalized_query:
            return []

        table_names = {table.id: table.name for table in tables}
        return [
            SeatingInfo(
                guest_id=guest.id,
                display_name=guest.display_name,
                table_id=guest.table_id,
                table_name=table_names.get(guest.table_id, "Unknown Table"),
                seat_number=guest.seat_number,
            )
            for guest in guests
            if guest.is_assigned and normalized_query in guest.normalized_name
        ]

    @staticmethod
    def get_seating_summary(
        tables: Sequence[Table],
        guests: Sequence[Guest],
        include_names: bool = False
    ) -> Dict:
        """Get seating summary with per-table occupancy"""
        guests_by_id = {guest.id: guest for guest in guests}

        table_info = []
        for table in tables:
            info = {
                "table_id": table.id,
                "table_name": table.name,
                "capacity": table.capacity,
                "total_guests": len(table.guests),
                "available_seats": table.available_seats,
            }

            if include_names:
                seated = [guests_by_id[guest_id] for guest_id in table.guests if guest_id in guests_by_id]
                info["guests"] = [
                    {
                        "id": guest.id,
                        "name": guest.display_name,
                        "seat_number": guest.seat_number,
                    }
                    for guest in sorted(seated, key=lambda g: g.seat_number or 0)
                ]

            table_info.append(info)

        assigned = sum(1 for guest in guests if guest.is_assigned)

        return {
            "total_guests": len(guests),
            "assigned_guests": assigned,
            "unassigned_guests": len(guests) - assigned,
            "total_tables": len(tables),
            "total_capacity": sum(table.capacity for table in tables),
            "tables": table_info,
        }

    @staticmethod
    def get_table(tables: Sequence[Table], table_id: str) -> Optional[Table]:
        """Get a table by id"""
        return next((table for table in tables if table.id == table_id), None)
