"""
Excel processing service for guest list import and seating chart export
"""

import io
from typing import List, Optional, Sequence
import pandas as pd

from seatsmart.schemas.guest import Guest
from seatsmart.schemas.table import Table

class ExcelService:
    """Service for handling Excel operations"""

    NAME_COLUMN = 'name'
    EXPORT_COLUMNS = ['Table', 'Seat', 'Name']

    @staticmethod
    def is_excel_file(filename: Optional[str]) -> bool:
        """Check the upload has an Excel extension; a missing name is rejected"""
        return (filename or "").lower().endswith(('.xlsx', '.xls'))

    @staticmethod
    def _to_bytes(df: pd.DataFrame, sheet_name: str) -> bytes:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        return buffer.getvalue()

    @staticmethod
    def create_template() -> bytes:
        """Create guest list template with a single Name column"""
        df = pd.DataFrame({'Name': ['Alice Smith', 'Bob Jones', 'Charlie Brown']})
        return ExcelService._to_bytes(df, 'Guest List')

    @staticmethod
    def extract_guest_names(file_content: bytes) -> str:
        """Read guest names from an uploaded sheet as newline separated text.

        Uses the ``Name`` column (case-insensitive) or, failing that, the
        first column. Blank cells are dropped.
        """
        df = pd.read_excel(io.BytesIO(file_content))
        if df.empty or len(df.columns) == 0:
            return ""

        column = next(
            (col for col in df.columns if str(col).lower().strip() == ExcelService.NAME_COLUMN),
            df.columns[0]
        )

        names = []
        for value in df[column]:
            if pd.isna(value):
                continue
            text = str(value).strip()
            if text:
                names.append(text)

        return "\n".join(names)

    @staticmethod
    def build_rows(tables: Sequence[Table], guests: Sequence[Guest]) -> List[dict]:
        """Seated guests in table and seat order, then unassigned guests"""
        guests_by_id = {guest.id: guest for guest in guests}

        rows = []
        for table in tables:
            seated = [guests_by_id[guest_id] for guest_id in table.guests if guest_id in guests_by_id]
            for guest in sorted(seated, key=lambda g: g.seat_number or 0):
                rows.append({'Table': table.name, 'Seat': guest.seat_number, 'Name': guest.display_name})

        for guest in guests:
            if not guest.is_assigned:
                rows.append({'Table': 'Unassigned', 'Seat': None, 'Name': guest.display_name})

        return rows

    @staticmethod
    def export_plan(tables: Sequence[Table], guests: Sequence[Guest]) -> bytes:
        """Export the seating chart to Excel"""
        df = pd.DataFrame(ExcelService.build_rows(tables, guests), columns=ExcelService.EXPORT_COLUMNS)
        return ExcelService._to_bytes(df, 'Seating Chart')
