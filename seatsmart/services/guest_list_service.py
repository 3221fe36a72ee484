"""
Guest list parsing and duplicate handling
"""

import re
import uuid
import logging
import unicodedata
from typing import List, Iterable, Tuple

from seatsmart.schemas.guest import Guest
from seatsmart.schemas.plan import GuestMergeResult

logger = logging.getLogger(__name__)

TOKEN_SEPARATORS = re.compile(r"\n|,")

def name_sort_key(name: str) -> Tuple[str, str]:
    """Case- and accent-insensitive ordering key shared by import and merge.

    Names are compared on their base letters first ("Émile" sorts with
    "Emile", before "Eve"); accents only break ties.
    """
    folded = name.casefold()
    base = "".join(
        char for char in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(char)
    )
    return base, folded

class GuestListService:
    """Service for turning raw text into guest records"""

    @staticmethod
    def split_names(raw_text: str) -> List[str]:
        """Split raw text on newlines/commas, dropping blank tokens"""
        if not raw_text:
            return []
        tokens = (token.strip() for token in TOKEN_SEPARATORS.split(raw_text))
        return [token for token in tokens if token]

    @staticmethod
    def normalize(raw_text: str) -> List[Guest]:
        """Parse raw text into alphabetically ordered, uniquely named guests.

        The Nth occurrence (N >= 2) of a case-insensitively equal name is
        displayed as ``"{name} ({N})"``. ``normalized_name`` is derived from
        the display name, so ``"bob (2)"`` does not collide with ``"bob"``.
        """
        names = sorted(GuestListService.split_names(raw_text), key=name_sort_key)

        name_counts = {}
        guests = []
        for name in names:
            folded = name.casefold()
            name_counts[folded] = name_counts.get(folded, 0) + 1

            occurrence = name_counts[folded]
            display_name = name if occurrence == 1 else f"{name} ({occurrence})"

            guests.append(Guest(
                id=str(uuid.uuid4()),
                original_name=name,
                normalized_name=display_name.casefold(),
                display_name=display_name,
            ))

        return guests

    @staticmethod
    def merge_new_guests(existing: Iterable[Guest], raw_text: str) -> GuestMergeResult:
        """Append newly typed names to an existing guest collection.

        Names whose normalized form already exists are skipped and reported;
        the merged collection is re-sorted by display name.
        """
        existing = list(existing)
        existing_names = {guest.normalized_name for guest in existing}

        added = []
        skipped = []
        for guest in GuestListService.normalize(raw_text):
            if guest.normalized_name in existing_names:
                skipped.append(guest.display_name)
            else:
                added.append(guest)

        if skipped:
            logger.info(f"Skipped {len(skipped)} duplicate guest name(s): {', '.join(skipped)}")

        merged = sorted(existing + added, key=lambda guest: name_sort_key(guest.display_name))
        return GuestMergeResult(guests=merged, added=added, skipped_duplicates=skipped)
