# ========================
# src/pipeline/splitting.py
# ========================

"""
Multi-value Field Splitting

Breaks comma-joined list fields (developers, genres) into a fixed number of
ranked slot columns. The upstream scraper serialized Python lists as text,
so values look like "['Nintendo', 'Game Freak']".
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Items are separated by comma + space. A bare comma stays inside the item.
SEPARATOR = ", "
ARTIFACT_CHARS = "[]'"


def strip_artifacts(value: str) -> str:
    """Remove every bracket and quote left over from list serialization."""
    for char in ARTIFACT_CHARS:
        value = value.replace(char, '')
    return value


def tokenize(value: Optional[str]) -> List[str]:
    """Split a cleaned list field into its items, in order."""
    if not value:
        return []
    return value.split(SEPARATOR)


def split_ranked(value: Any, arity: int) -> List[Optional[str]]:
    """
    Split a list field into exactly `arity` ranked slots.

    Items past `arity` are dropped. Missing positions and empty or
    whitespace-only items (e.g. a trailing ", ") come back as None.

    Args:
        value: Raw field value, or None when absent.
        arity (int): Number of slots to produce.

    Returns:
        list: `arity` slot values.
    """
    if not isinstance(value, str):
        return [None] * arity

    tokens = tokenize(strip_artifacts(value))
    if len(tokens) > arity:
        logger.debug(f"Dropping {len(tokens) - arity} items beyond slot {arity}: {value!r}")

    slots = []
    for position in range(arity):
        token = tokens[position] if position < len(tokens) else ''
        slots.append(token if token.strip() else None)
    return slots


class MultiValueSplitter:
    """
    Replaces one combined list column with its ranked slot columns.
    """

    def __init__(self, source_field: str, slot_fields: List[str]):
        """
        Args:
            source_field (str): Combined column, e.g. 'developers'
            slot_fields (list): Output columns, highest rank first
        """
        if not slot_fields:
            raise ValueError("At least one slot field is required")
        self.source_field = source_field
        self.slot_fields = list(slot_fields)
        self.truncated = 0

    @property
    def arity(self) -> int:
        return len(self.slot_fields)

    def split_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Split the source field of one record in place and return it."""
        if self.source_field not in record:
            # Already split on a previous run; keep what is there.
            for field in self.slot_fields:
                record.setdefault(field, None)
            return record

        raw_value = record.pop(self.source_field)
        if isinstance(raw_value, str) and len(tokenize(strip_artifacts(raw_value))) > self.arity:
            self.truncated += 1

        for field, slot in zip(self.slot_fields, split_ranked(raw_value, self.arity)):
            record[field] = slot
        return record

    def split_table(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Split every record of the table."""
        for record in records:
            self.split_record(record)
        logger.info(
            f"Split '{self.source_field}' into {self.slot_fields} "
            f"for {len(records)} rows ({self.truncated} truncated)"
        )
        return records


def developer_splitter(slots: int = 3) -> MultiValueSplitter:
    """Splitter for the developers column: main_developer, sub_developer_1, ..."""
    fields = ['main_developer'] + [f'sub_developer_{i}' for i in range(1, slots)]
    return MultiValueSplitter('developers', fields)


def genre_splitter(slots: int = 4) -> MultiValueSplitter:
    """Splitter for the genres column: main_genre, sub_genre_1, ..."""
    fields = ['main_genre'] + [f'sub_genre_{i}' for i in range(1, slots)]
    return MultiValueSplitter('genres', fields)
