# ========================
# src/pipeline/table.py
# ========================

"""
Cleaned Game Table

In-memory, read-only view over the cleaned releases, keyed by
(title, platform).
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

ReleaseKey = Tuple[str, str]

class GameTable:
    """
    Queryable table of cleaned GameRelease rows.
    """

    def __init__(self, records: List[Dict[str, Any]]):
        """
        Args:
            records (list[dict]): Cleaned rows, in load order
        """
        self._records = list(records)
        self._index: Dict[ReleaseKey, Dict[str, Any]] = {}
        self.duplicate_keys: List[ReleaseKey] = []

        for record in self._records:
            key = (record.get('title'), record.get('platform'))
            if key in self._index:
                self.duplicate_keys.append(key)
                logger.warning(f"Duplicate release key {key}; keeping the first row")
                continue
            self._index[key] = record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._records)

    @property
    def columns(self) -> List[str]:
        """Column names in first-seen order."""
        seen = {}
        for record in self._records:
            for key in record:
                seen.setdefault(key, None)
        return list(seen)

    def get(self, title: str, platform: str) -> Optional[Dict[str, Any]]:
        """Look up one release by its composite key."""
        return self._index.get((title, platform))

    def column(self, name: str) -> List[Any]:
        """All values of one column, None where a row lacks it."""
        return [record.get(name) for record in self._records]

    def filter(self, predicate: Callable[[Dict[str, Any]], bool]) -> 'GameTable':
        """Return a new table holding the rows that satisfy `predicate`."""
        return GameTable([record for record in self._records if predicate(record)])

    def released_after(self, cutoff: date) -> 'GameTable':
        """Releases issued strictly after `cutoff`, oldest first."""
        rows = [r for r in self._records if r.get('issuance_date') and r['issuance_date'] > cutoff]
        rows.sort(key=lambda r: r['issuance_date'])
        return GameTable(rows)

    def released_between(self, start: date, end: date) -> 'GameTable':
        """Releases issued within [start, end], oldest first."""
        if start > end:
            raise ValueError(f"start {start} is after end {end}")
        rows = [r for r in self._records if r.get('issuance_date') and start <= r['issuance_date'] <= end]
        rows.sort(key=lambda r: r['issuance_date'])
        return GameTable(rows)

    def to_records(self) -> List[Dict[str, Any]]:
        """Shallow copies of every row."""
        return [dict(record) for record in self._records]
