# ========================
# src/pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Applies the cleaning stages to the raw review table. Each stage runs over
the whole table and hands it to the next one.
"""

import re
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from .errors import ParseError, TypeCoercionError
from .splitting import developer_splitter, genre_splitter

logger = logging.getLogger(__name__)

# "<anything>, 19xx" or "<anything>, 20xx"
RELEASED_DATE_PATTERN = re.compile(r'.*, (?:19|20)[0-9]{2}', re.DOTALL)
DATE_FORMAT = "%B %d, %Y"
USER_SCORE_PRECISION = Decimal('0.1')

class GameCleaner:
    """
    Turns raw review rows into typed GameRelease rows.
    Rows for unreleased or cancelled titles are removed.
    """
    
    COLUMN_RENAMES = {'date': 'issuance_date'}
    DROPPED_COLUMNS = ['link']
    NULLABLE_FIELDS = ['meta_score', 'user_score', 'esrb_rating']

    def __init__(self, developer_slots: int = 3, genre_slots: int = 4):
        """
        Initialize the game cleaner.

        Args:
            developer_slots (int): Ranked developer columns to keep
            genre_slots (int): Ranked genre columns to keep
        """
        self.developer_splitter = developer_splitter(developer_slots)
        self.genre_splitter = genre_splitter(genre_slots)
        self.records_processed = 0
        self.records_dropped = 0
        logger.info("GameCleaner initialized")

    def clean_table(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Run every cleaning stage in order.

        Args:
            records (list[dict]): Raw rows; each row is modified in place.

        Returns:
            list[dict]: Cleaned rows that survived the release filter.

        Raises:
            ParseError: A kept row has an unparseable date.
            TypeCoercionError: A score field is present but not numeric.
        """
        self.records_processed += len(records)

        table = self.normalize_schema(records)
        table = self.filter_released(table)
        table = self.parse_dates(table)
        table = self.normalize_nulls(table)
        table = self.coerce_types(table)
        table = self.developer_splitter.split_table(table)
        table = self.genre_splitter.split_table(table)

        logger.info(f"Cleaning complete: {len(table)}/{len(records)} rows kept")
        return table

    def normalize_schema(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Rename and drop columns that are unsuitable for analysis."""
        for record in records:
            for old_name, new_name in self.COLUMN_RENAMES.items():
                if old_name in record:
                    record[new_name] = record.pop(old_name)
            for column in self.DROPPED_COLUMNS:
                record.pop(column, None)
        return records

    def filter_released(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Remove rows for titles that are announced, cancelled or undated."""
        kept = []
        for record in records:
            if is_released(record.get('issuance_date')):
                kept.append(record)
            else:
                self.records_dropped += 1
                logger.debug(
                    f"Dropping unreleased title {record.get('title')!r} "
                    f"({record.get('platform')}): date={record.get('issuance_date')!r}"
                )
        logger.info(f"Release filter removed {len(records) - len(kept)} rows")
        return kept

    def parse_dates(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Replace the date string with a calendar date."""
        for record in records:
            record['issuance_date'] = parse_issuance_date(record.get('issuance_date'), record)
        return records

    def normalize_nulls(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Turn empty strings in score and rating fields into None."""
        for record in records:
            for field in self.NULLABLE_FIELDS:
                if field in record:
                    record[field] = _empty_to_none(record[field])
        return records

    def coerce_types(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Convert score strings to int and one-decimal Decimal."""
        for record in records:
            record['meta_score'] = coerce_meta_score(record.get('meta_score'), record)
            record['user_score'] = coerce_user_score(record.get('user_score'), record)
        return records

    def get_statistics(self) -> Dict[str, Any]:
        """Get cleaning statistics."""
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'records_cleaned': self.records_processed - self.records_dropped,
            'developer_lists_truncated': self.developer_splitter.truncated,
            'genre_lists_truncated': self.genre_splitter.truncated,
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }


def is_released(value: Any) -> bool:
    """True if the value is a date or a "<text>, 19xx/20xx" string."""
    if isinstance(value, date):
        return True
    if not isinstance(value, str):
        return False
    return RELEASED_DATE_PATTERN.fullmatch(value) is not None


def parse_issuance_date(value: Any, record: Optional[Dict[str, Any]] = None) -> date:
    """
    Parse "Month Day, Year" (e.g. "March 3, 2017") into a date.

    Raises:
        ParseError: The month name or day is invalid.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise ParseError(f"Cannot parse issuance date {value!r}: {e}", record) from e


def coerce_meta_score(value: Any, record: Optional[Dict[str, Any]] = None) -> Optional[int]:
    """Parse the critic score as an integer, rounding half-up; None stays None."""
    if value is None or isinstance(value, int):
        return value
    try:
        score = Decimal(str(value))
        if not score.is_finite():
            raise InvalidOperation(f"non-finite value {value!r}")
        return int(score.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError) as e:
        raise TypeCoercionError(f"meta_score {value!r} is not a number", record) from e


def coerce_user_score(value: Any, record: Optional[Dict[str, Any]] = None) -> Optional[Decimal]:
    """Parse the player score as a Decimal with one fractional digit."""
    if value is None:
        return None
    try:
        score = Decimal(str(value))
        if not score.is_finite():
            raise InvalidOperation(f"non-finite value {value!r}")
        return score.quantize(USER_SCORE_PRECISION, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as e:
        raise TypeCoercionError(f"user_score {value!r} is not a decimal number", record) from e


def _empty_to_none(value: Any) -> Any:
    # Only the exact empty string; whitespace is left alone.
    if isinstance(value, str) and value == '':
        return None
    return value
