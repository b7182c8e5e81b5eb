# ========================
# src/pipeline/transformation.py
# ========================

"""
Data Transformation Module

Builds the review reports from cleaned release rows. Absent scores are
left out of every mean; they are never counted as zero.
"""

import calendar
import logging
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Checked in this order; the first match wins.
THEMES = [
    ('pokemon', 'Pokemon game'),
    ('mario', 'Mario game'),
    ('zelda', 'Zelda game'),
]
OTHER_THEME = 'Other-topic game'


def classify_title(title: Optional[str]) -> str:
    """Assign a title to its franchise theme."""
    lowered = (title or '').lower()
    for needle, theme in THEMES:
        if needle in lowered:
            return theme
    return OTHER_THEME


def round_half_up(value: Optional[Decimal], places: int) -> Optional[Decimal]:
    """Round like SQL ROUND(); 0 places gives a Decimal with no fraction."""
    if value is None:
        return None
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class _Mean:
    """Running mean that ignores absent values."""

    __slots__ = ('total', 'count')

    def __init__(self):
        self.total = Decimal(0)
        self.count = 0

    def add(self, value: Any) -> None:
        if value is None:
            return
        self.total += Decimal(str(value)) if not isinstance(value, Decimal) else value
        self.count += 1

    def value(self) -> Optional[Decimal]:
        return self.total / self.count if self.count else None


class DataAggregator:
    """
    Accumulates per-group score sums and turns them into the four reports.
    """
    
    def __init__(self, top_developers_limit: int = 10):
        """
        Initialize the data aggregator.
        
        Args:
            top_developers_limit (int): Rows kept in the developer ranking
        """
        self.top_developers_limit = top_developers_limit
        self._reset_aggregations()
        logger.info(f"DataAggregator initialized with top_developers_limit={top_developers_limit}")
    
    def _reset_aggregations(self):
        """Reset all aggregation data structures."""
        self.developer_meta = defaultdict(_Mean)
        self.platform_user = defaultdict(_Mean)
        self.theme_meta = defaultdict(_Mean)
        self.month_user = defaultdict(_Mean)
        self.month_meta = defaultdict(_Mean)
        self.records_processed = 0

        self.top_developers: List[Dict[str, Any]] = []
        self.platform_user_scores: List[Dict[str, Any]] = []
        self.thematic_meta_scores: List[Dict[str, Any]] = []
        self.monthly_scores: List[Dict[str, Any]] = []

    def process_chunk(self, chunk: List[Dict[str, Any]]) -> None:
        """
        Fold a batch of cleaned rows into the running group means.

        Args:
            chunk (list[dict]): Cleaned release rows.
        """
        logger.debug(f"Processing chunk with {len(chunk)} records")
        for record in chunk:
            self._process_single_record(record)
            self.records_processed += 1
        logger.debug(f"Chunk processed. Total records so far: {self.records_processed}")

    def _process_single_record(self, record: Dict[str, Any]) -> None:
        meta_score = record.get('meta_score')
        user_score = record.get('user_score')

        self.developer_meta[record.get('main_developer')].add(meta_score)
        self.platform_user[record.get('platform')].add(user_score)
        self.theme_meta[classify_title(record.get('title'))].add(meta_score)

        issued = record.get('issuance_date')
        if issued is not None:
            self.month_user[issued.month].add(user_score)
            self.month_meta[issued.month].add(meta_score)

    def finalize_aggregations(self) -> None:
        """
        Compute the reports from the accumulated group means.
        """
        logger.info("Finalizing aggregations...")

        developers = [
            {'main_developer': name, 'avg_meta_score': int(round_half_up(mean.value(), 0))}
            for name, mean in self.developer_meta.items()
            if mean.value() is not None
        ]
        developers.sort(key=lambda row: row['avg_meta_score'], reverse=True)
        self.top_developers = developers[:self.top_developers_limit]

        platforms = [
            {'platform': name, 'avg_user_score': round_half_up(mean.value(), 2)}
            for name, mean in self.platform_user.items()
            if mean.value() is not None
        ]
        platforms.sort(key=lambda row: row['avg_user_score'], reverse=True)
        self.platform_user_scores = platforms

        themes = [
            {'popular_aspect': theme, 'avg_meta_score': round_half_up(mean.value(), 2)}
            for theme, mean in self.theme_meta.items()
        ]
        # Undefined means sort last, as NULL does in a descending SQL sort.
        themes.sort(key=lambda row: (row['avg_meta_score'] is not None, row['avg_meta_score'] or 0), reverse=True)
        self.thematic_meta_scores = themes

        self.monthly_scores = [
            {
                'month_number': month,
                'month_of_issuance': calendar.month_name[month],
                'avg_user_score': round_half_up(self.month_user[month].value(), 2),
                'avg_meta_score': _to_int(round_half_up(self.month_meta[month].value(), 0)),
            }
            for month in sorted(set(self.month_user) | set(self.month_meta))
        ]

        logger.info(f"Aggregation complete. Processed {self.records_processed} records")
        self._log_summary_statistics()

    def _log_summary_statistics(self) -> None:
        """Log summary statistics of the aggregations."""
        logger.info(f"Developers ranked: {len(self.top_developers)} of {len(self.developer_meta)}")
        logger.info(f"Platforms with user scores: {len(self.platform_user_scores)}")
        logger.info(f"Themes: {len(self.thematic_meta_scores)}")
        logger.info(f"Months covered: {len(self.monthly_scores)}")
        if self.top_developers:
            best = self.top_developers[0]
            logger.info(f"Highest rated developer: {best['main_developer']} ({best['avg_meta_score']})")

    def get_reports(self) -> Dict[str, List[Dict[str, Any]]]:
        """The finalized report result sets by name."""
        return {
            'top_developers': self.top_developers,
            'platform_user_scores': self.platform_user_scores,
            'thematic_meta_scores': self.thematic_meta_scores,
            'monthly_scores': self.monthly_scores,
        }
    
    def get_aggregation_summary(self) -> Dict[str, Any]:
        """Get a summary of all aggregations."""
        return {
            'records_processed': self.records_processed,
            'developers': len(self.developer_meta),
            'top_developers': len(self.top_developers),
            'platforms': len(self.platform_user_scores),
            'themes': len(self.thematic_meta_scores),
            'months': len(self.monthly_scores),
        }


def _to_int(value: Optional[Decimal]) -> Optional[int]:
    return int(value) if value is not None else None
