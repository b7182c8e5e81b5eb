# ========================
# src/pipeline/storage.py
# ========================

"""
Data Storage Module

Writes the cleaned table and the report result sets to the output directory.
"""

import csv
import json
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Any
from pathlib import Path

logger = logging.getLogger(__name__)

CLEANED_COLUMNS = [
    'title', 'platform', 'issuance_date', 'meta_score', 'user_score', 'esrb_rating',
    'main_developer', 'sub_developer_1', 'sub_developer_2',
    'main_genre', 'sub_genre_1', 'sub_genre_2', 'sub_genre_3'
]

REPORT_FILES = {
    'top_developers': ("top_developers.csv", ['main_developer', 'avg_meta_score']),
    'platform_user_scores': ("platform_user_scores.csv", ['platform', 'avg_user_score']),
    'thematic_meta_scores': ("thematic_meta_scores.csv", ['popular_aspect', 'avg_meta_score']),
    'monthly_scores': (
        "monthly_scores.csv",
        ['month_number', 'month_of_issuance', 'avg_user_score', 'avg_meta_score']
    ),
}

class DataSaver:
    """
    Saves the cleaned releases and the aggregated reports.
    """
    
    def __init__(self, output_dir: str = "data/processed"):
        """
        Initialize the data saver.
        
        Args:
            output_dir (str): Directory to save output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"DataSaver initialized with output directory: {self.output_dir}")

    def save_all_data(self, table, aggregator) -> Dict[str, str]:
        """
        Save the cleaned table, every report and a run summary.
        
        Args:
            table: GameTable with the cleaned releases
            aggregator: DataAggregator with finalized reports
            
        Returns:
            dict: Mapping of data type to saved file path
        """
        saved_files = {}
        
        try:
            saved_files['cleaned_games'] = self.save_cleaned_table(table)
            for name, rows in aggregator.get_reports().items():
                saved_files[name] = self.save_report(name, rows)
            
            saved_files['summary'] = self._save_summary(aggregator.get_aggregation_summary())
            
            logger.info(f"All data saved successfully to {len(saved_files)} files")
            return saved_files
            
        except Exception as e:
            logger.error(f"Error saving data: {e}")
            raise

    def save_cleaned_table(self, table) -> str:
        """Save the cleaned releases, one row per (title, platform)."""
        file_path = self.output_dir / "cleaned_games.csv"
        headers = list(CLEANED_COLUMNS)
        headers += [col for col in table.columns if col not in headers]
        rows = [self._format_record(record) for record in table]
        self._write_csv(file_path, headers, rows)
        return str(file_path)

    def save_report(self, name: str, rows: List[Dict[str, Any]]) -> str:
        """Save one report result set under its fixed file name."""
        if name not in REPORT_FILES:
            raise ValueError(f"Unknown report: {name}")
        file_name, headers = REPORT_FILES[name]
        file_path = self.output_dir / file_name
        self._write_csv(file_path, headers, [self._format_record(row) for row in rows])
        return str(file_path)

    def _save_summary(self, summary_data: Dict) -> str:
        """Save aggregation summary as JSON."""
        file_path = self.output_dir / "run_summary.json"
        
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(summary_data, f, indent=2, ensure_ascii=False, default=_json_default)
        
        logger.info(f"Summary saved to {file_path}")
        return str(file_path)

    def _format_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Render dates as ISO strings and absent values as empty cells."""
        formatted = {}
        for key, value in record.items():
            if value is None:
                formatted[key] = ''
            elif isinstance(value, date):
                formatted[key] = value.isoformat()
            else:
                formatted[key] = value
        return formatted

    def _write_csv(self, file_path: Path, headers: List[str], data_items: List[Dict]) -> None:
        """Write data to CSV file."""
        try:
            with open(file_path, 'w', newline='', encoding='utf-8') as f:
                writer = csv.DictWriter(f, fieldnames=headers)
                writer.writeheader()
                writer.writerows(data_items)
            
            logger.info(f"Saved {len(data_items)} records to {file_path}")
            
        except Exception as e:
            logger.error(f"Error writing CSV file {file_path}: {e}")
            raise

    def create_data_dictionary(self) -> str:
        """Create a data dictionary explaining all output files."""
        file_path = self.output_dir / "DATA_DICTIONARY.md"
        
        content = """# Data Dictionary

This document describes the structure and content of all generated data files.
Empty cells mean the value is absent (NULL), not zero.

## Files Overview

### 1. cleaned_games.csv
One row per game release on one platform. (title, platform) is unique.

| Column | Type | Description |
|--------|------|-------------|
| title | string | Game title |
| platform | string | Platform the release shipped on |
| issuance_date | date | Release date, YYYY-MM-DD |
| meta_score | integer | Critic score 0-100, empty if absent |
| user_score | decimal | Player score 0.0-10.0, empty if absent |
| esrb_rating | string | ESRB content rating, empty if absent |
| main_developer | string | First listed developer |
| sub_developer_1..2 | string | Second and third listed developers |
| main_genre | string | First listed genre |
| sub_genre_1..3 | string | Second to fourth listed genres |

### 2. top_developers.csv
Ten main developers with the highest average critic score.

| Column | Type | Description |
|--------|------|-------------|
| main_developer | string | Developer studio |
| avg_meta_score | integer | Mean meta_score, rounded |

### 3. platform_user_scores.csv
Platforms ranked by average player score.

| Column | Type | Description |
|--------|------|-------------|
| platform | string | Platform |
| avg_user_score | decimal | Mean user_score, 2 decimals |

### 4. thematic_meta_scores.csv
Critic scores for Pokemon, Mario, Zelda and other-topic games.

| Column | Type | Description |
|--------|------|-------------|
| popular_aspect | string | Franchise theme of the title |
| avg_meta_score | decimal | Mean meta_score, 2 decimals |

### 5. monthly_scores.csv
Scores by month of release, across all years.

| Column | Type | Description |
|--------|------|-------------|
| month_number | integer | 1-12 |
| month_of_issuance | string | Month name |
| avg_user_score | decimal | Mean user_score, 2 decimals |
| avg_meta_score | integer | Mean meta_score, rounded |

### 6. run_summary.json
Counts of processed rows, groups and report sizes.

## Data Quality Notes

- Announced, TBA and cancelled titles are removed before cleaning
- Developer lists keep at most 3 entries and genre lists at most 4
- Absent scores are excluded from averages
- Rounding is half-up
"""
        
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)
        
        logger.info(f"Data dictionary created at {file_path}")
        return str(file_path)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
