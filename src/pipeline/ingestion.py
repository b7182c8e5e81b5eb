# ========================
# src/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Reads the raw review export into memory. Every field arrives as a string.
"""

import csv
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    'title', 'platform', 'date', 'meta_score', 'user_score',
    'esrb_rating', 'developers', 'genres', 'link'
]

class CSVReader:
    """
    Reads a review export CSV either in chunks or as one ordered table.
    """
    
    def __init__(self, file_path):
        """
        Initialize the CSV reader.
        
        Args:
            file_path (str): Path to the CSV file to read
        """
        self.file_path = file_path
        self.header = []
        logger.info(f"Initialized CSVReader for file: {file_path}")

    def read_in_chunks(self, chunk_size):
        """
        A generator that yields a list of dictionaries for each chunk of data.

        Args:
            chunk_size (int): The number of rows to yield per chunk.
        
        Yields:
            list[dict]: A list of dictionaries representing a chunk of rows.
        """
        try:
            with open(self.file_path, 'r', newline='', encoding='utf-8') as f:
                reader = csv.DictReader(f)
                self.header = reader.fieldnames or []
                logger.info(f"CSV header: {self.header}")
                self._check_columns()
                
                chunk = []
                row_count = 0
                
                for row in reader:
                    chunk.append(row)
                    row_count += 1
                    
                    if len(chunk) == chunk_size:
                        logger.debug(f"Yielding chunk with {len(chunk)} rows")
                        yield chunk
                        chunk = []
                
                if chunk:
                    logger.debug(f"Yielding final chunk with {len(chunk)} rows")
                    yield chunk
                
                logger.info(f"Total rows read: {row_count}")
                
        except FileNotFoundError:
            logger.error(f"File '{self.file_path}' was not found")
            raise
        except Exception as e:
            logger.error(f"Error reading CSV file: {e}")
            raise

    def read_all(self, chunk_size: int = 1000) -> List[Dict[str, str]]:
        """
        Load the whole file as an ordered list of raw rows.

        Args:
            chunk_size (int): Rows read per internal chunk.

        Returns:
            list[dict]: Raw rows in file order.
        """
        rows = []
        for chunk in self.read_in_chunks(chunk_size):
            rows.extend(chunk)
        return rows

    def _check_columns(self) -> None:
        """Warn about expected columns the file does not carry."""
        if not self.header:
            return
        missing = [col for col in REQUIRED_COLUMNS if col not in self.header]
        if missing:
            logger.warning(f"CSV is missing expected columns: {missing}")
