# ========================
# src/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Runs load, clean, aggregate and save as one batch job.
"""

import logging
from typing import Optional
from pathlib import Path

from .ingestion import CSVReader
from .cleaning import GameCleaner
from .table import GameTable
from .transformation import DataAggregator
from .storage import DataSaver
from ..utils.performance_monitor import monitor_performance
from ..utils.config import Config

logger = logging.getLogger(__name__)

class DataPipeline:
    """
    Orchestrates the review cleaning pipeline.
    The working table is passed from stage to stage; nothing is kept globally.
    """
    
    def __init__(self, 
                 input_file: str, 
                 output_dir: str, 
                 config: Optional[Config] = None):
        """
        Initialize the data pipeline.
        
        Args:
            input_file (str): Path to the raw review CSV
            output_dir (str): Directory for output files
            config (Config): Configuration object
        """
        self.input_file = input_file
        self.output_dir = output_dir
        self.config = config or Config()
        self.chunk_size = self.config.DEFAULT_CHUNK_SIZE
        
        self.reader = CSVReader(self.input_file)
        self.cleaner = GameCleaner(
            developer_slots=self.config.DEVELOPER_SLOTS,
            genre_slots=self.config.GENRE_SLOTS
        )
        self.aggregator = DataAggregator(
            top_developers_limit=self.config.TOP_DEVELOPERS_LIMIT
        )
        self.saver = DataSaver(self.output_dir)
        self.table: Optional[GameTable] = None
        
        logger.info("DataPipeline initialized:")
        logger.info(f"  Input: {self.input_file}")
        logger.info(f"  Output: {self.output_dir}")

    def run(self) -> dict:
        """
        Execute the complete pipeline from start to finish.
        
        Returns:
            dict: Summary of processing results and saved files

        Raises:
            ParseError, TypeCoercionError: A row could not be cleaned.
        """
        logger.info(f"Starting data pipeline for '{self.input_file}'...")
        
        with monitor_performance("Game review pipeline") as monitor:
            raw_rows = self.reader.read_all(self.chunk_size)
            monitor.update_progress(len(raw_rows))
            monitor.add_checkpoint('loaded', {'rows': len(raw_rows)})

            self.table = self.clean(raw_rows)
            monitor.add_checkpoint('cleaned', {'rows': len(self.table)})

            self.aggregator.process_chunk(list(self.table))
            self.aggregator.finalize_aggregations()
            monitor.add_checkpoint('aggregated')
            
            logger.info("Saving cleaned table and reports...")
            saved_files = self.saver.save_all_data(self.table, self.aggregator)
            saved_files['data_dictionary'] = self.saver.create_data_dictionary()
        
        results = {
            'pipeline_status': 'completed',
            'input_file': self.input_file,
            'output_directory': self.output_dir,
            'saved_files': saved_files,
            'reports': self.aggregator.get_reports(),
            'processing_stats': self.aggregator.get_aggregation_summary(),
            'data_quality_stats': self.cleaner.get_statistics(),
            'performance': monitor.summary
        }
        
        logger.info("Pipeline finished successfully.")
        self._log_final_summary(results)
        
        return results

    def clean(self, raw_rows: list) -> GameTable:
        """Clean raw rows into a GameTable and check how many survived."""
        cleaned = self.cleaner.clean_table(raw_rows)
        table = GameTable(cleaned)

        if raw_rows:
            retention = len(table) / len(raw_rows)
            if retention < self.config.MIN_RETENTION_RATE:
                logger.warning(
                    f"Only {retention:.1%} of rows survived cleaning "
                    f"(threshold {self.config.MIN_RETENTION_RATE:.0%})"
                )
        return table

    def _log_final_summary(self, results: dict) -> None:
        """Log final pipeline summary."""
        logger.info("="*60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("="*60)
        
        quality_stats = results['data_quality_stats']
        
        logger.info(f"Input file: {results['input_file']}")
        logger.info(f"Rows read: {quality_stats['records_processed']:,}")
        logger.info(f"Unreleased rows removed: {quality_stats['records_dropped']:,}")
        logger.info(f"Retention rate: {quality_stats['success_rate']:.1f}%")
        logger.info(f"Output files generated: {len(results['saved_files'])}")
        
        for dataset_type, file_path in results['saved_files'].items():
            logger.info(f"  - {dataset_type}: {file_path}")
        
        logger.info("="*60)

    def validate_input(self) -> bool:
        """
        Validate input file exists and is readable.
        
        Returns:
            bool: True if input is valid
        """
        input_path = Path(self.input_file)
        if not input_path.exists():
            logger.error(f"Input file does not exist: {self.input_file}")
            return False
        
        if not input_path.is_file():
            logger.error(f"Input path is not a file: {self.input_file}")
            return False
        
        try:
            with open(self.input_file, 'r', encoding='utf-8') as f:
                f.readline()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read input file: {e}")
            return False
        
        logger.info(f"Input validation passed: {self.input_file}")
        return True
