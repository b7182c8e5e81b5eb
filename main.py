#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Game Review Cleaning Pipeline

Cleans a scraped review export and writes the cleaned table and reports.

Usage:
    python main.py [input_csv]

Without an argument the configured input file is used; if it does not
exist a synthetic sample export is generated first.
"""

import sys
import logging
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from src.pipeline import DataPipeline, PipelineError
from src.utils import Config, setup_logging, DataGenerator

def main(argv=None):
    """Main execution function."""
    argv = sys.argv[1:] if argv is None else argv
    config = Config()
    
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="pipeline.log",
        log_dir="logs"
    )
    
    logger = logging.getLogger(__name__)
    logger.info("="*60)
    logger.info("GAME REVIEW CLEANING PIPELINE")
    logger.info("="*60)
    
    try:
        config.ensure_directories()
        input_file = argv[0] if argv else config.DEFAULT_INPUT_FILE
        
        # Step 1: Make sure there is something to clean
        if not argv and not Path(input_file).exists():
            logger.info(f"Step 1: {input_file} not found, generating sample data...")
            generator = DataGenerator(seed=42)
            generation_stats = generator.generate_dataset(
                file_path=input_file,
                num_rows=config.DEFAULT_SAMPLE_ROWS
            )
            logger.info(f"Sample data generated: {generation_stats}")
        
        # Step 2: Run the pipeline
        logger.info("Step 2: Running data pipeline...")
        pipeline = DataPipeline(
            input_file=input_file,
            output_dir=config.DEFAULT_OUTPUT_DIR,
            config=config
        )
        
        if not pipeline.validate_input():
            logger.error("Input validation failed. Exiting.")
            return 1
        
        results = pipeline.run()
        
        # Step 3: Print summary
        _print_execution_summary(results)
        
        logger.info("Pipeline execution completed successfully!")
        return 0
    
    except PipelineError as e:
        logger.error(f"Cleaning aborted: {e}")
        if e.record is not None:
            logger.error(f"Offending row: {e.record}")
        return 1
    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1

def _print_execution_summary(results: dict) -> None:
    """Print final execution summary."""
    quality_stats = results['data_quality_stats']
    reports = results['reports']
    
    print("\n" + "="*70)
    print("PIPELINE EXECUTION SUMMARY")
    print("="*70)
    
    print("Cleaning:")
    print(f"   - Rows read: {quality_stats['records_processed']:,}")
    print(f"   - Unreleased rows removed: {quality_stats['records_dropped']:,}")
    print(f"   - Clean releases: {quality_stats['records_cleaned']:,}")
    
    print("\nTop developers by critic score:")
    for row in reports['top_developers']:
        print(f"   - {row['main_developer']}: {row['avg_meta_score']}")
    
    print("\nCritic score by theme:")
    for row in reports['thematic_meta_scores']:
        print(f"   - {row['popular_aspect']}: {row['avg_meta_score']}")
    
    print("\nGenerated outputs:")
    for dataset_type, file_path in results['saved_files'].items():
        print(f"   - {dataset_type.replace('_', ' ').title()}: {Path(file_path).name}")
    
    print("="*70)

if __name__ == '__main__':
    sys.exit(main())
