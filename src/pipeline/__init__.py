# ========================
# src/pipeline/__init__.py
# ========================

"""
Data Pipeline Package

Core components of the game review cleaning pipeline:
- ingestion: CSV loading
- cleaning: schema, release filter, dates, nulls and types
- splitting: ranked slots for developer and genre lists
- table: queryable cleaned table
- transformation: score reports
- storage: output files
- orchestrator: pipeline coordination
"""

from .errors import PipelineError, ParseError, TypeCoercionError
from .ingestion import CSVReader
from .cleaning import GameCleaner
from .splitting import MultiValueSplitter, split_ranked
from .table import GameTable
from .transformation import DataAggregator, classify_title
from .storage import DataSaver
from .orchestrator import DataPipeline

__all__ = [
    'PipelineError',
    'ParseError',
    'TypeCoercionError',
    'CSVReader',
    'GameCleaner',
    'MultiValueSplitter',
    'split_ranked',
    'GameTable',
    'DataAggregator',
    'classify_title',
    'DataSaver',
    'DataPipeline'
]

__version__ = "1.0.0"
