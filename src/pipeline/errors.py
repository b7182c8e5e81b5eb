# ========================
# src/pipeline/errors.py
# ========================

"""
Pipeline Errors

Fatal errors raised while cleaning. Anything not covered here is absorbed
as an absent value instead of being raised.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base exception for all pipeline failures."""

    def __init__(self, message: str, record: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.record = record


class ParseError(PipelineError):
    """Raised when a release date cannot be parsed after filtering."""


class TypeCoercionError(PipelineError):
    """Raised when a present score field is not numeric."""
