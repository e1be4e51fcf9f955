"""
Input models for curation operations (pydantic).
"""

from .inputs import (
    ClientCreate,
    ClientUpdate,
    ReportCreate,
    ReportUpdate,
    EntityCreate,
    EntityUpdate,
    SourceCreate,
    SourceUpdate,
    QuoteCreate,
    QuoteUpdate,
)
from .validation import parse_input

__all__ = [
    'ClientCreate',
    'ClientUpdate',
    'ReportCreate',
    'ReportUpdate',
    'EntityCreate',
    'EntityUpdate',
    'SourceCreate',
    'SourceUpdate',
    'QuoteCreate',
    'QuoteUpdate',
    'parse_input',
]
