"""
Document ingestion: fetch, validate, convert.
"""

from .contracts import (
    FetchStatus, LoadResult, LoadError, FetchError, ParseError, LoadCancelled,
    GraphDocumentModel, NodeModel, EdgeModel, parse_document,
)
from .loader import GraphDocumentLoader, is_remote

__all__ = [
    'FetchStatus', 'LoadResult', 'LoadError', 'FetchError', 'ParseError', 'LoadCancelled',
    'GraphDocumentModel', 'NodeModel', 'EdgeModel', 'parse_document',
    'GraphDocumentLoader', 'is_remote',
]
