"""
Ingestion Contracts

Load outcomes for graph documents.

PRINCIPLES:
===========
1. Failed loads are first-class results, not lost exceptions
2. Fetch failures and parse failures are distinguished
3. The raw body is kept whenever one was received
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..contracts.base import Edge, GraphDocument, Node, NodeKind


class FetchStatus(Enum):
    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    CANCELLED = "cancelled"

    @property
    def is_fetch_failure(self) -> bool:
        return self in (
            FetchStatus.HTTP_ERROR,
            FetchStatus.NETWORK_ERROR,
            FetchStatus.TIMEOUT,
            FetchStatus.NOT_FOUND,
        )


class LoadError(Exception):
    """Terminal failure of one load attempt."""

    def __init__(self, message: str, location: str = ""):
        super().__init__(message)
        self.location = location


class FetchError(LoadError):
    """Network, HTTP or file-system failure retrieving the document."""

    def __init__(self, message: str, location: str = "", http_status: Optional[int] = None):
        super().__init__(message, location)
        self.http_status = http_status


class ParseError(LoadError):
    """Document is not JSON or not shaped like {nodes, edges}."""

    def __init__(self, message: str, location: str = "", body: bytes = b""):
        super().__init__(message, location)
        self.body = body


class LoadCancelled(LoadError):
    """The consumer lost interest before the document arrived."""


# =============================================================================
# WIRE SCHEMA
# =============================================================================

class NodeModel(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: str = Field(min_length=1)
    label: Optional[str] = None
    type: str = NodeKind.UNKNOWN.value

    def to_node(self) -> Node:
        return Node(id=self.id, label=self.label if self.label is not None else self.id, type=self.type)


class EdgeModel(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: str = Field(min_length=1)
    source: str
    target: str
    label: str = ""

    def to_edge(self) -> Edge:
        return Edge(id=self.id, source=self.source, target=self.target, label=self.label)


class GraphDocumentModel(BaseModel):
    model_config = ConfigDict(extra='ignore')

    nodes: List[NodeModel] = Field(default_factory=list)
    edges: List[EdgeModel] = Field(default_factory=list)

    def to_document(self) -> GraphDocument:
        return GraphDocument(
            nodes=tuple(n.to_node() for n in self.nodes),
            edges=tuple(e.to_edge() for e in self.edges),
        )


def parse_document(body: bytes, location: str = "") -> GraphDocument:
    """
    Validate and convert a raw JSON body.

    Raises ParseError (carrying the body) on invalid JSON or shape.
    """
    try:
        model = GraphDocumentModel.model_validate_json(body)
    except ValidationError as e:
        raise ParseError(
            f"Invalid graph document: {e.error_count()} error(s): {e.errors()[0]['msg']}",
            location=location,
            body=body,
        ) from e
    return model.to_document()


# =============================================================================
# LOAD RESULT
# =============================================================================

@dataclass(frozen=True)
class LoadResult:
    """Outcome of one load attempt (always returned)."""
    location: str
    status: FetchStatus
    attempted_at: datetime
    completed_at: datetime
    document: Optional[GraphDocument] = None
    http_status: Optional[int] = None
    body: Optional[bytes] = None
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    def unwrap(self) -> GraphDocument:
        """Return the document or raise the matching LoadError."""
        if self.is_success and self.document is not None:
            return self.document
        message = self.error_message or self.status.value
        if self.status == FetchStatus.PARSE_ERROR:
            raise ParseError(message, location=self.location, body=self.body or b"")
        if self.status == FetchStatus.CANCELLED:
            raise LoadCancelled(message, location=self.location)
        raise FetchError(message, location=self.location, http_status=self.http_status)
