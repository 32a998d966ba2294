"""
Graph View Model

Owns the lifecycle of document loads for one consuming view.

LOAD RULES:
===========
1. The fetch is the only suspension point; layout runs to completion after it
2. A result arriving after close() is discarded, never applied
3. A result from a superseded load is discarded
4. Failures leave the previously applied view in place
5. A successful load replaces the current view in one assignment
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from graphlayout.contracts.base import IntegrityError
from graphlayout.contracts.layout import LayoutConfig
from graphlayout.engine import GraphLayoutPipeline
from graphlayout.ingestion import FetchStatus, GraphDocumentLoader, LoadResult
from graphlayout.observability import LayoutDiagnostics

from .views import NetworkGraphView, map_layout_to_view

logger = logging.getLogger(__name__)


class ViewPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class OutcomeStatus(Enum):
    APPLIED = "applied"
    FAILED = "failed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class LoadOutcome:
    """What happened to one load attempt."""
    status: OutcomeStatus
    location: str
    load_status: FetchStatus
    error_message: Optional[str] = None
    view: Optional[NetworkGraphView] = None

    @property
    def is_corrupt_data(self) -> bool:
        return self.load_status == FetchStatus.PARSE_ERROR

    @property
    def is_network_issue(self) -> bool:
        return self.load_status.is_fetch_failure


class GraphViewModel:
    """
    Loads, lays out and publishes a graph for a single view.

    Not shared across views; each instance keeps its own current view.
    """

    def __init__(
        self,
        loader: Optional[GraphDocumentLoader] = None,
        config: Optional[LayoutConfig] = None,
        diagnostics: Optional[LayoutDiagnostics] = None,
        view_id: str = "graph"
    ):
        self._loader = loader or GraphDocumentLoader()
        self._pipeline = GraphLayoutPipeline(config, diagnostics)
        self._view_id = view_id
        self._current: Optional[NetworkGraphView] = None
        self._last_failure: Optional[LoadOutcome] = None
        self._phase = ViewPhase.IDLE
        self._interested = True
        self._generation = 0

    @property
    def current(self) -> Optional[NetworkGraphView]:
        return self._current

    @property
    def last_failure(self) -> Optional[LoadOutcome]:
        return self._last_failure

    @property
    def phase(self) -> ViewPhase:
        return self._phase

    @property
    def is_interested(self) -> bool:
        return self._interested

    def close(self):
        """Tear down: in-flight loads will be discarded."""
        self._interested = False
        self._phase = ViewPhase.CLOSED

    async def load(self, location: str) -> LoadOutcome:
        if not self._interested:
            return LoadOutcome(OutcomeStatus.DISCARDED, location, FetchStatus.CANCELLED)

        self._generation += 1
        generation = self._generation
        self._phase = ViewPhase.LOADING

        loaded = await self._loader.load(location)

        if not self._interested or generation != self._generation:
            logger.debug("discarding load of %s (view closed or superseded)", location)
            return LoadOutcome(
                OutcomeStatus.DISCARDED, location, FetchStatus.CANCELLED,
                error_message="Load discarded"
            )

        return self.apply(loaded)

    def apply(self, loaded: LoadResult) -> LoadOutcome:
        """Lay out a finished load and publish it, or record the failure."""
        if not loaded.is_success or loaded.document is None:
            return self._fail(LoadOutcome(
                OutcomeStatus.FAILED, loaded.location, loaded.status,
                error_message=loaded.error_message,
            ))

        try:
            result = self._pipeline.run_document(loaded.document)
        except IntegrityError as e:
            return self._fail(LoadOutcome(
                OutcomeStatus.FAILED, loaded.location, loaded.status,
                error_message=str(e),
            ))

        view = map_layout_to_view(result, self._view_id)
        self._current = view
        self._last_failure = None
        self._phase = ViewPhase.READY
        return LoadOutcome(OutcomeStatus.APPLIED, loaded.location, loaded.status, view=view)

    def _fail(self, outcome: LoadOutcome) -> LoadOutcome:
        logger.warning("load of %s failed: %s", outcome.location, outcome.error_message)
        self._last_failure = outcome
        self._phase = ViewPhase.FAILED
        return outcome
