"""
Layout Observability

RESPONSIBILITY: record what happened during layout passes
OUTPUTS: issue log, counters, summary report

WHAT THIS MODULE MUST NOT DO:
=============================
- Modify layout behavior
- Filter or reinterpret issues (only record them)
- Block a layout pass
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import logging

from .contracts.base import IssueCode, LayoutIssue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterDefinition:
    name: str
    description: str


DEFAULT_COUNTERS: Tuple[CounterDefinition, ...] = (
    CounterDefinition("layouts_total", "Completed layout passes"),
    CounterDefinition("clusters_total", "Clusters placed on the canvas"),
    CounterDefinition("nodes_positioned", "Positioned node instances emitted"),
    CounterDefinition("edges_dropped", "Edges dropped for integrity reasons"),
    CounterDefinition("cycles_detected", "Back-edges reversed by the cycle guard"),
    CounterDefinition("orphans_dropped", "Nodes referenced by no edge"),
)

_ISSUE_COUNTERS = {
    IssueCode.DANGLING_EDGE: "edges_dropped",
    IssueCode.DUPLICATE_EDGE: "edges_dropped",
    IssueCode.CYCLE_DETECTED: "cycles_detected",
    IssueCode.ORPHAN_NODE: "orphans_dropped",
}


class LayoutDiagnostics:
    """
    Append-only issue collector with named counters.

    One instance may be shared across many layout passes.
    """

    def __init__(self):
        self._issues: List[LayoutIssue] = []
        self._definitions: Dict[str, CounterDefinition] = {
            d.name: d for d in DEFAULT_COUNTERS
        }
        self._counters: Dict[str, int] = {name: 0 for name in self._definitions}

    def record_issue(self, issue: LayoutIssue):
        """Collect an issue (append-only) and bump its counter."""
        self._issues.append(issue)
        counter = _ISSUE_COUNTERS.get(issue.code)
        if counter:
            self.increment(counter)

        if issue.code == IssueCode.CYCLE_DETECTED or issue.is_integrity:
            logger.warning("%s: %s", issue.code.name, issue.message)
        else:
            logger.debug("%s: %s", issue.code.name, issue.message)

    def increment(self, name: str, amount: int = 1):
        if name not in self._counters:
            self._definitions[name] = CounterDefinition(name, "")
            self._counters[name] = 0
        self._counters[name] += amount

    def counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def get_issues(self, code: Optional[IssueCode] = None) -> List[LayoutIssue]:
        if code is None:
            return list(self._issues)
        return [i for i in self._issues if i.code == code]

    @property
    def issue_count(self) -> int:
        return len(self._issues)

    def report(self) -> Dict:
        by_code: Dict[str, int] = {}
        for issue in self._issues:
            by_code[issue.code.name] = by_code.get(issue.code.name, 0) + 1

        return {
            'total_issues': len(self._issues),
            'by_code': by_code,
            'counters': dict(self._counters),
        }

    def clear(self):
        self._issues.clear()
        for name in self._counters:
            self._counters[name] = 0
