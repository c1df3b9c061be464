"""Transient parser state owned by a single parse run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, NoReturn, Optional, Set

from .models import InvariantViolation, Node, NodeId, NodeType

logger = logging.getLogger(__name__)


@dataclass
class ParserState:
    """Scope flags, node pointers and per-line scratch data.

    ``current`` holds the id of the in-progress node per type, ``previous``
    the most recently closed one. ``closing`` and ``block_start`` are reset
    at the start of every line.
    """

    inside: Set[NodeType] = field(default_factory=set)
    current: Dict[NodeType, NodeId] = field(default_factory=dict)
    previous: Dict[NodeType, NodeId] = field(default_factory=dict)
    depth: int = 0
    lno: int = -1

    # Per-line scratch
    closing: Set[NodeType] = field(default_factory=set)
    block_start: bool = False
    node: Optional[Node] = None
    line: str = ""
    ln: str = ""

    def advance(self, line: str) -> None:
        """Clear per-line flags and move onto *line*."""
        self.node = None
        self.closing = set()
        self.block_start = False
        self.line = line
        self.ln = line.strip()
        self.lno += 1

    def is_open(self, node_type: NodeType) -> bool:
        return node_type in self.inside or node_type in self.closing

    def snapshot(self) -> Dict[str, Any]:
        return {
            "lno": self.lno,
            "ln": self.ln,
            "depth": self.depth,
            "inside": sorted(t.value for t in self.inside),
            "closing": sorted(t.value for t in self.closing),
            "current": {t.value: str(i) for t, i in self.current.items()},
            "previous": {t.value: str(i) for t, i in self.previous.items()},
            "block_start": self.block_start,
            "node": str(self.node.id) if self.node else None,
        }


def fatal(message: str, state: Optional[ParserState] = None, **context: Any) -> NoReturn:
    """Log an invariant violation with its context and abort the run."""
    if state is not None:
        context["state"] = state.snapshot()
    logger.error("%s: %s", message, context)
    raise InvariantViolation(message, context)
