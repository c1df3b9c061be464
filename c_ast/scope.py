"""Scope depth tracking and per-line pointer bookkeeping."""

from __future__ import annotations

from .models import NodeType
from .state import ParserState

# Types whose current pointer rolls into previous once closed.
ROLLED_TYPES = (NodeType.DEFINITION, NodeType.CODE, NodeType.COMMENT, NodeType.CHAR)


def depths(state: ParserState) -> None:
    """Track brace nesting for the open CODE/DEFINITION block.

    A DEFINITION ends when nesting is back at its starting level on a line
    carrying ``;`` or ``}``; CODE needs an explicit ``}``.
    """
    in_def = NodeType.DEFINITION in state.inside
    in_code = NodeType.CODE in state.inside
    if not (in_def or in_code):
        return

    # Comment lines inside a definition body do not count braces.
    if state.is_open(NodeType.COMMENT):
        return

    scope_open = state.ln.count("{")
    scope_close = state.ln.count("}")
    state.depth += scope_open - scope_close

    if state.depth > 0:
        return

    state.depth = 0
    if in_def:
        if state.ln.find(";") >= 1 or scope_close:
            state.inside.discard(NodeType.DEFINITION)
            state.closing.add(NodeType.DEFINITION)
    elif scope_close:
        state.inside.discard(NodeType.CODE)
        state.closing.add(NodeType.CODE)


def iterate(state: ParserState) -> None:
    """Roll the pointers of every type that closed on this line."""
    for node_type in ROLLED_TYPES:
        if node_type in state.closing:
            closed = state.current.pop(node_type, None)
            if closed is None:
                state.previous.pop(node_type, None)
            else:
                state.previous[node_type] = closed
