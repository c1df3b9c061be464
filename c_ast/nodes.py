"""Node store and indexer.

Decides which node receives the current line, creating nodes lazily,
recording the global index entry, merging comment continuations and
folding misclassified lead-in lines into functions.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .associations import associate
from .models import ChildRef, Fragment, IndexEntry, Node, NodeId, NodeType, SubId
from .state import ParserState, fatal
from .transforms import combine, transform
from .tree import SyntaxTree

logger = logging.getLogger(__name__)

COMM = NodeType.COMMENT
CODE = NodeType.CODE
DEF = NodeType.DEFINITION
MEMB = NodeType.MEMBER
CHAR = NodeType.CHAR

# Reference type per node type: a node created right after a node of its
# reference type closed is linked to it. Comments only look forward, so they
# have no reference of their own.
REFERENCES = {
    CODE: COMM,
    DEF: COMM,
    MEMB: COMM,
    CHAR: COMM,
}


def cached(
    tree: SyntaxTree,
    key: Optional[NodeId],
    node_type: NodeType,
    related: Optional[Node] = None,
    state: Optional[ParserState] = None,
) -> Node:
    """Return the node at *key*, creating and registering it if needed."""
    if key is None:
        fatal(f"No current {node_type} node to look up", state)

    container = tree.container(node_type)
    node = container.get(key)
    if node is None:
        node = Node(id=key, type=node_type)
        container[key] = node
        if related is not None:
            associate(node, related)
    return node


def record_index(
    tree: SyntaxTree,
    state: ParserState,
    node_type: NodeType,
    node_id: Optional[NodeId] = None,
    parent: Optional[NodeId] = None,
    ind: Optional[int] = None,
) -> IndexEntry:
    """Create or overwrite the index entry for the current line."""
    if state.node is not None:
        node_id = state.node.id

    if node_id is None:
        fatal("invalid state.node", state, type=node_type.value)

    entry = IndexEntry(node_id=node_id, type=node_type, parent=parent, ind=ind)
    tree.index[state.lno] = entry
    return entry


def process(tree: SyntaxTree, state: ParserState, node_type: NodeType) -> Node:
    """Push the current line into the node of *node_type*."""
    ref_type = REFERENCES.get(node_type)
    related = tree.find(state.previous.pop(ref_type, None)) if ref_type is not None else None

    if node_type is MEMB:
        def_id = state.current.get(DEF)
        if def_id is None:
            fatal("Member line outside of a definition", state)
        parent = tree.node(def_id)
        node, ind = _add_member(state, parent)
        state.node = node
        record_index(tree, state, MEMB, parent=parent.id, ind=ind)
        if related is not None:
            associate(node, related)
        if _has_inline_comment(state.ln):
            extract_inner_comment(tree, node)
        return node

    node = cached(tree, state.current.get(node_type), node_type, related=related, state=state)
    node.data.append(Fragment(state.lno, state.line))
    state.node = node
    record_index(tree, state, node_type)
    return node


def insert(tree: SyntaxTree, state: ParserState) -> Node:
    """Route the current line into exactly one node."""
    prev = tree.index.get(state.lno - 1)
    prev_line = tree.source[state.lno - 1].strip() if prev is not None else ""

    if DEF not in state.inside and state.is_open(COMM):
        process(tree, state, COMM)
        _merge_comment(tree, state, prev, prev_line)

    elif state.is_open(CODE):
        process(tree, state, CODE)
        _backtrace(tree, state, prev)

    elif state.is_open(DEF):
        def_closing = DEF in state.closing

        # Internal comments
        if not def_closing and state.is_open(COMM):
            process(tree, state, COMM)
            _merge_comment(tree, state, prev, prev_line)

        # Members of the definition body
        elif not def_closing and not state.block_start and len(state.ln) > 1:
            process(tree, state, MEMB)

        else:
            process(tree, state, DEF)

    else:
        state.current.setdefault(CHAR, state.lno)
        state.closing.add(CHAR)
        process(tree, state, CHAR)

    return state.node


def extract_inner_comment(tree: SyntaxTree, node: Node, subline: int = 0) -> Node:
    """Split a trailing comment off a member line into a child COMMENT node."""
    fragment = node.data[subline]
    pos = _inline_marker(fragment.text)
    if pos < 0:
        fatal("No inline comment to extract", node=str(node.id), text=fragment.text)

    code, comment = fragment.text[:pos].rstrip(), fragment.text[pos:].strip()
    node.data[subline] = Fragment(fragment.no, code)

    cid = len(node.inner)
    cnode = Node(
        id=SubId(fragment.no, cid + 1),
        type=COMM,
        data=[Fragment(fragment.no, comment)],
        parent=node.id,
    )
    node.inner.append(cnode)
    node.index[cnode.id] = ChildRef(ind=cid, type=COMM)
    tree.index[cnode.id] = IndexEntry(node_id=cnode.id, type=COMM, parent=node.id, ind=cid)
    associate(node, cnode)
    return cnode


def _add_member(state: ParserState, parent: Node) -> Tuple[Node, int]:
    node = Node(id=state.lno, type=MEMB, parent=parent.id)
    inner_id = len(parent.inner)

    parent.inner.append(node)
    parent.index[state.lno] = ChildRef(ind=inner_id, type=MEMB)
    node.data.append(Fragment(state.lno, state.line))
    return node, inner_id


def _merge_comment(
    tree: SyntaxTree,
    state: ParserState,
    prev: Optional[IndexEntry],
    prev_line: str,
) -> None:
    if prev is None or prev.type is not COMM or prev.parent is not None:
        return

    # A new block, a switch to line comments or an already closed block
    # all start a separate comment.
    if state.ln.startswith("/*"):
        return
    if state.ln.startswith("//") and "//" not in prev_line:
        return
    if "*/" in prev_line:
        return

    target = tree.container(COMM).get(prev.node_id)
    if target is None:
        fatal("Missing target", state, prev_node=str(prev.node_id))

    node = combine(tree, target, state.node)
    state.node = node
    state.current[COMM] = node.id


def _backtrace(tree: SyntaxTree, state: ParserState, prev: Optional[IndexEntry]) -> None:
    if prev is None or prev.parent is not None or prev.type not in (DEF, CHAR):
        return

    lead = tree.container(prev.type).get(prev.node_id)
    if lead is None:
        fatal("Missing lead-in node", state, prev_node=str(prev.node_id), type=prev.type.value)
    if lead.inner:
        return

    logger.debug("folding %s %s into function at line %d", lead.type, lead.id, state.lno)
    transform(tree, lead.id, lead.type, CODE)
    node = combine(tree, lead, state.node)
    state.node = node
    state.current[CODE] = node.id
    state.previous.pop(CODE, None)


def _inline_marker(text: str) -> int:
    positions = [p for p in (text.find("/*"), text.find("//")) if p >= 0]
    return min(positions) if positions else -1


def _has_inline_comment(ln: str) -> bool:
    return _inline_marker(ln) >= 1
