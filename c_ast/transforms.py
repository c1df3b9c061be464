"""Reclassify nodes between containers and merge adjacent nodes."""

from __future__ import annotations

import logging
from typing import Optional

from .models import Node, NodeId, NodeType
from .state import fatal
from .tree import SyntaxTree

logger = logging.getLogger(__name__)


def transform(tree: SyntaxTree, node_id: NodeId, src: NodeType, dst: NodeType) -> Node:
    """Move the node at *node_id* from the *src* container to *dst*.

    Data, id and associations are kept. Related nodes have their bucket
    for this node re-keyed from *src* to *dst*.
    """
    node = tree.container(src).pop(node_id, None)
    if node is None:
        fatal(f"Invalid transform on node({node_id})", src=src.value, dst=dst.value)

    tree.container(dst)[node_id] = node
    node.type = dst

    for no in node.lines:
        entry = tree.index.get(no)
        if entry is not None and entry.node_id == node_id and entry.parent is None:
            entry.type = dst

    _rekey_assocs(tree, node, src, dst)

    moved = tree.container(dst).get(node_id)
    if moved is None or moved.type is not dst:
        fatal(f"Node {node_id} lost during transform", src=src.value, dst=dst.value)

    logger.debug("transformed %s from %s to %s", node_id, src, dst)
    return moved


def combine(tree: SyntaxTree, first: Optional[Node], second: Optional[Node]) -> Node:
    """Merge two adjacent nodes of one category into the lower-numbered one.

    Adjacency is measured from the survivor's last line, so a multi-line
    survivor may absorb a node whose id is more than one line away.
    """
    if first is None or second is None:
        fatal("Missing node for combine", first=_describe(first), second=_describe(second))

    # Multi-line blocks hit the same node on every line.
    if first is second or first.id == second.id:
        return first

    n1, n2 = (first, second) if first.id < second.id else (second, first)

    if n1.type is not n2.type:
        fatal("Cannot combine nodes of different types", n1=_describe(n1), n2=_describe(n2))

    if n2.id - n1.last_line != 1:
        fatal("Cannot combine non-adjacent nodes", n1=_describe(n1), n2=_describe(n2))

    container = tree.container(n2.type)
    if container.get(n2.id) is not n2:
        fatal(f"Could not find node {n2.id} inside [{n2.type}]", n1=_describe(n1), n2=_describe(n2))

    for fragment in n2.data:
        entry = tree.index.get(fragment.no)
        if entry is not None:
            entry.node_id = n1.id

    n1.data.extend(n2.data)
    n2.data = []
    _move_assocs(tree, n2, n1)
    del container[n2.id]

    logger.debug("combined %s into %s", n2.id, n1.id)
    return n1


def _rekey_assocs(tree: SyntaxTree, node: Node, src: NodeType, dst: NodeType) -> None:
    for ids in node.assocs.values():
        for related_id in ids:
            related = tree.find(related_id)
            if related is None:
                continue
            bucket = related.assocs.get(src)
            if not bucket or node.id not in bucket:
                continue
            bucket.remove(node.id)
            if not bucket:
                del related.assocs[src]
            target = related.assocs.setdefault(dst, [])
            if node.id not in target:
                target.append(node.id)


def _move_assocs(tree: SyntaxTree, absorbed: Node, survivor: Node) -> None:
    for kind, ids in absorbed.assocs.items():
        for related_id in ids:
            if related_id == survivor.id:
                continue
            bucket = survivor.assocs.setdefault(kind, [])
            if related_id not in bucket:
                bucket.append(related_id)

            related = tree.find(related_id)
            if related is None:
                continue
            back = related.assocs.get(absorbed.type, [])
            if absorbed.id in back:
                back.remove(absorbed.id)
            if survivor.id not in back:
                back.append(survivor.id)
            related.assocs[absorbed.type] = back
    absorbed.assocs = {}


def _describe(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    return f"{node.type}:{node.id} lines={node.lines}"
