"""Association engine: links doc-comments to the entities they precede."""

from __future__ import annotations

import logging
from typing import Optional

from .models import Node, NodeType
from .state import ParserState
from .tree import SyntaxTree

logger = logging.getLogger(__name__)

# Node kinds that look backwards for a documenting comment.
PRECEDENCE_TARGETS = frozenset(
    {NodeType.CODE, NodeType.CHAR, NodeType.DEFINITION, NodeType.MEMBER}
)


def find_precedence(tree: SyntaxTree, node: Optional[Node]) -> Optional[Node]:
    """Return the COMMENT node ending on the line just above *node*, if any."""
    if node is None or node.type not in PRECEDENCE_TARGETS:
        return None
    if not isinstance(node.id, int) or node.id == 0:
        return None

    prev = tree.index.get(node.id - 1)
    if prev is None:
        logger.error("invalid prev_index: no entry for line %d (node %s)", node.id - 1, node.id)
        return None

    if prev.type is not NodeType.COMMENT or prev.parent is not None:
        return None

    return tree.container(NodeType.COMMENT).get(prev.node_id)


def associate(node: Node, related: Node) -> None:
    """Link two nodes in both directions; repeated calls are no-ops."""
    forward = node.assocs.setdefault(related.type, [])
    backward = related.assocs.setdefault(node.type, [])

    if related.id not in forward:
        forward.append(related.id)
    if node.id not in backward:
        backward.append(node.id)


def create_association(tree: SyntaxTree, state: ParserState) -> None:
    """Run the backward lookup for the node touched on this line."""
    if not (state.block_start or NodeType.DEFINITION in state.inside):
        return

    related = find_precedence(tree, state.node)
    if related is not None:
        logger.debug("associating %s %s <-> %s %s", state.node.type, state.node.id, related.type, related.id)
        associate(state.node, related)
