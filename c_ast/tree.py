"""The tree aggregate: source log, per-category containers and global index."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .models import IndexEntry, Node, NodeId, NodeType

CONTAINERS = (NodeType.COMMENT, NodeType.CODE, NodeType.DEFINITION, NodeType.CHAR)


class SyntaxTree:
    """Indexed node graph built from a stream of C-like source lines.

    Top-level nodes live in one container per category, keyed by their
    starting line. MEMBER nodes and inline comments are children of their
    owner's ``inner`` list and are reached through the global index.
    """

    def __init__(self) -> None:
        self.source: List[str] = []
        self.containers: Dict[NodeType, Dict[NodeId, Node]] = {kind: {} for kind in CONTAINERS}
        self.index: Dict[NodeId, IndexEntry] = {}

    def container(self, node_type: NodeType) -> Dict[NodeId, Node]:
        try:
            return self.containers[node_type]
        except KeyError:
            raise KeyError(f"No container for node type '{node_type}'") from None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def keys(self, node_type: NodeType) -> List[NodeId]:
        return list(self.container(node_type).keys())

    def nodes(self, node_type: NodeType) -> List[Node]:
        return list(self.container(node_type).values())

    def node(self, node_id: NodeId) -> Node:
        """Fetch the node owning *node_id*, following child links."""
        entry = self.index.get(node_id)
        if entry is None:
            raise KeyError(f"No index entry for {node_id}")

        if entry.parent is not None:
            parent = self.node(entry.parent)
            return parent.inner[entry.ind]

        if entry.type is NodeType.NA:
            raise KeyError(f"Line {node_id} does not belong to a node")

        try:
            return self.container(entry.type)[entry.node_id]
        except KeyError:
            raise KeyError(f"Node {entry.node_id} missing from '{entry.type}'") from None

    def find(self, node_id: Optional[NodeId]) -> Optional[Node]:
        if node_id is None:
            return None
        try:
            return self.node(node_id)
        except (KeyError, IndexError):
            return None

    def inner(self, pid: NodeId, node_type: Optional[NodeType] = None) -> List[Node]:
        parent = self.node(pid)
        return [child for child in parent.inner if node_type is None or child.type is node_type]

    def count(self, node_type: NodeType) -> Dict[NodeType, int]:
        return {node_type: len(self.container(node_type))}

    def counts(self) -> Dict[NodeType, int]:
        return {kind: len(nodes) for kind, nodes in self.containers.items()}

    def type_at(self, lno: int) -> NodeType:
        entry = self.index.get(lno)
        return entry.type if entry else NodeType.NA

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self, skip_index: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "nodes": {
                kind.value: {str(key): node.to_dict() for key, node in nodes.items()}
                for kind, nodes in self.containers.items()
            }
        }
        if not skip_index:
            data["index"] = {str(key): entry.to_dict() for key, entry in self.index.items()}
        return data

    def to_json(self, skip_index: bool = False, indent: int = 4) -> str:
        return json.dumps(self.to_dict(skip_index=skip_index), indent=indent)

    def __len__(self) -> int:
        return len(self.source)
