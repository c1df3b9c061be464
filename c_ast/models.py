"""Core data models shared by the classifier, node store and tree aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Union


class NodeType(str, Enum):
    """Category tag of a node; the value doubles as its container name."""

    COMMENT = "comments"
    CODE = "code"
    DEFINITION = "defs"
    MEMBER = "members"
    CHAR = "chars"
    NA = "na"

    def __str__(self) -> str:
        return self.value


class SubId(NamedTuple):
    """Identifier of an entity extracted from inside another line."""

    line: int
    ordinal: int

    def __str__(self) -> str:
        return f"{self.line}.{self.ordinal}"


NodeId = Union[int, SubId]


class InvariantViolation(RuntimeError):
    """Raised when parser bookkeeping falls out of sync with the tree."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = context or {}


@dataclass
class Fragment:
    """One line (or line fragment) absorbed by a node."""

    no: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"no": self.no, "ln": self.text}


@dataclass
class ChildRef:
    ind: int
    type: NodeType


@dataclass
class IndexEntry:
    """Global index record pointing a line (or sub-line id) at its owner."""

    node_id: NodeId
    type: NodeType
    parent: Optional[NodeId] = None
    ind: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"node_id": _id_value(self.node_id), "type": self.type.value}
        if self.parent is not None:
            data["parent"] = _id_value(self.parent)
        if self.ind is not None:
            data["ind"] = self.ind
        return data


@dataclass
class Node:
    id: NodeId
    type: NodeType
    data: List[Fragment] = field(default_factory=list)
    assocs: Dict[NodeType, List[NodeId]] = field(default_factory=dict)
    inner: List["Node"] = field(default_factory=list)
    index: Dict[NodeId, ChildRef] = field(default_factory=dict)
    parent: Optional[NodeId] = None

    @property
    def lines(self) -> List[int]:
        return [fragment.no for fragment in self.data]

    @property
    def last_line(self) -> int:
        if not self.data:
            return self.id if isinstance(self.id, int) else self.id.line
        return max(self.lines)

    @property
    def text(self) -> str:
        return "\n".join(fragment.text for fragment in self.data)

    def related(self, node_type: NodeType) -> List[NodeId]:
        return list(self.assocs.get(node_type, []))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": _id_value(self.id),
            "type": self.type.value,
            "assocs": {
                kind.value: [_id_value(i) for i in ids]
                for kind, ids in self.assocs.items()
            },
            "data": [fragment.to_dict() for fragment in self.data],
            "inner": [child.to_dict() for child in self.inner],
        }
        if self.index:
            data["index"] = {
                str(key): {"ind": ref.ind, "type": ref.type.value}
                for key, ref in self.index.items()
            }
        if self.parent is not None:
            data["parent"] = _id_value(self.parent)
        return data


def _id_value(node_id: NodeId) -> Union[int, str]:
    return str(node_id) if isinstance(node_id, SubId) else node_id
