"""Streaming line classifier that builds a lightweight AST of C-like sources."""

from __future__ import annotations

__version__ = "0.3.0"

from . import config  # noqa: E402
from .models import InvariantViolation, Node, NodeType, SubId  # noqa: E402
from .processor import (  # noqa: E402
    ParseRun,
    ast_from_file,
    ast_from_stream,
    ast_from_text,
    build_ast,
)
from .tree import SyntaxTree  # noqa: E402

__all__ = [
    "__version__",
    "config",
    "InvariantViolation",
    "Node",
    "NodeType",
    "ParseRun",
    "SubId",
    "SyntaxTree",
    "ast_from_file",
    "ast_from_stream",
    "ast_from_text",
    "build_ast",
]
