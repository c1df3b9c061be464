"""Orchestrates the processing of an input source into a :class:`SyntaxTree`.

Every line goes through the same pipeline, synchronously and in arrival
order: classify, track scope depth, insert into a node, associate, then
roll the per-type pointers for the next line. The only suspension point
is waiting for the next line of an asynchronous source.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterable, Iterable, Optional, Union

from . import config
from .associations import create_association
from .models import NodeType
from .nodes import insert, record_index
from .scope import depths, iterate
from .state import ParserState
from .tokenizer import Classifier
from .tree import SyntaxTree

logger = logging.getLogger(__name__)


class ParseRun:
    """One parse: owns its tree and parser state exclusively.

    Calling :meth:`panic` makes every subsequent line be dropped; the tree
    keeps whatever it held at that point.
    """

    def __init__(self, classifier: Optional[Classifier] = None) -> None:
        self.tree = SyntaxTree()
        self.state = ParserState()
        self.classifier = classifier or Classifier()
        self.panicked = False

    def panic(self) -> None:
        if not self.panicked:
            logger.warning("panic raised at line %d; dropping further input", self.state.lno)
        self.panicked = True

    def feed(self, line: str) -> bool:
        """Process one line. Returns False when the line was dropped."""
        if self.panicked:
            return False
        process_line(self.tree, self.state, line, self.classifier)
        return True


def process_line(
    tree: SyntaxTree,
    state: ParserState,
    line: str,
    classifier: Classifier,
) -> None:
    """Run one raw line through the pipeline."""
    state.advance(line)
    tree.source.append(line)

    if _skippable(state):
        record_index(tree, state, NodeType.NA, node_id=state.lno)
        # Blank lines break comment association outside definition bodies.
        if NodeType.DEFINITION not in state.inside:
            state.previous.clear()
        return

    classifier.classify(tree, state)
    depths(state)
    insert(tree, state)
    create_association(tree, state)
    iterate(state)


def build_ast(lines: Iterable[str], run: Optional[ParseRun] = None) -> SyntaxTree:
    """Fold a finite line sequence into a tree."""
    run = run or ParseRun()
    for line in lines:
        if not run.feed(_chomp(line)):
            break
    return run.tree


async def ast_from_stream(
    lines: Union[AsyncIterable[str], Iterable[str]],
    run: Optional[ParseRun] = None,
) -> SyntaxTree:
    """Consume a line source until it is exhausted and return the tree."""
    run = run or ParseRun()
    if hasattr(lines, "__aiter__"):
        async for line in lines:  # type: ignore[union-attr]
            if not run.feed(_chomp(line)):
                break
    else:
        for line in lines:  # type: ignore[union-attr]
            if not run.feed(_chomp(line)):
                break
    logger.debug("stream closed after %d lines", len(run.tree))
    return run.tree


def ast_from_text(text: Optional[str], run: Optional[ParseRun] = None) -> SyntaxTree:
    return build_ast((text or "").splitlines(), run=run)


def ast_from_file(
    path: Union[str, Path],
    encoding: Optional[str] = None,
    run: Optional[ParseRun] = None,
) -> SyntaxTree:
    """Parse a file line by line.

    Raises:
        FileNotFoundError: if *path* does not point at a file.
    """
    ipath = Path(path).expanduser().resolve()
    if not ipath.is_file():
        logger.error("Invalid input file: %s", path)
        raise FileNotFoundError(f"Invalid input file: {path}")

    with open(ipath, "r", encoding=encoding or config.ENCODING, errors="replace") as handle:
        return build_ast(handle, run=run)


def _skippable(state: ParserState) -> bool:
    if NodeType.COMMENT in state.inside:
        return False
    return state.ln == "" or state.ln.startswith("#")


def _chomp(line: str) -> str:
    return line.rstrip("\r\n")
