"""Line classifier.

Each trimmed line is matched against an ordered list of rules; the first
rule whose predicate holds mutates the parser state (scope flags, current
pointers, ``closing`` / ``block_start``). The heuristics are regular
expressions, not a grammar: false positives are accepted.

Rules can be swapped or extended by passing a custom list to
:class:`Classifier` without touching the rest of the pipeline.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Pattern, Sequence

from . import config
from .models import NodeType
from .state import ParserState
from .transforms import transform
from .tree import SyntaxTree

logger = logging.getLogger(__name__)

COMM = NodeType.COMMENT
CODE = NodeType.CODE
DEF = NodeType.DEFINITION
CHAR = NodeType.CHAR

# Identifier run followed by a parenthesised argument list.
FUNCTION_DECL = re.compile(r"[A-Za-z0-9_\s]+\(.*\)")


def definition_pattern(keywords: Iterable[str]) -> Pattern[str]:
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})\s+")


@dataclass(frozen=True)
class Patterns:
    function: Pattern[str]
    definition: Pattern[str]

    @classmethod
    def from_keywords(cls, keywords: Optional[Sequence[str]] = None) -> "Patterns":
        return cls(
            function=FUNCTION_DECL,
            definition=definition_pattern(keywords or config.DEFINITION_KEYWORDS),
        )


@dataclass
class LineView:
    """What the rules see of the current line."""

    state: ParserState
    tree: SyntaxTree
    patterns: Patterns

    @property
    def ln(self) -> str:
        return self.state.ln

    def is_function(self) -> bool:
        return bool(self.patterns.function.search(self.ln))

    def is_definition(self) -> bool:
        return bool(self.patterns.definition.search(self.ln))

    def is_forward_declaration(self) -> bool:
        return (
            self.state.depth == 0
            and ";" in self.ln
            and self.ln.count("{") == self.ln.count("}")
        )


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[LineView], bool]
    apply: Callable[[LineView], None]


# ----------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------

def _open_block_comment(view: LineView) -> None:
    state = view.state
    state.current[COMM] = state.lno
    if "*/" in view.ln[2:]:
        state.closing.add(COMM)
    else:
        state.inside.add(COMM)
        state.block_start = True


def _close_block_comment(view: LineView) -> None:
    view.state.inside.discard(COMM)
    view.state.closing.add(COMM)


def _line_comment(view: LineView) -> None:
    state = view.state
    state.current[COMM] = state.lno
    state.closing.add(COMM)
    state.block_start = True


def _begin_definition(view: LineView) -> None:
    state = view.state
    state.current[DEF] = state.lno
    state.inside.add(DEF)
    state.block_start = True
    state.depth = 0


def _begin_code(view: LineView) -> None:
    state = view.state
    state.current[CODE] = state.lno

    # Handle one line declarations
    if view.is_forward_declaration():
        state.closing.add(CODE)
    else:
        state.depth = 0
        state.inside.add(CODE)
        state.block_start = True


def _definition_body(view: LineView) -> None:
    state = view.state
    if state.depth != 0 or not view.is_function():
        return

    # The definition header was a function's return type all along.
    def_id = state.current.pop(DEF)
    transform(view.tree, def_id, DEF, CODE)

    state.current[CODE] = def_id
    previous_def = state.previous.pop(DEF, None)
    if previous_def is not None:
        state.previous[CODE] = previous_def
    state.inside.discard(DEF)

    if view.is_forward_declaration():
        state.closing.add(CODE)
    else:
        state.inside.add(CODE)


def _plain(view: LineView) -> None:
    state = view.state
    state.current[CHAR] = state.lno
    state.closing.add(CHAR)


def _noop(view: LineView) -> None:
    return None


DEFAULT_RULES: List[Rule] = [
    Rule(
        "block-comment-open",
        lambda v: not v.state.inside & {COMM, CODE} and v.ln.startswith("/*"),
        _open_block_comment,
    ),
    Rule(
        "block-comment-close",
        lambda v: COMM in v.state.inside and "*/" in v.ln,
        _close_block_comment,
    ),
    Rule("block-comment-body", lambda v: COMM in v.state.inside, _noop),
    Rule(
        "line-comment",
        lambda v: CODE not in v.state.inside and v.ln.startswith("//"),
        _line_comment,
    ),
    Rule(
        "definition",
        lambda v: not v.state.inside & {DEF, CODE} and v.is_definition() and not v.is_function(),
        _begin_definition,
    ),
    Rule(
        "function",
        lambda v: not v.state.inside & {DEF, CODE} and v.is_function(),
        _begin_code,
    ),
    Rule(
        "definition-body",
        lambda v: DEF in v.state.inside and CODE not in v.state.inside,
        _definition_body,
    ),
    Rule("code-body", lambda v: CODE in v.state.inside, _noop),
    Rule("plain", lambda v: bool(v.ln), _plain),
]


class Classifier:
    """Applies the first matching rule to each line."""

    def __init__(
        self,
        patterns: Optional[Patterns] = None,
        rules: Optional[Sequence[Rule]] = None,
    ) -> None:
        self.patterns = patterns or Patterns.from_keywords()
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def classify(self, tree: SyntaxTree, state: ParserState) -> Optional[str]:
        view = LineView(state=state, tree=tree, patterns=self.patterns)
        for rule in self.rules:
            if rule.matches(view):
                logger.debug("%d [depth %d] %s: %s", state.lno, state.depth, rule.name, state.ln)
                rule.apply(view)
                return rule.name
        return None
