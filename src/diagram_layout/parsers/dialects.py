"""Dialect detection and per-dialect parsing rules.

Three surface syntaxes share one tokenizer and one parser: the native dialect,
PlantUML-style input (``@startuml`` header) and Mermaid-style input (a structural
keyword such as ``graph`` or ``sequenceDiagram`` up front). They differ in which
keywords open groups, what brackets mean and which label delimiters apply; those
differences live in the DialectRules table below.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from diagram_layout.parsers.tokenizer import Token
from diagram_layout.types import Dialect, TokenKind

logger = logging.getLogger(__name__)

DETECTION_WINDOW = 10

MERMAID_HEADERS: dict[str, str] = {
    "graph": "flow",
    "flowchart": "flow",
    "sequencediagram": "sequence",
    "classdiagram": "er",
    "erdiagram": "er",
    "statediagram": "process",
    "statediagram-v2": "process",
}


@dataclass(frozen=True)
class DialectRules:
    dialect: Dialect
    group_keywords: frozenset[str]
    declaration_keywords: frozenset[str] = frozenset()
    structured_attributes: bool = False
    pipe_labels: bool = False
    metadata_lines: bool = False
    visibility_prefixes: bool = False
    end_blocks: bool = False

    def is_group_keyword(self, token: Token) -> bool:
        return token.kind is TokenKind.IDENT and token.text.lower() in self.group_keywords

    def is_declaration_keyword(self, token: Token) -> bool:
        return token.kind is TokenKind.IDENT and token.text.lower() in self.declaration_keywords


NATIVE_RULES = DialectRules(
    dialect=Dialect.NATIVE,
    group_keywords=frozenset({"group"}),
    structured_attributes=True,
    metadata_lines=True,
)

PLANTUML_RULES = DialectRules(
    dialect=Dialect.PLANTUML,
    group_keywords=frozenset(
        {"package", "namespace", "node", "folder", "frame", "cloud", "rectangle", "box", "together"}
    ),
    declaration_keywords=frozenset(
        {
            "participant",
            "actor",
            "boundary",
            "control",
            "entity",
            "database",
            "collections",
            "queue",
            "class",
            "interface",
            "enum",
            "abstract",
            "object",
            "component",
            "usecase",
        }
    ),
    pipe_labels=True,
    visibility_prefixes=True,
)

MERMAID_RULES = DialectRules(
    dialect=Dialect.MERMAID,
    group_keywords=frozenset({"subgraph"}),
    declaration_keywords=frozenset({"participant", "actor", "class"}),
    pipe_labels=True,
    visibility_prefixes=True,
    end_blocks=True,
)

_RULES: dict[Dialect, DialectRules] = {
    Dialect.NATIVE: NATIVE_RULES,
    Dialect.PLANTUML: PLANTUML_RULES,
    Dialect.MERMAID: MERMAID_RULES,
}


def rules_for(dialect: Dialect) -> DialectRules:
    return _RULES[dialect]


def detect_dialect(tokens: Sequence[Token]) -> Dialect:
    """Classify the surface syntax from the first few significant tokens.

    Priority: an ``@start...`` header selects PlantUML, a Mermaid structural
    keyword leading a line selects Mermaid, anything else is the native dialect.
    """
    significant = [t for t in tokens if t.kind not in (TokenKind.NEWLINE, TokenKind.COMMENT)][:DETECTION_WINDOW]
    for i, token in enumerate(significant):
        leads_line = i == 0 or significant[i - 1].line != token.line
        if token.kind is TokenKind.AT and i + 1 < len(significant):
            nxt = significant[i + 1]
            if nxt.kind is TokenKind.IDENT and nxt.text.lower().startswith("start"):
                logger.debug("dialect: plantuml (header at line %d)", token.line)
                return Dialect.PLANTUML
        if leads_line and token.kind is TokenKind.IDENT and token.text.lower() in MERMAID_HEADERS:
            logger.debug("dialect: mermaid (%r at line %d)", token.text, token.line)
            return Dialect.MERMAID
    return Dialect.NATIVE
