"""Shared type definitions for diagram-layout.

Enums used across the tokenizer, parser, classifier and layout engines.
"""

from __future__ import annotations

from enum import Enum, auto


class TokenKind(Enum):
    IDENT = auto()
    NUMBER = auto()
    STRING = auto()
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACK = auto()  # [
    RBRACK = auto()  # ]
    COLON = auto()
    COMMA = auto()
    GT = auto()  # >
    LT = auto()  # <
    ARROW = auto()  # -> -->
    DASH = auto()  # - ---
    BIDIRECTIONAL = auto()  # <> <-> <-->
    REVERSE_ARROW = auto()  # <- <--
    PIPE = auto()  # |
    AT = auto()  # @
    COMMENT = auto()  # // ... or %% ...
    NEWLINE = auto()
    EOF = auto()
    OTHER = auto()

    @property
    def is_connector(self) -> bool:
        return self in (TokenKind.GT, TokenKind.ARROW, TokenKind.DASH, TokenKind.BIDIRECTIONAL, TokenKind.REVERSE_ARROW)

    @property
    def is_word(self) -> bool:
        return self in (TokenKind.IDENT, TokenKind.NUMBER)

    @property
    def is_noise(self) -> bool:
        return self in (TokenKind.COMMENT, TokenKind.OTHER)


class Dialect(Enum):
    NATIVE = auto()
    PLANTUML = auto()  # @startuml ... @enduml
    MERMAID = auto()  # graph TD / sequenceDiagram / ...

    @classmethod
    def default(cls) -> Dialect:
        return cls.NATIVE


class Archetype(Enum):
    GRAPH = "graph"
    ENTITY_RELATIONSHIP = "er"
    SEQUENCE = "sequence"
    PROCESS = "process"
    UNKNOWN = "unknown"


class EdgeKind(Enum):
    DIRECTED = "directed"  # > -> -->
    UNDIRECTED = "undirected"  # -
    BIDIRECTIONAL = "bidirectional"  # <>


class Visibility(Enum):
    PUBLIC = "public"  # +
    PRIVATE = "private"  # -
    PROTECTED = "protected"  # #
    PACKAGE = "package"  # ~


class MemberType(Enum):
    FIELD = "field"
    METHOD = "method"


class RankDirection(Enum):
    TB = "TB"
    LR = "LR"

    @classmethod
    def default(cls) -> RankDirection:
        return cls.TB

    @property
    def is_horizontal(self) -> bool:
        return self is RankDirection.LR


class Severity(Enum):
    WARNING = "warning"
    INFO = "info"


class LayoutMode(Enum):
    GRAPH = "graph"  # ranked compound placement
    SEQUENCE = "sequence"  # participant columns, message rows
    SIMPLE = "simple"  # one column, anchor routes

    @classmethod
    def for_archetype(cls, archetype: Archetype) -> LayoutMode:
        return cls.SEQUENCE if archetype is Archetype.SEQUENCE else cls.GRAPH
