"""Document parser — hand-rolled recursive descent over the token list.

One left-to-right pass. Each statement is dispatched on its first tokens in a
fixed priority order:

  1. dialect header lines (``@startuml``, ``graph TD``) and directive lines
  2. group keyword forms: ``group Name {`` / ``package "Name" {`` / ``subgraph Name ... end``
  3. declaration keywords in foreign dialects: ``participant Alice``, ``class User { ... }``
  4. ``name {``: an entity with a fields body or a group, by lookahead
  5. ``name [``: an entity with bracketed attributes
  6. any line with a connector token: an edge chain
  7. native dialect only: ``key value`` metadata
  8. a bare identifier: a lone entity, rest of line skipped

Malformed input never raises out of this module; anomalies become Diagnostics.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from diagram_layout.errors import UnexpectedTokenError
from diagram_layout.ir.ast import (
    Block,
    Cardinality,
    Diagnostic,
    Document,
    Edge,
    Entity,
    Field,
    Group,
    MetadataValue,
    ParseResult,
    freeze,
)
from diagram_layout.parsers.dialects import MERMAID_HEADERS, DialectRules, rules_for
from diagram_layout.parsers.tokenizer import Token
from diagram_layout.types import Dialect, EdgeKind, MemberType, TokenKind, Visibility

logger = logging.getLogger(__name__)

_VISIBILITY_MARKS: dict[str, Visibility] = {
    "+": Visibility.PUBLIC,
    "-": Visibility.PRIVATE,
    "#": Visibility.PROTECTED,
    "~": Visibility.PACKAGE,
}

_CONNECTOR_KINDS: dict[TokenKind, EdgeKind] = {
    TokenKind.BIDIRECTIONAL: EdgeKind.BIDIRECTIONAL,
    TokenKind.DASH: EdgeKind.UNDIRECTED,
    TokenKind.ARROW: EdgeKind.DIRECTED,
    TokenKind.GT: EdgeKind.DIRECTED,
    TokenKind.REVERSE_ARROW: EdgeKind.DIRECTED,
}

# Lines led by these words are dialect directives, stored as metadata.
_DIRECTIVES: dict[Dialect, frozenset[str]] = {
    Dialect.NATIVE: frozenset(),
    Dialect.PLANTUML: frozenset({"title", "autonumber", "skinparam", "left", "top", "hide", "show", "caption"}),
    Dialect.MERMAID: frozenset({"direction", "autonumber", "title"}),
}

# Lines led by these words carry no structure we keep.
_SKIPPED: dict[Dialect, frozenset[str]] = {
    Dialect.NATIVE: frozenset(),
    Dialect.PLANTUML: frozenset(
        {"alt", "else", "end", "loop", "opt", "par", "break", "critical", "note", "activate", "deactivate", "return"}
    ),
    Dialect.MERMAID: frozenset(
        {
            "end",
            "loop",
            "alt",
            "else",
            "opt",
            "par",
            "and",
            "rect",
            "critical",
            "break",
            "note",
            "activate",
            "deactivate",
            "classdef",
            "style",
            "linkstyle",
            "click",
        }
    ),
}


# ─── Cursor ──────────────────────────────────────────────────────────────────


@dataclass
class _Cursor:
    """Position over a fixed token sequence; private to one parse call."""

    tokens: Sequence[Token]
    pos: int = 0

    def peek(self, offset: int = 0) -> Token:
        i = self.pos + offset
        if i < len(self.tokens):
            return self.tokens[i]
        return self.tokens[-1]

    def next(self) -> Token:
        t = self.peek()
        if t.kind is not TokenKind.EOF:
            self.pos += 1
        return t

    def at(self, kind: TokenKind, offset: int = 0) -> bool:
        return self.peek(offset).kind is kind

    def match(self, kind: TokenKind) -> Token | None:
        if self.at(kind):
            return self.next()
        return None

    def expect(self, kind: TokenKind, what: str | None = None) -> Token:
        t = self.peek()
        if t.kind is not kind:
            raise UnexpectedTokenError(what or kind.name, t)
        return self.next()

    def expect_name(self) -> Token:
        t = self.peek()
        if not _is_name(t):
            raise UnexpectedTokenError("a name", t)
        return self.next()

    def eof(self) -> bool:
        return self.at(TokenKind.EOF)

    def at_line_end(self) -> bool:
        return self.peek().kind in (TokenKind.NEWLINE, TokenKind.EOF)

    def rest_of_line(self, stop: TokenKind | None = None) -> list[Token]:
        """Consume through the next newline, or up to *stop*; return the tokens before it."""
        acc: list[Token] = []
        while not self.at_line_end():
            if stop is not None and self.at(stop):
                return acc
            acc.append(self.next())
        self.match(TokenKind.NEWLINE)
        return acc

    def line_has_connector(self) -> bool:
        """True when a connector appears before the next newline, outside brackets."""
        depth = 0
        i = 0
        while True:
            t = self.peek(i)
            if t.kind in (TokenKind.NEWLINE, TokenKind.EOF):
                return False
            if t.kind is TokenKind.LBRACK:
                depth += 1
            elif t.kind is TokenKind.RBRACK:
                depth = max(0, depth - 1)
            elif depth == 0 and t.kind.is_connector:
                return True
            i += 1


def _is_name(token: Token) -> bool:
    return token.kind.is_word or token.kind is TokenKind.STRING


def _join(tokens: Sequence[Token]) -> str:
    return " ".join(t.text for t in tokens if t.kind not in (TokenKind.NEWLINE, TokenKind.COMMENT)).strip()


def _signature(tokens: Sequence[Token]) -> str:
    """``add ( a int , b int )`` -> ``add(a int, b int)``."""
    out: list[str] = []
    prev: Token | None = None
    for t in tokens:
        if prev is not None and (prev.kind.is_word and t.kind.is_word or prev.kind is TokenKind.COMMA):
            out.append(" ")
        out.append(t.text)
        prev = t
    return "".join(out)


# ─── Edge chain elements ─────────────────────────────────────────────────────


@dataclass
class _NodeGroup:
    ids: list[str]


@dataclass
class _Connector:
    kind: EdgeKind
    text: str
    from_cardinality: str | None = None
    to_cardinality: str | None = None
    reverse: bool = False


@dataclass
class _Declared:
    """Inline declarations collected while reading an edge line."""

    entities: list[Entity] = field(default_factory=list)


# ─── Heuristics ──────────────────────────────────────────────────────────────


def looks_like_entity_def(cursor: _Cursor) -> bool:
    """Decide whether ``name {`` at the cursor opens an entity (True) or a group.

    Skips newlines and comments inside the brace, then inspects the first two
    significant tokens: ``word word`` or ``word "string"`` is a field row, so an
    entity. ``word [`` or ``word {`` is a nested declaration, so a group. An
    empty body, or anything else, is a group.
    """
    i = 2
    while True:
        t = cursor.peek(i)
        if t.kind in (TokenKind.EOF, TokenKind.RBRACE):
            return False
        if t.kind in (TokenKind.NEWLINE, TokenKind.COMMENT, TokenKind.OTHER):
            i += 1
            continue
        break
    t1, t2 = cursor.peek(i), cursor.peek(i + 1)
    if t1.kind.is_word and (t2.kind.is_word or t2.kind is TokenKind.STRING):
        return True
    return False


# ─── Parser ──────────────────────────────────────────────────────────────────


class DocumentParser:
    """Recursive-descent parser for one token list under one dialect."""

    def __init__(self, tokens: Sequence[Token], dialect: Dialect = Dialect.NATIVE) -> None:
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = [*tokens, Token(TokenKind.EOF, "", last_line, 1)]
        self.cursor = _Cursor(tokens=tokens)
        self.rules: DialectRules = rules_for(dialect)
        self.dialect = dialect
        self.metadata: dict[str, MetadataValue] = {}
        self.edges: list[Edge] = []
        self.diagnostics: list[Diagnostic] = []
        self._header_seen = False

    # ── Diagnostics ─────────────────────────────────────────────────────────

    def warn(self, token: Token, message: str) -> None:
        logger.debug("parse anomaly at %d:%d: %s", token.line, token.column, message)
        self.diagnostics.append(Diagnostic(line=token.line, column=token.column, message=message))

    # ── Entry point ─────────────────────────────────────────────────────────

    def parse(self) -> ParseResult:
        blocks: list[Block] = []
        while not self.cursor.eof():
            self.parse_statement_into(blocks, top_level=True)

        line_count = max((t.line for t in self.cursor.tokens), default=0)
        document = Document(
            metadata=freeze(self.metadata),
            root_blocks=tuple(blocks),
            edges=tuple(self.edges),
            dialect=self.dialect,
            raw_line_count=line_count,
        )
        logger.debug(
            "parsed %s document: %d root blocks, %d edges, %d metadata keys",
            self.dialect.name.lower(),
            len(blocks),
            len(self.edges),
            len(self.metadata),
        )
        return ParseResult(document=document, diagnostics=tuple(self.diagnostics))

    def parse_statement_into(self, blocks: list[Block], top_level: bool) -> None:
        start = self.cursor.peek()
        try:
            self._dispatch(blocks, top_level)
        except UnexpectedTokenError as exc:
            self.warn(exc.token, f"statement starting at line {start.line} skipped: {exc}")
            self.cursor.rest_of_line()

    def _dispatch(self, blocks: list[Block], top_level: bool) -> None:
        cur = self.cursor
        t = cur.peek()
        nxt = cur.peek(1)

        if t.kind in (TokenKind.NEWLINE, TokenKind.COMMENT, TokenKind.OTHER):
            cur.next()
            return

        if t.kind is TokenKind.AT:
            # @startuml / @enduml
            cur.rest_of_line()
            return

        if t.kind is TokenKind.IDENT:
            word = t.text.lower()
            if top_level and self.dialect is Dialect.MERMAID and not self._header_seen and word in MERMAID_HEADERS:
                self.parse_mermaid_header()
                return
            if word in _DIRECTIVES[self.dialect] and not cur.line_has_connector():
                if top_level:
                    self.parse_directive()
                else:
                    cur.rest_of_line()
                return
            if word in _SKIPPED[self.dialect]:
                cur.rest_of_line()
                return

        if self.rules.is_group_keyword(t) and _is_name(nxt):
            if cur.at(TokenKind.LBRACE, 2):
                cur.next()
                blocks.append(self.parse_group())
                return
            if self.rules.end_blocks:
                blocks.append(self.parse_end_block())
                return

        if self.rules.is_declaration_keyword(t) and _is_name(nxt) and not cur.line_has_connector():
            blocks.append(self.parse_declaration())
            return

        inline_shape = self.dialect is not Dialect.NATIVE and cur.line_has_connector()
        if t.kind.is_word and nxt.kind is TokenKind.LBRACE and not inline_shape:
            if looks_like_entity_def(cur):
                blocks.append(self.parse_entity())
            else:
                blocks.append(self.parse_group())
            return

        if t.kind.is_word and nxt.kind is TokenKind.LBRACK and not cur.line_has_connector():
            blocks.append(self.parse_entity())
            return

        if cur.line_has_connector():
            blocks.extend(self.parse_edge_line())
            return

        if t.kind.is_word:
            if top_level and self.rules.metadata_lines:
                key, value = self.parse_metadata_line()
                self.metadata[key] = value
                return
            cur.next()
            cur.rest_of_line(stop=None if top_level else TokenKind.RBRACE)
            blocks.append(Entity(id=t.text))
            return

        if t.kind is TokenKind.RBRACE and top_level:
            self.warn(t, "unmatched '}'")
        elif t.kind is not TokenKind.EOF:
            self.warn(t, f"unexpected {t.kind.name} {t.text!r}")
        cur.next()

    # ── Metadata and directives ─────────────────────────────────────────────

    def parse_metadata_line(self) -> tuple[str, MetadataValue]:
        """``key value...``; an empty value is the flag value True."""
        key = self.cursor.expect_name()
        value = _join(self.cursor.rest_of_line())
        if not value:
            return key.text, True
        return key.text, value

    def parse_mermaid_header(self) -> None:
        keyword = self.cursor.next()
        self._header_seen = True
        self.metadata["type"] = MERMAID_HEADERS[keyword.text.lower()]
        rest = self.cursor.rest_of_line()
        if rest and rest[0].kind is TokenKind.IDENT:
            self.metadata["direction"] = rest[0].text

    def parse_directive(self) -> None:
        key = self.cursor.next()
        value = _join(self.cursor.rest_of_line())
        word = key.text.lower()
        if word in ("left", "top") and value.endswith("direction"):
            # PlantUML "left to right direction" / "top to bottom direction"
            self.metadata["direction"] = "LR" if word == "left" else "TB"
            return
        self.metadata[word] = value or True

    # ── Groups ──────────────────────────────────────────────────────────────

    def parse_group(self) -> Group:
        """``name { child... }`` with the cursor on the name."""
        name = self.cursor.expect_name()
        self.cursor.expect(TokenKind.LBRACE, "'{'")
        children: list[Block] = []
        while not self.cursor.at(TokenKind.RBRACE):
            if self.cursor.eof():
                self.warn(name, f"unclosed '{{' for group {name.text!r}")
                return Group(name=name.text, children=tuple(children))
            self.parse_statement_into(children, top_level=False)
        self.cursor.next()
        return Group(name=name.text, children=tuple(children))

    def parse_end_block(self) -> Group:
        """Mermaid ``subgraph name ... end`` with the cursor on the keyword."""
        keyword = self.cursor.next()
        header = self.cursor.rest_of_line()
        name = header[0].text if header else keyword.text
        children: list[Block] = []
        while True:
            t = self.cursor.peek()
            if t.kind is TokenKind.EOF:
                self.warn(keyword, f"unclosed subgraph {name!r}")
                break
            if t.is_ident("end"):
                self.cursor.rest_of_line()
                break
            self.parse_statement_into(children, top_level=False)
        return Group(name=name, children=tuple(children))

    # ── Entities ────────────────────────────────────────────────────────────

    def parse_entity(self, entity_id: str | None = None, attrs: dict[str, str] | None = None) -> Entity:
        """``name [attrs] { fields }`` — either part optional."""
        if entity_id is None:
            entity_id = self.cursor.expect_name().text
        attributes = dict(attrs or {})
        fields: tuple[Field, ...] | None = None

        if self.cursor.at(TokenKind.LBRACK):
            opener = self.cursor.next()
            content: list[Token] = []
            while not self.cursor.at(TokenKind.RBRACK):
                if self.cursor.eof():
                    self.warn(opener, f"unclosed '[' for {entity_id!r}")
                    break
                content.append(self.cursor.next())
            self.cursor.match(TokenKind.RBRACK)
            attributes.update(self.bracket_attributes(content))

        if self.cursor.at(TokenKind.LBRACE):
            fields = self.parse_fields(entity_id)

        self.cursor.match(TokenKind.NEWLINE)
        return Entity(id=entity_id, attributes=freeze(attributes), fields=fields)

    def parse_declaration(self) -> Entity:
        """Foreign-dialect ``participant A``, ``actor "Long" as L``, ``class User {``."""
        keyword = self.cursor.next()
        first = self.cursor.next()
        attrs = {"role": keyword.text.lower()}
        entity_id = first.text
        if self.cursor.peek().is_ident("as") and _is_name(self.cursor.peek(1)):
            self.cursor.next()
            second = self.cursor.next()
            id_first = first.kind is not TokenKind.STRING and (
                second.kind is TokenKind.STRING or self.dialect is Dialect.MERMAID
            )
            entity_id, label = (first.text, second.text) if id_first else (second.text, first.text)
            attrs["label"] = label
        elif first.kind is TokenKind.STRING:
            attrs["label"] = first.text

        # <<stereotype>> and similar decorations up to a body or line end
        while not self.cursor.at_line_end() and self.cursor.peek().kind not in (TokenKind.LBRACK, TokenKind.LBRACE):
            self.cursor.next()
        return self.parse_entity(entity_id, attrs)

    def bracket_attributes(self, content: Sequence[Token]) -> dict[str, str]:
        if not self.rules.structured_attributes:
            text = _join(content)
            return {"label": text} if text else {}
        return tokens_to_key_values(content)

    def parse_fields(self, owner: str) -> tuple[Field, ...]:
        """``{ name type constraint... }`` rows, one per line."""
        opener = self.cursor.expect(TokenKind.LBRACE, "'{'")
        fields: list[Field] = []
        while not self.cursor.at(TokenKind.RBRACE):
            t = self.cursor.peek()
            if t.kind is TokenKind.EOF:
                self.warn(opener, f"unclosed '{{' for entity {owner!r}")
                return tuple(fields)
            if t.kind in (TokenKind.NEWLINE, TokenKind.COMMENT):
                self.cursor.next()
                continue
            row = self.parse_field_row()
            if row is not None:
                fields.append(row)
        self.cursor.next()
        return tuple(fields)

    def parse_field_row(self) -> Field | None:
        cur = self.cursor
        row: list[Token] = []
        while cur.peek().kind not in (TokenKind.NEWLINE, TokenKind.RBRACE, TokenKind.EOF):
            row.append(cur.next())
        cur.match(TokenKind.NEWLINE)

        visibility: Visibility | None = None
        if self.rules.visibility_prefixes and row:
            head = row[0]
            if head.text in _VISIBILITY_MARKS and head.kind in (TokenKind.OTHER, TokenKind.DASH):
                visibility = _VISIBILITY_MARKS[head.text]
                row = row[1:]
            elif head.kind is TokenKind.IDENT and head.text.startswith("-") and len(head.text) > 1:
                visibility = Visibility.PRIVATE
                row = [Token(head.kind, head.text[1:], head.line, head.column + 1), *row[1:]]

        row = [t for t in row if t.kind is not TokenKind.COMMENT]
        if not row or not row[0].kind.is_word:
            return None

        raw_text = "".join(t.text for t in row)
        is_method = "(" in raw_text and ")" in raw_text
        name = row[0].text
        i = 1
        if is_method:
            # name(args...) up to the closing parenthesis
            while i < len(row):
                i += 1
                if row[i - 1].text == ")":
                    break
            name = _signature(row[:i])

        field_type: str | None = None
        if i < len(row) and row[i].kind is TokenKind.COLON and i + 1 < len(row):
            i += 1
        if i < len(row) and row[i].kind.is_word:
            field_type = row[i].text
            i += 1

        constraint_text = " ".join(t.text for t in row[i:] if t.kind is not TokenKind.COMMA).strip()
        constraints = tuple(constraint_text.split()) if constraint_text else ()
        raw = " ".join(p for p in (name, field_type or "", constraint_text) if p)
        return Field(
            name=name,
            type=field_type,
            constraints=constraints,
            visibility=visibility,
            member_type=MemberType.METHOD if is_method else MemberType.FIELD,
            raw=raw,
        )

    # ── Edges ───────────────────────────────────────────────────────────────

    def parse_edge_line(self) -> list[Entity]:
        """Read one edge line; append its expanded edges, return inline declarations."""
        line = self.cursor.rest_of_line()
        declared = _Declared()
        chain, label = self.reduce_chain(line, declared)
        self.edges.extend(expand_chain(chain, label))
        return declared.entities

    def reduce_chain(self, line: Sequence[Token], declared: _Declared) -> tuple[list[_NodeGroup | _Connector], str | None]:
        """Reduce a line to alternating node-groups and connectors plus its label."""
        chain: list[_NodeGroup | _Connector] = []
        label: str | None = None
        pending_comma = False
        pending_cardinality: str | None = None
        last_id: str | None = None
        i = 0
        n = len(line)

        while i < n:
            t = line[i]

            span_close = self._span_closer(t)
            if span_close is not None:
                j, content = _collect_span(line, i, t.kind, t.text, span_close)
                if j > n:
                    self.warn(t, f"unclosed {t.text!r} in edge line")
                if last_id is not None and (chain and isinstance(chain[-1], _NodeGroup)):
                    attrs = self.bracket_attributes(content)
                    declared.entities.append(Entity(id=last_id, attributes=freeze(attrs)))
                i = j
                continue

            if t.kind is TokenKind.PIPE and self.rules.pipe_labels:
                close = next((k for k in range(i + 1, n) if line[k].kind is TokenKind.PIPE), None)
                if close is not None:
                    text = _join(line[i + 1 : close])
                    if text:
                        label = text
                    i = close + 1
                    continue

            if t.kind is TokenKind.COLON:
                text = _join(line[i + 1 :])
                label = text or label
                break

            if t.kind.is_word:
                if pending_comma and chain and isinstance(chain[-1], _NodeGroup):
                    chain[-1].ids.append(t.text)
                else:
                    chain.append(_NodeGroup(ids=[t.text]))
                pending_comma = False
                last_id = t.text
            elif t.kind is TokenKind.COMMA:
                pending_comma = True
            elif t.kind in _CONNECTOR_KINDS:
                connector = _Connector(
                    kind=_CONNECTOR_KINDS[t.kind],
                    text=t.text,
                    from_cardinality=pending_cardinality,
                    reverse=t.kind is TokenKind.REVERSE_ARROW,
                )
                pending_cardinality = None
                chain.append(connector)
                pending_comma = False
                last_id = None
            elif t.kind is TokenKind.STRING:
                if chain and isinstance(chain[-1], _Connector):
                    chain[-1].to_cardinality = t.text
                elif chain:
                    pending_cardinality = t.text
            i += 1

        return chain, label

    def _span_closer(self, token: Token) -> str | None:
        """Closing text for spans that decorate nodes inline rather than connect them."""
        if token.kind is TokenKind.LBRACK:
            return "]"
        if self.dialect is not Dialect.NATIVE:
            if token.kind is TokenKind.OTHER and token.text == "(":
                return ")"
            if token.kind is TokenKind.LBRACE:
                return "}"
        return None


def _collect_span(line: Sequence[Token], start: int, kind: TokenKind, opener: str, closer: str) -> tuple[int, list[Token]]:
    """Return (index after the matching closer, tokens inside) for a nestable span."""
    depth = 1
    j = start + 1
    content: list[Token] = []
    while j < len(line):
        tok = line[j]
        if tok.kind is kind and tok.text == opener:
            depth += 1
        elif tok.text == closer and tok.kind is not TokenKind.STRING:
            depth -= 1
            if depth == 0:
                return j + 1, content
        content.append(tok)
        j += 1
    return len(line) + 1, content


def expand_chain(chain: Sequence[_NodeGroup | _Connector], label: str | None) -> list[Edge]:
    """Walk node-groups and connectors left to right, emitting cross products.

    Each connector joins every id of the node-group on its left to every id of
    the node-group on its right; the right group then becomes the left side for
    the next connector. ``A, B -> C, D`` yields four edges, ``X > Y -> Z`` two.
    A reverse arrow swaps the ends: ``B <- A`` is the edge A to B.
    """
    edges: list[Edge] = []
    left: list[str] | None = None
    i = 0
    while i < len(chain):
        element = chain[i]
        if isinstance(element, _NodeGroup):
            left = element.ids
            i += 1
            continue
        right = chain[i + 1] if i + 1 < len(chain) else None
        if not isinstance(right, _NodeGroup):
            i += 1
            continue
        near, far = element.from_cardinality, element.to_cardinality
        sources, targets = left or [], right.ids
        if element.reverse:
            near, far = far, near
            sources, targets = targets, sources
        cardinality = None
        if near is not None or far is not None:
            cardinality = Cardinality(from_=near, to=far)
        for src in sources:
            for dst in targets:
                edges.append(Edge(from_id=src, to_id=dst, kind=element.kind, label=label, cardinality=cardinality))
        left = right.ids
        i += 2
    return edges


def tokens_to_key_values(tokens: Sequence[Token]) -> dict[str, str]:
    """Native ``key: value, key2: value two`` attribute content.

    Pairs split on top-level commas and on the first colon within each pair;
    multi-token values are joined by single spaces. A key with no colon is a
    flag and gets the value ``"true"``.
    """
    out: dict[str, str] = {}
    i = 0
    n = len(tokens)
    while i < n:
        while i < n and tokens[i].kind in (TokenKind.NEWLINE, TokenKind.COMMENT, TokenKind.OTHER, TokenKind.COMMA):
            i += 1
        if i >= n:
            break
        key_tok = tokens[i]
        if not _is_name(key_tok):
            i += 1
            continue
        key = key_tok.text
        i += 1
        if i < n and tokens[i].kind is TokenKind.COLON:
            i += 1
            parts: list[Token] = []
            while i < n and tokens[i].kind is not TokenKind.COMMA:
                parts.append(tokens[i])
                i += 1
            out[key] = _join(parts)
        else:
            out[key] = "true"
    return out


def parse_tokens(tokens: Sequence[Token], dialect: Dialect = Dialect.NATIVE) -> ParseResult:
    """Parse an already-tokenized document under *dialect*."""
    return DocumentParser(tokens, dialect).parse()
