"""Tokenizer — scans diagram source into a flat, fully materialized token list.

Total over all inputs: unrecognized characters become OTHER tokens and an
unterminated string runs to the end of input, so the parser always has something
to make progress on. Every token list ends with exactly one EOF token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from diagram_layout.ir.ast import Diagnostic
from diagram_layout.types import Severity, TokenKind

logger = logging.getLogger(__name__)

_PUNCTUATION: dict[str, TokenKind] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACK,
    "]": TokenKind.RBRACK,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    "|": TokenKind.PIPE,
    "@": TokenKind.AT,
}

# Longest first.
_BIDIRECTIONAL = ("<-->", "<->", "<>")
_COMMENT_STARTS = ("//", "%%")


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int

    def is_ident(self, text: str | None = None) -> bool:
        if self.kind is not TokenKind.IDENT:
            return False
        return text is None or self.text.lower() == text.lower()


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-."


class _Scanner:
    """Character cursor with line/column bookkeeping."""

    def __init__(self, src: str) -> None:
        self.src = src
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.src[i] if i < len(self.src) else ""

    def startswith(self, s: str) -> bool:
        return self.src.startswith(s, self.pos)

    def advance(self, count: int = 1) -> str:
        text = self.src[self.pos : self.pos + count]
        for ch in text:
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(text)
        return text

    def emit(self, kind: TokenKind, text: str, line: int, column: int) -> None:
        self.tokens.append(Token(kind=kind, text=text, line=line, column=column))

    def warn(self, line: int, column: int, message: str, severity: Severity = Severity.WARNING) -> None:
        logger.debug("lexical anomaly at %d:%d: %s", line, column, message)
        self.diagnostics.append(Diagnostic(line=line, column=column, message=message, severity=severity))

    # ── Scanning rules ────────────────────────────────────────────────────────

    def scan(self) -> None:
        while self.pos < len(self.src):
            ch = self.peek()
            line, column = self.line, self.column

            if ch == "\n":
                self.advance()
                self.emit(TokenKind.NEWLINE, "\n", line, column)
                continue
            if ch.isspace():
                self.advance()
                continue
            if any(self.startswith(s) for s in _COMMENT_STARTS):
                end = self.src.find("\n", self.pos)
                end = len(self.src) if end < 0 else end
                self.emit(TokenKind.COMMENT, self.advance(end - self.pos), line, column)
                continue
            if ch == "-" and self.scan_dash(line, column):
                continue
            if ch == "<":
                self.scan_angle(line, column)
                continue
            if ch == ">":
                self.emit(TokenKind.GT, self.advance(), line, column)
                continue
            if ch in ("\"", "'"):
                self.scan_string(line, column)
                continue
            if _is_ident_char(ch):
                self.scan_identifier(line, column)
                continue
            kind = _PUNCTUATION.get(ch)
            if kind is not None:
                self.emit(kind, self.advance(), line, column)
                continue

            self.warn(line, column, f"unrecognized character {ch!r}", Severity.INFO)
            self.emit(TokenKind.OTHER, self.advance(), line, column)

        self.emit(TokenKind.EOF, "", self.line, self.column)

    def scan_dash(self, line: int, column: int) -> bool:
        """Emit an arrow or a bare dash connector; False lets the identifier scan take it."""
        run = 0
        while self.peek(run) == "-":
            run += 1
        follower = self.peek(run)
        if follower == ">":
            # "->", "-->" and longer runs are all one arrow.
            self.emit(TokenKind.ARROW, self.advance(run + 1), line, column)
            return True
        if follower and _is_ident_char(follower):
            return False
        self.emit(TokenKind.DASH, self.advance(run), line, column)
        return True

    def scan_angle(self, line: int, column: int) -> None:
        for form in _BIDIRECTIONAL:
            if self.startswith(form):
                self.emit(TokenKind.BIDIRECTIONAL, self.advance(len(form)), line, column)
                return
        run = 0
        while self.peek(run + 1) == "-":
            run += 1
        if run and self.peek(run + 1) == ">":
            self.emit(TokenKind.BIDIRECTIONAL, self.advance(run + 2), line, column)
            return
        if run:
            # "<-" and "<--" point at the left-hand side.
            self.emit(TokenKind.REVERSE_ARROW, self.advance(run + 1), line, column)
            return
        self.emit(TokenKind.LT, self.advance(), line, column)

    def scan_string(self, line: int, column: int) -> None:
        quote = self.advance()
        buf: list[str] = []
        escaped = False
        while self.pos < len(self.src):
            ch = self.peek()
            if escaped:
                buf.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                self.advance()
                self.emit(TokenKind.STRING, "".join(buf), line, column)
                return
            else:
                buf.append(ch)
            self.advance()
        self.warn(line, column, "unterminated string")
        self.emit(TokenKind.STRING, "".join(buf), line, column)

    def scan_identifier(self, line: int, column: int) -> None:
        start = self.pos
        end = start
        while end < len(self.src) and _is_ident_char(self.src[end]):
            if self.src[end] == "-" and end > start and _arrow_ahead(self.src, end):
                break
            end += 1
        text = self.advance(end - start)
        if "-" in text and set(text) <= {"-", "."}:
            # "-.-" style dotted lines carry no name.
            kind = TokenKind.DASH
        elif set(text) <= set("0123456789.") and any(c.isdigit() for c in text):
            kind = TokenKind.NUMBER
        else:
            kind = TokenKind.IDENT
        self.emit(kind, text, line, column)


def _arrow_ahead(src: str, i: int) -> bool:
    """True when a run of dashes starting at *i* ends in '>'."""
    j = i
    while j < len(src) and src[j] == "-":
        j += 1
    return j > i and j < len(src) and src[j] == ">"


def tokenize_with_diagnostics(src: str) -> tuple[list[Token], list[Diagnostic]]:
    """Tokenize *src*, also returning the lexical anomalies that were tolerated."""
    scanner = _Scanner(src)
    scanner.scan()
    return scanner.tokens, scanner.diagnostics


def tokenize(src: str) -> list[Token]:
    """Tokenize *src* into a list of tokens ending with EOF. Never raises."""
    tokens, _ = tokenize_with_diagnostics(src)
    return tokens
