"""Parser registry — detect the dialect and run the shared parser."""

from __future__ import annotations

from collections.abc import Sequence

from diagram_layout.classifier import with_archetype
from diagram_layout.ir.ast import Document, ParseResult
from diagram_layout.parsers.dialects import detect_dialect
from diagram_layout.parsers.document import DocumentParser, parse_tokens as _parse_tokens
from diagram_layout.parsers.tokenizer import Token, tokenize, tokenize_with_diagnostics
from diagram_layout.types import Dialect

__all__ = [
    "DocumentParser",
    "Token",
    "detect_dialect",
    "parse",
    "parse_tokens",
    "parse_with_diagnostics",
    "tokenize",
]


def parse_tokens(tokens: Sequence[Token], dialect: Dialect | None = None) -> Document:
    """Parse a token list; the archetype is left UNKNOWN."""
    if dialect is None:
        dialect = detect_dialect(tokens)
    return _parse_tokens(tokens, dialect).document


def parse_with_diagnostics(src: str, dialect: Dialect | None = None) -> ParseResult:
    """Tokenize, parse and classify *src*, keeping every tolerated anomaly."""
    tokens, lexical = tokenize_with_diagnostics(src)
    if dialect is None:
        dialect = detect_dialect(tokens)
    result = _parse_tokens(tokens, dialect)
    diagnostics = sorted((*lexical, *result.diagnostics), key=lambda d: (d.line, d.column))
    return ParseResult(document=with_archetype(result.document), diagnostics=tuple(diagnostics))


def parse(src: str, dialect: Dialect | None = None) -> Document:
    """Parse diagram source text into a classified Document. Never raises on bad input."""
    return parse_with_diagnostics(src, dialect).document
