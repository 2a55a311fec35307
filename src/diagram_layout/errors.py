"""Exception types for diagram-layout.

The public parse and layout entry points never raise on malformed input; these
exceptions cover caller mistakes (bad options) and the parser's internal strict
token expectations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diagram_layout.parsers.tokenizer import Token


class DiagramError(ValueError):
    """Base class for all diagram-layout errors."""


class UnexpectedTokenError(DiagramError):
    """A strict token expectation failed inside the parser."""

    def __init__(self, expected: str, token: Token) -> None:
        self.expected = expected
        self.token = token
        super().__init__(
            f"expected {expected}, got {token.kind.name} {token.text!r} at line {token.line}, column {token.column}"
        )


class UnknownDirectionError(DiagramError):
    """A direction override is not one of the supported rank directions."""

    def __init__(self, direction: str) -> None:
        self.direction = direction
        super().__init__(f"Unknown direction '{direction}'; use TB, TD, or LR")
