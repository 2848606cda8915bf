"""
Operand Expressions
===================

This module parses the operand forms that directives evaluate while the
pass is running:

| Form          | Example   | Used by                    |
|---------------|-----------|----------------------------|
| integer       | ``200``   | START, DS, DC, ORIGIN, EQU |
| symbol        | ``LOOP``  | ORIGIN, EQU                |
| symbol+int    | ``L1+2``  | ORIGIN, EQU                |
| symbol-int    | ``L1-1``  | ORIGIN, EQU                |

Parsing is separate from evaluation: parse_expression() turns the text
into an Expression, and SymbolTable.resolve_value() gives it a value
using the addresses known at that point of the pass. There is no operator
precedence to handle; at most one offset follows the base term.

Example Usage
-------------
>>> from pass1asm.assembler.expressions import parse_expression
>>> expr = parse_expression("BUF+3")
>>> expr.symbol, expr.offset
('BUF', 3)
"""

from dataclasses import dataclass
from typing import Optional
import re

from pass1asm.errors import MalformedOperandError, SourceLocation


SYMBOL_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"

# Optional minus sign and ASCII decimal digits; no "+", "_" or other scripts
_INTEGER_RE = re.compile(r"-?[0-9]+")
_EXPRESSION_RE = re.compile(
    rf"(?P<base>{SYMBOL_PATTERN}|[0-9]+)\s*(?:(?P<sign>[+-])\s*(?P<offset>[0-9]+))?"
)
_SYMBOL_RE = re.compile(SYMBOL_PATTERN)


# =============================================================================
# Expression Value
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """
    A parsed operand expression: an integer or a symbol, plus an offset.

    Attributes:
        symbol: Symbol name, or None for a constant expression
        constant: Integer base (used when symbol is None)
        offset: Signed offset added to the base
    """
    symbol: Optional[str] = None
    constant: int = 0
    offset: int = 0

    @property
    def is_constant(self) -> bool:
        """True if the expression needs no symbol table lookup."""
        return self.symbol is None

    def __str__(self) -> str:
        base = self.symbol if self.symbol is not None else str(self.constant)
        if self.offset > 0:
            return f"{base}+{self.offset}"
        if self.offset < 0:
            return f"{base}-{-self.offset}"
        return base


# =============================================================================
# Parsing Functions
# =============================================================================

def parse_integer(
    text: Optional[str],
    what: str = "operand",
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Parse a decimal integer operand.

    Args:
        text: Operand text (None if the operand is missing)
        what: Description used in the error message (e.g. "DS size")
        location: Source location for error reporting

    Returns:
        The integer value

    Raises:
        MalformedOperandError: If the operand is missing or not an integer
    """
    if text is None:
        raise MalformedOperandError(f"missing {what}", location)
    if _INTEGER_RE.fullmatch(text) is None:
        raise MalformedOperandError(
            f"{what} must be an integer, got '{text}'",
            location,
        )
    return int(text, 10)


def parse_constant(
    text: Optional[str],
    what: str = "constant",
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Parse a DC constant, written either bare (``5``) or quoted (``'5'``).

    Raises:
        MalformedOperandError: If the operand is missing or not an integer
    """
    if text is not None and len(text) >= 2 and text[0] == text[-1] == "'":
        text = text[1:-1]
    return parse_integer(text, what, location)


def parse_expression(
    text: Optional[str],
    what: str = "operand",
    location: Optional[SourceLocation] = None,
) -> Expression:
    """
    Parse an ORIGIN/EQU operand.

    Args:
        text: Operand text
        what: Description used in the error message
        location: Source location for error reporting

    Returns:
        The parsed Expression

    Raises:
        MalformedOperandError: If the text is not one of the accepted forms
    """
    if text is None:
        raise MalformedOperandError(f"missing {what}", location)

    text = text.strip()
    match = _EXPRESSION_RE.fullmatch(text)
    if match is None:
        # A lone negative number is still a valid constant
        if _INTEGER_RE.fullmatch(text) is not None:
            return Expression(constant=int(text, 10))
        raise MalformedOperandError(
            f"invalid {what} '{text}'",
            location,
            hint="expected an integer, a symbol, or symbol+N / symbol-N",
        )

    offset = 0
    if match.group("offset") is not None:
        offset = int(match.group("offset"), 10)
        if match.group("sign") == "-":
            offset = -offset

    base = match.group("base")
    if base.isdigit():
        return Expression(constant=int(base, 10), offset=offset)
    return Expression(symbol=base, offset=offset)


def is_symbol_name(text: str) -> bool:
    """Check if text is a bare symbol name."""
    return _SYMBOL_RE.fullmatch(text) is not None
