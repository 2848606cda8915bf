"""
Symbol Table
============

The symbol table records every name a program defines or references, with
its address and allocation length.

Entries are kept in first-appearance order and never removed or reordered,
so the index of a symbol is stable for the whole pass. Intermediate code
refers to symbols by that index: ``(S,02)`` is the third symbol.

Forward References
------------------
A symbol may be used before the line that defines it:

         MOVER AREG, X      ; X referenced: entry 0, address unresolved
    X    DS    1            ; X defined: entry 0 updated, address = LC

reference() creates the entry with an unresolved address (None) the first
time the name is seen; define_or_update() fills the address in later, on
the same entry.
"""

from dataclasses import dataclass, replace
from typing import Iterator, Optional, Union

from pass1asm.errors import SourceLocation, UndefinedSymbolError
from pass1asm.assembler.expressions import Expression, parse_expression


# =============================================================================
# Symbol Table Entry
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name (unique within the table)
        address: Address or EQU value; None while unresolved
        length: Words allocated by DS/DC (0 for other symbols)
    """
    name: str
    address: Optional[int] = None
    length: int = 0

    @property
    def is_resolved(self) -> bool:
        """True once a defining line has given the symbol an address."""
        return self.address is not None


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """
    Append-only table of symbols with stable indices.

    Usage:
        table = SymbolTable()
        idx = table.reference("X")          # forward reference, unresolved
        table.define_or_update("X", 104)    # same entry, now resolved
        table.resolve_value("X+1")          # 105
    """

    def __init__(self) -> None:
        self._entries: list[Symbol] = []
        self._index: dict[str, int] = {}

    # =========================================================================
    # Table Operations
    # =========================================================================

    def define_or_update(self, name: str, address: int) -> int:
        """
        Define a symbol, or set the address of an existing one.

        Args:
            name: Symbol name
            address: Address (or EQU value) to record

        Returns:
            Index of the symbol
        """
        index = self._index.get(name)
        if index is None:
            return self._append(Symbol(name, address, 0))

        self._entries[index] = replace(self._entries[index], address=address)
        return index

    def reference(self, name: str) -> int:
        """
        Return the index of a symbol, creating an unresolved entry if new.

        Args:
            name: Symbol name used as an operand

        Returns:
            Index of the symbol
        """
        index = self._index.get(name)
        if index is None:
            return self._append(Symbol(name, None, 0))
        return index

    def set_length(self, name: str, length: int) -> None:
        """
        Record the allocation length of a DS/DC symbol.

        Raises:
            KeyError: If the symbol is not in the table
        """
        index = self._index[name]
        self._entries[index] = replace(self._entries[index], length=length)

    def resolve_value(
        self,
        token: Union[str, Expression],
        location: Optional[SourceLocation] = None,
    ) -> int:
        """
        Evaluate an operand using the addresses known now.

        An integer evaluates to itself; a symbol evaluates to its address;
        an offset is added to either.

        Args:
            token: Operand text or a parsed Expression
            location: Source location for error reporting

        Returns:
            The value

        Raises:
            MalformedOperandError: If the text is not a valid expression
            UndefinedSymbolError: If the symbol is absent or unresolved
        """
        expr = token if isinstance(token, Expression) else parse_expression(
            token, location=location
        )
        if expr.is_constant:
            return expr.constant + expr.offset

        symbol = self.get(expr.symbol)
        if symbol is None:
            raise UndefinedSymbolError(expr.symbol, location=location)
        if not symbol.is_resolved:
            raise UndefinedSymbolError(expr.symbol, location=location, forward=True)
        return symbol.address + expr.offset

    # =========================================================================
    # Queries
    # =========================================================================

    def index_of(self, name: str) -> Optional[int]:
        """Return the index of a symbol, or None if absent."""
        return self._index.get(name)

    def get(self, name: str) -> Optional[Symbol]:
        """Look up a symbol by name."""
        index = self._index.get(name)
        return None if index is None else self._entries[index]

    def unresolved(self) -> list[str]:
        """Names of symbols still without an address, in table order."""
        return [sym.name for sym in self._entries if not sym.is_resolved]

    def snapshot(self) -> tuple[Symbol, ...]:
        """Immutable copy of the table in index order."""
        return tuple(self._entries)

    def __getitem__(self, index: int) -> Symbol:
        return self._entries[index]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Symbol]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def _append(self, symbol: Symbol) -> int:
        self._entries.append(symbol)
        index = len(self._entries) - 1
        self._index[symbol.name] = index
        return index
