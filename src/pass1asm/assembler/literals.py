"""
Literal Table and Pool Table
============================

Literals are constants written directly in an operand, ``='5'``. Each
needs a word of storage, and the assembler places them in batches called
pools: every LTORG directive (and finally END) lays out the literals
collected since the previous flush at the current location counter.

Pool Scoping
------------
Deduplication only happens inside the pool that is still open:

         MOVER AREG, ='5'    ; literal 0, pool 0
         ADD   AREG, ='5'    ; same pool: reuses literal 0
         LTORG               ; literal 0 placed here; pool 1 opens
         SUB   AREG, ='5'    ; new pool: literal 1, placed at END

Searching the whole literal table instead would hand the SUB the address
of literal 0, which lies in a region the program may have moved past.
Only the open pool's index range [start, start + count) is searched.

Tables
------
- Literal table: (value, address) in creation order; address is None
  until the literal's pool is flushed.
- Pool table: (start index, literal count) per pool. There is always one
  open pool until END closes the last one.
"""

from dataclasses import dataclass, replace
from typing import Optional
import logging

from pass1asm.errors import AssemblySyntaxError, DirectiveError, SourceLocation

# Logger for this module
logger = logging.getLogger(__name__)


LITERAL_PREFIX = "='"
LITERAL_SUFFIX = "'"


# =============================================================================
# Table Entries
# =============================================================================

@dataclass(frozen=True)
class Literal:
    """
    Literal table entry.

    Attributes:
        value: The text between the quotes of ='...'
        address: Assigned when the literal's pool is flushed, None until then
    """
    value: str
    address: Optional[int] = None

    @property
    def is_assigned(self) -> bool:
        return self.address is not None


@dataclass(frozen=True)
class Pool:
    """
    Pool table entry.

    Attributes:
        start: Index of the pool's first literal in the literal table
        count: Number of literals in the pool
    """
    start: int
    count: int = 0

    @property
    def end(self) -> int:
        """One past the pool's last literal index."""
        return self.start + self.count


# =============================================================================
# Literal Syntax
# =============================================================================

def is_literal(text: Optional[str]) -> bool:
    """Check if an operand is written as a literal (starts with '=')."""
    return text is not None and text.startswith("=")


def literal_value(
    text: str,
    location: Optional[SourceLocation] = None,
) -> str:
    """
    Extract the value of a literal operand.

    Args:
        text: Operand text such as ='5'
        location: Source location for error reporting

    Returns:
        The text between the quotes

    Raises:
        AssemblySyntaxError: If the operand is not of the form ='value'
    """
    if (
        len(text) < len(LITERAL_PREFIX) + len(LITERAL_SUFFIX)
        or not text.startswith(LITERAL_PREFIX)
        or not text.endswith(LITERAL_SUFFIX)
    ):
        raise AssemblySyntaxError(
            f"malformed literal '{text}'",
            location,
            hint="literals are written as ='value'",
        )
    return text[len(LITERAL_PREFIX):-len(LITERAL_SUFFIX)]


# =============================================================================
# Literal Pool Manager
# =============================================================================

class LiteralPool:
    """
    Owns the literal table and the pool table.

    Usage:
        pool = LiteralPool()
        idx = pool.intern_in_current_pool("5")
        lc = pool.flush_current_pool(lc)    # LTORG
        lc = pool.flush_final_pool(lc)      # END
    """

    def __init__(self) -> None:
        self._literals: list[Literal] = []
        self._pools: list[Pool] = [Pool(0, 0)]
        self._current = 0
        self._closed = False

    # =========================================================================
    # Pool Operations
    # =========================================================================

    def intern_in_current_pool(self, value: str) -> int:
        """
        Return the index of a literal in the open pool, adding it if new.

        Args:
            value: Literal value (without the =' ' wrapping)

        Returns:
            Literal table index

        Raises:
            DirectiveError: If the final pool has already been flushed
        """
        if self._closed:
            raise DirectiveError(
                f"literal ='{value}' used after the final literal pool was flushed"
            )

        pool = self._pools[self._current]
        for index in range(pool.start, pool.end):
            if self._literals[index].value == value:
                return index

        self._literals.append(Literal(value))
        self._pools[self._current] = replace(pool, count=pool.count + 1)
        return len(self._literals) - 1

    def flush_current_pool(self, lc: int) -> int:
        """
        Place the open pool's literals at lc and open a new pool (LTORG).

        Args:
            lc: Location counter before the flush

        Returns:
            Location counter after the flushed literals
        """
        lc = self._assign_addresses(lc)
        self._pools.append(Pool(len(self._literals), 0))
        self._current = len(self._pools) - 1
        return lc

    def flush_final_pool(self, lc: int) -> int:
        """
        Place the open pool's literals at lc without opening a new pool (END).

        Args:
            lc: Location counter before the flush

        Returns:
            Location counter after the flushed literals
        """
        lc = self._assign_addresses(lc)
        self._closed = True
        return lc

    def _assign_addresses(self, lc: int) -> int:
        if self._closed:
            raise DirectiveError("the final literal pool was already flushed")

        pool = self._pools[self._current]
        for index in range(pool.start, pool.end):
            literal = self._literals[index]
            if not literal.is_assigned:
                self._literals[index] = replace(literal, address=lc)
                lc += 1

        logger.debug(
            f"Flushed pool {self._current}: {pool.count} literal(s), LC now {lc}"
        )
        return lc

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def current_pool_index(self) -> int:
        """Index of the open pool in the pool table."""
        return self._current

    @property
    def current_pool(self) -> Pool:
        """The open pool (the last one once the final pool is flushed)."""
        return self._pools[self._current]

    @property
    def is_closed(self) -> bool:
        """True after flush_final_pool()."""
        return self._closed

    def pending(self) -> list[Literal]:
        """Literals of the open pool that still have no address."""
        pool = self._pools[self._current]
        return [
            self._literals[i] for i in range(pool.start, pool.end)
            if not self._literals[i].is_assigned
        ]

    def literal(self, index: int) -> Literal:
        return self._literals[index]

    def literals(self) -> tuple[Literal, ...]:
        """Immutable copy of the literal table."""
        return tuple(self._literals)

    def pools(self) -> tuple[Pool, ...]:
        """Immutable copy of the pool table."""
        return tuple(self._pools)

    def __len__(self) -> int:
        return len(self._literals)
