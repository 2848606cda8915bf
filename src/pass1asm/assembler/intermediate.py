"""
Intermediate Code
=================

Pass 1 turns every accepted source line into one intermediate record: the
mnemonic's class and code followed by tagged operand tokens. A later pass
only has to look the indices up to produce final code.

Record Format
-------------
    (class,code) token token ...

| Token      | Meaning                            | Example    |
|------------|------------------------------------|------------|
| (C,n)      | constant n                         | (C,100)    |
| (R,nn)     | register code                      | (R,01)     |
| (CC,nn)    | condition code (branch operands)   | (CC,03)    |
| (S,nn)     | symbol table index                 | (S,00)     |
| (S,nn)+k   | symbol table index plus offset     | (S,02)+1   |
| (L,nn)     | literal table index                | (L,00)     |

Examples:
    START 100          ->  (AD,01) (C,100)
    A MOVER AREG, B    ->  (IS,04) (R,01) (S,01)
    B DS 1             ->  (DL,01) (C,1)
      BC GT, A         ->  (IS,07) (CC,04) (S,00)
      ORIGIN A+2       ->  (AD,03) (S,00)+2
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pass1asm.errors import SourceLocation
from pass1asm.assembler.opcodes import OpcodeClass, OpcodeDirectory, OpcodeInfo
from pass1asm.assembler.symbols import SymbolTable
from pass1asm.assembler.literals import LiteralPool, is_literal, literal_value


# =============================================================================
# Tokens and Records
# =============================================================================

class OperandKind(Enum):
    """Operand token tags."""
    CONSTANT = "C"
    REGISTER = "R"
    CONDITION = "CC"
    SYMBOL = "S"
    LITERAL = "L"


@dataclass(frozen=True)
class ICToken:
    """
    One operand token of an intermediate record.

    Attributes:
        kind: What the value denotes
        value: Constant, register/condition code, or table index
        offset: Added to a symbol's address (ORIGIN/EQU expressions only)
    """
    kind: OperandKind
    value: int
    offset: int = 0

    def __str__(self) -> str:
        if self.kind is OperandKind.CONSTANT:
            text = f"(C,{self.value})"
        else:
            text = f"({self.kind.value},{self.value:02d})"
        if self.offset > 0:
            text += f"+{self.offset}"
        elif self.offset < 0:
            text += f"-{-self.offset}"
        return text


@dataclass(frozen=True)
class ICRecord:
    """
    One intermediate code record.

    Attributes:
        opcode_class: IS, AD or DL
        code: Code of the mnemonic within its class
        operands: Operand tokens in source order
        line: Source line number the record came from
    """
    opcode_class: OpcodeClass
    code: int
    operands: tuple[ICToken, ...] = ()
    line: int = 0

    def __str__(self) -> str:
        parts = [f"({self.opcode_class.value},{self.code:02d})"]
        parts.extend(str(op) for op in self.operands)
        return " ".join(parts)


def constant_token(value: int) -> ICToken:
    return ICToken(OperandKind.CONSTANT, value)


def symbol_token(index: int, offset: int = 0) -> ICToken:
    return ICToken(OperandKind.SYMBOL, index, offset)


# =============================================================================
# Emitter
# =============================================================================

class IntermediateCodeEmitter:
    """
    Builds intermediate records and owns the output sequence.

    Instruction operands are classified here: registers and condition
    codes come from the opcode directory, literals are interned in the
    open pool, and anything else is a symbol reference.
    """

    def __init__(
        self,
        directory: OpcodeDirectory,
        symbols: SymbolTable,
        literals: LiteralPool,
    ):
        self._directory = directory
        self._symbols = symbols
        self._literals = literals
        self._records: list[ICRecord] = []

    def emit_directive(
        self,
        info: OpcodeInfo,
        operand: Optional[ICToken] = None,
        line: int = 0,
    ) -> ICRecord:
        """Append an AD record with an optional operand token."""
        operands = (operand,) if operand is not None else ()
        return self._append(ICRecord(info.opcode_class, info.code, operands, line))

    def emit_declaration(self, info: OpcodeInfo, value: int, line: int = 0) -> ICRecord:
        """Append a DL record carrying the DS size or DC value."""
        return self._append(
            ICRecord(info.opcode_class, info.code, (constant_token(value),), line)
        )

    def emit_instruction(
        self,
        info: OpcodeInfo,
        operands: tuple[str, ...],
        location: Optional[SourceLocation] = None,
        line: int = 0,
    ) -> ICRecord:
        """
        Append an IS record, resolving each operand to a token.

        Literal syntax is checked for every operand before any table is
        touched, so a malformed line leaves the tables unchanged.

        Raises:
            AssemblySyntaxError: If an operand is a malformed literal
        """
        literal_values = self.check_operands(operands, location)

        tokens = []
        for i, text in enumerate(operands):
            if i in literal_values:
                index = self._literals.intern_in_current_pool(literal_values[i])
                tokens.append(ICToken(OperandKind.LITERAL, index))
            else:
                tokens.append(self._operand_token(info, text))

        return self._append(
            ICRecord(info.opcode_class, info.code, tuple(tokens), line)
        )

    @staticmethod
    def check_operands(
        operands: tuple[str, ...],
        location: Optional[SourceLocation] = None,
    ) -> dict[int, str]:
        """
        Validate literal operands without touching any table.

        Returns:
            Literal values keyed by operand position

        Raises:
            AssemblySyntaxError: If an operand is a malformed literal
        """
        return {
            i: literal_value(text, location)
            for i, text in enumerate(operands) if is_literal(text)
        }

    def _operand_token(self, info: OpcodeInfo, text: str) -> ICToken:
        register = self._directory.register_code(text)
        if register is not None:
            return ICToken(OperandKind.REGISTER, register)

        if info.is_branch:
            condition = self._directory.condition_code(text)
            if condition is not None:
                return ICToken(OperandKind.CONDITION, condition)

        return symbol_token(self._symbols.reference(text))

    def _append(self, record: ICRecord) -> ICRecord:
        self._records.append(record)
        return record

    @property
    def records(self) -> tuple[ICRecord, ...]:
        """Immutable copy of the records emitted so far."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)
