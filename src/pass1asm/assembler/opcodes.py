"""
Opcode Directory
================

This module defines the static instruction and directive tables of the
hypothetical teaching machine, and the OpcodeDirectory that the pass
driver queries by mnemonic.

Opcode Classes
--------------
Every mnemonic belongs to exactly one class:

1. **IS** (Imperative Statement): machine instructions
   - Have a fixed word length (1 for every instruction here)
   - Example: MOVER AREG, X -> (IS,04) (R,01) (S,00)

2. **AD** (Assembler Directive): instructions to the assembler
   - START, END, ORIGIN, EQU, LTORG
   - Occupy no storage of their own

3. **DL** (Declaration): storage declarations
   - DS (declare storage), DC (declare constant)

Registers and Condition Codes
-----------------------------
Registers AREG..DREG and the condition codes used by the BC (branch on
condition) instruction each have a small numeric code:

    AREG 1   BREG 2   CREG 3   DREG 4
    LT 1  LTE 2  EQ 3  GT 4  GTE 5  ANY 6

The directory is injected into the pass driver and never modified by it;
a caller can build its own directory from custom tables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


# =============================================================================
# Opcode Class Enumeration
# =============================================================================

class OpcodeClass(Enum):
    """
    Mnemonic classes.

    The enum value is the two-letter tag written in intermediate code.
    """
    IMPERATIVE = "IS"   # Machine instruction
    DIRECTIVE = "AD"    # Assembler directive
    DECLARATION = "DL"  # Storage declaration

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Opcode Information
# =============================================================================

@dataclass(frozen=True)
class OpcodeInfo:
    """
    Information about one mnemonic.

    Attributes:
        mnemonic: The mnemonic as written in source
        opcode_class: IS, AD or DL
        code: Numeric code within its class
        length: Words occupied by the instruction (0 for AD and DL entries;
                declarations size themselves from their operand)
        is_branch: True if the instruction takes a condition code operand
    """
    mnemonic: str
    opcode_class: OpcodeClass
    code: int
    length: int = 0
    is_branch: bool = False

    def __repr__(self) -> str:
        return f"OpcodeInfo({self.mnemonic}, {self.opcode_class}, {self.code:02d})"


# =============================================================================
# Opcode Tables
# =============================================================================
# Machine opcode table: instruction mnemonic -> (code, length)
# =============================================================================

_IS = OpcodeClass.IMPERATIVE
_AD = OpcodeClass.DIRECTIVE
_DL = OpcodeClass.DECLARATION

OPCODE_TABLE: dict[str, OpcodeInfo] = {
    # Instructions
    "STOP": OpcodeInfo("STOP", _IS, 0, 1),
    "ADD": OpcodeInfo("ADD", _IS, 1, 1),
    "SUB": OpcodeInfo("SUB", _IS, 2, 1),
    "MULT": OpcodeInfo("MULT", _IS, 3, 1),
    "MOVER": OpcodeInfo("MOVER", _IS, 4, 1),     # Memory -> register
    "MOVEM": OpcodeInfo("MOVEM", _IS, 5, 1),     # Register -> memory
    "COMP": OpcodeInfo("COMP", _IS, 6, 1),
    "BC": OpcodeInfo("BC", _IS, 7, 1, is_branch=True),
    "DIV": OpcodeInfo("DIV", _IS, 8, 1),
    "READ": OpcodeInfo("READ", _IS, 9, 1),
    "PRINT": OpcodeInfo("PRINT", _IS, 10, 1),

    # Assembler directives
    "START": OpcodeInfo("START", _AD, 1),
    "END": OpcodeInfo("END", _AD, 2),
    "ORIGIN": OpcodeInfo("ORIGIN", _AD, 3),
    "EQU": OpcodeInfo("EQU", _AD, 4),
    "LTORG": OpcodeInfo("LTORG", _AD, 5),

    # Declarations
    "DS": OpcodeInfo("DS", _DL, 1),
    "DC": OpcodeInfo("DC", _DL, 2),
}

REGISTERS: dict[str, int] = {
    "AREG": 1,
    "BREG": 2,
    "CREG": 3,
    "DREG": 4,
}

CONDITION_CODES: dict[str, int] = {
    "LT": 1,
    "LTE": 2,
    "EQ": 3,
    "GT": 4,
    "GTE": 5,
    "ANY": 6,
}

# Set of all valid mnemonics
MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)


# =============================================================================
# Opcode Directory
# =============================================================================

class OpcodeDirectory:
    """
    Read-only lookup from mnemonic, register name and condition code name
    to their codes.

    Usage:
        directory = OpcodeDirectory()
        info = directory.lookup("MOVER")   # OpcodeInfo(MOVER, IS, 04)
        directory.register_code("AREG")    # 1
    """

    def __init__(
        self,
        opcodes: Optional[Mapping[str, OpcodeInfo]] = None,
        registers: Optional[Mapping[str, int]] = None,
        condition_codes: Optional[Mapping[str, int]] = None,
    ):
        """
        Build a directory, by default from the module tables.

        Args:
            opcodes: Mnemonic -> OpcodeInfo
            registers: Register name -> code
            condition_codes: Condition code name -> code
        """
        self._opcodes = dict(OPCODE_TABLE if opcodes is None else opcodes)
        self._registers = dict(REGISTERS if registers is None else registers)
        self._condition_codes = dict(
            CONDITION_CODES if condition_codes is None else condition_codes
        )

    def lookup(self, mnemonic: str) -> Optional[OpcodeInfo]:
        """Return the OpcodeInfo for a mnemonic, or None if unknown."""
        return self._opcodes.get(mnemonic)

    def is_mnemonic(self, name: str) -> bool:
        """Check if a name is an instruction or directive mnemonic."""
        return name in self._opcodes

    def register_code(self, name: str) -> Optional[int]:
        """Return the code of a register name, or None."""
        return self._registers.get(name)

    def condition_code(self, name: str) -> Optional[int]:
        """Return the code of a condition code name, or None."""
        return self._condition_codes.get(name)

    def mnemonics(self) -> frozenset[str]:
        """Return every mnemonic known to the directory."""
        return frozenset(self._opcodes)

    def similar_mnemonics(self, name: str) -> list[str]:
        """
        Mnemonics one typing slip away from name, for "did you mean" hints.

        A slip is one inserted, dropped or mistyped letter; case is ignored
        so that ``mover`` suggests ``MOVER``.
        """
        wanted = name.upper()
        return [
            mnemonic for mnemonic in sorted(self._opcodes)
            if _one_slip_apart(wanted, mnemonic)
        ][:3]


def _one_slip_apart(a: str, b: str) -> bool:
    """True if a and b are equal or differ by a single letter edit."""
    if len(a) > len(b):
        a, b = b, a
    if len(b) - len(a) > 1:
        return False

    i = 0
    while i < len(a) and a[i] == b[i]:
        i += 1
    if len(a) == len(b):
        return a[i + 1:] == b[i + 1:]
    return a[i:] == b[i + 1:]


DEFAULT_DIRECTORY = OpcodeDirectory()
