"""
Pass 1 Assembler
================

This package implements the first pass of a two-pass assembler for a
small teaching machine (registers AREG-DREG, instructions MOVER, MOVEM,
ADD, BC, ...). Pass 1 lays the program out in memory and builds the
tables a second pass needs to produce final code.

Main Components
---------------
- **OpcodeDirectory**: Mnemonic, register and condition code lookup
- **LineClassifier**: Splits lines into label, mnemonic and operands
- **SymbolTable**: Symbols with stable indices and forward references
- **LiteralPool**: Literal table and pool table with pool-scoped reuse
- **IntermediateCodeEmitter**: Builds tagged intermediate records
- **Pass1**: Drives the pass and owns the location counter
- **Assembler**: High-level interface and file output

Outputs
-------
1. Symbol table: (name, address, length)
2. Literal table: (value, address)
3. Pool table: (start index, literal count)
4. Intermediate code: (class,code) followed by tagged operand tokens

Example Usage
-------------
>>> from pass1asm.assembler import Assembler
>>> asm = Assembler()
>>> result = asm.assemble_string('''
...         START 200
...         MOVER AREG, ='5'
...         LTORG
...         END
... ''')
>>> asm.get_literals()
[('5', 201)]
"""

from pass1asm.assembler.assembler import Assembler, assemble, assemble_file
from pass1asm.assembler.opcodes import (
    OpcodeClass,
    OpcodeInfo,
    OpcodeDirectory,
    OPCODE_TABLE,
    REGISTERS,
    CONDITION_CODES,
    MNEMONICS,
    DEFAULT_DIRECTORY,
)
from pass1asm.assembler.lexer import LineClassifier, SourceLine, classify_line
from pass1asm.assembler.expressions import Expression, parse_expression
from pass1asm.assembler.symbols import Symbol, SymbolTable
from pass1asm.assembler.literals import Literal, Pool, LiteralPool
from pass1asm.assembler.intermediate import (
    OperandKind,
    ICToken,
    ICRecord,
    IntermediateCodeEmitter,
)
from pass1asm.assembler.pass1 import Pass1, PassResult, run_pass1
from pass1asm.assembler.listing import format_listing

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Opcode directory
    "OpcodeClass",
    "OpcodeInfo",
    "OpcodeDirectory",
    "OPCODE_TABLE",
    "REGISTERS",
    "CONDITION_CODES",
    "MNEMONICS",
    "DEFAULT_DIRECTORY",
    # Line classifier
    "LineClassifier",
    "SourceLine",
    "classify_line",
    # Expressions
    "Expression",
    "parse_expression",
    # Tables
    "Symbol",
    "SymbolTable",
    "Literal",
    "Pool",
    "LiteralPool",
    # Intermediate code
    "OperandKind",
    "ICToken",
    "ICRecord",
    "IntermediateCodeEmitter",
    # Pass driver
    "Pass1",
    "PassResult",
    "run_pass1",
    # Reports
    "format_listing",
]
