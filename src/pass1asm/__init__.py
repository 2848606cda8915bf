"""
pass1asm - Pass 1 of a Two-Pass Assembler
=========================================

This package reads a program for a small teaching machine and produces
the symbol table, literal table, pool table and intermediate code that a
second assembler pass consumes.

Main Components
---------------
- **assembler**: The pass 1 engine (p1asm)
    Classifies lines, tracks the location counter, resolves forward
    references and lays out literal pools at LTORG/END

- **cli**: Command-line tool
    Runs the pass on a file and writes the intermediate code and reports

Quick Start
-----------
Run pass 1 on a program:
    >>> from pass1asm import Assembler
    >>> asm = Assembler()
    >>> result = asm.assemble_file("prog.asm")
    >>> asm.write_intermediate("prog.ic")

Or use the command-line tool:
    $ p1asm prog.asm -o prog.ic -l prog.lst
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from pass1asm.config import AssemblerConfig
from pass1asm.assembler import (
    Assembler,
    assemble,
    assemble_file,
    Pass1,
    PassResult,
    run_pass1,
    OpcodeDirectory,
)
from pass1asm.errors import (
    Pass1Error,
    AssemblerError,
    AssemblySyntaxError,
    UnknownMnemonicError,
    MalformedOperandError,
    UndefinedSymbolError,
    MissingLabelError,
    DirectiveError,
    TooManyErrors,
    SourceLocation,
    ErrorCollector,
)

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "AssemblerConfig",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "Pass1",
    "PassResult",
    "run_pass1",
    "OpcodeDirectory",
    # Exception hierarchy
    "Pass1Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownMnemonicError",
    "MalformedOperandError",
    "UndefinedSymbolError",
    "MissingLabelError",
    "DirectiveError",
    "TooManyErrors",
    "SourceLocation",
    "ErrorCollector",
]
