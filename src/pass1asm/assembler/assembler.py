"""
Pass 1 Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
running pass 1 over assembly source. It wires the opcode directory and
configuration into a Pass1 driver, and writes the resulting tables and
intermediate code to files.

Example Usage
-------------
>>> from pass1asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
...         START 100
...     A   MOVER AREG, B
...     B   DS    1
...         MOVEM AREG, ='1'
...         LTORG
...         END
... ''')
>>> asm.get_symbols()
{'A': 100, 'B': 101}
>>> asm.get_intermediate()[1]
'(IS,04) (R,01) (S,01)'
>>>
>>> asm.write_intermediate("prog.ic")

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ p1asm prog.asm -o prog.ic -l prog.lst -s prog.sym

Options:
    -o, --output FILE      Intermediate code file (default: input.ic)
    -l, --listing FILE     Generate listing file
    -s, --symbols FILE     Generate symbol file
    --max-errors N         Stop after N errors
    --no-flush-on-missing-end
                           Leave literals unplaced when END is missing
    -q, --quiet            Do not print the tables
    -v, --verbose          Verbose output
"""

from pathlib import Path
from typing import Optional
import logging

from pass1asm.config import AssemblerConfig
from pass1asm.errors import AssemblerError, format_report
from pass1asm.assembler.opcodes import DEFAULT_DIRECTORY, OpcodeDirectory
from pass1asm.assembler.pass1 import Pass1, PassResult
from pass1asm.assembler.listing import (
    format_address,
    format_intermediate_code,
    format_listing,
)

# Logger for this module
logger = logging.getLogger(__name__)


class Assembler:
    """
    Main pass 1 assembler class.

    Each call to assemble_string() or assemble_file() runs a fresh pass
    with its own tables; the most recent result is kept for the output
    methods.

    Attributes:
        directory: Opcode directory used to classify mnemonics
        config: Assembler configuration
    """

    def __init__(
        self,
        directory: Optional[OpcodeDirectory] = None,
        config: Optional[AssemblerConfig] = None,
    ):
        """
        Initialize the assembler.

        Args:
            directory: Opcode directory (default: the built-in tables)
            config: Assembler configuration (default: AssemblerConfig())
        """
        self.directory = directory or DEFAULT_DIRECTORY
        self.config = config or AssemblerConfig()
        self._source_file: Optional[Path] = None
        self._result: Optional[PassResult] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>") -> PassResult:
        """Assemble source code (alias for assemble_string)."""
        return self.assemble_string(source, filename)

    def assemble_string(self, source: str, filename: str = "<input>") -> PassResult:
        """
        Run pass 1 over source code held in a string.

        Errors in the program do not raise; they are collected in the
        result (see has_errors() and get_error_report()).

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            PassResult with the final tables
        """
        logger.debug(f"Assembling {filename}")

        self._result = Pass1(self.directory, self.config).run(
            source.splitlines(), filename
        )

        if self._result.has_errors():
            logger.info(f"{filename}: {len(self._result.errors)} error(s)")
        return self._result

    def assemble_file(self, filepath: str | Path) -> PassResult:
        """
        Run pass 1 over a source file.

        Raises:
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def get_result(self) -> PassResult:
        """
        Return the result of the last assembly.

        Raises:
            AssemblerError: If nothing has been assembled yet
        """
        if self._result is None:
            raise AssemblerError("no program has been assembled")
        return self._result

    def get_symbols(self) -> dict[str, Optional[int]]:
        """Return a dictionary of symbol names to addresses."""
        return self.get_result().symbol_addresses()

    def get_literals(self) -> list[tuple[str, Optional[int]]]:
        """Return the literal table as (value, address) pairs."""
        return [(lit.value, lit.address) for lit in self.get_result().literals]

    def get_pools(self) -> list[tuple[int, int]]:
        """Return the pool table as (start index, count) pairs."""
        return [(pool.start, pool.count) for pool in self.get_result().pools]

    def get_intermediate(self) -> list[str]:
        """Return the intermediate code records as text."""
        return [str(record) for record in self.get_result().intermediate]

    def get_location_counter(self) -> int:
        """Return the location counter at the end of the pass."""
        return self.get_result().location_counter

    def get_listing(self) -> str:
        """Return the full pass 1 report (code and all tables)."""
        title = "Pass 1 Listing"
        if self._source_file is not None:
            title = f"Pass 1 Listing: {self._source_file.name}"
        return format_listing(self.get_result(), title)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_intermediate(self, filepath: str | Path) -> None:
        """
        Write the intermediate code, one record per line.
        """
        text = format_intermediate_code(self.get_result().intermediate)
        with open(filepath, "w") as f:
            f.write(text + "\n" if text else "")
        logger.debug(f"Wrote intermediate code to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the listing file."""
        with open(filepath, "w") as f:
            f.write(self.get_listing() + "\n")
        logger.debug(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address length (one per line, table order)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by p1asm\n")
            for sym in self.get_result().symbols:
                f.write(f"{sym.name} {format_address(sym.address)} {sym.length}\n")
        logger.debug(f"Wrote symbols to {filepath}")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Check if the last assembly reported errors."""
        return self._result is not None and self._result.has_errors()

    def get_error_report(self) -> str:
        """
        Get formatted error and warning report for the last assembly.
        """
        result = self.get_result()
        return format_report(result.errors, result.warnings)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> PassResult:
    """
    Convenience function to run pass 1 over source code.

    Returns:
        PassResult with the final tables
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> PassResult:
    """
    Convenience function to run pass 1 over a file.

    Raises:
        FileNotFoundError: If source file not found
    """
    return Assembler().assemble_file(filepath)
