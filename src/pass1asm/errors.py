"""
Pass 1 Assembler Error Hierarchy
================================

This module defines the exception hierarchy for the pass 1 assembler.
All exceptions inherit from Pass1Error, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Pass1Error (base)
└── AssemblerError (source-related)
    ├── AssemblySyntaxError - malformed line text
    ├── UnknownMnemonicError - mnemonic not in the opcode directory
    ├── MalformedOperandError - operand is missing or not an integer
    ├── UndefinedSymbolError - EQU/ORIGIN operand has no address
    ├── MissingLabelError - EQU written without a label
    ├── DirectiveError - other directive misuse
    └── TooManyErrors - error cap reached

Design Philosophy
-----------------
The pass never stops on a bad line. Each problem is raised as one of the
exceptions above, caught by the pass driver, and stored in an
ErrorCollector so that a single run reports every issue in the program.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class Pass1Error(Exception):
    """
    Base exception for all pass1asm errors.

        try:
            assembler.assemble_file("program.asm")
        except Pass1Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Pass1Error):
    """
    Base exception for all errors found in assembly source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:4:7: error: undefined symbol 'LOOP'
                X EQU LOOP
                      ^
            hint: define 'LOOP' before it is used here
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def with_context(
        self,
        location: Optional[SourceLocation],
        source_line: Optional[str],
    ) -> "AssemblerError":
        """
        Attach location and source text to an error raised without them.

        The table managers raise errors knowing nothing about lines; the
        pass driver fills in where the error happened before collecting it.
        """
        if self.location is None:
            self.location = location
        if self.source_line is None:
            self.source_line = source_line
        self.args = (self._format_message(),)
        return self


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in a source line.

    Examples:
        - Literal missing its closing quote: ='5
        - Literal written without quotes: =5
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """
    The mnemonic of a line is neither an instruction nor a directive.

    The line contributes nothing to the tables or the intermediate code.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown mnemonic '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MalformedOperandError(AssemblerError):
    """
    A directive expecting an integer operand got something else.

    Examples:
        START ABC
        DS    -
        ORIGIN L1+X
    """
    pass


class UndefinedSymbolError(AssemblerError):
    """
    A symbol used where its value is needed right away has no address.

    Raised for EQU and ORIGIN operands. Forward references in instruction
    operands are not errors; they stay unresolved for a later pass.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        forward: bool = False,
    ):
        self.symbol = symbol
        self.forward = forward

        if not hint:
            if forward:
                hint = f"'{symbol}' is referenced but not yet defined at this point"
            else:
                hint = f"define '{symbol}' before it is used here"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingLabelError(AssemblerError):
    """EQU written without a label to define."""

    def __init__(
        self,
        mnemonic: str = "EQU",
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        super().__init__(
            f"{mnemonic} requires a label",
            location=location,
            hint=f"write it as: NAME {mnemonic} value",
            source_line=source_line,
        )


class DirectiveError(AssemblerError):
    """
    Error in an assembler directive not covered by a more specific class.

    Examples:
        - Directive missing a required operand
    """
    pass


class TooManyErrors(AssemblerError):
    """
    Raised when the configured error cap has been reached.

    The pass driver catches it and ends the pass early, returning the
    tables built so far.
    """

    def __init__(self, message: str = "Too many errors"):
        super().__init__(message)


# =============================================================================
# Diagnostics Gathered Over One Pass
# =============================================================================

class ErrorCollector:
    """
    Holds the errors and warnings raised while pass 1 walks the source.

    A bad line is recorded here and skipped; the pass carries on with the
    next line. Only the optional cap stops it early.

    Example:
        diagnostics = ErrorCollector(max_errors=50)
        diagnostics.add(UndefinedSymbolError("LOOP"))
        diagnostics.add_warning("prog.asm:9:1: program has no END directive")
        print(diagnostics.report())
    """

    def __init__(self, max_errors: Optional[int] = None):
        # max_errors=None means the pass never stops on its own
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Record an error.

        Raises:
            TooManyErrors: Once the number of errors reaches max_errors
        """
        self.errors.append(error)
        if self.max_errors is not None and len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"Too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        """Render the diagnostics with format_report()."""
        return format_report(self.errors, self.warnings)

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_report(
    errors: Sequence[AssemblerError],
    warnings: Sequence[str],
) -> str:
    """
    Render pass 1 diagnostics as blank-line separated blocks.

    Each error keeps its own multi-line form (location, source line, caret
    and hint). Warnings follow as one block, one ``warning:`` line each,
    and a tally closes the report:

        prog.asm:3:1: error: unknown mnemonic 'MOVR'
            MOVR AREG, X
            ^
        hint: did you mean 'MOVER'?

        warning: prog.asm:9:1: program has no END directive

        pass 1: 1 error, 1 warning
    """
    blocks = [str(error) for error in errors]
    if warnings:
        blocks.append("\n".join(f"warning: {warning}" for warning in warnings))
    blocks.append(
        f"pass 1: {_plural(len(errors), 'error')}, "
        f"{_plural(len(warnings), 'warning')}"
    )
    return "\n\n".join(blocks)
