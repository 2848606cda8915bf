"""
Pass 1 Driver
=============

This module runs the first pass over a program: it classifies each line,
updates the symbol, literal and pool tables, advances the location
counter (LC), and emits one intermediate record per accepted line.

Directive Semantics
-------------------
| Mnemonic    | Location counter              | Tables                        |
|-------------|-------------------------------|-------------------------------|
| START n     | LC = n                        | -                             |
| ORIGIN e    | LC = value of e               | -                             |
| L EQU e     | unchanged                     | L = value of e                |
| LTORG       | + one per flushed literal     | flush pool, open a new one    |
| L DS n      | + n                           | L = LC before, length n       |
| L DC v      | + 1                           | L = LC before, length 1       |
| END         | + one per flushed literal     | flush the final pool          |
| instruction | + instruction length          | operand symbols and literals  |

``e`` is an integer, a symbol, or symbol+N / symbol-N. Its symbol must
already have an address; an unresolved symbol is an error, never a
silent zero. Directives and declarations take at most one operand, so
``ORIGIN L1 + 5`` is rejected rather than read as ``ORIGIN L1``.

Labels on instructions and declarations name the address the line
starts at (LC before the line's own advance). Labels on START, ORIGIN,
LTORG and END are ignored with a warning.

Error Handling
--------------
A bad line is reported and skipped: no table changes, no LC change and
no intermediate record. Processing continues with the next line, so the
result always holds everything the rest of the program produced.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union
import logging

from pass1asm.config import AssemblerConfig
from pass1asm.errors import (
    AssemblerError,
    DirectiveError,
    ErrorCollector,
    MalformedOperandError,
    MissingLabelError,
    TooManyErrors,
    UnknownMnemonicError,
)
from pass1asm.assembler.opcodes import (
    DEFAULT_DIRECTORY,
    OpcodeClass,
    OpcodeDirectory,
    OpcodeInfo,
)
from pass1asm.assembler.lexer import LineClassifier, SourceLine
from pass1asm.assembler.expressions import (
    Expression,
    parse_constant,
    parse_expression,
    parse_integer,
)
from pass1asm.assembler.symbols import Symbol, SymbolTable
from pass1asm.assembler.literals import Literal, LiteralPool, Pool
from pass1asm.assembler.intermediate import (
    ICRecord,
    ICToken,
    IntermediateCodeEmitter,
    constant_token,
    symbol_token,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Pass Result
# =============================================================================

@dataclass(frozen=True)
class PassResult:
    """
    Snapshot of every table after a complete pass.

    Attributes:
        symbols: Symbol table in index order
        literals: Literal table in index order
        pools: Pool table in pool order
        intermediate: Intermediate records in source order
        location_counter: LC after the last line (and final flush)
        errors: Errors reported during the pass
        warnings: Warnings reported during the pass
        ended: True if an END directive was processed
    """
    symbols: tuple[Symbol, ...]
    literals: tuple[Literal, ...]
    pools: tuple[Pool, ...]
    intermediate: tuple[ICRecord, ...]
    location_counter: int
    errors: tuple[AssemblerError, ...] = ()
    warnings: tuple[str, ...] = ()
    ended: bool = False

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def symbol(self, name: str) -> Optional[Symbol]:
        """Look up a symbol by name."""
        for sym in self.symbols:
            if sym.name == name:
                return sym
        return None

    def symbol_index(self, name: str) -> Optional[int]:
        """Index of a symbol by name, or None."""
        for index, sym in enumerate(self.symbols):
            if sym.name == name:
                return index
        return None

    def symbol_addresses(self) -> dict[str, Optional[int]]:
        """Dictionary of symbol names to addresses (None if unresolved)."""
        return {sym.name: sym.address for sym in self.symbols}


# =============================================================================
# Pass Driver
# =============================================================================

class Pass1:
    """
    Runs pass 1 over a sequence of lines.

    One instance owns one set of tables; it is not meant to be reused for
    a second program. Independent programs use independent instances.

    Usage:
        result = Pass1().run(source.splitlines())
        for record in result.intermediate:
            print(record)
    """

    def __init__(
        self,
        directory: OpcodeDirectory = DEFAULT_DIRECTORY,
        config: Optional[AssemblerConfig] = None,
    ):
        """
        Initialize the pass.

        Args:
            directory: Opcode directory to classify mnemonics with
            config: Assembler configuration (defaults if None)
        """
        self._config = config or AssemblerConfig()
        self._directory = directory
        self._classifier = LineClassifier(directory, self._config.comment_char)

        self._lc = 0
        self._symbols = SymbolTable()
        self._literals = LiteralPool()
        self._emitter = IntermediateCodeEmitter(directory, self._symbols, self._literals)
        self._errors = ErrorCollector(self._config.max_errors)

        self._ended = False
        self._stopped = False
        self._result: Optional[PassResult] = None

        self._handlers: dict[str, Callable[[SourceLine, OpcodeInfo], Optional[ICRecord]]] = {
            "START": self._do_start,
            "END": self._do_end,
            "ORIGIN": self._do_origin,
            "EQU": self._do_equ,
            "LTORG": self._do_ltorg,
            "DS": self._do_ds,
            "DC": self._do_dc,
        }

    # =========================================================================
    # Public Interface
    # =========================================================================

    @property
    def location_counter(self) -> int:
        """Current value of the location counter."""
        return self._lc

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    @property
    def literals(self) -> LiteralPool:
        return self._literals

    @property
    def errors(self) -> ErrorCollector:
        return self._errors

    def run(
        self,
        lines: Iterable[Union[str, SourceLine]],
        filename: str = "<input>",
    ) -> PassResult:
        """
        Process every line in order and finish the pass.

        Args:
            lines: Raw source lines or already classified SourceLines
            filename: Source name for diagnostics (raw lines only)

        Returns:
            PassResult with the final tables
        """
        for number, line in enumerate(lines, start=1):
            if self._stopped:
                break
            if isinstance(line, SourceLine):
                self.process(line)
            else:
                self.process_line(line, number, filename)
        return self.finish()

    def process_line(
        self,
        text: str,
        line_number: int = 0,
        filename: str = "<input>",
    ) -> Optional[ICRecord]:
        """
        Classify and process one raw line.

        Returns:
            The emitted record, or None for blank, skipped or erroneous lines
        """
        line = self._classifier.classify(text, line_number, filename)
        if line is None:
            return None
        return self.process(line)

    def process(self, line: SourceLine) -> Optional[ICRecord]:
        """
        Process one classified line, reporting any error it raises.

        Returns:
            The emitted record, or None if the line was skipped
        """
        if self._stopped:
            return None

        try:
            return self._dispatch(line)
        except AssemblerError as e:
            field = "operand1" if line.operand1 is not None else "mnemonic"
            self._report(e.with_context(line.location_of(field), line.text))
            return None

    def finish(self) -> PassResult:
        """
        End the pass and return the final tables.

        Flushes the open literal pool when no END was seen (unless the
        configuration says otherwise). Calling finish() again returns the
        same result.
        """
        if self._result is not None:
            return self._result

        if not self._ended:
            self._errors.add_warning("program has no END directive")
            if self._config.flush_on_missing_end:
                self._lc = self._literals.flush_final_pool(self._lc)

        unresolved = self._symbols.unresolved()
        if unresolved:
            logger.info(f"Unresolved symbols left for pass 2: {', '.join(unresolved)}")

        logger.info(
            f"Pass 1 complete: {len(self._symbols)} symbols, "
            f"{len(self._literals)} literals, {len(self._emitter)} records, "
            f"{self._errors.error_count()} errors"
        )

        self._result = PassResult(
            symbols=self._symbols.snapshot(),
            literals=self._literals.literals(),
            pools=self._literals.pools(),
            intermediate=self._emitter.records,
            location_counter=self._lc,
            errors=tuple(self._errors.errors),
            warnings=tuple(self._errors.warnings),
            ended=self._ended,
        )
        return self._result

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _dispatch(self, line: SourceLine) -> Optional[ICRecord]:
        if self._ended:
            self._warn(line, "statement after END ignored")
            return None

        info = self._directory.lookup(line.mnemonic)
        if info is None:
            raise UnknownMnemonicError(
                line.mnemonic,
                location=line.location_of("mnemonic"),
                source_line=line.text,
                similar=self._directory.similar_mnemonics(line.mnemonic),
            )

        logger.debug(
            f"{line.location}: LC={self._lc} label={line.label} "
            f"mnemonic={line.mnemonic} operands={line.operands}"
        )

        if info.opcode_class is OpcodeClass.IMPERATIVE:
            if line.extra:
                self._warn(line, f"extra operands ignored: {' '.join(line.extra)}")
            return self._do_instruction(line, info)

        if line.operand2 is not None:
            raise MalformedOperandError(
                f"{info.mnemonic} takes at most one operand, "
                f"got '{' '.join((line.operand1, line.operand2) + line.extra)}'",
                line.location_of("operand2"),
                hint="write expressions without spaces, e.g. L1+5",
            )

        handler = self._handlers.get(info.mnemonic)
        if handler is None:
            raise DirectiveError(
                f"directive '{info.mnemonic}' is not supported",
                location=line.location_of("mnemonic"),
            )
        return handler(line, info)

    def _report(self, error: AssemblerError) -> None:
        logger.debug(f"Reported: {error.message}")
        try:
            self._errors.add(error)
        except TooManyErrors as e:
            self._stopped = True
            self._errors.add_warning(e.message)

    def _warn(self, line: SourceLine, message: str) -> None:
        self._errors.add_warning(f"{line.location}: {message}")

    def _ignore_label(self, line: SourceLine) -> None:
        if line.label is not None and self._config.warn_ignored_labels:
            self._warn(line, f"label '{line.label}' on {line.mnemonic} is ignored")

    # =========================================================================
    # Instructions
    # =========================================================================

    def _do_instruction(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        location = line.location_of("operand1")
        self._emitter.check_operands(line.operands, location)

        if line.label is not None:
            self._symbols.define_or_update(line.label, self._lc)

        record = self._emitter.emit_instruction(
            info, line.operands, location, line.location.line
        )
        self._lc += info.length
        return record

    # =========================================================================
    # Assembler Directives
    # =========================================================================

    def _do_start(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        start = 0
        if line.operand1 is not None:
            start = parse_integer(
                line.operand1, "START address", line.location_of("operand1")
            )
            self._check_address(start, line)

        self._ignore_label(line)
        self._lc = start
        return self._emitter.emit_directive(info, constant_token(start), line.location.line)

    def _do_end(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        self._ignore_label(line)
        self._lc = self._literals.flush_final_pool(self._lc)
        self._ended = True
        return self._emitter.emit_directive(info, None, line.location.line)

    def _do_ltorg(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        self._ignore_label(line)
        self._lc = self._literals.flush_current_pool(self._lc)
        return self._emitter.emit_directive(info, None, line.location.line)

    def _do_origin(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        location = line.location_of("operand1")
        expr = parse_expression(line.operand1, "ORIGIN address", location)
        value = self._symbols.resolve_value(expr, location)
        self._check_address(value, line)

        self._ignore_label(line)
        self._lc = value
        return self._emitter.emit_directive(
            info, self._expression_token(expr, value), line.location.line
        )

    def _do_equ(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        if line.label is None:
            raise MissingLabelError(
                info.mnemonic, line.location_of("mnemonic"), line.text
            )

        location = line.location_of("operand1")
        expr = parse_expression(line.operand1, "EQU value", location)
        value = self._symbols.resolve_value(expr, location)

        self._symbols.define_or_update(line.label, value)
        return self._emitter.emit_directive(
            info, self._expression_token(expr, value), line.location.line
        )

    def _expression_token(self, expr: Expression, value: int) -> ICToken:
        if expr.is_constant:
            return constant_token(value)
        return symbol_token(self._symbols.index_of(expr.symbol), expr.offset)

    def _check_address(self, value: int, line: SourceLine) -> None:
        if value < 0:
            raise MalformedOperandError(
                f"address must not be negative (got {value})",
                line.location_of("operand1"),
            )

    # =========================================================================
    # Declarations
    # =========================================================================

    def _do_ds(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        size = parse_integer(line.operand1, "DS size", line.location_of("operand1"))
        if size < 0:
            raise MalformedOperandError(
                f"DS size must not be negative (got {size})",
                line.location_of("operand1"),
            )

        self._define_storage(line, size)
        record = self._emitter.emit_declaration(info, size, line.location.line)
        self._lc += size
        return record

    def _do_dc(self, line: SourceLine, info: OpcodeInfo) -> ICRecord:
        value = parse_constant(line.operand1, "DC value", line.location_of("operand1"))

        self._define_storage(line, 1)
        record = self._emitter.emit_declaration(info, value, line.location.line)
        self._lc += 1
        return record

    def _define_storage(self, line: SourceLine, length: int) -> None:
        if line.label is None:
            return
        self._symbols.define_or_update(line.label, self._lc)
        self._symbols.set_length(line.label, length)


# =============================================================================
# Convenience Functions
# =============================================================================

def run_pass1(
    source: str,
    filename: str = "<input>",
    directory: OpcodeDirectory = DEFAULT_DIRECTORY,
    config: Optional[AssemblerConfig] = None,
) -> PassResult:
    """
    Convenience function to run pass 1 over a source string.

    Returns:
        PassResult with the final tables
    """
    return Pass1(directory, config).run(source.splitlines(), filename)
