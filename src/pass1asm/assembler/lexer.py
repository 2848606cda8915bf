"""
Line Classifier
===============

This module splits raw assembly source lines into their fields:
an optional label, the mnemonic, and up to two operands.

Line Format
-----------
    [label]  mnemonic  [operand1[,]  [operand2]]   [; comment]

Fields are separated by whitespace. A leading token is a label when it is
not a known mnemonic and another token follows it that is not a register
or condition code:

    LOOP  MOVER AREG, ='5'     label=LOOP  mnemonic=MOVER
          MOVEM AREG, X        label=None  mnemonic=MOVEM
          STOP                 label=None  mnemonic=STOP

A trailing comma is removed from the first operand. Operands written
without a space after the comma (``AREG,X``) are split the same way.

Comments
--------
Text from the comment character (``;`` by default) to the end of the line
is ignored, unless the character appears inside a quoted literal such as
``=';'``. Blank and comment-only lines produce no SourceLine.

Example
-------
>>> from pass1asm.assembler.lexer import LineClassifier
>>> classifier = LineClassifier()
>>> line = classifier.classify("A MOVER AREG, B", 2)
>>> line.label, line.mnemonic, line.operand1, line.operand2
('A', 'MOVER', 'AREG', 'B')
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import re

from pass1asm.errors import SourceLocation
from pass1asm.assembler.opcodes import OpcodeDirectory, DEFAULT_DIRECTORY


_FIELD_RE = re.compile(r"\S+")


# =============================================================================
# Classified Line
# =============================================================================

@dataclass(frozen=True)
class SourceLine:
    """
    One classified source line.

    Attributes:
        mnemonic: The instruction or directive mnemonic (not yet validated)
        label: Label field, if present
        operand1: First operand with any trailing comma removed
        operand2: Second operand
        location: Where the line starts (column of the first field)
        text: The source line as written, without its newline
        extra: Fields found after the second operand
        columns: Column of each present field, keyed by field name
    """
    mnemonic: str
    label: Optional[str] = None
    operand1: Optional[str] = None
    operand2: Optional[str] = None
    location: SourceLocation = field(
        default_factory=lambda: SourceLocation("<input>", 0, 0)
    )
    text: str = ""
    extra: tuple[str, ...] = ()
    columns: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def operands(self) -> tuple[str, ...]:
        """Present operands, in order."""
        return tuple(op for op in (self.operand1, self.operand2) if op is not None)

    def location_of(self, field_name: str) -> SourceLocation:
        """Location of a named field ('label', 'mnemonic', 'operand1', ...)."""
        column = self.columns.get(field_name, self.location.column)
        return SourceLocation(self.location.filename, self.location.line, column)


# =============================================================================
# Line Classifier
# =============================================================================

class LineClassifier:
    """
    Splits raw lines into label, mnemonic and operands.

    The classifier consults the opcode directory only to decide whether the
    first field is a label; it does not reject unknown mnemonics. That is
    the pass driver's job, so that the error is reported with the rest.
    """

    def __init__(
        self,
        directory: OpcodeDirectory = DEFAULT_DIRECTORY,
        comment_char: str = ";",
    ):
        self._directory = directory
        self._comment_char = comment_char

    def classify(
        self,
        text: str,
        line_number: int = 0,
        filename: str = "<input>",
    ) -> Optional[SourceLine]:
        """
        Classify one raw line.

        Args:
            text: The raw line (a trailing newline is ignored)
            line_number: 1-based line number for diagnostics
            filename: Source name for diagnostics

        Returns:
            SourceLine, or None for blank and comment-only lines
        """
        text = text.rstrip("\r\n")
        code = self._strip_comment(text)

        fields = [(m.group(), m.start() + 1) for m in _FIELD_RE.finditer(code)]
        # A comma written on its own ("AREG , X") separates nothing new
        fields = [(value, col) for value, col in fields if value != ","]
        if not fields:
            return None

        columns: dict[str, int] = {}
        label = None
        first, first_col = fields[0]
        if self._starts_with_label(fields):
            label = first
            columns["label"] = first_col
            fields = fields[1:]

        mnemonic, columns["mnemonic"] = fields[0]
        operand_fields = self._split_compact_operands(fields[1:])

        operand1 = operand2 = None
        if operand_fields:
            value, columns["operand1"] = operand_fields[0]
            operand1 = value[:-1] if value.endswith(",") and len(value) > 1 else value
        if len(operand_fields) > 1:
            operand2, columns["operand2"] = operand_fields[1]
        extra = tuple(value for value, _ in operand_fields[2:])

        return SourceLine(
            mnemonic=mnemonic,
            label=label,
            operand1=operand1,
            operand2=operand2,
            location=SourceLocation(filename, line_number, first_col),
            text=text,
            extra=extra,
            columns=columns,
        )

    def classify_source(
        self,
        source: str,
        filename: str = "<input>",
    ) -> Iterator[SourceLine]:
        """Classify every non-blank line of a source text, in order."""
        for number, text in enumerate(source.splitlines(), start=1):
            line = self.classify(text, number, filename)
            if line is not None:
                yield line

    # =========================================================================
    # Helpers
    # =========================================================================

    def _starts_with_label(self, fields: list[tuple[str, int]]) -> bool:
        """
        Decide whether the first field is a label.

        It is not a label when it is a known mnemonic, when it is the only
        field, or when the next field is a register or condition code
        (``MOVR AREG, X`` is a misspelt mnemonic, not a label).
        """
        if len(fields) < 2 or self._directory.is_mnemonic(fields[0][0]):
            return False
        second = fields[1][0].split(",", 1)[0]
        return (
            self._directory.register_code(second) is None
            and self._directory.condition_code(second) is None
        )

    def _strip_comment(self, text: str) -> str:
        """Remove a trailing comment that is not inside quotes."""
        in_quote = False
        for index, char in enumerate(text):
            if char == "'":
                in_quote = not in_quote
            elif char == self._comment_char and not in_quote:
                return text[:index]
        return text

    @staticmethod
    def _split_compact_operands(
        fields: list[tuple[str, int]],
    ) -> list[tuple[str, int]]:
        """Split a first operand written as 'AREG,X' into two fields."""
        if len(fields) != 1:
            return fields

        value, col = fields[0]
        if value.startswith("="):
            return fields
        head, sep, tail = value.partition(",")
        if not sep or not head or not tail:
            return fields
        return [(head, col), (tail, col + len(head) + 1)]


def classify_line(
    text: str,
    line_number: int = 0,
    filename: str = "<input>",
    directory: OpcodeDirectory = DEFAULT_DIRECTORY,
) -> Optional[SourceLine]:
    """
    Convenience function to classify a single line.

    Returns:
        SourceLine, or None for a blank line
    """
    return LineClassifier(directory).classify(text, line_number, filename)
