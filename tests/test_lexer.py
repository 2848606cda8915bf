# =============================================================================
# test_lexer.py - Line Classifier Tests
# =============================================================================
# Tests for splitting source lines into label, mnemonic and operands.
#
# Test coverage includes:
#   - Label detection
#   - Operand separators (", ", ",", " , ")
#   - Comments, including comment characters inside literals
#   - Column tracking for diagnostics
# =============================================================================

import pytest

from pass1asm.assembler.lexer import LineClassifier, SourceLine, classify_line


@pytest.fixture
def classifier():
    return LineClassifier()


# =============================================================================
# Field Splitting
# =============================================================================

class TestFields:
    """Test label/mnemonic/operand recognition."""

    def test_labelled_instruction(self, classifier):
        """A non-mnemonic first field is a label."""
        line = classifier.classify("A MOVER AREG, B")
        assert line.label == "A"
        assert line.mnemonic == "MOVER"
        assert line.operand1 == "AREG"
        assert line.operand2 == "B"

    def test_unlabelled_instruction(self, classifier):
        """A mnemonic in the first field means no label."""
        line = classifier.classify("        MOVEM AREG, ='1'")
        assert line.label is None
        assert line.mnemonic == "MOVEM"
        assert line.operands == ("AREG", "='1'")

    def test_directive_with_operand(self, classifier):
        line = classifier.classify("START 100")
        assert line.mnemonic == "START"
        assert line.operand1 == "100"
        assert line.operand2 is None

    def test_bare_directive(self, classifier):
        line = classifier.classify("    END")
        assert line.mnemonic == "END"
        assert line.operands == ()

    def test_single_unknown_field_is_mnemonic(self, classifier):
        """A lone field is always the mnemonic, even when unknown."""
        line = classifier.classify("LOOP")
        assert line.label is None
        assert line.mnemonic == "LOOP"

    def test_misspelt_mnemonic_before_register(self, classifier):
        """A register in the second field marks the first as the mnemonic."""
        line = classifier.classify("MOVR AREG, X")
        assert line.label is None
        assert line.mnemonic == "MOVR"
        assert line.operands == ("AREG", "X")

    def test_label_on_misspelt_mnemonic(self, classifier):
        line = classifier.classify("LOOP MOVR AREG, X")
        assert line.label == "LOOP"
        assert line.mnemonic == "MOVR"

    def test_compact_operands(self, classifier):
        """Operands written without a space after the comma are split."""
        line = classifier.classify("MOVER AREG,X")
        assert line.operands == ("AREG", "X")

    def test_compact_literal_not_split(self, classifier):
        """A literal whose value contains a comma stays whole."""
        line = classifier.classify("DC =','")
        assert line.operand1 == "=','"

    def test_standalone_comma(self, classifier):
        """A comma surrounded by spaces separates the operands."""
        line = classifier.classify("ADD BREG , Y")
        assert line.operands == ("BREG", "Y")

    def test_extra_operands(self, classifier):
        """Fields after the second operand are kept as extras."""
        line = classifier.classify("ADD AREG, X Y")
        assert line.operands == ("AREG", "X")
        assert line.extra == ("Y",)

    def test_trailing_newline(self, classifier):
        line = classifier.classify("STOP\n")
        assert line.mnemonic == "STOP"
        assert line.text == "STOP"


# =============================================================================
# Comments and Blank Lines
# =============================================================================

class TestComments:
    """Test comment stripping."""

    def test_blank_line(self, classifier):
        assert classifier.classify("") is None
        assert classifier.classify("   \t  ") is None

    def test_comment_only(self, classifier):
        assert classifier.classify("   ; nothing here") is None

    def test_trailing_comment(self, classifier):
        line = classifier.classify("MOVER AREG, X ; load X")
        assert line.operands == ("AREG", "X")
        assert line.extra == ()

    def test_comment_char_inside_literal(self, classifier):
        """A ';' between quotes belongs to the literal."""
        line = classifier.classify("MOVER AREG, =';' ; comment")
        assert line.operand2 == "=';'"

    def test_custom_comment_char(self):
        classifier = LineClassifier(comment_char="#")
        line = classifier.classify("STOP # halt")
        assert line.mnemonic == "STOP"
        assert line.operands == ()


# =============================================================================
# Locations
# =============================================================================

class TestLocations:
    """Test line and column tracking."""

    def test_line_location(self, classifier):
        line = classifier.classify("A MOVER AREG, B", 3, "prog.asm")
        assert line.location.filename == "prog.asm"
        assert line.location.line == 3
        assert line.location.column == 1

    def test_field_columns(self, classifier):
        line = classifier.classify("A MOVER AREG, B", 3)
        assert line.location_of("label").column == 1
        assert line.location_of("mnemonic").column == 3
        assert line.location_of("operand1").column == 9
        assert line.location_of("operand2").column == 15

    def test_missing_field_falls_back_to_line_start(self, classifier):
        line = classifier.classify("    END", 9)
        assert line.location_of("operand1").column == 5

    def test_classify_source(self, classifier):
        """classify_source skips blank lines but keeps line numbers."""
        source = "START 100\n\n; comment\nSTOP\n"
        lines = list(classifier.classify_source(source))
        assert [l.mnemonic for l in lines] == ["START", "STOP"]
        assert [l.location.line for l in lines] == [1, 4]

    def test_classify_line_function(self):
        line = classify_line("X DS 2", 7)
        assert isinstance(line, SourceLine)
        assert (line.label, line.mnemonic, line.operand1) == ("X", "DS", "2")
        assert line.location.line == 7
