# =============================================================================
# test_pass1.py - Pass 1 Driver Tests
# =============================================================================
# Tests for the pass driver: location counter handling, directive
# semantics, literal pools, forward references, and error recovery.
#
# Test coverage includes:
#   - The reference program (START/MOVER/DS/MOVEM/LTORG/END)
#   - Pool-scoped literal reuse across LTORG
#   - ORIGIN and EQU expressions
#   - Lines that fail: reported, skipped, pass continues
#   - Missing END and statements after END
#   - Error cap
# =============================================================================

import pytest

from pass1asm.assembler.pass1 import Pass1, PassResult, run_pass1
from pass1asm.assembler.literals import Literal, Pool
from pass1asm.assembler.symbols import Symbol
from pass1asm.config import AssemblerConfig
from pass1asm.errors import (
    AssemblySyntaxError,
    MalformedOperandError,
    MissingLabelError,
    UndefinedSymbolError,
    UnknownMnemonicError,
)


def ic(result: PassResult) -> list[str]:
    """Intermediate code of a result as text."""
    return [str(record) for record in result.intermediate]


REFERENCE_PROGRAM = """
        START 100
A       MOVER AREG, B
B       DS    1
        MOVEM AREG, ='1'
        LTORG
        END
"""


# =============================================================================
# Reference Program
# =============================================================================

class TestReferenceProgram:
    """The small program exercising every table."""

    @pytest.fixture
    def result(self):
        return run_pass1(REFERENCE_PROGRAM)

    def test_no_errors(self, result):
        assert not result.has_errors()
        assert result.warnings == ()
        assert result.ended

    def test_symbols(self, result):
        assert result.symbols == (Symbol("A", 100, 0), Symbol("B", 101, 1))

    def test_literals(self, result):
        """The literal follows MOVEM at 102, so LTORG places it at 103."""
        assert result.literals == (Literal("1", 103),)

    def test_pools(self, result):
        assert result.pools == (Pool(0, 1), Pool(1, 0))

    def test_location_counter(self, result):
        assert result.location_counter == 104

    def test_intermediate_code(self, result):
        assert ic(result) == [
            "(AD,01) (C,100)",
            "(IS,04) (R,01) (S,01)",
            "(DL,01) (C,1)",
            "(IS,05) (R,01) (L,00)",
            "(AD,05)",
            "(AD,02)",
        ]

    def test_record_lines(self, result):
        assert [r.line for r in result.intermediate] == [2, 3, 4, 5, 6, 7]

    def test_deterministic(self, result):
        """Running the same program again gives identical tables."""
        assert run_pass1(REFERENCE_PROGRAM) == result


# =============================================================================
# Literal Pools
# =============================================================================

class TestLiteralPools:
    """Test pool scoping across LTORG and END."""

    def test_reuse_within_pool_only(self):
        result = run_pass1("""
            START 200
            MOVER AREG, ='5'
            ADD   AREG, ='5'
            LTORG
            SUB   AREG, ='5'
            END
        """)
        assert ic(result)[1:3] == ["(IS,04) (R,01) (L,00)", "(IS,01) (R,01) (L,00)"]
        assert ic(result)[4] == "(IS,02) (R,01) (L,01)"
        assert result.literals == (Literal("5", 202), Literal("5", 204))
        assert result.pools == (Pool(0, 1), Pool(1, 1))
        assert result.location_counter == 205

    def test_distinct_literals_in_one_pool(self):
        result = run_pass1("""
            START 10
            MOVER AREG, ='1'
            MOVER BREG, ='2'
            MOVER CREG, ='1'
            END
        """)
        assert result.literals == (Literal("1", 13), Literal("2", 14))
        assert result.pools == (Pool(0, 2),)
        assert result.location_counter == 15

    def test_every_literal_gets_an_address(self):
        result = run_pass1("""
            START 0
            MOVER AREG, ='1'
            LTORG
            MOVER AREG, ='2'
            LTORG
            MOVER AREG, ='3'
            END
        """)
        assert all(lit.is_assigned for lit in result.literals)
        assert [lit.address for lit in result.literals] == [1, 3, 5]
        assert result.pools == (Pool(0, 1), Pool(1, 1), Pool(2, 1))

    def test_empty_ltorg(self):
        result = run_pass1("""
            START 50
            LTORG
            STOP
            END
        """)
        assert result.pools == (Pool(0, 0), Pool(0, 0))
        assert result.location_counter == 51


# =============================================================================
# Symbols and Forward References
# =============================================================================

class TestSymbols:
    """Test symbol definition, forward references and DS/DC."""

    def test_forward_reference_keeps_index(self):
        result = run_pass1("""
            START 100
            MOVER AREG, X
            MOVEM BREG, Y
        X   DS 2
        Y   DC '7'
            END
        """)
        assert result.symbols == (Symbol("X", 102, 2), Symbol("Y", 104, 1))
        assert ic(result)[1:5] == [
            "(IS,04) (R,01) (S,00)",
            "(IS,05) (R,02) (S,01)",
            "(DL,01) (C,2)",
            "(DL,02) (C,7)",
        ]
        assert result.location_counter == 105

    def test_unresolved_reference_stays_unknown(self):
        result = run_pass1("""
            START 100
            MOVER AREG, NOWHERE
            END
        """)
        assert result.symbol("NOWHERE").address is None
        assert not result.has_errors()

    def test_label_names_line_start(self):
        result = run_pass1("""
            START 300
        L1  STOP
        L2  DS 4
        L3  STOP
            END
        """)
        assert result.symbol_addresses() == {"L1": 300, "L2": 301, "L3": 305}

    def test_branch_with_condition(self):
        result = run_pass1("""
            START 100
        LOOP READ N
            BC ANY, LOOP
        N   DS 1
            END
        """)
        assert ic(result)[2] == "(IS,07) (CC,06) (S,00)"
        assert result.symbol_index("N") == 1

    def test_start_without_operand(self):
        result = run_pass1("START\nSTOP\nEND")
        assert ic(result)[0] == "(AD,01) (C,0)"
        assert result.location_counter == 1

    def test_location_counter_never_decreases(self):
        """Without ORIGIN, LC only moves forward."""
        pass1 = Pass1()
        values = []
        for number, text in enumerate(REFERENCE_PROGRAM.splitlines(), start=1):
            pass1.process_line(text, number)
            values.append(pass1.location_counter)
        assert values == sorted(values)


# =============================================================================
# ORIGIN and EQU
# =============================================================================

class TestOriginEqu:
    """Test directives that evaluate expressions immediately."""

    def test_origin_expressions(self):
        result = run_pass1("""
            START 100
        L1  MOVER AREG, ='5'
            ORIGIN L1+5
        L2  ADD AREG, X
            ORIGIN L2-2
        X   DS 1
            END
        """)
        assert ic(result)[2] == "(AD,03) (S,00)+5"
        assert ic(result)[4] == "(AD,03) (S,01)-2"
        assert result.symbol_addresses() == {"L1": 100, "L2": 105, "X": 103}
        assert result.literals == (Literal("5", 104),)
        assert result.location_counter == 105

    def test_origin_constant(self):
        result = run_pass1("START 100\nORIGIN 500\nA STOP\nEND")
        assert ic(result)[1] == "(AD,03) (C,500)"
        assert result.symbol("A").address == 500

    def test_equ(self):
        result = run_pass1("""
            START 100
        A   DS 1
        B   EQU A+3
        C   EQU 50
            END
        """)
        assert result.symbol_addresses() == {"A": 100, "B": 103, "C": 50}
        assert ic(result)[2:4] == ["(AD,04) (S,00)+3", "(AD,04) (C,50)"]
        assert result.location_counter == 101

    def test_equ_resolves_forward_reference(self):
        result = run_pass1("""
            START 100
            MOVER AREG, K
        K   EQU 7
            END
        """)
        assert result.symbol("K") == Symbol("K", 7, 0)
        assert ic(result)[1] == "(IS,04) (R,01) (S,00)"

    def test_equ_on_forward_reference_is_error(self):
        """EQU needs a value now; an unresolved symbol is not zero."""
        result = run_pass1("""
            START 100
            MOVER AREG, LATER
        K   EQU LATER
        LATER DS 1
            END
        """)
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, UndefinedSymbolError)
        assert error.forward
        assert error.location.line == 4
        assert "K" not in result.symbol_addresses()

    def test_equ_undefined_symbol(self):
        result = run_pass1("START 0\nK EQU NOPE\nEND")
        assert isinstance(result.errors[0], UndefinedSymbolError)
        assert result.symbol("NOPE") is None
        assert len(result.intermediate) == 2

    def test_equ_without_label(self):
        result = run_pass1("START 0\nEQU 5\nEND")
        assert isinstance(result.errors[0], MissingLabelError)

    def test_origin_undefined_symbol(self):
        result = run_pass1("""
            START 100
            ORIGIN NOPE+1
            STOP
            END
        """)
        assert isinstance(result.errors[0], UndefinedSymbolError)
        assert result.location_counter == 101

    def test_origin_negative(self):
        result = run_pass1("START 0\nA STOP\nORIGIN A-5\nEND")
        assert isinstance(result.errors[0], MalformedOperandError)

    def test_origin_bare_symbol(self):
        """ORIGIN SYM moves LC back to exactly SYM's address."""
        result = run_pass1("""
            START 100
        L1  STOP
            STOP
            ORIGIN L1
        L2  STOP
            END
        """)
        assert not result.has_errors()
        assert ic(result)[3] == "(AD,03) (S,00)"
        assert result.symbol_addresses() == {"L1": 100, "L2": 100}
        assert result.location_counter == 101

    def test_equ_bare_symbol(self):
        result = run_pass1("""
            START 100
            STOP
        A   DS 2
        B   EQU A
            END
        """)
        assert ic(result)[3] == "(AD,04) (S,00)"
        assert result.symbol("B") == Symbol("B", 101, 0)
        assert result.location_counter == 103

    def test_origin_with_spaced_expression(self):
        """A spaced expression is an error, never a silent ORIGIN L1."""
        result = run_pass1("START 100\nL1 STOP\nORIGIN L1 + 5\nL2 STOP\nEND")
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, MalformedOperandError)
        assert "at most one operand" in error.message
        assert error.location.line == 3
        assert result.symbol_addresses() == {"L1": 100, "L2": 101}
        assert len(result.intermediate) == 4

    @pytest.mark.parametrize("line", [
        "X DS 1 2", "X DC 5 6", "X EQU 5 6", "START 100 200", "LTORG 1 2",
    ])
    def test_directive_second_operand(self, line):
        """Directives and declarations reject a second operand."""
        result = run_pass1(f"START 0\n{line}\nEND")
        assert isinstance(result.errors[0], MalformedOperandError)
        assert result.errors[0].location.line == 2
        assert result.symbol("X") is None


# =============================================================================
# Error Recovery
# =============================================================================

class TestErrorRecovery:
    """A failing line is reported and skipped; the pass carries on."""

    def test_unknown_mnemonic(self):
        result = run_pass1("""
            START 100
            MOVR AREG, X
            MOVER AREG, Y
            END
        """)
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, UnknownMnemonicError)
        assert error.mnemonic == "MOVR"
        assert "MOVER" in error.similar
        assert error.location.line == 3
        assert result.symbol("X") is None
        assert result.symbol_index("Y") == 0
        assert len(result.intermediate) == 3
        assert result.location_counter == 101

    def test_malformed_literal_skips_line(self):
        result = run_pass1("""
            START 100
        L   MOVER AREG, =5
            STOP
            END
        """)
        assert isinstance(result.errors[0], AssemblySyntaxError)
        assert result.symbol("L") is None
        assert result.literals == ()
        assert result.location_counter == 101

    @pytest.mark.parametrize("line", [
        "START ABC", "X DS -1", "X DS", "X DC 'A'", "START 1_000", "X DS +5",
    ])
    def test_malformed_operand(self, line):
        result = run_pass1(f"{line}\nEND")
        assert isinstance(result.errors[0], MalformedOperandError)
        assert result.symbol("X") is None

    def test_errors_collected_in_order(self):
        result = run_pass1("""
            START 0
            FOO
            BAR AREG, X
        K   EQU MISSING
            END
        """)
        assert [e.location.line for e in result.errors] == [3, 4, 5]
        assert ic(result) == ["(AD,01) (C,0)", "(AD,02)"]

    def test_error_cap_stops_pass(self):
        config = AssemblerConfig(max_errors=2)
        result = run_pass1("START 0\nFOO\nBAR\nBAZ\nEND", config=config)
        assert len(result.errors) == 2
        assert any("Too many errors" in w for w in result.warnings)
        assert not result.ended

    def test_extra_operands_warn(self):
        result = run_pass1("START 0\nADD AREG, X Y\nEND")
        assert not result.has_errors()
        assert any("extra operands" in w for w in result.warnings)


# =============================================================================
# Program Boundaries
# =============================================================================

class TestProgramEnd:
    """Test END handling."""

    def test_missing_end_flushes_pool(self):
        result = run_pass1("START 100\nMOVER AREG, ='5'")
        assert not result.ended
        assert any("no END" in w for w in result.warnings)
        assert result.literals == (Literal("5", 101),)
        assert result.location_counter == 102

    def test_missing_end_without_flush(self):
        config = AssemblerConfig(flush_on_missing_end=False)
        result = run_pass1("START 100\nMOVER AREG, ='5'", config=config)
        assert result.literals == (Literal("5", None),)
        assert result.location_counter == 101

    def test_statements_after_end_ignored(self):
        result = run_pass1("START 100\nEND\nMOVER AREG, X")
        assert result.symbol("X") is None
        assert len(result.intermediate) == 2
        assert any("after END" in w for w in result.warnings)

    def test_label_on_directive_ignored(self):
        result = run_pass1("P START 100\nQ LTORG\nEND")
        assert result.symbols == ()
        assert sum("is ignored" in w for w in result.warnings) == 2

    def test_ignored_label_warning_can_be_disabled(self):
        config = AssemblerConfig(warn_ignored_labels=False)
        result = run_pass1("P START 100\nEND", config=config)
        assert result.warnings == ()

    def test_finish_is_idempotent(self):
        pass1 = Pass1()
        pass1.process_line("START 5", 1)
        assert pass1.finish() is pass1.finish()

    def test_independent_instances(self):
        """Two passes share no state."""
        first = Pass1().run(["START 0", "A STOP", "END"])
        second = Pass1().run(["START 0", "END"])
        assert first.symbols == (Symbol("A", 0, 0),)
        assert second.symbols == ()
