"""
Table and Intermediate Code Reports
===================================

Text renderings of a PassResult, used by the Assembler output methods and
the p1asm command line tool. Unresolved symbol addresses and unassigned
literal addresses print as ``-``.

Example
-------
    ----- SYMBOL TABLE -----
    #   Symbol      Address  Length
    0   A           100      0
    1   B           101      1
"""

from typing import Iterable, Optional

from pass1asm.assembler.symbols import Symbol
from pass1asm.assembler.literals import Literal, Pool
from pass1asm.assembler.intermediate import ICRecord
from pass1asm.assembler.pass1 import PassResult


UNKNOWN_ADDRESS = "-"


def format_address(address: Optional[int]) -> str:
    """Format an address, or '-' if it is not known yet."""
    return UNKNOWN_ADDRESS if address is None else str(address)


def _section(title: str, header: str, rows: list[str]) -> str:
    lines = [f"----- {title} -----", header, "-" * len(header)]
    lines.extend(rows)
    return "\n".join(lines)


def format_symbol_table(symbols: Iterable[Symbol]) -> str:
    """Render the symbol table: index, name, address, length."""
    rows = [
        f"{i:<3d} {sym.name:<11s} {format_address(sym.address):<8s} {sym.length}"
        for i, sym in enumerate(symbols)
    ]
    return _section("SYMBOL TABLE", f"{'#':<3s} {'Symbol':<11s} {'Address':<8s} Length", rows)


def format_literal_table(literals: Iterable[Literal]) -> str:
    """Render the literal table: index, value, address."""
    rows = [
        f"{i:<3d} {lit.value!r:<11s} {format_address(lit.address)}"
        for i, lit in enumerate(literals)
    ]
    return _section("LITERAL TABLE", f"{'#':<3s} {'Literal':<11s} Address", rows)


def format_pool_table(pools: Iterable[Pool]) -> str:
    """Render the pool table: pool number, first literal index, count."""
    rows = [
        f"{i:<3d} {pool.start:<12d} {pool.count}"
        for i, pool in enumerate(pools)
    ]
    return _section("POOL TABLE", f"{'#':<3s} {'Start Index':<12s} Literals", rows)


def format_intermediate_code(records: Iterable[ICRecord]) -> str:
    """Render intermediate code, one record per line."""
    return "\n".join(str(record) for record in records)


def format_listing(result: PassResult, title: str = "Pass 1 Listing") -> str:
    """
    Render the full pass 1 report.

    Sections: intermediate code (with source line numbers), symbol table,
    literal table, pool table, and the final location counter.
    """
    lines = [title, "=" * 60, ""]

    lines.append("----- INTERMEDIATE CODE -----")
    lines.append(f"{'Line':<6s} Record")
    lines.append("-" * 30)
    for record in result.intermediate:
        lines.append(f"{record.line:<6d} {record}")
    lines.append("")

    lines.append(format_symbol_table(result.symbols))
    lines.append("")
    lines.append(format_literal_table(result.literals))
    lines.append("")
    lines.append(format_pool_table(result.pools))
    lines.append("")
    lines.append(f"Final location counter: {result.location_counter}")

    return "\n".join(lines)
