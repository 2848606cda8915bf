"""
p1asm - Pass 1 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the pass 1
assembler. It runs the pass on a source file, writes the intermediate
code, and prints the symbol, literal and pool tables.

Usage Examples
--------------
Basic run (writes prog.ic and prints the tables):
    $ p1asm prog.asm

With output file:
    $ p1asm prog.asm -o out.ic

Generate all output files:
    $ p1asm prog.asm -o prog.ic -l prog.lst -s prog.sym

Verbose mode (per-line trace):
    $ p1asm -v prog.asm
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from pass1asm import __version__
from pass1asm.config import AssemblerConfig
from pass1asm.assembler import Assembler
from pass1asm.assembler.listing import (
    format_intermediate_code,
    format_literal_table,
    format_pool_table,
    format_symbol_table,
)
from pass1asm.cli.errors import ExitCode, handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Intermediate code file (default: input.ic)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=None,
    help="Stop the pass after this many errors (default: no limit)",
)
@click.option(
    "--flush-on-missing-end/--no-flush-on-missing-end",
    default=None,
    help="Place pending literals when the program has no END. Default: enabled.",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the tables",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="p1asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    max_errors: Optional[int],
    flush_on_missing_end: Optional[bool],
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Run pass 1 of the assembler on a source file.

    INPUT_FILE is the assembly source file (.asm) to process.

    The intermediate code is written one record per line; the symbol,
    literal and pool tables are printed to standard output.

    \b
    Examples:
        p1asm prog.asm               # Writes prog.ic
        p1asm prog.asm -o out.ic     # Specify output file
        p1asm prog.asm -l prog.lst   # Also write a listing
    """
    setup_logging(verbose)

    try:
        config = AssemblerConfig.from_env()
        if max_errors is not None:
            config.max_errors = max_errors
        if flush_on_missing_end is not None:
            config.flush_on_missing_end = flush_on_missing_end

        output_file = (
            output if output is not None
            else input_file.with_suffix(config.intermediate_suffix)
        )

        asm = Assembler(config=config)

        if verbose:
            click.echo(f"Assembling {input_file}...")

        result = asm.assemble_file(input_file)

        asm.write_intermediate(output_file)
        if verbose:
            click.echo(f"Wrote {len(result.intermediate)} records to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if not quiet:
            click.echo("----- INTERMEDIATE CODE -----")
            click.echo(format_intermediate_code(result.intermediate))
            click.echo()
            click.echo(format_symbol_table(result.symbols))
            click.echo()
            click.echo(format_literal_table(result.literals))
            click.echo()
            click.echo(format_pool_table(result.pools))
            click.echo()
            click.echo(f"Final location counter: {result.location_counter}")

        if result.errors or result.warnings:
            click.echo(asm.get_error_report(), err=True)

        if result.has_errors():
            sys.exit(ExitCode.BUILD_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
