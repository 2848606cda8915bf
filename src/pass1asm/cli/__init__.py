"""
pass1asm Command-Line Interface
===============================

This package provides the command-line tool for pass1asm:

- **p1asm**: Pass 1 assembler

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["p1asm"]
