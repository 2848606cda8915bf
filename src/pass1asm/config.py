"""
Pass 1 Assembler - Configuration
================================

Assembler configuration: error limits, end-of-program handling, warning
switches and the intermediate file suffix. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line options (applied by the p1asm CLI on top of the above)
"""

from dataclasses import dataclass
from typing import Optional
import os


# Environment variable names
ENV_MAX_ERRORS = "PASS1ASM_MAX_ERRORS"
ENV_FLUSH_ON_MISSING_END = "PASS1ASM_FLUSH_ON_MISSING_END"
ENV_WARN_IGNORED_LABELS = "PASS1ASM_WARN_IGNORED_LABELS"
ENV_COMMENT_CHAR = "PASS1ASM_COMMENT_CHAR"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembler run.

    Attributes:
        max_errors: Stop the pass after this many errors (None: never stop)
        flush_on_missing_end: Assign addresses to the open literal pool when
                              the input ends without an END directive
        warn_ignored_labels: Warn when a label is written on START, ORIGIN,
                             LTORG or END (such labels are not defined)
        comment_char: Character that starts a trailing comment
        intermediate_suffix: Suffix of the default intermediate code file
    """

    max_errors: Optional[int] = None
    flush_on_missing_end: bool = True
    warn_ignored_labels: bool = True
    comment_char: str = ";"
    intermediate_suffix: str = ".ic"

    def __post_init__(self) -> None:
        if self.max_errors is not None and self.max_errors < 1:
            raise ValueError("max_errors must be at least 1")
        if len(self.comment_char) != 1:
            raise ValueError("comment_char must be a single character")

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            PASS1ASM_MAX_ERRORS: Error cap (positive integer)
            PASS1ASM_FLUSH_ON_MISSING_END: Boolean (1/0, true/false, yes/no)
            PASS1ASM_WARN_IGNORED_LABELS: Boolean
            PASS1ASM_COMMENT_CHAR: Single character

        Raises:
            ValueError: If a variable holds an invalid value
        """
        config = cls()

        raw_max = os.environ.get(ENV_MAX_ERRORS)
        if raw_max:
            try:
                config.max_errors = int(raw_max)
            except ValueError:
                raise ValueError(
                    f"{ENV_MAX_ERRORS} must be an integer (got {raw_max!r})"
                ) from None

        config.flush_on_missing_end = _env_bool(
            ENV_FLUSH_ON_MISSING_END, config.flush_on_missing_end
        )
        config.warn_ignored_labels = _env_bool(
            ENV_WARN_IGNORED_LABELS, config.warn_ignored_labels
        )

        comment = os.environ.get(ENV_COMMENT_CHAR)
        if comment:
            config.comment_char = comment

        # Re-run validation on the merged values
        config.__post_init__()
        return config
