"""Masking of credentials in command lines and process output.

Only the flags listed in REDACTED_FLAGS ever carry a literal secret on the
helm command line. Their values are replaced by MASK, both in the
`--flag value` and in the `--flag=value` spelling. Values passed through
`--set` and friends are chart configuration and are not masked.
"""

import re
import shlex
from collections.abc import Iterable

REDACTED_FLAGS = ("--username", "--password")
MASK = "******"

# A value runs to the next whitespace outside of shell quotes. Quoted parts
# may span lines. A flag glued to a word (`my--password`) is not a flag.
_FLAG_PATTERN = re.compile(
    r"(?<![\w-])("
    + "|".join(re.escape(flag) for flag in REDACTED_FLAGS)
    + r")([ =])(?:'[^']*'|\"[^\"]*\"|\S)*"
)


def redact(text: str) -> str:
    """Replace the values of credential flags with a fixed mask.

    Args:
        text: A command line or captured process output.

    Returns:
        The text with every credential value masked and all other text unchanged.

    """
    return _FLAG_PATTERN.sub(rf"\1\2{MASK}", text)


def redact_command(args: Iterable[str]) -> str:
    """Format an argument list as a shell command line with credentials masked."""
    return redact(shlex.join(args))
