"""Output formatters for package-curator."""

from package_curator.output.query_json import QueryJsonFormatter
from package_curator.output.terminal import TerminalFormatter

__all__ = [
    "QueryJsonFormatter",
    "TerminalFormatter",
]
