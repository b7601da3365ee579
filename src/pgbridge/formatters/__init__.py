"""Output formatters for pgbridge."""

from pgbridge.formatters.base import Formatter, FormatterRegistry, registry
from pgbridge.formatters.csv import CSVFormatter
from pgbridge.formatters.json import JSONFormatter
from pgbridge.formatters.table import TableFormatter

__all__ = [
    "CSVFormatter",
    "Formatter",
    "FormatterRegistry",
    "JSONFormatter",
    "TableFormatter",
    "registry",
]
