"""pgbridge - query construction and result materialization for PostgreSQL."""

from pgbridge.__about__ import __version__

__all__ = ["__version__"]
