"""Exception hierarchy for pgbridge.

All exceptions carry an exit_code for CLI return value mapping.
Errors raised after a failed database round trip carry the client's
diagnostic text in their message; structural errors do not.
"""

from pgbridge.core.exit_codes import ExitCode


class PgBridgeError(Exception):
    """Base exception for all pgbridge errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConnectionFailed(PgBridgeError):
    """The database client could not establish a connection."""

    exit_code: int = ExitCode.NETWORK_ERROR


class QueryFailed(PgBridgeError):
    """Generic command execution failure."""

    exit_code: int = ExitCode.QUERY_ERROR


class InsertionFailed(PgBridgeError):
    """INSERT failed for a reason other than a uniqueness violation."""

    exit_code: int = ExitCode.QUERY_ERROR


class PrimaryKeyDuplicate(PgBridgeError):
    """INSERT rejected by a unique constraint.

    Deliberately not a subclass of InsertionFailed: callers usually treat
    it as an expected outcome and retry with a different key.
    """

    exit_code: int = ExitCode.CONFLICT

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Duplicate key on insert into {table}")


class SelectJoinFailed(PgBridgeError):
    """INNER JOIN query failed."""

    exit_code: int = ExitCode.QUERY_ERROR


class NotAStruct(PgBridgeError):
    """Schema mapping was asked to map something that is not a record type."""

    exit_code: int = ExitCode.INPUT_ERROR

    def __init__(self, obj: object) -> None:
        self.obj = obj
        super().__init__(f"Not a structured type: {obj!r}")


class UnsupportedValueError(PgBridgeError):
    """A parameter value has no SQL literal form (strict serialization)."""

    exit_code: int = ExitCode.INPUT_ERROR

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unsupported parameter type: {type(value).__name__}")


class ResultReleasedError(PgBridgeError):
    """A ResultTable was used or released after it had been released."""


class InputError(PgBridgeError):
    """File not found, invalid parameters."""

    exit_code: int = ExitCode.INPUT_ERROR


class ConfigError(PgBridgeError):
    """Malformed config, missing profile."""

    exit_code: int = ExitCode.CONFIG_ERROR
