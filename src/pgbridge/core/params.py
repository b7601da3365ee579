"""Parameter serialization for SQL VALUES lists.

Turns application values into SQL literal fragments and joins them with
", " so the result can be dropped into ``INSERT ... VALUES (...)``.

Only values are escaped here. Table and column names are never escaped
anywhere in pgbridge; callers must not build identifiers from untrusted
input.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pgbridge.core.exceptions import UnsupportedValueError
from pgbridge.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable


class ParamKind(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class ParamValue:
    """A value already classified into one of the literal kinds."""

    kind: ParamKind
    value: int | float | Decimal | str


def quote_literal(text: str) -> str:
    """Wrap text in single quotes, doubling embedded quotes.

    Nothing else is escaped: this defends against closing the literal
    early, it is not a general sanitizer.
    """
    return "'" + text.replace("'", "''") + "'"


def _checked(param: ParamValue) -> ParamValue | None:
    """Re-validate a pre-classified value against its declared kind.

    An integer may be declared FLOAT; any other mismatch is unsupported.
    """
    inner = normalize(param.value)
    if inner is None:
        return None
    if inner.kind == param.kind:
        return inner
    if param.kind == ParamKind.FLOAT and inner.kind == ParamKind.INTEGER:
        return ParamValue(ParamKind.FLOAT, Decimal(inner.value))
    return None


def normalize(value: Any) -> ParamValue | None:
    """Classify a Python value, or return None if it has no literal form.

    bool and None are rejected on purpose: neither maps to one of the
    three literal kinds.
    """
    if isinstance(value, ParamValue):
        return _checked(value)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return ParamValue(ParamKind.TEXT, str.__str__(value))
    if isinstance(value, numbers.Integral):
        return ParamValue(ParamKind.INTEGER, int(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return ParamValue(ParamKind.FLOAT, value)
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if not math.isfinite(as_float):
            return None
        return ParamValue(ParamKind.FLOAT, as_float)
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return ParamValue(ParamKind.TEXT, bytes(value).decode("utf-8"))
        except UnicodeDecodeError:
            return None
    return None


def format_value(param: ParamValue) -> str:
    """Render one classified value as a SQL literal."""
    match param.kind:
        case ParamKind.INTEGER:
            return str(int(param.value))
        case ParamKind.FLOAT:
            if isinstance(param.value, Decimal):
                return str(param.value)
            # repr() is the shortest string that round-trips the double
            return repr(float(param.value))
        case ParamKind.TEXT:
            return quote_literal(str(param.value))
    msg = f"Unknown parameter kind: {param.kind!r}"
    raise ValueError(msg)


def serialize(values: Iterable[Any], *, strict: bool = False) -> str:
    """Serialize values into a comma-joined list of SQL literals.

    Unsupported values are logged and skipped unless strict is True, in
    which case UnsupportedValueError is raised and nothing is returned.
    """
    fragments: list[str] = []
    for position, value in enumerate(values):
        param = normalize(value)
        if param is None:
            if strict:
                raise UnsupportedValueError(value)
            log = get_logger("params")
            log.warning(
                "unsupported parameter type",
                type=type(value).__name__,
                position=position,
            )
            continue
        fragments.append(format_value(param))
    return ", ".join(fragments)
