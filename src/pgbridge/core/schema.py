"""Record type to CREATE TABLE mapping.

Column types come from a TypePolicy that maps each field kind to one
concrete SQL type. The default widths are crude on purpose (one width for
every text column, one precision for every numeric column); override them
through the ``column_types`` config table rather than per field.

Identifiers are emitted verbatim, never quoted or escaped.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from pgbridge.core.exceptions import NotAStruct

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class FieldKind(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"


class FieldDescriptor(BaseModel):
    """One column of a record type: its name and semantic kind."""

    name: str
    kind: FieldKind = FieldKind.TEXT


DEFAULT_COLUMN_TYPES: dict[FieldKind, str] = {
    FieldKind.INTEGER: "INTEGER",
    FieldKind.FLOAT: "NUMERIC(255)",
    FieldKind.TEXT: "VARCHAR(255)",
}


class TypePolicy:
    """Maps field kinds to SQL column types."""

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._types = dict(DEFAULT_COLUMN_TYPES)
        for kind, sql_type in (overrides or {}).items():
            self._types[FieldKind(kind)] = sql_type

    def sql_type(self, kind: FieldKind | str) -> str:
        try:
            return self._types[FieldKind(kind)]
        except ValueError:
            return self._types[FieldKind.TEXT]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TypePolicy) and self._types == other._types

    def __repr__(self) -> str:
        mapping = ", ".join(f"{k.value}={v!r}" for k, v in self._types.items())
        return f"TypePolicy({mapping})"


DEFAULT_POLICY = TypePolicy()


def strip_module_name(type_name: str) -> str:
    """Return the last dotted segment of a qualified type name."""
    return type_name.rsplit(".", 1)[-1]


def generate_create_table(
    type_name: str,
    fields: Iterable[FieldDescriptor],
    policy: TypePolicy | None = None,
) -> str:
    """Build ``CREATE TABLE IF NOT EXISTS`` DDL for the given columns."""
    policy = policy or DEFAULT_POLICY
    columns = ", ".join(f"{f.name} {policy.sql_type(f.kind)}" for f in fields)
    return f"CREATE TABLE IF NOT EXISTS {type_name} ({columns});"


def kind_for_annotation(annotation: Any) -> FieldKind:
    """Map a type annotation to a field kind.

    ``Optional[X]`` maps as ``X``. bool is not an integer here.
    """
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return kind_for_annotation(args[0])
        return FieldKind.TEXT

    if origin is not None or not isinstance(annotation, type):
        return FieldKind.TEXT
    if issubclass(annotation, bool):
        return FieldKind.TEXT
    if issubclass(annotation, int):
        return FieldKind.INTEGER
    if issubclass(annotation, (float, Decimal)):
        return FieldKind.FLOAT
    return FieldKind.TEXT


def _annotations(tp: type) -> dict[str, Any]:
    if dataclasses.is_dataclass(tp):
        hints = typing.get_type_hints(tp)
        return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(tp)}
    if not typing.is_typeddict(tp) and issubclass(tp, BaseModel):
        return {name: info.annotation for name, info in tp.model_fields.items()}
    hints = typing.get_type_hints(tp)
    if issubclass(tp, tuple):
        # plain namedtuple fields carry no annotations
        return {name: hints.get(name, str) for name in tp._fields}
    return hints


def _is_record_type(tp: Any) -> bool:
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    if dataclasses.is_dataclass(tp) or typing.is_typeddict(tp):
        return True
    if issubclass(tp, BaseModel):
        return True
    return issubclass(tp, tuple) and hasattr(tp, "_fields")


def describe_type(tp: Any) -> tuple[str, list[FieldDescriptor]]:
    """Return the display name and field descriptors of a record type.

    Accepts dataclasses, pydantic models, NamedTuple and TypedDict
    classes. Anything else raises NotAStruct.
    """
    if not _is_record_type(tp):
        raise NotAStruct(tp)

    type_name = strip_module_name(f"{tp.__module__}.{tp.__qualname__}")
    fields = [
        FieldDescriptor(name=name, kind=kind_for_annotation(annotation))
        for name, annotation in _annotations(tp).items()
    ]
    return type_name, fields


def create_table_statement(tp: Any, policy: TypePolicy | None = None) -> str:
    """Shortcut for describe_type() followed by generate_create_table()."""
    type_name, fields = describe_type(tp)
    return generate_create_table(type_name, fields, policy)
