"""Field type -> TypeScript type expression."""

from __future__ import annotations

from typing import Dict

from protoc_gen_tstypes.models import (
    EnumRef,
    FieldType,
    MessageRef,
    ProtoField,
    ProtoFile,
    ScalarKind,
    ScalarType,
)
from protoc_gen_tstypes.naming import resolve_type_name

UNKNOWN_TYPE = "any /*unknown*/"

# TypeScript has a single numeric type, so width and signedness are dropped.
SCALAR_TYPE_MAP_TS: Dict[ScalarKind, str] = {
    ScalarKind.DOUBLE: "number",
    ScalarKind.FLOAT: "number",
    ScalarKind.INT64: "number",
    ScalarKind.UINT64: "number",
    ScalarKind.INT32: "number",
    ScalarKind.FIXED64: "number",
    ScalarKind.FIXED32: "number",
    ScalarKind.UINT32: "number",
    ScalarKind.SFIXED32: "number",
    ScalarKind.SFIXED64: "number",
    ScalarKind.SINT32: "number",
    ScalarKind.SINT64: "number",
    ScalarKind.BOOL: "boolean",
    ScalarKind.STRING: "string",
    ScalarKind.BYTES: "Uint8Array",
}


def raw_type(field_type: FieldType, proto_file: ProtoFile) -> str:
    """TypeScript type for a single value of ``field_type``, ignoring cardinality."""
    if isinstance(field_type, ScalarType):
        return SCALAR_TYPE_MAP_TS.get(field_type.kind, UNKNOWN_TYPE)
    if isinstance(field_type, (EnumRef, MessageRef)):
        return resolve_type_name(field_type, proto_file)
    return UNKNOWN_TYPE


def map_type(field: ProtoField, proto_file: ProtoFile) -> str:
    """TypeScript type for ``field`` as declared in ``proto_file``."""
    if field.is_map:
        key = raw_type(field.map_key, proto_file)
        value = raw_type(field.map_value, proto_file)
        return f"{{ [key: {key}]: {value} }}"
    base = raw_type(field.type, proto_file)
    if field.is_repeated:
        return f"Array<{base}>"
    return base
