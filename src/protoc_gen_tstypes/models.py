"""Read-only views over the descriptor tree handed to the plugin."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


class ScalarKind(enum.Enum):
    DOUBLE = "double"
    FLOAT = "float"
    INT64 = "int64"
    UINT64 = "uint64"
    INT32 = "int32"
    FIXED64 = "fixed64"
    FIXED32 = "fixed32"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    UINT32 = "uint32"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    SINT32 = "sint32"
    SINT64 = "sint64"


class Cardinality(enum.Enum):
    SINGULAR = "singular"
    REPEATED = "repeated"
    MAP = "map"


@dataclass(frozen=True)
class ScalarType:
    kind: ScalarKind


@dataclass(frozen=True)
class EnumRef:
    """Reference to an enum declared in ``package``."""

    name: str
    full_name: str
    package: str


@dataclass(frozen=True)
class MessageRef:
    """Reference to a message declared in ``package``."""

    name: str
    full_name: str
    package: str


@dataclass(frozen=True)
class UnknownType:
    """A field kind this generator has no mapping for (groups, future kinds)."""

    type_code: int


FieldType = Union[ScalarType, EnumRef, MessageRef, UnknownType]


@dataclass(frozen=True)
class ProtoField:
    name: str
    number: int
    type: FieldType
    cardinality: Cardinality = Cardinality.SINGULAR
    map_key: Optional[FieldType] = None
    map_value: Optional[FieldType] = None

    @property
    def is_map(self) -> bool:
        return self.cardinality is Cardinality.MAP

    @property
    def is_repeated(self) -> bool:
        return self.cardinality is Cardinality.REPEATED


@dataclass(frozen=True)
class ProtoEnumValue:
    name: str
    number: int


@dataclass(frozen=True)
class ProtoEnum:
    name: str
    full_name: str
    package: str
    values: Tuple[ProtoEnumValue, ...] = ()


@dataclass(frozen=True)
class ProtoMessage:
    name: str
    full_name: str
    package: str
    fields: Tuple[ProtoField, ...] = ()
    nested_enums: Tuple[ProtoEnum, ...] = ()
    nested_messages: Tuple[ProtoMessage, ...] = ()


@dataclass(frozen=True)
class ProtoMethod:
    name: str
    input_type: MessageRef
    output_type: MessageRef
    client_streaming: bool = False
    server_streaming: bool = False


@dataclass(frozen=True)
class ProtoService:
    name: str
    methods: Tuple[ProtoMethod, ...] = ()


@dataclass(frozen=True)
class ProtoFile:
    """Top-level view of one .proto file."""

    name: str
    package: str
    dependencies: Tuple[str, ...] = ()
    enums: Tuple[ProtoEnum, ...] = ()
    messages: Tuple[ProtoMessage, ...] = ()
    services: Tuple[ProtoService, ...] = ()


@dataclass(frozen=True)
class GenerationRequest:
    """Every file needed for resolution plus the subset to generate."""

    files: Dict[str, ProtoFile] = field(default_factory=dict)
    files_to_generate: Tuple[str, ...] = ()
    parameter: str = ""
    compiler_version: str = ""


@dataclass(frozen=True)
class GeneratedFile:
    path: str
    content: str


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a run: either the generated files or the fatal error."""

    files: List[GeneratedFile] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
