"""Map protoc descriptors into the generator's read-only model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_tstypes.errors import DescriptorError
from protoc_gen_tstypes.models import (
    Cardinality,
    EnumRef,
    FieldType,
    GenerationRequest,
    MessageRef,
    ProtoEnum,
    ProtoEnumValue,
    ProtoField,
    ProtoFile,
    ProtoMessage,
    ProtoMethod,
    ProtoService,
    ScalarKind,
    ScalarType,
    UnknownType,
)

_FDP = d2.FieldDescriptorProto

SCALAR_KINDS: Dict[int, ScalarKind] = {
    _FDP.TYPE_DOUBLE: ScalarKind.DOUBLE,
    _FDP.TYPE_FLOAT: ScalarKind.FLOAT,
    _FDP.TYPE_INT64: ScalarKind.INT64,
    _FDP.TYPE_UINT64: ScalarKind.UINT64,
    _FDP.TYPE_INT32: ScalarKind.INT32,
    _FDP.TYPE_FIXED64: ScalarKind.FIXED64,
    _FDP.TYPE_FIXED32: ScalarKind.FIXED32,
    _FDP.TYPE_BOOL: ScalarKind.BOOL,
    _FDP.TYPE_STRING: ScalarKind.STRING,
    _FDP.TYPE_BYTES: ScalarKind.BYTES,
    _FDP.TYPE_UINT32: ScalarKind.UINT32,
    _FDP.TYPE_SFIXED32: ScalarKind.SFIXED32,
    _FDP.TYPE_SFIXED64: ScalarKind.SFIXED64,
    _FDP.TYPE_SINT32: ScalarKind.SINT32,
    _FDP.TYPE_SINT64: ScalarKind.SINT64,
}


@dataclass(frozen=True)
class _Declared:
    """A message or enum found while indexing the descriptor set."""

    proto: Union[d2.DescriptorProto, d2.EnumDescriptorProto]
    full_name: str
    package: str
    file_name: str

    @property
    def is_message(self) -> bool:
        return isinstance(self.proto, d2.DescriptorProto)


def _qualify(prefix: str, name: str) -> str:
    return f"{prefix}.{name}"


def _index_file(fd: d2.FileDescriptorProto, registry: Dict[str, _Declared]) -> None:
    prefix = f".{fd.package}" if fd.package else ""

    def add(full_name: str, proto) -> None:
        if full_name in registry:
            raise DescriptorError(
                f"Type '{full_name.lstrip('.')}' is declared in both "
                f"'{registry[full_name].file_name}' and '{fd.name}'"
            )
        registry[full_name] = _Declared(
            proto=proto,
            full_name=full_name.lstrip("."),
            package=fd.package,
            file_name=fd.name,
        )

    def walk(msg: d2.DescriptorProto, scope: str) -> None:
        full_name = _qualify(scope, msg.name)
        add(full_name, msg)
        for e in msg.enum_type:
            add(_qualify(full_name, e.name), e)
        for nested in msg.nested_type:
            walk(nested, full_name)

    for e in fd.enum_type:
        add(_qualify(prefix, e.name), e)
    for m in fd.message_type:
        walk(m, prefix)


class _FileConverter:
    """Converts one FileDescriptorProto against the shared type registry."""

    def __init__(self, fd: d2.FileDescriptorProto, registry: Dict[str, _Declared]):
        self.fd = fd
        self.registry = registry
        self.prefix = f".{fd.package}" if fd.package else ""

    def convert(self) -> ProtoFile:
        return ProtoFile(
            name=self.fd.name,
            package=self.fd.package,
            dependencies=tuple(self.fd.dependency),
            enums=tuple(self._enum(e, self.prefix) for e in self.fd.enum_type),
            messages=tuple(self._message(m, self.prefix) for m in self.fd.message_type),
            services=tuple(self._service(s) for s in self.fd.service),
        )

    def _lookup(self, type_name: str, context: str, scope: Optional[str] = None) -> _Declared:
        if type_name.startswith("."):
            candidates = [type_name]
        else:
            # Relative names resolve from the innermost scope outwards.
            parts = [p for p in (self.prefix if scope is None else scope).split(".") if p]
            candidates = [
                "." + ".".join(parts[:i] + [type_name]) for i in range(len(parts), -1, -1)
            ]
        declared = next((self.registry[c] for c in candidates if c in self.registry), None)
        if declared is None:
            raise DescriptorError(
                f"{self.fd.name}: unresolvable type reference '{type_name}' in {context}"
            )
        return declared

    def _enum(self, e: d2.EnumDescriptorProto, scope: str) -> ProtoEnum:
        return ProtoEnum(
            name=e.name,
            full_name=_qualify(scope, e.name).lstrip("."),
            package=self.fd.package,
            values=tuple(ProtoEnumValue(name=v.name, number=v.number) for v in e.value),
        )

    def _message(self, msg: d2.DescriptorProto, scope: str) -> ProtoMessage:
        full_name = _qualify(scope, msg.name)
        context = full_name.lstrip(".")
        return ProtoMessage(
            name=msg.name,
            full_name=context,
            package=self.fd.package,
            fields=tuple(self._field(f, context) for f in msg.field),
            nested_enums=tuple(self._enum(e, full_name) for e in msg.enum_type),
            # Map entries are synthesized by protoc and rendered inline as map types.
            nested_messages=tuple(
                self._message(n, full_name) for n in msg.nested_type if not n.options.map_entry
            ),
        )

    def _field_type(self, f: d2.FieldDescriptorProto, context: str) -> FieldType:
        # Unlinked descriptor sets may carry a type_name without a type; an
        # unset type reads as TYPE_DOUBLE, so this must come before scalars.
        unlinked = not f.HasField("type") and bool(f.type_name)
        if not unlinked and f.type in SCALAR_KINDS:
            return ScalarType(SCALAR_KINDS[f.type])
        if unlinked or f.type in (_FDP.TYPE_MESSAGE, _FDP.TYPE_ENUM):
            declared = self._lookup(f.type_name, f"{context}.{f.name}", scope=context)
            ref = MessageRef if declared.is_message else EnumRef
            return ref(
                name=declared.proto.name,
                full_name=declared.full_name,
                package=declared.package,
            )
        return UnknownType(type_code=f.type)

    def _field(self, f: d2.FieldDescriptorProto, context: str) -> ProtoField:
        field_type = self._field_type(f, context)
        if f.label != _FDP.LABEL_REPEATED:
            return ProtoField(name=f.name, number=f.number, type=field_type)

        entry = self._map_entry(f, field_type, context)
        if entry is None:
            return ProtoField(
                name=f.name,
                number=f.number,
                type=field_type,
                cardinality=Cardinality.REPEATED,
            )

        key_field, value_field = _entry_fields(entry, f"{context}.{f.name}")
        return ProtoField(
            name=f.name,
            number=f.number,
            type=field_type,
            cardinality=Cardinality.MAP,
            map_key=self._field_type(key_field, context),
            map_value=self._field_type(value_field, context),
        )

    def _map_entry(
        self, f: d2.FieldDescriptorProto, field_type: FieldType, context: str
    ) -> Optional[d2.DescriptorProto]:
        if not isinstance(field_type, MessageRef):
            return None
        declared = self._lookup(f.type_name, f"{context}.{f.name}", scope=context)
        if declared.proto.options.map_entry:
            return declared.proto
        return None

    def _method_ref(self, type_name: str, context: str) -> MessageRef:
        declared = self._lookup(type_name, context)
        if not declared.is_message:
            raise DescriptorError(
                f"{self.fd.name}: {context} refers to enum '{type_name}' where a message is required"
            )
        return MessageRef(
            name=declared.proto.name,
            full_name=declared.full_name,
            package=declared.package,
        )

    def _service(self, svc: d2.ServiceDescriptorProto) -> ProtoService:
        methods: List[ProtoMethod] = []
        for m in svc.method:
            context = f"{svc.name}.{m.name}"
            methods.append(
                ProtoMethod(
                    name=m.name,
                    input_type=self._method_ref(m.input_type, context),
                    output_type=self._method_ref(m.output_type, context),
                    client_streaming=m.client_streaming,
                    server_streaming=m.server_streaming,
                )
            )
        return ProtoService(name=svc.name, methods=tuple(methods))


def _entry_fields(entry: d2.DescriptorProto, context: str):
    by_number = {f.number: f for f in entry.field}
    if 1 not in by_number or 2 not in by_number:
        raise DescriptorError(f"Map entry '{entry.name}' for {context} lacks key or value field")
    return by_number[1], by_number[2]


def parse_files(protos: Iterable[d2.FileDescriptorProto]) -> Dict[str, ProtoFile]:
    """Convert a complete descriptor set into ProtoFile views keyed by file name.

    Every cross-file reference must resolve within ``protos``; otherwise a
    DescriptorError is raised and nothing is returned.
    """
    protos = list(protos)
    registry: Dict[str, _Declared] = {}
    seen = set()
    for fd in protos:
        if not fd.name:
            raise DescriptorError("Descriptor set contains a file without a name")
        if fd.name in seen:
            raise DescriptorError(f"Descriptor set contains '{fd.name}' more than once")
        seen.add(fd.name)
        _index_file(fd, registry)

    return {fd.name: _FileConverter(fd, registry).convert() for fd in protos}


def parse_request(request: plugin_pb2.CodeGeneratorRequest) -> GenerationRequest:
    """Build a GenerationRequest from the message protoc sends to plugins."""
    files = parse_files(request.proto_file)
    for name in request.file_to_generate:
        if name not in files:
            raise DescriptorError(f"Requested file '{name}' is missing from the descriptor set")

    version = ""
    if request.HasField("compiler_version"):
        v = request.compiler_version
        version = f"{v.major}.{v.minor}.{v.patch}"
        if v.suffix:
            version += f"-{v.suffix}"

    return GenerationRequest(
        files=files,
        files_to_generate=tuple(request.file_to_generate),
        parameter=request.parameter,
        compiler_version=version,
    )
