from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from protoc_gen_tstypes.config import GenerationConfig
from protoc_gen_tstypes.models import ProtoEnum, ProtoFile, ProtoMessage, ProtoService
from protoc_gen_tstypes.signatures import method_entry
from protoc_gen_tstypes.type_mapper import map_type

INDENT = "  "
SERVICE_SUFFIX = "Service"


class CodeWriter:
    """Line buffer with an indentation cursor."""

    def __init__(self, depth: int = 0):
        self.lines: List[str] = []
        self.depth = depth

    def line(self, text: str = "") -> None:
        if text:
            self.lines.append(INDENT * self.depth + text)
        else:
            self.lines.append("")

    def inc_indent(self) -> None:
        self.depth += 1

    def dec_indent(self) -> None:
        if self.depth == 0:
            raise RuntimeError("Indentation cursor would go below zero")
        self.depth -= 1

    @contextmanager
    def indented(self) -> Iterator[None]:
        self.inc_indent()
        try:
            yield
        finally:
            self.dec_indent()

    def getvalue(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""


class DeclarationGenerator:
    """Emits TypeScript declarations for one file into a CodeWriter.

    Order is fixed: enums, then messages, then services. Nested enums and
    messages are flattened to file scope and emitted just before the
    message that contains them.
    """

    def __init__(self, proto_file: ProtoFile, config: GenerationConfig, writer: Optional[CodeWriter] = None):
        self.proto_file = proto_file
        self.config = config
        self.writer = writer if writer is not None else CodeWriter()

    def generate(self) -> str:
        for enum in self.proto_file.enums:
            self.emit_enum(enum)
        for message in self.proto_file.messages:
            self.emit_message(message)
        for service in self.proto_file.services:
            self.emit_service(service)
        return self.writer.getvalue()

    def emit_enum(self, enum: ProtoEnum) -> None:
        w = self.writer
        w.line(f"export enum {enum.name} {{")
        with w.indented():
            for v in enum.values:
                if self.config.enums_as_int:
                    w.line(f"{v.name} = {v.number},")
                else:
                    w.line(f'{v.name} = "{v.name}",')
        w.line("}")
        w.line()

    def emit_message(self, message: ProtoMessage) -> None:
        for enum in message.nested_enums:
            self.emit_enum(enum)
        for nested in message.nested_messages:
            self.emit_message(nested)

        w = self.writer
        w.line(f"export interface {message.name} {{")
        with w.indented():
            for field in message.fields:
                # Presence is not modelled, so every field is optional.
                w.line(f"{field.name}?: {map_type(field, self.proto_file)};")
        w.line("}")
        w.line()

    def emit_service(self, service: ProtoService) -> None:
        w = self.writer
        w.line(f"export interface {service.name}{SERVICE_SUFFIX} {{")
        with w.indented():
            for method in service.methods:
                w.line(method_entry(method, self.proto_file, self.config))
        w.line("}")
        w.line()


def generate_declarations(proto_file: ProtoFile, config: GenerationConfig, depth: int = 0) -> str:
    """Declaration text for ``proto_file``, each line indented ``depth`` levels."""
    writer = CodeWriter(depth=depth)
    text = DeclarationGenerator(proto_file, config, writer).generate()
    if writer.depth != depth:
        raise RuntimeError("Unbalanced indentation")
    return text
