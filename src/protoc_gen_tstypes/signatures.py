"""Service method signatures for the four streaming shapes."""

from __future__ import annotations

from protoc_gen_tstypes.config import GenerationConfig
from protoc_gen_tstypes.models import ProtoFile, ProtoMethod
from protoc_gen_tstypes.naming import resolve_type_name


def _chunk(type_name: str) -> str:
    return f"{{value: {type_name}, done: boolean}}"


def synthesize(method: ProtoMethod, proto_file: ProtoFile, config: GenerationConfig) -> str:
    """Return the TypeScript function type for ``method``.

    With ``async_iterators`` every streaming side becomes an AsyncIterator.
    Without it, client streaming takes a pull function yielding input chunks
    and server streaming delivers results through a callback, each chunk
    carrying a completion flag.
    """
    i = resolve_type_name(method.input_type, proto_file)
    o = resolve_type_name(method.output_type, proto_file)
    cs, ss = method.client_streaming, method.server_streaming

    if config.async_iterators:
        if ss:
            o = f"AsyncIterator<{o}>"
        if cs:
            i = f"AsyncIterator<{i}>"
        return f"(r:{i}) => {o}"

    if not (cs or ss):
        return f"(r:{i}) => {o}"
    if not cs:
        return f"(r:{i}, cb:(a:{_chunk(o)}) => void) => void"
    if not ss:
        return f"(r:() => {_chunk(i)}) => {o}"
    return f"(r:() => {_chunk(i)}, cb:(a:{_chunk(o)}) => void) => void"


def method_entry(method: ProtoMethod, proto_file: ProtoFile, config: GenerationConfig) -> str:
    return f"{method.name}: {synthesize(method, proto_file, config)};"
