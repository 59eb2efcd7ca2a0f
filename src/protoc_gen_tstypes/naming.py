from __future__ import annotations

import re
from typing import Union

from protoc_gen_tstypes.models import EnumRef, MessageRef, ProtoFile


def qualified_name(ref: Union[EnumRef, MessageRef]) -> str:
    """Package-qualified name of a flattened declaration: pkg.Name."""
    if not ref.package:
        return ref.name
    return f"{ref.package}.{ref.name}"


def resolve_type_name(ref: Union[EnumRef, MessageRef], referencing_file: ProtoFile) -> str:
    """Name to use for ``ref`` inside declarations generated for ``referencing_file``.

    Same-package references use the bare declared name; anything else is
    qualified by its package since no import statements are emitted.
    """
    if ref.package == referencing_file.package:
        return ref.name
    return qualified_name(ref)


def to_pascal(name: str) -> str:
    parts = re.split(r"[_\-\.]", name)
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


def to_camel(name: str) -> str:
    # snake_case or kebab-case to lowerCamelCase
    pascal = to_pascal(name)
    return pascal[:1].lower() + pascal[1:]


def to_kebab(name: str) -> str:
    """Convert names to kebab-case.

    Handles PascalCase/camelCase (GetHTTPInfo -> get-http-info),
    snake_case (say_hello -> say-hello) and already-kebab input.
    """
    if not name:
        return name
    if "_" in name or "-" in name:
        parts = re.split(r"[_\-]+", name)
        return "-".join(p.lower() for p in parts if p)
    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", name)
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", s)
    return s.lower()


def to_snake(name: str) -> str:
    return to_kebab(name).replace("-", "_")
