"""Output path computation from a user supplied jinja2 pattern.

The pattern sees exactly four names:

    Dir         directory of the .proto file ("." at the root)
    BaseName    file name without the .proto extension
    Descriptor  the ProtoFile being generated
    Request     the whole GenerationRequest

e.g. ``{{ Descriptor.package | replace('.', '/') }}/{{ BaseName | kebabcase }}.d.ts``
"""

from __future__ import annotations

import posixpath
from functools import lru_cache

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from protoc_gen_tstypes.errors import TemplateRenderError
from protoc_gen_tstypes.models import GenerationRequest, ProtoFile
from protoc_gen_tstypes.naming import to_camel, to_kebab, to_pascal, to_snake

PROTO_SUFFIX = ".proto"


def _trim_suffix(value: str, suffix: str) -> str:
    if suffix and value.endswith(suffix):
        return value[: -len(suffix)]
    return value


@lru_cache(maxsize=None)
def _get_template_env() -> SandboxedEnvironment:
    env = SandboxedEnvironment(
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=False,
    )
    env.filters.update(
        pascalcase=to_pascal,
        camelcase=to_camel,
        snakecase=to_snake,
        kebabcase=to_kebab,
        trimsuffix=_trim_suffix,
    )
    return env


def split_proto_name(file_name: str):
    """Return (Dir, BaseName) for a proto file name as protoc reports it."""
    directory = posixpath.dirname(file_name) or "."
    base = _trim_suffix(posixpath.basename(file_name), PROTO_SUFFIX)
    return directory, base


def compute_path(proto_file: ProtoFile, request: GenerationRequest, pattern: str) -> str:
    """Render ``pattern`` for ``proto_file``; any failure is a TemplateRenderError."""
    directory, base = split_proto_name(proto_file.name)
    try:
        template = _get_template_env().from_string(pattern)
        rendered = template.render(
            Dir=directory,
            BaseName=base,
            Descriptor=proto_file,
            Request=request,
        )
    except TemplateError as e:
        raise TemplateRenderError(
            f"Issue rendering output name pattern {pattern!r} for '{proto_file.name}': {e}"
        ) from e

    rendered = rendered.strip()
    if not rendered:
        raise TemplateRenderError(
            f"Output name pattern {pattern!r} rendered an empty path for '{proto_file.name}'"
        )
    path = posixpath.normpath(rendered)
    if path.startswith("/") or path == ".." or path.startswith("../"):
        raise TemplateRenderError(
            f"Output name pattern {pattern!r} rendered '{path}' for '{proto_file.name}', "
            "which is outside the output directory"
        )
    return path
