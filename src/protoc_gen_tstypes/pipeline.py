from __future__ import annotations

import logging
from typing import List

from protoc_gen_tstypes.config import GenerationConfig
from protoc_gen_tstypes.errors import DescriptorError, GeneratorError
from protoc_gen_tstypes.generator.declaration_generator import CodeWriter, DeclarationGenerator
from protoc_gen_tstypes.generator.output_name import compute_path
from protoc_gen_tstypes.models import GeneratedFile, GenerationRequest, GenerationResult, ProtoFile

logger = logging.getLogger(__name__)

HEADER = "// Code generated by protoc-gen-tstypes. DO NOT EDIT."


def render_file(proto_file: ProtoFile, config: GenerationConfig) -> str:
    """Full content of the generated .d.ts for one file, header included."""
    writer = CodeWriter()
    writer.line(HEADER)
    writer.line()

    namespaced = config.declare_namespace and bool(proto_file.package)
    if namespaced:
        writer.line(f"declare namespace {proto_file.package} {{")
        writer.inc_indent()
    DeclarationGenerator(proto_file, config, writer).generate()
    if namespaced:
        writer.dec_indent()
        writer.line("}")

    if writer.depth != 0:
        raise RuntimeError(f"Unbalanced indentation after {proto_file.name}")
    return writer.getvalue()


def generate_files(request: GenerationRequest, config: GenerationConfig) -> List[GeneratedFile]:
    """Generate one file per requested input, in sorted file-name order.

    Raises GeneratorError on the first fatal problem; nothing is returned
    for the files processed before it.
    """
    generated: List[GeneratedFile] = []
    for name in sorted(request.files_to_generate):
        proto_file = request.files.get(name)
        if proto_file is None:
            raise DescriptorError(f"Requested file '{name}' is missing from the descriptor set")
        content = render_file(proto_file, config)
        path = compute_path(proto_file, request, config.output_name_pattern)
        if config.verbose > 0:
            logger.info("generating %s", path)
        generated.append(GeneratedFile(path=path, content=content))
    return generated


def run(request: GenerationRequest, config: GenerationConfig) -> GenerationResult:
    """Like generate_files, but fatal errors come back in the result."""
    try:
        files = generate_files(request, config)
    except GeneratorError as e:
        logger.debug("generation aborted: %s", e)
        return GenerationResult(files=[], error=e)
    return GenerationResult(files=files)
