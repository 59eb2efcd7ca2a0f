from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from google.protobuf import descriptor_pb2, text_format
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from protoc_gen_tstypes import __version__
from protoc_gen_tstypes.config import GenerationConfig, parse_parameter
from protoc_gen_tstypes.errors import GeneratorError
from protoc_gen_tstypes.models import GenerationResult
from protoc_gen_tstypes.parser.descriptor_parser import parse_request
from protoc_gen_tstypes.pipeline import run


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    # stdout carries the CodeGeneratorResponse in plugin mode
    logging.basicConfig(stream=sys.stderr, level=level, format="protoc-gen-tstypes: %(message)s")


def generate(request: plugin_pb2.CodeGeneratorRequest, config: Optional[GenerationConfig] = None) -> GenerationResult:
    """Parse the parameter string and descriptors of ``request`` and run generation."""
    try:
        if config is None:
            config = parse_parameter(request.parameter)
        if config.dump_request_descriptor:
            sys.stderr.write(text_format.MessageToString(request))
        parsed = parse_request(request)
    except GeneratorError as e:
        return GenerationResult(files=[], error=e)
    return run(parsed, config)


def _verbosity(parameter: str) -> int:
    try:
        return parse_parameter(parameter).verbose
    except GeneratorError:
        # reported through the generation result
        return 0


def generate_response(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    result = generate(request)
    if not result.ok:
        response.error = str(result.error)
        return response
    for generated in result.files:
        out = response.file.add()
        out.name = generated.path
        out.content = generated.content
    return response


def run_plugin() -> None:
    """protoc plugin mode: CodeGeneratorRequest on stdin, response on stdout."""
    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    _configure_logging(_verbosity(request.parameter))
    response = generate_response(request)
    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()


def run_standalone(descriptor_set: str, out_dir: str, files: List[str], parameter: str) -> int:
    """Generate from a FileDescriptorSet written by ``protoc --descriptor_set_out``."""
    _configure_logging(_verbosity(parameter))
    fds = descriptor_pb2.FileDescriptorSet()
    try:
        fds.ParseFromString(Path(descriptor_set).read_bytes())
    except (OSError, DecodeError) as e:
        print(f"FATAL: cannot read descriptor set '{descriptor_set}': {e}", file=sys.stderr)
        return 1

    request = plugin_pb2.CodeGeneratorRequest()
    request.proto_file.extend(fds.file)
    request.file_to_generate.extend(files or [f.name for f in fds.file])
    request.parameter = parameter

    result = generate(request)
    if not result.ok:
        print(f"FATAL: {result.error}", file=sys.stderr)
        return 1

    for generated in result.files:
        out_path = os.path.join(out_dir, generated.path)
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        Path(out_path).write_text(generated.content, encoding="utf-8")
        print(f"Generated: {out_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Generate TypeScript type declarations from protobuf descriptors. "
        "Without --descriptor-set it runs as a protoc plugin on stdin/stdout.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--descriptor-set",
        help="FileDescriptorSet produced by protoc --include_imports --descriptor_set_out",
    )
    parser.add_argument("--out", default=".", help="Output directory for generated .d.ts files")
    parser.add_argument(
        "--parameter",
        default="",
        help="Options in plugin parameter syntax, e.g. 'async_iterators,int_enums'",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Proto file names (as recorded in the descriptor set) to generate; defaults to all",
    )
    args = parser.parse_args(argv)

    if args.descriptor_set is None:
        run_plugin()
        return
    sys.exit(run_standalone(args.descriptor_set, args.out, args.files, args.parameter))


if __name__ == "__main__":
    main()
