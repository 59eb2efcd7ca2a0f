from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict

from protoc_gen_tstypes.errors import ConfigError

DEFAULT_OUTPUT_NAME_PATTERN = "{{ Dir }}/{{ BaseName }}.d.ts"


@dataclass(frozen=True)
class GenerationConfig:
    """Options accepted through protoc's ``--tstypes_opt`` parameter string."""

    # Collapse every streaming shape into AsyncIterator-based signatures.
    async_iterators: bool = False
    declare_namespace: bool = True
    output_name_pattern: str = DEFAULT_OUTPUT_NAME_PATTERN
    enums_as_int: bool = False
    verbose: int = 0
    dump_request_descriptor: bool = False


# Parameter key -> GenerationConfig attribute
PARAMETER_ALIASES: Dict[str, str] = {
    "async_iterators": "async_iterators",
    "declare_namespace": "declare_namespace",
    "int_enums": "enums_as_int",
    "enums_as_int": "enums_as_int",
    "outpattern": "output_name_pattern",
    "output_name_pattern": "output_name_pattern",
    "v": "verbose",
    "verbose": "verbose",
    "dump_request_descriptor": "dump_request_descriptor",
}

_TRUE = {"", "true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"Option '{key}' expects a boolean, got '{value}'")


def _parse_int(key: str, value: str) -> int:
    if value == "":
        return 1
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"Option '{key}' expects an integer, got '{value}'") from None


def parse_parameter(parameter: str, base: GenerationConfig = GenerationConfig()) -> GenerationConfig:
    """Parse ``key[=value]`` pairs separated by commas into a GenerationConfig.

    Output name patterns may themselves contain commas (jinja filter
    arguments), so a chunk that does not start with a known option key is
    appended to the preceding value.
    """
    if not parameter:
        return base

    pairs = []
    for chunk in parameter.split(","):
        key, _, value = chunk.partition("=")
        key = key.strip()
        if not chunk.strip():
            continue
        if key not in PARAMETER_ALIASES and pairs:
            prev_key, prev_value = pairs[-1]
            pairs[-1] = (prev_key, f"{prev_value},{chunk}")
            continue
        if not key:
            raise ConfigError(f"Malformed option '{chunk}'")
        pairs.append((key, value))

    types = {f.name: f.type for f in fields(GenerationConfig)}
    updates = {}
    for key, value in pairs:
        attr = PARAMETER_ALIASES.get(key)
        if attr is None:
            raise ConfigError(f"Unknown option '{key}'")
        kind = types[attr]
        # dataclass field types are strings under postponed annotations
        if kind in (bool, "bool"):
            updates[attr] = _parse_bool(key, value)
        elif kind in (int, "int"):
            updates[attr] = _parse_int(key, value)
        else:
            if not value:
                raise ConfigError(f"Option '{key}' requires a value")
            updates[attr] = value
    return replace(base, **updates)
