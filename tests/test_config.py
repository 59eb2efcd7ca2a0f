import pytest

from protoc_gen_tstypes.config import DEFAULT_OUTPUT_NAME_PATTERN, GenerationConfig, parse_parameter
from protoc_gen_tstypes.errors import ConfigError


def test_defaults():
    config = parse_parameter("")
    assert config == GenerationConfig()
    assert config.declare_namespace is True
    assert config.async_iterators is False
    assert config.enums_as_int is False
    assert config.output_name_pattern == DEFAULT_OUTPUT_NAME_PATTERN


def test_bare_keys_enable_flags():
    config = parse_parameter("async_iterators,int_enums")
    assert config.async_iterators is True
    assert config.enums_as_int is True


def test_explicit_booleans_and_verbosity():
    config = parse_parameter("declare_namespace=false,v=2,dump_request_descriptor=yes")
    assert config.declare_namespace is False
    assert config.verbose == 2
    assert config.dump_request_descriptor is True


def test_pattern_with_commas():
    config = parse_parameter("outpattern={{ Descriptor.package | replace('.', '/') }}/{{ BaseName }}.d.ts,int_enums")
    assert config.output_name_pattern == "{{ Descriptor.package | replace('.', '/') }}/{{ BaseName }}.d.ts"
    assert config.enums_as_int is True


def test_pattern_with_equals_after_comma():
    config = parse_parameter("outpattern={{ BaseName | replace('a', 'b=c') }}.d.ts,async_iterators")
    assert config.output_name_pattern == "{{ BaseName | replace('a', 'b=c') }}.d.ts"
    assert config.async_iterators is True


def test_trailing_comma_is_ignored():
    assert parse_parameter("async_iterators,").async_iterators is True


class TestInvalid:
    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown option 'colour'"):
            parse_parameter("colour=red")

    def test_bad_boolean(self):
        with pytest.raises(ConfigError, match="boolean"):
            parse_parameter("async_iterators=maybe")

    def test_bad_integer(self):
        with pytest.raises(ConfigError, match="integer"):
            parse_parameter("v=loud")

    def test_empty_pattern(self):
        with pytest.raises(ConfigError, match="requires a value"):
            parse_parameter("outpattern=")
