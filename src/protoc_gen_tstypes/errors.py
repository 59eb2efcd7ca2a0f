from __future__ import annotations


class GeneratorError(Exception):
    """Base class for errors that abort a whole generation run."""


class ConfigError(GeneratorError):
    """Raised when the plugin parameter string cannot be understood."""


class DescriptorError(GeneratorError):
    """Raised when the descriptor set is malformed or references are unresolvable."""


class TemplateRenderError(GeneratorError):
    """Raised when the output name pattern cannot be rendered for a file."""
