"""TypeScript type declarations for protocol buffer schemas, as a protoc plugin."""

__version__ = "0.3.0"
