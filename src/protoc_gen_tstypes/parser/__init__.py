from .descriptor_parser import parse_files, parse_request

__all__ = ["parse_files", "parse_request"]
