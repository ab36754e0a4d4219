"""Parsing of sanitized text into Python values."""

from .parser import parse_mapping, parse_text

__all__ = ["parse_text", "parse_mapping"]
