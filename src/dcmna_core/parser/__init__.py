# src/dcmna_core/parser/__init__.py
from .parser import NetlistParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    "NetlistParser",
    "ParsingError",
    "SchemaValidationError",
]
