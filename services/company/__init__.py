"""
Company service exports.

Entity recognition and company metadata clients.
"""

from .metadata import MetadataFetcher, parse_metadata
from .recognizer import EntityRecognizer, format_timestamp, parse_entities

__all__ = [
    "EntityRecognizer",
    "MetadataFetcher",
    "format_timestamp",
    "parse_entities",
    "parse_metadata",
]
