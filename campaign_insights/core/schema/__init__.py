"""
Header-to-schema resolution.
"""

from .resolver import CANONICAL_FIELD_SYNONYMS, REQUIRED_FIELDS, SchemaResolver

__all__ = [
    "SchemaResolver",
    "CANONICAL_FIELD_SYNONYMS",
    "REQUIRED_FIELDS",
]
