"""Record model: collections, drafts and their wire encoding."""

from .collections import (
    ARTICLES,
    COLLECTIONS,
    SCHEDULE,
    Collection,
    get_collection,
    validate_uid,
)
from .model import empty_document, encode_document, materialize_draft, serialize

__all__ = [
    "ARTICLES",
    "COLLECTIONS",
    "SCHEDULE",
    "Collection",
    "get_collection",
    "validate_uid",
    "empty_document",
    "encode_document",
    "materialize_draft",
    "serialize",
]
