"""Conversion between remote record documents and in-memory drafts."""

import json
import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from schemas.draft import Draft
from schemas.variant import LANGUAGES

from .collections import Collection

logger = logging.getLogger(__name__)


def _document_entries(document: Any, uid: str) -> list[dict]:
    if document is None:
        return []
    if isinstance(document, dict):
        return [document]
    if isinstance(document, list):
        return [entry for entry in document if isinstance(entry, dict)]
    logger.warning(f"Ignoring malformed document for {uid}: {type(document).__name__}")
    return []


def _overlay(collection: Collection, placeholder, entry: dict, uid: str):
    """Merge a remote entry onto a placeholder, dropping only the fields that fail."""
    defaults = placeholder.model_dump()
    declared = collection.variant_model.model_fields
    data = {
        **defaults,
        **{k: v for k, v in entry.items() if not (v is None and k in declared)},
        "language": placeholder.language,
    }

    try:
        return collection.variant_model.model_validate(data)
    except PydanticValidationError as e:
        invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning(
            f"Resetting invalid field(s) of {placeholder.language} variant in {uid}: "
            f"{', '.join(sorted(map(str, invalid)))}"
        )

    for field in invalid:
        if field in defaults:
            data[field] = defaults[field]
        else:
            data.pop(field, None)
    try:
        return collection.variant_model.model_validate(data)
    except PydanticValidationError:
        logger.warning(f"Keeping empty {placeholder.language} variant for {uid}")
        return placeholder


def materialize_draft(document: Any, collection: Collection, uid: str) -> Draft:
    """Build a draft with all languages present from a remote document.

    Starts from one empty placeholder per language and overlays every
    variant found in the document, matched on its lowercased ``language``.
    Fields are overlaid one by one: a null value or a value of the wrong
    type falls back to the placeholder default for that field only, so
    the rest of the variant survives. A missing document (new record), a
    malformed one and entries for unknown languages leave the placeholder
    in place; this function never raises for bad input.

    Args:
        document: Parsed index.json (a list of variants), a legacy single
            variant object, or None
        collection: Collection the record belongs to
        uid: Record identifier

    Returns:
        A draft with exactly one variant per language
    """
    variants = {language: collection.placeholder(language) for language in LANGUAGES}

    for entry in _document_entries(document, uid):
        language = str(entry.get("language") or "").strip().lower()
        if language not in variants:
            logger.debug(f"Skipping variant with unknown language '{language}' in {uid}")
            continue

        variants[language] = _overlay(collection, variants[language], entry, uid)

    return Draft(uid=uid, collection=collection.name, variants=variants)


def serialize(draft: Draft, removed_image_names: Iterable[str] | None = None) -> list[dict]:
    """Convert a draft to the wire format: one variant per language in fixed order.

    Images marked removed are filtered out of every language, since one
    uploaded file is shared by name across all variants.

    Args:
        draft: The draft to serialize
        removed_image_names: Names to exclude; defaults to draft.removed_images

    Returns:
        Variant dicts ordered uk, en, fr
    """
    if removed_image_names is None:
        removed_image_names = draft.removed_images
    removed = set(removed_image_names)

    document = []
    for language in LANGUAGES:
        data = draft.variant(language).model_dump()
        data["images"] = [name for name in data.get("images") or [] if name not in removed]
        document.append(data)
    return document


def empty_document(collection: Collection) -> list[dict]:
    """Wire document for a new record: empty fields in every language."""
    return [collection.placeholder(language).model_dump() for language in LANGUAGES]


def encode_document(document: list[dict]) -> bytes:
    """Encode a wire document as the UTF-8 JSON text stored in index.json."""
    return json.dumps(document, ensure_ascii=False, indent=2).encode("utf-8")
