"""List-view previews of a collection's records."""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from content_workflow.clients import ClientError, GitHubClient
from content_workflow.records import Collection
from schemas.outcome import Preview

logger = logging.getLogger(__name__)

DISPLAY_LANGUAGE = "uk"
DEFAULT_MAX_WORKERS = 4


def select_preview_variant(document: Any) -> dict:
    """Pick the variant shown in list views.

    Arrays yield the ``uk`` variant when present, else their first element;
    a single object (legacy shape) is used as-is.
    """
    if isinstance(document, list):
        by_language = {
            str(item.get("language")).lower(): item
            for item in document
            if isinstance(item, dict) and item.get("language")
        }
        preview = by_language.get(DISPLAY_LANGUAGE) or (document[0] if document else {})
    else:
        preview = document
    return preview if isinstance(preview, dict) else {}


def load_preview(gateway: GitHubClient, collection: Collection, uid: str) -> Preview | None:
    """Read one record's preview; None if it is missing or unreadable."""
    try:
        document = gateway.read_json(collection.index_path(uid))
    except (ClientError, ValueError) as e:
        logger.warning(f"Skipping {collection.kind} {uid}: {e}")
        return None

    if document is None:
        logger.debug(f"Skipping {collection.kind} {uid}: no index.json")
        return None

    try:
        return Preview.model_validate({**select_preview_variant(document), "uid": uid})
    except PydanticValidationError as e:
        logger.warning(f"Skipping {collection.kind} {uid}: {len(e.errors())} invalid field(s)")
        return None


def list_previews(
    gateway: GitHubClient,
    collection: Collection,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[Preview]:
    """Produce one preview per record directory of a collection.

    Records are read concurrently and returned in directory order. A record
    that cannot be read or parsed is left out rather than failing the
    whole listing; a missing collection directory yields an empty list.

    Args:
        gateway: Repository gateway to read through
        collection: Collection to list
        max_workers: Upper bound on concurrent record reads

    Returns:
        Previews carrying the record uid plus the display variant's fields
    """
    uids = [entry.name for entry in gateway.list_directory(collection.root) if entry.type == "dir"]
    if not uids:
        return []

    workers = max(1, min(max_workers, len(uids)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        previews = list(
            executor.map(lambda uid: load_preview(gateway, collection, uid), uids)
        )

    results = [preview for preview in previews if preview is not None]
    logger.info(f"Listed {len(results)} of {len(uids)} {collection.name} records")
    return results


def count_by_category(previews: list[Preview]) -> dict[str, int]:
    """Number of previews per category; records without one count under ''."""
    return dict(
        Counter(str(preview.category) if preview.category else "" for preview in previews)
    )
