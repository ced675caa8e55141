"""Content collections and their repository layout."""

import re
from dataclasses import dataclass, replace

from schemas.variant import ArticleVariant, ScheduleVariant, Variant

DEFAULT_DATA_ROOT = "data"

UID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class Collection:
    """A kind of record and where its records live in the repository.

    Attributes:
        name: Directory name under the data root (e.g. "articles")
        kind: Singular label used in commit messages and PR titles
        variant_model: Variant schema for this collection's records
        long_text_fields: Fields translated alongside the title
        data_root: Repository directory holding all collections
    """

    name: str
    kind: str
    variant_model: type[Variant]
    long_text_fields: tuple[str, ...]
    data_root: str = DEFAULT_DATA_ROOT

    @property
    def root(self) -> str:
        return f"{self.data_root}/{self.name}"

    @property
    def default_category(self) -> str:
        return self.variant_model.model_fields["category"].default

    def record_dir(self, uid: str) -> str:
        return f"{self.root}/{uid}"

    def index_path(self, uid: str) -> str:
        return f"{self.record_dir(uid)}/index.json"

    def images_dir(self, uid: str) -> str:
        return f"{self.record_dir(uid)}/images"

    def image_path(self, uid: str, name: str) -> str:
        return f"{self.images_dir(uid)}/{name}"

    def placeholder(self, language: str) -> Variant:
        """An empty-field variant for one language."""
        return self.variant_model(language=language)

    def with_data_root(self, data_root: str) -> "Collection":
        return replace(self, data_root=data_root.strip("/") or DEFAULT_DATA_ROOT)


ARTICLES = Collection(
    name="articles",
    kind="article",
    variant_model=ArticleVariant,
    long_text_fields=("excerpt", "content"),
)

SCHEDULE = Collection(
    name="schedule",
    kind="schedule",
    variant_model=ScheduleVariant,
    long_text_fields=("details", "location"),
)

COLLECTIONS: dict[str, Collection] = {c.name: c for c in (ARTICLES, SCHEDULE)}


def get_collection(name: str, data_root: str | None = None) -> Collection:
    """Look up a collection by name.

    Raises:
        ValueError: If the name is not a known collection
    """
    try:
        collection = COLLECTIONS[name]
    except KeyError:
        known = ", ".join(sorted(COLLECTIONS))
        raise ValueError(f"Unknown collection '{name}' (expected one of: {known})") from None
    if data_root:
        collection = collection.with_data_root(data_root)
    return collection


def validate_uid(uid: str) -> str:
    """Check that a uid is usable as a single path segment.

    Returns:
        The uid, stripped of surrounding whitespace

    Raises:
        ValueError: If the uid is empty or contains unsupported characters
    """
    uid = (uid or "").strip()
    if not UID_PATTERN.match(uid) or ".." in uid:
        raise ValueError(
            f"Invalid uid '{uid}': use latin letters, digits, '.', '_' or '-'"
        )
    return uid
