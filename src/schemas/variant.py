"""Language variant schemas.

A record is stored remotely as a JSON array of variants, one per language:

    data/
    └── {collection}/
        └── {uid}/
            ├── index.json      # [Variant(uk), Variant(en), Variant(fr)]
            └── images/
                └── {filename}  # referenced by name from Variant.images
"""

from typing import ClassVar

from pydantic import BaseModel

LANGUAGES: tuple[str, ...] = ("uk", "en", "fr")


class Variant(BaseModel):
    """One language's version of a record's fields.

    Subclasses declare the collection-specific fields. Keys found in a
    remote document that no subclass declares are kept as extras so they
    survive a load/save round trip.

    Categories listed in CATEGORIES are the ones offered for editing; a
    stored record may carry any other string (an empty one included) and
    still loads unchanged.

    Attributes:
        language: Language code (uk, en, fr)
    """

    CATEGORIES: ClassVar[tuple[str, ...]] = ()

    language: str

    model_config = {"extra": "allow"}

    @property
    def is_blank(self) -> bool:
        """True when every field other than language and category is empty."""
        for value in self.model_dump(exclude={"language", "category"}).values():
            if value not in ("", None, [], {}):
                return False
        return True


class ArticleVariant(Variant):
    """Article fields for one language.

    Attributes:
        category: Article section
        title: Display title
        date: Publication date as entered
        excerpt: Short summary shown in listings
        content: Plain-text body with embedded newlines
        images: Image filenames; position 0 is the hero image
    """

    CATEGORIES: ClassVar[tuple[str, ...]] = ("news", "spiritual", "community")

    category: str = "news"
    title: str = ""
    date: str = ""
    excerpt: str = ""
    content: str = ""
    images: list[str] = []


class ScheduleVariant(Variant):
    """Schedule event fields for one language.

    Attributes:
        category: Event type
        title: Display title
        date: Event date as entered
        time: Start time as entered
        location: Where the event takes place
        details: Free-text description
        images: Image filenames; position 0 is the hero image
    """

    CATEGORIES: ClassVar[tuple[str, ...]] = ("liturgy", "announcement")

    category: str = "liturgy"
    title: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    details: str = ""
    images: list[str] = []
