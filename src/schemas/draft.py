"""In-memory draft of a record being edited.

A Draft is a value: every edit returns a new Draft and leaves the original
untouched, so the caller can hand one to the mutation orchestrator while
keeping its own copy.
"""

from pathlib import Path

from pydantic import BaseModel

from .variant import Variant


class PendingUpload(BaseModel):
    """A local file queued for upload into the record's images directory.

    Attributes:
        name: Remote filename, also the name referenced from Variant.images
        path: Local file to read at save time
    """

    name: str
    path: Path


class Draft(BaseModel):
    """A record's language variants plus edits not yet committed.

    Attributes:
        uid: Record identifier, also the remote directory name
        collection: Collection name (e.g. "articles")
        variants: One variant per language code, always fully populated
        pending_uploads: Files to upload on save
        removed_images: Image names to delete on save, without duplicates
    """

    uid: str
    collection: str
    variants: dict[str, Variant]
    pending_uploads: list[PendingUpload] = []
    removed_images: list[str] = []

    model_config = {"frozen": True}

    def variant(self, language: str) -> Variant:
        if language not in self.variants:
            raise KeyError(f"Unknown language: {language}")
        return self.variants[language]

    def _with_variant(self, language: str, variant: Variant, **changes) -> "Draft":
        variants = dict(self.variants)
        variants[language] = variant
        return self.model_copy(update={"variants": variants, **changes})

    def with_field(self, language: str, field: str, value) -> "Draft":
        """Return a draft with one field of one language replaced.

        Raises:
            KeyError: If the language is not part of the draft
            ValueError: If the field is unknown, is ``language``, or the
                value fails validation (e.g. an unsupported category)
        """
        current = self.variant(language)
        model = type(current)
        if field == "language":
            raise ValueError("language cannot be edited")
        if field not in model.model_fields:
            raise ValueError(f"Unknown field for {model.__name__}: {field}")
        if field == "category" and value not in model.CATEGORIES:
            raise ValueError(
                f"Unsupported category '{value}' (expected one of: {', '.join(model.CATEGORIES)})"
            )

        data = current.model_dump()
        data[field] = value
        return self._with_variant(language, model.model_validate(data))

    def with_uploads(self, language: str, paths: list[Path]) -> "Draft":
        """Queue local files for upload and append them to a language's images.

        Re-uploading a name that was marked removed cancels the removal.
        """
        current = self.variant(language)
        images = list(current.images)
        pending = {upload.name: upload for upload in self.pending_uploads}
        names = []
        for path in paths:
            path = Path(path)
            pending[path.name] = PendingUpload(name=path.name, path=path)
            names.append(path.name)
            if path.name not in images:
                images.append(path.name)

        return self._with_variant(
            language,
            current.model_copy(update={"images": images}),
            pending_uploads=list(pending.values()),
            removed_images=[n for n in self.removed_images if n not in names],
        )

    def mark_image_removed(self, language: str, name: str) -> "Draft":
        """Drop an image from a language's list and mark it for deletion.

        Marking the same name twice records it once. A queued upload with
        that name is dropped as well.
        """
        current = self.variant(language)
        removed = list(self.removed_images)
        if name not in removed:
            removed.append(name)

        return self._with_variant(
            language,
            current.model_copy(
                update={"images": [n for n in current.images if n != name]}
            ),
            pending_uploads=[u for u in self.pending_uploads if u.name != name],
            removed_images=removed,
        )

    def promote_hero(self, language: str, name: str) -> "Draft":
        """Move an image to the front of a language's list.

        The remaining images keep their order. An unknown name leaves the
        draft unchanged.
        """
        current = self.variant(language)
        if name not in current.images:
            return self
        images = [name] + [n for n in current.images if n != name]
        return self._with_variant(
            language, current.model_copy(update={"images": images})
        )
