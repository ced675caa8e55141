"""Best-effort translation of a draft's missing languages."""

import logging
import time
from collections.abc import Callable

from content_workflow.clients import TranslateClient
from content_workflow.records import get_collection
from schemas.draft import Draft
from schemas.variant import LANGUAGES, Variant

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.15


class TranslationBackfill:
    """Fills empty languages of a draft from its richest variant.

    For every language whose title is empty, the title and the
    collection's long-text fields are translated from the source variant:
    ``uk`` when it has a title, otherwise the first language that does.
    Only empty fields are written, so nothing the editor typed is ever
    overwritten. Each field is a separate remote call, paced by a fixed
    delay. Without a client (no endpoint configured) this is a no-op.

    Example:
        backfill = TranslationBackfill(TranslateClient({"base_url": url}))
        draft = backfill.fill_missing(draft)
    """

    def __init__(
        self,
        client: TranslateClient | None,
        delay: float = DEFAULT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.delay = delay
        self._sleep = sleep

    def source_variant(self, draft: Draft) -> Variant | None:
        """The variant translations are made from, or None if no title exists."""
        uk = draft.variants.get("uk")
        if uk is not None and uk.title:
            return uk
        for language in LANGUAGES:
            variant = draft.variants.get(language)
            if variant is not None and variant.title:
                return variant
        return None

    def fill_missing(self, draft: Draft) -> Draft:
        """Return a draft with empty languages translated where possible."""
        if self.client is None:
            logger.debug("No translation endpoint configured; skipping backfill")
            return draft

        source = self.source_variant(draft)
        if source is None:
            logger.info(f"Nothing to translate from in {draft.uid}: no variant has a title")
            return draft

        fields = ("title", *get_collection(draft.collection).long_text_fields)
        calls = 0

        for language in LANGUAGES:
            target = draft.variant(language)
            if language == source.language or target.title:
                continue

            for field in fields:
                text = getattr(source, field, "")
                if getattr(target, field, "") or not text or not str(text).strip():
                    continue
                if calls:
                    self._sleep(self.delay)
                translated = self.client.translate(
                    text, target=language, source=source.language
                )
                calls += 1
                draft = draft.with_field(language, field, translated)

            logger.info(f"Backfilled {language} for {draft.uid} from {source.language}")

        return draft
