"""Translation backfill for missing languages."""

from .backfill import DEFAULT_DELAY, TranslationBackfill

__all__ = ["DEFAULT_DELAY", "TranslationBackfill"]
