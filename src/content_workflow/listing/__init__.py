"""Listing projection for collection overviews."""

from .previews import count_by_category, list_previews, load_preview, select_preview_variant

__all__ = ["count_by_category", "list_previews", "load_preview", "select_preview_variant"]
