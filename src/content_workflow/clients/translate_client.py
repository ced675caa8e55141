"""Client for a LibreTranslate-compatible translation endpoint."""

import logging

from .client import Client
from .exceptions import ClientError

logger = logging.getLogger(__name__)


class TranslateClient(Client):
    """Translates short texts through ``POST {base_url}/translate``.

    Never raises for remote problems: an unreachable endpoint, a non-2xx
    response, a malformed body or an empty translation all yield the
    original text unchanged.

    Example:
        with TranslateClient({"base_url": "https://libretranslate.example"}) as tr:
            tr.translate("Свято", target="en", source="uk")
    """

    TRANSLATE_PATH = "/translate"

    def __init__(self, config: dict):
        config = dict(config)
        if config.get("base_url"):
            config["base_url"] = str(config["base_url"]).rstrip("/")
        super().__init__(config)

    def translate(self, text: str | None, target: str, source: str | None = None) -> str:
        """Translate a text, falling back to the input on any failure.

        Args:
            text: Text to translate; blank text is returned as-is
            target: Target language code
            source: Source language code (default: auto-detect)

        Returns:
            The translated text, or the original text
        """
        original = "" if text is None else str(text)
        if not original.strip():
            return original

        payload = {
            "q": original,
            "source": source or "auto",
            "target": target,
            "format": "text",
        }
        try:
            data = self.post(self.TRANSLATE_PATH, json=payload).json()
        except (ClientError, ValueError) as e:
            logger.warning(f"Translation to {target} unavailable: {e}")
            return original

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            logger.debug(f"Empty translation to {target}; keeping original text")
            return original
        return translated
