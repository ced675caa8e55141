"""Configuration dicts for the content workflow clients, read from the environment.

Environment variables:
    CONTENT_REPO_OWNER: Owner of the content repository
    CONTENT_REPO_NAME: Name of the content repository
    CONTENT_REF: Ref to read content from (default: repository default branch)
    CONTENT_DATA_ROOT: Directory holding the collections (default: data)
    GITHUB_API_URL: GitHub REST base URL (default: https://api.github.com)
    GITHUB_TOKEN: Bearer token, read by Credential.from_env()
    LIBRE_TRANSLATE_URL: Translation endpoint; unset disables backfill
"""

import os

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_DATA_ROOT = "data"
USER_AGENT = "content-workflow/0.1"


def load_config(environ: dict | None = None) -> dict:
    """Build client configs from environment variables.

    Returns:
        A dict with "github" and "translate" client configs (the latter
        None when no endpoint is set) and the "data_root" directory
    """
    env = os.environ if environ is None else environ

    translate_url = (env.get("LIBRE_TRANSLATE_URL") or "").strip()

    return {
        "github": {
            "base_url": env.get("GITHUB_API_URL") or DEFAULT_API_URL,
            "owner": env.get("CONTENT_REPO_OWNER", ""),
            "repo": env.get("CONTENT_REPO_NAME", ""),
            "ref": env.get("CONTENT_REF") or None,
            "headers": {"User-Agent": USER_AGENT},
        },
        "translate": (
            {"base_url": translate_url, "headers": {"User-Agent": USER_AGENT}}
            if translate_url
            else None
        ),
        "data_root": env.get("CONTENT_DATA_ROOT") or DEFAULT_DATA_ROOT,
    }
