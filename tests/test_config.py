"""Tests for environment configuration."""

from content_workflow.config import DEFAULT_API_URL, load_config


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self):
        """An empty environment yields defaults and no translation endpoint."""
        config = load_config({})

        assert config["github"]["base_url"] == DEFAULT_API_URL
        assert config["github"]["ref"] is None
        assert config["translate"] is None
        assert config["data_root"] == "data"

    def test_reads_repository_settings(self):
        """Repository owner, name and ref come from the environment."""
        config = load_config({
            "CONTENT_REPO_OWNER": "parish",
            "CONTENT_REPO_NAME": "site",
            "CONTENT_REF": "staging",
            "GITHUB_API_URL": "https://ghe.example/api/v3",
        })

        github = config["github"]
        assert (github["owner"], github["repo"], github["ref"]) == ("parish", "site", "staging")
        assert github["base_url"] == "https://ghe.example/api/v3"

    def test_translation_endpoint(self):
        """A translation URL produces a translate client config."""
        config = load_config({"LIBRE_TRANSLATE_URL": "https://tr.example/"})

        assert config["translate"]["base_url"] == "https://tr.example/"

    def test_blank_translation_endpoint_disables_backfill(self):
        """Whitespace-only URL is treated as unset."""
        assert load_config({"LIBRE_TRANSLATE_URL": "  "})["translate"] is None
