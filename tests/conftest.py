"""Pytest fixtures for content-workflow tests."""

import base64
import json
from unittest.mock import MagicMock

import httpx
import pytest

from content_workflow.clients import Credential, GitHubClient
from content_workflow.records import ARTICLES, SCHEDULE
from schemas.github import BranchHead, ContentEntry, FileContent, PullRequest


def make_response(data=None, status_code=200, url="https://api.github.com/test"):
    """Create a mock httpx response."""
    response = MagicMock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    response.url = url
    response.json.return_value = data
    return response


def encode_file(document, path="data/articles/x/index.json", sha="file-sha"):
    """Contents API payload for a JSON document, wrapped like GitHub does."""
    encoded = base64.b64encode(json.dumps(document).encode("utf-8")).decode("ascii")
    wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "sha": sha,
        "encoding": "base64",
        "content": wrapped,
    }


@pytest.fixture
def github_config():
    """Configuration for GitHubClient."""
    return {"owner": "parish", "repo": "site"}


@pytest.fixture
def credential():
    """An acquired credential."""
    return Credential("test-token")


@pytest.fixture
def github_client(github_config, credential):
    """GitHubClient with its httpx client replaced by a mock."""
    client = GitHubClient(github_config, credential)
    client._client = MagicMock()
    return client


@pytest.fixture
def articles():
    return ARTICLES


@pytest.fixture
def schedule():
    return SCHEDULE


@pytest.fixture
def sample_article_document():
    """index.json of an existing article with uk and en variants."""
    return [
        {
            "language": "uk",
            "category": "news",
            "title": "Свято",
            "date": "2025-01-07",
            "excerpt": "Коротко",
            "content": "Перший рядок\nДругий рядок",
            "images": ["a.jpg", "b.jpg"],
        },
        {
            "language": "en",
            "category": "news",
            "title": "Feast",
            "date": "2025-01-07",
            "excerpt": "",
            "content": "",
            "images": ["a.jpg"],
        },
    ]


@pytest.fixture
def mock_gateway():
    """A GitHubClient double for orchestrator tests.

    The default branch is "main" at sha "S", nothing exists remotely, and
    every write succeeds.
    """
    gateway = MagicMock(spec=GitHubClient)
    gateway.get_default_branch_head.return_value = BranchHead(name="main", sha="S")
    gateway.create_branch.return_value = True
    gateway.read_file.return_value = None
    gateway.list_directory.return_value = []
    gateway.create_pull_request.return_value = PullRequest(
        number=42,
        node_id="PR_node42",
        html_url="https://github.com/parish/site/pull/42",
    )
    gateway.request_auto_merge.return_value = True
    return gateway


def entry(name, sha, type="file", path=""):
    """Directory listing entry."""
    return ContentEntry(name=name, sha=sha, type=type, path=path or name)


def file_content(path, sha):
    """A FileContent with an empty payload, for sha lookups."""
    return FileContent(path=path, sha=sha, content="")


def use_transport(client, handler):
    """Route a client's requests through an httpx.MockTransport handler."""
    client._client = httpx.Client(
        base_url=client.base_url,
        headers=client.headers,
        transport=httpx.MockTransport(handler),
    )
    return client
