"""Schemas for the subset of GitHub API payloads the gateway consumes."""

import base64
from typing import Literal

from pydantic import BaseModel


class RepositoryInfo(BaseModel):
    """Repository metadata (GET /repos/{owner}/{repo})."""

    full_name: str | None = None
    default_branch: str = "main"

    model_config = {"extra": "ignore"}


class BranchHead(BaseModel):
    """Name and head commit of a branch."""

    name: str
    sha: str


class ContentEntry(BaseModel):
    """One entry of a directory listing (GET /contents/{dir}).

    Attributes:
        name: Entry name without the directory prefix
        path: Full repository path
        type: Entry type as reported by the API
        sha: Blob or tree sha; required to delete a file
    """

    name: str
    path: str = ""
    type: Literal["file", "dir", "symlink", "submodule"] = "file"
    sha: str

    model_config = {"extra": "ignore"}


class FileContent(BaseModel):
    """A file read from the contents API.

    The API returns the payload base64-encoded, wrapped at 60 columns.
    Callers decode it with ``decoded()`` or ``text()``.
    """

    name: str = ""
    path: str
    sha: str
    encoding: str = "base64"
    content: str = ""

    model_config = {"extra": "ignore"}

    def decoded(self) -> bytes:
        if self.encoding != "base64":
            return self.content.encode("utf-8")
        return base64.b64decode("".join(self.content.split()))

    def text(self) -> str:
        return self.decoded().decode("utf-8")


class CommitResult(BaseModel):
    """Result of a contents write or delete.

    Attributes:
        commit_sha: Sha of the commit created on the target branch
        content_sha: Blob sha of the written file; None after a delete
    """

    commit_sha: str | None = None
    content_sha: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "CommitResult":
        commit = data.get("commit") or {}
        content = data.get("content") or {}
        return cls(commit_sha=commit.get("sha"), content_sha=content.get("sha"))


class PullRequest(BaseModel):
    """A pull request as returned by POST /pulls.

    Attributes:
        number: Repository-scoped PR number
        node_id: GraphQL node id, used to request auto-merge
        html_url: Browser URL of the PR
    """

    number: int
    node_id: str
    html_url: str | None = None

    model_config = {"extra": "ignore"}
