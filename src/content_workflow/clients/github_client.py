"""GitHub API client: the remote repository gateway for content mutations."""

import base64
import json
import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from schemas.github import (
    BranchHead,
    CommitResult,
    ContentEntry,
    FileContent,
    PullRequest,
    RepositoryInfo,
)

from .client import Client
from .credential import Credential
from .exceptions import (
    APIError,
    AuthenticationError,
    ClientError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

AUTO_MERGE_MUTATION = """
mutation($id: ID!, $method: PullRequestMergeMethod!) {
  enablePullRequestAutoMerge(input: {pullRequestId: $id, mergeMethod: $method}) {
    pullRequest { number }
  }
}
"""

BRANCH_EXISTS_MESSAGE = "Reference already exists"


class GitHubClient(Client):
    """Client for the GitHub contents, refs, pulls and GraphQL endpoints.

    Wraps exactly the calls the content workflow needs. Absent files and
    directories are returned as values (None, []) rather than raised;
    every other non-2xx response raises. No call is retried.

    Config keys (in addition to the base Client keys):
        owner (required): Repository owner
        repo (required): Repository name
        ref: Ref used for reads when the caller passes none (default: the
            repository's default branch, as resolved by GitHub)
        web_url: Browser base URL for PR links (default: https://github.com)

    Example:
        config = {"owner": "parish", "repo": "site"}
        with GitHubClient(config, Credential.from_env()) as gateway:
            entries = gateway.list_directory("data/articles")
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_WEB_URL = "https://github.com"
    GRAPHQL_PATH = "/graphql"

    def __init__(self, config: dict, credential: Credential):
        config = {"base_url": self.DEFAULT_BASE_URL, **config}
        for key in ("owner", "repo"):
            if not config.get(key):
                raise ValueError(f"config must include '{key}'")

        super().__init__(config)
        self.credential = credential

    @property
    def owner(self) -> str:
        return str(self._config["owner"])

    @property
    def repo(self) -> str:
        return str(self._config["repo"])

    @property
    def ref(self) -> str | None:
        return self._config.get("ref") or None

    @property
    def web_url(self) -> str:
        return str(self._config.get("web_url", self.DEFAULT_WEB_URL)).rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            **super().headers,
        }

    def _request_headers(self) -> dict[str, str]:
        return self.credential.authorization_header()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return super()._request(method, path, **kwargs)
        except AuthenticationError:
            self.credential.invalidate()
            raise

    def _repo_path(self, suffix: str) -> str:
        return f"/repos/{self.owner}/{self.repo}{suffix}"

    def _contents_path(self, path: str) -> str:
        return self._repo_path(f"/contents/{quote(path.strip('/'))}")

    def _ref_params(self, ref: str | None) -> dict[str, str]:
        ref = ref or self.ref
        return {"ref": ref} if ref else {}

    def _validate(self, model: type[ModelT], data: Any, what: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Unexpected {what} payload",
                errors=[str(err) for err in e.errors()],
            ) from e

    def read_file(self, path: str, ref: str | None = None) -> FileContent | None:
        """Fetch a file's content and sha.

        Args:
            path: Repository path of the file
            ref: Branch, tag or commit to read from

        Returns:
            The file, or None if it does not exist

        Raises:
            ValidationError: If the path is a directory or the payload is malformed
            APIError: For any non-2xx response other than 404
        """
        try:
            response = self.get(self._contents_path(path), params=self._ref_params(ref))
        except NotFoundError:
            logger.debug(f"File not found: {path}")
            return None

        data = response.json()
        if isinstance(data, list):
            raise ValidationError(f"Expected a file but found a directory: {path}")
        return self._validate(FileContent, data, "file content")

    def read_json(self, path: str, ref: str | None = None) -> Any:
        """Fetch and parse a JSON file.

        Returns:
            The parsed document, or None if the file does not exist

        Raises:
            ValueError: If the file is not valid UTF-8 JSON
        """
        file = self.read_file(path, ref=ref)
        if file is None:
            return None
        return json.loads(file.text())

    def list_directory(self, path: str, ref: str | None = None) -> list[ContentEntry]:
        """List a directory's entries.

        Args:
            path: Repository path of the directory
            ref: Branch, tag or commit to read from

        Returns:
            The entries; an empty list if the directory does not exist
        """
        try:
            response = self.get(self._contents_path(path), params=self._ref_params(ref))
        except NotFoundError:
            logger.debug(f"Directory not found: {path}")
            return []

        data = response.json()
        if isinstance(data, dict):
            data = [data]
        return [self._validate(ContentEntry, item, "directory entry") for item in data]

    def write_file(
        self,
        path: str,
        content: bytes | str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> CommitResult:
        """Create or update a file on a branch in a single commit.

        Args:
            path: Repository path of the file
            content: Raw file content; text is encoded as UTF-8
            message: Commit message
            branch: Target branch
            sha: Current blob sha; required when overwriting, omitted on create

        Returns:
            The commit and blob shas

        Raises:
            StaleVersionError: If sha no longer matches the file on the branch
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        body = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha

        response = self.put(self._contents_path(path), json=body)
        logger.debug(f"Wrote {path} on {branch}")
        return CommitResult.from_api(response.json())

    def delete_file(self, path: str, message: str, sha: str, branch: str) -> CommitResult:
        """Delete a file on a branch.

        Args:
            path: Repository path of the file
            message: Commit message
            sha: Current blob sha, freshly resolved by the caller
            branch: Target branch
        """
        body = {"message": message, "sha": sha, "branch": branch}
        response = self.delete(self._contents_path(path), json=body)
        logger.debug(f"Deleted {path} on {branch}")
        return CommitResult.from_api(response.json())

    def get_repository(self) -> RepositoryInfo:
        response = self.get(self._repo_path(""))
        return self._validate(RepositoryInfo, response.json(), "repository")

    def get_default_branch(self) -> str:
        return self.get_repository().default_branch

    def get_branch_head(self, branch: str) -> str:
        """Return the commit sha a branch points at."""
        response = self.get(self._repo_path(f"/git/ref/heads/{quote(branch)}"))
        sha = (response.json().get("object") or {}).get("sha")
        if not sha:
            raise ValidationError(f"Branch {branch} has no head commit")
        return sha

    def get_default_branch_head(self) -> BranchHead:
        name = self.get_default_branch()
        return BranchHead(name=name, sha=self.get_branch_head(name))

    def create_branch(self, name: str, from_sha: str) -> bool:
        """Create a branch pointing at a commit.

        Returns:
            True if created, False if a branch with that name already exists

        Raises:
            APIError: For other failures, including a 422 for an unknown
                sha or an invalid ref name
        """
        body = {"ref": f"refs/heads/{name}", "sha": from_sha}
        try:
            self.post(self._repo_path("/git/refs"), json=body)
        except APIError as e:
            if e.status_code != 422 or BRANCH_EXISTS_MESSAGE not in e.message:
                raise
            logger.info(f"Branch {name} already exists")
            return False
        logger.info(f"Created branch {name} from {from_sha[:7]}")
        return True

    def create_pull_request(self, title: str, head: str, base: str, body: str) -> PullRequest:
        payload = {"title": title, "head": head, "base": base, "body": body}
        response = self.post(self._repo_path("/pulls"), json=payload)
        pr = self._validate(PullRequest, response.json(), "pull request")
        logger.info(f"Opened PR #{pr.number}: {base} <- {head}")
        return pr

    def request_auto_merge(self, node_id: str, merge_method: str = "SQUASH") -> bool:
        """Ask GitHub to merge a PR once its required checks pass.

        Best effort: permission problems, repositories without auto-merge,
        transport failures and GraphQL errors are logged and reported as
        False, never raised.
        """
        payload = {
            "query": AUTO_MERGE_MUTATION,
            "variables": {"id": node_id, "method": merge_method},
        }
        try:
            data = self.post(self.GRAPHQL_PATH, json=payload).json()
        except (ClientError, ValueError) as e:
            logger.warning(f"Auto-merge request failed: {e}")
            return False

        errors = data.get("errors") if isinstance(data, dict) else None
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            logger.warning(f"Auto-merge not enabled: {messages}")
            return False
        return True

    def pull_request_url(self, number: int) -> str:
        return f"{self.web_url}/{self.owner}/{self.repo}/pull/{number}"
