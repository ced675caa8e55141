"""Branch-scoped create/edit/delete workflow for content records.

Every mutation runs as a linear sequence of remote calls:

    Idle -> BranchPreparing -> (ImagesUploading) -> (ImagesDeleting)
         -> DocumentWriting -> PRCreating -> AutoMergeRequesting -> Done

Delete replaces the image and document steps with FilesDeleting. Each
step needs the previous step's output (branch name, file shas), so calls
are strictly sequential. A failing step stops the run; steps already
completed are not rolled back, leaving the branch for a maintainer to
inspect or delete.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from content_workflow.clients import ClientError, GitHubClient, NotFoundError
from content_workflow.records import (
    Collection,
    empty_document,
    encode_document,
    serialize,
    validate_uid,
)
from schemas.draft import Draft
from schemas.github import BranchHead, PullRequest
from schemas.outcome import MutationOutcome, MutationStage

logger = logging.getLogger(__name__)

StatusCallback = Callable[[MutationStage, str], None]

STATUS_MESSAGES = {
    MutationStage.BRANCH_PREPARING: "Preparing branch…",
    MutationStage.IMAGES_UPLOADING: "Uploading images…",
    MutationStage.IMAGES_DELETING: "Deleting images…",
    MutationStage.FILES_DELETING: "Deleting files…",
    MutationStage.DOCUMENT_WRITING: "Saving JSON…",
    MutationStage.PR_CREATING: "Creating PR…",
    MutationStage.AUTO_MERGE_REQUESTING: "Requesting auto-merge…",
}


class _Run:
    """Progress of one orchestrator call, reported as it advances."""

    def __init__(self, outcome: MutationOutcome, on_status: StatusCallback | None):
        self.outcome = outcome
        self._on_status = on_status

    def write_log(self, message: str, level: str | None = None) -> None:
        entry: dict = {
            "timestamp": str(datetime.now(timezone.utc)),
            "stage": self.outcome.stage.value,
            "message": message,
        }
        if level:
            entry["level"] = level
        self.outcome.log.append(entry)

    def enter(self, stage: MutationStage, message: str | None = None) -> None:
        message = message or STATUS_MESSAGES.get(stage, stage.value)
        self.outcome.stage = stage
        self.outcome.status = message
        self.write_log(message)
        logger.info(f"[{self.outcome.operation} {self.outcome.uid}] {message}")
        if self._on_status is not None:
            self._on_status(stage, message)


class MutationOrchestrator:
    """Turns record edits into a branch, commits and an auto-merge PR.

    Holds no state between calls: each operation derives a fresh branch
    from the current default-branch head and returns a MutationOutcome.
    Remote failures do not raise; they are reported in the outcome with
    the stage that failed and the last status shown.

    Example:
        orchestrator = MutationOrchestrator(gateway, ARTICLES, on_status=print_status)
        outcome = orchestrator.save(draft)
        if outcome.ok:
            print(outcome.pr_url)
    """

    PR_BODIES = {
        "create": "Create via admin",
        "edit": "Edit via admin",
        "delete": "Delete via admin",
    }

    def __init__(
        self,
        gateway: GitHubClient,
        collection: Collection,
        on_status: StatusCallback | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.gateway = gateway
        self.collection = collection
        self.on_status = on_status
        self.clock = clock

    def branch_name(self, uid: str) -> str:
        """A branch name unique per attempt: collection, uid and a millisecond timestamp."""
        return f"content/{self.collection.name}/{uid}-{int(self.clock() * 1000)}"

    def pr_title(self, operation: str, uid: str) -> str:
        kind = self.collection.kind
        if operation == "create":
            return f"Content: new {kind} {uid}"
        if operation == "delete":
            return f"Content: delete {kind} {uid}"
        return f"Content: {kind} {uid}"

    def save(self, draft: Draft) -> MutationOutcome:
        """Commit a draft's uploads, removals and document on a new branch and open a PR."""
        if draft.collection != self.collection.name:
            raise ValueError(
                f"Draft belongs to '{draft.collection}', not '{self.collection.name}'"
            )
        uid = validate_uid(draft.uid)
        run = self._start("edit", uid)
        return self._execute(run, lambda: self._save_steps(run, draft))

    def create_new(self, uid: str) -> MutationOutcome:
        """Open a PR adding a record with empty fields in every language."""
        uid = validate_uid(uid)
        run = self._start("create", uid)
        return self._execute(run, lambda: self._create_steps(run, uid))

    def delete(self, uid: str) -> MutationOutcome:
        """Open a PR removing a record's document and all of its images."""
        uid = validate_uid(uid)
        run = self._start("delete", uid)
        return self._execute(run, lambda: self._delete_steps(run, uid))

    def _start(self, operation: str, uid: str) -> _Run:
        outcome = MutationOutcome(
            operation=operation, uid=uid, collection=self.collection.name
        )
        return _Run(outcome, self.on_status)

    def _execute(self, run: _Run, steps: Callable[[], None]) -> MutationOutcome:
        outcome = run.outcome
        try:
            steps()
        except (ClientError, OSError) as e:
            outcome.ok = False
            outcome.error = getattr(e, "message", None) or str(e)
            outcome.status_code = getattr(e, "status_code", None)
            run.write_log(outcome.error, level="ERROR")
            logger.error(
                f"{outcome.operation} {outcome.uid} failed during "
                f"{outcome.stage.value}: {outcome.error}"
            )
            if outcome.branch:
                logger.warning(f"Branch {outcome.branch} left in place for review")
        return outcome

    def _save_steps(self, run: _Run, draft: Draft) -> None:
        uid = run.outcome.uid
        base = self._prepare_branch(run, uid)
        branch = run.outcome.branch

        if draft.pending_uploads:
            run.enter(MutationStage.IMAGES_UPLOADING)
            self._upload_images(draft, branch)

        if draft.removed_images:
            run.enter(MutationStage.IMAGES_DELETING)
            self._delete_images(uid, draft.removed_images, base, branch)

        run.enter(MutationStage.DOCUMENT_WRITING)
        self._write_document(
            uid,
            serialize(draft),
            f"save {self.collection.kind} {uid}",
            branch,
            overwrite=True,
        )

        pr = self._open_pull_request(run, "edit", branch, base)
        self._request_auto_merge(run, pr)
        self._finish(
            run,
            f"PR created: #{pr.number}. Auto-merge after checks.",
            "Changes saved. Publishing happens automatically after checks.",
        )

    def _create_steps(self, run: _Run, uid: str) -> None:
        if self.gateway.read_file(self.collection.index_path(uid)) is not None:
            raise ClientError(f"{self.collection.kind.capitalize()} '{uid}' already exists")

        base = self._prepare_branch(run, uid)
        branch = run.outcome.branch

        run.enter(MutationStage.DOCUMENT_WRITING)
        self._write_document(
            uid,
            empty_document(self.collection),
            f"create {self.collection.kind} {uid}",
            branch,
            overwrite=False,
        )

        pr = self._open_pull_request(run, "create", branch, base)
        self._request_auto_merge(run, pr)
        self._finish(run, f"PR created: #{pr.number}", f"PR created: #{pr.number}")

    def _delete_steps(self, run: _Run, uid: str) -> None:
        base = self._prepare_branch(run, uid)
        branch = run.outcome.branch

        run.enter(MutationStage.FILES_DELETING)
        deleted = 0
        entries = self.gateway.list_directory(self.collection.record_dir(uid), ref=base.name)
        index_sha = next(
            (e.sha for e in entries if e.name == "index.json" and e.type == "file"),
            None,
        )
        if index_sha:
            self.gateway.delete_file(
                self.collection.index_path(uid),
                f"delete {self.collection.kind} {uid}",
                index_sha,
                branch,
            )
            deleted += 1

        for entry in self.gateway.list_directory(self.collection.images_dir(uid), ref=base.name):
            if entry.type != "file":
                continue
            self.gateway.delete_file(
                self.collection.image_path(uid, entry.name),
                f"delete image {entry.name}",
                entry.sha,
                branch,
            )
            deleted += 1

        if not deleted:
            raise NotFoundError(f"No files found for {self.collection.kind} '{uid}'")

        pr = self._open_pull_request(run, "delete", branch, base)
        self._request_auto_merge(run, pr)
        self._finish(
            run,
            f"PR created: #{pr.number} (deletion)",
            f"PR created: #{pr.number} (deletion)",
        )

    def _prepare_branch(self, run: _Run, uid: str) -> BranchHead:
        run.enter(MutationStage.BRANCH_PREPARING)
        base = self.gateway.get_default_branch_head()
        branch = self.branch_name(uid)
        self.gateway.create_branch(branch, base.sha)
        run.outcome.branch = branch
        run.write_log(f"Branch {branch} from {base.name}@{base.sha[:7]}")
        return base

    def _upload_images(self, draft: Draft, branch: str) -> None:
        existing = {
            entry.name: entry.sha
            for entry in self.gateway.list_directory(
                self.collection.images_dir(draft.uid), ref=branch
            )
        }
        for upload in draft.pending_uploads:
            content = upload.path.read_bytes()
            self.gateway.write_file(
                self.collection.image_path(draft.uid, upload.name),
                content,
                f"upload image {upload.name}",
                branch,
                sha=existing.get(upload.name),
            )

    def _delete_images(
        self, uid: str, names: list[str], base: BranchHead, branch: str
    ) -> None:
        # Shas are resolved from a fresh listing of the base ref, never cached.
        shas = {
            entry.name: entry.sha
            for entry in self.gateway.list_directory(
                self.collection.images_dir(uid), ref=base.name
            )
            if entry.type == "file"
        }
        for name in names:
            sha = shas.get(name)
            if not sha:
                logger.info(f"Image {name} not present on {base.name}; nothing to delete")
                continue
            self.gateway.delete_file(
                self.collection.image_path(uid, name),
                f"delete image {name}",
                sha,
                branch,
            )

    def _write_document(
        self,
        uid: str,
        document: list[dict],
        message: str,
        branch: str,
        overwrite: bool,
    ) -> None:
        path = self.collection.index_path(uid)
        sha = None
        if overwrite:
            current = self.gateway.read_file(path, ref=branch)
            sha = current.sha if current is not None else None
        self.gateway.write_file(path, encode_document(document), message, branch, sha=sha)

    def _open_pull_request(
        self, run: _Run, operation: str, branch: str, base: BranchHead
    ) -> PullRequest:
        run.enter(MutationStage.PR_CREATING)
        pr = self.gateway.create_pull_request(
            self.pr_title(operation, run.outcome.uid),
            branch,
            base.name,
            self.PR_BODIES[operation],
        )
        run.outcome.pr_number = pr.number
        run.outcome.pr_url = pr.html_url or self.gateway.pull_request_url(pr.number)
        return pr

    def _request_auto_merge(self, run: _Run, pr: PullRequest) -> None:
        run.enter(MutationStage.AUTO_MERGE_REQUESTING)
        try:
            run.outcome.auto_merge = self.gateway.request_auto_merge(pr.node_id)
        except ClientError as e:
            logger.warning(f"Auto-merge for PR #{pr.number} not enabled: {e}")
            run.outcome.auto_merge = False
        if not run.outcome.auto_merge:
            run.write_log(f"Auto-merge not enabled for PR #{pr.number}", level="WARNING")

    def _finish(self, run: _Run, status: str, notice: str) -> None:
        run.outcome.ok = True
        run.outcome.notice = notice
        run.enter(MutationStage.DONE, status)
