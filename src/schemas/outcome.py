"""Schemas describing the result of a mutation and list previews."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel


class MutationStage(str, Enum):
    """States of the mutation workflow, in the order they are entered."""

    IDLE = "idle"
    BRANCH_PREPARING = "branch_preparing"
    IMAGES_UPLOADING = "images_uploading"
    IMAGES_DELETING = "images_deleting"
    FILES_DELETING = "files_deleting"
    DOCUMENT_WRITING = "document_writing"
    PR_CREATING = "pr_creating"
    AUTO_MERGE_REQUESTING = "auto_merge_requesting"
    DONE = "done"


class MutationOutcome(BaseModel):
    """Structured result returned by every orchestrator operation.

    Attributes:
        ok: True once the pull request exists; auto-merge does not affect it
        operation: Which workflow ran
        uid: Record identifier
        collection: Collection name
        stage: Last stage entered; on failure, the stage that failed
        branch: Branch created for this attempt, if any
        pr_number: Number of the opened pull request
        pr_url: Browser URL of the pull request
        auto_merge: Whether the auto-merge request was accepted
        error: Error message when ok is False
        status_code: HTTP status of the failing call, when there was one
        status: Last progress status shown to the user
        notice: Message for the caller to surface on success
        log: Timestamped progress entries
    """

    ok: bool = False
    operation: Literal["create", "edit", "delete"]
    uid: str
    collection: str
    stage: MutationStage = MutationStage.IDLE
    branch: str | None = None
    pr_number: int | None = None
    pr_url: str | None = None
    auto_merge: bool | None = None
    error: str | None = None
    status_code: int | None = None
    status: str = ""
    notice: str | None = None
    log: list[dict] = []


class Preview(BaseModel):
    """One record's display-language variant for list views.

    Carries the record uid plus whatever fields the chosen variant has.
    Display fields are taken as stored, whatever their type, so a record
    with a numeric title or category is still listed.
    """

    uid: str
    language: Any = None
    category: Any = None
    title: Any = None

    model_config = {"extra": "allow"}
