"""Schema definitions for content-workflow."""

from .draft import Draft, PendingUpload
from .github import (
    BranchHead,
    CommitResult,
    ContentEntry,
    FileContent,
    PullRequest,
    RepositoryInfo,
)
from .outcome import MutationOutcome, MutationStage, Preview
from .variant import LANGUAGES, ArticleVariant, ScheduleVariant, Variant

__all__ = [
    "LANGUAGES",
    "ArticleVariant",
    "BranchHead",
    "CommitResult",
    "ContentEntry",
    "Draft",
    "FileContent",
    "MutationOutcome",
    "MutationStage",
    "PendingUpload",
    "Preview",
    "PullRequest",
    "RepositoryInfo",
    "ScheduleVariant",
    "Variant",
]
