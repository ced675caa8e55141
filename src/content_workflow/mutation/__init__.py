"""Branch-and-pull-request workflow for record mutations."""

from .orchestrator import STATUS_MESSAGES, MutationOrchestrator, StatusCallback

__all__ = ["STATUS_MESSAGES", "MutationOrchestrator", "StatusCallback"]
