"""Controllers that drive the list and create views."""

from .base import FetchStatus, OptionsStatus, StateController, SubmitStatus
from .create_submission import CreateState, CreateSubmissionController
from .list_sync import ListState, ListSyncController

__all__ = [
    "CreateState",
    "CreateSubmissionController",
    "FetchStatus",
    "ListState",
    "ListSyncController",
    "OptionsStatus",
    "StateController",
    "SubmitStatus",
]
