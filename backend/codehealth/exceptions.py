"""Domain exceptions for repository analysis."""

from datetime import datetime


class CodeHealthError(Exception):
    """Base error for the analysis backend."""


class InvalidUrlError(CodeHealthError):
    """Repository URL does not look like a GitHub repository."""


class GitHubError(CodeHealthError):
    """GitHub API call failed."""


class RepoNotFoundError(GitHubError):
    """Repository does not exist or is not public."""


class RateLimitError(GitHubError):
    """GitHub API rate limit is exhausted."""

    def __init__(self, message: str, reset_at: datetime | None = None):
        super().__init__(message)
        self.reset_at = reset_at


class FetchError(GitHubError):
    """Network failure or unexpected GitHub API response."""


class AnalysisTimeoutError(CodeHealthError):
    """Analysis run exceeded its wall-clock budget."""


class AnalysisFailedError(CodeHealthError):
    """Analysis run ended in the failed state.

    The persisted record already carries the error message when this is raised.
    """

    def __init__(self, message: str, analysis_id: str):
        super().__init__(message)
        self.analysis_id = analysis_id


class AnalysisNotFoundError(CodeHealthError):
    """No analysis record with the given id is visible to the caller."""


class PersistenceError(CodeHealthError):
    """Analysis record could not be written."""


class AnalysisNotCompletedError(CodeHealthError):
    """Operation needs a completed analysis."""
