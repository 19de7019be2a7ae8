"""
Reviewer Exceptions

Error taxonomy shared by the review pipeline. Fatal errors stop the run
before any per-file work starts; per-file errors are converted into a
failed result at the unit boundary.
"""

from typing import Dict, Optional


class ReviewerError(Exception):
    """Base class for all reviewer errors"""


class ConfigurationError(ReviewerError):
    """Missing or invalid configuration (fatal)"""


class GitError(ReviewerError):
    """A git command failed"""
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class RepositoryError(GitError):
    """Working directory is not inside a git repository (fatal)"""


class DiscoveryError(GitError):
    """Staged file listing failed (fatal)"""


class FetchError(ReviewerError):
    """Content or patch retrieval failed for one file"""
    def __init__(self, file: str, reason: str):
        super().__init__(f"{file}: {reason}")
        self.file = file
        self.reason = reason


class ReviewServiceError(ReviewerError):
    """Review service call failed or returned an error payload"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data
