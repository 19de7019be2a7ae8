"""
Console Formatter

Renders the operator-facing lines of a review run.
"""

from typing import Iterable, List

from ..models.file_diff import FileDiff
from ..models.review import ReviewResult, FileReviewState


class ConsoleFormatter:
    """Formats change lists, reviews and per-file errors for the terminal."""

    NOTHING_TO_REVIEW = "No changed files in the current commit."
    CHANGED_FILES_HEADER = "Changed files in the current commit:"

    def __init__(self, preview_length: int = 100):
        self.preview_length = preview_length

    def format_change_list(self, files: Iterable[str]) -> List[str]:
        return [self.CHANGED_FILES_HEADER] + [f"- {file}" for file in files]

    def format_preview(self, file: str, file_diff: FileDiff) -> str:
        return f"- {file}: {file_diff.preview(self.preview_length)}"

    def format_result(self, result: ReviewResult) -> str:
        """
        Format a terminal result.

        Args:
            result: Result of one per-file unit

        Returns:
            Review block for reported files, scoped error line for failed
            ones, short note for skipped ones
        """
        if result.state == FileReviewState.REPORTED:
            return f"✅ Review for {result.file}:\n{result.content}"
        if result.state == FileReviewState.FAILED:
            return f"❌ Review failed for {result.file}: {result.error}"
        return f"⏭️  Skipped {result.file}: no changed content"
