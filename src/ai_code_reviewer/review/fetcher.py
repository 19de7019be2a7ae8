"""
File Diff Fetcher

Collects the full text and the staged delta of one file.
"""

import asyncio
import logging
from pathlib import Path

from ..exceptions import FetchError, GitError
from ..git.client import GitClient
from ..git.parser import PatchParser
from ..models.file_diff import FileDiff


logger = logging.getLogger(__name__)


class FileDiffFetcher:
    """
    Fetches a FileDiff for a single staged path.

    The disk read and the patch command run concurrently; a failure in
    either is raised as a FetchError for this file only.
    """

    def __init__(self, git_client: GitClient, parser: PatchParser):
        self.git_client = git_client
        self.parser = parser

    async def fetch(self, repo_root: Path, file: str) -> FileDiff:
        """
        Fetch full and changed content of one file.

        Args:
            repo_root: Repository root directory
            file: Path relative to the repository root

        Returns:
            FileDiff for the file (either field may be empty)

        Raises:
            FetchError: If the path is unsafe, the file is unreadable or the
                patch command fails
        """
        if not self.parser.is_safe_path(file):
            raise FetchError(repr(file), "path contains characters that cannot be passed to git")

        full_path = Path(repo_root) / file

        full_content, patch = await asyncio.gather(
            self._read_file(full_path),
            self.git_client.get_staged_patch(full_path, repo_root),
            return_exceptions=True,
        )

        if isinstance(full_content, BaseException):
            if isinstance(full_content, (OSError, UnicodeDecodeError)):
                raise FetchError(file, f"cannot read file: {full_content}") from full_content
            raise full_content
        if isinstance(patch, BaseException):
            if isinstance(patch, GitError):
                raise FetchError(file, f"cannot get staged diff: {patch}") from patch
            raise patch

        changed_content = self.parser.extract_changed_content(patch)
        logger.debug(f"{file}: {len(full_content)} chars total, {len(changed_content)} chars changed")
        return FileDiff(full_content=full_content, changed_content=changed_content)

    @staticmethod
    async def _read_file(path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding='utf-8')
