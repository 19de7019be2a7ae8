"""
Change Set Discoverer

Finds the staged files that qualify for review.
"""

import logging
from pathlib import Path
from typing import Optional

from ..git.client import GitClient
from ..git.parser import PatchParser
from ..models.file_diff import ChangeSet


logger = logging.getLogger(__name__)


class ChangeSetDiscoverer:
    """Lists staged Added/Copied/Modified files filtered by extension."""

    def __init__(self, git_client: GitClient, parser: PatchParser):
        self.git_client = git_client
        self.parser = parser

    async def repo_root(self) -> Path:
        """
        Resolve the repository root.

        Raises:
            RepositoryError: If the working directory is not inside a repository
        """
        root = await self.git_client.get_repo_root()
        logger.debug(f"Repository root: {root}")
        return root

    async def discover(self, repo_root: Optional[Path] = None) -> ChangeSet:
        """
        Build the change set for this run.

        Args:
            repo_root: Repository root to list from (resolved when omitted)

        Returns:
            Qualifying paths in listing order; empty when nothing qualifies

        Raises:
            RepositoryError: If the root cannot be resolved
            DiscoveryError: If the staged file listing fails
        """
        if repo_root is None:
            repo_root = await self.repo_root()

        listing = await self.git_client.list_staged_files(repo_root)
        files = self.parser.parse_file_listing(listing)

        logger.info(f"Discovered {len(files)} staged files to review")
        return ChangeSet(files=tuple(files))
