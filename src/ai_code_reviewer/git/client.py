"""
Git Client

Async wrapper around the three git commands the review pipeline needs.
Arguments are always passed as a list, never through a shell.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..exceptions import GitError, RepositoryError, DiscoveryError


logger = logging.getLogger(__name__)

# Diff output must not depend on the user's git config
PLAIN_DIFF_OPTIONS = ("--no-color", "--no-ext-diff", "--no-textconv")


class GitClient:
    """
    Runs git as a subprocess without blocking the event loop.

    Provides methods for:
    - repository root lookup
    - staged Added/Copied/Modified file listing
    - per-file staged patch
    """

    def __init__(self, cwd: Optional[Path] = None, executable: str = "git"):
        """
        Initialize git client.

        Args:
            cwd: Directory to run git in (default: current directory)
            executable: git binary name or path
        """
        self.cwd = cwd
        self.executable = executable

    async def _run(self, args: Sequence[str], cwd: Optional[Path] = None) -> str:
        """
        Run a git command and return its stdout.

        Args:
            args: Arguments after the git executable
            cwd: Override working directory

        Returns:
            Decoded stdout

        Raises:
            GitError: If git cannot be started or exits non-zero
        """
        command: List[str] = [self.executable, *args]
        workdir = cwd or self.cwd
        logger.debug(f"Running {command} in {workdir or '.'}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(workdir) if workdir else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise GitError(f"Cannot run {self.executable}: {e}") from e

        stdout, stderr = await process.communicate()
        out = stdout.decode('utf-8', errors='replace')
        err = stderr.decode('utf-8', errors='replace').strip()

        if process.returncode != 0:
            raise GitError(
                err or f"git {' '.join(args)} failed",
                returncode=process.returncode,
                stderr=err,
            )
        return out

    async def get_repo_root(self) -> Path:
        """
        Resolve the top level directory of the current repository.

        Raises:
            RepositoryError: If not inside a repository
        """
        try:
            out = await self._run(["rev-parse", "--show-toplevel"])
        except GitError as e:
            raise RepositoryError(f"Not inside a git repository: {e}", e.returncode, e.stderr) from e

        root = out.strip()
        if not root:
            raise RepositoryError("git rev-parse returned an empty repository root")
        return Path(root)

    async def list_staged_files(self, repo_root: Optional[Path] = None) -> str:
        """
        List staged Added/Copied/Modified paths relative to the repository root.

        The listing is NUL separated and paths are not quoted.

        Raises:
            DiscoveryError: If the listing command fails
        """
        try:
            return await self._run(
                ["diff", "--cached", *PLAIN_DIFF_OPTIONS, "--name-only", "-z", "HEAD", "--diff-filter=ACM"],
                cwd=repo_root,
            )
        except GitError as e:
            raise DiscoveryError(f"Failed to list staged files: {e}", e.returncode, e.stderr) from e

    async def get_staged_patch(self, path: Path, repo_root: Optional[Path] = None) -> str:
        """
        Get the staged patch for a single file.

        Raises:
            GitError: If the diff command fails
        """
        return await self._run(["diff", "--cached", *PLAIN_DIFF_OPTIONS, "--", str(path)], cwd=repo_root)
