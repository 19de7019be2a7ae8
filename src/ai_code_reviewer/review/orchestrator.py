"""
Review Orchestrator

Main pipeline that takes the staged change set from discovery to
printed per-file reviews.
"""

import asyncio
import contextlib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from ..config import AppConfig, ConfigValidator
from ..exceptions import FetchError, ReviewServiceError
from ..formatting.console import ConsoleFormatter
from ..git.client import GitClient
from ..git.parser import PatchParser
from ..laas.client import LaaSClient
from ..models.file_diff import ChangeSet
from ..models.review import (
    ALLOWED_TRANSITIONS,
    FileReviewState,
    ReviewOutcome,
    ReviewResult,
)
from .discoverer import ChangeSetDiscoverer
from .fetcher import FileDiffFetcher


logger = logging.getLogger(__name__)


@dataclass
class FileReviewUnit:
    """State holder for one file's pass through the pipeline."""
    file: str
    state: FileReviewState = FileReviewState.PENDING

    def transition(self, new_state: FileReviewState) -> None:
        if new_state not in ALLOWED_TRANSITIONS.get(self.state, set()):
            raise ValueError(f"{self.file}: illegal transition {self.state.value} -> {new_state.value}")
        logger.debug(f"{self.file}: {self.state.value} -> {new_state.value}")
        self.state = new_state


class ReviewOrchestrator:
    """
    Drives a review run.

    1. Validate configuration
    2. Resolve the repository root and discover the change set
    3. Fan out one independent unit per file (fetch, review, print)
    4. Join all units; per-file failures never change the exit status
    """

    def __init__(
        self,
        config: AppConfig,
        git_client: Optional[GitClient] = None,
        laas_client: Optional[LaaSClient] = None,
        verbose: bool = False,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        """
        Initialize review orchestrator.

        Args:
            config: Application configuration
            git_client: Git client (created when omitted)
            laas_client: Review service client (created when omitted)
            verbose: Print a changed-content preview per file
            out: Stream for reviews (default: stdout)
            err: Stream for per-file errors (default: stderr)
        """
        self.config = config
        self.verbose = verbose
        self.out = out
        self.err = err

        self.git_client = git_client or GitClient()
        self._laas_client = laas_client

        parser = PatchParser(config.review.file_extensions)
        self.discoverer = ChangeSetDiscoverer(self.git_client, parser)
        self.fetcher = FileDiffFetcher(self.git_client, parser)
        self.formatter = ConsoleFormatter(preview_length=config.review.preview_length)

    @property
    def laas_client(self) -> LaaSClient:
        # Created on first review
        if self._laas_client is None:
            self._laas_client = LaaSClient(self.config.laas)
        return self._laas_client

    async def run(self) -> int:
        """
        Run the whole pipeline.

        Returns:
            Exit status (0 whenever no fatal stage failed)

        Raises:
            ConfigurationError: If the configuration is invalid
            RepositoryError: If the repository root cannot be resolved
            DiscoveryError: If the staged file listing fails
        """
        ConfigValidator(self.config).validate()

        repo_root = await self.discoverer.repo_root()
        change_set = await self.discoverer.discover(repo_root)

        if change_set.is_empty:
            self._print(self.formatter.NOTHING_TO_REVIEW)
            return 0

        for line in self.formatter.format_change_list(change_set):
            self._print(line)

        outcome = await self.review_all(repo_root, change_set)

        logger.info(
            f"Review run finished: {outcome.count(FileReviewState.REPORTED)} reported, "
            f"{outcome.count(FileReviewState.SKIPPED)} skipped, "
            f"{outcome.count(FileReviewState.FAILED)} failed"
        )
        return 0

    async def review_all(self, repo_root: Path, change_set: ChangeSet) -> ReviewOutcome:
        """
        Review every file concurrently and wait for all of them.

        Args:
            repo_root: Repository root directory
            change_set: Files to review

        Returns:
            One result per file, in change set order
        """
        limit = self.config.review.max_concurrency
        semaphore = asyncio.Semaphore(limit) if limit else None

        results = await asyncio.gather(
            *(self._review_file(repo_root, file, semaphore) for file in change_set)
        )
        return ReviewOutcome(results=list(results))

    async def _review_file(
        self,
        repo_root: Path,
        file: str,
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> ReviewResult:
        """One per-file unit. Never raises; failures become a FAILED result."""
        async with semaphore or contextlib.nullcontext():
            unit = FileReviewUnit(file)
            result = await self._process(repo_root, unit)

        self._report(result)
        return result

    async def _process(self, repo_root: Path, unit: FileReviewUnit) -> ReviewResult:
        file = unit.file
        try:
            unit.transition(FileReviewState.FETCHING)
            file_diff = await self.fetcher.fetch(repo_root, file)

            if not file_diff.is_reviewable:
                unit.transition(FileReviewState.SKIPPED)
                logger.info(f"{file}: nothing to review")
                return ReviewResult.skipped(file)

            unit.transition(FileReviewState.REVIEWING)
            if self.verbose:
                self._print(self.formatter.format_preview(file, file_diff))

            response = await asyncio.to_thread(self.laas_client.review, file_diff)

            unit.transition(FileReviewState.REPORTED)
            return ReviewResult.reported(file, response.content, response.metadata())

        except FetchError as e:
            logger.info(f"{file}: fetch failed: {e.reason}")
            return self._fail(unit, e.reason)
        except ReviewServiceError as e:
            logger.info(f"{file}: review failed: {e}")
            return self._fail(unit, str(e))
        except Exception as e:
            logger.exception(f"{file}: unexpected error during review")
            return self._fail(unit, f"{type(e).__name__}: {e}")

    @staticmethod
    def _fail(unit: FileReviewUnit, error: str) -> ReviewResult:
        if FileReviewState.FAILED in ALLOWED_TRANSITIONS.get(unit.state, set()):
            unit.transition(FileReviewState.FAILED)
        return ReviewResult.failed(unit.file, error)

    def _report(self, result: ReviewResult) -> None:
        if result.state == FileReviewState.REPORTED:
            self._print(self.formatter.format_result(result))
        elif result.state == FileReviewState.FAILED:
            self._print(self.formatter.format_result(result), error=True)
        elif self.verbose:
            self._print(self.formatter.format_result(result))

    def _print(self, line: str, error: bool = False) -> None:
        stream = (self.err or sys.stderr) if error else (self.out or sys.stdout)
        print(line, file=stream, flush=True)

    def close(self) -> None:
        if self._laas_client is not None:
            self._laas_client.close()
