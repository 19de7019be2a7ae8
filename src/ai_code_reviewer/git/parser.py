"""
Staged Patch Parser

Turns raw git output into review inputs: filters the staged file listing
by suffix and reduces a unified patch to its added/removed lines.
"""

import logging
from typing import Iterable, List, Sequence


logger = logging.getLogger(__name__)


class PatchParser:
    """
    Pure text helpers for git listings and patches.

    Holds no state beyond the configured extension filter, so one instance
    can be shared by every per-file unit.
    """

    LISTING_SEPARATOR = '\0'
    CHANGE_MARKERS = ('+', '-')
    HEADER_PREFIXES = ('+++', '---')
    FORBIDDEN_PATH_CHARS = ('\x00', '\n', '\r')

    def __init__(self, file_extensions: Sequence[str] = (".ts", ".tsx")):
        """
        Initialize patch parser.

        Args:
            file_extensions: Suffixes a path must end with to be reviewed
        """
        self.file_extensions = tuple(file_extensions)

    def parse_file_listing(self, listing: str) -> List[str]:
        """
        Split a NUL separated listing (``git diff -z``) and keep matching paths.

        Paths are taken verbatim, so names containing quotes, backslashes,
        tabs or newlines reach the fetch step unmangled.

        Args:
            listing: Raw output of the staged file listing

        Returns:
            Paths whose suffix matches a configured extension, in input order
        """
        paths = [path for path in listing.split(self.LISTING_SEPARATOR) if path]
        matching = [path for path in paths if self.matches_extension(path)]
        logger.debug(f"Listing had {len(paths)} paths, {len(matching)} match {self.file_extensions}")
        return matching

    def matches_extension(self, file_path: str) -> bool:
        """Case-sensitive exact suffix match."""
        return file_path.endswith(self.file_extensions)

    def select_changed_lines(self, patch: str) -> List[str]:
        """
        Keep added/removed lines of a patch, dropping the file header lines.

        Only '\\n' ends a line; form feeds and other Unicode line breaks
        are content.

        Args:
            patch: Raw unified diff text

        Returns:
            Lines still carrying their leading marker
        """
        lines = (line.removesuffix('\r') for line in patch.split('\n'))
        return [
            line for line in lines
            if line.startswith(self.CHANGE_MARKERS) and not line.startswith(self.HEADER_PREFIXES)
        ]

    def strip_markers(self, lines: Iterable[str]) -> List[str]:
        """Remove one leading '+' or '-' from each line that has one."""
        return [line[1:] if line.startswith(self.CHANGE_MARKERS) else line for line in lines]

    def extract_changed_content(self, patch: str) -> str:
        """
        Reduce a staged patch to its changed content.

        Args:
            patch: Raw unified diff text for one file

        Returns:
            Newline joined added/removed lines without markers, or an empty
            string when nothing but whitespace changed
        """
        content = '\n'.join(self.strip_markers(self.select_changed_lines(patch)))
        return content if content.strip() else ''

    def is_safe_path(self, file_path: str) -> bool:
        """Reject paths that would break argument or line boundaries."""
        return bool(file_path) and not any(ch in file_path for ch in self.FORBIDDEN_PATH_CHARS)
