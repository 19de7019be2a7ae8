"""
Property-based tests for change set filtering.

Property: only paths whose suffix is configured survive, in listing order.
"""

import asyncio
from pathlib import Path

from hypothesis import given, strategies as st

from ai_code_reviewer.git.parser import PatchParser
from ai_code_reviewer.review.discoverer import ChangeSetDiscoverer

from conftest import FakeGitClient


path_segment = st.text(
    alphabet=st.characters(whitelist_categories=('Lu', 'Ll', 'Nd'), whitelist_characters='_-/ "\\\t\n'),
    min_size=1,
    max_size=20,
)
suffix = st.sampled_from(['.ts', '.tsx', '.js', '.py', '.TS', '.md', ''])
paths = st.builds(lambda stem, ext: stem + ext, path_segment, suffix).filter(lambda p: p.strip())


class TestChangeSetFiltering:
    """Property tests for extension filtering of staged listings."""

    @given(
        listing=st.lists(paths, max_size=30, unique=True),
        extensions=st.lists(st.sampled_from(['.ts', '.tsx', '.py']), min_size=1, max_size=3, unique=True),
    )
    def test_filter_is_order_preserving_subsequence(self, listing, extensions):
        """
        Given: A staged listing and a set of suffixes
        When: The listing is filtered
        Then: Exactly the matching paths remain, in their original order
        """
        parser = PatchParser(extensions)

        result = parser.parse_file_listing("\0".join(listing))

        assert result == [p for p in listing if any(p.endswith(ext) for ext in extensions)]

    @given(listing=st.lists(paths, max_size=20, unique=True))
    def test_discoverer_returns_filtered_change_set(self, listing):
        parser = PatchParser((".ts", ".tsx"))
        git_client = FakeGitClient(repo_root=Path("/repo"), listing="\0".join(listing) + "\0")
        discoverer = ChangeSetDiscoverer(git_client, parser)

        change_set = asyncio.run(discoverer.discover())

        assert list(change_set) == [p for p in listing if p.endswith((".ts", ".tsx"))]
        assert git_client.calls[:2] == ["rev-parse", "diff --name-only"]
