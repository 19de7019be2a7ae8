"""
Shared fixtures: an in-memory git client and a LaaS response factory.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple
from unittest.mock import Mock

import pytest

from ai_code_reviewer.config import AppConfig, LaaSConfig
from ai_code_reviewer.exceptions import DiscoveryError, GitError, RepositoryError
from ai_code_reviewer.git.client import GitClient


class FakeGitClient(GitClient):
    """GitClient serving canned listings and patches, recording every call."""

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        listing: str = "",
        patches: Optional[Dict[str, str]] = None,
        failing_patches: Tuple[str, ...] = (),
        listing_error: bool = False,
    ):
        super().__init__()
        self.repo_root = repo_root
        self.listing = listing
        self.patches = patches or {}
        self.failing_patches = failing_patches
        self.listing_error = listing_error
        self.calls: List[str] = []

    async def get_repo_root(self) -> Path:
        self.calls.append("rev-parse")
        if self.repo_root is None:
            raise RepositoryError("Not inside a git repository: fatal: not a git repository")
        return self.repo_root

    async def list_staged_files(self, repo_root=None) -> str:
        self.calls.append("diff --name-only")
        if self.listing_error:
            raise DiscoveryError("Failed to list staged files: fatal: bad revision 'HEAD'")
        return self.listing

    async def get_staged_patch(self, path, repo_root=None) -> str:
        relative = Path(path).relative_to(self.repo_root).as_posix()
        self.calls.append(f"diff {relative}")
        if relative in self.failing_patches:
            raise GitError(f"fatal: cannot diff {relative}", returncode=128)
        return self.patches.get(relative, "")


def make_patch(file: str, added: List[str], removed: List[str] = ()) -> str:
    lines = [
        f"diff --git a/{file} b/{file}",
        "index 83db48f..bf269f4 100644",
        f"--- a/{file}",
        f"+++ b/{file}",
        "@@ -1,3 +1,3 @@",
        " unchanged",
    ]
    lines += [f"-{line}" for line in removed]
    lines += [f"+{line}" for line in added]
    return "\n".join(lines) + "\n"


def laas_response(status_code: int = 200, body: Optional[dict] = None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = b"{}" if body is not None else b""
    response.json.return_value = body
    response.headers = {}
    return response


def review_body(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "model": "gpt-4o",
        "created": 1718000000,
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"input_tokens": 12, "output_tokens": 3, "total_tokens": 15},
    }


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(laas=LaaSConfig(api_key="test-api-key"))


@pytest.fixture
def repo(tmp_path) -> Path:
    return tmp_path
