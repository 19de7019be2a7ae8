"""
Data Models

AI 코드 리뷰 시스템의 핵심 데이터 모델들
"""

from .file_diff import ChangeSet, FileDiff
from .review import (
    FileReviewState,
    ReviewResult,
    ReviewOutcome,
    LaaSRequest,
    LaaSResponse,
    ReviewParams,
)

__all__ = [
    "ChangeSet",
    "FileDiff",
    "FileReviewState",
    "ReviewResult",
    "ReviewOutcome",
    "LaaSRequest",
    "LaaSResponse",
    "ReviewParams",
]
