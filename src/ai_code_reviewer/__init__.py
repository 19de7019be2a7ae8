"""
AI Code Reviewer

스테이징된 변경사항을 LaaS로 리뷰하는 pre-commit 코드 리뷰 도구
"""

__version__ = "1.0.0"

from .review.orchestrator import ReviewOrchestrator

__all__ = ["ReviewOrchestrator", "__version__"]
