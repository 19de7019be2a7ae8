"""
Review Data Models

코드 리뷰 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator


class FileReviewState(str, Enum):
    """파일 단위 리뷰 상태"""
    PENDING = "pending"
    FETCHING = "fetching"
    SKIPPED = "skipped"
    REVIEWING = "reviewing"
    REPORTED = "reported"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    FileReviewState.SKIPPED,
    FileReviewState.REPORTED,
    FileReviewState.FAILED,
})

ALLOWED_TRANSITIONS = {
    FileReviewState.PENDING: {FileReviewState.FETCHING, FileReviewState.FAILED},
    FileReviewState.FETCHING: {FileReviewState.SKIPPED, FileReviewState.REVIEWING, FileReviewState.FAILED},
    FileReviewState.REVIEWING: {FileReviewState.REPORTED, FileReviewState.FAILED},
}


@dataclass
class ReviewResult:
    """파일 하나의 리뷰 결과 (성공, 건너뜀, 실패)"""
    file: str
    state: FileReviewState
    content: Optional[str] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """데이터 검증"""
        if not self.state.is_terminal:
            raise ValueError(f"ReviewResult requires a terminal state, got {self.state.value}")
        if self.state == FileReviewState.REPORTED and self.content is None:
            raise ValueError("Reported result must carry review content")
        if self.state == FileReviewState.FAILED and not self.error:
            raise ValueError("Failed result must carry an error description")

    @classmethod
    def reported(cls, file: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> "ReviewResult":
        return cls(file=file, state=FileReviewState.REPORTED, content=content, metadata=metadata or {})

    @classmethod
    def skipped(cls, file: str) -> "ReviewResult":
        return cls(file=file, state=FileReviewState.SKIPPED)

    @classmethod
    def failed(cls, file: str, error: str) -> "ReviewResult":
        return cls(file=file, state=FileReviewState.FAILED, error=error)

    @property
    def is_success(self) -> bool:
        return self.state != FileReviewState.FAILED


@dataclass
class ReviewOutcome:
    """Aggregate of one run's per-file results."""
    results: List[ReviewResult] = field(default_factory=list)

    def count(self, state: FileReviewState) -> int:
        return sum(1 for r in self.results if r.state == state)

    @property
    def failed_files(self) -> List[str]:
        return [r.file for r in self.results if r.state == FileReviewState.FAILED]


# Pydantic models for the LaaS wire format
class ReviewParams(BaseModel):
    """프리셋에 전달하는 파라미터"""
    full_content: str
    changed_content: str


class LaaSRequest(BaseModel):
    """LaaS 프리셋 채팅 완성 요청"""
    hash: str
    params: ReviewParams

    @field_validator('hash')
    @classmethod
    def validate_hash(cls, v):
        if not v.strip():
            raise ValueError('Preset hash must not be empty')
        return v


class LaaSMessage(BaseModel):
    role: Optional[str] = None
    content: str

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Review content must not be empty')
        return v


class LaaSChoice(BaseModel):
    message: LaaSMessage


class LaaSUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class LaaSResponse(BaseModel):
    """LaaS 프리셋 채팅 완성 응답"""
    id: Optional[str] = None
    model: Optional[str] = None
    created: Optional[int] = None
    choices: List[LaaSChoice]
    usage: Optional[LaaSUsage] = None

    @field_validator('choices')
    @classmethod
    def validate_choices(cls, v):
        if not v:
            raise ValueError('Response contains no choices')
        return v

    @property
    def content(self) -> str:
        return self.choices[0].message.content

    def metadata(self) -> Dict[str, Any]:
        """응답 메타데이터 (id, 모델, 토큰 사용량)"""
        usage = self.usage or LaaSUsage()
        return {
            'id': self.id,
            'model': self.model,
            'created': self.created,
            'usage': {
                'input_tokens': usage.input_tokens,
                'output_tokens': usage.output_tokens,
                'total_tokens': usage.total_tokens,
            },
        }
