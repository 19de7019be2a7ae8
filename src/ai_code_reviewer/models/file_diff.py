"""
File Diff Data Models

스테이징된 변경사항 관련 데이터 모델들
"""

from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class ChangeSet:
    """리뷰 대상 파일 목록 (저장소 루트 기준 상대 경로, 발견 순서 유지)"""
    files: Tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def is_empty(self) -> bool:
        return not self.files


@dataclass(frozen=True)
class FileDiff:
    """파일 하나의 전체 내용과 변경된 줄"""
    full_content: str
    changed_content: str

    @property
    def is_reviewable(self) -> bool:
        """전체 내용과 변경 내용이 모두 있어야 리뷰 대상"""
        return bool(self.full_content) and bool(self.changed_content)

    def preview(self, length: int = 100) -> str:
        """변경 내용 미리보기"""
        if len(self.changed_content) > length:
            return f"{self.changed_content[:length]}..."
        return self.changed_content
