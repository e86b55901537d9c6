"""진행도 요약 및 무결성 점검 결과 모델."""

from pydantic import BaseModel, Field


class LevelSummary(BaseModel):
    """레벨별 완료 통계."""
    total: int = Field(0, description="전체 항목 수")
    completed: int = Field(0, description="완료(100%) 항목 수")
    progress: int = Field(0, description="완료 항목 비율 (%)")


class ProgressSummary(BaseModel):
    """진행도 트리 요약."""
    product_id: str
    product_name: str
    overall_completion: int = Field(0, description="제품 완료율")
    domains: LevelSummary = Field(default_factory=LevelSummary)
    features: LevelSummary = Field(default_factory=LevelSummary)
    subtasks: LevelSummary = Field(default_factory=LevelSummary)
    revision: int = Field(0, description="모델 변경 횟수")


class IntegrityReport(BaseModel):
    """기능 의존성 그래프 무결성 점검 결과."""
    feature_count: int = Field(0, description="점검한 기능 수")
    cycles: list[list[str]] = Field(default_factory=list, description="순환 의존성 (각 순환의 기능 ID 경로)")
    dangling: dict[str, list[str]] = Field(
        default_factory=dict, description="존재하지 않는 기능을 참조하는 의존성 (기능 ID → 누락 ID)"
    )

    @property
    def is_valid(self) -> bool:
        return not self.cycles and not self.dangling
