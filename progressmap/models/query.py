"""
진행도 필터/조회 모델입니다.

필터는 모든 조건을 동시에 만족해야 하는 논리곱(AND)이며,
조회 결과는 리프에서 위로 올라가는(leaf-up) 포함 규칙을 따릅니다:
하위 항목이 하나라도 일치하면 그 조상은 결과 뷰에 남습니다.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .common import NodeLevel, NodeStatus, Priority, status_for_completion
from .progress import Domain, Feature, Subtask


class ProgressFilter(BaseModel):
    """
    화면 필터 조건입니다.

    - status: 상태 일치
    - priority: 우선순위 일치 (Feature만 우선순위를 가지므로 Subtask/Domain은 일치하지 않음)
    - name_pattern: 이름에 대한 대소문자 무시 부분 문자열 일치
    """
    status: Optional[NodeStatus] = Field(None, description="상태 조건")
    priority: Optional[Priority] = Field(None, description="우선순위 조건")
    name_pattern: Optional[str] = Field(None, description="이름 검색어")

    @property
    def is_empty(self) -> bool:
        """조건이 하나도 없으면 '전체 보기'."""
        return self.status is None and self.priority is None and not self.name_pattern

    def _name_matches(self, name: str) -> bool:
        if not self.name_pattern:
            return True
        return self.name_pattern.lower() in name.lower()

    def matches_subtask(self, subtask: Subtask) -> bool:
        if self.priority is not None:
            return False
        status = subtask.status or status_for_completion(subtask.completion)
        if self.status is not None and status != self.status:
            return False
        return self._name_matches(subtask.name)

    def matches_feature(self, feature: Feature) -> bool:
        status = feature.status or status_for_completion(feature.completion)
        if self.status is not None and status != self.status:
            return False
        if self.priority is not None and feature.priority != self.priority:
            return False
        return self._name_matches(feature.name)

    def matches_domain(self, domain: Domain) -> bool:
        if self.priority is not None:
            return False
        if self.status is not None and domain.derived_status != self.status:
            return False
        return self._name_matches(domain.name)


class QueryResult(BaseModel):
    """필터 조회 결과. 모든 ID 목록은 트리 순서를 유지합니다."""
    filter: ProgressFilter = Field(default_factory=ProgressFilter)
    matched_feature_ids: list[str] = Field(default_factory=list, description="직접 일치한 기능 ID")
    matched_subtask_ids: list[str] = Field(default_factory=list, description="직접 일치한 세부 작업 ID")
    visible_domain_ids: list[str] = Field(default_factory=list, description="결과 뷰에 남는 도메인 ID")
    visible_feature_ids: list[str] = Field(default_factory=list, description="결과 뷰에 남는 기능 ID")
    visible_subtask_ids: list[str] = Field(default_factory=list, description="결과 뷰에 남는 세부 작업 ID")

    @property
    def matched_ids(self) -> list[str]:
        """직접 일치한 Feature/Subtask ID 전체."""
        return self.matched_feature_ids + self.matched_subtask_ids

    def visible_sets(self) -> dict[NodeLevel, set[str]]:
        """레벨별 가시 ID 집합 (레이아웃 계산용)."""
        return {
            NodeLevel.DOMAIN: set(self.visible_domain_ids),
            NodeLevel.FEATURE: set(self.visible_feature_ids),
            NodeLevel.SUBTASK: set(self.visible_subtask_ids),
        }

    def is_visible(self, level: NodeLevel, node_id: str) -> bool:
        """해당 노드가 필터링된 뷰에 남는지 여부. Product는 항상 보입니다."""
        if level == NodeLevel.PRODUCT:
            return True
        return node_id in self.visible_sets()[level]
