"""
진행도 계층(Product → Domain → Feature → Subtask) 엔티티 모델입니다.

- completion은 0~100 정수입니다.
- Feature/Subtask의 status는 completion과 항상 일치해야 합니다.
  쓰기 요청에서 status를 생략하면 completion에서 도출됩니다.
- Domain/Product는 독립된 status 필드가 없고, 필요할 때 derived_status로 도출합니다.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .common import NodeStatus, Priority, status_for_completion


class Subtask(BaseModel):
    """기능 아래의 최하위 작업 단위 (리프 노드)."""
    id: str = Field(..., description="세부 작업 ID")
    name: str = Field(..., description="세부 작업명")
    completion: int = Field(0, description="완료율 (0~100)")
    status: Optional[NodeStatus] = Field(None, description="상태 (생략 시 완료율에서 도출)")


class Feature(BaseModel):
    """도메인 아래의 기능 단위."""
    id: str = Field(..., description="기능 ID")
    name: str = Field(..., description="기능명")
    completion: int = Field(0, description="완료율 (세부 작업이 있으면 평균으로 재계산)")
    priority: Priority = Field(Priority.MEDIUM, description="우선순위")
    status: Optional[NodeStatus] = Field(None, description="상태 (생략 시 완료율에서 도출)")
    description: str = Field("", description="기능 설명")
    dependencies: list[str] = Field(default_factory=list, description="선행 기능 ID 목록")
    subtasks: list[Subtask] = Field(default_factory=list, description="세부 작업 목록")

    def find_subtask(self, subtask_id: str) -> Optional[Subtask]:
        for subtask in self.subtasks:
            if subtask.id == subtask_id:
                return subtask
        return None


class Domain(BaseModel):
    """제품 아래의 도메인 (기능 묶음)."""
    id: str = Field(..., description="도메인 ID")
    name: str = Field(..., description="도메인명")
    completion: int = Field(0, description="완료율 (기능이 있으면 평균으로 재계산)")
    description: str = Field("", description="도메인 설명")
    features: list[Feature] = Field(default_factory=list, description="기능 목록")

    @property
    def derived_status(self) -> NodeStatus:
        """완료율에서 도출한 상태."""
        return status_for_completion(self.completion)

    @property
    def highest_priority(self) -> Optional[Priority]:
        """하위 기능 중 가장 높은 우선순위. 기능이 없으면 None."""
        if not self.features:
            return None
        return max((f.priority for f in self.features), key=lambda p: p.rank)

    def find_feature(self, feature_id: str) -> Optional[Feature]:
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None


class Product(BaseModel):
    """진행도 트리의 루트인 제품."""
    id: str = Field(..., description="제품 ID")
    name: str = Field(..., description="제품명")
    completion: int = Field(0, description="완료율 (도메인이 있으면 평균으로 재계산)")
    description: str = Field("", description="제품 설명")
    domains: list[Domain] = Field(default_factory=list, description="도메인 목록")

    @property
    def derived_status(self) -> NodeStatus:
        """완료율에서 도출한 상태."""
        return status_for_completion(self.completion)

    def find_domain(self, domain_id: str) -> Optional[Domain]:
        for domain in self.domains:
            if domain.id == domain_id:
                return domain
        return None

    def iter_features(self):
        """(domain, feature) 쌍을 트리 순서대로 순회."""
        for domain in self.domains:
            for feature in domain.features:
                yield domain, feature

    def iter_subtasks(self):
        """(domain, feature, subtask) 쌍을 트리 순서대로 순회."""
        for domain, feature in self.iter_features():
            for subtask in feature.subtasks:
                yield domain, feature, subtask

    def to_markdown(self) -> str:
        """마크다운 형식의 진행도 보고서 생성."""
        lines = []

        # 헤더
        lines.append(f"# {self.name} 진행 현황")
        lines.append("")
        if self.description:
            lines.append(self.description)
            lines.append("")
        lines.append(f"**전체 완료율**: {self.completion}%")
        lines.append("")
        lines.append("---")
        lines.append("")

        # 1. 도메인 요약
        lines.append("## 1. 도메인 요약")
        lines.append("")
        if self.domains:
            lines.append("| 도메인 | 완료율 | 기능 수 | 최고 우선순위 |")
            lines.append("|--------|--------|---------|---------------|")
            for domain in self.domains:
                top = domain.highest_priority.value if domain.highest_priority else "-"
                lines.append(f"| {domain.name} | {domain.completion}% | {len(domain.features)}개 | {top} |")
        else:
            lines.append("등록된 도메인이 없습니다.")
        lines.append("")

        # 2. 도메인별 상세
        lines.append("## 2. 도메인별 기능 현황")
        lines.append("")
        for domain in self.domains:
            lines.append(f"### {domain.name} ({domain.completion}%)")
            lines.append("")
            if domain.description:
                lines.append(domain.description)
                lines.append("")

            for feature in domain.features:
                status = feature.status.value if feature.status else status_for_completion(feature.completion).value
                lines.append(f"#### {feature.name} [{feature.priority.value}] - {feature.completion}% ({status})")
                lines.append("")
                if feature.description:
                    lines.append(feature.description)
                    lines.append("")
                if feature.dependencies:
                    lines.append(f"**선행 기능**: {', '.join(feature.dependencies)}")
                    lines.append("")

                if feature.subtasks:
                    lines.append("| ID | 세부 작업 | 완료율 | 상태 |")
                    lines.append("|----|-----------|--------|------|")
                    for subtask in feature.subtasks:
                        sub_status = subtask.status.value if subtask.status else status_for_completion(subtask.completion).value
                        lines.append(f"| {subtask.id} | {subtask.name} | {subtask.completion}% | {sub_status} |")
                    lines.append("")

        # 3. 진행 막대 (텍스트 기반)
        lines.append("## 3. 진행 개요")
        lines.append("")
        lines.append("```")
        for domain in self.domains:
            bar = "=" * (domain.completion // 5)
            lines.append(f"{domain.name[:20]:<20} |{bar:<20}| {domain.completion}%")
        lines.append("```")

        return "\n".join(lines)

    def to_json(self) -> str:
        """JSON 형식으로 변환."""
        return self.model_dump_json(indent=2)
