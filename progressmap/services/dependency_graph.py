"""
기능 의존성 그래프 무결성 점검.

진행도 모델은 Feature.dependencies를 단순 ID 목록으로만 보관하고 순환 여부를 검사하지 않습니다.
이 모듈은 진행도 소스가 필요할 때 호출하는 별도의 선택적 점검입니다.
완료율 집계와 레이아웃 계산은 의존성을 전혀 순회하지 않습니다.
"""

import logging
from typing import Mapping, Sequence

from progressmap.models import IntegrityReport
from .progress_model import ProgressModel

logger = logging.getLogger(__name__)

_WHITE, _GRAY, _BLACK = 0, 1, 2


class DependencyGraph:
    """기능 ID → 선행 기능 ID 목록의 방향 그래프."""

    def __init__(self, edges: Mapping[str, Sequence[str]]):
        # 트리 순서를 유지해야 점검 결과가 항상 같습니다.
        self.edges: dict[str, list[str]] = {node: list(deps) for node, deps in edges.items()}

    @classmethod
    def from_model(cls, model: ProgressModel) -> "DependencyGraph":
        product = model.snapshot()
        return cls({feature.id: feature.dependencies for _, feature in product.iter_features()})

    def dependencies_of(self, feature_id: str) -> list[str]:
        return list(self.edges.get(feature_id, []))

    def dependents_of(self, feature_id: str) -> list[str]:
        """feature_id에 의존하는 기능 목록."""
        return [node for node, deps in self.edges.items() if feature_id in deps]

    def dangling_references(self) -> dict[str, list[str]]:
        """존재하지 않는 기능을 참조하는 의존성."""
        dangling = {}
        for node, deps in self.edges.items():
            missing = [dep for dep in deps if dep not in self.edges]
            if missing:
                dangling[node] = missing
        return dangling

    def find_cycles(self) -> list[list[str]]:
        """
        순환 의존성 탐색 (깊이 우선 탐색).

        각 순환은 가장 작은 ID부터 시작하도록 회전해 한 번만 보고합니다.
        예: a → b → a 는 ["a", "b"], 자기 자신에 대한 의존은 ["a"].
        """
        color = {node: _WHITE for node in self.edges}
        cycles: list[list[str]] = []
        seen: set[tuple[str, ...]] = set()

        for root in self.edges:
            if color[root] != _WHITE:
                continue

            # 명시적 스택: 체인 길이가 재귀 한도를 넘어도 동작
            path: list[str] = [root]
            pending = [iter(self.edges[root])]
            color[root] = _GRAY

            while pending:
                dep = next(pending[-1], None)
                if dep is None:
                    color[path.pop()] = _BLACK
                    pending.pop()
                    continue
                if dep not in color:
                    continue  # 누락된 참조는 dangling_references에서 보고
                if color[dep] == _GRAY:
                    cycle = path[path.index(dep):]
                    pivot = cycle.index(min(cycle))
                    key = tuple(cycle[pivot:] + cycle[:pivot])
                    if key not in seen:
                        seen.add(key)
                        cycles.append(list(key))
                elif color[dep] == _WHITE:
                    color[dep] = _GRAY
                    path.append(dep)
                    pending.append(iter(self.edges[dep]))
        return cycles

    def check_integrity(self) -> IntegrityReport:
        report = IntegrityReport(
            feature_count=len(self.edges),
            cycles=self.find_cycles(),
            dangling=self.dangling_references(),
        )
        if not report.is_valid:
            logger.warning(
                f"[DependencyGraph] 무결성 문제 발견: 순환 {len(report.cycles)}개, "
                f"누락 참조 {len(report.dangling)}개"
            )
        return report
