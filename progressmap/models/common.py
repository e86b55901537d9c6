"""
공통 데이터 모델 모듈입니다.
계층 레벨, 진행 상태, 우선순위처럼 여러 모델에서 함께 쓰는 열거형과
완료율 계산 규칙을 정의합니다.
"""

import math
from enum import Enum
from typing import Iterable


class NodeLevel(str, Enum):
    """
    진행도 계층의 레벨입니다.

    Product → Domain → Feature → Subtask 순서로 내려가는 엄격한 트리입니다.
    """
    PRODUCT = "product"
    DOMAIN = "domain"
    FEATURE = "feature"
    SUBTASK = "subtask"

    @property
    def depth(self) -> int:
        """루트(Product)로부터의 깊이."""
        return LEVEL_ORDER.index(self)


LEVEL_ORDER = [NodeLevel.PRODUCT, NodeLevel.DOMAIN, NodeLevel.FEATURE, NodeLevel.SUBTASK]


class NodeStatus(str, Enum):
    """
    완료율에서 도출되는 3단계 상태입니다.

    - COMPLETE: 완료율 100
    - IN_PROGRESS: 완료율 1~99
    - PENDING: 완료율 0
    """
    COMPLETE = "complete"
    IN_PROGRESS = "in-progress"
    PENDING = "pending"


class Priority(str, Enum):
    """기능(Feature) 단위 우선순위입니다. 가중 점수 계산에만 사용됩니다."""
    CRITICAL = "CRITICAL"  # 최우선 (출시 차단)
    HIGH = "HIGH"          # 높음
    MEDIUM = "MEDIUM"      # 중간
    LOW = "LOW"            # 낮음

    @property
    def rank(self) -> int:
        """숫자가 클수록 높은 우선순위."""
        return PRIORITY_RANK[self]


PRIORITY_RANK = {
    Priority.CRITICAL: 3,
    Priority.HIGH: 2,
    Priority.MEDIUM: 1,
    Priority.LOW: 0,
}


def round_half_up(value: float) -> int:
    """가장 가까운 정수로 반올림 (.5는 올림)."""
    return int(math.floor(value + 0.5))


def mean_completion(values: Iterable[int]) -> int:
    """완료율 목록의 산술 평균을 정수로 반올림. 빈 목록은 호출하지 않는다."""
    items = list(values)
    return round_half_up(sum(items) / len(items))


def status_for_completion(completion: int) -> NodeStatus:
    """완료율에서 상태를 도출합니다."""
    if completion >= 100:
        return NodeStatus.COMPLETE
    if completion <= 0:
        return NodeStatus.PENDING
    return NodeStatus.IN_PROGRESS
