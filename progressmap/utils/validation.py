"""쓰기 요청 유효성 검증 유틸리티.

진행도 소스가 보낸 엔티티 필드와 우선순위 가중치 맵을 검증합니다.
"""

import math
from typing import Any, Iterable, Mapping, Optional

from progressmap.exceptions import InvalidEntityError, InvalidWeightsError
from progressmap.models.common import NodeStatus, Priority, status_for_completion


# ID 최대 길이
MAX_ID_LENGTH = 200


def validate_entity_id(entity_id: Any, level: str) -> str:
    """
    엔티티 ID 검증.

    Args:
        entity_id: 검증할 ID
        level: 엔티티 레벨 이름 (에러 메시지용)

    Returns:
        검증된 ID

    Raises:
        InvalidEntityError: 비어있거나 너무 긴 ID
    """
    if not isinstance(entity_id, str) or not entity_id.strip():
        raise InvalidEntityError(
            f"{level} ID가 비어있습니다",
            details={"level": level, "id": entity_id},
        )

    if len(entity_id) > MAX_ID_LENGTH:
        raise InvalidEntityError(
            f"{level} ID가 너무 깁니다 (최대 {MAX_ID_LENGTH}자)",
            details={"level": level, "length": len(entity_id)},
        )

    return entity_id


def validate_name(name: Any, entity_id: str) -> str:
    """이름이 비어있지 않은 문자열인지 검증."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidEntityError(
            "엔티티 이름이 비어있습니다",
            details={"id": entity_id},
        )
    return name


def validate_completion(completion: Any, entity_id: str) -> int:
    """
    완료율 검증.

    - 정수여야 함 (bool 제외)
    - 0~100 범위

    Raises:
        InvalidEntityError: 정수가 아니거나 범위를 벗어난 완료율
    """
    if isinstance(completion, bool) or not isinstance(completion, int):
        raise InvalidEntityError(
            "완료율은 정수여야 합니다",
            details={"id": entity_id, "completion": completion},
        )

    if completion < 0 or completion > 100:
        raise InvalidEntityError(
            f"완료율이 허용 범위(0~100)를 벗어났습니다: {completion}",
            details={"id": entity_id, "completion": completion},
        )

    return completion


def resolve_status(
    completion: int,
    status: Optional[NodeStatus],
    entity_id: str,
) -> NodeStatus:
    """
    상태/완료율 일관성 검증.

    상태가 생략되면 완료율에서 도출하고, 지정된 상태가 완료율과 맞지 않으면 거부합니다.

    Raises:
        InvalidEntityError: 상태와 완료율 불일치
    """
    expected = status_for_completion(completion)
    if status is None:
        return expected

    if status != expected:
        raise InvalidEntityError(
            f"상태({status.value})가 완료율({completion}%)과 일치하지 않습니다",
            details={
                "id": entity_id,
                "status": status.value,
                "completion": completion,
                "expected_status": expected.value,
            },
        )
    return status


def validate_priority_weights(
    weights: Mapping[Any, Any],
    required: Iterable[Priority],
) -> dict[Priority, float]:
    """
    우선순위 가중치 맵 검증.

    Args:
        weights: 우선순위 → 가중치 (키는 Priority 또는 문자열)
        required: 트리에 실제로 등장하는 우선순위

    Returns:
        Priority 키로 정규화된 가중치 맵

    Raises:
        InvalidWeightsError: 알 수 없는 키, 유한한 숫자가 아닌 값, 음수, 누락된 우선순위
    """
    if weights is None:
        raise InvalidWeightsError("가중치 맵이 비어있습니다")

    normalized: dict[Priority, float] = {}
    for key, value in weights.items():
        try:
            priority = Priority(key.upper() if isinstance(key, str) else key)
        except ValueError:
            raise InvalidWeightsError(
                f"알 수 없는 우선순위입니다: {key}",
                details={"priority": str(key), "allowed": [p.value for p in Priority]},
            )

        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidWeightsError(
                f"가중치는 숫자여야 합니다: {priority.value}",
                details={"priority": priority.value, "weight": str(value)},
            )

        if value < 0:
            raise InvalidWeightsError(
                f"가중치는 음수일 수 없습니다: {priority.value}={value}",
                details={"priority": priority.value, "weight": value},
            )

        normalized[priority] = float(value)

    missing = sorted({p for p in required if p not in normalized}, key=lambda p: -p.rank)
    if missing:
        raise InvalidWeightsError(
            "트리에 존재하는 우선순위의 가중치가 누락되었습니다",
            details={"missing": [p.value for p in missing]},
        )

    return normalized
