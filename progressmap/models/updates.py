"""진행도 갱신 입력 모델."""

from typing import Any, Optional
from pydantic import BaseModel, Field

from .common import NodeLevel


class ProgressUpdate(BaseModel):
    """
    진행도 소스가 보내는 단일 갱신 요청입니다.

    level 별 parent_id 의미:
    - product: 사용하지 않음 (제품 자체 필드 갱신)
    - domain: 제품 ID (생략 시 현재 제품)
    - feature: 도메인 ID
    - subtask: 기능 ID
    """
    level: NodeLevel = Field(..., description="갱신할 엔티티 레벨")
    parent_id: Optional[str] = Field(None, description="부모 엔티티 ID")
    entity: dict[str, Any] = Field(..., description="엔티티 필드")
