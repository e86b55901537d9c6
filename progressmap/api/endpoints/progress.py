"""
진행도 API입니다.
진행도 소스가 엔티티를 갱신/삭제하고, 트리/요약/가중 점수/필터 조회 결과를 가져가는 기능을 제공합니다.
"""

from typing import Optional
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from progressmap.config import get_settings
from progressmap.models import NodeLevel, ProgressFilter, ProgressUpdate
from progressmap.services import DependencyGraph, get_progress_model

router = APIRouter()


class WeightsRequest(BaseModel):
    """가중 점수 요청 데이터 모델 (weights 생략 시 설정의 기본 가중치 사용)"""
    weights: Optional[dict[str, float]] = None


class UpdateBatch(BaseModel):
    """일괄 갱신 데이터 모델"""
    updates: list[ProgressUpdate]


@router.get("")
async def get_progress() -> dict:
    """현재 진행도 트리 전체 조회"""
    model = get_progress_model()
    return {
        "revision": model.revision,
        "product": model.snapshot().model_dump(mode="json"),
    }


@router.get("/summary")
async def get_summary() -> dict:
    """레벨별 완료 통계 조회"""
    return get_progress_model().summary().model_dump(mode="json")


@router.post("/score")
async def compute_score(request: Optional[WeightsRequest] = None) -> dict:
    """
    우선순위 가중 점수 계산.

    각 도메인의 가중치는 하위 기능 중 가장 높은 우선순위의 가중치입니다.
    """
    weights = request.weights if request else None
    if weights is None:
        weights = get_settings().default_priority_weights

    model = get_progress_model()
    return {
        "score": model.compute_weighted_score(weights),
        "weights": weights,
        "revision": model.revision,
    }


@router.post("/query")
async def query_progress(criteria: ProgressFilter) -> dict:
    """필터 조건에 맞는 기능/세부 작업 조회 (leaf-up 포함 규칙 적용)"""
    return get_progress_model().query(criteria).model_dump(mode="json")


@router.post("/updates")
async def apply_updates(batch: UpdateBatch) -> dict:
    """
    진행도 갱신 요청 묶음 적용.

    하나라도 실패하면 아무 것도 반영되지 않습니다.
    - 부모가 없으면 404
    - 완료율/상태가 잘못되면 400
    """
    model = get_progress_model()
    applied = model.apply_batch(batch.updates)
    summary = model.summary()
    return {
        "applied": applied,
        "revision": model.revision,
        "overall_completion": summary.overall_completion,
    }


@router.get("/integrity")
async def check_integrity() -> dict:
    """기능 의존성 무결성 점검 (순환 의존성, 누락된 참조)"""
    report = DependencyGraph.from_model(get_progress_model()).check_integrity()
    result = report.model_dump(mode="json")
    result["is_valid"] = report.is_valid
    return result


@router.get("/export")
async def export_progress(format: str = "markdown") -> Response:
    """
    진행도 보고서를 파일로 다운로드하는 API.

    지원하는 형식:
    - markdown: 마크다운 텍스트 파일 (.md)
    - json: 데이터 원본 파일 (.json)
    """
    product = get_progress_model().snapshot()

    if format == "markdown":
        return Response(
            content=product.to_markdown(),
            media_type="text/markdown",
            headers={
                "Content-Disposition": f'attachment; filename="{product.id}.md"'
            }
        )
    elif format == "json":
        return Response(
            content=product.to_json(),
            media_type="application/json",
            headers={
                "Content-Disposition": f'attachment; filename="{product.id}.json"'
            }
        )

    raise HTTPException(status_code=400, detail=f"지원하지 않는 형식입니다: {format}")


@router.get("/{level}/{entity_id}")
async def get_entity(level: NodeLevel, entity_id: str) -> dict:
    """레벨과 ID로 엔티티 상세 조회 (없으면 404)"""
    model = get_progress_model()
    parent_id = model.find_parent(level, entity_id)

    if level == NodeLevel.PRODUCT:
        entity = model.snapshot()
    elif level == NodeLevel.DOMAIN:
        entity = model.get_domain(entity_id)
    elif level == NodeLevel.FEATURE:
        entity = model.get_feature(entity_id)
    else:
        entity = model.get_subtask(entity_id)

    return {
        "level": level.value,
        "parent_id": parent_id,
        "entity": entity.model_dump(mode="json"),
    }


@router.delete("/{level}/{entity_id}")
async def delete_entity(level: NodeLevel, entity_id: str) -> dict:
    """엔티티 삭제 후 상위 완료율 재계산 (없으면 404, 제품은 400)"""
    model = get_progress_model()
    model.remove(level, entity_id)
    return {
        "deleted": entity_id,
        "level": level.value,
        "revision": model.revision,
        "overall_completion": model.summary().overall_completion,
    }
