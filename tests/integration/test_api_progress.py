"""
진행도 API 통합 테스트.
트리 조회, 요약, 가중 점수, 필터 조회, 일괄 갱신, 삭제, 내보내기를 확인합니다.
"""

from httpx import AsyncClient


# ---------------------------------------------------------------------------
# 조회
# ---------------------------------------------------------------------------

async def test_get_progress_tree(client: AsyncClient):
    """GET /api/v1/progress 는 재계산된 제품 트리와 revision을 반환해야 한다."""
    response = await client.get("/api/v1/progress")

    assert response.status_code == 200

    data = response.json()
    assert data["revision"] == 0
    assert data["product"]["completion"] == 70
    assert [d["completion"] for d in data["product"]["domains"]] == [83, 52, 75]


async def test_get_summary(client: AsyncClient):
    """GET /api/v1/progress/summary 는 레벨별 완료 통계를 반환해야 한다."""
    response = await client.get("/api/v1/progress/summary")

    assert response.status_code == 200

    data = response.json()
    assert data["overall_completion"] == 70
    assert data["features"] == {"total": 7, "completed": 1, "progress": 14}
    assert data["subtasks"]["completed"] == 8


async def test_get_entity_detail(client: AsyncClient):
    """GET /api/v1/progress/feature/{id} 는 기능과 부모 도메인 ID를 반환해야 한다."""
    response = await client.get("/api/v1/progress/feature/feature-2")

    assert response.status_code == 200

    data = response.json()
    assert data["parent_id"] == "domain-1"
    assert data["entity"]["completion"] == 80
    assert data["entity"]["status"] == "in-progress"


async def test_get_product_detail(client: AsyncClient):
    """제품 상세 조회는 parent_id가 없어야 한다."""
    response = await client.get("/api/v1/progress/product/product-1")

    assert response.status_code == 200
    assert response.json()["parent_id"] is None


async def test_get_entity_not_found(client: AsyncClient):
    """존재하지 않는 세부 작업 ID로 조회하면 404와 에러 코드를 반환해야 한다."""
    response = await client.get("/api/v1/progress/subtask/ghost")

    assert response.status_code == 404

    data = response.json()
    assert data["error_code"] == "ERR_NOT_FOUND_001"
    assert "timestamp" in data


async def test_get_entity_invalid_level(client: AsyncClient):
    """알 수 없는 레벨로 조회하면 422를 반환해야 한다."""
    response = await client.get("/api/v1/progress/widget/x")

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# 가중 점수 / 필터
# ---------------------------------------------------------------------------

async def test_score_with_default_weights(client: AsyncClient):
    """본문 없이 요청하면 설정의 기본 가중치로 점수를 계산해야 한다."""
    response = await client.post("/api/v1/progress/score")

    assert response.status_code == 200

    data = response.json()
    assert data["score"] == 71
    assert data["weights"]["HIGH"] == 1.2


async def test_score_with_custom_weights(client: AsyncClient):
    """가중치를 모두 같게 주면 도메인 완료율의 단순 평균이어야 한다."""
    response = await client.post(
        "/api/v1/progress/score",
        json={"weights": {"CRITICAL": 1, "HIGH": 1, "MEDIUM": 1, "LOW": 1}},
    )

    assert response.status_code == 200
    assert response.json()["score"] == 70


async def test_score_negative_weight(client: AsyncClient):
    """음수 가중치는 400과 ERR_WEIGHTS_001을 반환해야 한다."""
    response = await client.post(
        "/api/v1/progress/score",
        json={"weights": {"CRITICAL": 1.5, "HIGH": -1, "MEDIUM": 1.0, "LOW": 0.5}},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_WEIGHTS_001"


async def test_score_infinite_weight(client: AsyncClient):
    """Infinity 가중치는 500이 아니라 400을 반환해야 한다."""
    response = await client.post(
        "/api/v1/progress/score",
        content='{"weights": {"CRITICAL": 1.5, "HIGH": Infinity, "MEDIUM": 1.0, "LOW": 0.5}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_WEIGHTS_001"


async def test_score_missing_weight(client: AsyncClient):
    """트리에 있는 우선순위의 가중치가 빠지면 400을 반환해야 한다."""
    response = await client.post("/api/v1/progress/score", json={"weights": {"LOW": 0.5}})

    assert response.status_code == 400
    assert "missing" in response.json()["details"]


async def test_query_by_status(client: AsyncClient):
    """POST /api/v1/progress/query 는 leaf-up 규칙으로 결과를 반환해야 한다."""
    response = await client.post("/api/v1/progress/query", json={"status": "complete"})

    assert response.status_code == 200

    data = response.json()
    assert data["matched_feature_ids"] == ["feature-1"]
    assert "sub-11" in data["matched_subtask_ids"]
    assert data["visible_domain_ids"] == ["domain-1", "domain-2", "domain-3"]


async def test_query_invalid_status(client: AsyncClient):
    """허용되지 않은 상태 값은 422를 반환해야 한다."""
    response = await client.post("/api/v1/progress/query", json={"status": "done"})

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# 갱신 / 삭제
# ---------------------------------------------------------------------------

async def test_apply_updates(client: AsyncClient):
    """세부 작업 갱신은 상위 완료율을 다시 계산하고 revision을 올려야 한다."""
    response = await client.post("/api/v1/progress/updates", json={
        "updates": [
            {
                "level": "subtask",
                "parent_id": "feature-4",
                "entity": {"id": "sub-12", "name": "Product Structure Visualizer", "completion": 100},
            },
        ],
    })

    assert response.status_code == 200
    assert response.json() == {"applied": 1, "revision": 1, "overall_completion": 76}

    detail = await client.get("/api/v1/progress/domain/domain-2")
    assert detail.json()["entity"]["completion"] == 69


async def test_apply_updates_unknown_parent_is_atomic(client: AsyncClient):
    """부모가 없는 갱신이 섞이면 404를 반환하고 아무 것도 반영하지 않아야 한다."""
    response = await client.post("/api/v1/progress/updates", json={
        "updates": [
            {"level": "subtask", "parent_id": "feature-4", "entity": {"id": "sub-12", "name": "PSV", "completion": 100}},
            {"level": "subtask", "parent_id": "feature-99", "entity": {"id": "sub-99", "name": "X"}},
        ],
    })

    assert response.status_code == 404

    tree = await client.get("/api/v1/progress")
    assert tree.json()["revision"] == 0
    assert tree.json()["product"]["completion"] == 70


async def test_apply_updates_invalid_completion(client: AsyncClient):
    """범위를 벗어난 완료율은 400과 ERR_ENTITY_001을 반환해야 한다."""
    response = await client.post("/api/v1/progress/updates", json={
        "updates": [
            {"level": "subtask", "parent_id": "feature-1", "entity": {"id": "sub-1", "name": "Task delegation", "completion": 150}},
        ],
    })

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_ENTITY_001"


async def test_delete_domain(client: AsyncClient):
    """도메인 삭제 후 제품 완료율은 남은 도메인의 평균이어야 한다."""
    response = await client.delete("/api/v1/progress/domain/domain-2")

    assert response.status_code == 200
    assert response.json()["overall_completion"] == 79


async def test_delete_product_rejected(client: AsyncClient):
    """제품은 삭제할 수 없으므로 400을 반환해야 한다."""
    response = await client.delete("/api/v1/progress/product/product-1")

    assert response.status_code == 400


async def test_delete_not_found(client: AsyncClient):
    """존재하지 않는 기능을 삭제하면 404를 반환해야 한다."""
    response = await client.delete("/api/v1/progress/feature/nonexistent")

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# 무결성 / 내보내기
# ---------------------------------------------------------------------------

async def test_integrity_check(client: AsyncClient):
    """샘플 구조의 의존성 그래프는 유효해야 한다."""
    response = await client.get("/api/v1/progress/integrity")

    assert response.status_code == 200

    data = response.json()
    assert data["is_valid"] is True
    assert data["feature_count"] == 7


async def test_export_markdown(client: AsyncClient):
    """마크다운 내보내기는 첨부 파일로 보고서를 반환해야 한다."""
    response = await client.get("/api/v1/progress/export?format=markdown")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/markdown")
    assert 'filename="product-1.md"' in response.headers["content-disposition"]
    assert "# agentful 진행 현황" in response.text


async def test_export_json(client: AsyncClient):
    """JSON 내보내기는 제품 트리 원본을 반환해야 한다."""
    response = await client.get("/api/v1/progress/export?format=json")

    assert response.status_code == 200
    assert response.json()["id"] == "product-1"


async def test_export_invalid_format(client: AsyncClient):
    """지원하지 않는 형식(xml)으로 내보내기 하면 400을 반환해야 한다."""
    response = await client.get("/api/v1/progress/export?format=xml")

    assert response.status_code == 400
