"""공유 pytest fixture 모음."""

import pytest

from progressmap.models import (
    Product,
    Domain,
    Feature,
    Subtask,
    Priority,
)
from progressmap.sample import load_sample_product
from progressmap.services import ProgressModel, reset_progress_state


DEFAULT_WEIGHTS = {"CRITICAL": 1.5, "HIGH": 1.2, "MEDIUM": 1.0, "LOW": 0.5}


@pytest.fixture
def default_weights():
    """기본 우선순위 가중치 fixture."""
    return dict(DEFAULT_WEIGHTS)


@pytest.fixture
def sample_product():
    """샘플(agentful) Product fixture."""
    return load_sample_product()


@pytest.fixture
def sample_model(sample_product):
    """샘플 구조로 만든 ProgressModel fixture."""
    return ProgressModel(sample_product)


@pytest.fixture
def empty_model():
    """도메인이 없는 ProgressModel fixture."""
    return ProgressModel(Product(id="product-1", name="Empty Product"))


@pytest.fixture
def small_product():
    """
    작은 트리 fixture.

    product-1
      ├ dom-a (feat-a1: 100/50, feat-a2: 세부 작업 없음 20%)
      └ dom-b (feat-b1: 0/0, LOW)
    """
    return Product(
        id="product-1",
        name="Small Product",
        domains=[
            Domain(
                id="dom-a",
                name="Core",
                features=[
                    Feature(
                        id="feat-a1",
                        name="Login",
                        priority=Priority.HIGH,
                        subtasks=[
                            Subtask(id="sub-a1", name="Form", completion=100),
                            Subtask(id="sub-a2", name="Session", completion=50),
                        ],
                    ),
                    Feature(id="feat-a2", name="Logout", completion=20),
                ],
            ),
            Domain(
                id="dom-b",
                name="Billing",
                features=[
                    Feature(
                        id="feat-b1",
                        name="Invoices",
                        priority=Priority.LOW,
                        subtasks=[
                            Subtask(id="sub-b1", name="Template", completion=0),
                            Subtask(id="sub-b2", name="Mailer", completion=0),
                        ],
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def small_model(small_product):
    """작은 트리로 만든 ProgressModel fixture."""
    return ProgressModel(small_product)


@pytest.fixture
def reset_state():
    """API 테스트용 전역 진행도 상태를 샘플 구조로 초기화."""
    model = reset_progress_state(load_sample_product())
    yield model
    reset_progress_state(load_sample_product())


@pytest.fixture
async def client(reset_state):
    """httpx AsyncClient fixture (FastAPI 테스트용)."""
    from httpx import AsyncClient, ASGITransport
    from progressmap.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
