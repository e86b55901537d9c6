"""
애플리케이션 전역 진행도 상태입니다.
API 요청들이 같은 진행도 모델과 화면 상태 컨트롤러를 공유하도록 싱글톤으로 관리합니다.
"""

import logging
from typing import Optional

from progressmap.config import get_settings
from progressmap.models import Product
from progressmap.sample import load_sample_product
from .progress_model import ProgressModel
from .tree_layout import TreeLayoutEngine
from .view_state import ViewStateController

logger = logging.getLogger(__name__)


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_progress_model: Optional[ProgressModel] = None
_view_state: Optional[ViewStateController] = None


def _initial_product() -> Product:
    settings = get_settings()
    if settings.load_sample_data:
        logger.info("[ProgressStore] 샘플 제품 구조를 불러옵니다")
        return load_sample_product()
    return Product(id="product", name=settings.app_name)


def get_progress_model() -> ProgressModel:
    """ProgressModel 인스턴스를 반환합니다."""
    global _progress_model
    if _progress_model is None:
        _progress_model = ProgressModel(_initial_product())
    return _progress_model


def get_view_state() -> ViewStateController:
    """ViewStateController 인스턴스를 반환합니다."""
    global _view_state
    if _view_state is None:
        settings = get_settings()
        _view_state = ViewStateController(
            get_progress_model(),
            engine=TreeLayoutEngine.from_settings(settings),
            expanded_by_default=settings.expanded_by_default,
        )
    return _view_state


def reset_progress_state(product: Optional[Product] = None) -> ProgressModel:
    """전역 상태를 새 제품 트리로 교체합니다 (테스트/재적재용)."""
    global _progress_model, _view_state
    _progress_model = ProgressModel(product or _initial_product())
    _view_state = None
    return _progress_model
