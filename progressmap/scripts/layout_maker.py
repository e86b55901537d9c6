#!/usr/bin/env python3
"""Progress layout maker script.

진행도 트리 JSON(없으면 샘플 구조)을 읽어 완료율을 다시 계산하고,
마크다운 보고서와 레이아웃 JSON을 저장합니다.

Usage:
    python -m progressmap.scripts.layout_maker [product.json] [--expand-all] [--output-dir DIR]
"""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from progressmap.config import get_settings
from progressmap.models import Product
from progressmap.sample import load_sample_product
from progressmap.services import (
    DependencyGraph,
    ProgressModel,
    TreeLayoutEngine,
    ViewStateController,
)

logger = logging.getLogger(__name__)


def load_product(path: Optional[str]) -> Product:
    """입력 JSON 파일을 읽어 Product로 변환합니다. 경로가 없으면 샘플 구조."""
    if not path:
        return load_sample_product()

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return Product.model_validate(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="진행도 보고서 및 트리 레이아웃 생성")
    parser.add_argument("input", nargs="?", help="제품 구조 JSON 파일 (생략 시 샘플)")
    parser.add_argument("--expand-all", action="store_true", help="모든 도메인/기능을 펼친 레이아웃 생성")
    parser.add_argument("--output-dir", default="workspace/outputs/progress", help="결과 저장 디렉토리")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> dict:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    print('\n' + '=' * 70)
    print('진행도 레이아웃 생성 시작')
    print(f'시작 시간: {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}')
    print('=' * 70)

    model = ProgressModel(load_product(args.input))
    view = ViewStateController(
        model,
        engine=TreeLayoutEngine.from_settings(settings),
        expanded_by_default=args.expand_all,
    )
    layout = view.layout
    summary = model.summary()
    report = DependencyGraph.from_model(model).check_integrity()

    print(f'\n  제품: {summary.product_name} ({summary.product_id})')
    print(f'  전체 완료율: {summary.overall_completion}%')
    print(f'  도메인: {summary.domains.completed}/{summary.domains.total} 완료')
    print(f'  기능: {summary.features.completed}/{summary.features.total} 완료')
    print(f'  세부 작업: {summary.subtasks.completed}/{summary.subtasks.total} 완료')
    print(f'  가중 점수: {model.compute_weighted_score(settings.default_priority_weights)}')
    print(f'  레이아웃 노드: {len(layout.nodes)}개, 폭 {layout.width:.0f}')
    if not report.is_valid:
        print(f'  의존성 문제: 순환 {len(report.cycles)}개, 누락 참조 {len(report.dangling)}개')

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d-%H%M%S')

    md_path = output_dir / f'PROGRESS-{timestamp}.md'
    md_path.write_text(model.to_markdown(), encoding='utf-8')
    print(f'\nMarkdown 저장: {md_path}')

    layout_path = output_dir / f'LAYOUT-{timestamp}.json'
    layout_path.write_text(layout.model_dump_json(indent=2), encoding='utf-8')
    print(f'레이아웃 JSON 저장: {layout_path}')

    return {"markdown": md_path, "layout": layout_path}


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    main()
