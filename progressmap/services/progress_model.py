"""
진행도 모델 서비스입니다.

Product → Domain → Feature → Subtask 엔티티 트리를 보관하고,
하위 항목이 바뀔 때마다 상위 완료율을 아래에서 위로 다시 계산합니다.

완료율 규칙:
- Feature: 세부 작업이 있으면 세부 작업 완료율의 평균, 없으면 작성된 값 유지
- Domain: 기능이 있으면 기능 완료율의 평균, 없으면 기존 값 유지
- Product: 도메인이 있으면 도메인 완료율의 평균, 없으면 기존 값 유지

모든 변경은 트리 사본에서 수행한 뒤 성공했을 때만 교체합니다.
실패한 호출은 타입이 지정된 예외(NotFoundError, InvalidEntityError,
InvalidWeightsError)를 발생시키며 모델은 이전 상태 그대로 남습니다.

사용 예시:
    model = ProgressModel(Product(id="product-1", name="agentful"))
    model.upsert_domain(Domain(id="dom-1", name="Core"))
    model.upsert_feature("dom-1", Feature(id="feat-1", name="Orchestrator", priority=Priority.HIGH))
    model.upsert_subtask("feat-1", Subtask(id="sub-1", name="Delegation", completion=100))
    score = model.compute_weighted_score({"CRITICAL": 1.5, "HIGH": 1.2, "MEDIUM": 1.0, "LOW": 0.5})
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from progressmap.exceptions import (
    ProgressMapError,
    NotFoundError,
    InvalidEntityError,
)
from progressmap.models import (
    NodeLevel,
    Subtask,
    Feature,
    Domain,
    Product,
    ProgressFilter,
    QueryResult,
    ProgressUpdate,
    LevelSummary,
    ProgressSummary,
    mean_completion,
    round_half_up,
    status_for_completion,
)
from progressmap.utils.validation import (
    validate_entity_id,
    validate_name,
    validate_completion,
    resolve_status,
    validate_priority_weights,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _coerce(model_cls: Type[T], payload: Union[T, Mapping[str, Any]]) -> T:
    """dict 페이로드를 모델로 변환. 형식 오류는 InvalidEntityError로 바꿉니다."""
    if isinstance(payload, model_cls):
        return payload
    try:
        return model_cls.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidEntityError(
            f"{model_cls.__name__} 형식이 올바르지 않습니다",
            details=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()],
        )


def _parse_level(level: Union[NodeLevel, str]) -> NodeLevel:
    try:
        return NodeLevel(level)
    except ValueError:
        raise InvalidEntityError(
            f"알 수 없는 레벨입니다: {level}",
            details={"level": str(level), "allowed": [lv.value for lv in NodeLevel]},
        )


def _ensure_unique_ids(items: Iterable[BaseModel], level: str) -> None:
    """한 페이로드 안에 같은 ID가 두 번 나오면 거부."""
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise InvalidEntityError(
                f"{level} ID가 중복되었습니다: {item.id}",
                details={"level": level, "id": item.id},
            )
        seen.add(item.id)


class ProgressModel:
    """
    진행도 엔티티 트리와 파생 완료율을 관리하는 모델.

    Attributes:
        revision: 성공한 변경 횟수 (화면 측에서 변경 감지용)
    """

    def __init__(self, product: Union[Product, Mapping[str, Any]]):
        self.revision = 0
        self._product = self._load(_coerce(Product, product))
        logger.info(
            f"[ProgressModel] 트리 로드 완료: {self._product.name} "
            f"(도메인 {len(self._product.domains)}개, 완료율 {self._product.completion}%)"
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProgressModel":
        """JSON 호환 dict에서 모델 생성."""
        return cls(_coerce(Product, data))

    # ==================== 조회 ====================

    @property
    def product(self) -> Product:
        """현재 트리의 사본."""
        return self.snapshot()

    def snapshot(self) -> Product:
        """현재 트리의 깊은 복사본을 반환합니다. 반환값을 수정해도 모델은 바뀌지 않습니다."""
        return self._product.model_copy(deep=True)

    def get_domain(self, domain_id: str) -> Domain:
        domain = self._product.find_domain(domain_id)
        if domain is None:
            raise NotFoundError(f"도메인을 찾을 수 없습니다: {domain_id}", details={"id": domain_id})
        return domain.model_copy(deep=True)

    def get_feature(self, feature_id: str) -> Feature:
        located = self._locate_feature(self._product, feature_id)
        if located is None:
            raise NotFoundError(f"기능을 찾을 수 없습니다: {feature_id}", details={"id": feature_id})
        return located[1].model_copy(deep=True)

    def get_subtask(self, subtask_id: str) -> Subtask:
        located = self._locate_subtask(self._product, subtask_id)
        if located is None:
            raise NotFoundError(f"세부 작업을 찾을 수 없습니다: {subtask_id}", details={"id": subtask_id})
        return located[2].model_copy(deep=True)

    def find_parent(self, level: NodeLevel, entity_id: str) -> Optional[str]:
        """엔티티의 부모 ID. Product는 부모가 없으므로 None."""
        level = _parse_level(level)
        if level == NodeLevel.PRODUCT:
            if entity_id != self._product.id:
                raise NotFoundError(f"제품을 찾을 수 없습니다: {entity_id}", details={"id": entity_id})
            return None
        if level == NodeLevel.DOMAIN:
            self.get_domain(entity_id)
            return self._product.id
        if level == NodeLevel.FEATURE:
            located = self._locate_feature(self._product, entity_id)
            if located is None:
                raise NotFoundError(f"기능을 찾을 수 없습니다: {entity_id}", details={"id": entity_id})
            return located[0].id
        located = self._locate_subtask(self._product, entity_id)
        if located is None:
            raise NotFoundError(f"세부 작업을 찾을 수 없습니다: {entity_id}", details={"id": entity_id})
        return located[1].id

    def has_node(self, level: NodeLevel, entity_id: str) -> bool:
        """해당 레벨에 ID가 존재하는지 여부."""
        try:
            self.find_parent(level, entity_id)
        except NotFoundError:
            return False
        return True

    # ==================== 변경 ====================

    def upsert_subtask(self, feature_id: str, subtask: Union[Subtask, Mapping[str, Any]]) -> Subtask:
        """
        기능 아래에 세부 작업을 추가하거나 갱신합니다.

        이후 기능 → 도메인 → 제품 순서로 완료율을 다시 계산합니다.

        Raises:
            NotFoundError: feature_id가 존재하지 않음
            InvalidEntityError: 완료율/상태 오류, 다른 기능에 속한 ID
        """
        payload = _coerce(Subtask, subtask)
        with self._mutation(f"세부 작업 갱신 {payload.id}") as working:
            stored = self._upsert_subtask(working, feature_id, payload)
        return stored.model_copy()

    def upsert_feature(self, domain_id: str, feature: Union[Feature, Mapping[str, Any]]) -> Feature:
        """
        도메인 아래에 기능을 추가하거나 갱신합니다.

        세부 작업 없이 생성된 기능은 작성된 완료율을 그대로 유지합니다.
        페이로드에 포함된 세부 작업은 기능 안으로 upsert됩니다.

        Raises:
            NotFoundError: domain_id가 존재하지 않음
            InvalidEntityError: 완료율/상태 오류, 다른 도메인에 속한 ID, 중복 세부 작업 ID
        """
        payload = _coerce(Feature, feature)
        with self._mutation(f"기능 갱신 {payload.id}") as working:
            stored = self._upsert_feature(working, domain_id, payload)
        return stored.model_copy(deep=True)

    def upsert_domain(self, domain: Union[Domain, Mapping[str, Any]]) -> Domain:
        """제품 아래에 도메인을 추가하거나 갱신합니다."""
        payload = _coerce(Domain, domain)
        with self._mutation(f"도메인 갱신 {payload.id}") as working:
            stored = self._upsert_domain(working, payload)
        return stored.model_copy(deep=True)

    def update_product(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        completion: Optional[int] = None,
    ) -> Product:
        """
        제품 자체 필드를 갱신합니다.

        작성된 완료율은 도메인이 하나라도 있으면 평균값으로 덮어써집니다.
        """
        with self._mutation("제품 갱신") as working:
            self._update_product(working, name, description, completion)
        return self.snapshot()

    def remove_subtask(self, subtask_id: str) -> None:
        """세부 작업 삭제 후 상위 완료율 재계산."""
        with self._mutation(f"세부 작업 삭제 {subtask_id}") as working:
            located = self._locate_subtask(working, subtask_id)
            if located is None:
                raise NotFoundError(f"세부 작업을 찾을 수 없습니다: {subtask_id}", details={"id": subtask_id})
            domain, feature, subtask = located
            feature.subtasks.remove(subtask)
            self._recompute_chain(working, domain, feature)

    def remove_feature(self, feature_id: str) -> None:
        """기능 삭제 후 상위 완료율 재계산."""
        with self._mutation(f"기능 삭제 {feature_id}") as working:
            located = self._locate_feature(working, feature_id)
            if located is None:
                raise NotFoundError(f"기능을 찾을 수 없습니다: {feature_id}", details={"id": feature_id})
            domain, feature = located
            domain.features.remove(feature)
            self._recompute_chain(working, domain)

    def remove_domain(self, domain_id: str) -> None:
        """도메인 삭제 후 제품 완료율 재계산."""
        with self._mutation(f"도메인 삭제 {domain_id}") as working:
            domain = working.find_domain(domain_id)
            if domain is None:
                raise NotFoundError(f"도메인을 찾을 수 없습니다: {domain_id}", details={"id": domain_id})
            working.domains.remove(domain)
            self._recompute_chain(working)

    def remove(self, level: NodeLevel, entity_id: str) -> None:
        """레벨에 따라 삭제 함수를 호출합니다. 제품은 삭제할 수 없습니다."""
        level = _parse_level(level)
        if level == NodeLevel.DOMAIN:
            self.remove_domain(entity_id)
        elif level == NodeLevel.FEATURE:
            self.remove_feature(entity_id)
        elif level == NodeLevel.SUBTASK:
            self.remove_subtask(entity_id)
        else:
            raise InvalidEntityError("제품은 삭제할 수 없습니다", details={"id": entity_id})

    def apply(self, update: Union[ProgressUpdate, Mapping[str, Any]]) -> None:
        """단일 갱신 요청 적용."""
        self.apply_batch([update])

    def apply_batch(self, updates: Iterable[Union[ProgressUpdate, Mapping[str, Any]]]) -> int:
        """
        갱신 요청 묶음을 원자적으로 적용합니다.

        하나라도 실패하면 아무 것도 반영되지 않습니다.

        Returns:
            적용된 갱신 수
        """
        items = [_coerce(ProgressUpdate, u) for u in updates]
        with self._mutation(f"일괄 갱신 {len(items)}건") as working:
            for item in items:
                self._apply_update(working, item)
        return len(items)

    def recompute(self) -> None:
        """
        전체 트리를 아래에서 위로 다시 계산합니다.

        변경 없이 두 번 호출해도 결과가 같습니다 (멱등).
        """
        self._recompute_all(self._product)

    # ==================== 점수/필터/요약 ====================

    def compute_weighted_score(self, priority_weights: Mapping[Any, Any]) -> int:
        """
        우선순위 가중 전체 점수 계산.

        도메인은 우선순위가 없으므로, 하위 기능 중 가장 높은 우선순위의 가중치를
        도메인 가중치로 사용합니다. 기능이 없는 도메인은 계산에서 제외됩니다.

            score = Σ(domain.completion × weight) / Σ(weight)

        Args:
            priority_weights: 우선순위 → 가중치

        Returns:
            반올림한 정수 점수 (가중치 합이 0이면 0)

        Raises:
            InvalidWeightsError: 음수 가중치, 트리에 있는 우선순위 누락 등
        """
        used = {feature.priority for _, feature in self._product.iter_features()}
        weights = validate_priority_weights(priority_weights, used)

        weighted_sum = 0.0
        weight_total = 0.0
        for domain in self._product.domains:
            top = domain.highest_priority
            if top is None:
                continue
            weight = weights[top]
            weighted_sum += domain.completion * weight
            weight_total += weight

        if weight_total == 0:
            return 0
        return round_half_up(weighted_sum / weight_total)

    def query(self, criteria: Optional[ProgressFilter] = None) -> QueryResult:
        """
        필터 조건으로 Feature/Subtask를 조회합니다.

        포함 규칙 (leaf-up):
        - Subtask: 직접 일치할 때
        - Feature: 직접 일치하거나 일치하는 Subtask가 있을 때
        - Domain: 직접 일치하거나 보이는 Feature가 있을 때
        - Product: 항상
        """
        criteria = criteria or ProgressFilter()
        result = QueryResult(filter=criteria)

        for domain in self._product.domains:
            domain_visible = criteria.matches_domain(domain)
            for feature in domain.features:
                feature_matched = criteria.matches_feature(feature)
                if feature_matched:
                    result.matched_feature_ids.append(feature.id)

                has_matching_subtask = False
                for subtask in feature.subtasks:
                    if criteria.matches_subtask(subtask):
                        result.matched_subtask_ids.append(subtask.id)
                        result.visible_subtask_ids.append(subtask.id)
                        has_matching_subtask = True

                if feature_matched or has_matching_subtask:
                    result.visible_feature_ids.append(feature.id)
                    domain_visible = True

            if domain_visible:
                result.visible_domain_ids.append(domain.id)

        return result

    def summary(self) -> ProgressSummary:
        """레벨별 완료 통계."""
        product = self._product
        domains = product.domains
        features = [feature for _, feature in product.iter_features()]
        subtasks = [subtask for _, _, subtask in product.iter_subtasks()]

        return ProgressSummary(
            product_id=product.id,
            product_name=product.name,
            overall_completion=product.completion,
            domains=self._level_summary(domains),
            features=self._level_summary(features),
            subtasks=self._level_summary(subtasks),
            revision=self.revision,
        )

    def to_markdown(self) -> str:
        return self._product.to_markdown()

    # ==================== 내부 구현 ====================

    @contextmanager
    def _mutation(self, action: str):
        """사본에서 변경을 수행하고 성공 시에만 교체합니다."""
        working = self._product.model_copy(deep=True)
        try:
            yield working
        except ProgressMapError as e:
            logger.warning(f"[ProgressModel] {action} 거부: {e.message}")
            raise
        self._product = working
        self.revision += 1
        logger.info(
            f"[ProgressModel] {action} 완료 "
            f"(제품 완료율 {working.completion}%, revision={self.revision})"
        )

    def _load(self, product: Product) -> Product:
        """입력 트리 전체를 검증하면서 새 트리로 다시 구성합니다."""
        validate_entity_id(product.id, "product")
        validate_name(product.name, product.id)
        validate_completion(product.completion, product.id)
        _ensure_unique_ids(product.domains, "domain")

        working = Product(
            id=product.id,
            name=product.name,
            completion=product.completion,
            description=product.description,
        )
        for domain in product.domains:
            self._upsert_domain(working, domain)
        self._recompute_all(working)
        return working

    def _apply_update(self, working: Product, update: ProgressUpdate) -> None:
        if update.level == NodeLevel.PRODUCT:
            entity = update.entity
            self._update_product(
                working,
                entity.get("name"),
                entity.get("description"),
                entity.get("completion"),
            )
        elif update.level == NodeLevel.DOMAIN:
            if update.parent_id is not None and update.parent_id != working.id:
                raise NotFoundError(
                    f"제품을 찾을 수 없습니다: {update.parent_id}",
                    details={"id": update.parent_id},
                )
            self._upsert_domain(working, _coerce(Domain, update.entity))
        else:
            if not update.parent_id:
                raise InvalidEntityError(
                    f"{update.level.value} 갱신에는 parent_id가 필요합니다",
                    details={"level": update.level.value},
                )
            if update.level == NodeLevel.FEATURE:
                self._upsert_feature(working, update.parent_id, _coerce(Feature, update.entity))
            else:
                self._upsert_subtask(working, update.parent_id, _coerce(Subtask, update.entity))

    def _update_product(
        self,
        working: Product,
        name: Optional[str],
        description: Optional[str],
        completion: Optional[int],
    ) -> None:
        if name is not None:
            working.name = validate_name(name, working.id)
        if description is not None:
            working.description = description
        if completion is not None:
            working.completion = validate_completion(completion, working.id)
        self._recompute_product(working)

    def _upsert_domain(self, working: Product, payload: Domain) -> Domain:
        validate_entity_id(payload.id, "domain")
        _ensure_unique_ids(payload.features, "feature")

        domain = working.find_domain(payload.id)
        if domain is None:
            validate_name(payload.name, payload.id)
            domain = Domain(
                id=payload.id,
                name=payload.name,
                completion=validate_completion(payload.completion, payload.id),
                description=payload.description,
            )
            working.domains.append(domain)
        else:
            fields = payload.model_fields_set
            if "name" in fields:
                domain.name = validate_name(payload.name, payload.id)
            if "description" in fields:
                domain.description = payload.description
            if "completion" in fields:
                domain.completion = validate_completion(payload.completion, payload.id)

        for feature in payload.features:
            self._upsert_feature(working, domain.id, feature)

        self._recompute_chain(working, domain)
        return domain

    def _upsert_feature(self, working: Product, domain_id: str, payload: Feature) -> Feature:
        validate_entity_id(payload.id, "feature")
        _ensure_unique_ids(payload.subtasks, "subtask")

        domain = working.find_domain(domain_id)
        if domain is None:
            raise NotFoundError(f"도메인을 찾을 수 없습니다: {domain_id}", details={"id": domain_id})

        owner = self._locate_feature(working, payload.id)
        if owner is not None and owner[0] is not domain:
            raise InvalidEntityError(
                f"기능 ID가 이미 다른 도메인에 속해 있습니다: {payload.id}",
                details={"id": payload.id, "domain_id": owner[0].id},
            )

        feature = domain.find_feature(payload.id)
        fields = payload.model_fields_set
        if feature is None:
            validate_name(payload.name, payload.id)
            completion = validate_completion(payload.completion, payload.id)
            feature = Feature(
                id=payload.id,
                name=payload.name,
                completion=completion,
                priority=payload.priority,
                status=resolve_status(completion, payload.status, payload.id),
                description=payload.description,
                dependencies=list(payload.dependencies),
            )
            domain.features.append(feature)
        else:
            if "name" in fields:
                feature.name = validate_name(payload.name, payload.id)
            if "priority" in fields:
                feature.priority = payload.priority
            if "description" in fields:
                feature.description = payload.description
            if "dependencies" in fields:
                feature.dependencies = list(payload.dependencies)
            if "completion" in fields:
                feature.completion = validate_completion(payload.completion, payload.id)
            status = payload.status if "status" in fields else None
            feature.status = resolve_status(feature.completion, status, payload.id)

        for subtask in payload.subtasks:
            self._upsert_subtask(working, feature.id, subtask)

        self._recompute_chain(working, domain, feature)
        return feature

    def _upsert_subtask(self, working: Product, feature_id: str, payload: Subtask) -> Subtask:
        validate_entity_id(payload.id, "subtask")

        located = self._locate_feature(working, feature_id)
        if located is None:
            raise NotFoundError(f"기능을 찾을 수 없습니다: {feature_id}", details={"id": feature_id})
        domain, feature = located

        owner = self._locate_subtask(working, payload.id)
        if owner is not None and owner[1] is not feature:
            raise InvalidEntityError(
                f"세부 작업 ID가 이미 다른 기능에 속해 있습니다: {payload.id}",
                details={"id": payload.id, "feature_id": owner[1].id},
            )

        subtask = feature.find_subtask(payload.id)
        fields = payload.model_fields_set
        if subtask is None:
            validate_name(payload.name, payload.id)
            completion = validate_completion(payload.completion, payload.id)
            subtask = Subtask(
                id=payload.id,
                name=payload.name,
                completion=completion,
                status=resolve_status(completion, payload.status, payload.id),
            )
            feature.subtasks.append(subtask)
        else:
            if "name" in fields:
                subtask.name = validate_name(payload.name, payload.id)
            if "completion" in fields:
                subtask.completion = validate_completion(payload.completion, payload.id)
            status = payload.status if "status" in fields else None
            subtask.status = resolve_status(subtask.completion, status, payload.id)

        self._recompute_chain(working, domain, feature)
        return subtask

    @staticmethod
    def _locate_feature(product: Product, feature_id: str) -> Optional[tuple[Domain, Feature]]:
        for domain, feature in product.iter_features():
            if feature.id == feature_id:
                return domain, feature
        return None

    @staticmethod
    def _locate_subtask(product: Product, subtask_id: str) -> Optional[tuple[Domain, Feature, Subtask]]:
        for domain, feature, subtask in product.iter_subtasks():
            if subtask.id == subtask_id:
                return domain, feature, subtask
        return None

    @staticmethod
    def _level_summary(items: list) -> LevelSummary:
        total = len(items)
        completed = sum(1 for item in items if item.completion == 100)
        progress = round_half_up(completed / total * 100) if total else 0
        return LevelSummary(total=total, completed=completed, progress=progress)

    # 재계산 (아래 → 위)

    @staticmethod
    def _recompute_feature(feature: Feature) -> None:
        if feature.subtasks:
            feature.completion = mean_completion(s.completion for s in feature.subtasks)
        feature.status = status_for_completion(feature.completion)

    @staticmethod
    def _recompute_domain(domain: Domain) -> None:
        if domain.features:
            domain.completion = mean_completion(f.completion for f in domain.features)

    @staticmethod
    def _recompute_product(product: Product) -> None:
        if product.domains:
            product.completion = mean_completion(d.completion for d in product.domains)

    def _recompute_chain(
        self,
        product: Product,
        domain: Optional[Domain] = None,
        feature: Optional[Feature] = None,
    ) -> None:
        """변경된 노드의 조상 경로만 순서대로 재계산."""
        if feature is not None:
            self._recompute_feature(feature)
        if domain is not None:
            self._recompute_domain(domain)
        self._recompute_product(product)

    def _recompute_all(self, product: Product) -> None:
        for domain in product.domains:
            for feature in domain.features:
                self._recompute_feature(feature)
            self._recompute_domain(domain)
        self._recompute_product(product)
