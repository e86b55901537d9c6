"""Unit tests for Pydantic data models.

Tests creation, defaults, derived properties, filter matching and
serialization of the progress, query, summary and layout models.
"""

import json
import pytest
from pydantic import ValidationError

from progressmap.models import (
    NodeLevel,
    NodeStatus,
    Priority,
    Subtask,
    Feature,
    Domain,
    Product,
    ProgressFilter,
    QueryResult,
    ProgressUpdate,
    IntegrityReport,
    LayoutNode,
    LayoutEdge,
    TreeLayout,
    DEFAULT_FOOTPRINTS,
    round_half_up,
    mean_completion,
    status_for_completion,
)


# ---------------------------------------------------------------------------
# Completion helpers
# ---------------------------------------------------------------------------

class TestCompletionHelpers:
    @pytest.mark.parametrize("value, expected", [
        (0.4, 0), (0.5, 1), (1.5, 2), (2.5, 3), (51.5, 52), (99.49, 99),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_mean_completion_rounds_half_up(self):
        assert mean_completion([100, 90, 70, 60]) == 80
        assert mean_completion([33, 70]) == 52
        assert mean_completion([100, 0, 0]) == 33

    @pytest.mark.parametrize("completion, expected", [
        (0, NodeStatus.PENDING),
        (1, NodeStatus.IN_PROGRESS),
        (99, NodeStatus.IN_PROGRESS),
        (100, NodeStatus.COMPLETE),
    ])
    def test_status_for_completion(self, completion, expected):
        assert status_for_completion(completion) == expected


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TestEnums:
    def test_level_depth(self):
        assert NodeLevel.PRODUCT.depth == 0
        assert NodeLevel.DOMAIN.depth == 1
        assert NodeLevel.FEATURE.depth == 2
        assert NodeLevel.SUBTASK.depth == 3

    def test_priority_rank_order(self):
        assert Priority.CRITICAL.rank > Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank

    def test_status_values(self):
        assert NodeStatus("in-progress") == NodeStatus.IN_PROGRESS
        assert NodeStatus.COMPLETE.value == "complete"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class TestEntities:
    def test_feature_defaults(self):
        feature = Feature(id="f1", name="Feature")
        assert feature.completion == 0
        assert feature.priority == Priority.MEDIUM
        assert feature.status is None
        assert feature.dependencies == []
        assert feature.subtasks == []

    def test_feature_find_subtask(self):
        feature = Feature(id="f1", name="F", subtasks=[Subtask(id="s1", name="S")])
        assert feature.find_subtask("s1").name == "S"
        assert feature.find_subtask("missing") is None

    def test_domain_highest_priority(self):
        domain = Domain(id="d1", name="D", features=[
            Feature(id="f1", name="A", priority=Priority.LOW),
            Feature(id="f2", name="B", priority=Priority.CRITICAL),
            Feature(id="f3", name="C", priority=Priority.HIGH),
        ])
        assert domain.highest_priority == Priority.CRITICAL

    def test_domain_without_features_has_no_priority(self):
        assert Domain(id="d1", name="D").highest_priority is None

    def test_domain_derived_status(self):
        assert Domain(id="d1", name="D", completion=100).derived_status == NodeStatus.COMPLETE
        assert Domain(id="d1", name="D", completion=0).derived_status == NodeStatus.PENDING

    def test_product_iterators_follow_tree_order(self, sample_product):
        feature_ids = [f.id for _, f in sample_product.iter_features()]
        assert feature_ids == [f"feature-{i}" for i in range(1, 8)]

        subtask_ids = [s.id for _, _, s in sample_product.iter_subtasks()]
        assert subtask_ids == [f"sub-{i}" for i in range(1, 22)]

    def test_priority_parsed_from_string(self):
        feature = Feature.model_validate({"id": "f1", "name": "F", "priority": "HIGH"})
        assert feature.priority == Priority.HIGH

    def test_invalid_priority_rejected(self):
        with pytest.raises(ValidationError):
            Feature.model_validate({"id": "f1", "name": "F", "priority": "URGENT"})


class TestProductReport:
    def test_to_markdown_contains_sections(self, sample_model):
        md = sample_model.to_markdown()
        assert "# agentful 진행 현황" in md
        assert "**전체 완료율**: 70%" in md
        assert "## 1. 도메인 요약" in md
        assert "| Agent System | 83% | 3개 | CRITICAL |" in md
        assert "#### Quality Gates [HIGH] - 70% (in-progress)" in md
        assert "**선행 기능**: feature-2" in md

    def test_to_markdown_empty_product(self):
        md = Product(id="p", name="Empty").to_markdown()
        assert "등록된 도메인이 없습니다." in md

    def test_to_json_serializes_tree(self, sample_product):
        data = json.loads(sample_product.to_json())
        assert data["id"] == "product-1"
        assert len(data["domains"]) == 3


# ---------------------------------------------------------------------------
# ProgressFilter
# ---------------------------------------------------------------------------

class TestProgressFilter:
    def test_empty_filter(self):
        assert ProgressFilter().is_empty
        assert ProgressFilter(name_pattern="").is_empty
        assert not ProgressFilter(status=NodeStatus.COMPLETE).is_empty

    def test_name_pattern_is_case_insensitive(self):
        criteria = ProgressFilter(name_pattern="AGENT")
        assert criteria.matches_subtask(Subtask(id="s", name="Backend agent"))
        assert not criteria.matches_subtask(Subtask(id="s", name="Type checking"))

    def test_status_falls_back_to_completion(self):
        criteria = ProgressFilter(status=NodeStatus.COMPLETE)
        assert criteria.matches_subtask(Subtask(id="s", name="S", completion=100))
        assert not criteria.matches_subtask(Subtask(id="s", name="S", completion=60))

    def test_priority_never_matches_subtask_or_domain(self):
        criteria = ProgressFilter(priority=Priority.HIGH)
        assert not criteria.matches_subtask(Subtask(id="s", name="S"))
        assert not criteria.matches_domain(Domain(id="d", name="D"))
        assert criteria.matches_feature(Feature(id="f", name="F", priority=Priority.HIGH))
        assert not criteria.matches_feature(Feature(id="f", name="F", priority=Priority.LOW))

    def test_all_conditions_are_conjunctive(self):
        criteria = ProgressFilter(status=NodeStatus.IN_PROGRESS, priority=Priority.HIGH, name_pattern="gate")
        assert criteria.matches_feature(
            Feature(id="f", name="Quality Gates", completion=70, priority=Priority.HIGH)
        )
        assert not criteria.matches_feature(
            Feature(id="f", name="Quality Gates", completion=100, priority=Priority.HIGH)
        )


class TestQueryResult:
    def test_product_always_visible(self):
        result = QueryResult()
        assert result.is_visible(NodeLevel.PRODUCT, "anything")
        assert not result.is_visible(NodeLevel.DOMAIN, "dom-1")

    def test_matched_ids_concatenates_features_then_subtasks(self):
        result = QueryResult(matched_feature_ids=["f1"], matched_subtask_ids=["s1", "s2"])
        assert result.matched_ids == ["f1", "s1", "s2"]

    def test_visible_sets(self):
        result = QueryResult(visible_domain_ids=["d1"], visible_feature_ids=["f1"], visible_subtask_ids=[])
        sets = result.visible_sets()
        assert sets[NodeLevel.DOMAIN] == {"d1"}
        assert sets[NodeLevel.FEATURE] == {"f1"}
        assert sets[NodeLevel.SUBTASK] == set()


# ---------------------------------------------------------------------------
# Updates / summary / layout
# ---------------------------------------------------------------------------

class TestMiscModels:
    def test_progress_update_parses_level(self):
        update = ProgressUpdate.model_validate(
            {"level": "subtask", "parent_id": "feature-1", "entity": {"id": "s", "name": "S"}}
        )
        assert update.level == NodeLevel.SUBTASK
        assert update.entity["id"] == "s"

    def test_integrity_report_validity(self):
        assert IntegrityReport().is_valid
        assert not IntegrityReport(cycles=[["a", "b"]]).is_valid
        assert not IntegrityReport(dangling={"a": ["x"]}).is_valid

    def test_default_footprints_shrink_by_level(self):
        widths = [DEFAULT_FOOTPRINTS[level].width for level in NodeLevel]
        assert widths == [220, 200, 180, 160]

    def test_tree_layout_lookup(self):
        node = LayoutNode(
            id="p", level=NodeLevel.PRODUCT, name="P", x=0, y=0, width=220, height=110,
            completion=0, subtree_x=0, subtree_width=220,
        )
        layout = TreeLayout(nodes=[node], edges=[LayoutEdge(source_id="p", target_id="d")])
        assert layout.get_node("p") is node
        assert layout.get_node("p", NodeLevel.DOMAIN) is None
        assert layout.children_of("p") == ["d"]
