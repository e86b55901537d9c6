"""Unit tests for write validation utilities.

Tests entity id and name checks, completion range checks,
status/completion consistency, and priority weight map validation.
All tests are pure unit tests with no model or API dependencies.
"""

import math
import pytest

from progressmap.exceptions import InvalidEntityError, InvalidWeightsError
from progressmap.models import NodeStatus, Priority
from progressmap.utils.validation import (
    MAX_ID_LENGTH,
    validate_entity_id,
    validate_name,
    validate_completion,
    resolve_status,
    validate_priority_weights,
)


# ---------------------------------------------------------------------------
# validate_entity_id / validate_name
# ---------------------------------------------------------------------------

class TestValidateEntityId:
    def test_valid_id_passes(self):
        assert validate_entity_id("feature-1", "feature") == "feature-1"

    @pytest.mark.parametrize("bad_id", ["", "   ", None, 42])
    def test_empty_or_non_string_rejected(self, bad_id):
        with pytest.raises(InvalidEntityError) as exc_info:
            validate_entity_id(bad_id, "feature")
        assert exc_info.value.details["level"] == "feature"

    def test_max_length_boundary(self):
        assert validate_entity_id("a" * MAX_ID_LENGTH, "subtask")
        with pytest.raises(InvalidEntityError):
            validate_entity_id("a" * (MAX_ID_LENGTH + 1), "subtask")


class TestValidateName:
    def test_valid_name_passes(self):
        assert validate_name("Task delegation", "sub-1") == "Task delegation"

    @pytest.mark.parametrize("bad_name", ["", "  ", None])
    def test_blank_name_rejected(self, bad_name):
        with pytest.raises(InvalidEntityError):
            validate_name(bad_name, "sub-1")


# ---------------------------------------------------------------------------
# validate_completion
# ---------------------------------------------------------------------------

class TestValidateCompletion:
    @pytest.mark.parametrize("value", [0, 1, 50, 99, 100])
    def test_in_range_values_pass(self, value):
        assert validate_completion(value, "sub-1") == value

    @pytest.mark.parametrize("value", [-1, 101, 150])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(InvalidEntityError) as exc_info:
            validate_completion(value, "sub-1")
        assert exc_info.value.details == {"id": "sub-1", "completion": value}

    @pytest.mark.parametrize("value", [50.5, "50", None, True])
    def test_non_integer_rejected(self, value):
        with pytest.raises(InvalidEntityError):
            validate_completion(value, "sub-1")


# ---------------------------------------------------------------------------
# resolve_status
# ---------------------------------------------------------------------------

class TestResolveStatus:
    def test_missing_status_is_derived(self):
        assert resolve_status(0, None, "s") == NodeStatus.PENDING
        assert resolve_status(40, None, "s") == NodeStatus.IN_PROGRESS
        assert resolve_status(100, None, "s") == NodeStatus.COMPLETE

    def test_matching_status_is_kept(self):
        assert resolve_status(100, NodeStatus.COMPLETE, "s") == NodeStatus.COMPLETE

    def test_mismatched_status_rejected(self):
        with pytest.raises(InvalidEntityError) as exc_info:
            resolve_status(100, NodeStatus.IN_PROGRESS, "sub-1")
        assert exc_info.value.details["expected_status"] == "complete"

    def test_pending_with_progress_rejected(self):
        with pytest.raises(InvalidEntityError):
            resolve_status(10, NodeStatus.PENDING, "sub-1")


# ---------------------------------------------------------------------------
# validate_priority_weights
# ---------------------------------------------------------------------------

class TestValidatePriorityWeights:
    def test_string_keys_normalized(self, default_weights):
        result = validate_priority_weights(default_weights, [Priority.HIGH])
        assert result[Priority.CRITICAL] == 1.5
        assert result[Priority.LOW] == 0.5
        assert set(result) == set(Priority)

    def test_lowercase_and_enum_keys_accepted(self):
        result = validate_priority_weights({"high": 2, Priority.LOW: 1}, [Priority.HIGH, Priority.LOW])
        assert result == {Priority.HIGH: 2.0, Priority.LOW: 1.0}

    def test_unknown_priority_rejected(self):
        with pytest.raises(InvalidWeightsError) as exc_info:
            validate_priority_weights({"URGENT": 1.0}, [])
        assert exc_info.value.details["priority"] == "URGENT"

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidWeightsError):
            validate_priority_weights({"HIGH": -0.1}, [Priority.HIGH])

    @pytest.mark.parametrize("value", ["1.0", None, True, math.nan, math.inf, -math.inf])
    def test_non_numeric_weight_rejected(self, value):
        with pytest.raises(InvalidWeightsError):
            validate_priority_weights({"HIGH": value}, [Priority.HIGH])

    def test_missing_required_priority_rejected(self):
        with pytest.raises(InvalidWeightsError) as exc_info:
            validate_priority_weights({"LOW": 0.5}, [Priority.LOW, Priority.HIGH, Priority.CRITICAL])
        assert exc_info.value.details["missing"] == ["CRITICAL", "HIGH"]

    def test_unused_priority_may_be_omitted(self):
        result = validate_priority_weights({"MEDIUM": 1.0}, [Priority.MEDIUM])
        assert result == {Priority.MEDIUM: 1.0}

    def test_zero_weights_allowed(self):
        result = validate_priority_weights({"MEDIUM": 0}, [Priority.MEDIUM])
        assert result[Priority.MEDIUM] == 0.0

    def test_none_map_rejected(self):
        with pytest.raises(InvalidWeightsError):
            validate_priority_weights(None, [])
