"""유틸리티 모듈."""

from .validation import (
    MAX_ID_LENGTH,
    validate_entity_id,
    validate_name,
    validate_completion,
    resolve_status,
    validate_priority_weights,
)

__all__ = [
    "MAX_ID_LENGTH",
    "validate_entity_id",
    "validate_name",
    "validate_completion",
    "resolve_status",
    "validate_priority_weights",
]
