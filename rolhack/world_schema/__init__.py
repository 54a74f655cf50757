"""World definition schema - authored network models and their validation."""

from .world import (
    WorldDefinition,
    WorldMeta,
    CircuitDefinition,
    NodeDefinition,
    LinkDefinition,
    FailMode,
    LinkStyle,
    DEFAULT_FAIL_DIE,
    MIN_FAIL_DIE,
    MAX_FAIL_DIE,
)
from .validation import (
    validate_world,
    validate_world_json,
    parse_world,
    format_error_path,
    ValidationIssue,
    ValidationResult,
    WorldValidationError,
)

__all__ = [
    "WorldDefinition",
    "WorldMeta",
    "CircuitDefinition",
    "NodeDefinition",
    "LinkDefinition",
    "FailMode",
    "LinkStyle",
    "DEFAULT_FAIL_DIE",
    "MIN_FAIL_DIE",
    "MAX_FAIL_DIE",
    "validate_world",
    "validate_world_json",
    "parse_world",
    "format_error_path",
    "ValidationIssue",
    "ValidationResult",
    "WorldValidationError",
]
