"""
World Validation - Schema and business-rule checks for world definitions.

Validation runs in two layers:
1. Structural (pydantic): required fields, types, numeric ranges, enums
2. Business rules, evaluated per circuit:
   - unique circuit IDs
   - at least one entry node (level 0)
   - unique node and link IDs
   - no orphan link endpoints, no self-loops
   - failDie present and within D3-D20 (blocking)
   - at most one final node

Every business-rule problem is collected so a single pass reports
everything that is wrong. Advisory findings go to `warnings` and never
make a world invalid.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Union
import json

from pydantic import ValidationError

from .world import (
    WorldDefinition,
    CircuitDefinition,
    MIN_FAIL_DIE,
    MAX_FAIL_DIE,
)


PathElement = Union[str, int]


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation problem: where, what kind, and a readable message."""
    path: tuple[PathElement, ...]
    code: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "code": self.code,
            "message": self.message,
        }


class WorldValidationError(Exception):
    """Raised when a world definition fails validation."""

    def __init__(self, errors: list[ValidationIssue]):
        self.errors = errors
        super().__init__(f"World validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue] = field(default_factory=list)
    world: WorldDefinition | None = None  # Set only when valid

    def error_codes(self) -> list[str]:
        return [error.code for error in self.errors]


def validate_world(document: Any) -> ValidationResult:
    """
    Validate a world definition document.

    Returns ValidationResult; `world` holds the typed definition when
    the document is valid.
    """
    try:
        world = WorldDefinition.model_validate(document)
    except ValidationError as e:
        return ValidationResult(valid=False, errors=_convert_pydantic_errors(e))

    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    seen_circuit_ids: set[str] = set()
    for circuit_idx, circuit in enumerate(world.circuits):
        if circuit.id in seen_circuit_ids:
            errors.append(ValidationIssue(
                path=("circuits", circuit_idx, "id"),
                code="DUPLICATE_CIRCUIT_ID",
                message=f'Duplicate circuit ID: "{circuit.id}"',
            ))
        seen_circuit_ids.add(circuit.id)

        errors.extend(_validate_circuit(circuit, circuit_idx))

    warnings.extend(_cross_circuit_warnings(world))
    for circuit_idx, circuit in enumerate(world.circuits):
        warnings.extend(_isolated_node_warnings(circuit, circuit_idx))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        world=world if not errors else None,
    )


def validate_world_json(json_text: str) -> ValidationResult:
    """Parse a JSON string and validate it as a world definition."""
    try:
        document = json.loads(json_text)
    except json.JSONDecodeError as e:
        return ValidationResult(
            valid=False,
            errors=[ValidationIssue(path=(), code="INVALID_JSON", message=f"Invalid JSON: {e.msg}")],
        )
    return validate_world(document)


def parse_world(document: Any) -> WorldDefinition:
    """
    Validate and return the typed world.

    Raises WorldValidationError carrying every error found.
    """
    result = validate_world(document)
    if not result.valid:
        raise WorldValidationError(result.errors)
    return result.world


def format_error_path(path: tuple[PathElement, ...] | list[PathElement]) -> str:
    """Human-readable path, e.g. circuits[0].nodes[2].failDie"""
    if not path:
        return "root"
    parts = []
    for i, element in enumerate(path):
        if isinstance(element, int):
            parts.append(f"[{element}]")
        elif i == 0:
            parts.append(element)
        else:
            parts.append(f".{element}")
    return "".join(parts)


def _convert_pydantic_errors(exc: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(path=tuple(err["loc"]), code=err["type"], message=err["msg"])
        for err in exc.errors()
    ]


def _validate_circuit(circuit: CircuitDefinition, circuit_idx: int) -> list[ValidationIssue]:
    """Business rules for a single circuit."""
    errors = []
    base = ("circuits", circuit_idx)

    if not circuit.entry_nodes:
        errors.append(ValidationIssue(
            path=base,
            code="NO_ENTRY_NODE",
            message=f'Circuit "{circuit.name}" needs at least one level 0 node (entry point)',
        ))

    final_count = 0
    seen_node_ids: set[str] = set()
    for node_idx, node in enumerate(circuit.nodes):
        node_path = base + ("nodes", node_idx)

        if node.id in seen_node_ids:
            errors.append(ValidationIssue(
                path=node_path + ("id",),
                code="DUPLICATE_NODE_ID",
                message=f'Duplicate node ID in circuit "{circuit.name}": "{node.id}"',
            ))
        seen_node_ids.add(node.id)

        if node.challenge_difficulty < 0:
            errors.append(ValidationIssue(
                path=node_path + ("challengeDifficulty",),
                code="INVALID_CD",
                message=f'Challenge difficulty must be >= 0 on node "{node.name}"',
            ))

        if node.fail_die is None:
            errors.append(ValidationIssue(
                path=node_path + ("failDie",),
                code="MISSING_FAIL_DIE",
                message=f'Fail die is required on node "{node.name}"',
            ))
        elif not MIN_FAIL_DIE <= node.fail_die <= MAX_FAIL_DIE:
            errors.append(ValidationIssue(
                path=node_path + ("failDie",),
                code="INVALID_FAIL_DIE",
                message=(
                    f'Fail die must be between D{MIN_FAIL_DIE} and D{MAX_FAIL_DIE} '
                    f'on node "{node.name}" (got D{node.fail_die})'
                ),
            ))

        if node.is_final:
            final_count += 1

    if final_count > 1:
        errors.append(ValidationIssue(
            path=base + ("nodes",),
            code="MULTIPLE_FINAL_NODES",
            message=f'Circuit "{circuit.name}" can only have one final node (found {final_count})',
        ))

    node_ids = set(circuit.node_ids)
    seen_link_ids: set[str] = set()
    for link_idx, link in enumerate(circuit.links):
        link_path = base + ("links", link_idx)

        if link.id in seen_link_ids:
            errors.append(ValidationIssue(
                path=link_path + ("id",),
                code="DUPLICATE_LINK_ID",
                message=f'Duplicate link ID in circuit "{circuit.name}": "{link.id}"',
            ))
        seen_link_ids.add(link.id)

        if link.from_node not in node_ids:
            errors.append(ValidationIssue(
                path=link_path + ("from",),
                code="ORPHAN_LINK_FROM",
                message=f'Link "{link.id}" starts at unknown node "{link.from_node}"',
            ))
        if link.to_node not in node_ids:
            errors.append(ValidationIssue(
                path=link_path + ("to",),
                code="ORPHAN_LINK_TO",
                message=f'Link "{link.id}" ends at unknown node "{link.to_node}"',
            ))

        if link.from_node == link.to_node:
            errors.append(ValidationIssue(
                path=link_path,
                code="SELF_LINK",
                message=f'Link "{link.id}" cannot connect a node to itself',
            ))

    return errors


def _cross_circuit_warnings(world: WorldDefinition) -> list[ValidationIssue]:
    """
    Run state keys nodes and links by ID across the whole world, so
    reusing an ID in two circuits makes them share progress.
    """
    warnings = []
    node_owner: dict[str, str] = {}
    link_owner: dict[str, str] = {}

    for circuit_idx, circuit in enumerate(world.circuits):
        for node_idx, node in enumerate(circuit.nodes):
            owner = node_owner.setdefault(node.id, circuit.id)
            if owner != circuit.id:
                warnings.append(ValidationIssue(
                    path=("circuits", circuit_idx, "nodes", node_idx, "id"),
                    code="NODE_ID_REUSED",
                    message=f'Node ID "{node.id}" is also used in circuit "{owner}"',
                ))
        for link_idx, link in enumerate(circuit.links):
            owner = link_owner.setdefault(link.id, circuit.id)
            if owner != circuit.id:
                warnings.append(ValidationIssue(
                    path=("circuits", circuit_idx, "links", link_idx, "id"),
                    code="LINK_ID_REUSED",
                    message=f'Link ID "{link.id}" is also used in circuit "{owner}"',
                ))

    return warnings


def _isolated_node_warnings(circuit: CircuitDefinition, circuit_idx: int) -> list[ValidationIssue]:
    if len(circuit.nodes) < 2:
        return []

    linked = set()
    for link in circuit.links:
        linked.add(link.from_node)
        linked.add(link.to_node)

    return [
        ValidationIssue(
            path=("circuits", circuit_idx, "nodes", node_idx),
            code="ISOLATED_NODE",
            message=f'Node "{node.name}" has no links and can never be reached',
        )
        for node_idx, node in enumerate(circuit.nodes)
        if node.id not in linked and not node.is_entry
    ]
