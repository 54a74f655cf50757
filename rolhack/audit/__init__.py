"""Audit - Read-only summaries, point-in-time replay and exports of a run."""

from .summary import (
    CircuitStatus,
    CircuitAudit,
    RunAuditData,
    derive_status,
    circuit_summary,
    generate_audit_data,
    state_at,
)
from .export import ExportFormat, export_timeline, export_audit_summary

__all__ = [
    "CircuitStatus",
    "CircuitAudit",
    "RunAuditData",
    "derive_status",
    "circuit_summary",
    "generate_audit_data",
    "state_at",
    "ExportFormat",
    "export_timeline",
    "export_audit_summary",
]
