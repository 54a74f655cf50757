"""
Audit Export - Render timelines and audit summaries as text, markdown or JSON.

JSON exports carry event data without per-event snapshots; they are meant
for sharing, not for restoring a run. Use the run-state document for that.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Iterable
import json

from ..engine_core.state import TimelineEvent
from .summary import RunAuditData


class ExportFormat(str, Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


def event_export_dict(event: TimelineEvent) -> dict[str, Any]:
    """Event fields for export, without the snapshot."""
    data = event.to_dict()
    data.pop("snapshot", None)
    return data


def export_timeline(
    timeline: Iterable[TimelineEvent],
    fmt: ExportFormat | str = ExportFormat.MARKDOWN,
    project_name: str | None = None,
) -> str:
    """Render a timeline in the requested format."""
    fmt = ExportFormat(fmt)
    events = list(timeline)

    if fmt == ExportFormat.JSON:
        return json.dumps(
            {
                "project": project_name,
                "eventCount": len(events),
                "events": [event_export_dict(e) for e in events],
            },
            indent=2,
            ensure_ascii=False,
        )

    title = f"Timeline: {project_name}" if project_name else "Timeline"

    if fmt == ExportFormat.TEXT:
        lines = [title, "=" * len(title)]
        if not events:
            lines.append("(no events)")
        for index, event in enumerate(events, start=1):
            where = event.circuit_id + (f"/{event.node_id}" if event.node_id else "")
            lines.append(
                f"{index:>3}. [{event.timestamp}] {event.event_type.value:<18} "
                f"{where}: {event.description}"
            )
        return "\n".join(lines) + "\n"

    lines = [f"# {title}", ""]
    if not events:
        lines.append("_No events recorded._")
        return "\n".join(lines) + "\n"

    lines.append("| # | Time | Event | Circuit | Node | Description |")
    lines.append("|---|------|-------|---------|------|-------------|")
    for index, event in enumerate(events, start=1):
        lines.append(
            f"| {index} | {event.timestamp} | {event.event_type.value} | "
            f"{_md(event.circuit_id)} | {_md(event.node_id or '')} | {_md(event.description)} |"
        )
    return "\n".join(lines) + "\n"


def export_audit_summary(
    audit: RunAuditData,
    fmt: ExportFormat | str = ExportFormat.MARKDOWN,
) -> str:
    """Render a whole-run audit in the requested format."""
    fmt = ExportFormat(fmt)

    if fmt == ExportFormat.JSON:
        data = audit.to_dict()
        data["timeline"] = [event_export_dict(e) for e in audit.timeline]
        return json.dumps(data, indent=2, ensure_ascii=False)

    heading = audit.run_name or audit.run_id or "Run"
    totals = [
        ("Project", audit.project_name or "-"),
        ("Created", audit.created_at or "-"),
        ("Progress", f"{audit.progress}% ({audit.hacked_nodes}/{audit.total_nodes} nodes hacked)"),
        ("Circuits", f"{audit.completed_circuits}/{audit.total_circuits} completed, "
                     f"{audit.blocked_circuits} blocked"),
        ("Blocked nodes", str(audit.blocked_nodes)),
        ("Discovered nodes", str(audit.discovered_nodes)),
        ("Hack attempts", str(audit.total_attempts)),
        ("Timeline events", str(len(audit.timeline))),
    ]

    if fmt == ExportFormat.TEXT:
        title = f"Audit: {heading}"
        lines = [title, "=" * len(title)]
        lines += [f"{label + ':':<18}{value}" for label, value in totals]
        lines += ["", "Circuits", "--------"]
        for circuit in audit.circuits:
            marker = "*" if circuit.is_current_circuit else " "
            lines.append(
                f"{marker} {circuit.name} [{circuit.status.value}] "
                f"{circuit.hacked_nodes}/{circuit.total_nodes} hacked, "
                f"{circuit.blocked_nodes} blocked, {circuit.progress}%"
            )
        if audit.warnings:
            lines += ["", "Warnings", "--------"]
            lines += [f"- {w.severity.value} @ {w.node_id}: {w.message}" for w in audit.warnings]
        return "\n".join(lines) + "\n"

    lines = [f"# Audit: {_md(heading)}", ""]
    lines += [f"- **{label}:** {_md(value)}" for label, value in totals]
    lines += [
        "",
        "## Circuits",
        "",
        "| Circuit | Status | Hacked | Blocked | Discovered | Progress |",
        "|---------|--------|--------|---------|------------|----------|",
    ]
    for circuit in audit.circuits:
        name = f"**{_md(circuit.name)}**" if circuit.is_current_circuit else _md(circuit.name)
        lines.append(
            f"| {name} | {circuit.status.value} | {circuit.hacked_nodes}/{circuit.total_nodes} | "
            f"{circuit.blocked_nodes} | {circuit.discovered_nodes} | {circuit.progress}% |"
        )
    if audit.warnings:
        lines += ["", "## Warnings", ""]
        lines += [f"- `{w.severity.value}` {_md(w.node_id)}: {_md(w.message)}" for w in audit.warnings]
    return "\n".join(lines) + "\n"


def _md(text: str) -> str:
    # Pipes would break table cells
    return text.replace("|", "\\|")
