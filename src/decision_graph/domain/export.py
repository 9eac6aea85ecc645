"""Decision export renderers (JSON, Markdown, CSV).

Pure domain module — ZERO framework imports besides orjson for JSON.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import orjson

from decision_graph.domain.models import ExportFormat

if TYPE_CHECKING:
    from collections.abc import Sequence

    from decision_graph.domain.models import Decision

CSV_HEADERS = ("id", "topic", "decision", "reasoning", "outcome", "confidence", "created_at")

_CONTENT_TYPES: dict[str, str] = {
    ExportFormat.JSON: "application/json",
    ExportFormat.MARKDOWN: "text/markdown",
    ExportFormat.CSV: "text/csv",
}

_EXTENSIONS: dict[str, str] = {
    ExportFormat.JSON: "json",
    ExportFormat.MARKDOWN: "md",
    ExportFormat.CSV: "csv",
}


def _iso_from_ms(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=UTC).isoformat()


def _escape_csv(value: str | None) -> str:
    if not value:
        return ""
    escaped = value.replace('"', '""')
    if any(ch in escaped for ch in (",", "\n", "\r", '"')):
        return f'"{escaped}"'
    return escaped


def export_json(decisions: Sequence[Decision], exported_at: datetime) -> str:
    body = {
        "decisions": [d.model_dump(mode="json") for d in decisions],
        "exported_at": exported_at.isoformat(),
    }
    return orjson.dumps(body, option=orjson.OPT_INDENT_2).decode()


def export_markdown(decisions: Sequence[Decision], exported_at: datetime) -> str:
    lines = [
        "# Decisions Export",
        "",
        f"Exported: {exported_at.isoformat()}",
        f"Total Decisions: {len(decisions)}",
        "",
        "---",
        "",
    ]
    for d in decisions:
        lines.append(f"## {d.topic or 'Untitled'}")
        lines.append("")
        lines.append(f"**Decision:** {d.decision or 'N/A'}")
        lines.append("")
        if d.reasoning:
            lines.append("**Reasoning:**")
            lines.append("")
            lines.append(d.reasoning)
            lines.append("")
        outcome = d.outcome.value if d.outcome else "Pending"
        confidence = d.confidence if d.confidence is not None else "N/A"
        lines.append(f"- **Outcome:** {outcome}")
        lines.append(f"- **Confidence:** {confidence}")
        lines.append(f"- **Created:** {_iso_from_ms(d.created_at)}")
        lines.append(f"- **ID:** `{d.id}`")
        lines.append("")
        lines.append("---")
        lines.append("")
    return "\n".join(lines)


def export_csv(decisions: Sequence[Decision]) -> str:
    lines = [",".join(CSV_HEADERS)]
    for d in decisions:
        row = [
            _escape_csv(d.id),
            _escape_csv(d.topic),
            _escape_csv(d.decision),
            _escape_csv(d.reasoning),
            _escape_csv(d.outcome.value if d.outcome else None),
            "" if d.confidence is None else str(d.confidence),
            _iso_from_ms(d.created_at),
        ]
        lines.append(",".join(row))
    return "\n".join(lines)


def render_export(
    decisions: Sequence[Decision],
    fmt: ExportFormat,
    exported_at: datetime | None = None,
) -> tuple[str, str, str]:
    """Render ``decisions`` in ``fmt``.

    Returns (content, content_type, filename).
    """
    exported_at = exported_at or datetime.now(UTC)
    if fmt == ExportFormat.MARKDOWN:
        content = export_markdown(decisions, exported_at)
    elif fmt == ExportFormat.CSV:
        content = export_csv(decisions)
    else:
        content = export_json(decisions, exported_at)
    filename = f"decisions-{exported_at.date().isoformat()}.{_EXTENSIONS[fmt]}"
    return content, _CONTENT_TYPES[fmt], filename
