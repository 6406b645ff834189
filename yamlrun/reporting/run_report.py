"""
Per-file run reports.

For every scenario file run with an output directory, a report directory
``<output>/<file stem>/`` receives the files below. When several files in one
run share a stem, later ones get ``<stem>-2``, ``<stem>-3`` and so on.

- ``step_log.jsonl``: one JSON object per executed step
- ``report.pdf``: a summary table, the scenario's steps and their results

Failure artifacts written by the engine land in the same directory.
"""

from __future__ import annotations

import json
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Container, Iterable

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, Preformatted, SimpleDocTemplate, Spacer, Table, TableStyle

from yamlrun.runner.engine import StepRecord
from yamlrun.runner.scenario import Scenario, Step

FONT_NAME = "Helvetica"

_TABLE_STYLE = [
    ("FONTNAME", (0, 0), (-1, -1), FONT_NAME),
    ("FONTSIZE", (0, 0), (-1, -1), 10),
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F2F4F7")),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#D0D5DD")),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("PADDING", (0, 0), (-1, -1), 6),
]


def report_dir_for(output_dir: str | Path, scenario_path: str | Path, taken: Container[str] = ()) -> Path:
    """Report directory for ``scenario_path``, skipping names already in ``taken``."""
    stem = Path(scenario_path).stem
    name, n = stem, 1
    while name in taken:
        n += 1
        name = f"{stem}-{n}"
    return Path(output_dir) / name


def write_step_log(run_dir: Path, records: Iterable[StepRecord]) -> Path:
    run_dir.mkdir(parents=True, exist_ok=True)
    path = run_dir / "step_log.jsonl"
    with path.open("w", encoding="utf-8") as f:
        for r in records:
            row = {
                "i": r.index,
                "type": r.kind,
                "status": r.status,
                "duration_ms": r.duration_ms,
                "error": r.error,
            }
            f.write(json.dumps(row, ensure_ascii=False) + "\n")
    return path


def summarize_step(step: Step) -> str:
    parts = [f"{f.name}={getattr(step, f.name)!r}" for f in fields(step)]
    return " ".join(parts) if parts else "-"


def _fmt_dt(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def _make_kv_table(rows: list[tuple[str, str]]) -> Table:
    t = Table([["Item", "Value"]] + [[k, v] for (k, v) in rows], colWidths=[4.0 * cm, 12.5 * cm])
    t.setStyle(TableStyle(_TABLE_STYLE))
    return t


def _make_steps_table(scenario: Scenario, records: list[StepRecord]) -> Table:
    by_index = {r.index: r for r in records}
    data: list[list[str]] = [["#", "Result", "Type", "Time (ms)", "Fields"]]
    for i, step in enumerate(scenario.steps, start=1):
        r = by_index.get(i)
        data.append(
            [
                str(i),
                r.status if r else "NOT RUN",
                step.kind,
                str(r.duration_ms) if r else "-",
                summarize_step(step),
            ]
        )
    t = Table(data, colWidths=[1.0 * cm, 2.2 * cm, 3.4 * cm, 2.0 * cm, 8.0 * cm], repeatRows=1)
    t.setStyle(TableStyle(_TABLE_STYLE))
    return t


def generate_run_report_pdf(
    *,
    run_dir: Path,
    scenario_path: str | Path,
    scenario: Scenario,
    records: list[StepRecord],
    error: BaseException | None = None,
) -> Path:
    run_dir.mkdir(parents=True, exist_ok=True)
    out_path = run_dir / "report.pdf"

    styles = getSampleStyleSheet()
    for key in ("Title", "Normal", "Heading2"):
        styles[key].fontName = FONT_NAME

    passed = error is None and all(r.status == "PASSED" for r in records)
    total_ms = sum(r.duration_ms for r in records)

    story: list[Any] = []
    story.append(Paragraph("E2E Scenario Report", styles["Title"]))
    story.append(Paragraph(f"Generated (UTC): {_fmt_dt(datetime.now(timezone.utc))}", styles["Normal"]))
    story.append(Spacer(1, 0.4 * cm))
    story.append(
        _make_kv_table(
            [
                ("Status", "PASSED" if passed else "FAILED"),
                ("File", str(scenario_path)),
                ("Description", scenario.description or "-"),
                ("Steps", f"{len(records)} of {len(scenario.steps)} run"),
                ("Duration", f"{total_ms / 1000.0:.2f}s"),
            ]
        )
    )
    story.append(Spacer(1, 0.5 * cm))

    story.append(Paragraph("Steps", styles["Heading2"]))
    story.append(_make_steps_table(scenario, records))

    if error is not None:
        story.append(Spacer(1, 0.5 * cm))
        story.append(Paragraph("Failure", styles["Heading2"]))
        story.append(Preformatted(str(error), styles["Code"]))

    doc = SimpleDocTemplate(
        str(out_path),
        pagesize=A4,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title="E2E Scenario Report",
    )
    doc.build(story)
    return out_path


def write_run_report(
    run_dir: Path,
    scenario_path: str | Path,
    scenario: Scenario,
    records: list[StepRecord],
    error: BaseException | None = None,
) -> dict[str, str]:
    """Write the step log and the PDF report; returns their paths."""
    log_path = write_step_log(run_dir, records)
    pdf_path = generate_run_report_pdf(
        run_dir=run_dir,
        scenario_path=scenario_path,
        scenario=scenario,
        records=records,
        error=error,
    )
    return {"step_log": str(log_path), "report": str(pdf_path)}
