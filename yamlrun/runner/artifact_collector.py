"""
Debugging artifacts captured when a step fails.

For the failing step we keep:
- a full-page screenshot
- the page HTML
- a JSON metadata file (step, error, current URL, what was captured)

Collection is best-effort: a capture that fails is recorded in the
metadata and logged, and never replaces the step error.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

from yamlrun.runner.provider import Page

logger = logging.getLogger(__name__)


def collect_failure_artifacts(
    page: Page,
    run_dir: str,
    step_index: int,
    step_kind: str,
    error: BaseException | None = None,
) -> Dict[str, Any]:
    """
    Write failure artifacts for ``step_index`` into ``run_dir``.

    Returns: what was collected (paths, or ``*_error`` entries)
    """
    os.makedirs(run_dir, exist_ok=True)
    prefix = os.path.join(run_dir, f"failure_step_{step_index:03d}")
    artifacts: Dict[str, Any] = {
        "step_index": step_index,
        "step_type": step_kind,
        "error": str(error) if error else None,
    }

    try:
        page.screenshot(f"{prefix}.png")
        artifacts["screenshot_path"] = f"{prefix}.png"
    except Exception as e:
        logger.warning("failure screenshot for step %d not captured: %s", step_index, e)
        artifacts["screenshot_error"] = str(e)

    try:
        html = page.content()
        with open(f"{prefix}.html", "w", encoding="utf-8") as f:
            f.write(html)
        artifacts["html_path"] = f"{prefix}.html"
        artifacts["html_size"] = len(html)
    except Exception as e:
        logger.warning("failure HTML for step %d not captured: %s", step_index, e)
        artifacts["html_error"] = str(e)

    try:
        artifacts["current_url"] = page.current_url()
    except Exception as e:
        artifacts["current_url_error"] = str(e)

    try:
        with open(f"{prefix}_metadata.json", "w", encoding="utf-8") as f:
            json.dump(artifacts, f, ensure_ascii=False, indent=2)
        artifacts["metadata_path"] = f"{prefix}_metadata.json"
    except OSError as e:
        logger.warning("failure metadata for step %d not written: %s", step_index, e)
        artifacts["metadata_error"] = str(e)

    return artifacts
