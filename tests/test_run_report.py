import json

from yamlrun.core.errors import StepFailedError
from yamlrun.reporting.run_report import report_dir_for, summarize_step, write_run_report
from yamlrun.runner.engine import StepRecord
from yamlrun.runner.scenario import Click, Fill, Goto, Scenario


def test_report_dir_uses_file_stem(tmp_path):
    assert report_dir_for(tmp_path, "suite/login.yml") == tmp_path / "login"


def test_report_dir_skips_taken_names(tmp_path):
    assert report_dir_for(tmp_path, "b/login.yaml", {"login"}) == tmp_path / "login-2"
    assert report_dir_for(tmp_path, "c/login.yml", {"login", "login-2"}) == tmp_path / "login-3"


def test_summarize_step():
    assert summarize_step(Fill(selector="#email", value="a@b.c")) == "selector='#email' value='a@b.c'"


def test_write_run_report(tmp_path):
    scenario = Scenario(
        description="login",
        steps=(Goto(url="https://example.com"), Click(selector="#missing"), Click(selector="#next")),
    )
    records = [
        StepRecord(1, "goto", "PASSED", 120),
        StepRecord(2, "click", "FAILED", 30, "failed to click element #missing"),
    ]
    error = StepFailedError(2, scenario.steps[1], Exception("failed to click element #missing"))

    paths = write_run_report(tmp_path, "login.yml", scenario, records, error)

    rows = [json.loads(line) for line in (tmp_path / "step_log.jsonl").read_text(encoding="utf-8").splitlines()]
    assert rows == [
        {"i": 1, "type": "goto", "status": "PASSED", "duration_ms": 120, "error": None},
        {"i": 2, "type": "click", "status": "FAILED", "duration_ms": 30, "error": "failed to click element #missing"},
    ]
    pdf = tmp_path / "report.pdf"
    assert paths["report"] == str(pdf)
    assert pdf.read_bytes().startswith(b"%PDF")
