from core.models import Argument
from core.reporting import RunReporter, finalize_run, start_run, step_string


def test_step_string_formats():
    assert step_string("action", "click") == "action\n  click"
    assert step_string("sleep", 300) == "sleep\n  300ms"
    assert step_string("answer", {"a": 1}) == 'answer\n  {\n  "a": 1\n}'
    assert step_string("launched") == "launched\n  "
    assert step_string("answer", True) == "answer\n  true"
    assert step_string("answer", 2.5) == "answer\n  2.5"
    assert step_string("sleep", "") == "sleep\n  "


def test_reporter_notifications():
    lines = []
    reporter = RunReporter(start_run("https://example.com", "chromium", False), out=lines.append)
    arg = Argument("query", "title")
    reporter.progress(arg)
    reporter.completed(arg)
    reporter.answer("Example Domain")
    bad = Argument("assert", "logged in")
    reporter.progress(bad)
    reporter.failed(bad, RuntimeError("not logged in"))

    assert lines == [
        "[run] query title",
        "- query\n  title",
        "- answer\n  Example Domain",
        "[run] assert logged in",
        "- assert - Failed\n  logged in",
        "- Error\n  not logged in",
    ]
    steps = reporter.results["steps"]
    assert [s["status"] for s in steps] == ["passed", "failed"]
    assert steps[1]["error"] == "not logged in"


def test_preference_completion_is_silent():
    lines = []
    reporter = RunReporter(out=lines.append)
    arg = Argument("url", "https://example.com")
    reporter.progress(arg)
    reporter.completed(arg)
    assert lines == ["[run] url https://example.com"]


def test_finalize_without_reports_dir_writes_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    results = start_run("https://example.com", "chromium", False)
    finalize_run(results, "passed", None, None)
    assert results["status"] == "passed"
    assert list(tmp_path.iterdir()) == []


def test_finalize_writes_summaries(tmp_path):
    results = start_run("https://example.com", "webkit", True)
    reporter = RunReporter(results, out=lambda s: None)
    arg = Argument("action", "<click> & go")
    reporter.progress(arg)
    reporter.completed(arg)
    finalize_run(results, "passed", None, tmp_path / "out")

    txt = (tmp_path / "out" / "report_summary.txt").read_text(encoding="utf-8")
    assert "Browser: webkit | Headed: True" in txt
    assert "--action" in txt
    html_doc = (tmp_path / "out" / "report_summary.html").read_text(encoding="utf-8")
    assert "&lt;click&gt; &amp; go" in html_doc
    assert "No artifacts" in html_doc
