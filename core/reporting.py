# core/reporting.py
from __future__ import annotations
import html
import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from core.models import Argument, has_value


def step_string(name: str, param: Any = None) -> str:
    if isinstance(param, (dict, list)):
        param_str = json.dumps(param, ensure_ascii=False, indent=2)
    elif name == "sleep" and has_value(param):
        param_str = f"{param}ms"
    elif param is None or isinstance(param, str):
        param_str = "" if param is None else param
    else:
        param_str = json.dumps(param)
    return f"{name}\n  {param_str}"


def print_step(name: str, param: Any = None, out: Callable[[str], None] = print) -> None:
    out(f"- {step_string(name, param)}")


def start_run(url: Optional[str], browser: str, headed: bool) -> Dict[str, Any]:
    return {
        "url": url,
        "browser": browser,
        "headed": headed,
        "started": time.time(),
        "steps": [],
        "artifacts": [],
        "status": "running",
        "error": None,
    }


def record_step(results: Dict[str, Any], name: str, value: Any) -> Dict[str, Any]:
    rec = {
        "index": len(results["steps"]) + 1,
        "name": name,
        "value": value,
        "started": time.time(),
        "ended": None,
        "status": "running",
        "error": None,
    }
    results["steps"].append(rec)
    return rec


def finish_step(rec: Dict[str, Any], status: str = "passed", error: Optional[str] = None) -> None:
    rec["ended"] = time.time()
    rec["status"] = status
    if error:
        rec["error"] = error


def attach_artifact(results: Dict[str, Any], kind: str, path: Path) -> None:
    results["artifacts"].append({"type": kind, "path": str(path)})


class RunReporter:
    """Console notifications for each argument, mirrored into a results dict for the summary."""

    def __init__(self, results: Optional[Dict[str, Any]] = None, out: Callable[[str], None] = print):
        self.results = results if results is not None else start_run(None, "-", False)
        self.out = out
        self._current: Optional[Dict[str, Any]] = None

    def progress(self, arg: Argument) -> None:
        self._current = record_step(self.results, arg.name, arg.value)
        self.out(f"[run] {arg.name} {'' if arg.value is None else arg.value}".rstrip())

    def completed(self, arg: Argument) -> None:
        if self._current is not None:
            finish_step(self._current, "passed")
        if arg.is_action:
            print_step(arg.name, arg.value, out=self.out)

    def answer(self, value: Any) -> None:
        print_step("answer", value, out=self.out)

    def failed(self, arg: Argument, error: BaseException) -> None:
        if self._current is not None:
            finish_step(self._current, "failed", str(error))
        print_step(f"{arg.name} - Failed", arg.value, out=self.out)
        print_step("Error", str(error), out=self.out)


def _status_badge(s: str) -> str:
    color = {"passed": "#16a34a", "failed": "#dc2626", "running": "#2563eb"}.get(s, "#6b7280")
    return f'<span style="background:{color};color:#fff;border-radius:8px;padding:2px 8px;font-size:12px">{html.escape(s)}</span>'


def _duration(s: Dict[str, Any]) -> float:
    return (s["ended"] or time.time()) - s["started"]


def finalize_run(results: Dict[str, Any], status: str, error: Optional[str], reports_dir: Optional[Path]) -> None:
    """Close out the run; write report_summary.txt/.html when a reports dir is configured."""
    results["status"] = status
    results["error"] = error
    if reports_dir is None:
        return
    reports_dir.mkdir(parents=True, exist_ok=True)
    total_sec = time.time() - results["started"]

    txt_lines = [
        f"URL: {results.get('url')}",
        f"Browser: {results['browser']} | Headed: {results['headed']}",
        f"Status: {results['status']}",
        f"Error: {results['error'] or '-'}",
        f"Duration: {total_sec:.2f}s",
        "",
        "Steps:",
    ]
    for s in results["steps"]:
        txt_lines.append(f"  [{s['index']}] --{s['name']}  ({_duration(s):.2f}s)  -> {s['status']}  val={s.get('value')!r}")
        if s.get("error"):
            txt_lines.append(f"       error: {s['error']}")
    (reports_dir / "report_summary.txt").write_text("\n".join(txt_lines), encoding="utf-8")

    rows = []
    for s in results["steps"]:
        value = "" if s.get("value") is None else str(s["value"])
        rows.append(
            "<tr>"
            f"<td>{s['index']}</td>"
            f"<td><code>--{html.escape(s['name'])}</code></td>"
            f"<td><code>{html.escape(value)}</code></td>"
            f"<td>{_duration(s):.2f}s</td>"
            f"<td>{_status_badge(s['status'])}</td>"
            f"<td>{html.escape(s.get('error') or '')}</td>"
            "</tr>"
        )
    art_rows = []
    for a in results["artifacts"]:
        p = html.escape(a["path"])
        thumb = ""
        if p.lower().endswith((".png", ".jpg", ".jpeg")):
            thumb = f'<div><img src="{p}" style="max-width:320px;border:1px solid #ddd;margin-top:4px"/></div>'
        art_rows.append(f'<tr><td>{html.escape(a["type"])}</td><td><a href="{p}" target="_blank">{p}</a>{thumb}</td></tr>')

    html_doc = f"""<!doctype html>
<html lang="en"><head>
<meta charset="utf-8"/>
<title>Run Report – {html.escape(str(results.get('url') or ''))}</title>
<style>
 body{{font-family:Arial,Helvetica,sans-serif;margin:24px}}
 table{{border-collapse:collapse;width:100%}}
 th,td{{border:1px solid #e5e7eb;padding:8px;text-align:left}}
 th{{background:#f3f4f6}}
 code{{background:#f3f4f6;padding:1px 4px;border-radius:4px}}
</style>
</head><body>
<h2>Run Report – {html.escape(str(results.get('url') or ''))}</h2>
<div><b>Browser:</b> {html.escape(results['browser'])} | <b>Headed:</b> {results['headed']}</div>
<div><b>Status:</b> {_status_badge(results['status'])}</div>
<div><b>Error:</b> {html.escape(results['error'] or '-')}</div>
<div><b>Duration:</b> {total_sec:.2f}s</div>

<h3>Steps</h3>
<table>
  <thead><tr><th>#</th><th>Argument</th><th>Value</th><th>Time</th><th>Status</th><th>Error</th></tr></thead>
  <tbody>{''.join(rows)}</tbody>
</table>

<h3>Artifacts</h3>
<table>
  <thead><tr><th>Type</th><th>Path</th></tr></thead>
  <tbody>{''.join(art_rows) if art_rows else '<tr><td colspan="2">No artifacts</td></tr>'}</tbody>
</table>
</body></html>"""
    (reports_dir / "report_summary.html").write_text(html_doc, encoding="utf-8")
    print(f"[report] {reports_dir / 'report_summary.html'}")
