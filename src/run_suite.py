#!/usr/bin/env python3

import argparse
import asyncio
import html
import json
import sys
from datetime import datetime
from pathlib import Path

from run_plan import GROUPS, VARIANTS, DependencyGraph, RunConfig
from scenarios import group_scenarios, load_scenarios, select_scenarios
from suite_runner import run_test_suite


STATUSES = ("passed", "flaky", "failed", "skipped")


def count_statuses(results_json: dict) -> dict:
    counts = {status: 0 for status in STATUSES}
    for r in results_json.get("tests", []):
        status = r.get("status", "failed")
        counts[status] = counts.get(status, 0) + 1
    return counts


def write_html_report(results_json: dict, html_path: Path):
    counts = count_statuses(results_json)
    total = len(results_json.get("tests", []))

    page = f"""
<html><head><title>CandyMapper Test Report</title>
<style>
body {{ font-family: Arial, sans-serif; padding: 20px; }}
.summary {{ margin-bottom: 16px; }}
.pass {{ color: #0a7b44; }}
.flaky {{ color: #b36b00; }}
.fail {{ color: #b00020; }}
.skip {{ color: #666; }}
pre {{ background: #f6f8fa; padding: 12px; border-radius: 6px; overflow: auto; }}
</style>
</head><body>
  <h1>CandyMapper Test Report</h1>
  <div class="summary">
    <strong>Total:</strong> {total} &nbsp; <strong class="pass">Passed:</strong> {counts['passed']}
    &nbsp; <strong class="flaky">Flaky:</strong> {counts['flaky']}
    &nbsp; <strong class="fail">Failed:</strong> {counts['failed']}
    &nbsp; <strong class="skip">Skipped:</strong> {counts['skipped']}
  </div>
  <hr />
  {''.join(render_test_result(tr) for tr in results_json.get('tests', []))}
</body></html>
"""
    with open(html_path, "w", encoding="utf-8") as f:
        f.write(page)


def render_test_result(test_result: dict) -> str:
    status = test_result.get("status", "unknown")
    status_class = {"passed": "pass", "flaky": "flaky", "skipped": "skip"}.get(status, "fail")
    name = html.escape(f"[{test_result.get('project', '?')}] {test_result.get('group', '')} › {test_result.get('name', 'Unnamed Test')}")
    error = test_result.get("error", "")
    screenshot = test_result.get("screenshot", "")
    img_tag = f"<div><img src=\"{screenshot}\" style=\"max-width: 100%; border: 1px solid #ddd;\" /></div>" if screenshot else ""
    error_block = f"<pre>{html.escape(error)}</pre>" if error else ""
    links = " ".join(
        f"<a href=\"{test_result[key]}\">{key}</a>" for key in ("trace", "video") if test_result.get(key)
    )
    return f"""
  <section>
    <h3 class="{status_class}">{name} — {status.upper()}</h3>
    <div>Attempts: {test_result.get('attempts', 0)} &nbsp; Duration: {test_result.get('duration_ms', 0)} ms {links}</div>
    {img_tag}
    {error_block}
  </section>
  <hr />
"""


def print_plan(projects, scenarios):
    by_group = group_scenarios(scenarios)
    for project in projects:
        deps = f" (after {', '.join(project.dependencies)})" if project.dependencies else ""
        print(f"📋 {project.name} [{project.browser.name}]{deps}")
        for group in project.groups:
            for s in by_group.get(group, []):
                marker = f"  ↷ skip: {s.skip}" if s.skip else ""
                print(f"    {s.title}{marker}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CandyMapper end-to-end scenarios")
    parser.add_argument("--variant", choices=sorted(VARIANTS), default="grouped", help="Project layout to run")
    parser.add_argument("--project", action="append", help="Run only this project (repeatable)")
    parser.add_argument("--group", action="append", choices=GROUPS, help="Run only this scenario group (repeatable)")
    parser.add_argument("--browser", action="append", help="Run only projects on this browser (repeatable)")
    parser.add_argument("--grep", help="Run only scenarios whose title matches this regex")
    parser.add_argument("--list", action="store_true", help="Print the run plan and exit")
    parser.add_argument("--headful", action="store_true", help="Run browsers headful for debugging")
    parser.add_argument("--verbose", action="store_true", help="Print step-level logs")
    parser.add_argument("--workers", type=int, help="Concurrent scenario attempts")
    parser.add_argument("--retries", type=int, help="Retries per failed scenario")
    parser.add_argument("--output-dir", help="Directory that receives run_<timestamp> folders")
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    try:
        config = RunConfig.from_env(
            workers=args.workers,
            retries=args.retries,
            headless=False if args.headful else None,
            output_dir=Path(args.output_dir) if args.output_dir else None,
        )
        graph = DependencyGraph(VARIANTS[args.variant]())
        projects = graph.select(names=args.project, groups=args.group, browsers=args.browser)
        scenarios = select_scenarios(load_scenarios(), grep=args.grep, forbid_only=config.forbid_only)
    except ValueError as e:
        raise SystemExit(f"Configuration error: {e}")

    if not projects:
        raise SystemExit("No projects match the given filters")

    if args.list:
        print_plan(projects, scenarios)
        return

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = config.output_dir / f"run_{timestamp}"

    print(f"🏃 Running {len(projects)} project(s) with {config.workers} worker(s), {config.retries} retries...")
    results_json = asyncio.run(run_test_suite(
        projects=projects,
        scenarios=scenarios,
        config=config,
        run_dir=run_dir,
        verbose=args.verbose,
    ))

    results_path = run_dir / "results.json"
    with open(results_path, "w", encoding="utf-8") as f:
        json.dump(results_json, f, indent=2)
    print(f"📊 Results written: {results_path}")

    report_path = run_dir / "report.html"
    write_html_report(results_json, report_path)
    print(f"📝 HTML report: {report_path}")

    total = len(results_json.get("tests", []))
    counts = count_statuses(results_json)
    if total:
        print(
            f"✅ Done. Total: {total}, Passed: {counts['passed']}, Flaky: {counts['flaky']}, "
            f"Failed: {counts['failed']}, Skipped: {counts['skipped']}"
        )
    else:
        print("✅ Done. No scenarios executed.")

    aborted = [p["name"] for p in results_json.get("projects", []) if p.get("error")]
    if aborted:
        print(f"✖ Aborted projects: {', '.join(aborted)}")
    sys.exit(1 if counts["failed"] or aborted else 0)


if __name__ == "__main__":
    main()
