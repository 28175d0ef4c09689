import asyncio
import re
import time
from pathlib import Path
from typing import Awaitable, Callable

from playwright.async_api import Browser, BrowserContext, Page, async_playwright, expect

from run_plan import BrowserTarget, DependencyGraph, Project, RunConfig
from scenarios import Scenario, ScenarioSession


def sanitize_for_filename(text: str) -> str:
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[-\s]+", "_", text)
    return text.strip("_").lower()[:100]


async def schedule_projects(
    graph: DependencyGraph,
    run_project: Callable[[Project], Awaitable[list[dict]]],
    skip_project: Callable[[Project, str], list[dict]],
    verbose: bool = False,
) -> dict[str, dict]:
    """Run every project of ``graph`` as soon as its prerequisites have finished.

    Independent projects run concurrently. A project with prerequisites is
    gated by ``graph.should_run`` once all of them are done: it runs when at
    least one passed and is reported as skipped otherwise.
    """
    tasks: dict[str, asyncio.Task] = {}

    async def run_one(project: Project) -> dict:
        if project.dependencies:
            await asyncio.gather(*(tasks[d] for d in project.dependencies))
        outcomes = {d: tasks[d].result()["passed"] for d in project.dependencies}
        if not graph.should_run(project.name, outcomes):
            reason = f"every prerequisite failed ({', '.join(project.dependencies)})"
            print(f"↷ Skipping project {project.name}: {reason}")
            return {"name": project.name, "passed": False, "skipped": True, "tests": skip_project(project, reason)}
        if verbose:
            print(f"\n===== Project: {project.name} =====")
        try:
            results = await run_project(project)
        except Exception as e:
            print(f"✖ Project {project.name} aborted — {e}")
            return {"name": project.name, "passed": False, "skipped": False, "tests": [], "error": str(e) or repr(e)}
        passed = all(r["status"] != "failed" for r in results)
        return {"name": project.name, "passed": passed, "skipped": False, "tests": results}

    # graph.order is topological, so prerequisites always have a task already
    for name in graph.order:
        tasks[name] = asyncio.create_task(run_one(graph.projects[name]))
    await asyncio.gather(*tasks.values())
    return {name: task.result() for name, task in tasks.items()}


class BrowserPool:
    """One launched browser per target, shared by that target's scenarios."""

    def __init__(self, playwright, headless: bool = True):
        self.playwright = playwright
        self.headless = headless
        self._browsers: dict[str, Browser] = {}
        self._lock = asyncio.Lock()

    async def get(self, target: BrowserTarget) -> Browser:
        async with self._lock:
            if target.name not in self._browsers:
                launcher = getattr(self.playwright, target.engine)
                kwargs = {"headless": self.headless}
                if target.channel:
                    kwargs["channel"] = target.channel
                self._browsers[target.name] = await launcher.launch(**kwargs)
            return self._browsers[target.name]

    async def close(self):
        for browser in self._browsers.values():
            await browser.close()
        self._browsers.clear()


class SuiteRunner:
    def __init__(self, config: RunConfig, scenarios: list[Scenario], run_dir: Path, verbose: bool = False):
        self.config = config
        self.scenarios = scenarios
        self.run_dir = run_dir
        self.artifacts_dir = run_dir / "artifacts"
        self.verbose = verbose
        self.browsers: BrowserPool | None = None
        self.semaphore: asyncio.Semaphore | None = None

    def scenarios_for(self, project: Project) -> list[Scenario]:
        return [s for s in self.scenarios if s.group in project.groups]

    def skip_project(self, project: Project, reason: str) -> list[dict]:
        return [self._result(project, s, "skipped", error=reason, attempts=0) for s in self.scenarios_for(project)]

    def _result(self, project: Project, scenario: Scenario, status: str, **extra) -> dict:
        result = {
            "project": project.name,
            "browser": project.browser.name,
            "group": scenario.group,
            "name": scenario.name,
            "status": status,
            "error": "",
            "attempts": 0,
            "duration_ms": 0,
            "screenshot": "",
            "trace": "",
            "video": "",
        }
        result.update(extra)
        return result

    def _context_options(self, project: Project, video_dir: Path | None) -> dict:
        options = {"viewport": dict(self.config.viewport)}
        if project.browser.device:
            device = self.browsers.playwright.devices[project.browser.device]
            options.update({k: v for k, v in device.items() if k != "default_browser_type"})
        if video_dir is not None:
            options["record_video_dir"] = str(video_dir)
        return options

    def _keep(self, policy: str, failed: bool) -> bool:
        return policy == "on" or (policy == "retain-on-failure" and failed)

    async def run_project(self, project: Project) -> list[dict]:
        return list(await asyncio.gather(*(self.run_scenario(project, s) for s in self.scenarios_for(project))))

    async def run_scenario(self, project: Project, scenario: Scenario) -> dict:
        label = f"[{project.name}] {scenario.title}"
        if scenario.skip:
            print(f"↷ Skipped: {label} ({scenario.skip})")
            return self._result(project, scenario, "skipped", error=scenario.skip)

        max_attempts = self.config.retries + 1
        for attempt in range(1, max_attempts + 1):
            async with self.semaphore:
                outcome = await self._attempt(project, scenario, attempt)
            if outcome["status"] == "passed":
                break
            if attempt < max_attempts:
                print(f"↻ Retrying {label} (attempt {attempt + 1}/{max_attempts}) — {outcome['error']}")

        if outcome["status"] == "passed" and attempt > 1:
            outcome["status"] = "flaky"
        outcome["attempts"] = attempt

        if outcome["status"] == "failed":
            error = outcome["error"]
            err_excerpt = error if len(error) < 300 else (error[:297] + "...")
            print(f"✖ Failed: {label} — {err_excerpt}")
        else:
            suffix = f" (flaky, {attempt} attempts)" if outcome["status"] == "flaky" else ""
            print(f"✓ Passed: {label}{suffix}")
        return outcome

    async def _attempt(self, project: Project, scenario: Scenario, attempt: int) -> dict:
        slug = f"{sanitize_for_filename(project.name)}-{sanitize_for_filename(scenario.name)}-attempt{attempt}"
        artifact_dir = self.artifacts_dir / slug
        video_dir = artifact_dir / "video" if self.config.video != "off" else None

        context: BrowserContext | None = None
        page: Page | None = None
        status = "passed"
        error = ""
        screenshot = ""
        trace_path = ""
        video_path = ""
        started = time.monotonic()
        try:
            browser = await self.browsers.get(project.browser)
            context = await browser.new_context(**self._context_options(project, video_dir))
            context.set_default_navigation_timeout(self.config.navigation_timeout_ms)
            if self.config.trace != "off":
                await context.tracing.start(screenshots=True, snapshots=True)
            page = await context.new_page()
            session = ScenarioSession(page=page, context=context, browser_name=project.browser.name, verbose=self.verbose)
            if self.verbose:
                print(f"\n===== Running: [{project.name}] {scenario.title} (attempt {attempt}) =====")
            await asyncio.wait_for(scenario.func(session), timeout=self.config.scenario_timeout_ms / 1000)
        except asyncio.TimeoutError:
            status = "failed"
            error = f"Scenario timed out after {self.config.scenario_timeout_ms}ms"
        except Exception as e:
            status = "failed"
            error = str(e) or repr(e)

        failed = status == "failed"
        video = None
        if context is not None:
            try:
                if failed and page is not None:
                    artifact_dir.mkdir(parents=True, exist_ok=True)
                    try:
                        shot = artifact_dir / "failure.png"
                        await page.screenshot(path=str(shot), full_page=True)
                        screenshot = str(shot)
                    except Exception as e:
                        if self.verbose:
                            print(f"⚠️ Could not save failure screenshot: {e}")
                if self.config.trace != "off":
                    if self._keep(self.config.trace, failed):
                        artifact_dir.mkdir(parents=True, exist_ok=True)
                        trace_file = artifact_dir / "trace.zip"
                        await context.tracing.stop(path=str(trace_file))
                        trace_path = str(trace_file)
                    else:
                        await context.tracing.stop()
            except Exception as e:
                if self.verbose:
                    print(f"⚠️ Could not save trace: {e}")
            finally:
                video = page.video if page is not None else None
                await context.close()

        if video is not None:
            try:
                if self._keep(self.config.video, failed):
                    video_path = str(await video.path())
                else:
                    await video.delete()
            except Exception as e:
                if self.verbose:
                    print(f"⚠️ Could not save video: {e}")

        if self.verbose and (trace_path or video_path):
            print(f"📎 Artifacts kept for {scenario.title}: {trace_path or '-'} {video_path or '-'}")

        return self._result(
            project,
            scenario,
            status,
            error=error,
            duration_ms=int((time.monotonic() - started) * 1000),
            screenshot=screenshot,
            trace=trace_path,
            video=video_path,
        )

    async def run(self, projects: list[Project]) -> dict:
        graph = DependencyGraph(projects)
        expect.set_options(timeout=self.config.expect_timeout_ms)
        self.semaphore = asyncio.Semaphore(self.config.workers)

        async with async_playwright() as p:
            self.browsers = BrowserPool(p, headless=self.config.headless)
            try:
                outcomes = await schedule_projects(graph, self.run_project, self.skip_project, verbose=self.verbose)
            finally:
                await self.browsers.close()

        return {
            "projects": [
                {
                    "name": name,
                    "passed": outcomes[name]["passed"],
                    "skipped": outcomes[name]["skipped"],
                    "error": outcomes[name].get("error", ""),
                }
                for name in graph.order
            ],
            "tests": [t for name in graph.order for t in outcomes[name]["tests"]],
        }


async def run_test_suite(
    projects: list[Project],
    scenarios: list[Scenario],
    config: RunConfig,
    run_dir: Path,
    verbose: bool = False,
) -> dict:
    run_dir.mkdir(parents=True, exist_ok=True)
    return await SuiteRunner(config, scenarios, run_dir, verbose=verbose).run(projects)
