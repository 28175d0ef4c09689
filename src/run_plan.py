"""Run configuration and the project dependency graph.

A project is one (scenario groups x browser) cell of the run plan. In the
grouped variant, feature groups that reach their pages through the site menu
depend on the navigation projects of every browser. A dependent project runs
when at least one of its prerequisites passed; it is skipped only when all of
them failed, so one browser with broken navigation does not block feature
coverage in the others.
"""
import os
from dataclasses import dataclass, field, replace
from pathlib import Path


GROUPS = ("home-page", "navigation", "halloween-party", "two-factor-auth")

GROUP_DEPENDENCIES = {
    "halloween-party": ("navigation",),
    "two-factor-auth": ("navigation",),
}

ARTIFACT_POLICIES = ("off", "on", "retain-on-failure")


@dataclass(frozen=True)
class BrowserTarget:
    name: str
    engine: str  # chromium | firefox | webkit
    device: str | None = None
    channel: str | None = None


BROWSER_TARGETS = [
    BrowserTarget("chromium", "chromium", device="Desktop Chrome"),
    BrowserTarget("firefox", "firefox", device="Desktop Firefox"),
    BrowserTarget("chrome", "chromium", channel="chrome"),
    BrowserTarget("safari", "webkit", device="Desktop Safari"),
]

GROUPED_BROWSER_TARGETS = [
    BrowserTarget("chrome", "chromium", device="Desktop Chrome"),
    BrowserTarget("firefox", "firefox", device="Desktop Firefox"),
    BrowserTarget("safari", "webkit", device="Desktop Safari"),
]


@dataclass(frozen=True)
class Project:
    name: str
    browser: BrowserTarget
    groups: tuple[str, ...]
    dependencies: tuple[str, ...] = ()


def is_ci(env: dict | None = None) -> bool:
    env = os.environ if env is None else env
    return env.get("CI", "").strip().lower() not in ("", "0", "false", "no")


@dataclass
class RunConfig:
    workers: int = 2
    retries: int = 0
    forbid_only: bool = False
    headless: bool = True
    scenario_timeout_ms: int = 30000
    expect_timeout_ms: int = 5000
    navigation_timeout_ms: int = 15000
    viewport: dict = field(default_factory=lambda: {"width": 1366, "height": 768})
    trace: str = "retain-on-failure"
    video: str = "retain-on-failure"
    output_dir: Path = Path("data/runs")

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.retries < 0:
            raise ValueError(f"retries cannot be negative, got {self.retries}")
        for name in ("trace", "video"):
            if getattr(self, name) not in ARTIFACT_POLICIES:
                raise ValueError(f"{name} must be one of {ARTIFACT_POLICIES}, got {getattr(self, name)!r}")

    @classmethod
    def from_env(cls, env: dict | None = None, **overrides) -> "RunConfig":
        """Shared CI runners get one worker, two retries and no focused scenarios."""
        env = os.environ if env is None else env
        ci = is_ci(env)
        values = {
            "workers": 1 if ci else 2,
            "retries": 2 if ci else 0,
            "forbid_only": ci,
            "headless": env.get("HEADLESS", "1").strip().lower() not in ("0", "false", "no"),
        }
        if env.get("CANDYMAPPER_OUTPUT_DIR"):
            values["output_dir"] = Path(env["CANDYMAPPER_OUTPUT_DIR"])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def browser_projects(targets: list[BrowserTarget] | None = None) -> list[Project]:
    """One project per browser running every group, no dependencies."""
    return [Project(name=t.name, browser=t, groups=GROUPS) for t in (targets or BROWSER_TARGETS)]


def grouped_projects(
    targets: list[BrowserTarget] | None = None,
    dependencies: dict[str, tuple[str, ...]] | None = None,
) -> list[Project]:
    """One project per (browser, group); dependent groups wait on every browser's prerequisite."""
    targets = targets or GROUPED_BROWSER_TARGETS
    dependencies = GROUP_DEPENDENCIES if dependencies is None else dependencies
    projects = []
    for group in GROUPS:
        prerequisites = tuple(f"{t.name}:{dep}" for dep in dependencies.get(group, ()) for t in targets)
        for t in targets:
            projects.append(Project(name=f"{t.name}:{group}", browser=t, groups=(group,), dependencies=prerequisites))
    return projects


VARIANTS = {
    "browsers": browser_projects,
    "grouped": grouped_projects,
}


class DependencyGraph:
    """Directed graph over projects, validated once before anything is scheduled."""

    def __init__(self, projects: list[Project]):
        self.projects: dict[str, Project] = {}
        for p in projects:
            if p.name in self.projects:
                raise ValueError(f"Duplicate project name: {p.name}")
            self.projects[p.name] = p
        for p in projects:
            for dep in p.dependencies:
                if dep not in self.projects:
                    raise ValueError(f"Project {p.name} depends on unknown project {dep}")
        self.order = self._topological_order()

    def _topological_order(self) -> list[str]:
        remaining = {name: set(p.dependencies) for name, p in self.projects.items()}
        order: list[str] = []
        while remaining:
            ready = [name for name in self.projects if name in remaining and not remaining[name]]
            if not ready:
                raise ValueError(f"Dependency cycle between projects: {', '.join(sorted(remaining))}")
            for name in ready:
                order.append(name)
                del remaining[name]
            for deps in remaining.values():
                deps.difference_update(ready)
        return order

    def prerequisites(self, name: str) -> tuple[str, ...]:
        return self.projects[name].dependencies

    def dependents(self, name: str) -> list[str]:
        return [n for n in self.order if name in self.projects[n].dependencies]

    def should_run(self, name: str, outcomes: dict[str, bool]) -> bool:
        """OR-gate: True without prerequisites, else when any prerequisite passed."""
        deps = self.prerequisites(name)
        if not deps:
            return True
        return any(outcomes.get(dep, False) for dep in deps)

    def closure(self, names: list[str]) -> list[Project]:
        """``names`` plus everything they transitively depend on, in run order."""
        wanted: set[str] = set()
        stack = list(names)
        while stack:
            name = stack.pop()
            if name not in self.projects:
                raise ValueError(f"Unknown project: {name}")
            if name in wanted:
                continue
            wanted.add(name)
            stack.extend(self.projects[name].dependencies)
        return [self.projects[n] for n in self.order if n in wanted]

    def select(
        self,
        names: list[str] | None = None,
        groups: list[str] | None = None,
        browsers: list[str] | None = None,
    ) -> list[Project]:
        """Projects matching every given filter, plus their prerequisites.

        A matched project that carries several groups is narrowed to the
        requested ones; prerequisites pulled in by the closure keep all of theirs.
        """
        unknown = set(names or ()) - set(self.projects)
        if unknown:
            raise ValueError(f"Unknown project(s): {', '.join(sorted(unknown))}")

        narrowed: dict[str, Project] = {}
        for name in self.order:
            p = self.projects[name]
            if names and name not in names:
                continue
            if groups and not set(groups) & set(p.groups):
                continue
            if browsers and p.browser.name not in browsers:
                continue
            if groups:
                p = replace(p, groups=tuple(g for g in p.groups if g in groups))
            narrowed[name] = p
        return [narrowed.get(p.name, p) for p in self.closure(list(narrowed))]
