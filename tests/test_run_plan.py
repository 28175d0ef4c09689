import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from run_plan import (  # noqa: E402
    BROWSER_TARGETS,
    GROUPS,
    DependencyGraph,
    Project,
    RunConfig,
    browser_projects,
    grouped_projects,
    is_ci,
)


NAVIGATION = ("chrome:navigation", "firefox:navigation", "safari:navigation")
TARGET = BROWSER_TARGETS[0]


def test_grouped_projects_depend_on_every_navigation_project() -> None:
    projects = {p.name: p for p in grouped_projects()}

    assert len(projects) == 12
    assert projects["firefox:halloween-party"].dependencies == NAVIGATION
    assert projects["safari:two-factor-auth"].dependencies == NAVIGATION
    assert projects["chrome:home-page"].dependencies == ()
    assert projects["chrome:navigation"].groups == ("navigation",)


def test_browser_projects_run_every_group_without_dependencies() -> None:
    projects = browser_projects()

    assert [p.name for p in projects] == ["chromium", "firefox", "chrome", "safari"]
    assert all(p.groups == GROUPS and p.dependencies == () for p in projects)


def test_dependent_runs_when_any_prerequisite_passed() -> None:
    graph = DependencyGraph(grouped_projects())
    all_failed = {name: False for name in NAVIGATION}

    assert not graph.should_run("chrome:halloween-party", all_failed)
    assert graph.should_run("chrome:halloween-party", {**all_failed, "safari:navigation": True})
    assert graph.should_run("chrome:home-page", {})


def test_order_puts_prerequisites_first() -> None:
    graph = DependencyGraph(grouped_projects())
    position = {name: i for i, name in enumerate(graph.order)}

    for name in NAVIGATION:
        assert position[name] < position["chrome:two-factor-auth"]
    assert set(graph.dependents("firefox:navigation")) == {
        f"{b}:{g}" for b in ("chrome", "firefox", "safari") for g in ("halloween-party", "two-factor-auth")
    }


def test_cycle_is_rejected_before_scheduling() -> None:
    projects = [
        Project("a", TARGET, ("navigation",), dependencies=("b",)),
        Project("b", TARGET, ("navigation",), dependencies=("a",)),
    ]

    with pytest.raises(ValueError, match="cycle"):
        DependencyGraph(projects)


def test_unknown_and_duplicate_projects_are_rejected() -> None:
    with pytest.raises(ValueError, match="unknown project"):
        DependencyGraph([Project("a", TARGET, ("navigation",), dependencies=("missing",))])
    with pytest.raises(ValueError, match="Duplicate"):
        DependencyGraph([Project("a", TARGET, ("navigation",)), Project("a", TARGET, ("home-page",))])


def test_closure_pulls_in_prerequisites_in_run_order() -> None:
    graph = DependencyGraph(grouped_projects())

    names = [p.name for p in graph.closure(["safari:two-factor-auth"])]

    assert names[-1] == "safari:two-factor-auth"
    assert set(names[:-1]) == set(NAVIGATION)


def test_select_by_browser_and_group_keeps_prerequisites() -> None:
    graph = DependencyGraph(grouped_projects())

    names = [p.name for p in graph.select(groups=["halloween-party"], browsers=["chrome"])]

    assert set(names) == set(NAVIGATION) | {"chrome:halloween-party"}


def test_select_narrows_groups_of_matched_projects() -> None:
    graph = DependencyGraph(browser_projects())

    selected = graph.select(names=["firefox"], groups=["navigation"])

    assert [(p.name, p.groups) for p in selected] == [("firefox", ("navigation",))]


def test_select_unknown_project_is_an_error() -> None:
    with pytest.raises(ValueError, match="Unknown project"):
        DependencyGraph(grouped_projects()).select(names=["opera:navigation"])


def test_ci_config_is_conservative() -> None:
    config = RunConfig.from_env({"CI": "true"})

    assert (config.workers, config.retries, config.forbid_only) == (1, 2, True)


def test_local_config_defaults() -> None:
    config = RunConfig.from_env({})

    assert (config.workers, config.retries, config.forbid_only) == (2, 0, False)
    assert config.headless
    assert config.scenario_timeout_ms == 30000
    assert config.expect_timeout_ms == 5000
    assert config.viewport == {"width": 1366, "height": 768}
    assert config.trace == config.video == "retain-on-failure"


def test_overrides_and_environment_switches() -> None:
    config = RunConfig.from_env(
        {"CI": "1", "HEADLESS": "false", "CANDYMAPPER_OUTPUT_DIR": "/tmp/candy"},
        workers=4,
        retries=None,
    )

    assert config.workers == 4
    assert config.retries == 2
    assert config.headless is False
    assert config.output_dir == Path("/tmp/candy")


def test_is_ci_reads_common_falsy_values() -> None:
    assert not is_ci({"CI": "false"})
    assert not is_ci({})
    assert is_ci({"CI": "GitHub"})


@pytest.mark.parametrize("kwargs", [{"workers": 0}, {"retries": -1}, {"trace": "sometimes"}])
def test_invalid_config_values_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        RunConfig(**kwargs)
