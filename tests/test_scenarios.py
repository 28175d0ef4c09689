import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from run_plan import GROUPS  # noqa: E402
from scenarios import Scenario, group_scenarios, load_scenarios, select_scenarios  # noqa: E402


async def _noop(session) -> None:
    pass


def _scenarios(only: tuple[str, ...] = ()) -> list[Scenario]:
    names = [("home-page", "title is shown"), ("navigation", "JOIN US opens login"), ("navigation", "BCS new tab")]
    return [Scenario(group=g, name=n, func=_noop, only=n in only) for g, n in names]


def test_title_joins_group_and_name() -> None:
    assert _scenarios()[1].title == "navigation › JOIN US opens login"


def test_focused_scenarios_replace_the_selection() -> None:
    selected = select_scenarios(_scenarios(only=("BCS new tab",)))

    assert [s.name for s in selected] == ["BCS new tab"]


def test_focused_scenarios_fail_when_forbidden() -> None:
    with pytest.raises(ValueError, match="BCS new tab"):
        select_scenarios(_scenarios(only=("BCS new tab",)), forbid_only=True)


def test_grep_is_a_case_insensitive_title_search() -> None:
    selected = select_scenarios(_scenarios(), grep="navigation › (join|bcs)")

    assert [s.name for s in selected] == ["JOIN US opens login", "BCS new tab"]


def test_registered_scenarios_cover_every_group_once() -> None:
    scenarios = load_scenarios()
    titles = [s.title for s in scenarios]

    assert len(titles) == len(set(titles))
    assert set(group_scenarios(scenarios)) == set(GROUPS)
    assert not any(s.only for s in scenarios)


def test_keysight_tab_scenario_is_skipped() -> None:
    skipped = [s for s in load_scenarios() if s.skip]

    assert [s.group for s in skipped] == ["navigation"]
    assert "Keysight" in skipped[0].name
