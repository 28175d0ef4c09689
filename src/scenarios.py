"""Scenario registry.

Scenario modules register async functions with the ``scenario`` decorator.
Each function receives a ScenarioSession that owns one isolated browsing
context; steps inside a scenario run strictly in order.
"""
import importlib
import re
from dataclasses import dataclass
from typing import Awaitable, Callable

from playwright.async_api import BrowserContext, Page


SCENARIO_MODULES = [
    "home_page_scenarios",
    "navigation_scenarios",
    "halloween_party_scenarios",
    "two_factor_auth_scenarios",
]


@dataclass
class ScenarioSession:
    page: Page
    context: BrowserContext
    browser_name: str
    verbose: bool = False


@dataclass(frozen=True)
class Scenario:
    group: str
    name: str
    func: Callable[[ScenarioSession], Awaitable[None]]
    skip: str | None = None
    only: bool = False

    @property
    def title(self) -> str:
        return f"{self.group} › {self.name}"


SCENARIOS: list[Scenario] = []


def scenario(group: str, name: str, skip: str | None = None, only: bool = False):
    def decorator(func):
        SCENARIOS.append(Scenario(group=group, name=name, func=func, skip=skip, only=only))
        return func
    return decorator


def load_scenarios() -> list[Scenario]:
    for module in SCENARIO_MODULES:
        importlib.import_module(module)
    return list(SCENARIOS)


def select_scenarios(scenarios: list[Scenario], grep: str | None = None, forbid_only: bool = False) -> list[Scenario]:
    focused = [s for s in scenarios if s.only]
    if focused:
        if forbid_only:
            names = ", ".join(s.title for s in focused)
            raise ValueError(f"Focused scenarios are not allowed here: {names}")
        scenarios = focused
    if grep:
        pattern = re.compile(grep, re.I)
        scenarios = [s for s in scenarios if pattern.search(s.title)]
    return scenarios


def group_scenarios(scenarios: list[Scenario]) -> dict[str, list[Scenario]]:
    grouped: dict[str, list[Scenario]] = {}
    for s in scenarios:
        grouped.setdefault(s.group, []).append(s)
    return grouped
