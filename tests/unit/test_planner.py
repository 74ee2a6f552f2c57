"""Unit tests for task graph planning."""

from __future__ import annotations

from typing import Any

import pytest

from paid_service_orchestrator.orchestrator.errors import GraphDefinitionError
from paid_service_orchestrator.orchestrator.workflow import Task, plan_execution


async def _noop(_: Any) -> None:
    return None


def _t(*deps: str) -> Task:
    return Task(run=_noop, depends_on=deps)


def test_plan_orders_dependencies_first() -> None:
    tasks = {
        "pay": _t("confirm", "result"),
        "confirm": _t("result"),
        "result": _t("request"),
        "request": _t(),
    }

    assert plan_execution(tasks) == ["request", "result", "confirm", "pay"]


def test_plan_without_edges_keeps_declaration_order() -> None:
    tasks = {"c": _t(), "a": _t(), "b": _t()}

    assert plan_execution(tasks) == ["c", "a", "b"]


def test_plan_is_deterministic_for_diamonds() -> None:
    tasks = {
        "root": _t(),
        "right": _t("root"),
        "left": _t("root"),
        "join": _t("left", "right"),
    }

    assert plan_execution(tasks) == ["root", "right", "left", "join"]
    assert plan_execution(tasks) == plan_execution(dict(tasks))


def test_plan_rejects_empty_graph() -> None:
    with pytest.raises(GraphDefinitionError) as excinfo:
        plan_execution({})

    assert excinfo.value.as_pair() == (400, "ExpectedTasksToExecute")


def test_plan_rejects_unknown_dependency() -> None:
    with pytest.raises(GraphDefinitionError) as excinfo:
        plan_execution({"a": _t("missing")})

    assert excinfo.value.message == "UnknownTaskDependency"
    assert excinfo.value.details == {"task": "a", "dependency": "missing"}


def test_plan_rejects_self_dependency() -> None:
    with pytest.raises(GraphDefinitionError) as excinfo:
        plan_execution({"a": _t("a")})

    assert excinfo.value.message == "CycleInTaskGraph"


def test_plan_rejects_transitive_cycle() -> None:
    tasks = {"start": _t(), "a": _t("start", "c"), "b": _t("a"), "c": _t("b")}

    with pytest.raises(GraphDefinitionError) as excinfo:
        plan_execution(tasks)

    assert excinfo.value.details == {"tasks": ["a", "b", "c"]}


@pytest.mark.parametrize("name", ["", "   ", 3])
def test_plan_rejects_invalid_names(name: Any) -> None:
    with pytest.raises(GraphDefinitionError) as excinfo:
        plan_execution({name: _t()})

    assert excinfo.value.message == "ExpectedTaskName"


def test_plan_rejects_non_task_definitions() -> None:
    with pytest.raises(GraphDefinitionError) as excinfo:
        plan_execution({"a": (_noop, [])})  # type: ignore[dict-item]

    assert excinfo.value.message == "ExpectedTaskDefinition"


def test_task_normalizes_dependencies() -> None:
    definition = Task(run=_noop, depends_on=["a", "b", "a"])  # type: ignore[arg-type]

    assert definition.depends_on == ("a", "b")
