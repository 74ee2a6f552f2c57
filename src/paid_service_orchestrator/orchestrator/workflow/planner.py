"""Validate a task graph and produce a deterministic execution order.

The planner works purely on structure: names, declared dependencies and
cycles. It never runs a task body.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping

from paid_service_orchestrator.orchestrator.errors import GraphDefinitionError

from .tasks import Task


def plan_execution(tasks: Mapping[str, Task]) -> list[str]:
    """Return task names in a topological order.

    Ties between tasks that become ready together are broken by declaration
    order, so the same mapping always yields the same plan.

    Raises:
        GraphDefinitionError: If the graph is empty, a definition is invalid,
            a dependency is unknown, or the dependency relation has a cycle.
    """
    if not tasks:
        raise GraphDefinitionError("ExpectedTasksToExecute")

    position: dict[str, int] = {}
    for name, definition in tasks.items():
        if not isinstance(name, str) or not name.strip():
            raise GraphDefinitionError("ExpectedTaskName", details={"task": repr(name)})
        if not isinstance(definition, Task):
            raise GraphDefinitionError("ExpectedTaskDefinition", details={"task": name})
        position[name] = len(position)

    for name, definition in tasks.items():
        for dep in definition.depends_on:
            if dep not in position:
                raise GraphDefinitionError(
                    "UnknownTaskDependency", details={"task": name, "dependency": dep}
                )

    # Kahn's algorithm
    incoming: dict[str, int] = {name: len(tasks[name].depends_on) for name in position}
    dependents: dict[str, list[str]] = {name: [] for name in position}
    for name in position:
        for dep in tasks[name].depends_on:
            dependents[dep].append(name)

    ready = deque(name for name in position if incoming[name] == 0)
    order: list[str] = []

    while ready:
        name = ready.popleft()
        order.append(name)
        unblocked = []
        for child in dependents[name]:
            incoming[child] -= 1
            if incoming[child] == 0:
                unblocked.append(child)
        ready.extend(sorted(unblocked, key=position.__getitem__))

    if len(order) != len(position):
        stuck = sorted(name for name in position if incoming[name] > 0)
        raise GraphDefinitionError("CycleInTaskGraph", details={"tasks": stuck})

    return order
