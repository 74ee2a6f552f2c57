"""Run a task graph to a single outcome.

Each task runs at most once, only after every declared dependency has
completed, and sees only its dependencies' results. The run resolves with the
full result context, or raises the first failure after letting tasks that were
already running finish. Nothing is started once a failure has been observed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from .planner import plan_execution
from .task_state import TaskState, TaskStateTable
from .tasks import ABSENT, Task

logger = logging.getLogger(__name__)


class TaskGraphExecutor:
    """Dependency-driven executor for a mapping of named tasks.

    The executor keeps no state between runs, so one instance can run any
    number of graphs, including concurrently.
    """

    def __init__(self, *, max_concurrency: int | None = None) -> None:
        """Initialize the executor.

        Args:
            max_concurrency: Upper bound on tasks running at once. `None` means
                every ready task is started; `1` runs the graph sequentially.

        Raises:
            ValueError: If max_concurrency is smaller than 1.
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be a positive integer")
        self.max_concurrency = max_concurrency

    async def execute(self, tasks: Mapping[str, Task]) -> dict[str, Any]:
        """Execute every task in `tasks` and return the result context.

        Args:
            tasks: Mapping of task name to task definition.

        Returns:
            Mapping of every task name to its value or `ABSENT`, in declaration order.

        Raises:
            GraphDefinitionError: If the graph is invalid. No task body runs.
            Exception: The error raised by the earliest-started failing task.
        """
        graph = dict(tasks)
        order = plan_execution(graph)
        states = TaskStateTable(order)
        context: dict[str, Any] = {}
        running: dict[asyncio.Task[Any], str] = {}
        failure: tuple[int, str, BaseException] | None = None

        logger.debug("Executing task graph", extra={"tasks": order})

        try:
            while True:
                if failure is None:
                    self._start_ready(graph, order, states, context, running)

                if not running:
                    break

                done, _ = await asyncio.wait(running, return_when=asyncio.FIRST_COMPLETED)

                for finished in sorted(done, key=lambda t: _sequence(states, running[t])):
                    name = running.pop(finished)
                    sequence = _sequence(states, name)

                    error: BaseException | None
                    if finished.cancelled():
                        error = asyncio.CancelledError(f"Task '{name}' was cancelled")
                    else:
                        error = finished.exception()

                    if error is not None:
                        states.update(name, to=TaskState.FAILED)
                        if failure is None or sequence < failure[0]:
                            if failure is not None:
                                logger.debug(
                                    "Discarding later failure", extra={"task": failure[1]}
                                )
                            failure = (sequence, name, error)
                            logger.warning(
                                "Task failed; not starting remaining tasks",
                                extra={"task": name, "error": repr(error)},
                            )
                        else:
                            logger.debug("Discarding later failure", extra={"task": name})
                        continue

                    value = finished.result()
                    context[name] = value
                    states.update(
                        name, to=TaskState.ABSENT if value is ABSENT else TaskState.COMPLETED
                    )
                    logger.debug(
                        "Task completed",
                        extra={"task": name, "state": states.state(name).value},
                    )
        finally:
            # Only reached with live tasks when the run itself is cancelled.
            for pending in running:
                pending.cancel()
            if running:
                await asyncio.gather(*running, return_exceptions=True)
                logger.debug(
                    "Cancelled running tasks", extra={"tasks": sorted(running.values())}
                )

        if failure is not None:
            raise failure[2]

        return {name: context[name] for name in graph}

    def _start_ready(
        self,
        graph: dict[str, Task],
        order: list[str],
        states: TaskStateTable,
        context: dict[str, Any],
        running: dict[asyncio.Task[Any], str],
    ) -> None:
        for name in order:
            if states.state(name) is TaskState.PENDING and all(
                states.is_done(dep) for dep in graph[name].depends_on
            ):
                states.update(name, to=TaskState.READY)

        for name in states.names_in(TaskState.READY):
            if self.max_concurrency is not None and len(running) >= self.max_concurrency:
                break

            definition = graph[name]
            inputs = MappingProxyType({dep: context[dep] for dep in definition.depends_on})
            states.update(name, to=TaskState.RUNNING)
            logger.debug("Task started", extra={"task": name})

            running[asyncio.create_task(_invoke(definition, inputs), name=f"task:{name}")] = name


async def _invoke(definition: Task, inputs: Mapping[str, Any]) -> Any:
    return await definition.run(inputs)


def _sequence(states: TaskStateTable, name: str) -> int:
    sequence = states.get(name).sequence
    return sequence if sequence is not None else -1


async def execute(
    tasks: Mapping[str, Task], *, max_concurrency: int | None = None
) -> dict[str, Any]:
    """Execute a task graph with a fresh executor."""

    return await TaskGraphExecutor(max_concurrency=max_concurrency).execute(tasks)
