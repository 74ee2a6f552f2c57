from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final


class _Absent:
    """Marker for a task that intentionally produced nothing.

    Distinct from `None` so that a task may still return `None` as a value.
    """

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = _Absent()


def is_absent(value: object) -> bool:
    return value is ABSENT


TaskInputs = Mapping[str, Any]
"""Read-only projection of the result context onto a task's dependencies."""

TaskBody = Callable[[TaskInputs], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class Task:
    """A named unit of work with declared upstream dependencies.

    Tasks are passive: they never decide ordering and never see results of
    tasks they did not declare.
    """

    run: TaskBody
    depends_on: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        # Accept any iterable of names but store an ordered, duplicate-free tuple.
        deps = self.depends_on
        if isinstance(deps, str):
            deps = (deps,)
        object.__setattr__(self, "depends_on", tuple(dict.fromkeys(deps)))


def task(*depends_on: str) -> Callable[[TaskBody], Task]:
    """Decorator turning an async function into a `Task`.

    Example:
        @task("get_services")
        async def choose_service(inputs): ...
    """

    def wrap(body: TaskBody) -> Task:
        return Task(run=body, depends_on=depends_on)

    return wrap
