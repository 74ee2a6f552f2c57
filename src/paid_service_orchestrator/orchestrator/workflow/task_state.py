from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TaskState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    ABSENT = "absent"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[TaskState, set[TaskState]] = {
    TaskState.PENDING: {TaskState.READY},
    TaskState.READY: {TaskState.RUNNING},
    TaskState.RUNNING: {TaskState.COMPLETED, TaskState.ABSENT, TaskState.FAILED},
    TaskState.COMPLETED: set(),
    TaskState.ABSENT: set(),
    TaskState.FAILED: set(),
}

TERMINAL_STATES: frozenset[TaskState] = frozenset(
    {TaskState.COMPLETED, TaskState.ABSENT, TaskState.FAILED}
)

# Dependents are unblocked by both kinds of successful completion.
DONE_STATES: frozenset[TaskState] = frozenset({TaskState.COMPLETED, TaskState.ABSENT})


class IllegalTransitionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    """State of one task within a single run."""

    name: str
    state: TaskState
    sequence: int | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"name": self.name, "state": self.state.value}
        if self.sequence is not None:
            out["sequence"] = self.sequence
        return out


def transition(*, current: TaskSnapshot, to: TaskState) -> TaskSnapshot:
    allowed = ALLOWED_TRANSITIONS.get(current.state, set())
    if to not in allowed:
        raise IllegalTransitionError(
            f"Illegal transition for task '{current.name}': {current.state.value} -> {to.value}"
        )
    return TaskSnapshot(name=current.name, state=to, sequence=current.sequence)


class TaskStateTable:
    """Track the state of every task in a run.

    The table is owned by a single executor run; nothing outlives the run.
    """

    def __init__(self, names: list[str]) -> None:
        self._snapshots: dict[str, TaskSnapshot] = {
            name: TaskSnapshot(name=name, state=TaskState.PENDING) for name in names
        }
        self._next_sequence = 0

    def get(self, name: str) -> TaskSnapshot:
        return self._snapshots[name]

    def state(self, name: str) -> TaskState:
        return self._snapshots[name].state

    def names_in(self, *states: TaskState) -> list[str]:
        wanted = set(states)
        return [name for name, snap in self._snapshots.items() if snap.state in wanted]

    def is_done(self, name: str) -> bool:
        return self._snapshots[name].state in DONE_STATES

    def all_done(self) -> bool:
        return all(snap.state in DONE_STATES for snap in self._snapshots.values())

    def update(self, name: str, *, to: TaskState) -> TaskSnapshot:
        snap = transition(current=self._snapshots[name], to=to)
        if to is TaskState.RUNNING:
            # Start order decides which failure wins when several are observed.
            snap = TaskSnapshot(name=name, state=to, sequence=self._next_sequence)
            self._next_sequence += 1
        self._snapshots[name] = snap
        return snap

    def to_json(self) -> list[dict[str, object]]:
        return [snap.to_json() for snap in self._snapshots.values()]
