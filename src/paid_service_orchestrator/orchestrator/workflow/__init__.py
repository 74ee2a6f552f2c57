"""Dependency-driven task graphs.

This package introduces first-class types for:
- Tasks (named async units of work with declared dependencies)
- The absence marker (a task that chose not to act)
- A planner that validates the graph up front
- An executor that runs the graph to a single outcome
"""

from .executor import TaskGraphExecutor, execute
from .planner import plan_execution
from .task_state import IllegalTransitionError, TaskState
from .tasks import ABSENT, Task, is_absent, task

__all__ = [
    "ABSENT",
    "IllegalTransitionError",
    "Task",
    "TaskGraphExecutor",
    "TaskState",
    "execute",
    "is_absent",
    "plan_execution",
    "task",
]
