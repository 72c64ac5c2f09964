"""Task list state machine for API clients.

The single-page client keeps one TaskListState and moves between states
only through reduce(state, action). States are immutable; every action is
one of a closed set of dataclasses, and unknown actions are an error rather
than a silent no-op.

Usage::

    state = TaskListState()
    state = reduce(state, LoadingStarted())
    state = reduce(state, TasksLoaded.from_response(api_json))
"""

from dataclasses import dataclass, replace
from typing import Any, Union


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskListState:
    tasks: tuple[dict[str, Any], ...] = ()
    current_task: dict[str, Any] | None = None
    loading: bool = False
    error: str | None = None
    total_pages: int = 0
    current_page: int = 1
    total: int = 0


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LoadingStarted:
    pass


@dataclass(frozen=True)
class TasksLoaded:
    tasks: tuple[dict[str, Any], ...]
    total_pages: int
    current_page: int
    total: int

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "TasksLoaded":
        """Build from a GET /tasks response body."""
        return cls(
            tasks=tuple(body.get("tasks", ())),
            total_pages=body.get("totalPages", 0),
            current_page=body.get("currentPage", 1),
            total=body.get("total", 0),
        )


@dataclass(frozen=True)
class TaskLoaded:
    task: dict[str, Any]


@dataclass(frozen=True)
class TaskCreated:
    task: dict[str, Any]


@dataclass(frozen=True)
class TaskUpdated:
    task: dict[str, Any]


@dataclass(frozen=True)
class TaskDeleted:
    task_id: str


@dataclass(frozen=True)
class TaskFailed:
    message: str


@dataclass(frozen=True)
class ErrorCleared:
    pass


@dataclass(frozen=True)
class CurrentTaskCleared:
    pass


TaskAction = Union[
    LoadingStarted,
    TasksLoaded,
    TaskLoaded,
    TaskCreated,
    TaskUpdated,
    TaskDeleted,
    TaskFailed,
    ErrorCleared,
    CurrentTaskCleared,
]


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------

def _settled(state: TaskListState, **changes: Any) -> TaskListState:
    """A successful request: stop loading, drop any previous error."""
    return replace(state, loading=False, error=None, **changes)


def _is_current(state: TaskListState, task_id: Any) -> bool:
    return state.current_task is not None and state.current_task.get("id") == task_id


def reduce(state: TaskListState, action: TaskAction) -> TaskListState:
    """Return the state after `action`. Never mutates `state`.

    Raises TypeError for anything that is not a TaskAction.
    """
    if isinstance(action, LoadingStarted):
        return replace(state, loading=True)

    if isinstance(action, TasksLoaded):
        return _settled(
            state,
            tasks=tuple(action.tasks),
            total_pages=action.total_pages,
            current_page=action.current_page,
            total=action.total,
        )

    if isinstance(action, TaskLoaded):
        return _settled(state, current_task=action.task)

    if isinstance(action, TaskCreated):
        # Newest first, matching the default created_at DESC listing.
        return _settled(state, tasks=(action.task, *state.tasks))

    if isinstance(action, TaskUpdated):
        task_id = action.task.get("id")
        tasks = tuple(action.task if t.get("id") == task_id else t for t in state.tasks)
        current = action.task if _is_current(state, task_id) else state.current_task
        return _settled(state, tasks=tasks, current_task=current)

    if isinstance(action, TaskDeleted):
        tasks = tuple(t for t in state.tasks if t.get("id") != action.task_id)
        current = None if _is_current(state, action.task_id) else state.current_task
        return _settled(state, tasks=tasks, current_task=current)

    if isinstance(action, TaskFailed):
        return replace(state, loading=False, error=action.message)

    if isinstance(action, ErrorCleared):
        return replace(state, error=None)

    if isinstance(action, CurrentTaskCleared):
        return replace(state, current_task=None)

    raise TypeError(f"Unknown task action: {action!r}")
