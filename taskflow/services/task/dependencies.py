"""
Task dependency graph checks.

Edges live on the dependent task (`TaskRecord.dependencies`) and the
graph they form must stay acyclic.
"""
import logging
from typing import Dict, FrozenSet, List, Sequence, Tuple

from taskflow.core.config import settings
from taskflow.core.exceptions import NotFoundError, ValidationError
from taskflow.schemas.task.task_schema import DependencyValidation, TaskRecord, TransitionCheck

logger = logging.getLogger(__name__)


def _index(all_tasks: Sequence[TaskRecord]) -> Dict[str, TaskRecord]:
    return {task.id: task for task in all_tasks}


def is_terminal_status(status) -> bool:
    terminal = {s.lower() for s in settings.TERMINAL_STATUSES}
    return (status or "").lower() in terminal


def validate_dependency(task_id: str, depends_on_id: str, all_tasks: Sequence[TaskRecord]) -> DependencyValidation:
    """Check whether `task_id` may depend on `depends_on_id`"""
    if task_id == depends_on_id:
        return DependencyValidation(valid=False, error="A task cannot depend on itself")

    tasks_by_id = _index(all_tasks)
    if depends_on_id not in tasks_by_id:
        return DependencyValidation(valid=False, error="Dependency task not found")

    if _reaches(depends_on_id, task_id, tasks_by_id):
        return DependencyValidation(valid=False, error="This would create a circular dependency")

    return DependencyValidation(valid=True)


def _reaches(start_id: str, target_id: str, tasks_by_id: Dict[str, TaskRecord]) -> bool:
    # Explicit stack so chain length is not bounded by the recursion limit.
    # Each entry carries the path that led to it; sibling branches never share it.
    stack: List[Tuple[str, FrozenSet[str]]] = [(start_id, frozenset())]
    while stack:
        current_id, path = stack.pop()
        if current_id == target_id:
            return True
        if current_id in path:
            continue

        current = tasks_by_id.get(current_id)
        if current is None:
            continue

        next_path = path | {current_id}
        for dep_id in reversed(current.dependencies):
            stack.append((dep_id, next_path))
    return False


def can_move_task(task: TaskRecord, new_status: str, all_tasks: Sequence[TaskRecord]) -> TransitionCheck:
    """A task may enter a terminal status only once its dependencies are terminal"""
    if not is_terminal_status(new_status) or not task.dependencies:
        return TransitionCheck(can_move=True)

    tasks_by_id = _index(all_tasks)
    blocking = [
        tasks_by_id[dep_id]
        for dep_id in task.dependencies
        if dep_id in tasks_by_id and not is_terminal_status(tasks_by_id[dep_id].status)
    ]
    return TransitionCheck(can_move=not blocking, blocking_tasks=blocking)


def get_dependent_tasks(task_id: str, all_tasks: Sequence[TaskRecord]) -> List[str]:
    """Ids of tasks that depend directly on `task_id`"""
    return [task.id for task in all_tasks if task_id in task.dependencies]


def get_dependency_depth(task_id: str, all_tasks: Sequence[TaskRecord]) -> int:
    """Length of the longest dependency chain below `task_id`"""
    tasks_by_id = _index(all_tasks)
    longest = 0
    stack: List[Tuple[str, int, FrozenSet[str]]] = [(task_id, 0, frozenset())]
    while stack:
        current_id, depth, path = stack.pop()
        current = tasks_by_id.get(current_id)
        if current is None or current_id in path:
            continue
        longest = max(longest, depth)
        next_path = path | {current_id}
        stack.extend((dep_id, depth + 1, next_path) for dep_id in current.dependencies)
    return longest


def add_dependency(task_id: str, depends_on_id: str, all_tasks: Sequence[TaskRecord]) -> List[TaskRecord]:
    """Return a new task list with the edge added; invalid edges raise ValidationError"""
    tasks_by_id = _index(all_tasks)
    if task_id not in tasks_by_id:
        raise NotFoundError("Task not found")

    validation = validate_dependency(task_id, depends_on_id, all_tasks)
    if not validation.valid:
        logger.info(f"Rejected dependency {task_id} -> {depends_on_id}: {validation.error}")
        raise ValidationError(validation.error)

    updated: List[TaskRecord] = []
    for task in all_tasks:
        if task.id == task_id and depends_on_id not in task.dependencies:
            task = task.model_copy(update={"dependencies": [*task.dependencies, depends_on_id]})
        updated.append(task)
    return updated


def remove_dependency(task_id: str, depends_on_id: str, all_tasks: Sequence[TaskRecord]) -> List[TaskRecord]:
    """Return a new task list without the edge"""
    updated: List[TaskRecord] = []
    for task in all_tasks:
        if task.id == task_id and depends_on_id in task.dependencies:
            task = task.model_copy(update={
                "dependencies": [dep for dep in task.dependencies if dep != depends_on_id],
            })
        updated.append(task)
    return updated
