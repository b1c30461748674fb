import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.exceptions import NotFoundError
from taskflow.models.task.task import Task
from taskflow.schemas.task.task_schema import TaskRecord, TransitionCheck
from taskflow.services.task.dependencies import add_dependency, can_move_task, remove_dependency

logger = logging.getLogger(__name__)

class TaskDependencyService:
    """Dependency edges and completion gating over stored tasks"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_tasks(self, board_id: Optional[str] = None) -> List[TaskRecord]:
        query = select(Task)
        if board_id:
            query = query.where(Task.board_id == board_id)
        result = await self.db.execute(query)
        return [TaskRecord.model_validate(task) for task in result.scalars().all()]

    async def _get_task(self, task_id: str) -> Task:
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if not task:
            raise NotFoundError("Task not found")
        return task

    async def add_dependency(self, task_id: str, depends_on_id: str) -> TaskRecord:
        """Store `task_id -> depends_on_id`; cycles and self references raise ValidationError"""
        db_task = await self._get_task(task_id)
        all_tasks = await self.get_all_tasks()

        updated = next(t for t in add_dependency(task_id, depends_on_id, all_tasks) if t.id == task_id)

        db_task.dependencies = list(updated.dependencies)
        await self.db.commit()
        await self.db.refresh(db_task)
        logger.info(f"Task {task_id} now depends on {depends_on_id}")
        return TaskRecord.model_validate(db_task)

    async def remove_dependency(self, task_id: str, depends_on_id: str) -> TaskRecord:
        db_task = await self._get_task(task_id)
        current = TaskRecord.model_validate(db_task)

        updated = remove_dependency(task_id, depends_on_id, [current])[0]

        db_task.dependencies = list(updated.dependencies)
        await self.db.commit()
        await self.db.refresh(db_task)
        return TaskRecord.model_validate(db_task)

    async def check_transition(self, task_id: str, new_status: str) -> TransitionCheck:
        """Whether the task may move to `new_status` given its dependencies"""
        db_task = await self._get_task(task_id)
        all_tasks = await self.get_all_tasks()
        return can_move_task(TaskRecord.model_validate(db_task), new_status, all_tasks)
