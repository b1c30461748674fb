import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.exceptions import NotFoundError
from taskflow.models.recurring.recurring_template import RecurringTemplate
from taskflow.models.task.task import Task
from taskflow.schemas.recurring.recurring_template_schema import (
    GenerationResult,
    RecurringTemplateCreate,
    RecurringTemplateRecord,
    RecurringTemplateUpdate,
)
from taskflow.services.recurring.generator import generate_due
from taskflow.utils.date_utils import to_naive_utc, utc_now

logger = logging.getLogger(__name__)

class RecurringTaskService:
    """Template storage and on-demand catch-up generation"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_templates(self, board_id: Optional[str] = None) -> List[RecurringTemplateRecord]:
        query = select(RecurringTemplate)
        if board_id:
            query = query.where(or_(RecurringTemplate.board_id == board_id, RecurringTemplate.board_id.is_(None)))
        query = query.order_by(RecurringTemplate.created_at.asc())

        result = await self.db.execute(query)
        return [RecurringTemplateRecord.model_validate(t) for t in result.scalars().all()]

    async def create_template(self, template_data: RecurringTemplateCreate, created_at: Optional[datetime] = None) -> RecurringTemplateRecord:
        """Store a new template; generation starts from its creation day"""
        db_template = RecurringTemplate(
            id=f"recurring-{uuid.uuid4().hex[:12]}",
            board_id=template_data.board_id,
            name=template_data.name,
            enabled=template_data.enabled,
            task_template=template_data.task_template.model_dump(mode="json"),
            recurrence=template_data.recurrence.model_dump(mode="json"),
            occurrence_count=0,
            created_at=to_naive_utc(created_at) or utc_now(),
        )
        self.db.add(db_template)
        await self.db.commit()
        await self.db.refresh(db_template)

        logger.info(f"Created recurring template {db_template.id} ({db_template.name})")
        return RecurringTemplateRecord.model_validate(db_template)

    async def get_template_by_id(self, template_id: str) -> RecurringTemplate:
        result = await self.db.execute(select(RecurringTemplate).where(RecurringTemplate.id == template_id))
        db_template = result.scalar_one_or_none()
        if not db_template:
            raise NotFoundError("Recurring template not found")
        return db_template

    async def update_template(self, template_id: str, template_data: RecurringTemplateUpdate) -> RecurringTemplateRecord:
        """Apply a partial update; generation bookkeeping is left alone"""
        db_template = await self.get_template_by_id(template_id)
        changes = {
            field: value
            for field, value in template_data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }

        for field, value in changes.items():
            setattr(db_template, field, value)

        if changes:
            db_template.updated_at = utc_now()
            await self.db.commit()
            await self.db.refresh(db_template)
            logger.info(f"Updated recurring template {template_id}: {', '.join(sorted(changes))}")

        return RecurringTemplateRecord.model_validate(db_template)

    async def delete_template(self, template_id: str) -> None:
        """Remove a template; tasks it already generated are kept"""
        db_template = await self.get_template_by_id(template_id)
        await self.db.delete(db_template)
        await self.db.commit()
        logger.info(f"Deleted recurring template {template_id}")

    async def generate_for_board(self, board_id: Optional[str] = None, now: Optional[datetime] = None) -> GenerationResult:
        """Catch up every template in scope and persist tasks plus bookkeeping in one commit"""
        now = to_naive_utc(now) or utc_now()
        templates = await self.load_templates(board_id)
        result = generate_due(templates, board_id, now)

        if not result.generated_tasks:
            return result

        existing_ids = set(
            (await self.db.execute(
                select(Task.id).where(Task.id.in_([t.id for t in result.generated_tasks]))
            )).scalars().all()
        )
        for task in result.generated_tasks:
            # Ids are derived from template + date, so a repeated pass never duplicates rows
            if task.id in existing_ids:
                continue
            self.db.add(Task(
                id=task.id,
                board_id=task.board_id or board_id,
                title=task.title,
                description=task.description,
                status=task.status,
                priority=task.priority,
                category=task.category,
                assigned_to=task.assigned_to,
                due_date=task.due_date,
                labels=task.labels,
                dependencies=task.dependencies,
                time_estimate=task.time_estimate,
                is_recurring=True,
                recurring_template_id=task.recurring_template_id,
                created_at=task.created_at,
            ))

        for updated in result.updated_templates:
            db_result = await self.db.execute(select(RecurringTemplate).where(RecurringTemplate.id == updated.id))
            db_template = db_result.scalar_one()
            db_template.occurrence_count = updated.occurrence_count
            db_template.last_generated_at = updated.last_generated_at
            db_template.updated_at = updated.updated_at

        await self.db.commit()
        logger.info(f"Generated {len(result.generated_tasks)} recurring task(s) for board {board_id or 'all'}")
        return result
