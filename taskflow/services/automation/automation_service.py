import logging
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.exceptions import NotFoundError, ValidationError
from taskflow.models.automation.automation_rule import AutomationRule
from taskflow.schemas.automation.automation_rule_schema import (
    AutomationContext,
    AutomationResult,
    AutomationRuleCreate,
    AutomationRuleRecord,
    AutomationRuleUpdate,
)
from taskflow.services.automation.dispatcher import create_automation_rule, dispatch, validate_automation_rule
from taskflow.utils.date_utils import utc_now

logger = logging.getLogger(__name__)

class AutomationService:
    """Rule storage plus event processing against stored rules"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_rules(self, board_id: Optional[str] = None) -> List[AutomationRuleRecord]:
        """Rules for a board (including unscoped ones) in evaluation order"""
        query = select(AutomationRule)
        if board_id:
            query = query.where(or_(AutomationRule.board_id == board_id, AutomationRule.board_id.is_(None)))
        query = query.order_by(AutomationRule.position.asc(), AutomationRule.created_at.asc())

        result = await self.db.execute(query)
        return [AutomationRuleRecord.model_validate(rule) for rule in result.scalars().all()]

    async def get_rule_by_id(self, rule_id: str) -> AutomationRule:
        result = await self.db.execute(select(AutomationRule).where(AutomationRule.id == rule_id))
        db_rule = result.scalar_one_or_none()
        if not db_rule:
            raise NotFoundError("Automation rule not found")
        return db_rule

    async def create_rule(self, rule_data: AutomationRuleCreate) -> AutomationRuleRecord:
        """Validate and store a rule at the end of its board's order"""
        position_result = await self.db.execute(
            select(func.coalesce(func.max(AutomationRule.position), -1)).where(
                AutomationRule.board_id.is_(None) if rule_data.board_id is None
                else AutomationRule.board_id == rule_data.board_id
            )
        )
        position = position_result.scalar() + 1

        record = create_automation_rule(rule_data, position=position, now=utc_now())

        db_rule = AutomationRule(
            id=record.id,
            board_id=record.board_id,
            name=record.name,
            enabled=record.enabled,
            trigger=record.trigger.value,
            conditions=[c.model_dump() for c in record.conditions],
            actions=[a.model_dump(exclude_none=True) for a in record.actions],
            position=record.position,
            created_at=record.created_at,
            updated_at=record.updated_at,
            execution_count=0,
        )
        self.db.add(db_rule)
        await self.db.commit()
        await self.db.refresh(db_rule)

        logger.info(f"Created automation rule {db_rule.id} ({db_rule.name}) on {db_rule.trigger}")
        return AutomationRuleRecord.model_validate(db_rule)

    async def update_rule(self, rule_id: str, rule_data: AutomationRuleUpdate) -> AutomationRuleRecord:
        """Apply a partial update; the merged rule must still be valid"""
        db_rule = await self.get_rule_by_id(rule_id)
        # None means "leave as stored"
        changes = rule_data.model_dump(exclude_none=True)

        merged = AutomationRuleCreate(
            name=changes.get("name", db_rule.name),
            enabled=changes.get("enabled", db_rule.enabled is not False),
            board_id=db_rule.board_id,
            trigger=changes.get("trigger", db_rule.trigger),
            conditions=changes.get("conditions", db_rule.conditions or []),
            actions=changes.get("actions", db_rule.actions or []),
        )
        validation = validate_automation_rule(merged)
        if not validation.valid:
            raise ValidationError("; ".join(validation.errors), errors=validation.errors)

        if not changes:
            return AutomationRuleRecord.model_validate(db_rule)

        db_rule.name = merged.name.strip()
        db_rule.enabled = merged.enabled
        db_rule.trigger = merged.trigger
        db_rule.conditions = [c.model_dump() for c in merged.conditions]
        db_rule.actions = [a.model_dump(exclude_none=True) for a in merged.actions]
        db_rule.updated_at = utc_now()
        await self.db.commit()
        await self.db.refresh(db_rule)

        logger.info(f"Updated automation rule {rule_id}: {', '.join(sorted(changes))}")
        return AutomationRuleRecord.model_validate(db_rule)

    async def set_enabled(self, rule_id: str, enabled: bool) -> AutomationRuleRecord:
        return await self.update_rule(rule_id, AutomationRuleUpdate(enabled=enabled))

    async def delete_rule(self, rule_id: str) -> None:
        db_rule = await self.get_rule_by_id(rule_id)
        await self.db.delete(db_rule)
        await self.db.commit()
        logger.info(f"Deleted automation rule {rule_id}")

    async def process_event(
        self,
        trigger: str,
        context: AutomationContext,
        board_id: Optional[str] = None,
    ) -> AutomationResult:
        """Dispatch an event against stored rules and record which rules fired.

        Persisting the updated task, notifications and new tasks stays
        with the caller.
        """
        rules = await self.load_rules(board_id)
        result = dispatch(trigger, context, board_id, rules)

        if result.applied_rule_ids:
            executed_at = context.now or utc_now()
            applied = await self.db.execute(
                select(AutomationRule).where(AutomationRule.id.in_(result.applied_rule_ids))
            )
            for db_rule in applied.scalars().all():
                db_rule.execution_count = (db_rule.execution_count or 0) + 1
                db_rule.last_executed = executed_at
            await self.db.commit()

        return result
