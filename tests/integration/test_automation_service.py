import pytest
from datetime import datetime
from sqlalchemy import select
from taskflow.core.exceptions import NotFoundError, ValidationError
from taskflow.models.automation.automation_rule import AutomationRule
from taskflow.schemas.automation.automation_rule_schema import AutomationContext, AutomationRuleCreate, AutomationRuleUpdate
from taskflow.schemas.task.task_schema import TaskRecord
from taskflow.services.automation.automation_service import AutomationService


def rule_data(name: str, board_id: str = "b1", **overrides) -> AutomationRuleCreate:
    data = {
        "name": name,
        "board_id": board_id,
        "trigger": "task-created",
        "actions": [{"type": "add-label", "value": name}],
    }
    data.update(overrides)
    return AutomationRuleCreate(**data)


class TestAutomationService:
    """Test stored rules and event processing"""

    async def test_create_rule_appends_in_order(self, session):
        """Test new rules get the next position within their board"""
        service = AutomationService(session)

        first = await service.create_rule(rule_data("first"))
        second = await service.create_rule(rule_data("second"))
        other_board = await service.create_rule(rule_data("other", board_id="b2"))

        assert (first.position, second.position, other_board.position) == (0, 1, 0)
        rules = await service.load_rules("b1")
        assert [r.name for r in rules] == ["first", "second"]

    async def test_invalid_rule_not_stored(self, session):
        """Test a rejected rule leaves no row behind"""
        service = AutomationService(session)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_rule(AutomationRuleCreate(name="Broken", trigger="task-created"))

        assert exc_info.value.errors == ["At least one action is required"]
        assert (await session.execute(select(AutomationRule))).scalars().all() == []

    async def test_unscoped_rules_load_for_every_board(self, session):
        """Test rules without a board apply to any board"""
        service = AutomationService(session)
        await service.create_rule(rule_data("global", board_id=None))

        assert [r.name for r in await service.load_rules("b9")] == ["global"]

    async def test_process_event_records_execution(self, session):
        """Test fired rules get their execution stats bumped"""
        service = AutomationService(session)
        fired = await service.create_rule(rule_data("fired"))
        skipped = await service.create_rule(rule_data(
            "skipped", conditions=[{"field": "priority", "value": "urgent"}],
        ))
        now = datetime(2024, 6, 10, 12, 0)

        result = await service.process_event(
            "task-created",
            AutomationContext(task=TaskRecord(id="t1", title="T", priority="low"), now=now),
            "b1",
        )

        assert result.applied_rule_ids == [fired.id]
        assert result.updated_task.labels == ["fired"]

        rows = {r.id: r for r in (await session.execute(select(AutomationRule))).scalars().all()}
        assert rows[fired.id].execution_count == 1
        assert rows[fired.id].last_executed.replace(tzinfo=None) == now
        assert rows[skipped.id].execution_count == 0

    async def test_disabled_rule_does_not_fire(self, session):
        """Test toggling a rule off removes it from dispatch"""
        service = AutomationService(session)
        rule = await service.create_rule(rule_data("toggle"))

        updated = await service.set_enabled(rule.id, False)
        assert updated.enabled is False

        result = await service.process_event(
            "task-created", AutomationContext(task=TaskRecord(id="t1", title="T")), "b1",
        )
        assert result.applied_rule_ids == []

    async def test_set_enabled_unknown_rule(self, session):
        """Test toggling a missing rule raises NotFoundError"""
        with pytest.raises(NotFoundError):
            await AutomationService(session).set_enabled("automation-missing", True)

    async def test_update_rule(self, session):
        """Test a partial update changes only the given fields"""
        service = AutomationService(session)
        rule = await service.create_rule(rule_data("before"))

        updated = await service.update_rule(rule.id, AutomationRuleUpdate(
            name="after",
            trigger="task-moved",
            conditions=[{"field": "status", "operator": "equals", "value": "done"}],
        ))

        assert updated.name == "after"
        assert updated.trigger == "task-moved"
        assert updated.conditions[0].value == "done"
        assert updated.actions[0].value == "before"
        assert updated.position == rule.position

    async def test_update_rule_revalidates(self, session):
        """Test an update that breaks the rule is rejected and nothing changes"""
        service = AutomationService(session)
        rule = await service.create_rule(rule_data("keep"))

        with pytest.raises(ValidationError) as exc_info:
            await service.update_rule(rule.id, AutomationRuleUpdate(trigger="task-deleted", actions=[]))

        assert exc_info.value.errors == ["Unknown trigger 'task-deleted'", "At least one action is required"]
        stored = (await service.load_rules("b1"))[0]
        assert stored.trigger == "task-created"
        assert len(stored.actions) == 1

    async def test_delete_rule(self, session):
        """Test a deleted rule no longer loads or fires"""
        service = AutomationService(session)
        rule = await service.create_rule(rule_data("gone"))

        await service.delete_rule(rule.id)

        assert await service.load_rules("b1") == []
        with pytest.raises(NotFoundError):
            await service.delete_rule(rule.id)

    async def test_update_unknown_rule(self, session):
        """Test updating a missing rule raises NotFoundError"""
        with pytest.raises(NotFoundError):
            await AutomationService(session).update_rule("automation-missing", AutomationRuleUpdate(name="x"))
