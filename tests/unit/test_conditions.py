import pytest
from datetime import datetime, timedelta, timezone
from taskflow.schemas.automation.automation_rule_schema import AutomationCondition, AutomationContext
from taskflow.schemas.task.task_schema import TaskRecord
from taskflow.services.automation.conditions import evaluate_conditions

NOW = datetime(2024, 6, 10, 12, 0)


def make_context(**task_fields) -> AutomationContext:
    new_status = task_fields.pop("new_status", None)
    return AutomationContext(task=TaskRecord(id="t1", title="Task", **task_fields), new_status=new_status, now=NOW)


class TestEqualityConditions:
    """Test priority/category/assignedTo conditions"""

    def test_empty_conditions_pass(self):
        """Test a rule without conditions always passes"""
        assert evaluate_conditions([], make_context()) is True

    def test_priority_match(self):
        """Test priority equality"""
        conditions = [AutomationCondition(field="priority", value="high")]
        assert evaluate_conditions(conditions, make_context(priority="high")) is True
        assert evaluate_conditions(conditions, make_context(priority="medium")) is False

    def test_category_and_assignee_are_anded(self):
        """Test all conditions must hold"""
        conditions = [
            AutomationCondition(field="category", value="bug"),
            AutomationCondition(field="assignedTo", value="u1"),
        ]
        assert evaluate_conditions(conditions, make_context(category="bug", assigned_to="u1")) is True
        assert evaluate_conditions(conditions, make_context(category="bug", assigned_to="u2")) is False


class TestStatusConditions:
    """Test status conditions against the event's new status"""

    def test_equals(self):
        """Test equals compares the new status, not the task's stored status"""
        conditions = [AutomationCondition(field="status", operator="equals", value="done")]
        assert evaluate_conditions(conditions, make_context(status="todo", new_status="done")) is True
        assert evaluate_conditions(conditions, make_context(status="done", new_status="in-progress")) is False

    def test_not_equals(self):
        """Test not-equals"""
        conditions = [AutomationCondition(field="status", operator="not-equals", value="done")]
        assert evaluate_conditions(conditions, make_context(new_status="in-progress")) is True
        assert evaluate_conditions(conditions, make_context(new_status="done")) is False

    def test_missing_operator_does_not_block(self):
        """Test status without a supported operator is treated as satisfied"""
        conditions = [AutomationCondition(field="status", value="done")]
        assert evaluate_conditions(conditions, make_context(new_status="todo")) is True


class TestDueDateConditions:
    """Test overdue and due-soon operators"""

    def test_overdue(self):
        """Test overdue is strictly before now"""
        conditions = [AutomationCondition(field="dueDate", operator="overdue")]
        assert evaluate_conditions(conditions, make_context(due_date=NOW - timedelta(minutes=1))) is True
        assert evaluate_conditions(conditions, make_context(due_date=NOW)) is False
        assert evaluate_conditions(conditions, make_context()) is False

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(0), True),
        (timedelta(days=1), True),
        (timedelta(days=3), True),
        (timedelta(days=3, seconds=1), False),
        (timedelta(minutes=-1), False),
    ])
    def test_due_soon_window(self, delta, expected):
        """Test due-soon covers the next three days inclusive and never the past"""
        conditions = [AutomationCondition(field="dueDate", operator="due-soon")]
        assert evaluate_conditions(conditions, make_context(due_date=NOW + delta)) is expected

    def test_due_soon_without_due_date(self):
        """Test tasks without a due date are never due soon"""
        conditions = [AutomationCondition(field="dueDate", operator="due-soon")]
        assert evaluate_conditions(conditions, make_context()) is False

    def test_aware_due_date_against_naive_now(self):
        """Test an offset due date is compared in UTC against a naive clock"""
        conditions = [AutomationCondition(field="dueDate", operator="overdue")]
        # 14:00 at UTC+5 is 09:00 UTC, before NOW
        due = datetime(2024, 6, 10, 14, 0, tzinfo=timezone(timedelta(hours=5)))
        assert evaluate_conditions(conditions, make_context(due_date=due)) is True

    def test_aware_now_against_naive_due_date(self):
        """Test an aware clock works with naive due dates"""
        conditions = [AutomationCondition(field="dueDate", operator="due-soon")]
        context = AutomationContext(
            task=TaskRecord(id="t1", title="Task", due_date=NOW + timedelta(days=1)),
            now=NOW.replace(tzinfo=timezone.utc),
        )
        assert evaluate_conditions(conditions, context) is True

    def test_default_clock_with_aware_due_date(self):
        """Test the fallback clock copes with aware due dates"""
        conditions = [AutomationCondition(field="dueDate", operator="overdue")]
        context = AutomationContext(task=TaskRecord(
            id="t1", title="Task", due_date=datetime(2000, 1, 1, tzinfo=timezone.utc),
        ))
        assert evaluate_conditions(conditions, context) is True


class TestUnknownConditions:
    """Test fail-open handling of unsupported conditions"""

    def test_unknown_field_passes(self):
        """Test an unknown field does not block the rule"""
        conditions = [AutomationCondition(field="storyPoints", operator="equals", value=5)]
        assert evaluate_conditions(conditions, make_context()) is True

    def test_unknown_due_date_operator_passes(self):
        """Test an unknown dueDate operator does not block the rule"""
        conditions = [AutomationCondition(field="dueDate", operator="next-week")]
        assert evaluate_conditions(conditions, make_context()) is True

    def test_unknown_condition_still_anded(self):
        """Test a failing known condition still blocks next to an unknown one"""
        conditions = [
            AutomationCondition(field="storyPoints", value=5),
            AutomationCondition(field="priority", value="high"),
        ]
        assert evaluate_conditions(conditions, make_context(priority="low")) is False
