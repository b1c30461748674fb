"""
Condition evaluation for automation rules.

All conditions of a rule are ANDed. Unknown field/operator combinations
do not block a rule: they are logged and treated as satisfied.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from taskflow.core.config import settings
from taskflow.models.shared.enums import ConditionField, ConditionOperator
from taskflow.schemas.automation.automation_rule_schema import AutomationCondition, AutomationContext
from taskflow.utils.date_utils import to_naive_utc, utc_now

logger = logging.getLogger(__name__)

# Condition field name -> TaskRecord attribute for plain equality checks
EQUALITY_FIELDS = {
    ConditionField.PRIORITY.value: "priority",
    ConditionField.CATEGORY.value: "category",
    ConditionField.ASSIGNED_TO.value: "assigned_to",
}


def evaluate_conditions(conditions: Iterable[AutomationCondition], context: AutomationContext) -> bool:
    """Return True when every condition holds for the event context"""
    for condition in conditions:
        if not evaluate_condition(condition, context):
            return False
    return True


def evaluate_condition(condition: AutomationCondition, context: AutomationContext) -> bool:
    task = context.task

    if condition.field in EQUALITY_FIELDS:
        return getattr(task, EQUALITY_FIELDS[condition.field]) == condition.value

    if condition.field == ConditionField.STATUS.value:
        if condition.operator == ConditionOperator.EQUALS.value:
            return context.new_status == condition.value
        if condition.operator == ConditionOperator.NOT_EQUALS.value:
            return context.new_status != condition.value
        return _unknown(condition)

    if condition.field == ConditionField.DUE_DATE.value:
        if condition.operator == ConditionOperator.OVERDUE.value:
            return _is_overdue(task.due_date, context.now)
        if condition.operator == ConditionOperator.DUE_SOON.value:
            return _is_due_soon(task.due_date, context.now)
        return _unknown(condition)

    return _unknown(condition)


def _unknown(condition: AutomationCondition) -> bool:
    logger.debug(f"Ignoring unsupported condition {condition.field}/{condition.operator}")
    return True


def _clock(now: Optional[datetime]) -> datetime:
    # Naive UTC on both sides of every due-date comparison
    return to_naive_utc(now) if now is not None else utc_now()


def _is_overdue(due_date: Optional[datetime], now: Optional[datetime]) -> bool:
    if due_date is None:
        return False
    return to_naive_utc(due_date) < _clock(now)


def _is_due_soon(due_date: Optional[datetime], now: Optional[datetime]) -> bool:
    if due_date is None:
        return False
    now = _clock(now)
    due_date = to_naive_utc(due_date)
    return now <= due_date <= now + timedelta(days=settings.DUE_SOON_DAYS)
