"""
Trigger dispatch: the entry point for board/task events.

Every enabled rule that matches the trigger and board scope is applied in
stored order. Conditions are checked against the event task; the task
produced by one rule is what the next rule's actions start from.
"""
import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from taskflow.core.exceptions import ValidationError
from taskflow.core.logging import log_rule_applied
from taskflow.models.shared.enums import TriggerType
from taskflow.schemas.automation.automation_rule_schema import (
    AutomationContext,
    AutomationResult,
    AutomationRuleCreate,
    AutomationRuleRecord,
    RuleValidation,
)
from taskflow.services.automation.actions import execute_actions
from taskflow.services.automation.conditions import evaluate_conditions
from taskflow.utils.date_utils import utc_now

logger = logging.getLogger(__name__)

TRIGGER_VALUES = {trigger.value for trigger in TriggerType}


def rule_matches(rule: AutomationRuleRecord, trigger: str, board_id: Optional[str]) -> bool:
    """Enabled, in board scope (or unscoped) and listening to this trigger"""
    if not rule.enabled:
        return False
    if rule.board_id and rule.board_id != board_id:
        return False
    return rule.trigger == trigger


def dispatch(
    trigger: str,
    context: AutomationContext,
    board_id: Optional[str],
    rules: Iterable[AutomationRuleRecord],
) -> AutomationResult:
    """Run all matching rules for an event and aggregate their effects.

    Rules whose conditions fail are skipped. Nothing is persisted; the
    caller stores the updated task and forwards notifications/new tasks.
    """
    result = AutomationResult(updated_task=context.task)
    trigger = getattr(trigger, "value", trigger)

    if trigger not in TRIGGER_VALUES:
        logger.warning(f"Unknown automation trigger '{trigger}', no rules evaluated")
        return result

    for rule in rules:
        if not rule_matches(rule, trigger, board_id):
            continue

        # Conditions see the task as it arrived; actions build on earlier rules
        if not evaluate_conditions(rule.conditions, context):
            continue

        rule_context = context.model_copy(update={"task": result.updated_task})
        action_result = execute_actions(rule.actions, rule_context, rule.name)
        result.updated_task = action_result.task
        result.notifications.extend(action_result.notifications)
        result.new_tasks.extend(action_result.new_tasks)
        result.applied_rule_ids.append(rule.id)
        log_rule_applied(rule.id, rule.name, trigger, result.updated_task.id)

    return result


def validate_automation_rule(rule_data: AutomationRuleCreate) -> RuleValidation:
    """Collect every problem with a rule definition"""
    errors: List[str] = []

    if not rule_data.name or not rule_data.name.strip():
        errors.append("Rule name is required")

    if not rule_data.trigger:
        errors.append("Trigger is required")
    elif rule_data.trigger not in TRIGGER_VALUES:
        errors.append(f"Unknown trigger '{rule_data.trigger}'")

    if not rule_data.actions:
        errors.append("At least one action is required")

    return RuleValidation(valid=not errors, errors=errors)


def create_automation_rule(
    rule_data: AutomationRuleCreate,
    position: int = 0,
    now: Optional[datetime] = None,
) -> AutomationRuleRecord:
    """Build a rule record, rejecting invalid definitions with all their errors"""
    validation = validate_automation_rule(rule_data)
    if not validation.valid:
        raise ValidationError("; ".join(validation.errors), errors=validation.errors)

    now = now or utc_now()
    return AutomationRuleRecord(
        id=f"automation-{uuid.uuid4().hex[:12]}",
        name=rule_data.name.strip(),
        enabled=rule_data.enabled,
        board_id=rule_data.board_id,
        trigger=TriggerType(rule_data.trigger),
        conditions=rule_data.conditions,
        actions=rule_data.actions,
        position=position,
        created_at=now,
        updated_at=now,
    )
