"""
Action execution for automation rules.

Actions run in sequence over one working copy of the task, so each
action sees what the previous ones changed. Default recipients and
assignees of requested tasks come from the task the rule started with.
The input task is never modified.
"""
import logging
from typing import Callable, Dict, Iterable, Optional

from taskflow.core.config import settings
from taskflow.models.shared.enums import ActionType
from taskflow.schemas.automation.automation_rule_schema import (
    ActionResult,
    AutomationAction,
    AutomationContext,
    AutomationNotification,
    NewTaskRequest,
)

logger = logging.getLogger(__name__)


def _assign_user(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    result.task.assigned_to = action.value


def _set_priority(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    result.task.priority = action.value


def _set_category(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    result.task.category = action.value


def _set_status(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    result.task.status = action.value


def _add_label(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    if action.value not in result.task.labels:
        result.task.labels = [*result.task.labels, action.value]


def _create_notification(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    result.notifications.append(AutomationNotification(
        user_id=action.user_id or context.task.assigned_to,
        message=action.message or f"Automation: {rule_name} triggered",
    ))


def _create_task(action: AutomationAction, result: ActionResult, context: AutomationContext, rule_name: str):
    result.new_tasks.append(NewTaskRequest(
        title=action.title or "Auto-created task",
        description=action.description or "",
        priority=action.priority or settings.DEFAULT_TASK_PRIORITY,
        status=action.status or settings.DEFAULT_TASK_STATUS,
        assigned_to=action.assigned_to or context.task.assigned_to,
    ))


ACTION_HANDLERS: Dict[str, Callable[[AutomationAction, ActionResult, AutomationContext, str], None]] = {
    ActionType.ASSIGN_USER.value: _assign_user,
    ActionType.SET_PRIORITY.value: _set_priority,
    ActionType.SET_CATEGORY.value: _set_category,
    ActionType.SET_STATUS.value: _set_status,
    ActionType.ADD_LABEL.value: _add_label,
    ActionType.CREATE_NOTIFICATION.value: _create_notification,
    ActionType.CREATE_TASK.value: _create_task,
}


def execute_actions(
    actions: Iterable[AutomationAction],
    context: AutomationContext,
    rule_name: Optional[str] = None,
) -> ActionResult:
    """Apply a rule's actions to a copy of the context task"""
    result = ActionResult(task=context.task.model_copy())
    rule_name = rule_name or "Untitled Rule"

    for action in actions:
        handler = ACTION_HANDLERS.get(action.type)
        if handler is None:
            logger.debug(f"Skipping unsupported action type '{action.type}' in rule {rule_name}")
            continue
        handler(action, result, context, rule_name)

    return result
