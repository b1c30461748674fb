from taskflow.models.automation.automation_rule import AutomationRule
from taskflow.models.recurring.recurring_template import RecurringTemplate
from taskflow.models.task.task import Task


__all__ = [
    "AutomationRule",
    "RecurringTemplate",
    "Task",
]
