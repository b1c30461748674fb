from sqlalchemy.orm import declarative_base
from enum import Enum

Base = declarative_base()

# Automation enums
class TriggerType(str, Enum):
    TASK_CREATED = "task-created"
    TASK_MOVED = "task-moved"
    TASK_COMPLETED = "task-completed"
    TASK_OVERDUE = "task-overdue"
    TASK_ASSIGNED = "task-assigned"

class ConditionField(str, Enum):
    PRIORITY = "priority"
    CATEGORY = "category"
    STATUS = "status"
    ASSIGNED_TO = "assignedTo"
    DUE_DATE = "dueDate"

class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"

class ActionType(str, Enum):
    ASSIGN_USER = "assign-user"
    SET_PRIORITY = "set-priority"
    SET_CATEGORY = "set-category"
    SET_STATUS = "set-status"
    CREATE_NOTIFICATION = "create-notification"
    CREATE_TASK = "create-task"
    ADD_LABEL = "add-label"

class NotificationType(str, Enum):
    AUTOMATION = "automation"


# Recurrence enums
class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# Task related enums
class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    COMPLETED = "completed"
    CLOSED = "closed"

class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
