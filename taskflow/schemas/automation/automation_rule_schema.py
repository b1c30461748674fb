from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime
from taskflow.models.shared.enums import TriggerType, NotificationType
from taskflow.schemas.task.task_schema import TaskRecord
from taskflow.utils.date_utils import to_naive_utc

class AutomationCondition(BaseModel):
    field: str
    operator: Optional[str] = None
    value: Any = None

class AutomationAction(BaseModel):
    """One step of a rule; which payload keys matter depends on `type`."""
    type: str
    value: Any = None
    # create-notification
    user_id: Optional[str] = None
    message: Optional[str] = None
    # create-task
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    assigned_to: Optional[str] = None

    class Config:
        extra = "allow"

class AutomationRuleCreate(BaseModel):
    name: Optional[str] = None
    enabled: bool = True
    board_id: Optional[str] = None
    trigger: Optional[str] = None
    conditions: List[AutomationCondition] = Field(default_factory=list)
    actions: List[AutomationAction] = Field(default_factory=list)

class AutomationRuleUpdate(BaseModel):
    name: Optional[str] = None
    enabled: Optional[bool] = None
    trigger: Optional[str] = None
    conditions: Optional[List[AutomationCondition]] = None
    actions: Optional[List[AutomationAction]] = None

class AutomationRuleRecord(BaseModel):
    id: str
    name: str
    enabled: bool = True
    board_id: Optional[str] = None
    trigger: TriggerType
    conditions: List[AutomationCondition] = Field(default_factory=list)
    actions: List[AutomationAction] = Field(default_factory=list)
    position: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("conditions", "actions", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @field_validator("enabled", mode="before")
    @classmethod
    def none_as_enabled(cls, v):
        return True if v is None else v

class RuleValidation(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)

class AutomationContext(BaseModel):
    """Event payload handed to the dispatcher.

    `old_status` / `new_status` are only set for task-moved events.
    `now` pins the clock for due-date conditions.
    """
    task: TaskRecord
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    now: Optional[datetime] = None

    @field_validator("now")
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

class AutomationNotification(BaseModel):
    user_id: Optional[str] = None
    message: str
    type: NotificationType = NotificationType.AUTOMATION

class NewTaskRequest(BaseModel):
    title: str
    description: str = ""
    priority: str
    status: str
    assigned_to: Optional[str] = None

class ActionResult(BaseModel):
    task: TaskRecord
    notifications: List[AutomationNotification] = Field(default_factory=list)
    new_tasks: List[NewTaskRequest] = Field(default_factory=list)

class AutomationResult(BaseModel):
    updated_task: TaskRecord
    notifications: List[AutomationNotification] = Field(default_factory=list)
    new_tasks: List[NewTaskRequest] = Field(default_factory=list)
    applied_rule_ids: List[str] = Field(default_factory=list)
