from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from taskflow.utils.date_utils import to_naive_utc

class TaskRecord(BaseModel):
    """Snapshot of a board task as seen by the engine.

    Unknown keys (custom fields, subtasks, ...) are kept so that a task
    round-trips through automation untouched apart from the engine's edits.
    """
    id: Optional[str] = None
    board_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    status: Optional[str] = "todo"
    priority: Optional[str] = None
    category: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    time_estimate: int = 0
    is_recurring: bool = False
    recurring_template_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "allow"
        from_attributes = True

    @field_validator("labels", "dependencies", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @field_validator("time_estimate", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator("is_recurring", mode="before")
    @classmethod
    def none_as_false(cls, v):
        return False if v is None else v

    @field_validator("due_date", "created_at")
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

class DependencyValidation(BaseModel):
    valid: bool
    error: Optional[str] = None

class TransitionCheck(BaseModel):
    can_move: bool
    blocking_tasks: List[TaskRecord] = Field(default_factory=list)
