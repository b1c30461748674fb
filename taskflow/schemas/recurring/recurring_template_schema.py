from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime
from taskflow.models.shared.enums import RecurrenceType
from taskflow.schemas.task.task_schema import TaskRecord
from taskflow.utils.date_utils import to_naive_utc

class RecurrencePattern(BaseModel):
    """How often a template fires.

    Partial or malformed user input is normalized rather than rejected:
    a bad interval falls back to 1, weekday indices outside 0-6
    (0 = Sunday) are dropped, and out-of-range day_of_month /
    max_occurrences are ignored.
    """
    type: Optional[RecurrenceType] = RecurrenceType.DAILY
    interval: int = 1
    days_of_week: List[int] = Field(default_factory=list)
    day_of_month: Optional[int] = None
    end_date: Optional[datetime] = None
    max_occurrences: Optional[int] = None

    @field_validator("type", mode="before")
    @classmethod
    def known_type(cls, v):
        # Unsupported kinds (e.g. "custom") never produce an occurrence
        try:
            return RecurrenceType(v)
        except ValueError:
            return None

    @field_validator("interval", mode="before")
    @classmethod
    def positive_interval(cls, v):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return 1
        return v if v > 0 else 1

    @field_validator("days_of_week", mode="before")
    @classmethod
    def valid_weekdays(cls, v):
        if not v:
            return []
        days = []
        for day in v:
            try:
                day = int(day)
            except (TypeError, ValueError):
                continue
            if 0 <= day <= 6 and day not in days:
                days.append(day)
        return days

    @field_validator("day_of_month", mode="before")
    @classmethod
    def valid_day_of_month(cls, v):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return None
        return v if 1 <= v <= 31 else None

    @field_validator("max_occurrences", mode="before")
    @classmethod
    def positive_max_occurrences(cls, v):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return None
        return v if v > 0 else None

    @field_validator("end_date")
    @classmethod
    def naive_utc_end_date(cls, v):
        return to_naive_utc(v)

class TaskTemplate(BaseModel):
    title: str = "Recurring task"
    description: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    assigned_to: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = None
    time_estimate: Any = None  # "2h 30m", "45m", minutes as int, ...

    class Config:
        extra = "allow"

    @field_validator("due_date")
    @classmethod
    def naive_utc_due_date(cls, v):
        return to_naive_utc(v)

class RecurringTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    enabled: bool = True
    board_id: Optional[str] = None
    task_template: TaskTemplate = Field(default_factory=TaskTemplate)
    recurrence: RecurrencePattern = Field(default_factory=RecurrencePattern)

class RecurringTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    enabled: Optional[bool] = None
    task_template: Optional[TaskTemplate] = None
    recurrence: Optional[RecurrencePattern] = None

class RecurringTemplateRecord(BaseModel):
    id: str
    name: str
    enabled: bool = True
    board_id: Optional[str] = None
    task_template: TaskTemplate = Field(default_factory=TaskTemplate)
    recurrence: RecurrencePattern = Field(default_factory=RecurrencePattern)
    last_generated_at: Optional[datetime] = None
    occurrence_count: int = Field(0, ge=0)
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("occurrence_count", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator("task_template", "recurrence", mode="before")
    @classmethod
    def none_as_default(cls, v):
        return {} if v is None else v

    @field_validator("created_at", "last_generated_at", "updated_at")
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

class GenerationResult(BaseModel):
    generated_tasks: List[TaskRecord] = Field(default_factory=list)
    updated_templates: List[RecurringTemplateRecord] = Field(default_factory=list)
