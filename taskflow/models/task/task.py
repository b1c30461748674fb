from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON
from taskflow.db.base import BaseModel
from taskflow.models.shared.enums import TaskPriority, TaskStatus

class Task(BaseModel):
    __tablename__ = 'tasks'

    board_id = Column(String(64), index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)

    # Status and priority
    status = Column(String(50), default=TaskStatus.TODO.value)
    priority = Column(String(20), default=TaskPriority.MEDIUM.value)
    category = Column(String(50))
    assigned_to = Column(String(64))

    # Dates
    due_date = Column(DateTime(timezone=True))

    # Additional fields
    labels = Column(JSON, default=list)
    dependencies = Column(JSON, default=list)  # Ids of tasks this one depends on
    time_estimate = Column(Integer, default=0)  # Minutes
    is_recurring = Column(Boolean, default=False)
    recurring_template_id = Column(String(64), index=True)
