from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from taskflow.db.base import BaseModel

class RecurringTemplate(BaseModel):
    __tablename__ = 'recurring_templates'

    board_id = Column(String(64), index=True)  # NULL applies to all boards
    name = Column(String(200), nullable=False)
    enabled = Column(Boolean, default=True)
    task_template = Column(JSON, default=dict)  # Partial task skeleton
    recurrence = Column(JSON, nullable=False)  # daily/weekly/monthly/yearly pattern

    # Engine bookkeeping
    last_generated_at = Column(DateTime(timezone=True))
    occurrence_count = Column(Integer, default=0)
