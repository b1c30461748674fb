from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from taskflow.db.base import BaseModel

class AutomationRule(BaseModel):
    __tablename__ = 'automation_rules'

    board_id = Column(String(64), index=True)  # NULL applies to all boards
    name = Column(String(100), nullable=False)
    enabled = Column(Boolean, default=True)
    trigger = Column(String(50), nullable=False)  # task-created, task-moved, ...
    conditions = Column(JSON, default=list)  # ANDed condition clauses
    actions = Column(JSON, default=list)  # Executed in sequence
    position = Column(Integer, default=0)  # Evaluation order within a board

    last_executed = Column(DateTime(timezone=True))
    execution_count = Column(Integer, default=0)
