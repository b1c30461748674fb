from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
from taskflow.models.shared.enums import Base

class BaseModel(Base):
    """Base model with common fields"""
    __abstract__ = True

    id = Column(String(64), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
