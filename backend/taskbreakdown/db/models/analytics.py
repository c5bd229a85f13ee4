"""Analytics documents: one global counters document plus an event stream."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, String, func

from taskbreakdown.db.base import Base
from taskbreakdown.db.types import JSONDocument

GLOBAL_COUNTERS_ID = "global"


class AnalyticsCounterDocument(Base):
    __tablename__ = "analytics"

    id = Column(String(64), primary_key=True, default=GLOBAL_COUNTERS_ID)
    document = Column(JSONDocument, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class AnalyticsEventRecord(Base):
    __tablename__ = "user_attempts"
    __table_args__ = (
        Index("ix_user_attempts_timestamp", "timestamp"),
        Index("ix_user_attempts_type", "type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(32), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    data = Column(JSONDocument, nullable=True)
