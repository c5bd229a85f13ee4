"""Analytics stored as documents in a SQL database.

The counters live in a single ``global`` row whose JSON column holds the whole
counters document; every event is also appended to an events table so recent
activity can be listed.
"""
from __future__ import annotations

import logging
from threading import Lock
from typing import List

from sqlalchemy import select
from sqlalchemy.engine import Engine

from taskbreakdown.db.base import Base
from taskbreakdown.db.models.analytics import (
    GLOBAL_COUNTERS_ID,
    AnalyticsCounterDocument,
    AnalyticsEventRecord,
)
from taskbreakdown.db.session import build_session_factory
from taskbreakdown.services.analytics.base import (
    AnalyticsCounters,
    AnalyticsEvent,
    AnalyticsService,
    EventType,
    apply_event,
)

logger = logging.getLogger(__name__)


class DatabaseAnalyticsService(AnalyticsService):
    """Counter updates hold a process lock and a row lock on the counters document."""

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        self._lock = Lock()
        if create_tables:
            Base.metadata.create_all(
                bind=engine,
                tables=[AnalyticsCounterDocument.__table__, AnalyticsEventRecord.__table__],
            )

    @property
    def storage_description(self) -> str:  # type: ignore[override]
        return f"Database - {self._engine.url.render_as_string(hide_password=True)}"

    def _record(self, event: AnalyticsEvent) -> AnalyticsCounters:
        with self._lock, self._session_factory() as session:
            row = session.get(AnalyticsCounterDocument, GLOBAL_COUNTERS_ID, with_for_update=True)
            current = AnalyticsCounters.model_validate(row.document) if row else AnalyticsCounters()
            counters = apply_event(current, event)
            document = counters.model_dump(mode="json")
            if row is None:
                session.add(AnalyticsCounterDocument(id=GLOBAL_COUNTERS_ID, document=document))
            else:
                row.document = document
            session.add(
                AnalyticsEventRecord(
                    type=event.type.value,
                    timestamp=event.timestamp,
                    data=event.data,
                )
            )
            session.commit()
        return counters

    def _read(self) -> AnalyticsCounters:
        with self._lock, self._session_factory() as session:
            row = session.get(AnalyticsCounterDocument, GLOBAL_COUNTERS_ID)
            if row is None:
                logger.info("No analytics document found; creating default counters")
                counters = AnalyticsCounters()
                session.add(AnalyticsCounterDocument(id=GLOBAL_COUNTERS_ID, document=counters.model_dump(mode="json")))
                session.commit()
                return counters
            return AnalyticsCounters.model_validate(row.document)

    def _recent_events(self, limit: int) -> List[AnalyticsEvent]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(AnalyticsEventRecord)
                .order_by(AnalyticsEventRecord.timestamp.desc(), AnalyticsEventRecord.id.desc())
                .limit(limit)
            ).all()
            return [
                AnalyticsEvent(type=EventType(row.type), timestamp=row.timestamp, data=row.data)
                for row in rows
            ]

    def close(self) -> None:
        self._engine.dispose()
