"""ORM models exposed for metadata discovery."""
from taskbreakdown.db.models.analytics import AnalyticsCounterDocument, AnalyticsEventRecord

__all__ = [
    "AnalyticsCounterDocument",
    "AnalyticsEventRecord",
]
