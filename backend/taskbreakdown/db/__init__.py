"""Database utilities and models."""

from taskbreakdown.db.base import Base
from taskbreakdown.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
