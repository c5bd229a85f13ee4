"""Tracing utilities wrapping Opik."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from taskbreakdown.core.context import get_request_id
from taskbreakdown.observability import client as opik_client

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional[Any]]:
    """
    Open an Opik trace around a block of work.

    Yields the trace handle, or ``None`` when tracing is disabled. Errors raised
    inside the block are attached to the trace and re-raised.
    """
    client = opik_client.get_opik_client()
    handle = None

    if client:
        trace_metadata = dict(metadata or {})
        trace_metadata.setdefault("request_id", request_id or get_request_id())
        try:
            handle = client.trace(name=name, metadata=trace_metadata)
        except Exception as exc:  # pragma: no cover - remote failure
            logger.debug("Unable to start Opik trace %s: %s", name, exc)

    try:
        yield handle
    except Exception as exc:
        if handle is not None:
            try:
                handle.update(error_info={"message": str(exc)})
            except Exception:  # pragma: no cover
                logger.debug("Failed to attach error info to trace %s", name, exc_info=True)
        raise
    finally:
        if handle is not None:
            try:
                handle.end()
            except Exception:  # pragma: no cover
                logger.debug("Failed to close trace %s cleanly", name, exc_info=True)
