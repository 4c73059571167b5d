"""Audit logging utilities.

Mirrors every stored activity entry as one structured log line so the trail
is visible in log aggregation even before the store is queried.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional


logger = logging.getLogger("clinicqueue.audit")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def audit_log_event(
    *,
    event: str,
    clinic_id: Optional[str] = None,
    target_id: Optional[str] = None,
    handler_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    record = {
        "ts": _now_iso(),
        "event": event,
        "clinic_id": clinic_id,
        "target_id": target_id,
        "handler_id": handler_id,
        "payload": payload or {},
    }
    logger.info("AUDIT %s", json.dumps(record, ensure_ascii=False, default=str))
