"""Audit logging subsystem for litdedupe.

Main Components
---------------
- AuditLogger: JSONL event logger used to trace detection runs
- LogEvent: structured event envelope
"""

from litdedupe.audit.helpers import generate_run_id
from litdedupe.audit.logger import AuditLogger
from litdedupe.audit.models import LogEvent
from litdedupe.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_iso_timestamp",
]
