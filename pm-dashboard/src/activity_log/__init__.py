"""Activity log - a persisted record of every store operation.

This module provides:
- The ActivityRecord model (shares the dashboard database)
- Repository functions for writing and querying records
- track_operation, the context manager the store wraps each call in
"""

from .recorder import OperationContext, track_operation
from .repo import (
    cleanup_old_activity,
    get_activity,
    get_activity_record,
    get_activity_stats,
    get_recent_errors,
    init_db,
    log_activity,
)

__all__ = [
    "OperationContext",
    "cleanup_old_activity",
    "get_activity",
    "get_activity_record",
    "get_activity_stats",
    "get_recent_errors",
    "init_db",
    "log_activity",
    "track_operation",
]
