"""Month-to-month replication package."""

from simplifinance.replication.engine import (
    ReplicationEngine,
    ReplicationError,
    mark_pendency,
    plan_replications,
    shift_date,
)

__all__ = [
    "ReplicationEngine",
    "ReplicationError",
    "mark_pendency",
    "plan_replications",
    "shift_date",
]
