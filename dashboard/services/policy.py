"""
Task status transition policy.

Pure decision function, independent of storage:

- Admins may move a task to any status, from any status.
- The assignee (non-admin) may only move their own task to IN_PROGRESS,
  COMPLETED or REVIEW, and must supply submission details exactly when the
  target is COMPLETED or REVIEW.
- Anyone else is refused.

Admins are not held to the submission details rule. The controller still
clears details for statuses that do not carry them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dashboard_shared.schemas.common import (
    SELF_SERVICE_STATUSES,
    SUBMISSION_STATUSES,
    Role,
    TaskStatus,
)


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = TransitionDecision(allowed=True)


def _deny(reason: str) -> TransitionDecision:
    return TransitionDecision(allowed=False, reason=reason)


def can_transition(
    role: Optional[Role],
    is_assignee: bool,
    from_status: TaskStatus,
    to_status: TaskStatus,
    has_details: bool,
) -> TransitionDecision:
    if role == Role.ADMIN:
        return ALLOWED

    if not is_assignee:
        return _deny("You do not have permission to update this task.")

    if to_status not in SELF_SERVICE_STATUSES:
        allowed = ", ".join(s.value for s in TaskStatus if s in SELF_SERVICE_STATUSES)
        return _deny(f"You can only update the status to {allowed}.")

    requires_details = to_status in SUBMISSION_STATUSES
    if has_details and not requires_details:
        return _deny(
            "Submission details can only be added when status is COMPLETED or REVIEW."
        )
    if requires_details and not has_details:
        return _deny(
            "Submission details are required when marking task as COMPLETED or REVIEW."
        )

    return ALLOWED
