from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import NotificationPriority


@dataclass(frozen=True)
class NotificationTemplate:
    type: str
    title: str
    message: str
    priority: NotificationPriority


def membership_expired(member_name: str) -> NotificationTemplate:
    return NotificationTemplate(
        type="membership_expired",
        title="Entry Denied: Membership Inactive",
        message=f"{member_name} tried to check in but their membership is not active",
        priority=NotificationPriority.HIGH,
    )


def member_check_in(member_name: str, branch_id: str) -> NotificationTemplate:
    return NotificationTemplate(
        type="member_check_in",
        title="Checked In",
        message=f"Welcome, {member_name}! You have checked in at branch {branch_id}",
        priority=NotificationPriority.LOW,
    )
