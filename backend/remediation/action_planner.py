"""Recommended security actions for a newly detected breach.

Every alert carries an ordered list of remediation steps. Completing a step
awards its ``xp_reward`` to the alert's owner exactly once.
"""

import logging
from typing import Any, Optional

from ..database.enums import ActionPriority, ActionType, DataClass

logger = logging.getLogger(__name__)

CHANGE_PASSWORD_XP: int = 30
ENABLE_MFA_XP: int = 75
CHECK_ACTIVITY_XP: int = 25


def plan_recommended_actions(breach: Any, asset_id: Optional[str] = None) -> list[dict[str, Any]]:
    """Build the remediation steps for one breach.

    Rules:
        - change_password when passwords were exposed.
        - enable_mfa unless auth tokens were exposed.
        - check_activity always.

    Args:
        breach: The DataBreach the alert refers to.
        asset_id: The affected asset, recorded on each action.

    Returns:
        Field dictionaries ready to build SecurityAction rows, in order.
    """
    data_classes: list[str] = list(breach.data_classes)
    actions: list[dict[str, Any]] = []

    if DataClass.PASSWORDS in data_classes:
        actions.append({
            "type": ActionType.CHANGE_PASSWORD.value,
            "title": f"Change your password on {breach.name}",
            "description": (
                f"Your password was exposed in the {breach.name} breach. Change it immediately "
                "and ensure you're not using it elsewhere."
            ),
            "priority": ActionPriority.URGENT.value,
            "estimated_time": "5 minutes",
            "xp_reward": CHANGE_PASSWORD_XP,
        })

    if DataClass.AUTH_TOKENS not in data_classes:
        actions.append({
            "type": ActionType.ENABLE_MFA.value,
            "title": f"Enable 2FA on {breach.name}",
            "description": (
                f"Add an extra layer of security by enabling two-factor authentication "
                f"on your {breach.name} account."
            ),
            "priority": ActionPriority.HIGH.value,
            "estimated_time": "10 minutes",
            "xp_reward": ENABLE_MFA_XP,
        })

    actions.append({
        "type": ActionType.CHECK_ACTIVITY.value,
        "title": f"Review account activity on {breach.name}",
        "description": "Check your recent account activity for any suspicious logins or unauthorized actions.",
        "priority": ActionPriority.MEDIUM.value,
        "estimated_time": "5 minutes",
        "xp_reward": CHECK_ACTIVITY_XP,
    })

    for action in actions:
        action["related_breach_id"] = breach.id
        action["related_asset_id"] = asset_id

    return actions
