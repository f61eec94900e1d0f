"""Default security checklist catalog and checklist statistics.

The item list and importance tags below feed the MFA and hygiene score
components directly, so any change here shifts every user's score.
"""

import logging
from typing import Any

from ..database.enums import ChecklistCategory, Importance

logger = logging.getLogger(__name__)

DEFAULT_CHECKLIST_ITEMS: list[dict[str, Any]] = [
    # Passwords
    {"category": ChecklistCategory.PASSWORDS, "title": "Use unique passwords", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.PASSWORDS, "title": "Use a password manager", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.PASSWORDS, "title": "Passwords are 12+ characters", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.PASSWORDS, "title": "No personal info in passwords", "importance": Importance.RECOMMENDED},
    # Authentication
    {"category": ChecklistCategory.AUTHENTICATION, "title": "Enable 2FA on email", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.AUTHENTICATION, "title": "Enable 2FA on banking", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.AUTHENTICATION, "title": "Enable 2FA on social media", "importance": Importance.RECOMMENDED},
    {"category": ChecklistCategory.AUTHENTICATION, "title": "Use authenticator app over SMS", "importance": Importance.RECOMMENDED},
    {"category": ChecklistCategory.AUTHENTICATION, "title": "Set up backup codes", "importance": Importance.RECOMMENDED},
    # Devices
    {"category": ChecklistCategory.DEVICES, "title": "Device encryption enabled", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.DEVICES, "title": "Auto-lock enabled", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.DEVICES, "title": "OS up to date", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.DEVICES, "title": "Antivirus installed", "importance": Importance.RECOMMENDED},
    # Accounts
    {"category": ChecklistCategory.ACCOUNTS, "title": "Review connected apps", "importance": Importance.RECOMMENDED},
    {"category": ChecklistCategory.ACCOUNTS, "title": "Remove unused accounts", "importance": Importance.RECOMMENDED},
    {"category": ChecklistCategory.ACCOUNTS, "title": "Check account activity", "importance": Importance.RECOMMENDED},
    # Privacy
    {"category": ChecklistCategory.PRIVACY, "title": "Review privacy settings", "importance": Importance.RECOMMENDED},
    {"category": ChecklistCategory.PRIVACY, "title": "Limit data sharing", "importance": Importance.ADVANCED},
    {"category": ChecklistCategory.PRIVACY, "title": "Use private browsing for sensitive tasks", "importance": Importance.ADVANCED},
    # Backup
    {"category": ChecklistCategory.BACKUP, "title": "Email backup codes saved", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.BACKUP, "title": "Recovery email set up", "importance": Importance.ESSENTIAL},
    {"category": ChecklistCategory.BACKUP, "title": "Data backup strategy", "importance": Importance.RECOMMENDED},
]

ITEM_DESCRIPTIONS: dict[str, str] = {
    "Use unique passwords":
        "Each account should have a different password. If one service is breached, your other accounts remain safe.",
    "Use a password manager":
        "A password manager securely stores and generates strong passwords, so you only need to remember one master password.",
    "Passwords are 12+ characters":
        "Longer passwords are exponentially harder to crack. Aim for at least 12 characters with a mix of types.",
    "No personal info in passwords":
        "Avoid using birthdays, names, or other personal information that could be guessed or found online.",
    "Enable 2FA on email":
        "Your email is the key to all your accounts. Protect it with two-factor authentication.",
    "Enable 2FA on banking":
        "Financial accounts are high-value targets. Always enable the strongest authentication available.",
    "Enable 2FA on social media":
        "Social media accounts can be used for identity theft and social engineering. Add 2FA for protection.",
    "Use authenticator app over SMS":
        "SMS can be intercepted through SIM swapping. Authenticator apps are more secure.",
    "Set up backup codes":
        "Save backup codes in a secure location in case you lose access to your 2FA device.",
    "Device encryption enabled":
        "Enable full-disk encryption to protect your data if your device is lost or stolen.",
    "Auto-lock enabled":
        "Set your devices to lock automatically after a short period of inactivity.",
    "OS up to date":
        "Security patches fix known vulnerabilities. Keep your operating system updated.",
    "Antivirus installed":
        "While not foolproof, antivirus software provides an additional layer of protection.",
    "Review connected apps":
        "Regularly check which third-party apps have access to your accounts and revoke unnecessary permissions.",
    "Remove unused accounts":
        "Old accounts can be breached without you knowing. Delete accounts you no longer use.",
    "Check account activity":
        "Periodically review login history and account activity for signs of unauthorized access.",
    "Review privacy settings":
        "Check privacy settings on social media and other services to control what information is public.",
    "Limit data sharing":
        "Be selective about what personal information you share online and with services.",
    "Use private browsing for sensitive tasks":
        "Use incognito/private mode for banking and other sensitive activities on shared computers.",
    "Email backup codes saved":
        "Store email account recovery codes securely offline in case you lose access.",
    "Recovery email set up":
        "Set up a recovery email address to regain access if you forget your password.",
    "Data backup strategy":
        "Regularly back up important data following the 3-2-1 rule: 3 copies, 2 media types, 1 offsite.",
}

DEFAULT_DESCRIPTION: str = "Complete this security task to improve your overall security posture."


def get_item_description(title: str) -> str:
    """Return the long-form description for a checklist item title."""
    return ITEM_DESCRIPTIONS.get(title, DEFAULT_DESCRIPTION)


def _percentage(completed: int, total: int) -> int:
    if total == 0:
        return 0
    return int(completed / total * 100 + 0.5)


def get_checklist_stats(items: list[Any]) -> dict[str, Any]:
    """Summarize checklist completion overall, per category and per importance.

    Args:
        items: Checklist items exposing ``category``, ``importance`` and
            ``is_completed``.

    Returns:
        A dictionary with ``overall``, ``by_category`` and ``by_importance``
        sections. Categories and importance levels appear in first-seen order.
    """
    by_category: dict[str, dict[str, int]] = {}
    by_importance: dict[str, dict[str, int]] = {}
    completed: int = 0

    for item in items:
        category_bucket = by_category.setdefault(ChecklistCategory(item.category).value, {"total": 0, "completed": 0})
        importance_bucket = by_importance.setdefault(Importance(item.importance).value, {"total": 0, "completed": 0})
        category_bucket["total"] += 1
        importance_bucket["total"] += 1
        if item.is_completed:
            completed += 1
            category_bucket["completed"] += 1
            importance_bucket["completed"] += 1

    return {
        "overall": {
            "total": len(items),
            "completed": completed,
            "percentage": _percentage(completed, len(items)),
        },
        "by_category": by_category,
        "by_importance": by_importance,
    }
