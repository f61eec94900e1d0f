"""Closed value sets used across the Aegis models and scoring engines.

Every enum subclasses ``str`` so members compare equal to the plain strings
stored in the database and serialized over the API.
"""

from enum import Enum


class AssetType(str, Enum):
    EMAIL = "email"
    USERNAME = "username"
    PHONE = "phone"
    DOMAIN = "domain"


class AssetStatus(str, Enum):
    SAFE = "safe"
    AT_RISK = "at_risk"
    BREACHED = "breached"
    CHECKING = "checking"


class DataClass(str, Enum):
    """Categories of data exposed by a breach."""
    EMAIL_ADDRESSES = "email_addresses"
    PASSWORDS = "passwords"
    USERNAMES = "usernames"
    PHONE_NUMBERS = "phone_numbers"
    PHYSICAL_ADDRESSES = "physical_addresses"
    IP_ADDRESSES = "ip_addresses"
    DATES_OF_BIRTH = "dates_of_birth"
    CREDIT_CARDS = "credit_cards"
    SOCIAL_SECURITY_NUMBERS = "social_security_numbers"
    BANK_ACCOUNTS = "bank_accounts"
    SECURITY_QUESTIONS = "security_questions"
    AUTH_TOKENS = "auth_tokens"
    BIOMETRIC_DATA = "biometric_data"
    BROWSING_HISTORY = "browsing_history"
    EMPLOYMENT = "employment"
    GOVERNMENT_IDS = "government_ids"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ActionType(str, Enum):
    CHANGE_PASSWORD = "change_password"
    ENABLE_MFA = "enable_mfa"
    REVIEW_ACCOUNT = "review_account"
    CHECK_ACTIVITY = "check_activity"
    UPDATE_RECOVERY = "update_recovery"
    REVOKE_SESSIONS = "revoke_sessions"
    ENABLE_ALERTS = "enable_alerts"
    SECURITY_AUDIT = "security_audit"


class ActionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ChecklistCategory(str, Enum):
    PASSWORDS = "passwords"
    AUTHENTICATION = "authentication"
    DEVICES = "devices"
    ACCOUNTS = "accounts"
    PRIVACY = "privacy"
    BACKUP = "backup"


class Importance(str, Enum):
    ESSENTIAL = "essential"
    RECOMMENDED = "recommended"
    ADVANCED = "advanced"


class UserRank(str, Enum):
    NOVICE = "novice"
    DEFENDER = "defender"
    GUARDIAN = "guardian"
    SENTINEL = "sentinel"
    ARCHITECT = "architect"


class Trend(str, Enum):
    UP = "up"
    STABLE = "stable"
    DOWN = "down"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"
    SYSTEM = "system"
