"""Storage interface for Aegis.

SecurityRepository wraps one SQLAlchemy session and exposes every read and
write the services need. Lookups that miss return None; conflicts raise a
RepositoryError subclass. The repository never commits: the owner of the
session (the request dependency or a worker) decides when the unit of work
ends, so multi-record writes land together.
"""

import logging
from enum import Enum
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .enums import AlertSeverity, AssetStatus, AssetType, ChecklistCategory, Importance
from .models import (
    BreachAlert,
    ChecklistItem,
    DataBreach,
    MonitoredAsset,
    SecurityAction,
    SecurityChecklist,
    User,
    UserSettings,
    utcnow,
)
from ..checklist.catalog import DEFAULT_CHECKLIST_ITEMS, get_item_description
from ..utils.crypto import encrypt_value, hash_password, hash_value

logger = logging.getLogger(__name__)

SETTINGS_GROUPS: dict[str, tuple[str, ...]] = {
    "notifications": ("email_alerts", "push_alerts", "breach_alerts_severity", "weekly_report", "action_reminders"),
    "privacy": ("share_anonymous_stats", "data_retention_days"),
    "appearance": ("theme", "language", "compact_mode"),
}


class RepositoryError(ValueError):
    """Base class for storage-level conflicts."""


class DuplicateUserError(RepositoryError):
    """Raised when the email or username is already registered."""


class DuplicateAssetError(RepositoryError):
    """Raised when the user already monitors the same asset."""


class SecurityRepository:
    """Repository over the Aegis tables, bound to one session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, email: str, username: str, password: str) -> User:
        """Register a new user with a bcrypt-hashed password.

        Raises:
            DuplicateUserError: If the email or username is taken.
        """
        existing = self.db.query(User.id).filter(
            or_(User.email == email, User.username == username)
        ).first()
        if existing:
            raise DuplicateUserError("Email or username already taken")

        user = User(
            email=email,
            username=username,
            hashed_password=hash_password(password),
            xp=0,
            settings=UserSettings(),
        )
        self.db.add(user)
        self.db.flush()
        logger.info(f"Registered user {user.id} ({username})")
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def award_xp(self, user_id: str, amount: int) -> bool:
        """Atomically add experience points to a user.

        XP only ever grows; rank is derived from it on read.

        Raises:
            ValueError: If ``amount`` is not positive.
        """
        if amount <= 0:
            raise ValueError("XP awards must be positive")

        updated: int = self.db.query(User).filter(User.id == user_id).update(
            {User.xp: User.xp + amount, User.updated_at: utcnow()},
            synchronize_session="fetch",
        )
        if updated:
            logger.info(f"Awarded {amount} XP to user {user_id}")
        return bool(updated)

    # ------------------------------------------------------------------
    # Monitored assets
    # ------------------------------------------------------------------

    def create_asset(
        self,
        user_id: str,
        asset_type: AssetType,
        value: str,
        label: Optional[str] = None,
    ) -> MonitoredAsset:
        """Start monitoring a value. New assets begin in the ``checking`` state.

        Raises:
            DuplicateAssetError: If the user already monitors this type/value
                pair (compared case-insensitively).
        """
        asset_type = AssetType(asset_type)
        value_hash: str = hash_value(value)
        duplicate = self.db.query(MonitoredAsset.id).filter(
            MonitoredAsset.user_id == user_id,
            MonitoredAsset.type == asset_type.value,
            MonitoredAsset.value_hash == value_hash,
        ).first()
        if duplicate:
            raise DuplicateAssetError("This asset is already being monitored")

        asset = MonitoredAsset(
            user_id=user_id,
            type=asset_type.value,
            value_encrypted=encrypt_value(value),
            value_hash=value_hash,
            label=label,
            breach_count=0,
            status=AssetStatus.CHECKING.value,
        )
        self.db.add(asset)
        self.db.flush()
        return asset

    def get_assets_by_user(self, user_id: str) -> list[MonitoredAsset]:
        return self.db.query(MonitoredAsset).filter(
            MonitoredAsset.user_id == user_id
        ).order_by(MonitoredAsset.added_at).all()

    def get_asset(self, asset_id: str, user_id: Optional[str] = None) -> Optional[MonitoredAsset]:
        """Fetch one asset, optionally scoped to its owner."""
        query = self.db.query(MonitoredAsset).filter(MonitoredAsset.id == asset_id)
        if user_id is not None:
            query = query.filter(MonitoredAsset.user_id == user_id)
        return query.first()

    def get_all_asset_ids(self) -> list[str]:
        return [row.id for row in self.db.query(MonitoredAsset.id).all()]

    def update_asset_status(
        self,
        asset: MonitoredAsset,
        status: AssetStatus,
        breach_count: Optional[int] = None,
    ) -> MonitoredAsset:
        asset.status = AssetStatus(status).value
        asset.last_checked = utcnow()
        if breach_count is not None:
            asset.breach_count = breach_count
        self.db.flush()
        return asset

    def delete_asset(self, asset_id: str, user_id: str) -> bool:
        asset = self.get_asset(asset_id, user_id)
        if not asset:
            return False

        self.db.delete(asset)
        self.db.flush()
        logger.info(f"User {user_id} stopped monitoring asset {asset_id}")
        return True

    # ------------------------------------------------------------------
    # Breach catalog
    # ------------------------------------------------------------------

    def upsert_breach(self, record: dict[str, Any]) -> DataBreach:
        """Return the catalog row for ``record``, inserting it on first sight."""
        breach = self.db.query(DataBreach).filter(DataBreach.id == record["id"]).first()
        if breach:
            return breach

        breach = DataBreach(**record)
        self.db.add(breach)
        self.db.flush()
        return breach

    def sync_breach_catalog(self, records: list[dict[str, Any]]) -> int:
        for record in records:
            self.upsert_breach(record)
        return len(records)

    def list_breaches(self) -> list[DataBreach]:
        return self.db.query(DataBreach).order_by(DataBreach.id).all()

    def get_breach(self, breach_id: str) -> Optional[DataBreach]:
        return self.db.query(DataBreach).filter(DataBreach.id == breach_id).first()

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def get_alert_for(self, asset_id: str, breach_id: str) -> Optional[BreachAlert]:
        return self.db.query(BreachAlert).filter(
            BreachAlert.asset_id == asset_id,
            BreachAlert.breach_id == breach_id,
        ).first()

    def create_alert(
        self,
        user_id: str,
        asset_id: str,
        breach: DataBreach,
        severity: AlertSeverity,
        actions: list[dict[str, Any]],
    ) -> BreachAlert:
        """Record a detection of ``asset_id`` in ``breach`` with its remediation steps."""
        alert = BreachAlert(
            user_id=user_id,
            asset_id=asset_id,
            breach=breach,
            severity=AlertSeverity(severity).value,
            is_read=False,
            is_resolved=False,
            recommended_actions=[
                SecurityAction(position=index, **fields) for index, fields in enumerate(actions)
            ],
        )
        self.db.add(alert)
        self.db.flush()
        return alert

    def get_alerts_by_user(self, user_id: str) -> list[BreachAlert]:
        """Return the user's alerts, newest detection first."""
        return self.db.query(BreachAlert).filter(
            BreachAlert.user_id == user_id
        ).order_by(BreachAlert.detected_at.desc()).all()

    def _get_user_alert(self, alert_id: str, user_id: str) -> Optional[BreachAlert]:
        return self.db.query(BreachAlert).filter(
            BreachAlert.id == alert_id,
            BreachAlert.user_id == user_id,
        ).first()

    def mark_alert_read(self, alert_id: str, user_id: str) -> Optional[BreachAlert]:
        alert = self._get_user_alert(alert_id, user_id)
        if not alert:
            return None

        alert.is_read = True
        self.db.flush()
        return alert

    def resolve_alert(self, alert_id: str, user_id: str) -> Optional[BreachAlert]:
        """Resolve an alert. Resolution is terminal."""
        alert = self._get_user_alert(alert_id, user_id)
        if not alert:
            return None

        alert.is_resolved = True
        self.db.flush()
        logger.info(f"User {user_id} resolved alert {alert_id}")
        return alert

    # ------------------------------------------------------------------
    # Security actions
    # ------------------------------------------------------------------

    def get_actions_by_user(self, user_id: str) -> list[SecurityAction]:
        return [
            action
            for alert in self.get_alerts_by_user(user_id)
            for action in alert.recommended_actions
        ]

    def complete_action(self, action_id: str, user_id: str) -> Optional[SecurityAction]:
        """Complete a pending action and award its XP in the same transaction.

        The completion is a conditional update on ``is_completed``, so a
        second attempt (or a concurrent one) matches no row and returns None
        without awarding XP again.
        """
        action = self.db.query(SecurityAction).join(BreachAlert).filter(
            SecurityAction.id == action_id,
            BreachAlert.user_id == user_id,
            SecurityAction.is_completed == False,  # noqa: E712
        ).first()
        if not action:
            return None

        updated: int = self.db.query(SecurityAction).filter(
            SecurityAction.id == action.id,
            SecurityAction.is_completed == False,  # noqa: E712
        ).update(
            {SecurityAction.is_completed: True, SecurityAction.completed_at: utcnow()},
            synchronize_session="fetch",
        )
        if not updated:
            return None

        if not self.award_xp(user_id, action.xp_reward):
            raise RepositoryError(f"Cannot award XP for action {action_id}: user {user_id} not found")
        self.db.flush()
        self.db.refresh(action)
        logger.info(f"User {user_id} completed action {action_id} (+{action.xp_reward} XP)")
        return action

    # ------------------------------------------------------------------
    # Checklist
    # ------------------------------------------------------------------

    def _find_checklist(self, user_id: str) -> Optional[SecurityChecklist]:
        return self.db.query(SecurityChecklist).filter(
            SecurityChecklist.user_id == user_id
        ).first()

    def get_security_checklist(self, user_id: str) -> SecurityChecklist:
        """Return the user's checklist, creating the default one on first request.

        Creation runs in a savepoint. If a concurrent request inserted the
        checklist first, the unique user_id constraint fails and the
        existing checklist is returned instead.
        """
        checklist = self._find_checklist(user_id)
        if checklist:
            return checklist

        checklist = SecurityChecklist(
            user_id=user_id,
            items=[
                ChecklistItem(
                    position=index,
                    category=ChecklistCategory(entry["category"]).value,
                    title=entry["title"],
                    description=get_item_description(entry["title"]),
                    importance=Importance(entry["importance"]).value,
                    is_completed=False,
                )
                for index, entry in enumerate(DEFAULT_CHECKLIST_ITEMS)
            ],
        )
        try:
            with self.db.begin_nested():
                self.db.add(checklist)
                self.db.flush()
        except IntegrityError:
            logger.info(f"Security checklist for user {user_id} was created concurrently")
            return self._find_checklist(user_id)

        logger.info(f"Created default security checklist for user {user_id}")
        return checklist

    def update_checklist_item(
        self,
        user_id: str,
        item_id: str,
        is_completed: bool,
    ) -> Optional[SecurityChecklist]:
        """Set an item's completion state; returns None when the item is unknown."""
        checklist = self.get_security_checklist(user_id)
        item = next((i for i in checklist.items if i.id == item_id), None)
        if not item:
            return None

        item.is_completed = is_completed
        item.completed_at = utcnow() if is_completed else None
        checklist.last_updated = utcnow()
        self.db.flush()
        return checklist

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        return self.db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    def update_user_settings(
        self,
        user_id: str,
        updates: dict[str, dict[str, Any]],
    ) -> Optional[UserSettings]:
        """Merge a partial update into the user's settings.

        Args:
            user_id: The settings owner.
            updates: Values keyed by group (``notifications``, ``privacy``,
                ``appearance``), then by field. Omitted fields keep their
                current value.

        Returns:
            The updated settings, or None when the user has none.

        Raises:
            ValueError: If a group or field name is unknown.
        """
        user_settings = self.get_user_settings(user_id)
        if not user_settings:
            return None

        for group, values in updates.items():
            fields = SETTINGS_GROUPS.get(group)
            if fields is None:
                raise ValueError(f"Unknown settings group '{group}'")
            for name, value in values.items():
                if name not in fields:
                    raise ValueError(f"Unknown {group} setting '{name}'")
                setattr(user_settings, name, value.value if isinstance(value, Enum) else value)

        user_settings.updated_at = utcnow()
        self.db.flush()
        logger.info(f"Updated settings for user {user_id}")
        return user_settings
