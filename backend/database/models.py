"""Database models for the Aegis application.

This module defines all database tables as SQLAlchemy ORM models.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..database.connection import Base
from ..database.enums import AlertSeverity, AssetStatus, Theme, UserRank
from ..scoring.rank_engine import calculate_rank
from ..utils.crypto import decrypt_value

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Return the current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


class User(Base):
    """User account owning assets, alerts and a checklist."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)
    xp = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    assets = relationship("MonitoredAsset", back_populates="owner", cascade="all, delete-orphan")
    checklist = relationship("SecurityChecklist", back_populates="owner", uselist=False)
    settings = relationship("UserSettings", back_populates="owner", uselist=False, cascade="all, delete-orphan")

    @property
    def rank(self) -> UserRank:
        """Rank derived from xp on every read."""
        return calculate_rank(self.xp or 0)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username}>"


class MonitoredAsset(Base):
    """An identity reference (email, username, phone or domain) watched for exposure.

    The value itself is stored encrypted; ``value_hash`` is the lookup key
    for duplicate detection.
    """
    __tablename__ = "monitored_assets"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    value_encrypted = Column(String(512), nullable=False)
    value_hash = Column(String(64), nullable=False, index=True)
    label = Column(String(100), nullable=True)
    added_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_checked = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    breach_count = Column(Integer, default=0, nullable=False)
    status = Column(String(20), default=AssetStatus.CHECKING.value, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "type", "value_hash", name="uix_user_asset"),
    )

    # Relationships
    owner = relationship("User", back_populates="assets")

    @property
    def value(self) -> str:
        """The decrypted asset value, for its owner only."""
        return decrypt_value(self.value_encrypted)

    def __repr__(self) -> str:
        return f"<MonitoredAsset id={self.id} type={self.type} status={self.status}>"


class DataBreach(Base):
    """Immutable catalog entry describing a historical breach incident."""
    __tablename__ = "data_breaches"

    id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False)
    domain = Column(String(200), nullable=True)
    breach_date = Column(Date, nullable=True)
    added_date = Column(Date, nullable=True)
    modified_date = Column(Date, nullable=True)
    pwn_count = Column(Integer, default=0, nullable=False)
    description = Column(Text, nullable=False, default="")
    data_classes = Column(JSON, nullable=False)
    is_verified = Column(Boolean, default=True, nullable=False)
    is_fabricated = Column(Boolean, default=False, nullable=False)
    is_sensitive = Column(Boolean, default=False, nullable=False)
    is_retired = Column(Boolean, default=False, nullable=False)
    is_spam_list = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<DataBreach id={self.id} name={self.name}>"


class BreachAlert(Base):
    """One user's asset found in one breach.

    ``is_read`` and ``is_resolved`` only ever move from False to True.
    Alerts outlive their asset, so ``asset_id`` is a plain reference.
    """
    __tablename__ = "breach_alerts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    asset_id = Column(String(36), nullable=False)
    breach_id = Column(String(36), ForeignKey("data_breaches.id"), nullable=False)
    detected_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    is_resolved = Column(Boolean, default=False, nullable=False)
    severity = Column(String(10), nullable=False)

    __table_args__ = (
        # A breach is only alerted once per monitored asset
        UniqueConstraint("asset_id", "breach_id", name="uix_asset_breach"),
    )

    # Relationships
    breach = relationship("DataBreach", lazy="joined")
    recommended_actions = relationship(
        "SecurityAction",
        back_populates="alert",
        order_by="SecurityAction.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<BreachAlert id={self.id} breach={self.breach_id} severity={self.severity}>"


class SecurityAction(Base):
    """A remediation step recommended by a breach alert."""
    __tablename__ = "security_actions"

    id = Column(String(36), primary_key=True, default=_new_id)
    alert_id = Column(String(36), ForeignKey("breach_alerts.id"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    type = Column(String(30), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False)
    estimated_time = Column(String(30), nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    related_asset_id = Column(String(36), nullable=True)
    related_breach_id = Column(String(36), nullable=True)
    xp_reward = Column(Integer, nullable=False)

    # Relationships
    alert = relationship("BreachAlert", back_populates="recommended_actions")

    def __repr__(self) -> str:
        return f"<SecurityAction id={self.id} type={self.type} completed={self.is_completed}>"


class SecurityChecklist(Base):
    """A user's security-hygiene checklist, created lazily on first read."""
    __tablename__ = "security_checklists"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    last_updated = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="checklist")
    items = relationship(
        "ChecklistItem",
        back_populates="checklist",
        order_by="ChecklistItem.position",
        cascade="all, delete-orphan",
    )

    @property
    def completed_count(self) -> int:
        return sum(1 for item in self.items if item.is_completed)

    @property
    def total_count(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"<SecurityChecklist id={self.id} user={self.user_id}>"


class ChecklistItem(Base):
    """One task of a security checklist."""
    __tablename__ = "checklist_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    checklist_id = Column(String(36), ForeignKey("security_checklists.id"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    category = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    importance = Column(String(20), nullable=False)

    # Relationships
    checklist = relationship("SecurityChecklist", back_populates="items")

    def __repr__(self) -> str:
        return f"<ChecklistItem id={self.id} title={self.title}>"


class UserSettings(Base):
    """Per-user notification, privacy and appearance preferences.

    Created alongside the user with the defaults below.
    """
    __tablename__ = "user_settings"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)

    # Notifications
    email_alerts = Column(Boolean, default=True, nullable=False)
    push_alerts = Column(Boolean, default=True, nullable=False)
    breach_alerts_severity = Column(String(10), default=AlertSeverity.MEDIUM.value, nullable=False)
    weekly_report = Column(Boolean, default=True, nullable=False)
    action_reminders = Column(Boolean, default=True, nullable=False)

    # Privacy
    share_anonymous_stats = Column(Boolean, default=False, nullable=False)
    data_retention_days = Column(Integer, default=365, nullable=False)

    # Appearance
    theme = Column(String(10), default=Theme.DARK.value, nullable=False)
    language = Column(String(10), default="fr", nullable=False)
    compact_mode = Column(Boolean, default=False, nullable=False)

    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="settings")

    def __repr__(self) -> str:
        return f"<UserSettings user={self.user_id}>"
