"""FastAPI routes for user registration, profile, rank progress and settings."""

import logging
from datetime import datetime
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.api.dependencies import get_current_user, get_repository
from backend.api.routes.assets import AssetResponse, serialize_asset
from backend.api.routes.security import SecurityScoreResponse
from backend.database.enums import AlertSeverity, Theme, UserRank
from backend.database.models import User, UserSettings
from backend.database.repository import DuplicateUserError, SecurityRepository
from backend.scoring.rank_engine import RankProgress, get_rank_progress
from backend.scoring.score_engine import build_security_score
from backend.utils.crypto import MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


# -------------------------------------------------------------------------
# Pydantic Schemas
# -------------------------------------------------------------------------

class UserRegisterRequest(BaseModel):
    email: str
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class UserResponse(BaseModel):
    """Public view of an account. The password hash is never serialized."""
    id: str
    username: str
    email: str
    is_premium: bool
    xp: int
    rank: UserRank
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfileResponse(BaseModel):
    user: UserResponse
    security_score: SecurityScoreResponse
    assets: list[AssetResponse]
    unread_alerts: int
    completed_actions: int


class RankProgressResponse(BaseModel):
    rank: UserRank
    rank_name: str
    xp: int
    next_rank: Optional[UserRank]
    xp_to_next_rank: int

    model_config = ConfigDict(from_attributes=True)


class NotificationSettings(BaseModel):
    email_alerts: bool
    push_alerts: bool
    breach_alerts_severity: AlertSeverity
    weekly_report: bool
    action_reminders: bool

    model_config = ConfigDict(from_attributes=True)


class PrivacySettings(BaseModel):
    share_anonymous_stats: bool
    data_retention_days: int

    model_config = ConfigDict(from_attributes=True)


class AppearanceSettings(BaseModel):
    theme: Theme
    language: str
    compact_mode: bool

    model_config = ConfigDict(from_attributes=True)


class UserSettingsResponse(BaseModel):
    notifications: NotificationSettings
    privacy: PrivacySettings
    appearance: AppearanceSettings
    updated_at: datetime


class NotificationSettingsUpdate(BaseModel):
    email_alerts: Optional[bool] = None
    push_alerts: Optional[bool] = None
    breach_alerts_severity: Optional[AlertSeverity] = None
    weekly_report: Optional[bool] = None
    action_reminders: Optional[bool] = None


class PrivacySettingsUpdate(BaseModel):
    share_anonymous_stats: Optional[bool] = None
    data_retention_days: Optional[int] = Field(default=None, ge=1)


class AppearanceSettingsUpdate(BaseModel):
    theme: Optional[Theme] = None
    language: Optional[str] = Field(default=None, min_length=2, max_length=10)
    compact_mode: Optional[bool] = None


class UserSettingsUpdateRequest(BaseModel):
    """Partial settings update. Omitted groups and fields are left unchanged."""
    notifications: Optional[NotificationSettingsUpdate] = None
    privacy: Optional[PrivacySettingsUpdate] = None
    appearance: Optional[AppearanceSettingsUpdate] = None


def serialize_settings(user_settings: UserSettings) -> dict[str, Any]:
    return {
        "notifications": NotificationSettings.model_validate(user_settings),
        "privacy": PrivacySettings.model_validate(user_settings),
        "appearance": AppearanceSettings.model_validate(user_settings),
        "updated_at": user_settings.updated_at,
    }


# -------------------------------------------------------------------------
# API Routes
# -------------------------------------------------------------------------

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    request: UserRegisterRequest,
    repo: SecurityRepository = Depends(get_repository),
) -> User:
    """Create a new account.

    Raises:
        HTTPException: If the email is invalid (400) or the email or
            username is already registered (409).
    """
    try:
        email: str = validate_email(request.email, check_deliverability=False).normalized.lower()
    except EmailNotValidError as e:
        logger.warning(f"Rejecting registration with invalid email: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        return repo.create_user(email=email, username=request.username.strip(), password=request.password)
    except DuplicateUserError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/me", response_model=UserProfileResponse)
def get_profile(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Return the caller's account with their score, assets and activity counts."""
    assets = repo.get_assets_by_user(current_user.id)
    alerts = repo.get_alerts_by_user(current_user.id)
    checklist = repo.get_security_checklist(current_user.id)

    return {
        "user": current_user,
        "security_score": build_security_score(assets, alerts, checklist),
        "assets": [serialize_asset(asset) for asset in assets],
        "unread_alerts": sum(1 for alert in alerts if not alert.is_read),
        "completed_actions": sum(
            1 for alert in alerts for action in alert.recommended_actions if action.is_completed
        ),
    }


@router.get("/me/progress", response_model=RankProgressResponse)
def get_progress(current_user: User = Depends(get_current_user)) -> RankProgress:
    return get_rank_progress(current_user.xp)


@router.get("/me/settings", response_model=UserSettingsResponse)
def get_settings(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    user_settings = repo.get_user_settings(current_user.id)
    if not user_settings:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not found")
    return serialize_settings(user_settings)


@router.put("/me/settings", response_model=UserSettingsResponse)
def update_settings(
    request: UserSettingsUpdateRequest,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Merge notification, privacy and appearance preferences into the caller's settings.

    Raises:
        HTTPException: 404 if the caller has no settings row.
    """
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    user_settings = repo.update_user_settings(current_user.id, updates)
    if not user_settings:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not found")
    return serialize_settings(user_settings)
