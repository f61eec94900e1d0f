"""FastAPI routes for breach alerts.

Alerts are created by asset scans. Users can only move them forward:
unread to read, and open to resolved.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict

from backend.api.dependencies import get_current_user, get_repository
from backend.api.routes.actions import ActionResponse
from backend.api.routes.security import BreachResponse
from backend.database.enums import AlertSeverity
from backend.database.models import BreachAlert, User
from backend.database.repository import SecurityRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["Breach Alerts"])


# -------------------------------------------------------------------------
# Pydantic Schemas
# -------------------------------------------------------------------------

class AlertResponse(BaseModel):
    """Serialization schema for a breach alert and its recommended actions."""
    id: str
    asset_id: str
    breach: BreachResponse
    detected_at: datetime
    is_read: bool
    is_resolved: bool
    severity: AlertSeverity
    recommended_actions: list[ActionResponse]

    model_config = ConfigDict(from_attributes=True)


class AlertListResponse(BaseModel):
    alerts: list[AlertResponse]
    unread_count: int


# -------------------------------------------------------------------------
# API Routes
# -------------------------------------------------------------------------

@router.get("/", response_model=AlertListResponse)
def list_alerts(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Retrieve the caller's alerts, newest first, with the unread count."""
    alerts = repo.get_alerts_by_user(current_user.id)
    return {
        "alerts": alerts,
        "unread_count": sum(1 for alert in alerts if not alert.is_read),
    }


@router.put("/{alert_id}/read", response_model=AlertResponse)
def mark_alert_read(
    alert_id: str,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> BreachAlert:
    alert = repo.mark_alert_read(alert_id, current_user.id)
    if not alert:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found.")
    return alert


@router.put("/{alert_id}/resolve", response_model=AlertResponse)
def resolve_alert(
    alert_id: str,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> BreachAlert:
    """Resolve an alert; resolved alerts stop counting against the score.

    Raises:
        HTTPException: 404 if the alert does not belong to the caller.
    """
    alert = repo.resolve_alert(alert_id, current_user.id)
    if not alert:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found.")
    return alert
