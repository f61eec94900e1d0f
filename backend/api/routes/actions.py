"""FastAPI routes for recommended security actions.

Completing an action awards its XP to the caller; both writes commit in the
request's single transaction.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict

from backend.api.dependencies import get_current_user, get_repository
from backend.database.enums import ActionPriority, ActionType, UserRank
from backend.database.models import User
from backend.database.repository import SecurityRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/actions", tags=["Security Actions"])


# -------------------------------------------------------------------------
# Pydantic Schemas
# -------------------------------------------------------------------------

class ActionResponse(BaseModel):
    """A remediation step attached to a breach alert."""
    id: str
    type: ActionType
    title: str
    description: str
    priority: ActionPriority
    estimated_time: str
    is_completed: bool
    completed_at: Optional[datetime]
    related_asset_id: Optional[str]
    related_breach_id: Optional[str]
    xp_reward: int

    model_config = ConfigDict(from_attributes=True)


class ActionListResponse(BaseModel):
    pending: list[ActionResponse]
    completed: list[ActionResponse]


class ActionCompleteResponse(BaseModel):
    action: ActionResponse
    xp_awarded: int
    total_xp: int
    rank: UserRank


# -------------------------------------------------------------------------
# API Routes
# -------------------------------------------------------------------------

@router.get("/", response_model=ActionListResponse)
def list_actions(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """List the caller's recommended actions, split by completion state."""
    actions = repo.get_actions_by_user(current_user.id)
    return {
        "pending": [action for action in actions if not action.is_completed],
        "completed": [action for action in actions if action.is_completed],
    }


@router.post("/{action_id}/complete", response_model=ActionCompleteResponse)
def complete_action(
    action_id: str,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Complete a pending action and award its XP.

    Raises:
        HTTPException: 404 if the action is unknown, belongs to another
            user, or was already completed.
    """
    action = repo.complete_action(action_id, current_user.id)
    if not action:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Action not found or already completed.",
        )

    user = repo.get_user(current_user.id)
    return {
        "action": action,
        "xp_awarded": action.xp_reward,
        "total_xp": user.xp,
        "rank": user.rank,
    }
